"""
Logging Event Handler

Infrastructure event handler for logging domain events.
Domain layer remains unaware of logging infrastructure.
"""

import logging

from ...domain.events import DomainEvent


class LoggingEventHandler:
    """
    Logs every domain event, at a level that matches its significance.

    Download lifecycle transitions and memberships syncs are logged at
    INFO; everything else at DEBUG.
    """

    PATTERNS = ("*",)

    def __init__(self, logger: logging.Logger):
        """
        Initialize with logger instance.

        Args:
            logger: Python logging.Logger instance
        """
        self.logger = logger

    def handle(self, event: DomainEvent) -> None:
        """
        Handle domain event by logging it.

        Args:
            event: Domain event to log
        """
        try:
            kind = event.event_kind
            if kind.endswith(".download.requested"):
                self._handle_download_requested(event)
            elif kind.endswith(".downloaded"):
                self._handle_downloaded(event)
            elif kind.endswith(".captured") or kind.endswith(".created"):
                self._handle_created(event)
            elif kind.endswith(".synced"):
                self._handle_synced(event)
            else:
                self.logger.debug(
                    f"{kind}: {event.aggregate_type} {event.aggregate_id} "
                    f"(correlation_id={event.correlation_id})"
                )
        except Exception as e:
            # Log handler errors but don't fail the operation
            self.logger.error(
                f"Error in logging event handler for {event.event_kind}: {e}",
                exc_info=True,
            )

    def _handle_download_requested(self, event: DomainEvent) -> None:
        self.logger.info(
            f"Download requested: {event.aggregate_type} {event.aggregate_id}, "
            f"source_url={event.payload.get('source_url')}, "
            f"request_count={event.payload.get('request_count')}, "
            f"correlation_id={event.correlation_id}"
        )

    def _handle_downloaded(self, event: DomainEvent) -> None:
        self.logger.info(
            f"Download completed: {event.aggregate_type} {event.aggregate_id}, "
            f"local_path={event.payload.get('local_path')}, "
            f"correlation_id={event.correlation_id}"
        )

    def _handle_created(self, event: DomainEvent) -> None:
        self.logger.info(f"{event.event_kind}: {event.aggregate_type} {event.aggregate_id}")

    def _handle_synced(self, event: DomainEvent) -> None:
        members = next((v for k, v in event.payload.items() if k.endswith("_ids")), [])
        self.logger.info(
            f"{event.aggregate_type} {event.aggregate_id} synced with {len(members)} member(s)"
        )
