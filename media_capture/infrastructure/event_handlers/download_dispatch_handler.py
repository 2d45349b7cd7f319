"""
Download Dispatch Handler

Hands ``*.download.requested`` events to the download consumer by
enqueueing a Celery task on the download queue. The consumer performs the
I/O and reports back through the completion callback task.
"""

import logging
from typing import Any, Dict

from celery import Celery
from kombu.exceptions import OperationalError

from ...application.errors import ApplicationError, ErrorCategory
from ...config.celery_config import DOWNLOAD_CONTENT_TASK, DOWNLOAD_QUEUE
from ...domain.events import DomainEvent

logger = logging.getLogger(__name__)


class DownloadDispatchHandler:
    """Sends download requests to the job queue by task name."""

    PATTERNS = ("*.download.requested",)

    def __init__(self, celery_app: Celery, queue: str = DOWNLOAD_QUEUE):
        """
        Args:
            celery_app: Celery app used to send tasks
            queue: Queue the download consumer listens on
        """
        self.celery_app = celery_app
        self.queue = queue

    @staticmethod
    def task_kwargs(event: DomainEvent) -> Dict[str, Any]:
        """Arguments of the download task for one request event."""
        return {
            "aggregate_type": event.aggregate_type,
            "aggregate_id": event.aggregate_id,
            "source_url": event.payload.get("source_url"),
            "correlation_id": event.correlation_id,
            "event_id": event.event_id,
            "payload": event.to_dict()["payload"],
        }

    def handle(self, event: DomainEvent) -> None:
        """
        Enqueue the download task.

        Args:
            event: A ``<kind>.download.requested`` event

        Raises:
            ApplicationError: DISPATCH_FAILED when the broker is unreachable
        """
        try:
            result = self.celery_app.send_task(
                DOWNLOAD_CONTENT_TASK,
                kwargs=self.task_kwargs(event),
                queue=self.queue,
            )
        except OperationalError as e:
            logger.error(f"Could not dispatch download of {event.aggregate_type} {event.aggregate_id}: {e}")
            raise ApplicationError(
                ErrorCategory.DISPATCH_FAILED,
                str(e),
                {"aggregate_type": event.aggregate_type, "aggregate_id": event.aggregate_id},
            ) from e
        logger.info(
            f"Dispatched download of {event.aggregate_type} {event.aggregate_id} "
            f"to {self.queue} (task_id={getattr(result, 'id', None)}, "
            f"correlation_id={event.correlation_id})"
        )
