"""
Capture Application Service

Coordinates capture, download and follow-up use cases. Every mutation
loads the aggregate, applies one command under the aggregate's lock,
saves the snapshot and only then publishes the drained events.
"""

import logging
from dataclasses import replace
from typing import Any, Callable, Mapping, Optional

from ..domain.aggregate import AggregateRoot, CapturedContent
from ..domain.errors import AggregateNotFoundError, AlreadyDownloadedError
from ..domain.registry import aggregate_class, build_from_payload
from ..domain.repositories import AggregateRepository
from .aggregate_locks import AggregateLockManager
from .errors import ApplicationError, ErrorCategory
from .event_publisher import EventPublisher
from .mutation_result import MutationResult

logger = logging.getLogger(__name__)

Command = Callable[[AggregateRoot], Any]


class CaptureService:
    """
    Application service for captured content.

    Orchestrates aggregate creation from producer payloads, download
    requests, completion callbacks and any other single-aggregate command.
    """

    def __init__(
        self,
        repository: AggregateRepository,
        publisher: EventPublisher,
        lock_manager: AggregateLockManager,
        lock_timeout: Optional[float] = None,
    ):
        """
        Initialize CaptureService.

        Args:
            repository: Aggregate snapshot storage
            publisher: Dispatches drained events to handlers
            lock_manager: Per-aggregate mutual exclusion
            lock_timeout: Seconds to wait for an aggregate lock
        """
        self.repository = repository
        self.publisher = publisher
        self.lock_manager = lock_manager
        self.lock_timeout = lock_timeout

    def capture(
        self,
        aggregate_type: str,
        payload: Mapping[str, Any],
        correlation_id: Optional[str] = None,
    ) -> MutationResult:
        """
        Create an aggregate from a producer payload.

        Capturing content that is already stored refreshes its attributes
        without recording an event and is reported as a duplicate.

        Args:
            aggregate_type: Qualified type, e.g. ``instagram.post``
            payload: Raw attribute payload from the capture producer
            correlation_id: Optional id of the producer's operation

        Returns:
            MutationResult with the creation event, if any

        Raises:
            ValidationError: Naming the offending payload field
        """
        aggregate = build_from_payload(aggregate_type, payload)
        aggregate_id = str(aggregate.id)
        correlation_id = correlation_id or aggregate.correlation_id

        # Creation events are recorded before a correlation id can be bound
        events = [
            replace(event, correlation_id=correlation_id)
            for event in aggregate.pull_domain_events()
        ]

        with self.lock_manager.hold(aggregate_type, aggregate_id, self.lock_timeout):
            existing = self.repository.get(aggregate_type, aggregate_id)
            if existing is not None:
                if isinstance(existing, CapturedContent):
                    existing.refresh_attributes(aggregate.attributes)
                    self._save(existing)
                logger.info(f"{aggregate_type} {aggregate_id} already captured, refreshed")
                return MutationResult.duplicate_of(existing, correlation_id)

            aggregate.bind_correlation_id(correlation_id)
            self._save(aggregate)
            self.publisher.publish_all(events)

        logger.info(f"Captured {aggregate_type} {aggregate_id} ({len(events)} event(s))")
        return MutationResult.applied(aggregate, events, correlation_id)

    def get(self, aggregate_type: str, aggregate_id: str) -> AggregateRoot:
        """
        Load an aggregate.

        Raises:
            AggregateNotFoundError: If nothing is stored under the id
            ValidationError: If the aggregate type is unknown
        """
        aggregate_class(aggregate_type)
        aggregate = self.repository.get(aggregate_type, aggregate_id)
        if aggregate is None:
            raise AggregateNotFoundError(aggregate_type, aggregate_id)
        return aggregate

    def execute(
        self,
        aggregate_type: str,
        aggregate_id: str,
        command: Command,
        correlation_id: Optional[str] = None,
    ) -> MutationResult:
        """
        Run one command against one aggregate under its lock.

        The command either applies fully and records its events, or raises
        before anything is saved or published.

        Args:
            aggregate_type: Qualified type
            aggregate_id: Aggregate identifier
            command: Callable receiving the loaded aggregate
            correlation_id: Optional id of the originating operation

        Returns:
            MutationResult with the drained events

        Raises:
            AggregateNotFoundError: If nothing is stored under the id
            DomainError: Whatever the command raises
        """
        with self.lock_manager.hold(aggregate_type, aggregate_id, self.lock_timeout):
            aggregate = self.get(aggregate_type, aggregate_id)
            if correlation_id:
                aggregate.bind_correlation_id(correlation_id)
            command(aggregate)
            events = aggregate.pull_domain_events()
            self._save(aggregate)
            self.publisher.publish_all(events)
            return MutationResult.applied(aggregate, events, aggregate.correlation_id)

    def request_download(
        self,
        aggregate_type: str,
        aggregate_id: str,
        correlation_id: Optional[str] = None,
    ) -> MutationResult:
        """
        Ask the download consumer to fetch an artifact.

        Raises:
            AggregateNotFoundError: If the artifact was never captured
            AlreadyDownloadedError: If the artifact was already downloaded
        """
        logger.info(f"Requesting download of {aggregate_type} {aggregate_id}")
        return self.execute(
            aggregate_type,
            aggregate_id,
            lambda aggregate: _downloadable(aggregate).request_download(),
            correlation_id,
        )

    def complete_download(
        self,
        aggregate_type: str,
        aggregate_id: str,
        local_path: str,
        correlation_id: Optional[str] = None,
    ) -> MutationResult:
        """
        Record a completion notice from the download consumer.

        A replayed notice for an already downloaded artifact is reported as
        a duplicate instead of failing.

        Returns:
            MutationResult with the downloaded event, or flagged duplicate
        """
        try:
            result = self.execute(
                aggregate_type,
                aggregate_id,
                lambda aggregate: _downloadable(aggregate).mark_as_downloaded(local_path),
                correlation_id,
            )
        except AlreadyDownloadedError:
            logger.warning(
                f"Duplicate completion for {aggregate_type} {aggregate_id} "
                f"(correlation {correlation_id}), ignoring"
            )
            return MutationResult.duplicate_of(
                self.get(aggregate_type, aggregate_id), correlation_id
            )

        logger.info(f"{aggregate_type} {aggregate_id} downloaded to {local_path}")
        return result

    def _save(self, aggregate: AggregateRoot) -> None:
        if not self.repository.save(aggregate):
            logger.error(f"Failed to save {aggregate.AGGREGATE_TYPE} {aggregate.id}")
            raise ApplicationError(
                ErrorCategory.SYSTEM_ERROR,
                f"Failed to save {aggregate.AGGREGATE_TYPE} {aggregate.id}",
                {"aggregate_type": aggregate.AGGREGATE_TYPE, "aggregate_id": str(aggregate.id)},
            )


def _downloadable(aggregate: AggregateRoot) -> CapturedContent:
    if not isinstance(aggregate, CapturedContent):
        raise ApplicationError(
            ErrorCategory.INVALID_STATE,
            f"{aggregate.AGGREGATE_TYPE} has no download lifecycle",
            {"aggregate_type": aggregate.AGGREGATE_TYPE},
        )
    return aggregate
