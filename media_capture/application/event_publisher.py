"""
Event Publisher

Application service for publishing domain events to registered handlers.
Enables decoupling of side effects from core business logic.
"""

import logging
from fnmatch import fnmatchcase
from threading import Lock
from typing import Callable, Iterable, List, Tuple

from ..domain.events import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class EventPublisher:
    """
    Event publisher that dispatches domain events to registered handlers.

    Handlers subscribe to event-kind patterns (``post.downloaded``,
    ``*.download.requested``, ``*``) and are dispatched synchronously in
    subscription order. Handler exceptions are caught and logged to prevent
    side effects from breaking core business logic.

    Thread-safe for concurrent event publishing.
    """

    def __init__(self):
        """Initialize EventPublisher with empty handler registry."""
        self._handlers: List[Tuple[str, EventHandler]] = []
        self._lock = Lock()

    def subscribe(self, pattern: str, handler: EventHandler) -> None:
        """
        Register a handler for event kinds matching ``pattern``.

        Args:
            pattern: Event kind or shell-style pattern
            handler: Callable that accepts the event as parameter

        Example:
            publisher = EventPublisher()
            publisher.subscribe("*.download.requested", dispatch_download)
        """
        with self._lock:
            self._handlers.append((pattern, handler))
        logger.debug(f"Registered handler {_handler_name(handler)} for {pattern}")

    def unsubscribe(self, handler: EventHandler) -> None:
        with self._lock:
            self._handlers = [(p, h) for p, h in self._handlers if h is not handler]

    def handlers_for(self, event_kind: str) -> List[EventHandler]:
        with self._lock:
            return [h for p, h in self._handlers if fnmatchcase(event_kind, p)]

    def publish(self, event: DomainEvent) -> None:
        """
        Publish an event to all matching handlers.

        Args:
            event: The domain event to publish
        """
        handlers = self.handlers_for(event.event_kind)

        if not handlers:
            logger.debug(f"No handlers registered for {event.event_kind}")
            return

        logger.debug(f"Publishing {event.event_kind} to {len(handlers)} handler(s)")

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                # Log but don't fail - side effects should not break core logic
                logger.error(
                    f"Error in handler {_handler_name(handler)} for {event.event_kind}: {e}",
                    exc_info=True
                )

    def publish_all(self, events: Iterable[DomainEvent]) -> None:
        """Publish events in order."""
        for event in events:
            self.publish(event)


def _handler_name(handler: EventHandler) -> str:
    return getattr(handler, "__name__", type(handler).__name__)
