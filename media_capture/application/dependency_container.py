"""
Dependency Container

Holds the capture service and its collaborators, keyed by the type
callers ask for.
"""

import logging
import threading
from typing import Any, Dict, Iterable, Optional, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(Exception):
    """Raised when nothing is registered for the requested type."""


class DependencyContainer:
    """
    Type-keyed registry of shared instances.

    Tests can swap a registration with ``override`` and restore it with
    ``clear_overrides``. Safe to use from several worker threads.
    """

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register(self, interface: Type[T], instance: T) -> None:
        with self._lock:
            self._instances[interface] = instance
        logger.debug(f"Registered {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Instance registered for ``interface``.

        Raises:
            DependencyNotFoundError: If neither a registration nor an
                override exists
        """
        with self._lock:
            for table in (self._overrides, self._instances):
                if interface in table:
                    return table[interface]
        raise DependencyNotFoundError(f"Nothing registered for {interface.__name__}")

    def override(self, interface: Type[T], instance: T) -> None:
        with self._lock:
            self._overrides[interface] = instance
        logger.debug(f"Overrode {interface.__name__}")

    def clear_overrides(self) -> None:
        with self._lock:
            self._overrides.clear()

    def setup_event_handlers(self, event_publisher, handlers: Optional[Iterable[Any]] = None) -> None:
        """
        Subscribe event handlers to ``event_publisher``.

        Each handler exposes ``PATTERNS`` (event-kind patterns it wants)
        and a ``handle(event)`` method. Without ``handlers`` only a
        LoggingEventHandler is subscribed.
        """
        if handlers is None:
            from ..infrastructure.event_handlers.logging_handler import LoggingEventHandler
            handlers = [LoggingEventHandler(logging.getLogger("media_capture.events"))]

        for handler in handlers:
            for pattern in handler.PATTERNS:
                event_publisher.subscribe(pattern, handler.handle)
            logger.debug(f"Subscribed {type(handler).__name__} to {', '.join(handler.PATTERNS)}")
