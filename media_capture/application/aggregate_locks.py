"""
Aggregate Locks

Per-aggregate mutual exclusion. Aggregates are not thread-safe, so the
application layer runs at most one mutation per aggregate at a time.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from threading import Lock
from typing import Any, Dict, Iterator, List, Optional

from .errors import LockTimeoutError

logger = logging.getLogger(__name__)


def lock_key(aggregate_type: str, aggregate_id: str) -> str:
    """Lock name shared by every worker mutating the same aggregate."""
    return f"aggregate_lock:{aggregate_type}:{aggregate_id}"


class AggregateLockManager(ABC):
    """Hands out exclusive scopes keyed by aggregate type and id."""

    @abstractmethod
    @contextmanager
    def hold(self, aggregate_type: str, aggregate_id: str, timeout: Optional[float] = None) -> Iterator[None]:
        """
        Hold the aggregate's lock for the duration of the block.

        Raises:
            LockTimeoutError: If the lock is not acquired within ``timeout``
        """


class InProcessLockManager(AggregateLockManager):
    """
    One ``threading.Lock`` per aggregate, for single-process deployments
    and tests.
    """

    def __init__(self, default_timeout: float = 10.0):
        self._default_timeout = default_timeout
        # key -> [lock, number of callers holding or waiting]
        self._locks: Dict[str, List[Any]] = {}
        self._registry_lock = Lock()

    def _checkout(self, key: str) -> Lock:
        with self._registry_lock:
            entry = self._locks.get(key)
            if entry is None:
                entry = self._locks[key] = [Lock(), 0]
            entry[1] += 1
            return entry[0]

    def _checkin(self, key: str) -> None:
        with self._registry_lock:
            entry = self._locks[key]
            entry[1] -= 1
            if entry[1] == 0:
                del self._locks[key]

    @property
    def active_keys(self) -> int:
        """Number of aggregates currently locked or awaited."""
        with self._registry_lock:
            return len(self._locks)

    @contextmanager
    def hold(self, aggregate_type: str, aggregate_id: str, timeout: Optional[float] = None) -> Iterator[None]:
        key = lock_key(aggregate_type, aggregate_id)
        timeout = self._default_timeout if timeout is None else timeout
        lock = self._checkout(key)
        try:
            if not lock.acquire(timeout=timeout):
                logger.warning(f"Timed out waiting for {key}")
                raise LockTimeoutError(key, timeout)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(key)
