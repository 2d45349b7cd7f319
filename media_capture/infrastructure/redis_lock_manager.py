"""
Redis Lock Manager

Per-aggregate locks shared by every worker process, built on the
repository's distributed lock.
"""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from redis.exceptions import LockError

from ..application.aggregate_locks import AggregateLockManager, lock_key
from ..application.errors import LockTimeoutError
from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


class RedisLockManager(AggregateLockManager):
    """Distributed per-aggregate locks."""

    def __init__(self, redis_repo: RedisRepository, lease_seconds: int = 30, default_timeout: float = 10.0):
        """
        Args:
            redis_repo: Repository whose client and prefix hold the locks
            lease_seconds: Lock expiry, bounds how long a crashed worker blocks others
            default_timeout: Seconds to wait for the lock
        """
        self.redis_repo = redis_repo
        self.lease_seconds = lease_seconds
        self.default_timeout = default_timeout

    @contextmanager
    def hold(self, aggregate_type: str, aggregate_id: str, timeout: Optional[float] = None) -> Iterator[None]:
        key = lock_key(aggregate_type, aggregate_id)
        timeout = self.default_timeout if timeout is None else timeout
        acquired = False
        try:
            with self.redis_repo.distributed_lock(
                key, timeout=self.lease_seconds, blocking_timeout=timeout
            ):
                acquired = True
                yield
        except LockError:
            if acquired:
                raise
            logger.warning(f"Timed out waiting for {key}")
            raise LockTimeoutError(key, timeout)
