"""
Redis Configuration

Connection settings for the snapshot store and the lock leases, plus the
process-wide connection pool that backs them.
"""

import logging
import os
from typing import Optional

import redis

from ..application.errors import ApplicationError, ErrorCategory
from ..infrastructure.redis_repository import RedisConnectionManager, RedisRepository

logger = logging.getLogger(__name__)


class RedisConfig:
    """
    Where the capture store lives.

    ``REDIS_URL`` wins over the individual ``REDIS_*`` variables for every
    part it spells out.
    """

    def __init__(self):
        self.host = os.getenv("REDIS_HOST", "localhost")
        self.port = int(os.getenv("REDIS_PORT", 6379))
        self.db = int(os.getenv("REDIS_DB", 0))
        self.password = os.getenv("REDIS_PASSWORD")
        self.max_connections = int(os.getenv("REDIS_MAX_CONNECTIONS", 20))

        self.url = os.getenv("REDIS_URL")
        if self.url:
            parts = redis.connection.parse_url(self.url)
            self.host = parts.get("host", self.host)
            self.port = parts.get("port", self.port)
            self.db = parts.get("db", self.db)
            self.password = parts.get("password", self.password)

    def describe(self) -> str:
        """Location string safe for logs; never includes the password."""
        return f"{self.host}:{self.port}/{self.db}"


_manager: Optional[RedisConnectionManager] = None


def init_redis(config: Optional[RedisConfig] = None) -> RedisConnectionManager:
    """
    Open the shared pool and check that the server answers.

    Args:
        config: Connection settings, read from the environment if None

    Returns:
        The connected manager

    Raises:
        ApplicationError: SYSTEM_ERROR when the server does not answer PING
    """
    global _manager

    config = config or RedisConfig()
    manager = RedisConnectionManager(
        host=config.host,
        port=config.port,
        db=config.db,
        max_connections=config.max_connections,
        password=config.password,
    )
    if not manager.health_check():
        manager.close()
        logger.error(f"Redis at {config.describe()} did not answer PING")
        raise ApplicationError(
            ErrorCategory.SYSTEM_ERROR,
            f"Redis unavailable at {config.describe()}",
            {"redis": config.describe()},
        )

    close_redis()
    _manager = manager
    logger.info(f"Connected to Redis at {config.describe()}")
    return manager


def close_redis() -> None:
    """Drop the shared pool; a no-op when nothing is open."""
    global _manager

    if _manager is not None:
        _manager.close()
        _manager = None


def get_redis_repository(key_prefix: str = "") -> RedisRepository:
    """
    Repository over the shared pool.

    Raises:
        RuntimeError: If init_redis() has not succeeded yet
    """
    if _manager is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return RedisRepository(_manager.client, key_prefix)
