"""
Infrastructure Layer

Redis persistence and locking, in-memory adapters and event handlers.
"""

from .memory_aggregate_repository import InMemoryAggregateRepository
from .redis_aggregate_repository import RedisAggregateRepository
from .redis_lock_manager import RedisLockManager
from .redis_repository import RedisConnectionManager, RedisRepository

__all__ = [
    'InMemoryAggregateRepository',
    'RedisAggregateRepository',
    'RedisLockManager',
    'RedisConnectionManager',
    'RedisRepository',
]
