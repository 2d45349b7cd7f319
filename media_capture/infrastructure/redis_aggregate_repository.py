"""
Redis Aggregate Repository

Stores aggregate snapshots as JSON under ``<type>:<id>`` keys.
"""

import logging
from typing import List, Optional

from ..domain.aggregate import AggregateRoot
from ..domain.errors import DomainError
from ..domain.registry import restore_aggregate
from ..domain.repositories import AggregateRepository
from .redis_repository import RedisRepository

logger = logging.getLogger(__name__)


class RedisAggregateRepository(AggregateRepository):
    """
    Redis-backed aggregate repository.

    Snapshots never expire unless ``ttl`` is set; captured content is
    kept until explicitly deleted.
    """

    def __init__(self, redis_repo: RedisRepository, ttl: Optional[int] = None):
        """
        Args:
            redis_repo: RedisRepository with the aggregate key prefix
            ttl: Optional snapshot lifetime in seconds
        """
        self.redis_repo = redis_repo
        self.ttl = ttl

    @staticmethod
    def _key(aggregate_type: str, aggregate_id: str) -> str:
        return f"{aggregate_type}:{aggregate_id}"

    def save(self, aggregate: AggregateRoot) -> bool:
        key = self._key(aggregate.AGGREGATE_TYPE, str(aggregate.id))
        saved = self.redis_repo.set_json(key, aggregate.to_dict(), ttl=self.ttl)
        if saved:
            logger.debug(f"Saved {key}")
        return saved

    def get(self, aggregate_type: str, aggregate_id: str) -> Optional[AggregateRoot]:
        data = self.redis_repo.get_json(self._key(aggregate_type, aggregate_id))
        if data is None:
            return None
        try:
            return restore_aggregate(data)
        except (DomainError, KeyError, ValueError) as e:
            logger.error(f"Corrupt snapshot for {aggregate_type} {aggregate_id}: {e}")
            return None

    def delete(self, aggregate_type: str, aggregate_id: str) -> bool:
        return self.redis_repo.delete(self._key(aggregate_type, aggregate_id))

    def exists(self, aggregate_type: str, aggregate_id: str) -> bool:
        return self.redis_repo.exists(self._key(aggregate_type, aggregate_id))

    def list_ids(self, aggregate_type: str) -> List[str]:
        prefix = f"{aggregate_type}:"
        keys = self.redis_repo.get_keys_by_pattern(f"{prefix}*")
        return sorted(key[len(prefix):] for key in keys if key.startswith(prefix))
