"""
In-Memory Aggregate Repository

Keeps ``to_dict`` snapshots in a dict. Used by tests and single-process
deployments; every ``get`` restores a fresh aggregate so callers never
share in-memory instances.
"""

import copy
import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Tuple

from ..domain.aggregate import AggregateRoot
from ..domain.registry import restore_aggregate
from ..domain.repositories import AggregateRepository

logger = logging.getLogger(__name__)


class InMemoryAggregateRepository(AggregateRepository):
    """Thread-safe snapshot store."""

    def __init__(self):
        self._snapshots: Dict[Tuple[str, str], Dict[str, Any]] = {}
        self._lock = Lock()

    def save(self, aggregate: AggregateRoot) -> bool:
        key = (aggregate.AGGREGATE_TYPE, str(aggregate.id))
        with self._lock:
            self._snapshots[key] = copy.deepcopy(aggregate.to_dict())
        logger.debug(f"Saved {key[0]} {key[1]}")
        return True

    def get(self, aggregate_type: str, aggregate_id: str) -> Optional[AggregateRoot]:
        with self._lock:
            snapshot = self._snapshots.get((aggregate_type, aggregate_id))
        if snapshot is None:
            return None
        return restore_aggregate(copy.deepcopy(snapshot))

    def delete(self, aggregate_type: str, aggregate_id: str) -> bool:
        with self._lock:
            return self._snapshots.pop((aggregate_type, aggregate_id), None) is not None

    def exists(self, aggregate_type: str, aggregate_id: str) -> bool:
        with self._lock:
            return (aggregate_type, aggregate_id) in self._snapshots

    def list_ids(self, aggregate_type: str) -> List[str]:
        with self._lock:
            return sorted(i for t, i in self._snapshots if t == aggregate_type)
