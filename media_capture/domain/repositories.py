"""
Aggregate Repositories

Repository interface for aggregate persistence.
Concrete implementations are in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import List, Optional

from .aggregate import AggregateRoot


class AggregateRepository(ABC):
    """
    Abstract repository interface for aggregate snapshots.

    Aggregates are addressed by their qualified type and id, so one
    repository can hold every platform's aggregates. Saving stores the
    ``to_dict`` snapshot; buffered events are never persisted.
    """

    @abstractmethod
    def save(self, aggregate: AggregateRoot) -> bool:
        """
        Save or update an aggregate.

        Args:
            aggregate: Aggregate to save

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    def get(self, aggregate_type: str, aggregate_id: str) -> Optional[AggregateRoot]:
        """
        Retrieve an aggregate.

        Args:
            aggregate_type: Qualified type, e.g. ``instagram.post``
            aggregate_id: Aggregate identifier

        Returns:
            The restored aggregate if found, None otherwise
        """
        pass

    @abstractmethod
    def delete(self, aggregate_type: str, aggregate_id: str) -> bool:
        """
        Delete an aggregate.

        Returns:
            True if deleted, False otherwise
        """
        pass

    @abstractmethod
    def exists(self, aggregate_type: str, aggregate_id: str) -> bool:
        pass

    @abstractmethod
    def list_ids(self, aggregate_type: str) -> List[str]:
        """
        List stored ids of one aggregate type.

        Returns:
            Aggregate ids, sorted
        """
        pass
