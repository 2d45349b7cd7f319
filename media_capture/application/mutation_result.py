"""
Mutation Result Value Object

Encapsulates the outcome of an application-level mutation: the aggregate
after the change and the events the change produced.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..domain.aggregate import AggregateRoot
from ..domain.events import DomainEvent


@dataclass
class MutationResult:
    """
    Result of running one command against one aggregate.

    ``duplicate`` marks a replayed command the aggregate rejected as
    already applied (e.g. a second completion notice for the same
    download); no events are produced in that case.
    """

    aggregate: AggregateRoot
    events: List[DomainEvent] = field(default_factory=list)
    duplicate: bool = False
    correlation_id: Optional[str] = None

    @classmethod
    def applied(
        cls,
        aggregate: AggregateRoot,
        events: List[DomainEvent],
        correlation_id: Optional[str] = None,
    ) -> 'MutationResult':
        return cls(aggregate=aggregate, events=list(events), correlation_id=correlation_id)

    @classmethod
    def duplicate_of(cls, aggregate: AggregateRoot, correlation_id: Optional[str] = None) -> 'MutationResult':
        """
        Create a result for a command that was already applied.

        Args:
            aggregate: Aggregate in its current (unchanged) state
            correlation_id: Correlation id of the rejected command

        Returns:
            MutationResult flagged as duplicate
        """
        return cls(aggregate=aggregate, duplicate=True, correlation_id=correlation_id)

    @property
    def event_kinds(self) -> List[str]:
        return [event.event_kind for event in self.events]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert result to dictionary for serialization.

        Returns:
            Dictionary representation of the result
        """
        return {
            'aggregate_type': self.aggregate.AGGREGATE_TYPE,
            'aggregate_id': str(self.aggregate.id),
            'duplicate': self.duplicate,
            'correlation_id': self.correlation_id,
            'events': [event.to_dict() for event in self.events],
        }
