"""
Domain Events

Immutable records of business-significant state transitions.
Events decouple side effects (downloads, analytics, UI refresh) from
the aggregates that produce them.
"""

import copy
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional

from .clock import format_timestamp, parse_timestamp, utcnow
from .errors import ValidationError


@dataclass(frozen=True)
class DomainEvent:
    """
    Envelope for everything that happens to an aggregate.

    Domain events are immutable records of something that happened in the domain.
    Construction is pure data assembly; the only requirement is a non-empty
    aggregate id.

    Attributes:
        aggregate_id: ID of the aggregate that generated the event
        aggregate_type: Qualified aggregate type (e.g. ``instagram.post``)
        event_kind: What happened (e.g. ``post.download.requested``)
        payload: JSON-friendly event data
        occurred_at: Timestamp when the event occurred
        correlation_id: Traces one logical operation across the
            extension / job-queue boundary
        event_id: Unique id of this event
    """
    aggregate_id: str
    aggregate_type: str
    event_kind: str
    payload: Mapping[str, Any] = field(default_factory=dict)
    occurred_at: datetime = field(default_factory=utcnow)
    correlation_id: Optional[str] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self):
        if not self.aggregate_id:
            raise ValidationError("aggregate_id", "domain events require an aggregate id")
        # Read-only view over a private copy; nested values are not shared
        object.__setattr__(self, "payload", MappingProxyType(copy.deepcopy(dict(self.payload))))

    @property
    def platform(self) -> str:
        """Platform prefix of the aggregate type."""
        return self.aggregate_type.split(".", 1)[0]

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert event to dictionary for serialization.

        Returns:
            Dictionary representation of the event
        """
        return {
            "event_id": self.event_id,
            "event_kind": self.event_kind,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "payload": copy.deepcopy(dict(self.payload)),
            "occurred_at": format_timestamp(self.occurred_at),
            "correlation_id": self.correlation_id,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DomainEvent":
        """Create DomainEvent from dictionary."""
        return cls(
            aggregate_id=data["aggregate_id"],
            aggregate_type=data["aggregate_type"],
            event_kind=data["event_kind"],
            payload=data.get("payload") or {},
            occurred_at=parse_timestamp(data["occurred_at"]),
            correlation_id=data.get("correlation_id"),
            event_id=data.get("event_id") or str(uuid.uuid4()),
        )
