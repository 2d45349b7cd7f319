"""
Domain Layer

Aggregates, value objects and domain events for captured content. The
domain layer has no infrastructure dependencies.
"""

from .aggregate import AggregateRoot, CapturedContent
from .composites import CompositeAggregate
from .errors import (
    AggregateNotFoundError,
    AlreadyDownloadedError,
    AlreadyExistsError,
    DomainError,
    ExpiredContentError,
    InvalidStateError,
    NotAMemberError,
    UsageLimitReachedError,
    ValidationError,
)
from .events import DomainEvent
from .policies import DownloadLifecycle, LifecycleState, MembershipSet
from .profiles import FollowableProfile, ProfileAggregate
from .registry import AGGREGATE_TYPES, aggregate_class, build_from_payload, is_downloadable, restore_aggregate
from .repositories import AggregateRepository
from .value_objects import ContentId, ValueObject

__all__ = [
    'AggregateRoot',
    'CapturedContent',
    'CompositeAggregate',
    'ProfileAggregate',
    'FollowableProfile',
    'DomainEvent',
    'ContentId',
    'ValueObject',
    'LifecycleState',
    'DownloadLifecycle',
    'MembershipSet',
    'AggregateRepository',
    'AGGREGATE_TYPES',
    'aggregate_class',
    'build_from_payload',
    'is_downloadable',
    'restore_aggregate',
    'DomainError',
    'ValidationError',
    'InvalidStateError',
    'AlreadyDownloadedError',
    'ExpiredContentError',
    'AlreadyExistsError',
    'NotAMemberError',
    'UsageLimitReachedError',
    'AggregateNotFoundError',
]
