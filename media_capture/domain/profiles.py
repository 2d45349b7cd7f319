"""
Profile Aggregates

Shared behaviour for user, artist and channel profiles: partial profile
updates that record what changed, silent statistic refreshes, and the
follow / unfollow flag.
"""

from dataclasses import fields, replace
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple, Type, TypeVar

from .aggregate import AggregateRoot, optional_timestamp, require_instance, timestamp_or_none
from .clock import format_timestamp, utcnow
from .errors import AlreadyExistsError, ValidationError
from .events import DomainEvent
from .value_objects import ContentId, ValueObject, serialize_value

P = TypeVar("P", bound="ProfileAggregate")


class ProfileAggregate(AggregateRoot):
    """Profile owned by a platform account."""

    ID_TYPE: ClassVar[Type[ContentId]] = ContentId
    PROFILE_TYPE: ClassVar[Type[ValueObject]] = ValueObject
    STAT_FIELDS: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, profile_id: ContentId, profile: ValueObject):
        require_instance("id", profile_id, self.ID_TYPE)
        require_instance("profile", profile, self.PROFILE_TYPE)
        super().__init__(profile_id)
        self._profile = profile

    @classmethod
    def create(cls: Type[P], profile_id: ContentId, profile: ValueObject) -> P:
        """Create a profile; profiles are tracked silently until acted upon."""
        return cls(profile_id, profile)

    @classmethod
    def from_payload(cls: Type[P], payload: Dict[str, Any]) -> P:
        """Create from ``{"id": ..., "profile": {...}}``."""
        if not isinstance(payload, dict) or payload.get("id") is None:
            raise ValidationError("id", "is required")
        if payload.get("profile") is None:
            raise ValidationError("profile", "is required")
        return cls.create(cls.ID_TYPE(payload["id"]), cls.PROFILE_TYPE.from_payload(payload["profile"]))

    @property
    def profile(self) -> ValueObject:
        return self._profile

    def _profile_field_names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(self._profile))

    def update_profile(self, **changes: Any) -> Optional[DomainEvent]:
        """
        Apply a partial profile update.

        Returns:
            ``<kind>.profile_updated`` carrying previous and new values,
            or None when nothing actually changed

        Raises:
            ValidationError: For unknown fields or invalid values
        """
        known = self._profile_field_names()
        for name in changes:
            if name not in known:
                raise ValidationError(name, f"is not a {self.KIND} profile field")

        updated = replace(self._profile, **changes)
        changed = {
            name: value for name, value in changes.items()
            if getattr(self._profile, name) != getattr(updated, name)
        }
        if not changed:
            return None

        previous = {name: getattr(self._profile, name) for name in changed}
        self._profile = updated
        return self._record(
            "profile_updated",
            {
                "previous": _serialize_all(previous),
                "changes": _serialize_all({name: getattr(updated, name) for name in changed}),
            },
        )

    def update_stats(self, **stats: int) -> None:
        """Overwrite profile statistics with a fresh snapshot; no event."""
        for name in stats:
            if name not in self.STAT_FIELDS:
                raise ValidationError(name, f"is not a {self.KIND} statistic")
        self._profile = replace(self._profile, **stats)

    def _set_profile_flag(self, name: str, value: bool) -> None:
        self._profile = replace(self._profile, **{name: value})

    def _extra_state(self) -> Dict[str, Any]:
        return {}

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        pass

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "aggregate_type": self.AGGREGATE_TYPE,
            "id": str(self._id),
            "profile": self._profile.to_dict(),
        }
        data.update(self._extra_state())
        return data

    @classmethod
    def from_dict(cls: Type[P], data: Dict[str, Any]) -> P:
        item = cls(cls.ID_TYPE(data["id"]), cls.PROFILE_TYPE.from_payload(data["profile"]))
        item._restore_flags(data)
        return item


class FollowableProfile(ProfileAggregate):
    """Profile that the local user can follow."""

    USERNAME_FIELD: ClassVar[str] = "username"

    def __init__(self, profile_id: ContentId, profile: ValueObject):
        super().__init__(profile_id, profile)
        self._followed_at: Optional[datetime] = None

    @property
    def followed_at(self) -> Optional[datetime]:
        return self._followed_at

    def is_followed(self) -> bool:
        return self._followed_at is not None

    def follow(self) -> DomainEvent:
        """
        Follow this account.

        Raises:
            AlreadyExistsError: If already followed
        """
        if self.is_followed():
            raise AlreadyExistsError(f"{type(self).__name__} {self._id} is already followed")
        self._followed_at = utcnow()
        return self._record(
            "followed",
            {
                "username": getattr(self._profile, self.USERNAME_FIELD),
                "followed_at": format_timestamp(self._followed_at),
            },
            occurred_at=self._followed_at,
        )

    def unfollow(self) -> None:
        """Reverse ``follow``; no event."""
        self._followed_at = None

    def _extra_state(self) -> Dict[str, Any]:
        return {"followed_at": timestamp_or_none(self._followed_at)}

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        self._followed_at = optional_timestamp(data, "followed_at")


def _serialize_all(values: Dict[str, Any]) -> Dict[str, Any]:
    return {name: serialize_value(value) for name, value in values.items()}
