"""
Composite Aggregates

Boards, collections, playlists and threads own an ordered membership of
other aggregates' ids. Incremental adds and removes never record a sync;
a sync replaces the whole membership and records exactly one
``<kind>.synced`` event carrying the full id list.
"""

from datetime import datetime
from typing import Any, ClassVar, Dict, Iterable, Mapping, Optional, Tuple, Type, TypeVar

from .aggregate import AggregateRoot, optional_timestamp, require_instance, timestamp_or_none
from .clock import format_timestamp, utcnow
from .errors import ValidationError
from .events import DomainEvent
from .policies import MembershipSet
from .value_objects import ContentId, ValueObject, snake_case

T = TypeVar("T", bound="CompositeAggregate")


class CompositeAggregate(AggregateRoot):
    """
    Aggregate owning an ordered set of member ids.

    Subclasses declare the id, owner, attribute and member types. Set
    ``RECORDS_CREATION`` to False for composites that are created silently.
    """

    ID_TYPE: ClassVar[Type[ContentId]] = ContentId
    OWNER_TYPE: ClassVar[Type[ContentId]] = ContentId
    OWNER_KEY: ClassVar[str] = "owner_id"
    ATTRIBUTES_TYPE: ClassVar[Type[ValueObject]] = ValueObject
    MEMBER_TYPE: ClassVar[Type[ContentId]] = ContentId
    MEMBER_LABEL: ClassVar[str] = "member"
    RECORDS_CREATION: ClassVar[bool] = True

    def __init__(
        self,
        composite_id: ContentId,
        owner_id: ContentId,
        attributes: ValueObject,
        members: Iterable[ContentId] = (),
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
        synced_at: Optional[datetime] = None,
    ):
        require_instance("id", composite_id, self.ID_TYPE)
        require_instance(self.OWNER_KEY, owner_id, self.OWNER_TYPE)
        require_instance("attributes", attributes, self.ATTRIBUTES_TYPE)
        members = tuple(members)
        for member in members:
            require_instance(self._members_key(), member, self.MEMBER_TYPE)
        super().__init__(composite_id)
        self._owner_id = owner_id
        self._attributes = attributes
        self._members: MembershipSet[ContentId] = MembershipSet(members, label=self.MEMBER_LABEL)
        self._created_at = created_at
        self._updated_at = updated_at
        self._synced_at = synced_at

    @classmethod
    def create(
        cls: Type[T],
        composite_id: ContentId,
        owner_id: ContentId,
        attributes: ValueObject,
        members: Iterable[ContentId] = (),
    ) -> T:
        """Factory; records ``<kind>.created`` unless the type is created silently."""
        now = utcnow()
        item = cls(composite_id, owner_id, attributes, members, created_at=now, updated_at=now)
        if cls.RECORDS_CREATION:
            item._record(
                "created",
                {
                    cls.OWNER_KEY: str(owner_id),
                    "attributes": attributes.to_dict(),
                    cls._members_key(): [str(m) for m in item._members],
                },
                occurred_at=now,
            )
        return item

    @classmethod
    def from_payload(cls: Type[T], payload: Mapping[str, Any]) -> T:
        """
        Create from a producer payload
        ``{"id", "<ownerKey>", "attributes", "<memberIds>"?}``.

        Raises:
            ValidationError: Naming the offending field
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("payload", "must be an object")
        data = {snake_case(str(key)): value for key, value in payload.items()}
        for key in ("id", cls.OWNER_KEY, "attributes"):
            if data.get(key) is None:
                raise ValidationError(key, "is required")
        raw_members = data.get(cls._members_key()) or []
        if not isinstance(raw_members, (list, tuple)):
            raise ValidationError(cls._members_key(), "must be a list")
        return cls.create(
            cls.ID_TYPE(data["id"]),
            cls._owner_from(data[cls.OWNER_KEY]),
            cls.ATTRIBUTES_TYPE.from_payload(data["attributes"]),
            [cls._member_from(value) for value in raw_members],
        )

    @classmethod
    def _owner_from(cls, value: Any) -> ContentId:
        try:
            return cls.OWNER_TYPE(value)
        except ValidationError as e:
            raise ValidationError(cls.OWNER_KEY, e.reason)

    @classmethod
    def _member_from(cls, value: Any) -> ContentId:
        try:
            return cls.MEMBER_TYPE(value)
        except ValidationError as e:
            raise ValidationError(cls._members_key(), e.reason)

    @classmethod
    def _members_key(cls) -> str:
        return f"{cls.MEMBER_LABEL}_ids"

    # -- queries -----------------------------------------------------------

    @property
    def owner_id(self) -> ContentId:
        return self._owner_id

    @property
    def attributes(self) -> ValueObject:
        return self._attributes

    @property
    def member_ids(self) -> Tuple[ContentId, ...]:
        return self._members.as_tuple()

    @property
    def member_count(self) -> int:
        return len(self._members)

    def has_member(self, member_id: ContentId) -> bool:
        return member_id in self._members

    @property
    def created_at(self) -> Optional[datetime]:
        return self._created_at

    @property
    def updated_at(self) -> Optional[datetime]:
        return self._updated_at

    @property
    def synced_at(self) -> Optional[datetime]:
        return self._synced_at

    # -- membership --------------------------------------------------------

    def _add_member(self, member_id: ContentId) -> bool:
        require_instance(self._members_key(), member_id, self.MEMBER_TYPE)
        added = self._members.add(member_id)
        if added:
            self._updated_at = utcnow()
        return added

    def _remove_member(self, member_id: ContentId) -> None:
        self._members.remove(member_id)
        self._updated_at = utcnow()

    def _sync_members(self, member_ids: Iterable[ContentId]) -> DomainEvent:
        """Replace the membership and record one ``<kind>.synced`` event."""
        member_ids = list(member_ids)
        for member in member_ids:
            require_instance(self._members_key(), member, self.MEMBER_TYPE)
        snapshot = self._members.replace(member_ids)
        self._synced_at = utcnow()
        self._updated_at = self._synced_at
        return self._record(
            "synced",
            {
                self.OWNER_KEY: str(self._owner_id),
                self._members_key(): [str(m) for m in snapshot],
                "synced_at": format_timestamp(self._synced_at),
            },
            occurred_at=self._synced_at,
        )

    def _replace_attributes(self, attributes: ValueObject) -> None:
        self._attributes = attributes
        self._updated_at = utcnow()

    # -- persistence -------------------------------------------------------

    def _extra_state(self) -> Dict[str, Any]:
        return {}

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        pass

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "aggregate_type": self.AGGREGATE_TYPE,
            "id": str(self._id),
            self.OWNER_KEY: str(self._owner_id),
            "attributes": self._attributes.to_dict(),
            self._members_key(): [str(m) for m in self._members],
            "created_at": timestamp_or_none(self._created_at),
            "updated_at": timestamp_or_none(self._updated_at),
            "synced_at": timestamp_or_none(self._synced_at),
        }
        data.update(self._extra_state())
        return data

    @classmethod
    def from_dict(cls: Type[T], data: Dict[str, Any]) -> T:
        item = cls(
            cls.ID_TYPE(data["id"]),
            cls.OWNER_TYPE(data[cls.OWNER_KEY]),
            cls.ATTRIBUTES_TYPE.from_payload(data["attributes"]),
            [cls.MEMBER_TYPE(value) for value in data.get(cls._members_key(), [])],
            created_at=optional_timestamp(data, "created_at"),
            updated_at=optional_timestamp(data, "updated_at"),
            synced_at=optional_timestamp(data, "synced_at"),
        )
        item._restore_flags(data)
        return item
