"""
Aggregate Base

Identity, event buffer and the shared capture/download lifecycle.
No aggregate changes state except through its own methods, and every
business-significant method records its event in the same call that
applies the mutation.
"""

import uuid
from datetime import datetime
from typing import Any, ClassVar, Dict, Generic, List, Mapping, Optional, Tuple, Type, TypeVar

from .clock import format_timestamp, parse_timestamp, utcnow
from .errors import ValidationError
from .events import DomainEvent
from .policies import DownloadLifecycle, LifecycleState, overwrite_counters
from .value_objects import ContentId, ValueObject, snake_case

A = TypeVar("A", bound=ValueObject)
C = TypeVar("C", bound="CapturedContent")


def require_instance(field: str, value: Any, expected: type) -> None:
    """Reject arguments of the wrong value object type."""
    if not isinstance(value, expected):
        raise ValidationError(
            field, f"must be a {expected.__name__}, got {type(value).__name__}"
        )


def optional_timestamp(data: Mapping[str, Any], key: str) -> Optional[datetime]:
    """Read an optional ISO timestamp from a persisted snapshot."""
    value = data.get(key)
    return parse_timestamp(value) if value else None


def timestamp_or_none(value: Optional[datetime]) -> Optional[str]:
    return format_timestamp(value) if value else None


class AggregateRoot:
    """
    Base class for all aggregates.

    Aggregates buffer the events they record until the application layer
    drains them with ``pull_domain_events()``. Subclasses set
    ``AGGREGATE_TYPE`` (``<platform>.<kind>``) and ``KIND``.
    """

    AGGREGATE_TYPE: ClassVar[str] = ""
    KIND: ClassVar[str] = ""

    def __init__(self, aggregate_id: ContentId):
        if not isinstance(aggregate_id, ContentId):
            raise ValidationError("id", "aggregate id must be a ContentId")
        self._id = aggregate_id
        self._events: List[DomainEvent] = []
        self._correlation_id: str = str(uuid.uuid4())

    @property
    def id(self) -> ContentId:
        return self._id

    def get_id(self) -> ContentId:
        return self._id

    @property
    def correlation_id(self) -> str:
        return self._correlation_id

    def bind_correlation_id(self, correlation_id: str) -> None:
        """Stamp events recorded from now on with ``correlation_id``."""
        if not correlation_id:
            raise ValidationError("correlation_id", "must be a non-empty string")
        self._correlation_id = correlation_id

    def _record(
        self,
        action: str,
        payload: Optional[Dict[str, Any]] = None,
        occurred_at: Optional[datetime] = None,
    ) -> DomainEvent:
        """Append an event for this aggregate; only mutation methods call this."""
        event = DomainEvent(
            aggregate_id=str(self._id),
            aggregate_type=self.AGGREGATE_TYPE,
            event_kind=f"{self.KIND}.{action}",
            payload=payload or {},
            occurred_at=occurred_at or utcnow(),
            correlation_id=self._correlation_id,
        )
        self._events.append(event)
        return event

    def pull_domain_events(self) -> List[DomainEvent]:
        """
        Drain buffered events.

        Returns:
            Events recorded since the last drain, oldest first
        """
        events = list(self._events)
        self._events.clear()
        return events

    @property
    def pending_events(self) -> List[DomainEvent]:
        """Return buffered events without draining them."""
        return list(self._events)

    def to_dict(self) -> Dict[str, Any]:
        """Snapshot sufficient to restore the aggregate without replaying events."""
        raise NotImplementedError

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AggregateRoot":
        """Restore an aggregate from ``to_dict`` output without recording events."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id.value!r})"


class CapturedContent(AggregateRoot, Generic[A]):
    """
    Generic captured artifact parameterised by its attribute bundle.

    Provides the shared ``CAPTURED -> DOWNLOAD_REQUESTED -> DOWNLOADED``
    lifecycle. Platform types declare their id, owner and attribute types
    and add their own flags on top.
    """

    ID_TYPE: ClassVar[Type[ContentId]] = ContentId
    OWNER_TYPE: ClassVar[Type[ContentId]] = ContentId
    ATTRIBUTES_TYPE: ClassVar[Type[ValueObject]] = ValueObject
    OWNER_KEY: ClassVar[str] = "author_id"
    ENGAGEMENT_FIELDS: ClassVar[Tuple[str, ...]] = ()

    def __init__(
        self,
        content_id: ContentId,
        owner_id: ContentId,
        attributes: A,
        captured_at: Optional[datetime] = None,
        lifecycle: Optional[DownloadLifecycle] = None,
    ):
        require_instance("id", content_id, self.ID_TYPE)
        require_instance(self.OWNER_KEY, owner_id, self.OWNER_TYPE)
        require_instance("attributes", attributes, self.ATTRIBUTES_TYPE)
        super().__init__(content_id)
        self._owner_id = owner_id
        self._attributes = attributes
        self._captured_at = captured_at
        self._lifecycle = lifecycle or DownloadLifecycle()

    @classmethod
    def capture(cls: Type[C], content_id: ContentId, owner_id: ContentId, attributes: A, **extra) -> C:
        """
        Factory for freshly discovered content.

        Records ``<kind>.captured`` carrying the owner and full attributes.
        """
        item = cls(content_id, owner_id, attributes, **extra)
        item._captured_at = utcnow()
        item._record("captured", item._captured_payload(), occurred_at=item._captured_at)
        return item

    @classmethod
    def from_payload(cls: Type[C], payload: Mapping[str, Any]) -> C:
        """
        Capture from a raw producer payload.

        Expected shape: ``{"id": ..., "<ownerKey>": ..., "attributes": {...}}``
        with camelCase or snake_case keys.

        Raises:
            ValidationError: Naming the offending field
        """
        if not isinstance(payload, Mapping):
            raise ValidationError("payload", "must be an object")
        data = {snake_case(str(key)): value for key, value in payload.items()}
        for key in ("id", cls.OWNER_KEY, "attributes"):
            if data.get(key) is None:
                raise ValidationError(key, "is required")
        content_id = cls.ID_TYPE(data["id"])
        try:
            owner_id = cls.OWNER_TYPE(data[cls.OWNER_KEY])
        except ValidationError as e:
            raise ValidationError(cls.OWNER_KEY, e.reason)
        attributes = cls.ATTRIBUTES_TYPE.from_payload(data["attributes"])
        return cls.capture(content_id, owner_id, attributes, **cls._extra_from_payload(data))

    @classmethod
    def _extra_from_payload(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        """Additional factory arguments taken from a producer payload."""
        return {}

    # -- queries -----------------------------------------------------------

    @property
    def owner_id(self) -> ContentId:
        return self._owner_id

    @property
    def attributes(self) -> A:
        return self._attributes

    @property
    def captured_at(self) -> Optional[datetime]:
        return self._captured_at

    @property
    def lifecycle_state(self) -> LifecycleState:
        return self._lifecycle.state

    @property
    def local_path(self) -> Optional[str]:
        return self._lifecycle.local_path

    @property
    def downloaded_at(self) -> Optional[datetime]:
        return self._lifecycle.downloaded_at

    @property
    def download_requested_at(self) -> Optional[datetime]:
        return self._lifecycle.requested_at

    def is_downloaded(self) -> bool:
        return self._lifecycle.is_downloaded()

    def source_url(self) -> Optional[str]:
        """URL the download consumer should fetch."""
        return None

    # -- lifecycle ---------------------------------------------------------

    def request_download(self) -> DomainEvent:
        """
        Ask the download consumer to fetch this artifact.

        Returns:
            The recorded ``<kind>.download.requested`` event

        Raises:
            AlreadyDownloadedError: If the artifact was already downloaded
        """
        requested_at = self._lifecycle.request(self._label(), utcnow())
        payload = {
            self.OWNER_KEY: str(self._owner_id),
            "source_url": self.source_url(),
            "request_count": self._lifecycle.request_count,
            "attributes": self._attributes.to_dict(),
        }
        payload.update(self._download_request_extras())
        return self._record("download.requested", payload, occurred_at=requested_at)

    def mark_as_downloaded(self, local_path: str) -> DomainEvent:
        """
        Record download completion.

        Args:
            local_path: Where the consumer stored the file

        Returns:
            The recorded ``<kind>.downloaded`` event

        Raises:
            AlreadyDownloadedError: On any call after the first success
            ValidationError: If local_path is empty
        """
        downloaded_at = self._lifecycle.complete(self._label(), local_path, utcnow())
        return self._record(
            "downloaded",
            {
                self.OWNER_KEY: str(self._owner_id),
                "local_path": local_path,
                "downloaded_at": format_timestamp(downloaded_at),
            },
            occurred_at=downloaded_at,
        )

    def update_engagement(self, **counters: int) -> None:
        """
        Overwrite engagement counters with the latest snapshot.

        Non-authoritative refresh: no event is recorded.

        Raises:
            ValidationError: For unknown or negative counters (nothing changes)
        """
        for name in counters:
            if name not in self.ENGAGEMENT_FIELDS:
                raise ValidationError(name, f"is not an engagement counter of {self.KIND}")
        self._attributes = overwrite_counters(self._attributes, **counters)

    def refresh_attributes(self, attributes: A) -> None:
        """Replace the attribute bundle with a newer capture; no event."""
        require_instance("attributes", attributes, self.ATTRIBUTES_TYPE)
        self._attributes = attributes

    # -- hooks -------------------------------------------------------------

    def _label(self) -> str:
        return f"{type(self).__name__} {self._id}"

    def _captured_payload(self) -> Dict[str, Any]:
        return {
            self.OWNER_KEY: str(self._owner_id),
            "attributes": self._attributes.to_dict(),
        }

    def _download_request_extras(self) -> Dict[str, Any]:
        return {}

    def _extra_state(self) -> Dict[str, Any]:
        return {}

    @classmethod
    def _restore_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {}

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        """Re-apply orthogonal flags stored in a snapshot."""

    # -- persistence -------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "aggregate_type": self.AGGREGATE_TYPE,
            "id": str(self._id),
            self.OWNER_KEY: str(self._owner_id),
            "attributes": self._attributes.to_dict(),
            "captured_at": timestamp_or_none(self._captured_at),
            "lifecycle": self._lifecycle.to_dict(),
        }
        data.update(self._extra_state())
        return data

    @classmethod
    def from_dict(cls: Type[C], data: Dict[str, Any]) -> C:
        item = cls(
            cls.ID_TYPE(data["id"]),
            cls.OWNER_TYPE(data[cls.OWNER_KEY]),
            cls.ATTRIBUTES_TYPE.from_payload(data["attributes"]),
            captured_at=optional_timestamp(data, "captured_at"),
            lifecycle=DownloadLifecycle.from_dict(data.get("lifecycle")),
            **cls._restore_kwargs(data),
        )
        item._restore_flags(data)
        return item
