"""
Unsplash Aggregates
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple, Type, TypeVar

from ..aggregate import AggregateRoot, CapturedContent, optional_timestamp, require_instance, timestamp_or_none
from ..clock import format_timestamp, utcnow
from ..composites import CompositeAggregate
from ..errors import (
    AlreadyExistsError,
    ExpiredContentError,
    InvalidStateError,
    NotAMemberError,
    UsageLimitReachedError,
    ValidationError,
)
from ..events import DomainEvent
from ..policies import DownloadLifecycle, has_expired
from ..profiles import FollowableProfile
from ..value_objects import drop_tag, freeze_tags, require_text, snake_case
from .value_objects import (
    ArtistId,
    ArtistProfile,
    CollectionAttributes,
    CollectionId,
    LicenseId,
    LicenseTerms,
    PhotoAttributes,
    PhotoId,
)

L = TypeVar("L", bound="License")


class Photo(CapturedContent[PhotoAttributes]):
    """Captured Unsplash photo."""

    AGGREGATE_TYPE = "unsplash.photo"
    KIND = "photo"
    ID_TYPE = PhotoId
    OWNER_TYPE = ArtistId
    OWNER_KEY = "artist_id"
    ATTRIBUTES_TYPE = PhotoAttributes
    ENGAGEMENT_FIELDS = ("likes", "downloads")

    def __init__(
        self,
        content_id: PhotoId,
        owner_id: ArtistId,
        attributes: PhotoAttributes,
        captured_at: Optional[datetime] = None,
        lifecycle: Optional[DownloadLifecycle] = None,
    ):
        super().__init__(content_id, owner_id, attributes, captured_at, lifecycle)
        self._liked_at: Optional[datetime] = None

    @property
    def liked_at(self) -> Optional[datetime]:
        return self._liked_at

    @property
    def tags(self) -> Tuple[str, ...]:
        return self._attributes.tags

    def is_liked(self) -> bool:
        return self._liked_at is not None

    def source_url(self) -> Optional[str]:
        return self._attributes.download_url

    def like(self) -> DomainEvent:
        """
        Raises:
            AlreadyExistsError: If the photo is already liked
        """
        if self.is_liked():
            raise AlreadyExistsError(f"Photo {self._id} is already liked")
        self._liked_at = utcnow()
        self._attributes = replace(self._attributes, likes=self._attributes.likes + 1)
        return self._record(
            "liked",
            {"artist_id": str(self._owner_id), "liked_at": format_timestamp(self._liked_at)},
            occurred_at=self._liked_at,
        )

    def add_tag(self, tag: str) -> None:
        require_text("tag", tag)
        self._attributes = replace(self._attributes, tags=freeze_tags(self._attributes.tags, tag))

    def remove_tag(self, tag: str) -> None:
        self._attributes = replace(self._attributes, tags=drop_tag(self._attributes.tags, tag))

    def _extra_state(self) -> Dict[str, Any]:
        return {"liked_at": timestamp_or_none(self._liked_at)}

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        self._liked_at = optional_timestamp(data, "liked_at")


class Collection(CompositeAggregate):
    """
    Curated photo collection.

    Adding a photo already in the collection is rejected. The cover photo
    is always a member; removing it or syncing it away clears the cover.
    """

    AGGREGATE_TYPE = "unsplash.collection"
    KIND = "collection"
    ID_TYPE = CollectionId
    OWNER_TYPE = ArtistId
    OWNER_KEY = "curator_id"
    ATTRIBUTES_TYPE = CollectionAttributes
    MEMBER_TYPE = PhotoId
    MEMBER_LABEL = "photo"

    @property
    def title(self) -> str:
        return self._attributes.title

    @property
    def photo_ids(self) -> Tuple[PhotoId, ...]:
        return self.member_ids

    @property
    def total_photos(self) -> int:
        return self.member_count

    @property
    def cover_photo_id(self) -> Optional[PhotoId]:
        return self._attributes.cover_photo_id

    def is_private(self) -> bool:
        return self._attributes.is_private

    def add_photo(self, photo_id: PhotoId) -> DomainEvent:
        """
        Raises:
            AlreadyExistsError: If the photo is already in the collection
        """
        require_instance("photo_ids", photo_id, PhotoId)
        if self.has_member(photo_id):
            raise AlreadyExistsError(f"Photo {photo_id} is already in collection {self._id}")
        self._add_member(photo_id)
        return self._record(
            "photo_added",
            {"curator_id": str(self._owner_id), "photo_id": str(photo_id)},
        )

    def remove_photo(self, photo_id: PhotoId) -> None:
        """
        Raises:
            NotAMemberError: If the photo is not in the collection
        """
        self._remove_member(photo_id)
        self._drop_stale_cover()

    def set_cover_photo(self, photo_id: PhotoId) -> None:
        """
        Raises:
            NotAMemberError: If the photo is not in the collection
        """
        if not self.has_member(photo_id):
            raise NotAMemberError(f"Photo {photo_id} must be in collection {self._id} to set as cover")
        self._replace_attributes(replace(self._attributes, cover_photo_id=photo_id))

    def sync_photos(self, photo_ids: Iterable[PhotoId]) -> DomainEvent:
        """Replace the collection's photos; records ``collection.synced``."""
        event = self._sync_members(photo_ids)
        self._drop_stale_cover()
        return event

    def make_private(self) -> None:
        self._replace_attributes(replace(self._attributes, is_private=True))

    def make_public(self) -> None:
        self._replace_attributes(replace(self._attributes, is_private=False))

    def update_metadata(self, **changes: Any) -> None:
        """Change title, description or tags; no event."""
        for name in changes:
            if name not in ("title", "description", "tags"):
                raise ValidationError(name, "is not editable collection metadata")
        self._replace_attributes(replace(self._attributes, **changes))

    def _drop_stale_cover(self) -> None:
        cover = self._attributes.cover_photo_id
        if cover is not None and not self.has_member(cover):
            self._attributes = replace(self._attributes, cover_photo_id=None)


class License(AggregateRoot):
    """
    Usage license for one photo by one artist.

    Created silently. ``use()`` requires a prior ``acquire()`` and respects
    the optional expiry and download limit; each use counts exactly once.
    """

    AGGREGATE_TYPE = "unsplash.license"
    KIND = "license"

    def __init__(
        self,
        photo_id: PhotoId,
        artist_id: ArtistId,
        terms: LicenseTerms,
        acquired_at: Optional[datetime] = None,
        usage_count: int = 0,
    ):
        require_instance("photo_id", photo_id, PhotoId)
        require_instance("artist_id", artist_id, ArtistId)
        require_instance("terms", terms, LicenseTerms)
        super().__init__(LicenseId.for_pair(photo_id, artist_id))
        self._photo_id = photo_id
        self._artist_id = artist_id
        self._terms = terms
        self._acquired_at = acquired_at
        self._usage_count = usage_count

    @classmethod
    def create(cls: Type[L], photo_id: PhotoId, artist_id: ArtistId, terms: LicenseTerms) -> L:
        return cls(photo_id, artist_id, terms)

    @classmethod
    def from_payload(cls: Type[L], payload: Dict[str, Any]) -> L:
        """Create from ``{"photoId", "artistId", "terms": {...}}``."""
        if not isinstance(payload, dict):
            raise ValidationError("payload", "must be an object")
        data = {snake_case(str(key)): value for key, value in payload.items()}
        for key in ("photo_id", "artist_id", "terms"):
            if data.get(key) is None:
                raise ValidationError(key, "is required")
        try:
            photo_id = PhotoId(data["photo_id"])
        except ValidationError as e:
            raise ValidationError("photo_id", e.reason)
        try:
            artist_id = ArtistId(data["artist_id"])
        except ValidationError as e:
            raise ValidationError("artist_id", e.reason)
        return cls.create(photo_id, artist_id, LicenseTerms.from_payload(data["terms"]))

    @property
    def photo_id(self) -> PhotoId:
        return self._photo_id

    @property
    def artist_id(self) -> ArtistId:
        return self._artist_id

    @property
    def terms(self) -> LicenseTerms:
        return self._terms

    @property
    def acquired_at(self) -> Optional[datetime]:
        return self._acquired_at

    @property
    def usage_count(self) -> int:
        return self._usage_count

    @property
    def remaining_uses(self) -> Optional[int]:
        if self._terms.download_limit is None:
            return None
        return max(self._terms.download_limit - self._usage_count, 0)

    def is_acquired(self) -> bool:
        return self._acquired_at is not None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return has_expired(self._terms.expires_at, now)

    def has_reached_download_limit(self) -> bool:
        limit = self._terms.download_limit
        return limit is not None and self._usage_count >= limit

    def can_use_commercially(self) -> bool:
        return self._terms.allows_commercial_use

    def acquire(self) -> DomainEvent:
        """
        Raises:
            AlreadyExistsError: If the license is already acquired
        """
        if self.is_acquired():
            raise AlreadyExistsError(f"License {self._id} is already acquired")
        self._acquired_at = utcnow()
        return self._record(
            "acquired",
            {
                "photo_id": str(self._photo_id),
                "artist_id": str(self._artist_id),
                "license_type": self._terms.license_type.value,
                "acquired_at": format_timestamp(self._acquired_at),
            },
            occurred_at=self._acquired_at,
        )

    def use(self) -> DomainEvent:
        """
        Count one use of the license.

        Raises:
            InvalidStateError: If the license was never acquired
            ExpiredContentError: If the license has expired
            UsageLimitReachedError: If the download limit is exhausted
        """
        if not self.is_acquired():
            raise InvalidStateError(f"License {self._id} must be acquired before use")
        if self.is_expired():
            raise ExpiredContentError(f"License {self._id} has expired")
        if self.has_reached_download_limit():
            raise UsageLimitReachedError(f"License {self._id} reached its download limit")
        self._usage_count += 1
        return self._record(
            "used",
            {
                "photo_id": str(self._photo_id),
                "usage_count": self._usage_count,
                "remaining_uses": self.remaining_uses,
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aggregate_type": self.AGGREGATE_TYPE,
            "id": str(self._id),
            "photo_id": str(self._photo_id),
            "artist_id": str(self._artist_id),
            "terms": self._terms.to_dict(),
            "acquired_at": timestamp_or_none(self._acquired_at),
            "usage_count": self._usage_count,
        }

    @classmethod
    def from_dict(cls: Type[L], data: Dict[str, Any]) -> L:
        return cls(
            PhotoId(data["photo_id"]),
            ArtistId(data["artist_id"]),
            LicenseTerms.from_payload(data["terms"]),
            acquired_at=optional_timestamp(data, "acquired_at"),
            usage_count=int(data.get("usage_count", 0)),
        )


class Artist(FollowableProfile):
    """Unsplash photographer the local user can follow."""

    AGGREGATE_TYPE = "unsplash.artist"
    KIND = "artist"
    ID_TYPE = ArtistId
    PROFILE_TYPE = ArtistProfile
    STAT_FIELDS = ArtistProfile.COUNTERS

    @property
    def username(self) -> str:
        return self._profile.username

    @property
    def full_name(self) -> str:
        return self._profile.full_name

    def is_for_hire(self) -> bool:
        return self._profile.is_for_hire

    def accepts_donations(self) -> bool:
        return self._profile.accepts_donations

    def set_for_hire(self, is_for_hire: bool) -> None:
        self._set_profile_flag("is_for_hire", bool(is_for_hire))

    def set_accepts_donations(self, accepts_donations: bool) -> None:
        self._set_profile_flag("accepts_donations", bool(accepts_donations))
