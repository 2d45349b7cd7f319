"""
Unsplash Value Objects

Identifiers, photo and collection attributes, artist profiles and license
terms including the revenue split.
"""

import math
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Dict, Optional, Tuple

from ..errors import ValidationError
from ..value_objects import (
    ContentId,
    ValueObject,
    require_bool,
    require_non_negative,
    require_optional_text,
    require_positive,
    require_positive_int,
    require_strings,
    require_text,
    require_timestamp,
)


@dataclass(frozen=True)
class PhotoId(ContentId):
    """Unsplash photo id."""


@dataclass(frozen=True)
class CollectionId(ContentId):
    """Unsplash collection id."""


@dataclass(frozen=True)
class ArtistId(ContentId):
    """Unsplash photographer id."""


@dataclass(frozen=True)
class LicenseId(ContentId):
    """License key derived from the licensed photo and its artist."""

    @classmethod
    def for_pair(cls, photo_id: PhotoId, artist_id: ArtistId) -> "LicenseId":
        return cls(f"{photo_id}:{artist_id}")


@dataclass(frozen=True)
class PhotoAttributes(ValueObject):
    """Attributes of a captured photo; dimensions in pixels."""
    title: str
    url: str
    download_url: str
    thumbnail_url: str
    width: int
    height: int
    created_at: datetime
    description: Optional[str] = None
    color: Optional[str] = None
    likes: int = 0
    downloads: int = 0
    tags: Tuple[str, ...] = ()
    updated_at: Optional[datetime] = None

    def validate(self) -> None:
        require_optional_text("title", self.title)
        require_text("url", self.url)
        require_text("download_url", self.download_url)
        require_text("thumbnail_url", self.thumbnail_url)
        require_positive("width", self.width)
        require_positive("height", self.height)
        require_timestamp("created_at", self.created_at)
        require_optional_text("description", self.description)
        require_optional_text("color", self.color)
        require_non_negative("likes", self.likes)
        require_non_negative("downloads", self.downloads)
        require_strings("tags", self.tags)


@dataclass(frozen=True)
class CollectionAttributes(ValueObject):
    title: str
    description: Optional[str] = None
    is_private: bool = False
    cover_photo_id: Optional[PhotoId] = None
    tags: Tuple[str, ...] = ()

    def validate(self) -> None:
        require_text("title", self.title)
        require_optional_text("description", self.description)
        require_strings("tags", self.tags)
        require_bool("is_private", self.is_private)


@dataclass(frozen=True)
class ArtistProfile(ValueObject):
    """Public profile of an Unsplash photographer."""
    username: str
    first_name: str
    last_name: str = ""
    bio: Optional[str] = None
    location: Optional[str] = None
    portfolio_url: Optional[str] = None
    instagram_username: Optional[str] = None
    twitter_username: Optional[str] = None
    profile_image_url: Optional[str] = None
    total_photos: int = 0
    total_likes: int = 0
    total_views: int = 0
    total_downloads: int = 0
    followers_count: int = 0
    following_count: int = 0
    is_for_hire: bool = False
    accepts_donations: bool = False

    COUNTERS = (
        "total_photos",
        "total_likes",
        "total_views",
        "total_downloads",
        "followers_count",
        "following_count",
    )

    def validate(self) -> None:
        require_text("username", self.username)
        require_text("first_name", self.first_name)
        require_optional_text("last_name", self.last_name)
        for name in ("bio", "location", "portfolio_url", "instagram_username",
                     "twitter_username", "profile_image_url"):
            require_optional_text(name, getattr(self, name))
        for name in self.COUNTERS:
            require_non_negative(name, getattr(self, name))
        require_bool("is_for_hire", self.is_for_hire)
        require_bool("accepts_donations", self.accepts_donations)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class LicenseType(Enum):
    FREE = "free"
    PLUS = "plus"
    PREMIUM = "premium"


@dataclass(frozen=True)
class RevenueModel(ValueObject):
    """
    Percentage split of license revenue.

    The four shares are non-negative and sum to exactly 100.
    """
    author_share: float
    platform_share: float
    affiliate_share: float = 0
    charity_share: float = 0

    SHARES = ("author_share", "platform_share", "affiliate_share", "charity_share")

    def validate(self) -> None:
        for name in self.SHARES:
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(name, "must be a number")
            if value < 0:
                raise ValidationError(name, "cannot be negative")
        total = self.total
        if not math.isclose(total, 100, rel_tol=0, abs_tol=1e-9):
            raise ValidationError("revenue_model", f"shares must sum to 100, got {total:g}")

    @property
    def total(self) -> float:
        return sum(getattr(self, name) for name in self.SHARES)

    def split(self, amount: float) -> Dict[str, float]:
        """Split ``amount`` by share."""
        return {name: amount * getattr(self, name) / 100 for name in self.SHARES}


@dataclass(frozen=True)
class LicenseTerms(ValueObject):
    """What a license permits, for how long and how often."""
    license_type: LicenseType
    name: str
    description: str = ""
    allows_commercial_use: bool = False
    requires_attribution: bool = True
    allows_modification: bool = False
    allows_distribution: bool = False
    restrictions: Tuple[str, ...] = ()
    expires_at: Optional[datetime] = None
    download_limit: Optional[int] = None
    max_resolution: Optional[str] = None
    revenue_model: Optional[RevenueModel] = None

    def validate(self) -> None:
        if not isinstance(self.license_type, LicenseType):
            raise ValidationError("license_type", "must be free, plus or premium")
        require_text("name", self.name)
        require_optional_text("description", self.description)
        require_strings("restrictions", self.restrictions)
        if self.download_limit is not None:
            require_positive_int("download_limit", self.download_limit)
        require_optional_text("max_resolution", self.max_resolution)
        for name in ("allows_commercial_use", "requires_attribution", "allows_modification", "allows_distribution"):
            require_bool(name, getattr(self, name))
