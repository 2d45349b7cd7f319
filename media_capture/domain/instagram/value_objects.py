"""
Instagram Value Objects

Identifiers and attribute bundles for posts, reels, stories and user
profiles.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from ..errors import ValidationError
from ..value_objects import (
    ContentId,
    ValueObject,
    require_bool,
    require_non_negative,
    require_optional_text,
    require_positive,
    require_strings,
    require_text,
    require_timestamp,
)


@dataclass(frozen=True)
class PostId(ContentId):
    """Instagram post shortcode."""


@dataclass(frozen=True)
class ReelId(ContentId):
    """Instagram reel shortcode."""


@dataclass(frozen=True)
class StoryId(ContentId):
    """Instagram story media id."""


@dataclass(frozen=True)
class UserId(ContentId):
    """Instagram account id."""


class MediaType(Enum):
    """Media carried by a story."""
    IMAGE = "image"
    VIDEO = "video"


@dataclass(frozen=True)
class PostMetadata(ValueObject):
    """
    Attributes of a captured post.

    A video post must carry its ``video_url``.
    """
    caption: str
    image_url: str
    timestamp: datetime
    likes_count: int = 0
    comments_count: int = 0
    hashtags: Tuple[str, ...] = ()
    thumbnail_url: Optional[str] = None
    location: Optional[str] = None
    is_video: bool = False
    video_url: Optional[str] = None

    def validate(self) -> None:
        require_text("caption", self.caption)
        require_text("image_url", self.image_url)
        require_timestamp("timestamp", self.timestamp)
        require_non_negative("likes_count", self.likes_count)
        require_non_negative("comments_count", self.comments_count)
        require_strings("hashtags", self.hashtags)
        require_optional_text("thumbnail_url", self.thumbnail_url)
        require_optional_text("location", self.location)
        require_bool("is_video", self.is_video)
        require_optional_text("video_url", self.video_url)
        if self.is_video and not self.video_url:
            raise ValidationError("video_url", "is required for video posts")


@dataclass(frozen=True)
class ReelAttributes(ValueObject):
    """Attributes of a captured reel; duration in seconds."""
    video_url: str
    thumbnail_url: str
    caption: str
    duration: float
    timestamp: datetime
    views_count: int = 0
    likes_count: int = 0
    comments_count: int = 0
    shares_count: int = 0
    hashtags: Tuple[str, ...] = ()
    audio_track: Optional[str] = None

    def validate(self) -> None:
        require_text("video_url", self.video_url)
        require_text("thumbnail_url", self.thumbnail_url)
        require_optional_text("caption", self.caption)
        require_positive("duration", self.duration)
        require_timestamp("timestamp", self.timestamp)
        for name in ("views_count", "likes_count", "comments_count", "shares_count"):
            require_non_negative(name, getattr(self, name))
        require_strings("hashtags", self.hashtags)
        require_optional_text("audio_track", self.audio_track)


@dataclass(frozen=True)
class StoryAttributes(ValueObject):
    """Attributes of a captured story."""
    media_url: str
    media_type: MediaType
    timestamp: datetime
    expires_at: datetime
    duration: Optional[float] = None
    is_highlighted: bool = False

    def validate(self) -> None:
        require_text("media_url", self.media_url)
        if not isinstance(self.media_type, MediaType):
            raise ValidationError("media_type", "must be image or video")
        require_timestamp("timestamp", self.timestamp)
        require_timestamp("expires_at", self.expires_at)
        if self.expires_at < self.timestamp:
            raise ValidationError("expires_at", "cannot be earlier than timestamp")
        if self.duration is not None:
            require_positive("duration", self.duration)
        require_bool("is_highlighted", self.is_highlighted)


@dataclass(frozen=True)
class UserProfile(ValueObject):
    """Public profile of an Instagram account."""
    username: str
    display_name: str
    bio: Optional[str] = None
    profile_picture_url: Optional[str] = None
    website: Optional[str] = None
    location: Optional[str] = None
    is_verified: bool = False
    is_private: bool = False
    followers_count: int = 0
    following_count: int = 0
    posts_count: int = 0

    def validate(self) -> None:
        require_text("username", self.username)
        require_text("display_name", self.display_name)
        for name in ("bio", "profile_picture_url", "website", "location"):
            require_optional_text(name, getattr(self, name))
        for name in ("followers_count", "following_count", "posts_count"):
            require_non_negative(name, getattr(self, name))
        require_bool("is_verified", self.is_verified)
        require_bool("is_private", self.is_private)
