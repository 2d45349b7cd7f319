"""
Video Value Objects

Identifiers follow the hosting platform's formats: 11-character video
ids, ``PL``-prefixed playlist ids and ``UC``-prefixed channel ids.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

from ..value_objects import (
    ContentId,
    ValueObject,
    require_bool,
    require_non_negative,
    require_optional_text,
    require_strings,
    require_text,
    require_timestamp,
)

WATCH_URL_TEMPLATE = "https://www.youtube.com/watch?v={video_id}"


@dataclass(frozen=True)
class VideoId(ContentId):
    PATTERN = re.compile(r"[A-Za-z0-9_-]{11}")


@dataclass(frozen=True)
class PlaylistId(ContentId):
    PATTERN = re.compile(r"PL[A-Za-z0-9_-]{32}")


@dataclass(frozen=True)
class ChannelId(ContentId):
    PATTERN = re.compile(r"UC[A-Za-z0-9_-]{22}")


class VideoQuality(Enum):
    """Requested download resolution."""
    LOW = "144p"
    MEDIUM = "360p"
    HIGH = "720p"
    FULL_HD = "1080p"
    FOUR_K = "2160p"

    def is_high_definition(self) -> bool:
        return self in (VideoQuality.HIGH, VideoQuality.FULL_HD, VideoQuality.FOUR_K)

    @property
    def resolution(self) -> str:
        return self.value


@dataclass(frozen=True)
class VideoMetadata(ValueObject):
    """Attributes of a captured video; duration in whole seconds."""
    title: str
    duration: int
    published_at: datetime
    channel_title: str
    thumbnail_url: str
    description: str = ""
    view_count: int = 0
    like_count: int = 0
    tags: Tuple[str, ...] = ()

    def validate(self) -> None:
        require_text("title", self.title)
        require_non_negative("duration", self.duration)
        require_timestamp("published_at", self.published_at)
        require_optional_text("channel_title", self.channel_title)
        require_text("thumbnail_url", self.thumbnail_url)
        require_optional_text("description", self.description)
        require_non_negative("view_count", self.view_count)
        require_non_negative("like_count", self.like_count)
        require_strings("tags", self.tags)

    def formatted_duration(self) -> str:
        """Render the duration as ``H:MM:SS`` or ``M:SS``."""
        hours, remainder = divmod(self.duration, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes}:{seconds:02d}"


@dataclass(frozen=True)
class PlaylistAttributes(ValueObject):
    title: str
    description: str = ""
    is_public: bool = True

    def validate(self) -> None:
        require_text("title", self.title)
        require_optional_text("description", self.description)
        require_bool("is_public", self.is_public)


@dataclass(frozen=True)
class ChannelProfile(ValueObject):
    name: str
    thumbnail_url: Optional[str] = None
    description: str = ""
    subscriber_count: int = 0
    video_count: int = 0

    def validate(self) -> None:
        require_text("name", self.name)
        require_optional_text("thumbnail_url", self.thumbnail_url)
        require_optional_text("description", self.description)
        require_non_negative("subscriber_count", self.subscriber_count)
        require_non_negative("video_count", self.video_count)
