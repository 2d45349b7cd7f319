"""
Pinterest Value Objects
"""

import re
from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Tuple

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
class PinId(ContentId):
    """Pinterest pin ids are numeric strings."""
    PATTERN = re.compile(r"[0-9]+")


@dataclass(frozen=True)
class BoardId(ContentId):
    """Pinterest board id."""


@dataclass(frozen=True)
class UserId(ContentId):
    """Pinterest account id."""


@dataclass(frozen=True)
class PinMetadata(ValueObject):
    """Attributes of a captured pin; dimensions in pixels."""
    title: str
    image_url: str
    original_image_url: str
    width: int
    height: int
    created_at: datetime
    creator_name: str
    description: str = ""
    source_url: Optional[str] = None
    board_name: Optional[str] = None
    repin_count: int = 0
    comment_count: int = 0
    tags: Tuple[str, ...] = ()

    def validate(self) -> None:
        require_text("title", self.title)
        require_text("image_url", self.image_url)
        require_text("original_image_url", self.original_image_url)
        require_positive("width", self.width)
        require_positive("height", self.height)
        require_timestamp("created_at", self.created_at)
        require_optional_text("creator_name", self.creator_name)
        require_optional_text("description", self.description)
        require_optional_text("source_url", self.source_url)
        require_optional_text("board_name", self.board_name)
        require_non_negative("repin_count", self.repin_count)
        require_non_negative("comment_count", self.comment_count)
        require_strings("tags", self.tags)

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height

    def is_landscape(self) -> bool:
        return self.aspect_ratio > 1

    def is_portrait(self) -> bool:
        return self.aspect_ratio < 1

    def is_square(self) -> bool:
        return abs(self.aspect_ratio - 1) < 0.01


@dataclass(frozen=True)
class BoardAttributes(ValueObject):
    name: str
    description: str = ""
    is_private: bool = False

    def validate(self) -> None:
        require_text("name", self.name)
        require_optional_text("description", self.description)
        require_bool("is_private", self.is_private)


@dataclass(frozen=True)
class PinterestProfile(ValueObject):
    username: str
    display_name: str
    bio: str = ""
    profile_image_url: Optional[str] = None
    follower_count: int = 0
    following_count: int = 0
    board_count: int = 0
    pin_count: int = 0

    def validate(self) -> None:
        require_text("username", self.username)
        require_text("display_name", self.display_name)
        require_optional_text("bio", self.bio)
        require_optional_text("profile_image_url", self.profile_image_url)
        for name in ("follower_count", "following_count", "board_count", "pin_count"):
            require_non_negative(name, getattr(self, name))
