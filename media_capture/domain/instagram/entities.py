"""
Instagram Aggregates

Posts, reels and stories follow the shared capture/download lifecycle;
stories additionally expire and can be viewed, archived and highlighted.
"""

import logging
from dataclasses import replace
from datetime import datetime
from typing import Any, ClassVar, Dict, Optional, Tuple

from ..aggregate import CapturedContent, optional_timestamp, timestamp_or_none
from ..clock import format_timestamp, utcnow
from ..errors import ExpiredContentError, InvalidStateError
from ..events import DomainEvent
from ..policies import DownloadLifecycle, has_expired
from ..profiles import FollowableProfile
from ..value_objects import drop_tag, freeze_tags, require_text
from .value_objects import (
    PostId,
    PostMetadata,
    ReelAttributes,
    ReelId,
    StoryAttributes,
    StoryId,
    UserId,
    UserProfile,
)

logger = logging.getLogger(__name__)


class Post(CapturedContent[PostMetadata]):
    """Captured Instagram post (image or video)."""

    AGGREGATE_TYPE = "instagram.post"
    KIND = "post"
    ID_TYPE = PostId
    OWNER_TYPE = UserId
    ATTRIBUTES_TYPE = PostMetadata
    ENGAGEMENT_FIELDS = ("likes_count", "comments_count")

    @property
    def metadata(self) -> PostMetadata:
        return self._attributes

    def source_url(self) -> Optional[str]:
        if self._attributes.is_video:
            return self._attributes.video_url
        return self._attributes.image_url

    def update_metadata(self, metadata: PostMetadata) -> None:
        """Replace the metadata with a newer capture; no event."""
        self.refresh_attributes(metadata)

    def _download_request_extras(self) -> Dict[str, Any]:
        return {"is_video": self._attributes.is_video}


class Reel(CapturedContent[ReelAttributes]):
    """Captured Instagram reel."""

    AGGREGATE_TYPE = "instagram.reel"
    KIND = "reel"
    ID_TYPE = ReelId
    OWNER_TYPE = UserId
    ATTRIBUTES_TYPE = ReelAttributes
    ENGAGEMENT_FIELDS = ("views_count", "likes_count", "comments_count")

    def source_url(self) -> Optional[str]:
        return self._attributes.video_url

    @property
    def hashtags(self) -> Tuple[str, ...]:
        return self._attributes.hashtags

    def share(self) -> DomainEvent:
        """
        Share the reel.

        Returns:
            The recorded ``reel.shared`` event
        """
        self._attributes = replace(self._attributes, shares_count=self._attributes.shares_count + 1)
        return self._record(
            "shared",
            {"author_id": str(self._owner_id), "shares_count": self._attributes.shares_count},
        )

    def add_hashtag(self, hashtag: str) -> None:
        require_text("hashtag", hashtag)
        self._attributes = replace(self._attributes, hashtags=freeze_tags(self._attributes.hashtags, hashtag))

    def remove_hashtag(self, hashtag: str) -> None:
        self._attributes = replace(self._attributes, hashtags=drop_tag(self._attributes.hashtags, hashtag))


class Story(CapturedContent[StoryAttributes]):
    """
    Captured Instagram story.

    Stories expire; expiry is recomputed against the clock on every check,
    never cached.
    """

    AGGREGATE_TYPE = "instagram.story"
    KIND = "story"
    ID_TYPE = StoryId
    OWNER_TYPE = UserId
    ATTRIBUTES_TYPE = StoryAttributes

    def __init__(
        self,
        content_id: StoryId,
        owner_id: UserId,
        attributes: StoryAttributes,
        captured_at: Optional[datetime] = None,
        lifecycle: Optional[DownloadLifecycle] = None,
    ):
        super().__init__(content_id, owner_id, attributes, captured_at, lifecycle)
        self._viewed_at: Optional[datetime] = None
        self._archived_at: Optional[datetime] = None

    def source_url(self) -> Optional[str]:
        return self._attributes.media_url

    @property
    def expires_at(self) -> datetime:
        return self._attributes.expires_at

    @property
    def viewed_at(self) -> Optional[datetime]:
        return self._viewed_at

    @property
    def archived_at(self) -> Optional[datetime]:
        return self._archived_at

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        return has_expired(self._attributes.expires_at, now)

    def is_archived(self) -> bool:
        return self._archived_at is not None

    def is_highlighted(self) -> bool:
        return self._attributes.is_highlighted

    def mark_as_viewed(self) -> DomainEvent:
        """
        Record that the story was viewed.

        Raises:
            ExpiredContentError: If the story has expired
        """
        now = utcnow()
        if self.is_expired(now):
            logger.debug(f"Rejected view of expired story {self._id}")
            raise ExpiredContentError(f"Cannot view expired story {self._id}")
        self._viewed_at = now
        return self._record(
            "viewed",
            {"author_id": str(self._owner_id), "viewed_at": format_timestamp(now)},
            occurred_at=now,
        )

    def archive(self) -> DomainEvent:
        """
        Archive the story.

        Raises:
            InvalidStateError: If the story is already archived
        """
        if self.is_archived():
            raise InvalidStateError(f"Story {self._id} is already archived")
        self._archived_at = utcnow()
        return self._record(
            "archived",
            {"author_id": str(self._owner_id), "archived_at": format_timestamp(self._archived_at)},
            occurred_at=self._archived_at,
        )

    def unarchive(self) -> None:
        self._archived_at = None

    def highlight(self) -> None:
        self._attributes = replace(self._attributes, is_highlighted=True)

    def remove_highlight(self) -> None:
        self._attributes = replace(self._attributes, is_highlighted=False)

    def _download_request_extras(self) -> Dict[str, Any]:
        return {
            "media_type": self._attributes.media_type.value,
            "expires_at": format_timestamp(self._attributes.expires_at),
        }

    def _extra_state(self) -> Dict[str, Any]:
        return {
            "viewed_at": timestamp_or_none(self._viewed_at),
            "archived_at": timestamp_or_none(self._archived_at),
        }

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        self._viewed_at = optional_timestamp(data, "viewed_at")
        self._archived_at = optional_timestamp(data, "archived_at")


class InstagramUser(FollowableProfile):
    """Instagram account the local user can follow."""

    AGGREGATE_TYPE = "instagram.user"
    KIND = "user"
    ID_TYPE = UserId
    PROFILE_TYPE = UserProfile
    STAT_FIELDS: ClassVar[Tuple[str, ...]] = ("followers_count", "following_count", "posts_count")

    @property
    def username(self) -> str:
        return self._profile.username

    def is_verified(self) -> bool:
        return self._profile.is_verified

    def is_private(self) -> bool:
        return self._profile.is_private

    def update_engagement(self, **counters: int) -> None:
        """Refresh follower, following and post counts; no event."""
        self.update_stats(**counters)

    def verify(self) -> None:
        self._set_profile_flag("is_verified", True)

    def make_private(self) -> None:
        self._set_profile_flag("is_private", True)

    def make_public(self) -> None:
        self._set_profile_flag("is_private", False)
