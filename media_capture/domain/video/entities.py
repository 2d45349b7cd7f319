"""
Video Aggregates
"""

from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Tuple

from ..aggregate import CapturedContent, require_instance
from ..composites import CompositeAggregate
from ..errors import AlreadyDownloadedError, ValidationError
from ..events import DomainEvent
from ..policies import DownloadLifecycle
from ..profiles import ProfileAggregate
from .value_objects import (
    WATCH_URL_TEMPLATE,
    ChannelId,
    ChannelProfile,
    PlaylistAttributes,
    PlaylistId,
    VideoId,
    VideoMetadata,
    VideoQuality,
)


class Video(CapturedContent[VideoMetadata]):
    """Captured video, downloaded at a selected quality."""

    AGGREGATE_TYPE = "video.video"
    KIND = "video"
    ID_TYPE = VideoId
    OWNER_TYPE = ChannelId
    OWNER_KEY = "channel_id"
    ATTRIBUTES_TYPE = VideoMetadata
    ENGAGEMENT_FIELDS = ("view_count", "like_count")

    def __init__(
        self,
        content_id: VideoId,
        owner_id: ChannelId,
        attributes: VideoMetadata,
        captured_at: Optional[datetime] = None,
        lifecycle: Optional[DownloadLifecycle] = None,
        quality: VideoQuality = VideoQuality.HIGH,
    ):
        require_instance("quality", quality, VideoQuality)
        super().__init__(content_id, owner_id, attributes, captured_at, lifecycle)
        self._quality = quality

    @property
    def metadata(self) -> VideoMetadata:
        return self._attributes

    @property
    def quality(self) -> VideoQuality:
        return self._quality

    def source_url(self) -> Optional[str]:
        return WATCH_URL_TEMPLATE.format(video_id=self._id.value)

    def select_quality(self, quality: VideoQuality) -> None:
        """
        Change the download quality; no event.

        Raises:
            AlreadyDownloadedError: If the video was already downloaded
        """
        require_instance("quality", quality, VideoQuality)
        if self.is_downloaded():
            raise AlreadyDownloadedError(f"{self._label()} is already downloaded")
        self._quality = quality

    def _captured_payload(self) -> Dict[str, Any]:
        payload = super()._captured_payload()
        payload["quality"] = self._quality.value
        return payload

    def _download_request_extras(self) -> Dict[str, Any]:
        return {"quality": self._quality.value}

    def _extra_state(self) -> Dict[str, Any]:
        return {"quality": self._quality.value}

    @classmethod
    def _restore_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"quality": VideoQuality(data.get("quality", VideoQuality.HIGH.value))}

    @classmethod
    def _extra_from_payload(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        if data.get("quality") is None:
            return {}
        try:
            return {"quality": VideoQuality(data["quality"])}
        except ValueError:
            allowed = ", ".join(q.value for q in VideoQuality)
            raise ValidationError("quality", f"must be one of {allowed}, got {data['quality']!r}")


class Playlist(CompositeAggregate):
    """Channel playlist; created silently, adding a present video is a no-op."""

    AGGREGATE_TYPE = "video.playlist"
    KIND = "playlist"
    ID_TYPE = PlaylistId
    OWNER_TYPE = ChannelId
    OWNER_KEY = "channel_id"
    ATTRIBUTES_TYPE = PlaylistAttributes
    MEMBER_TYPE = VideoId
    MEMBER_LABEL = "video"
    RECORDS_CREATION = False

    @property
    def title(self) -> str:
        return self._attributes.title

    @property
    def video_ids(self) -> Tuple[VideoId, ...]:
        return self.member_ids

    @property
    def video_count(self) -> int:
        return self.member_count

    def is_public(self) -> bool:
        return self._attributes.is_public

    def add_video(self, video_id: VideoId) -> None:
        self._add_member(video_id)

    def remove_video(self, video_id: VideoId) -> None:
        """
        Raises:
            NotAMemberError: If the video is not in the playlist
        """
        self._remove_member(video_id)

    def sync_videos(self, video_ids: Iterable[VideoId]) -> DomainEvent:
        """Replace the playlist's videos; records ``playlist.synced``."""
        return self._sync_members(video_ids)


class Channel(ProfileAggregate):
    """Video channel; created silently, statistics refresh silently."""

    AGGREGATE_TYPE = "video.channel"
    KIND = "channel"
    ID_TYPE = ChannelId
    PROFILE_TYPE = ChannelProfile
    STAT_FIELDS = ("subscriber_count", "video_count")

    @property
    def name(self) -> str:
        return self._profile.name
