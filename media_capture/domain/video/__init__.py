"""
Video Domain

Videos, playlists and channels of the video hosting platform.
"""

from .entities import Channel, Playlist, Video
from .value_objects import (
    ChannelId,
    ChannelProfile,
    PlaylistAttributes,
    PlaylistId,
    VideoId,
    VideoMetadata,
    VideoQuality,
)

__all__ = [
    'Video',
    'Playlist',
    'Channel',
    'VideoId',
    'PlaylistId',
    'ChannelId',
    'VideoMetadata',
    'VideoQuality',
    'PlaylistAttributes',
    'ChannelProfile',
]
