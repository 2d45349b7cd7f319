"""
Instagram Domain

Posts, reels, stories and followable user profiles.
"""

from .entities import InstagramUser, Post, Reel, Story
from .value_objects import (
    MediaType,
    PostId,
    PostMetadata,
    ReelAttributes,
    ReelId,
    StoryAttributes,
    StoryId,
    UserId,
    UserProfile,
)

__all__ = [
    'Post',
    'Reel',
    'Story',
    'InstagramUser',
    'PostId',
    'ReelId',
    'StoryId',
    'UserId',
    'MediaType',
    'PostMetadata',
    'ReelAttributes',
    'StoryAttributes',
    'UserProfile',
]
