"""
Aggregate Registry

Maps qualified aggregate type names (``instagram.post``) to their classes
so that producer payloads and persisted snapshots can be turned back into
aggregates without the caller knowing the concrete class.
"""

from typing import Any, Dict, Mapping, Type

from .aggregate import AggregateRoot, CapturedContent
from .errors import ValidationError
from .instagram import InstagramUser, Post, Reel, Story
from .pinterest import Board, Pin, PinterestUser
from .twitter import Engagement, Thread, Tweet, TwitterUser
from .unsplash import Artist, Collection, License, Photo
from .video import Channel, Playlist, Video

AGGREGATE_TYPES: Dict[str, Type[AggregateRoot]] = {
    cls.AGGREGATE_TYPE: cls
    for cls in (
        Post, Reel, Story, InstagramUser,
        Pin, Board, PinterestUser,
        Tweet, Thread, TwitterUser, Engagement,
        Photo, Collection, License, Artist,
        Video, Playlist, Channel,
    )
}


def aggregate_class(aggregate_type: str) -> Type[AggregateRoot]:
    """
    Resolve an aggregate class.

    Raises:
        ValidationError: If the type is unknown
    """
    try:
        return AGGREGATE_TYPES[aggregate_type]
    except (KeyError, TypeError):
        raise ValidationError("aggregate_type", f"unknown aggregate type {aggregate_type!r}")


def is_downloadable(aggregate_type: str) -> bool:
    """Check if the type follows the capture/download lifecycle."""
    return issubclass(aggregate_class(aggregate_type), CapturedContent)


def build_from_payload(aggregate_type: str, payload: Mapping[str, Any]) -> AggregateRoot:
    """Create a new aggregate from a producer payload through its named factory."""
    return aggregate_class(aggregate_type).from_payload(payload)


def restore_aggregate(data: Mapping[str, Any]) -> AggregateRoot:
    """Restore an aggregate from a ``to_dict`` snapshot without recording events."""
    if not isinstance(data, Mapping) or "aggregate_type" not in data:
        raise ValidationError("aggregate_type", "snapshot carries no aggregate type")
    return aggregate_class(data["aggregate_type"]).from_dict(dict(data))
