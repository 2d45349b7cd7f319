"""
Twitter Value Objects

Identifiers, tweet and thread attributes, user profiles and the
engagement metrics snapshot.
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
    require_strings,
    require_text,
    require_timestamp,
)


@dataclass(frozen=True)
class TweetId(ContentId):
    """Tweet status id."""


@dataclass(frozen=True)
class ThreadId(ContentId):
    """Locally assigned thread id."""


@dataclass(frozen=True)
class UserId(ContentId):
    """Twitter account id."""


@dataclass(frozen=True)
class TweetAttributes(ValueObject):
    """Attributes of a captured tweet."""
    content: str
    created_at: datetime
    media_urls: Tuple[str, ...] = ()
    hashtags: Tuple[str, ...] = ()
    mentions: Tuple[str, ...] = ()
    retweet_count: int = 0
    like_count: int = 0
    reply_count: int = 0
    quote_count: int = 0
    view_count: int = 0
    is_retweet: bool = False
    original_tweet_id: Optional[TweetId] = None
    in_reply_to_tweet_id: Optional[TweetId] = None
    is_quote_tweet: bool = False
    quoted_tweet_id: Optional[TweetId] = None
    language: Optional[str] = None
    source: Optional[str] = None

    def validate(self) -> None:
        require_optional_text("content", self.content)
        require_timestamp("created_at", self.created_at)
        require_strings("media_urls", self.media_urls)
        require_strings("hashtags", self.hashtags)
        require_strings("mentions", self.mentions)
        for name in ("retweet_count", "like_count", "reply_count", "quote_count", "view_count"):
            require_non_negative(name, getattr(self, name))
        require_optional_text("language", self.language)
        require_optional_text("source", self.source)
        require_bool("is_retweet", self.is_retweet)
        require_bool("is_quote_tweet", self.is_quote_tweet)


@dataclass(frozen=True)
class ThreadAttributes(ValueObject):
    title: Optional[str] = None
    description: Optional[str] = None
    is_private: bool = False

    def validate(self) -> None:
        require_optional_text("title", self.title)
        require_optional_text("description", self.description)
        require_bool("is_private", self.is_private)


@dataclass(frozen=True)
class TwitterProfile(ValueObject):
    """Public profile of a Twitter account."""
    username: str
    display_name: str
    bio: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    profile_image_url: Optional[str] = None
    banner_image_url: Optional[str] = None
    is_verified: bool = False
    is_protected: bool = False
    followers_count: int = 0
    following_count: int = 0
    tweets_count: int = 0
    listed_count: int = 0
    joined_at: Optional[datetime] = None

    def validate(self) -> None:
        require_text("username", self.username)
        require_text("display_name", self.display_name)
        for name in ("bio", "location", "website", "profile_image_url", "banner_image_url"):
            require_optional_text(name, getattr(self, name))
        for name in ("followers_count", "following_count", "tweets_count", "listed_count"):
            require_non_negative(name, getattr(self, name))
        require_bool("is_verified", self.is_verified)
        require_bool("is_protected", self.is_protected)


class EngagementPeriod(Enum):
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class EngagementMetrics(ValueObject):
    """
    Engagement counters for one tweet over one period.

    ``engagement_rate`` is derived from engagements and impressions and is
    recomputed by the owning aggregate whenever the counters change.
    """
    impressions: int = 0
    engagements: int = 0
    engagement_rate: float = 0.0
    likes: int = 0
    retweets: int = 0
    replies: int = 0
    quotes: int = 0
    profile_clicks: int = 0
    url_clicks: int = 0
    hashtag_clicks: int = 0
    detail_expands: int = 0
    media_views: int = 0
    media_engagements: int = 0

    COUNTERS = (
        "impressions",
        "engagements",
        "likes",
        "retweets",
        "replies",
        "quotes",
        "profile_clicks",
        "url_clicks",
        "hashtag_clicks",
        "detail_expands",
        "media_views",
        "media_engagements",
    )

    def validate(self) -> None:
        for name in self.COUNTERS:
            require_non_negative(name, getattr(self, name))
        if isinstance(self.engagement_rate, bool) or not isinstance(self.engagement_rate, (int, float)):
            raise ValidationError("engagement_rate", "must be a number")
        if self.engagement_rate < 0:
            raise ValidationError("engagement_rate", "cannot be negative")


@dataclass(frozen=True)
class EngagementWindow(ValueObject):
    """Reporting window of an engagement snapshot."""
    start_date: datetime
    end_date: datetime

    def validate(self) -> None:
        require_timestamp("start_date", self.start_date)
        require_timestamp("end_date", self.end_date)
        if self.end_date < self.start_date:
            raise ValidationError("end_date", "cannot be earlier than start_date")
