"""
Twitter Aggregates

Tweets follow the shared capture/download lifecycle and can be liked and
retweeted once. Threads are ordered, archivable tweet collections.
Engagement tracks analytics for a single tweet and derives insights.
"""

from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from ..aggregate import AggregateRoot, CapturedContent, optional_timestamp, require_instance, timestamp_or_none
from ..clock import format_timestamp, utcnow
from ..composites import CompositeAggregate
from ..errors import AlreadyExistsError, InvalidStateError, ValidationError
from ..events import DomainEvent
from ..policies import DownloadLifecycle
from ..profiles import FollowableProfile
from ..value_objects import freeze_tags, require_text, require_timestamp, snake_case
from .value_objects import (
    EngagementMetrics,
    EngagementPeriod,
    EngagementWindow,
    ThreadAttributes,
    ThreadId,
    TweetAttributes,
    TweetId,
    TwitterProfile,
    UserId,
)

E = TypeVar("E", bound="Engagement")

HIGH_ENGAGEMENT_RATE = 0.05
HIGH_RETWEET_RATIO = 0.3
HIGH_REPLY_RATIO = 0.2
STRONG_CLICK_THROUGH = 0.02
STRONG_MEDIA_ENGAGEMENT = 0.1
PROFILE_VISIT_RATIO = 0.01


class Tweet(CapturedContent[TweetAttributes]):
    """Captured tweet, optionally linked to a thread."""

    AGGREGATE_TYPE = "twitter.tweet"
    KIND = "tweet"
    ID_TYPE = TweetId
    OWNER_TYPE = UserId
    ATTRIBUTES_TYPE = TweetAttributes
    ENGAGEMENT_FIELDS = ("retweet_count", "like_count", "reply_count", "quote_count", "view_count")

    def __init__(
        self,
        content_id: TweetId,
        owner_id: UserId,
        attributes: TweetAttributes,
        captured_at: Optional[datetime] = None,
        lifecycle: Optional[DownloadLifecycle] = None,
        thread_id: Optional[ThreadId] = None,
    ):
        if thread_id is not None:
            require_instance("thread_id", thread_id, ThreadId)
        super().__init__(content_id, owner_id, attributes, captured_at, lifecycle)
        self._thread_id = thread_id
        self._liked_at: Optional[datetime] = None
        self._retweeted_at: Optional[datetime] = None

    @property
    def thread_id(self) -> Optional[ThreadId]:
        return self._thread_id

    @property
    def liked_at(self) -> Optional[datetime]:
        return self._liked_at

    @property
    def retweeted_at(self) -> Optional[datetime]:
        return self._retweeted_at

    def is_liked(self) -> bool:
        return self._liked_at is not None

    def is_retweeted(self) -> bool:
        return self._retweeted_at is not None

    def is_reply(self) -> bool:
        return self._attributes.in_reply_to_tweet_id is not None

    def has_media(self) -> bool:
        return bool(self._attributes.media_urls)

    def source_url(self) -> Optional[str]:
        return self._attributes.media_urls[0] if self._attributes.media_urls else None

    def like(self) -> DomainEvent:
        """
        Like the tweet.

        Raises:
            AlreadyExistsError: If the tweet is already liked
        """
        if self.is_liked():
            raise AlreadyExistsError(f"Tweet {self._id} is already liked")
        self._liked_at = utcnow()
        self._attributes = replace(self._attributes, like_count=self._attributes.like_count + 1)
        return self._record(
            "liked",
            {"author_id": str(self._owner_id), "liked_at": format_timestamp(self._liked_at)},
            occurred_at=self._liked_at,
        )

    def retweet(self) -> DomainEvent:
        """
        Retweet the tweet.

        Raises:
            AlreadyExistsError: If the tweet is already retweeted
        """
        if self.is_retweeted():
            raise AlreadyExistsError(f"Tweet {self._id} is already retweeted")
        self._retweeted_at = utcnow()
        self._attributes = replace(self._attributes, retweet_count=self._attributes.retweet_count + 1)
        return self._record(
            "retweeted",
            {"author_id": str(self._owner_id), "retweeted_at": format_timestamp(self._retweeted_at)},
            occurred_at=self._retweeted_at,
        )

    def add_hashtag(self, hashtag: str) -> None:
        require_text("hashtag", hashtag)
        self._attributes = replace(self._attributes, hashtags=freeze_tags(self._attributes.hashtags, hashtag))

    def add_mention(self, mention: str) -> None:
        require_text("mention", mention)
        self._attributes = replace(self._attributes, mentions=freeze_tags(self._attributes.mentions, mention))

    def add_to_thread(self, thread_id: ThreadId) -> None:
        require_instance("thread_id", thread_id, ThreadId)
        self._thread_id = thread_id

    def remove_from_thread(self) -> None:
        self._thread_id = None

    def _download_request_extras(self) -> Dict[str, Any]:
        return {"media_urls": list(self._attributes.media_urls)}

    def _extra_state(self) -> Dict[str, Any]:
        return {
            "thread_id": str(self._thread_id) if self._thread_id else None,
            "liked_at": timestamp_or_none(self._liked_at),
            "retweeted_at": timestamp_or_none(self._retweeted_at),
        }

    @classmethod
    def _restore_kwargs(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        return {"thread_id": ThreadId(data["thread_id"]) if data.get("thread_id") else None}

    @classmethod
    def _extra_from_payload(cls, data: Dict[str, Any]) -> Dict[str, Any]:
        if not data.get("thread_id"):
            return {}
        try:
            return {"thread_id": ThreadId(data["thread_id"])}
        except ValidationError as e:
            raise ValidationError("thread_id", e.reason)

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        self._liked_at = optional_timestamp(data, "liked_at")
        self._retweeted_at = optional_timestamp(data, "retweeted_at")


class Thread(CompositeAggregate):
    """
    Ordered thread of tweets.

    Archived threads accept no new tweets. Reordering must be an exact
    permutation of the current tweets; a rejected reorder changes nothing.
    """

    AGGREGATE_TYPE = "twitter.thread"
    KIND = "thread"
    ID_TYPE = ThreadId
    OWNER_TYPE = UserId
    OWNER_KEY = "author_id"
    ATTRIBUTES_TYPE = ThreadAttributes
    MEMBER_TYPE = TweetId
    MEMBER_LABEL = "tweet"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._archived_at: Optional[datetime] = None

    @property
    def tweet_ids(self) -> Tuple[TweetId, ...]:
        return self.member_ids

    @property
    def tweet_count(self) -> int:
        return self.member_count

    @property
    def archived_at(self) -> Optional[datetime]:
        return self._archived_at

    @property
    def first_tweet_id(self) -> Optional[TweetId]:
        members = self.member_ids
        return members[0] if members else None

    @property
    def last_tweet_id(self) -> Optional[TweetId]:
        members = self.member_ids
        return members[-1] if members else None

    def is_archived(self) -> bool:
        return self._archived_at is not None

    def is_empty(self) -> bool:
        return self.member_count == 0

    def is_private(self) -> bool:
        return self._attributes.is_private

    def add_tweet(self, tweet_id: TweetId) -> DomainEvent:
        """
        Append a tweet.

        Raises:
            AlreadyExistsError: If the tweet is already in the thread
            InvalidStateError: If the thread is archived
        """
        require_instance("tweet_ids", tweet_id, TweetId)
        if self.has_member(tweet_id):
            raise AlreadyExistsError(f"Tweet {tweet_id} is already in thread {self._id}")
        if self.is_archived():
            raise InvalidStateError(f"Cannot add tweet to archived thread {self._id}")
        self._add_member(tweet_id)
        return self._record(
            "tweet_added",
            {"author_id": str(self._owner_id), "tweet_id": str(tweet_id), "position": self.member_count - 1},
        )

    def remove_tweet(self, tweet_id: TweetId) -> None:
        """
        Raises:
            NotAMemberError: If the tweet is not in the thread
        """
        self._remove_member(tweet_id)

    def reorder_tweets(self, new_order: List[TweetId]) -> None:
        """
        Raises:
            InvalidStateError: Unless ``new_order`` is a permutation of the
                current tweets
        """
        self._members.reorder(new_order)
        self._updated_at = utcnow()

    def archive(self) -> DomainEvent:
        """
        Raises:
            InvalidStateError: If the thread is already archived
        """
        if self.is_archived():
            raise InvalidStateError(f"Thread {self._id} is already archived")
        self._archived_at = utcnow()
        return self._record(
            "archived",
            {"author_id": str(self._owner_id), "archived_at": format_timestamp(self._archived_at)},
            occurred_at=self._archived_at,
        )

    def unarchive(self) -> None:
        self._archived_at = None

    def make_private(self) -> None:
        self._replace_attributes(replace(self._attributes, is_private=True))

    def make_public(self) -> None:
        self._replace_attributes(replace(self._attributes, is_private=False))

    def update_metadata(self, title: Optional[str] = None, description: Optional[str] = None) -> None:
        """Change title and/or description; no event."""
        changes = {}
        if title is not None:
            changes["title"] = title
        if description is not None:
            changes["description"] = description
        if changes:
            self._replace_attributes(replace(self._attributes, **changes))

    def _extra_state(self) -> Dict[str, Any]:
        return {"archived_at": timestamp_or_none(self._archived_at)}

    def _restore_flags(self, data: Dict[str, Any]) -> None:
        self._archived_at = optional_timestamp(data, "archived_at")


class TwitterUser(FollowableProfile):
    """Twitter account the local user can follow."""

    AGGREGATE_TYPE = "twitter.user"
    KIND = "user"
    ID_TYPE = UserId
    PROFILE_TYPE = TwitterProfile
    STAT_FIELDS = ("followers_count", "following_count", "tweets_count", "listed_count")

    @property
    def username(self) -> str:
        return self._profile.username

    def is_verified(self) -> bool:
        return self._profile.is_verified

    def is_protected(self) -> bool:
        return self._profile.is_protected

    def verify(self) -> None:
        self._set_profile_flag("is_verified", True)

    def protect(self) -> None:
        self._set_profile_flag("is_protected", True)

    def unprotect(self) -> None:
        self._set_profile_flag("is_protected", False)


class Engagement(AggregateRoot):
    """
    Engagement analytics for one tweet over one period.

    Identified by the tweet id. Metric refreshes recompute the engagement
    rate silently; ``analyze()`` derives insights and records
    ``engagement.analyzed``.
    """

    AGGREGATE_TYPE = "twitter.engagement"
    KIND = "engagement"

    def __init__(
        self,
        tweet_id: TweetId,
        author_id: UserId,
        metrics: EngagementMetrics,
        period: EngagementPeriod,
        start_date: datetime,
        end_date: datetime,
        analyzed_at: Optional[datetime] = None,
        insights: Tuple[str, ...] = (),
    ):
        require_instance("tweet_id", tweet_id, TweetId)
        require_instance("author_id", author_id, UserId)
        require_instance("metrics", metrics, EngagementMetrics)
        require_instance("period", period, EngagementPeriod)
        require_timestamp("start_date", start_date)
        require_timestamp("end_date", end_date)
        if end_date < start_date:
            raise ValidationError("end_date", "cannot be earlier than start_date")
        super().__init__(tweet_id)
        self._author_id = author_id
        self._metrics = metrics
        self._period = period
        self._start_date = start_date
        self._end_date = end_date
        self._analyzed_at = analyzed_at
        self._insights: List[str] = list(insights)

    @classmethod
    def create(
        cls: Type[E],
        tweet_id: TweetId,
        author_id: UserId,
        metrics: EngagementMetrics,
        period: EngagementPeriod,
        start_date: datetime,
        end_date: datetime,
    ) -> E:
        """Start tracking; records ``engagement.tracked``."""
        item = cls(tweet_id, author_id, _with_rate(metrics), period, start_date, end_date)
        item._record(
            "tracked",
            {"author_id": str(author_id), "period": period.value, "metrics": item._metrics.to_dict()},
        )
        return item

    @classmethod
    def from_payload(cls: Type[E], payload: Dict[str, Any]) -> E:
        """
        Create from ``{"tweetId", "authorId", "metrics", "period",
        "startDate", "endDate"}``.
        """
        if not isinstance(payload, dict):
            raise ValidationError("payload", "must be an object")
        data = {snake_case(str(key)): value for key, value in payload.items()}
        for key in ("tweet_id", "author_id", "period", "start_date", "end_date"):
            if data.get(key) is None:
                raise ValidationError(key, "is required")
        try:
            period = EngagementPeriod(data["period"])
        except ValueError:
            raise ValidationError("period", f"must be one of hour, day, week, month, got {data['period']!r}")
        bounds = EngagementWindow.from_payload(data)
        try:
            author_id = UserId(data["author_id"])
        except ValidationError as e:
            raise ValidationError("author_id", e.reason)
        return cls.create(
            TweetId(data["tweet_id"]),
            author_id,
            EngagementMetrics.from_payload(data.get("metrics") or {}),
            period,
            bounds.start_date,
            bounds.end_date,
        )

    @property
    def tweet_id(self) -> TweetId:
        return self._id

    @property
    def author_id(self) -> UserId:
        return self._author_id

    @property
    def metrics(self) -> EngagementMetrics:
        return self._metrics

    @property
    def period(self) -> EngagementPeriod:
        return self._period

    @property
    def engagement_rate(self) -> float:
        return self._metrics.engagement_rate

    @property
    def analyzed_at(self) -> Optional[datetime]:
        return self._analyzed_at

    @property
    def insights(self) -> Tuple[str, ...]:
        return tuple(self._insights)

    def is_analyzed(self) -> bool:
        return self._analyzed_at is not None

    def update_metrics(self, **counters: int) -> None:
        """
        Merge fresh counters and recompute the engagement rate; no event.

        Raises:
            ValidationError: For unknown or negative counters (nothing changes)
        """
        for name in counters:
            if name not in EngagementMetrics.COUNTERS:
                raise ValidationError(name, "is not an engagement metric")
        self._metrics = _with_rate(replace(self._metrics, **counters))

    def analyze(self) -> DomainEvent:
        """
        Derive insights from the current metrics.

        Returns:
            The recorded ``engagement.analyzed`` event
        """
        self._analyzed_at = utcnow()
        self._insights = generate_insights(self._metrics)
        return self._record(
            "analyzed",
            {
                "author_id": str(self._author_id),
                "metrics": self._metrics.to_dict(),
                "insights": list(self._insights),
                "analyzed_at": format_timestamp(self._analyzed_at),
            },
            occurred_at=self._analyzed_at,
        )

    def add_custom_insight(self, insight: str) -> None:
        require_text("insight", insight)
        if insight not in self._insights:
            self._insights.append(insight)

    def remove_insight(self, insight: str) -> None:
        self._insights = [i for i in self._insights if i != insight]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aggregate_type": self.AGGREGATE_TYPE,
            "id": str(self._id),
            "author_id": str(self._author_id),
            "metrics": self._metrics.to_dict(),
            "period": self._period.value,
            "start_date": format_timestamp(self._start_date),
            "end_date": format_timestamp(self._end_date),
            "analyzed_at": timestamp_or_none(self._analyzed_at),
            "insights": list(self._insights),
        }

    @classmethod
    def from_dict(cls: Type[E], data: Dict[str, Any]) -> E:
        bounds = EngagementWindow.from_payload(data)
        return cls(
            TweetId(data["id"]),
            UserId(data["author_id"]),
            EngagementMetrics.from_payload(data.get("metrics") or {}),
            EngagementPeriod(data["period"]),
            bounds.start_date,
            bounds.end_date,
            analyzed_at=optional_timestamp(data, "analyzed_at"),
            insights=tuple(data.get("insights") or ()),
        )


def _with_rate(metrics: EngagementMetrics) -> EngagementMetrics:
    if metrics.impressions > 0:
        return replace(metrics, engagement_rate=metrics.engagements / metrics.impressions)
    return metrics


def generate_insights(metrics: EngagementMetrics) -> List[str]:
    """Rule-based insights for a metrics snapshot."""
    insights = []
    if metrics.engagement_rate > HIGH_ENGAGEMENT_RATE:
        insights.append("High engagement rate - content resonates well with audience")
    if metrics.retweets > metrics.likes * HIGH_RETWEET_RATIO:
        insights.append("High retweet ratio - content is highly shareable")
    if metrics.replies > metrics.likes * HIGH_REPLY_RATIO:
        insights.append("High reply ratio - content sparks conversation")
    if metrics.impressions > 0 and metrics.url_clicks / metrics.impressions > STRONG_CLICK_THROUGH:
        insights.append("Strong click-through rate on links")
    if metrics.media_views > 0 and metrics.media_engagements / metrics.media_views > STRONG_MEDIA_ENGAGEMENT:
        insights.append("Media content performs well")
    if metrics.profile_clicks > metrics.impressions * PROFILE_VISIT_RATIO:
        insights.append("Content drives profile visits")
    return insights
