"""
Twitter Domain

Tweets, threads, followable user profiles and engagement analytics.
"""

from .entities import Engagement, Thread, Tweet, TwitterUser, generate_insights
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

__all__ = [
    'Tweet',
    'Thread',
    'TwitterUser',
    'Engagement',
    'generate_insights',
    'TweetId',
    'ThreadId',
    'UserId',
    'TweetAttributes',
    'ThreadAttributes',
    'TwitterProfile',
    'EngagementMetrics',
    'EngagementPeriod',
    'EngagementWindow',
]
