"""
Domain Builders

Functions that build valid value objects, aggregates and producer
payloads with overridable defaults.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from media_capture.domain.clock import utcnow
from media_capture.domain.instagram import (
    InstagramUser,
    MediaType,
    Post,
    PostId,
    PostMetadata,
    Reel,
    ReelAttributes,
    ReelId,
    Story,
    StoryAttributes,
    StoryId,
    UserId as InstagramUserId,
    UserProfile,
)
from media_capture.domain.pinterest import Board, BoardAttributes, BoardId, Pin, PinId, PinMetadata
from media_capture.domain.pinterest import UserId as PinterestUserId
from media_capture.domain.twitter import (
    Engagement,
    EngagementMetrics,
    EngagementPeriod,
    Thread,
    ThreadAttributes,
    ThreadId,
    Tweet,
    TweetAttributes,
    TweetId,
    TwitterProfile,
    TwitterUser,
)
from media_capture.domain.twitter import UserId as TwitterUserId
from media_capture.domain.unsplash import (
    Artist,
    ArtistId,
    ArtistProfile,
    Collection,
    CollectionAttributes,
    CollectionId,
    License,
    LicenseTerms,
    LicenseType,
    Photo,
    PhotoAttributes,
    PhotoId,
)
from media_capture.domain.video import (
    Channel,
    ChannelId,
    ChannelProfile,
    Playlist,
    PlaylistAttributes,
    PlaylistId,
    Video,
    VideoId,
    VideoMetadata,
)

CAPTURED_AT = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

VIDEO_ID = "dQw4w9WgXcQ"
CHANNEL_ID = "UC" + "abcdefghijk" * 2
PLAYLIST_ID = "PL" + "0123456789abcdef" * 2


# =============================================================================
# Instagram
# =============================================================================

def post_metadata(**overrides: Any) -> PostMetadata:
    values = dict(
        caption="Sunset over the bay",
        image_url="https://cdn.example.com/p/CxYz123.jpg",
        timestamp=CAPTURED_AT,
        likes_count=120,
        comments_count=8,
        hashtags=("sunset", "bay"),
    )
    values.update(overrides)
    return PostMetadata(**values)


def post_payload(post_id: str = "CxYz123", **attribute_overrides: Any) -> Dict[str, Any]:
    """Payload as sent by the browser extension (camelCase keys)."""
    attributes = {
        "caption": "Sunset over the bay",
        "imageUrl": "https://cdn.example.com/p/CxYz123.jpg",
        "timestamp": "2024-01-15T12:00:00Z",
        "likesCount": 120,
        "commentsCount": 8,
        "hashtags": ["sunset", "bay"],
    }
    attributes.update(attribute_overrides)
    return {"id": post_id, "authorId": "user_1", "attributes": attributes}


def make_post(post_id: str = "CxYz123", **overrides: Any) -> Post:
    return Post.capture(PostId(post_id), InstagramUserId("user_1"), post_metadata(**overrides))


def reel_attributes(**overrides: Any) -> ReelAttributes:
    values = dict(
        video_url="https://cdn.example.com/r/1.mp4",
        thumbnail_url="https://cdn.example.com/r/1.jpg",
        caption="Morning run",
        duration=15.5,
        timestamp=CAPTURED_AT,
        views_count=1000,
        likes_count=50,
    )
    values.update(overrides)
    return ReelAttributes(**values)


def make_reel(reel_id: str = "Reel001", **overrides: Any) -> Reel:
    return Reel.capture(ReelId(reel_id), InstagramUserId("user_1"), reel_attributes(**overrides))


def story_attributes(expires_in: timedelta = timedelta(hours=12), **overrides: Any) -> StoryAttributes:
    """Story posted two days ago that expires ``expires_in`` from now."""
    now = utcnow()
    values = dict(
        media_url="https://cdn.example.com/s/1.jpg",
        media_type=MediaType.IMAGE,
        timestamp=now - timedelta(days=2),
        expires_at=now + expires_in,
    )
    values.update(overrides)
    return StoryAttributes(**values)


def make_story(expires_in: timedelta = timedelta(hours=12), story_id: str = "story_1") -> Story:
    return Story.capture(StoryId(story_id), InstagramUserId("user_1"), story_attributes(expires_in))


def make_instagram_user(user_id: str = "user_1", **overrides: Any) -> InstagramUser:
    values = dict(username="bay_photos", display_name="Bay Photos", followers_count=300)
    values.update(overrides)
    return InstagramUser.create(InstagramUserId(user_id), UserProfile(**values))


# =============================================================================
# Pinterest
# =============================================================================

def pin_metadata(**overrides: Any) -> PinMetadata:
    values = dict(
        title="Cabin interior",
        image_url="https://i.pinimg.com/236x/1.jpg",
        original_image_url="https://i.pinimg.com/originals/1.jpg",
        width=800,
        height=1200,
        created_at=CAPTURED_AT,
        creator_name="Cabin Life",
    )
    values.update(overrides)
    return PinMetadata(**values)


def make_pin(pin_id: str = "123456", **overrides: Any) -> Pin:
    return Pin.capture(PinId(pin_id), PinterestUserId("creator_1"), pin_metadata(**overrides))


def make_board(pin_count: int = 0, board_id: str = "board_1") -> Board:
    pins = [PinId(str(1000 + i)) for i in range(pin_count)]
    return Board.create(BoardId(board_id), PinterestUserId("creator_1"), BoardAttributes(name="Cabins"), pins)


# =============================================================================
# Twitter
# =============================================================================

def tweet_attributes(**overrides: Any) -> TweetAttributes:
    values = dict(
        content="Shipping the new release today",
        created_at=CAPTURED_AT,
        media_urls=("https://pbs.twimg.com/media/1.jpg",),
        like_count=10,
        retweet_count=2,
    )
    values.update(overrides)
    return TweetAttributes(**values)


def make_tweet(tweet_id: str = "1750000000000000001", **overrides: Any) -> Tweet:
    return Tweet.capture(TweetId(tweet_id), TwitterUserId("author_1"), tweet_attributes(**overrides))


def make_thread(tweet_count: int = 0, thread_id: str = "thread_1") -> Thread:
    tweets = [TweetId(str(1750000000000000100 + i)) for i in range(tweet_count)]
    return Thread.create(ThreadId(thread_id), TwitterUserId("author_1"), ThreadAttributes(title="Release notes"), tweets)


def make_twitter_user(user_id: str = "author_1") -> TwitterUser:
    return TwitterUser.create(TwitterUserId(user_id), TwitterProfile(username="builder", display_name="Builder"))


def make_engagement(**metric_overrides: Any) -> Engagement:
    values = dict(impressions=1000, engagements=80, likes=40, retweets=5, replies=2)
    values.update(metric_overrides)
    return Engagement.create(
        TweetId("1750000000000000001"),
        TwitterUserId("author_1"),
        EngagementMetrics(**values),
        EngagementPeriod.DAY,
        CAPTURED_AT,
        CAPTURED_AT + timedelta(days=1),
    )


# =============================================================================
# Unsplash
# =============================================================================

def photo_attributes(**overrides: Any) -> PhotoAttributes:
    values = dict(
        title="Fog in the valley",
        url="https://unsplash.com/photos/abc",
        download_url="https://unsplash.com/photos/abc/download",
        thumbnail_url="https://images.unsplash.com/abc?w=200",
        width=6000,
        height=4000,
        created_at=CAPTURED_AT,
        likes=25,
    )
    values.update(overrides)
    return PhotoAttributes(**values)


def make_photo(photo_id: str = "abc", **overrides: Any) -> Photo:
    return Photo.capture(PhotoId(photo_id), ArtistId("artist_1"), photo_attributes(**overrides))


def make_collection(photo_count: int = 0, collection_id: str = "col_1") -> Collection:
    photos = [PhotoId(f"photo_{i}") for i in range(photo_count)]
    return Collection.create(
        CollectionId(collection_id), ArtistId("curator_1"), CollectionAttributes(title="Fog"), photos
    )


def license_terms(**overrides: Any) -> LicenseTerms:
    values = dict(license_type=LicenseType.PLUS, name="Unsplash+", allows_commercial_use=True)
    values.update(overrides)
    return LicenseTerms(**values)


def make_license(**term_overrides: Any) -> License:
    return License.create(PhotoId("abc"), ArtistId("artist_1"), license_terms(**term_overrides))


def make_artist(artist_id: str = "artist_1") -> Artist:
    return Artist.create(ArtistId(artist_id), ArtistProfile(username="fogshots", first_name="Ana", last_name="Lima"))


# =============================================================================
# Video
# =============================================================================

def video_metadata(**overrides: Any) -> VideoMetadata:
    values = dict(
        title="Never Gonna Give You Up",
        duration=213,
        published_at=CAPTURED_AT,
        channel_title="Rick Astley",
        thumbnail_url="https://i.ytimg.com/vi/dQw4w9WgXcQ/hqdefault.jpg",
        view_count=1000,
    )
    values.update(overrides)
    return VideoMetadata(**values)


def make_video(video_id: str = VIDEO_ID, **overrides: Any) -> Video:
    return Video.capture(VideoId(video_id), ChannelId(CHANNEL_ID), video_metadata(**overrides))


def make_playlist(video_ids=()) -> Playlist:
    return Playlist.create(
        PlaylistId(PLAYLIST_ID), ChannelId(CHANNEL_ID), PlaylistAttributes(title="Favourites"),
        [VideoId(v) for v in video_ids],
    )


def make_channel() -> Channel:
    return Channel.create(ChannelId(CHANNEL_ID), ChannelProfile(name="Rick Astley", subscriber_count=100))
