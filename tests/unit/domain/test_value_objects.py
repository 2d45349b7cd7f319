"""
Unit tests for value objects.

Covers id validation and platform formats, payload coercion, and the
conditional invariants of attribute bundles.
"""

from dataclasses import FrozenInstanceError, replace
from datetime import datetime, timedelta, timezone

import pytest

from media_capture.domain.errors import ValidationError
from media_capture.domain.instagram import MediaType, PostId, PostMetadata, StoryAttributes, UserProfile
from media_capture.domain.pinterest import BoardAttributes, PinId, PinMetadata
from media_capture.domain.registry import build_from_payload
from media_capture.domain.twitter import ThreadAttributes, TweetAttributes, TweetId, TwitterProfile, UserId as TwitterUserId
from media_capture.domain.unsplash import (
    ArtistId,
    ArtistProfile,
    CollectionAttributes,
    LicenseId,
    LicenseTerms,
    LicenseType,
    PhotoId,
    RevenueModel,
)
from media_capture.domain.value_objects import ContentId, require_bool, snake_case
from media_capture.domain.video import ChannelId, PlaylistAttributes, PlaylistId, VideoId, VideoMetadata, VideoQuality
from tests.fixtures.domain_fixtures import (
    CAPTURED_AT,
    CHANNEL_ID,
    PLAYLIST_ID,
    VIDEO_ID,
    license_terms,
    post_metadata,
    story_attributes,
    tweet_attributes,
)


class TestContentId:
    """Test the shared identifier base."""

    def test_valid_id(self):
        """
        Test that a non-empty string constructs an id.
        """
        # Act
        post_id = PostId("CxYz123")

        # Assert
        assert post_id.value == "CxYz123"
        assert str(post_id) == "CxYz123"

    @pytest.mark.parametrize("value", ["", None, 42])
    def test_invalid_id_rejected(self, value):
        """
        Test that empty and non-string ids are rejected naming the id field.
        """
        with pytest.raises(ValidationError) as exc_info:
            PostId(value)

        assert exc_info.value.field == "id"

    def test_ids_are_structurally_equal_and_hashable(self):
        # Arrange
        first = PostId("a")
        second = PostId("a")

        # Assert
        assert first == second
        assert len({first, second}) == 1

    def test_ids_of_different_platform_types_differ(self):
        assert PostId("a") != TwitterUserId("a")

    def test_ids_are_immutable(self):
        post_id = PostId("a")

        with pytest.raises(FrozenInstanceError):
            post_id.value = "b"


class TestPlatformIdFormats:
    """Test platform-specific identifier formats."""

    def test_pin_id_must_be_numeric(self):
        """
        Test that pin ids accept digits only.

        Verifies that "abc123" fails and "123456" succeeds.
        """
        with pytest.raises(ValidationError):
            PinId("abc123")

        assert PinId("123456").value == "123456"

    @pytest.mark.parametrize("pin_id", ["\u0661\u0662\u0663", "\uff11\uff12\uff13", "12\u00b3"])
    def test_pin_id_rejects_non_ascii_digits(self, pin_id):
        """
        Test that digits from other scripts are not accepted as pin ids.
        """
        with pytest.raises(ValidationError) as exc_info:
            PinId(pin_id)

        assert exc_info.value.field == "id"

    def test_video_id_is_eleven_url_safe_characters(self):
        assert VideoId(VIDEO_ID).value == VIDEO_ID

        with pytest.raises(ValidationError):
            VideoId("short")
        with pytest.raises(ValidationError):
            VideoId("dQw4w9WgXc!")

    def test_playlist_id_format(self):
        assert PlaylistId(PLAYLIST_ID).value.startswith("PL")

        with pytest.raises(ValidationError):
            PlaylistId("PL123")

    def test_channel_id_format(self):
        assert ChannelId(CHANNEL_ID).value.startswith("UC")

        with pytest.raises(ValidationError):
            ChannelId("XX" + "a" * 22)

    def test_license_id_combines_photo_and_artist(self):
        license_id = LicenseId.for_pair(PhotoId("abc"), ArtistId("artist_1"))

        assert license_id.value == "abc:artist_1"


class TestPayloadCoercion:
    """Test building value objects from raw producer payloads."""

    def test_snake_case(self):
        assert snake_case("videoUrl") == "video_url"
        assert snake_case("likes_count") == "likes_count"

    def test_from_payload_accepts_camel_case_keys(self):
        """
        Test that camelCase keys map onto snake_case fields.
        """
        # Arrange
        payload = {
            "caption": "Hello",
            "imageUrl": "https://cdn.example.com/1.jpg",
            "timestamp": "2024-01-15T12:00:00Z",
            "likesCount": 3,
            "hashtags": ["a", "b"],
        }

        # Act
        metadata = PostMetadata.from_payload(payload)

        # Assert
        assert metadata.image_url == "https://cdn.example.com/1.jpg"
        assert metadata.likes_count == 3
        assert metadata.hashtags == ("a", "b")
        assert metadata.timestamp == CAPTURED_AT

    def test_from_payload_accepts_epoch_milliseconds(self):
        payload = {"caption": "Hello", "image_url": "https://x/1.jpg", "timestamp": 1705320000000}

        metadata = PostMetadata.from_payload(payload)

        assert metadata.timestamp == datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)

    def test_from_payload_names_missing_field(self):
        with pytest.raises(ValidationError) as exc_info:
            PostMetadata.from_payload({"caption": "Hello", "timestamp": "2024-01-15T12:00:00Z"})

        assert exc_info.value.field == "image_url"

    def test_missing_video_url_reports_producer_key(self):
        """
        Test that a payload error names both the attribute and the camelCase key.
        """
        # Arrange
        payload = {"caption": "c", "imageUrl": "u", "timestamp": "2024-01-15T12:00:00Z", "isVideo": True}

        # Act
        with pytest.raises(ValidationError) as exc_info:
            PostMetadata.from_payload(payload)

        # Assert
        assert exc_info.value.field == "video_url"
        assert exc_info.value.payload_key == "videoUrl"

    def test_from_payload_names_malformed_timestamp(self):
        with pytest.raises(ValidationError) as exc_info:
            PostMetadata.from_payload({"caption": "c", "imageUrl": "u", "timestamp": "yesterday"})

        assert exc_info.value.field == "timestamp"

    def test_from_payload_rejects_unknown_enum_value(self):
        payload = {
            "mediaUrl": "https://x/1.jpg",
            "mediaType": "gif",
            "timestamp": "2024-01-15T12:00:00Z",
            "expiresAt": "2024-01-16T12:00:00Z",
        }

        with pytest.raises(ValidationError) as exc_info:
            StoryAttributes.from_payload(payload)

        assert exc_info.value.field == "media_type"

    def test_nested_ids_are_coerced(self):
        attributes = TweetAttributes.from_payload({
            "content": "reply",
            "createdAt": "2024-01-15T12:00:00Z",
            "inReplyToTweetId": "1750000000000000000",
        })

        assert attributes.in_reply_to_tweet_id == TweetId("1750000000000000000")

    def test_to_dict_round_trips_through_from_payload(self):
        # Arrange
        metadata = post_metadata(location="Lisbon")

        # Act
        restored = PostMetadata.from_payload(metadata.to_dict())

        # Assert
        assert restored == metadata

    def test_naive_datetimes_are_treated_as_utc(self):
        metadata = post_metadata(timestamp=datetime(2024, 1, 15, 12, 0))

        assert metadata.timestamp == CAPTURED_AT


class TestAttributeInvariants:
    """Test conditional and counter invariants of attribute bundles."""

    def test_video_post_requires_video_url(self):
        """
        Test that a video post without a video URL fails naming video_url.
        """
        with pytest.raises(ValidationError) as exc_info:
            post_metadata(is_video=True)

        assert exc_info.value.field == "video_url"

    def test_video_post_with_video_url(self):
        metadata = post_metadata(is_video=True, video_url="https://cdn.example.com/v.mp4")

        assert metadata.is_video

    def test_negative_counter_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            post_metadata(likes_count=-1)

        assert exc_info.value.field == "likes_count"

    def test_replace_revalidates(self):
        metadata = post_metadata()

        with pytest.raises(ValidationError):
            replace(metadata, comments_count=-5)

    def test_story_cannot_expire_before_it_was_posted(self):
        with pytest.raises(ValidationError) as exc_info:
            StoryAttributes(
                media_url="https://x/1.jpg",
                media_type=MediaType.VIDEO,
                timestamp=CAPTURED_AT,
                expires_at=CAPTURED_AT - timedelta(seconds=1),
            )

        assert exc_info.value.field == "expires_at"

    @pytest.mark.parametrize("limit", [2.5, 0, -1, True, "3"])
    def test_download_limit_must_be_positive_integer(self, limit):
        with pytest.raises(ValidationError) as exc_info:
            license_terms(download_limit=limit)

        assert exc_info.value.field == "download_limit"

    def test_download_limit_accepts_whole_numbers(self):
        assert license_terms(download_limit=3).download_limit == 3
        assert license_terms().download_limit is None

    def test_pin_aspect_helpers(self):
        metadata = PinMetadata(
            title="t", image_url="i", original_image_url="o",
            width=1200, height=800, created_at=CAPTURED_AT, creator_name="c",
        )

        assert metadata.is_landscape()
        assert not metadata.is_portrait()
        assert metadata.aspect_ratio == pytest.approx(1.5)

    def test_video_duration_formatting(self):
        short = VideoMetadata(
            title="t", duration=213, published_at=CAPTURED_AT, channel_title="c", thumbnail_url="u"
        )
        long = replace(short, duration=3725)

        assert short.formatted_duration() == "3:33"
        assert long.formatted_duration() == "1:02:05"

    def test_video_quality(self):
        assert VideoQuality.FULL_HD.is_high_definition()
        assert not VideoQuality.MEDIUM.is_high_definition()
        assert VideoQuality.FOUR_K.resolution == "2160p"


class TestRevenueModel:
    """Test the license revenue split."""

    def test_shares_summing_to_100(self):
        model = RevenueModel(author_share=70, platform_share=25, affiliate_share=5)

        assert model.total == 100
        assert model.split(200) == {
            "author_share": 140,
            "platform_share": 50,
            "affiliate_share": 10,
            "charity_share": 0,
        }

    @pytest.mark.parametrize("author_share", [69, 71])
    def test_shares_not_summing_to_100_rejected(self, author_share):
        """
        Test that totals of 99 and 101 are rejected.
        """
        with pytest.raises(ValidationError) as exc_info:
            RevenueModel(author_share=author_share, platform_share=30)

        assert exc_info.value.field == "revenue_model"

    def test_negative_share_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            RevenueModel(author_share=110, platform_share=-10)

        assert exc_info.value.field == "platform_share"

    def test_fractional_shares(self):
        model = RevenueModel(author_share=33.3, platform_share=33.3, charity_share=33.4)

        assert model.total == pytest.approx(100)

    def test_terms_carry_nested_revenue_model(self):
        # Arrange
        terms = LicenseTerms(
            license_type=LicenseType.PREMIUM,
            name="Premium",
            revenue_model=RevenueModel(author_share=50, platform_share=50),
        )

        # Act
        restored = LicenseTerms.from_payload(terms.to_dict())

        # Assert
        assert restored == terms
        assert restored.revenue_model.author_share == 50

    def test_download_limit_must_be_positive(self):
        with pytest.raises(ValidationError) as exc_info:
            LicenseTerms(license_type=LicenseType.FREE, name="Free", download_limit=0)

        assert exc_info.value.field == "download_limit"


class TestBooleanFlags:
    """Test that flag fields only accept real booleans."""

    def test_require_bool(self):
        require_bool("is_private", False)

        with pytest.raises(ValidationError) as exc_info:
            require_bool("is_private", "false")

        assert exc_info.value.field == "is_private"
        assert exc_info.value.reason == "must be a boolean"

    @pytest.mark.parametrize("build, field", [
        (lambda flag: post_metadata(is_video=flag, video_url="https://cdn.example.com/v.mp4"), "is_video"),
        (lambda flag: story_attributes(is_highlighted=flag), "is_highlighted"),
        (lambda flag: UserProfile(username="u", display_name="U", is_verified=flag), "is_verified"),
        (lambda flag: UserProfile(username="u", display_name="U", is_private=flag), "is_private"),
        (lambda flag: BoardAttributes(name="Cabins", is_private=flag), "is_private"),
        (lambda flag: tweet_attributes(is_retweet=flag), "is_retweet"),
        (lambda flag: tweet_attributes(is_quote_tweet=flag), "is_quote_tweet"),
        (lambda flag: ThreadAttributes(title="Notes", is_private=flag), "is_private"),
        (lambda flag: TwitterProfile(username="u", display_name="U", is_verified=flag), "is_verified"),
        (lambda flag: TwitterProfile(username="u", display_name="U", is_protected=flag), "is_protected"),
        (lambda flag: CollectionAttributes(title="Fog", is_private=flag), "is_private"),
        (lambda flag: ArtistProfile(username="u", first_name="A", is_for_hire=flag), "is_for_hire"),
        (lambda flag: ArtistProfile(username="u", first_name="A", accepts_donations=flag), "accepts_donations"),
        (lambda flag: license_terms(allows_commercial_use=flag), "allows_commercial_use"),
        (lambda flag: license_terms(requires_attribution=flag), "requires_attribution"),
        (lambda flag: license_terms(allows_modification=flag), "allows_modification"),
        (lambda flag: license_terms(allows_distribution=flag), "allows_distribution"),
        (lambda flag: PlaylistAttributes(title="Favourites", is_public=flag), "is_public"),
    ])
    def test_string_flag_is_rejected(self, build, field):
        """
        Test that a string where a flag belongs fails naming that flag.
        """
        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            build("false")
        assert exc_info.value.field == field

        # Real booleans are accepted
        build(True)
        build(False)

    def test_playlist_payload_with_string_visibility(self):
        payload = {
            "id": PLAYLIST_ID,
            "channelId": CHANNEL_ID,
            "attributes": {"title": "Favourites", "isPublic": "no"},
        }

        with pytest.raises(ValidationError) as exc_info:
            build_from_payload("video.playlist", payload)

        assert exc_info.value.field == "is_public"

    def test_thread_payload_with_string_privacy(self):
        payload = {
            "id": "thread_1",
            "authorId": "author_1",
            "attributes": {"title": "Release notes", "isPrivate": "false"},
        }

        with pytest.raises(ValidationError) as exc_info:
            build_from_payload("twitter.thread", payload)

        assert exc_info.value.field == "is_private"
