"""
Unit tests for environment-driven configuration.
"""

import logging
from unittest.mock import MagicMock

import pytest

from media_capture.application.errors import ApplicationError, ErrorCategory
from media_capture.config.capture_config import CaptureConfig
from media_capture.config.celery_config import (
    CALLBACK_QUEUE,
    COMPLETE_DOWNLOAD_TASK,
    DOWNLOAD_CONTENT_TASK,
    DOWNLOAD_QUEUE,
    CeleryConfig,
    make_celery,
)
from media_capture.config.logging_config import configure_logging
from media_capture.config import redis_config
from media_capture.config.redis_config import RedisConfig


class TestCaptureConfig:

    def test_defaults(self, monkeypatch):
        for name in (
            "CAPTURE_BACKEND", "CAPTURE_KEY_PREFIX", "CAPTURE_SNAPSHOT_TTL",
            "CAPTURE_LOCK_TIMEOUT", "CAPTURE_LOCK_LEASE", "CAPTURE_DISPATCH_DOWNLOADS",
        ):
            monkeypatch.delenv(name, raising=False)

        config = CaptureConfig()

        assert config.use_redis
        assert config.key_prefix == "media_capture"
        assert config.snapshot_ttl is None
        assert config.lock_timeout == 10.0
        assert config.lock_lease == 30
        assert config.dispatch_downloads is True

    def test_environment_overrides(self, monkeypatch):
        """
        Test that every setting is read from its environment variable.
        """
        # Arrange
        monkeypatch.setenv("CAPTURE_BACKEND", " Memory ")
        monkeypatch.setenv("CAPTURE_SNAPSHOT_TTL", "600")
        monkeypatch.setenv("CAPTURE_LOCK_TIMEOUT", "2.5")
        monkeypatch.setenv("CAPTURE_DISPATCH_DOWNLOADS", "off")

        # Act
        config = CaptureConfig()

        # Assert
        assert config.backend == "memory"
        assert not config.use_redis
        assert config.snapshot_ttl == 600
        assert config.lock_timeout == 2.5
        assert config.dispatch_downloads is False


class TestRedisConfig:

    def test_url_overrides_host_settings(self, monkeypatch):
        monkeypatch.setenv("REDIS_HOST", "localhost")
        monkeypatch.setenv("REDIS_URL", "redis://:secret@cache.internal:6380/3")

        config = RedisConfig()

        assert config.host == "cache.internal"
        assert config.port == 6380
        assert config.db == 3
        assert config.password == "secret"

    def test_plain_settings(self, monkeypatch):
        monkeypatch.delenv("REDIS_URL", raising=False)
        monkeypatch.setenv("REDIS_HOST", "redis")
        monkeypatch.setenv("REDIS_PORT", "6390")

        config = RedisConfig()

        assert (config.host, config.port) == ("redis", 6390)


class TestRedisConnection:
    """Test opening and closing the shared Redis pool."""

    @pytest.fixture(autouse=True)
    def no_shared_pool(self, monkeypatch):
        monkeypatch.setattr(redis_config, "_manager", None)

    def test_unreachable_server_fails_fast(self, monkeypatch):
        """
        Test that init_redis raises when the server does not answer PING.
        """
        # Arrange
        manager = MagicMock()
        manager.health_check.return_value = False
        monkeypatch.setattr(redis_config, "RedisConnectionManager", MagicMock(return_value=manager))

        # Act & Assert
        with pytest.raises(ApplicationError) as exc_info:
            redis_config.init_redis(RedisConfig())
        assert exc_info.value.category == ErrorCategory.SYSTEM_ERROR
        manager.close.assert_called_once()
        with pytest.raises(RuntimeError):
            redis_config.get_redis_repository("media_capture")

    def test_healthy_server_backs_repositories(self, monkeypatch):
        manager = MagicMock()
        manager.health_check.return_value = True
        monkeypatch.setattr(redis_config, "RedisConnectionManager", MagicMock(return_value=manager))

        redis_config.init_redis(RedisConfig())
        repo = redis_config.get_redis_repository("media_capture")

        assert repo.redis is manager.client
        assert repo.key_prefix == "media_capture"

    def test_close_releases_pool(self, monkeypatch):
        manager = MagicMock()
        manager.health_check.return_value = True
        monkeypatch.setattr(redis_config, "RedisConnectionManager", MagicMock(return_value=manager))
        redis_config.init_redis(RedisConfig())

        redis_config.close_redis()
        redis_config.close_redis()

        manager.close.assert_called_once()
        with pytest.raises(RuntimeError):
            redis_config.get_redis_repository()

    def test_describe_hides_password(self, monkeypatch):
        monkeypatch.setenv("REDIS_URL", "redis://:secret@cache.internal:6380/3")

        assert RedisConfig().describe() == "cache.internal:6380/3"


class TestCeleryConfig:

    def test_routes_download_boundary(self):
        assert CeleryConfig.task_routes[DOWNLOAD_CONTENT_TASK] == {"queue": DOWNLOAD_QUEUE}
        assert CeleryConfig.task_routes[COMPLETE_DOWNLOAD_TASK] == {"queue": CALLBACK_QUEUE}
        assert {q.name for q in CeleryConfig.task_queues} == {"default", DOWNLOAD_QUEUE, CALLBACK_QUEUE}

    def test_make_celery_applies_config(self):
        app = make_celery("test_app")

        assert app.main == "test_app"
        assert app.conf.task_serializer == "json"
        assert app.conf.task_default_queue == "default"


def test_configure_logging_quiets_connection_loggers():
    configure_logging("debug")

    assert logging.getLogger("redis").level == logging.WARNING
    assert logging.getLogger("kombu").level == logging.WARNING
