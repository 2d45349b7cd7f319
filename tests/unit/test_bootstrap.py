"""
Unit tests for the composition root.
"""

from unittest.mock import MagicMock

import pytest

from media_capture import bootstrap
from media_capture.application.aggregate_locks import AggregateLockManager, InProcessLockManager
from media_capture.application.capture_service import CaptureService
from media_capture.application.errors import ApplicationError, ErrorCategory
from media_capture.application.event_publisher import EventPublisher
from media_capture.config.capture_config import CaptureConfig
from media_capture.config.celery_config import DOWNLOAD_CONTENT_TASK
from media_capture.domain.repositories import AggregateRepository
from media_capture.infrastructure.memory_aggregate_repository import InMemoryAggregateRepository
from media_capture.infrastructure.redis_aggregate_repository import RedisAggregateRepository
from media_capture.infrastructure.redis_lock_manager import RedisLockManager
from tests.fixtures.domain_fixtures import post_payload
from tests.fixtures.mock_repositories import mock_redis_repository


@pytest.fixture
def memory_config(monkeypatch):
    monkeypatch.setenv("CAPTURE_BACKEND", "memory")
    monkeypatch.setenv("CAPTURE_DISPATCH_DOWNLOADS", "true")
    return CaptureConfig()


@pytest.fixture(autouse=True)
def reset_container():
    yield
    bootstrap.set_container(None)


class TestBuildContainer:
    """Test wiring of the capture service."""

    def test_memory_backend(self, memory_config):
        container = bootstrap.build_container(memory_config, celery_app=MagicMock())

        assert isinstance(container.resolve(AggregateRepository), InMemoryAggregateRepository)
        assert isinstance(container.resolve(AggregateLockManager), InProcessLockManager)
        assert container.resolve(CaptureConfig) is memory_config
        service = container.resolve(CaptureService)
        assert service.repository is container.resolve(AggregateRepository)
        assert service.publisher is container.resolve(EventPublisher)

    def test_download_request_is_dispatched(self, memory_config):
        """
        Test that a download request reaches the Celery app end to end.
        """
        # Arrange
        celery_app = MagicMock()
        service = bootstrap.build_container(memory_config, celery_app=celery_app).resolve(CaptureService)
        service.capture("instagram.post", post_payload())

        # Act
        service.request_download("instagram.post", "CxYz123", correlation_id="corr-1")

        # Assert
        celery_app.send_task.assert_called_once()
        assert celery_app.send_task.call_args[0][0] == DOWNLOAD_CONTENT_TASK
        assert celery_app.send_task.call_args[1]["kwargs"]["correlation_id"] == "corr-1"

    def test_dispatch_disabled(self, monkeypatch):
        monkeypatch.setenv("CAPTURE_BACKEND", "memory")
        monkeypatch.setenv("CAPTURE_DISPATCH_DOWNLOADS", "false")
        celery_app = MagicMock()
        service = bootstrap.build_container(CaptureConfig(), celery_app=celery_app).resolve(CaptureService)

        service.capture("instagram.post", post_payload())
        service.request_download("instagram.post", "CxYz123")

        celery_app.send_task.assert_not_called()

    def test_redis_backend_uses_given_repository(self, monkeypatch):
        monkeypatch.setenv("CAPTURE_BACKEND", "redis")
        monkeypatch.setenv("CAPTURE_LOCK_LEASE", "45")
        redis_repo = mock_redis_repository("media_capture")

        container = bootstrap.build_container(CaptureConfig(), celery_app=MagicMock(), redis_repo=redis_repo)

        repository = container.resolve(AggregateRepository)
        lock_manager = container.resolve(AggregateLockManager)
        assert isinstance(repository, RedisAggregateRepository)
        assert repository.redis_repo is redis_repo
        assert isinstance(lock_manager, RedisLockManager)
        assert lock_manager.lease_seconds == 45

    def test_unreachable_redis_stops_startup(self, monkeypatch):
        """
        Test that a failed Redis health check aborts container construction.
        """
        # Arrange
        monkeypatch.setenv("CAPTURE_BACKEND", "redis")
        failure = ApplicationError(ErrorCategory.SYSTEM_ERROR, "Redis unavailable")
        monkeypatch.setattr(bootstrap, "init_redis", MagicMock(side_effect=failure))
        get_repo = MagicMock()
        monkeypatch.setattr(bootstrap, "get_redis_repository", get_repo)

        # Act & Assert
        with pytest.raises(ApplicationError) as exc_info:
            bootstrap.build_container(CaptureConfig(), celery_app=MagicMock())
        assert exc_info.value is failure
        get_repo.assert_not_called()


class TestProcessContainer:

    def test_set_container_is_returned(self, memory_config):
        container = bootstrap.build_container(memory_config, celery_app=MagicMock())

        bootstrap.set_container(container)

        assert bootstrap.get_container() is container

    def test_get_container_builds_once(self, monkeypatch):
        monkeypatch.setenv("CAPTURE_BACKEND", "memory")
        monkeypatch.setenv("CAPTURE_DISPATCH_DOWNLOADS", "false")
        bootstrap.set_container(None)

        assert bootstrap.get_container() is bootstrap.get_container()

    def test_shutdown_releases_redis(self, memory_config, monkeypatch):
        close = MagicMock()
        monkeypatch.setattr(bootstrap, "close_redis", close)
        container = bootstrap.build_container(memory_config, celery_app=MagicMock())
        bootstrap.set_container(container)

        bootstrap.shutdown()

        close.assert_called_once()
        assert bootstrap._container is None
