"""
Shared pytest fixtures and configuration for the media-capture test suite.

This module provides:
- Hypothesis configuration for property-based testing
- A capture service wired to in-memory adapters
- A recording event handler subscribed to every event
"""

import pytest
from hypothesis import HealthCheck, Phase, settings

from media_capture.application.aggregate_locks import InProcessLockManager
from media_capture.application.capture_service import CaptureService
from media_capture.application.event_publisher import EventPublisher
from media_capture.infrastructure.memory_aggregate_repository import InMemoryAggregateRepository
from tests.fixtures.mock_repositories import RecordingHandler

# Register Hypothesis profiles
settings.register_profile(
    "default",
    max_examples=100,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.target, Phase.shrink],
)
settings.register_profile(
    "ci",
    max_examples=200,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.register_profile(
    "dev",
    max_examples=10,
    deadline=None,
    suppress_health_check=[HealthCheck.too_slow],
)
settings.load_profile("default")


# =============================================================================
# Application Fixtures
# =============================================================================

@pytest.fixture
def repository() -> InMemoryAggregateRepository:
    """Provide an empty in-memory aggregate repository."""
    return InMemoryAggregateRepository()


@pytest.fixture
def publisher() -> EventPublisher:
    return EventPublisher()


@pytest.fixture
def recorder(publisher) -> RecordingHandler:
    """Provide a handler subscribed to every event kind."""
    handler = RecordingHandler("*")
    publisher.subscribe("*", handler.handle)
    return handler


@pytest.fixture
def lock_manager() -> InProcessLockManager:
    return InProcessLockManager(default_timeout=1.0)


@pytest.fixture
def capture_service(repository, publisher, lock_manager, recorder) -> CaptureService:
    """
    Provide a CaptureService wired to in-memory adapters.

    Published events are available through the ``recorder`` fixture.
    """
    return CaptureService(repository, publisher, lock_manager, lock_timeout=1.0)
