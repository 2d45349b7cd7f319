"""
Composition Root

Wires repositories, locks, event handlers and the capture service into
a DependencyContainer according to CaptureConfig.
"""

import logging
import threading
from typing import Optional

from celery import Celery

from .application.aggregate_locks import AggregateLockManager, InProcessLockManager
from .application.capture_service import CaptureService
from .application.dependency_container import DependencyContainer
from .application.event_publisher import EventPublisher
from .config.capture_config import CaptureConfig
from .config.redis_config import close_redis, get_redis_repository, init_redis
from .domain.repositories import AggregateRepository
from .infrastructure.event_handlers import DownloadDispatchHandler, LoggingEventHandler
from .infrastructure.memory_aggregate_repository import InMemoryAggregateRepository
from .infrastructure.redis_aggregate_repository import RedisAggregateRepository
from .infrastructure.redis_lock_manager import RedisLockManager
from .infrastructure.redis_repository import RedisRepository

logger = logging.getLogger(__name__)

_container: Optional[DependencyContainer] = None
_container_lock = threading.Lock()


def build_container(
    config: Optional[CaptureConfig] = None,
    celery_app: Optional[Celery] = None,
    redis_repo: Optional[RedisRepository] = None,
) -> DependencyContainer:
    """
    Build a fully wired container.

    Args:
        config: Capture settings, read from the environment if None
        celery_app: App used to dispatch downloads, the shared app if None
        redis_repo: Redis repository to use instead of initialising one

    Raises:
        ApplicationError: SYSTEM_ERROR when Redis is selected but unreachable

    Returns:
        DependencyContainer with CaptureService and its collaborators
    """
    config = config or CaptureConfig()
    container = DependencyContainer()

    if config.use_redis:
        if redis_repo is None:
            init_redis()
            redis_repo = get_redis_repository(config.key_prefix)
        repository: AggregateRepository = RedisAggregateRepository(redis_repo, ttl=config.snapshot_ttl)
        lock_manager: AggregateLockManager = RedisLockManager(
            redis_repo,
            lease_seconds=config.lock_lease,
            default_timeout=config.lock_timeout,
        )
    else:
        repository = InMemoryAggregateRepository()
        lock_manager = InProcessLockManager(default_timeout=config.lock_timeout)

    publisher = EventPublisher()
    handlers = [LoggingEventHandler(logging.getLogger("media_capture.events"))]
    if config.dispatch_downloads:
        if celery_app is None:
            from .celery_app import celery_app as shared_app
            celery_app = shared_app
        handlers.append(DownloadDispatchHandler(celery_app))
    container.setup_event_handlers(publisher, handlers)

    container.register(CaptureConfig, config)
    container.register(AggregateRepository, repository)
    container.register(AggregateLockManager, lock_manager)
    container.register(EventPublisher, publisher)
    container.register(
        CaptureService,
        CaptureService(repository, publisher, lock_manager, lock_timeout=config.lock_timeout),
    )

    logger.info(
        f"Capture container ready (backend={config.backend}, "
        f"dispatch_downloads={config.dispatch_downloads})"
    )
    return container


def get_container() -> DependencyContainer:
    """Process-wide container, built on first use."""
    global _container
    with _container_lock:
        if _container is None:
            _container = build_container()
        return _container


def set_container(container: Optional[DependencyContainer]) -> None:
    """Replace the process-wide container; None forces a rebuild on next use."""
    global _container
    with _container_lock:
        _container = container


def shutdown() -> None:
    """Forget the process-wide container and release the shared Redis pool."""
    set_container(None)
    close_redis()
