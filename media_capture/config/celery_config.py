"""
Celery Configuration

Configures Celery with a Redis broker and routes for the download
boundary: download requests go out on the download queue, completion
notices come back on the callback queue.
"""

import os
from typing import Optional

from celery import Celery
from kombu import Queue

DOWNLOAD_CONTENT_TASK = "media_capture.download_content"
COMPLETE_DOWNLOAD_TASK = "media_capture.complete_download"

DOWNLOAD_QUEUE = "download_queue"
CALLBACK_QUEUE = "download_callback_queue"


class CeleryConfig:
    """Celery configuration settings."""

    # Broker settings
    broker_url = os.getenv("CELERY_BROKER_URL", "redis://localhost:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", "redis://localhost:6379/0")

    # Task settings
    task_serializer = "json"
    accept_content = ["json"]
    result_serializer = "json"
    timezone = "UTC"
    enable_utc = True

    # Worker settings
    worker_prefetch_multiplier = 1
    task_acks_late = True
    worker_max_tasks_per_child = 50

    # Task routing
    task_routes = {
        DOWNLOAD_CONTENT_TASK: {"queue": DOWNLOAD_QUEUE},
        COMPLETE_DOWNLOAD_TASK: {"queue": CALLBACK_QUEUE},
    }

    # Queue definitions
    task_default_queue = "default"
    task_queues = (
        Queue("default", routing_key="default"),
        Queue(DOWNLOAD_QUEUE, routing_key="download"),
        Queue(CALLBACK_QUEUE, routing_key="download_callback"),
    )

    # Completion callbacks only touch Redis
    task_soft_time_limit = int(os.getenv("CELERY_TASK_SOFT_TIME_LIMIT", 60))
    task_time_limit = int(os.getenv("CELERY_TASK_TIME_LIMIT", 120))

    # Result backend settings
    result_expires = 3600  # 1 hour

    worker_concurrency = int(os.getenv("CELERY_WORKER_CONCURRENCY", 2))


def make_celery(main: str = "media_capture", config: Optional[type] = None) -> Celery:
    """
    Create a configured Celery instance.

    Args:
        main: Name of the main module
        config: Config object, defaults to CeleryConfig

    Returns:
        Configured Celery instance
    """
    config = config or CeleryConfig
    celery = Celery(
        main,
        backend=config.result_backend,
        broker=config.broker_url,
    )
    celery.config_from_object(config)
    return celery
