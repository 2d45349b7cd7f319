"""
Celery Application Instance

Creates the Celery app used by callback workers and by the download
dispatch handler to enqueue download jobs.
"""

from celery.signals import setup_logging, worker_process_shutdown

from .config.celery_config import make_celery
from .config.logging_config import configure_logging

celery_app = make_celery("media_capture")

# Register task modules by name; the worker imports them at startup, once
# `celery_app` exists for the task decorators.
celery_app.conf.imports = (
    "media_capture.tasks.download_callbacks",
)


@setup_logging.connect
def _configure_worker_logging(**kwargs) -> None:
    configure_logging()


@worker_process_shutdown.connect
def _release_worker_resources(**kwargs) -> None:
    from .bootstrap import shutdown
    shutdown()

