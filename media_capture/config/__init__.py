"""
Configuration

Environment-driven settings for Redis, Celery, logging and the capture
service.
"""

from .capture_config import CaptureConfig
from .celery_config import CeleryConfig, make_celery
from .logging_config import configure_logging

__all__ = ['CaptureConfig', 'CeleryConfig', 'make_celery', 'configure_logging']
