"""
Application Layer

Use-case orchestration on top of the domain: capture, download
requests and completion callbacks, with locking and event publishing.
"""

from .aggregate_locks import AggregateLockManager, InProcessLockManager, lock_key
from .capture_service import CaptureService
from .dependency_container import DependencyContainer, DependencyNotFoundError
from .errors import (
    ERROR_MESSAGES,
    ApplicationError,
    ErrorCategory,
    LockTimeoutError,
    categorize_error,
    to_application_error,
)
from .event_publisher import EventPublisher
from .mutation_result import MutationResult

__all__ = [
    'CaptureService',
    'EventPublisher',
    'MutationResult',
    'AggregateLockManager',
    'InProcessLockManager',
    'lock_key',
    'DependencyContainer',
    'DependencyNotFoundError',
    'ApplicationError',
    'ErrorCategory',
    'ERROR_MESSAGES',
    'LockTimeoutError',
    'categorize_error',
    'to_application_error',
]
