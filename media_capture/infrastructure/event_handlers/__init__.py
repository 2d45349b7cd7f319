"""
Event Handlers

Infrastructure subscribers for domain events.
"""

from .download_dispatch_handler import DownloadDispatchHandler
from .logging_handler import LoggingEventHandler

__all__ = ['LoggingEventHandler', 'DownloadDispatchHandler']
