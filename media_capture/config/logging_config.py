"""
Logging Configuration

Root logger setup for workers and embedding processes.
"""

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> None:
    """
    Configure the root logger.

    Args:
        level: Level name, defaults to ``LOG_LEVEL`` or INFO
    """
    level_name = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format=LOG_FORMAT,
    )
    # Keep connection chatter out of INFO output
    logging.getLogger("redis").setLevel(logging.WARNING)
    logging.getLogger("kombu").setLevel(logging.WARNING)
