"""
Capture Configuration

Selects the persistence and locking backends and their tuning.
"""

import os


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class CaptureConfig:
    """Capture service configuration settings."""

    def __init__(self):
        # "redis" or "memory"
        self.backend = os.getenv("CAPTURE_BACKEND", "redis").strip().lower()
        self.key_prefix = os.getenv("CAPTURE_KEY_PREFIX", "media_capture")
        snapshot_ttl = os.getenv("CAPTURE_SNAPSHOT_TTL")
        self.snapshot_ttl = int(snapshot_ttl) if snapshot_ttl else None

        self.lock_timeout = float(os.getenv("CAPTURE_LOCK_TIMEOUT", 10))
        self.lock_lease = int(os.getenv("CAPTURE_LOCK_LEASE", 30))

        self.dispatch_downloads = _flag("CAPTURE_DISPATCH_DOWNLOADS", "true")

    @property
    def use_redis(self) -> bool:
        return self.backend == "redis"
