"""
Unit tests for in-process aggregate locks.
"""

import threading

import pytest

from media_capture.application.aggregate_locks import InProcessLockManager, lock_key
from media_capture.application.errors import LockTimeoutError


def test_lock_key_format():
    assert lock_key("instagram.post", "CxYz123") == "aggregate_lock:instagram.post:CxYz123"


class TestInProcessLockManager:

    def test_hold_and_release(self):
        locks = InProcessLockManager()

        with locks.hold("instagram.post", "1"):
            pass
        with locks.hold("instagram.post", "1"):
            pass

    def test_contended_lock_times_out(self):
        """
        Test that a second holder gives up after the timeout.
        """
        # Arrange
        locks = InProcessLockManager()
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("instagram.post", "1"):
                held.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        held.wait(5)

        # Act & Assert
        try:
            with pytest.raises(LockTimeoutError) as exc_info:
                with locks.hold("instagram.post", "1", timeout=0.05):
                    pass
            assert exc_info.value.context["lock_key"] == "aggregate_lock:instagram.post:1"
        finally:
            release.set()
            thread.join()

    def test_different_aggregates_do_not_contend(self):
        locks = InProcessLockManager(default_timeout=0.05)

        with locks.hold("instagram.post", "1"):
            with locks.hold("instagram.post", "2"):
                pass

    def test_lock_released_on_exception(self):
        locks = InProcessLockManager(default_timeout=0.05)

        with pytest.raises(RuntimeError):
            with locks.hold("instagram.post", "1"):
                raise RuntimeError("command failed")

        with locks.hold("instagram.post", "1"):
            pass

    def test_released_keys_are_forgotten(self):
        """
        Test that holding many distinct aggregates leaves no lock entries behind.
        """
        # Arrange
        locks = InProcessLockManager(default_timeout=0.05)

        # Act
        for index in range(1000):
            with locks.hold("instagram.post", str(index)):
                assert locks.active_keys == 1

        # Assert
        assert locks.active_keys == 0
        assert locks._locks == {}

    def test_timed_out_waiter_does_not_leak_entry(self):
        """
        Test that a waiter that times out gives back its claim on the key.
        """
        # Arrange
        locks = InProcessLockManager()
        held = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("instagram.post", "1"):
                held.set()
                release.wait(5)

        thread = threading.Thread(target=holder)
        thread.start()
        held.wait(5)

        # Act
        try:
            with pytest.raises(LockTimeoutError):
                with locks.hold("instagram.post", "1", timeout=0.05):
                    pass
            assert locks.active_keys == 1
        finally:
            release.set()
            thread.join()

        # Assert
        assert locks.active_keys == 0
