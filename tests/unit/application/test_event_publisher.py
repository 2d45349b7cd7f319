"""
Unit tests for EventPublisher.

Tests pattern subscriptions, dispatch order and handler isolation.
"""

from unittest.mock import Mock

from media_capture.application.event_publisher import EventPublisher
from media_capture.domain.events import DomainEvent


def _event(kind: str) -> DomainEvent:
    return DomainEvent("CxYz123", "instagram.post", kind)


class TestEventPublisher:

    def test_exact_and_wildcard_patterns(self):
        # Arrange
        publisher = EventPublisher()
        exact = Mock()
        requested = Mock()
        everything = Mock()
        publisher.subscribe("post.downloaded", exact)
        publisher.subscribe("*.download.requested", requested)
        publisher.subscribe("*", everything)

        # Act
        publisher.publish(_event("post.download.requested"))

        # Assert
        exact.assert_not_called()
        requested.assert_called_once()
        everything.assert_called_once()

    def test_handlers_called_in_subscription_order(self):
        publisher = EventPublisher()
        calls = []
        publisher.subscribe("*", lambda event: calls.append("first"))
        publisher.subscribe("*", lambda event: calls.append("second"))

        publisher.publish(_event("post.captured"))

        assert calls == ["first", "second"]

    def test_failing_handler_does_not_stop_others(self):
        """
        Test that a handler exception is logged and swallowed.

        Verifies that later handlers still receive the event.
        """
        # Arrange
        publisher = EventPublisher()
        failing = Mock(side_effect=RuntimeError("boom"))
        healthy = Mock()
        publisher.subscribe("*", failing)
        publisher.subscribe("*", healthy)

        # Act
        publisher.publish(_event("post.captured"))

        # Assert
        healthy.assert_called_once()

    def test_publish_without_handlers(self):
        EventPublisher().publish(_event("post.captured"))

    def test_unsubscribe(self):
        publisher = EventPublisher()
        handler = Mock()
        publisher.subscribe("*", handler)

        publisher.unsubscribe(handler)
        publisher.publish(_event("post.captured"))

        handler.assert_not_called()

    def test_publish_all_preserves_order(self):
        publisher = EventPublisher()
        seen = []
        publisher.subscribe("*", lambda event: seen.append(event.event_kind))

        publisher.publish_all([_event("post.captured"), _event("post.download.requested")])

        assert seen == ["post.captured", "post.download.requested"]

    def test_handlers_for(self):
        publisher = EventPublisher()
        handler = Mock()
        publisher.subscribe("board.*", handler)

        assert publisher.handlers_for("board.synced") == [handler]
        assert publisher.handlers_for("post.captured") == []
