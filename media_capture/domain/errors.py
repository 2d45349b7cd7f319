"""
Domain Errors

Defines the exception taxonomy raised by value objects and aggregates.
Domain exceptions are pure and have no external dependencies.
User-facing categorisation lives in the application layer.
"""

from typing import Optional


class DomainError(Exception):
    """
    Base exception for all domain errors.

    Domain exceptions are pure and have no external dependencies.
    They can optionally wrap original errors for context.
    """

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        """
        Initialize domain error.

        Args:
            message: Error message
            original_error: Optional original exception that caused this error
        """
        super().__init__(message)
        self.original_error = original_error


class ValidationError(DomainError):
    """
    Raised when a value object or attribute bundle fails validation.

    The offending field is kept on the exception so producers can report
    exactly which part of a raw payload was rejected. ``field`` is the
    snake_case attribute name; ``payload_key`` is the camelCase key a
    producer sends for it.
    """

    def __init__(self, field: str, message: str):
        super().__init__(f"{field}: {message}")
        self.field = field
        self.reason = message

    @property
    def payload_key(self) -> str:
        """``video_url`` -> ``videoUrl``."""
        head, *rest = self.field.split("_")
        return head + "".join(part.capitalize() for part in rest)


class InvalidStateError(DomainError):
    """Raised when a transition is not allowed from the aggregate's current state."""
    pass


class AlreadyDownloadedError(InvalidStateError):
    """Raised when requesting or completing a download that already completed."""
    pass


class ExpiredContentError(InvalidStateError):
    """Raised when acting on content whose expiry time has passed."""
    pass


class AlreadyExistsError(InvalidStateError):
    """
    Raised when a one-shot business action is repeated.

    Covers re-follow, re-like, re-retweet, re-acquire and duplicate
    thread/collection members. Plain membership adds on boards and
    playlists are no-ops instead.
    """
    pass


class NotAMemberError(InvalidStateError):
    """Raised when removing or referencing an id that is not a member."""
    pass


class UsageLimitReachedError(InvalidStateError):
    """Raised when a license has no remaining uses."""
    pass


class AggregateNotFoundError(DomainError):
    """Raised when a repository has no aggregate for the requested id."""

    def __init__(self, aggregate_type: str, aggregate_id: str):
        super().__init__(f"{aggregate_type} {aggregate_id} not found")
        self.aggregate_type = aggregate_type
        self.aggregate_id = aggregate_id
