"""
Application Errors

Bridges domain exceptions with user-facing error messages. Domain
exceptions stay pure; categorisation and messaging live here.
"""

from enum import Enum
from typing import Any, Dict, Optional

from ..domain.errors import (
    AggregateNotFoundError,
    AlreadyDownloadedError,
    AlreadyExistsError,
    ExpiredContentError,
    InvalidStateError,
    NotAMemberError,
    UsageLimitReachedError,
    ValidationError,
)


class ErrorCategory(Enum):
    """Error category enumeration for structured error handling."""

    INVALID_PAYLOAD = "invalid_payload"
    UNKNOWN_AGGREGATE_TYPE = "unknown_aggregate_type"
    NOT_FOUND = "not_found"
    ALREADY_DOWNLOADED = "already_downloaded"
    ALREADY_EXISTS = "already_exists"
    CONTENT_EXPIRED = "content_expired"
    NOT_A_MEMBER = "not_a_member"
    USAGE_LIMIT_REACHED = "usage_limit_reached"
    INVALID_STATE = "invalid_state"
    LOCK_TIMEOUT = "lock_timeout"
    DISPATCH_FAILED = "dispatch_failed"
    SYSTEM_ERROR = "system_error"


# User-friendly error messages with actionable guidance
ERROR_MESSAGES: Dict[ErrorCategory, Dict[str, str]] = {
    ErrorCategory.INVALID_PAYLOAD: {
        "title": "Invalid Content Data",
        "message": "The captured content is missing required information or contains invalid data.",
        "action": "Reload the page and capture the content again.",
    },
    ErrorCategory.UNKNOWN_AGGREGATE_TYPE: {
        "title": "Unsupported Content",
        "message": "This kind of content cannot be captured.",
        "action": "Check that the site and content type are supported.",
    },
    ErrorCategory.NOT_FOUND: {
        "title": "Content Not Found",
        "message": "The requested content has not been captured or was removed.",
        "action": "Capture the content again.",
    },
    ErrorCategory.ALREADY_DOWNLOADED: {
        "title": "Already Downloaded",
        "message": "This content has already been downloaded.",
        "action": "Open the downloaded file from your library.",
    },
    ErrorCategory.ALREADY_EXISTS: {
        "title": "Already Done",
        "message": "This action was already performed.",
        "action": "No further action is needed.",
    },
    ErrorCategory.CONTENT_EXPIRED: {
        "title": "Content Expired",
        "message": "This content is no longer available because it has expired.",
        "action": "Capture content before it expires.",
    },
    ErrorCategory.NOT_A_MEMBER: {
        "title": "Item Not In Collection",
        "message": "The item is not part of this board, collection, playlist or thread.",
        "action": "Refresh the collection and try again.",
    },
    ErrorCategory.USAGE_LIMIT_REACHED: {
        "title": "Usage Limit Reached",
        "message": "The license for this content has no remaining uses.",
        "action": "Acquire a new license to continue.",
    },
    ErrorCategory.INVALID_STATE: {
        "title": "Action Not Allowed",
        "message": "This action is not allowed in the content's current state.",
        "action": "Refresh and try again.",
    },
    ErrorCategory.LOCK_TIMEOUT: {
        "title": "Content Busy",
        "message": "Another operation on this content is still in progress.",
        "action": "Please wait a moment before trying again.",
    },
    ErrorCategory.DISPATCH_FAILED: {
        "title": "Download Not Started",
        "message": "The download could not be queued.",
        "action": "Please try again. If the problem persists, contact support.",
    },
    ErrorCategory.SYSTEM_ERROR: {
        "title": "System Error",
        "message": "An unexpected error occurred while processing your request.",
        "action": "Please try again later. If the problem persists, contact support.",
    },
}

# Most specific first; subclasses must precede their bases
_CATEGORY_BY_ERROR = (
    (AggregateNotFoundError, ErrorCategory.NOT_FOUND),
    (ValidationError, ErrorCategory.INVALID_PAYLOAD),
    (AlreadyDownloadedError, ErrorCategory.ALREADY_DOWNLOADED),
    (AlreadyExistsError, ErrorCategory.ALREADY_EXISTS),
    (ExpiredContentError, ErrorCategory.CONTENT_EXPIRED),
    (NotAMemberError, ErrorCategory.NOT_A_MEMBER),
    (UsageLimitReachedError, ErrorCategory.USAGE_LIMIT_REACHED),
    (InvalidStateError, ErrorCategory.INVALID_STATE),
)


class ApplicationError(Exception):
    """
    Base application error with category and user-friendly messaging.

    This is an application-layer concern that bridges domain errors
    with user-facing error messages.
    """

    def __init__(
        self,
        category: ErrorCategory,
        technical_message: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """
        Initialize application error.

        Args:
            category: Error category
            technical_message: Technical error details for logging
            context: Additional context information
        """
        self.category = category
        self.technical_message = technical_message or ""
        self.context = context or {}

        error_info = ERROR_MESSAGES.get(
            category, ERROR_MESSAGES[ErrorCategory.SYSTEM_ERROR]
        )
        self.title = error_info["title"]
        self.message = error_info["message"]
        self.action = error_info["action"]

        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for transport back to the producer.

        Returns:
            Dictionary with error information
        """
        data = {
            "error": self.category.value,
            "title": self.title,
            "message": self.message,
            "action": self.action,
        }
        if "field" in self.context:
            data["field"] = self.context["field"]
        if "payload_key" in self.context:
            data["payloadKey"] = self.context["payload_key"]
        return data


class LockTimeoutError(ApplicationError):
    """Raised when the per-aggregate lock cannot be acquired in time."""

    def __init__(self, key: str, timeout: float):
        super().__init__(
            ErrorCategory.LOCK_TIMEOUT,
            f"Could not acquire lock {key} within {timeout}s",
            {"lock_key": key},
        )


def categorize_error(error: Exception) -> ErrorCategory:
    """
    Map an exception to its user-facing category.

    Args:
        error: Any exception raised while handling a capture operation

    Returns:
        The matching category, SYSTEM_ERROR for anything unrecognised
    """
    if isinstance(error, ApplicationError):
        return error.category
    if isinstance(error, ValidationError) and error.field == "aggregate_type":
        return ErrorCategory.UNKNOWN_AGGREGATE_TYPE
    for error_type, category in _CATEGORY_BY_ERROR:
        if isinstance(error, error_type):
            return category
    return ErrorCategory.SYSTEM_ERROR


def to_application_error(error: Exception) -> ApplicationError:
    """Wrap any exception as an ApplicationError carrying its category."""
    if isinstance(error, ApplicationError):
        return error
    context = {}
    if isinstance(error, ValidationError):
        context["field"] = error.field
        context["payload_key"] = error.payload_key
    return ApplicationError(categorize_error(error), str(error), context)
