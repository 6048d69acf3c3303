"""
Exception hierarchy for the Mindwell backend.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class MindwellException(Exception):
    """Base exception for all Mindwell application errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ValidationError(MindwellException):
    """Raised when input validation fails."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize validation error.

        Args:
            message: Error message
            field: Field name that failed validation
            details: Additional context
        """
        details = details or {}
        if field:
            details["field"] = field
        super().__init__(message, details)


class AuthenticationError(MindwellException):
    """Raised when the caller's bearer token is missing or invalid."""


class SessionNotFoundError(MindwellException):
    """Raised when a chat session cannot be found."""

    def __init__(self, session_id: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize session not found error.

        Args:
            session_id: ID of the missing session
            details: Additional context
        """
        details = details or {}
        details["session_id"] = session_id
        super().__init__("Session not found", details)


class SessionAccessDeniedError(MindwellException):
    """Raised when the caller does not own the requested session."""

    def __init__(self, session_id: str, user_id: str) -> None:
        super().__init__(
            "Unauthorized",
            {"session_id": session_id, "user_id": user_id},
        )


class MessageNotFoundError(MindwellException):
    """Raised when no message exists at the requested position."""

    def __init__(self, session_id: str, message_index: int) -> None:
        """
        Initialize message not found error.

        Args:
            session_id: Session the lookup was scoped to
            message_index: Position that has no message
        """
        super().__init__(
            "Message not found",
            {"session_id": session_id, "message_index": message_index},
        )


class ParseError(MindwellException):
    """Raised when engine output contains no usable JSON object."""

    def __init__(self, message: str, raw_text: str | None = None) -> None:
        details = {}
        if raw_text is not None:
            details["raw_preview"] = raw_text[:200]
        super().__init__(message, details)


class PersistenceError(MindwellException):
    """Raised when the session store rejects or cannot complete a write."""

    def __init__(
        self,
        message: str,
        operation: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize persistence error.

        Args:
            message: Error message
            operation: Store operation that failed (append, update)
            details: Additional context
        """
        details = details or {}
        if operation:
            details["operation"] = operation
        super().__init__(message, details)


class QueueDispatchError(MindwellException):
    """Raised when a pipeline run cannot be handed to the task queue."""

    def __init__(self, event_name: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["event_name"] = event_name
        super().__init__("Message queue unavailable, please try again later", details)
