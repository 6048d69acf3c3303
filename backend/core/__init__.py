"""
Core business logic module.

Contains the exception hierarchy and the therapy chat pipeline.
All business rules and domain-specific logic reside here.
"""

from backend.core.exceptions import (
    MindwellException,
    ValidationError,
    AuthenticationError,
    SessionNotFoundError,
    SessionAccessDeniedError,
    MessageNotFoundError,
    ParseError,
    PersistenceError,
    QueueDispatchError,
)

__all__ = [
    "MindwellException",
    "ValidationError",
    "AuthenticationError",
    "SessionNotFoundError",
    "SessionAccessDeniedError",
    "MessageNotFoundError",
    "ParseError",
    "PersistenceError",
    "QueueDispatchError",
]
