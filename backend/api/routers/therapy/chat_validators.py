"""
Chat request validation utilities.

Business rules not covered by Pydantic models.

Dependencies: backend.boundary.db.models, backend.core.exceptions
System role: Chat request validation
"""

from backend.boundary.db.models.chat_message_model import MAX_POSITION
from backend.boundary.db.models.chat_session_model import SessionStatus
from backend.core.exceptions import ValidationError


def parse_session_status(value: str) -> SessionStatus:
    """
    Convert a status string to SessionStatus.

    Raises:
        ValidationError: If value is not a known lifecycle status
    """
    try:
        return SessionStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in SessionStatus)
        raise ValidationError(f"Status must be one of: {allowed}", field="status")


def validate_message_index(message_index: int) -> None:
    """
    Reject indices no stored message can have.

    Raises:
        ValidationError: If message_index is negative or above MAX_POSITION
    """
    if message_index < 0:
        raise ValidationError("Message index must be non-negative", field="messageIndex")
    if message_index > MAX_POSITION:
        raise ValidationError("Message index out of range", field="messageIndex")
