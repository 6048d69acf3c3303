"""
Chat response mapping utilities.

Transforms service dictionaries into Pydantic response models.

Dependencies: backend.models.chat, backend.models.session
System role: Chat response transformation
"""

from typing import Any

from backend.models.chat import (
    ChatHistoryResponse,
    ChatMessageResponse,
    MessageStatusResponse,
    SendMessageResponse,
)
from backend.models.session import SessionDetailResponse, SessionSummaryResponse


def map_send_result_to_response(result: dict[str, Any]) -> SendMessageResponse:
    """Expected keys: session_id, message_index, status."""
    return SendMessageResponse(**result)


def map_status_to_response(message_data: dict[str, Any]) -> MessageStatusResponse:
    """Expected keys: status, content, metadata, timestamp."""
    return MessageStatusResponse(**message_data)


def map_session_to_summary(session_data: dict[str, Any]) -> SessionSummaryResponse:
    """Expected keys: session_id, status, start_time, updated_at."""
    return SessionSummaryResponse(**session_data)


def map_session_to_detail(session_data: dict[str, Any]) -> SessionDetailResponse:
    """
    Transform a session with messages into SessionDetailResponse.

    Args:
        session_data: Keys session_id, status, start_time, messages
    """
    return SessionDetailResponse(
        session_id=session_data["session_id"],
        status=session_data["status"],
        start_time=session_data["start_time"],
        messages=[ChatMessageResponse(**m) for m in session_data["messages"]],
    )


def map_history_to_response(history_data: dict[str, Any]) -> ChatHistoryResponse:
    """Expected keys: session_id, messages, total, limit, skip."""
    return ChatHistoryResponse(
        session_id=history_data["session_id"],
        messages=[ChatMessageResponse(**m) for m in history_data["messages"]],
        total=history_data["total"],
        limit=history_data["limit"],
        skip=history_data["skip"],
    )
