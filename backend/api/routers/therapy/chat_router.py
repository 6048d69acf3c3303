"""
Therapy chat API endpoints.

Routes:
- POST /chat/sessions - Open a new chat session
- GET /chat/sessions - List the caller's sessions
- GET /chat/sessions/{session_id} - Session with all messages
- PATCH /chat/sessions/{session_id} - Change session status
- POST /chat/sessions/{session_id}/messages - Send a message (returns immediately)
- GET /chat/sessions/{session_id}/messages/{message_index}/status - Poll one message
- GET /chat/sessions/{session_id}/history - Paginated message history

Dependencies: backend.application.services, backend.models
System role: Therapy chat HTTP API
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from backend.api.deps.auth import get_current_user_id
from backend.api.deps.dependencies import get_therapy_chat_service
from backend.api.routers.router_utils.error_handling import handle_domain_errors
from backend.application.services.therapy_chat_service import TherapyChatService
from backend.models.chat import (
    ChatHistoryResponse,
    MessageStatusResponse,
    SendMessageRequest,
    SendMessageResponse,
)
from backend.models.common import ERROR_RESPONSES
from backend.models.session import (
    CreateSessionResponse,
    SessionDetailResponse,
    SessionSummaryResponse,
    UpdateSessionRequest,
)

from .chat_responses import (
    map_history_to_response,
    map_send_result_to_response,
    map_session_to_detail,
    map_session_to_summary,
    map_status_to_response,
)
from .chat_validators import parse_session_status, validate_message_index

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chat/sessions", tags=["chat"], responses=ERROR_RESPONSES)


@router.post("", response_model=CreateSessionResponse, status_code=201)
@handle_domain_errors
async def create_chat_session(
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> CreateSessionResponse:
    """Open a new active chat session for the caller."""
    session_id = await chat_service.create_session(user_id)
    return CreateSessionResponse(session_id=session_id)


@router.get("", response_model=list[SessionSummaryResponse])
@handle_domain_errors
async def list_chat_sessions(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> list[SessionSummaryResponse]:
    """List the caller's chat sessions, newest first."""
    sessions = await chat_service.list_sessions(user_id, limit=limit, offset=offset)
    return [map_session_to_summary(s) for s in sessions]


@router.get("/{session_id}", response_model=SessionDetailResponse)
@handle_domain_errors
async def get_chat_session(
    session_id: UUID,
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> SessionDetailResponse:
    """
    Get a session with its full message log.

    Raises:
        HTTPException(403): Caller does not own the session
        HTTPException(404): Session not found
    """
    session_data = await chat_service.get_session(session_id, user_id)
    return map_session_to_detail(session_data)


@router.patch("/{session_id}", response_model=SessionSummaryResponse)
@handle_domain_errors
async def update_chat_session(
    session_id: UUID,
    request: UpdateSessionRequest,
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> SessionSummaryResponse:
    """Change a session's lifecycle status."""
    new_status = parse_session_status(request.status)
    session_data = await chat_service.update_session_status(session_id, user_id, new_status)
    return map_session_to_summary(session_data)


@router.post("/{session_id}/messages", response_model=SendMessageResponse)
@handle_domain_errors
async def send_message(
    session_id: UUID,
    request: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> SendMessageResponse:
    """
    Send a message; the assistant reply is produced in the background.

    Poll GET /chat/sessions/{session_id}/messages/{messageIndex}/status for
    the reply.

    Raises:
        HTTPException(400): Empty or too long message
        HTTPException(403): Caller does not own the session
        HTTPException(404): Session not found
        HTTPException(503): Task queue unavailable
    """
    logger.info(
        "Processing message",
        extra={"session_id": str(session_id), "message_len": len(request.message)},
    )
    result = await chat_service.send_message(session_id, user_id, request.message)
    return map_send_result_to_response(result)


@router.get(
    "/{session_id}/messages/{message_index}/status",
    response_model=MessageStatusResponse,
)
@handle_domain_errors
async def get_message_status(
    session_id: UUID,
    message_index: int,
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> MessageStatusResponse:
    """
    Current status, content and metadata of one message.

    Raises:
        HTTPException(400): Negative or non-numeric index
        HTTPException(404): Session or message not found
    """
    validate_message_index(message_index)
    message_data = await chat_service.get_message_status(session_id, user_id, message_index)
    return map_status_to_response(message_data)


@router.get("/{session_id}/history", response_model=ChatHistoryResponse)
@handle_domain_errors
async def get_chat_history(
    session_id: UUID,
    limit: int | None = None,
    skip: int = 0,
    user_id: str = Depends(get_current_user_id),
    chat_service: TherapyChatService = Depends(get_therapy_chat_service),
) -> ChatHistoryResponse:
    """
    Slice of the session's messages ordered by position.

    Args:
        limit: Page size, 1-100 (default 50)
        skip: Messages to skip from the start
    """
    history_data = await chat_service.get_history(session_id, user_id, limit=limit, skip=skip)
    return map_history_to_response(history_data)
