"""
Mood tracking API endpoints.

Routes: POST /moods, GET /moods

Dependencies: backend.application.services, backend.models
System role: Mood tracking HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from backend.api.deps.auth import get_current_user_id
from backend.api.deps.dependencies import get_mood_service
from backend.api.routers.router_utils.error_handling import handle_domain_errors
from backend.application.services.mood_service import MoodService
from backend.models.common import ERROR_RESPONSES
from backend.models.mood import CreateMoodRequest, MoodResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/moods", tags=["mood"], responses=ERROR_RESPONSES)


@router.post("", response_model=MoodResponse, status_code=201)
@handle_domain_errors
async def create_mood(
    request: CreateMoodRequest,
    user_id: str = Depends(get_current_user_id),
    mood_service: MoodService = Depends(get_mood_service),
) -> MoodResponse:
    """
    Record a mood check-in.

    Raises:
        HTTPException(400): Invalid score/note or unknown activity IDs
    """
    mood_data = await mood_service.create_mood(
        user_id=user_id,
        score=request.score,
        note=request.note,
        context=request.context,
        activities=request.activities,
        timestamp=request.timestamp,
    )
    return MoodResponse(**mood_data)


@router.get("", response_model=list[MoodResponse])
@handle_domain_errors
async def list_moods(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    mood_service: MoodService = Depends(get_mood_service),
) -> list[MoodResponse]:
    """List the caller's mood entries, most recent first."""
    moods = await mood_service.list_moods(user_id, limit=limit, offset=offset)
    return [MoodResponse(**m) for m in moods]
