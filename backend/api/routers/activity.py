"""
Activity logging API endpoints.

Routes: POST /activities, GET /activities

Dependencies: backend.application.services, backend.models
System role: Activity logging HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Query

from backend.api.deps.auth import get_current_user_id
from backend.api.deps.dependencies import get_activity_service
from backend.api.routers.router_utils.error_handling import handle_domain_errors
from backend.application.services.activity_service import ActivityService
from backend.boundary.db.models.activity_model import ActivityDifficulty, ActivityType
from backend.models.activity import ActivityResponse, CreateActivityRequest
from backend.models.common import ERROR_RESPONSES

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/activities", tags=["activity"], responses=ERROR_RESPONSES)


@router.post("", response_model=ActivityResponse, status_code=201)
@handle_domain_errors
async def log_activity(
    request: CreateActivityRequest,
    user_id: str = Depends(get_current_user_id),
    activity_service: ActivityService = Depends(get_activity_service),
) -> ActivityResponse:
    """Log a completed wellness activity."""
    activity_data = await activity_service.log_activity(
        user_id=user_id,
        type=ActivityType(request.type),
        name=request.name,
        difficulty=ActivityDifficulty(request.difficulty),
        description=request.description,
        duration=request.duration,
        feedback=request.feedback,
        timestamp=request.timestamp,
    )
    return ActivityResponse(**activity_data)


@router.get("", response_model=list[ActivityResponse])
@handle_domain_errors
async def list_activities(
    limit: int = Query(default=50, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    user_id: str = Depends(get_current_user_id),
    activity_service: ActivityService = Depends(get_activity_service),
) -> list[ActivityResponse]:
    """List the caller's activities, most recent first."""
    activities = await activity_service.list_activities(user_id, limit=limit, offset=offset)
    return [ActivityResponse(**a) for a in activities]
