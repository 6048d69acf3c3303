"""API routers."""

from .activity import router as activity_router
from .health import router as health_router
from .mood import router as mood_router
from .therapy import router as chat_router

__all__ = [
    "activity_router",
    "chat_router",
    "health_router",
    "mood_router",
]
