"""
Therapy chat router package.

Exports the router for chat session and message endpoints.
"""

from .chat_router import router

__all__ = ["router"]
