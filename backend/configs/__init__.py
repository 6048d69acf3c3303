"""
Configuration package for the Mindwell backend.

Each concern has its own pydantic-settings class with an environment
prefix (POSTGRES_, CELERY_, GEMINI_, AUTH_, THERAPY_); Settings bundles them.
"""

from backend.configs.auth import AuthSettings
from backend.configs.celery_config import CelerySettings
from backend.configs.database import DatabaseSettings
from backend.configs.llm import GeminiSettings
from backend.configs.settings import Settings, get_settings
from backend.configs.therapy import TherapySettings

__all__ = [
    "AuthSettings",
    "CelerySettings",
    "DatabaseSettings",
    "GeminiSettings",
    "Settings",
    "TherapySettings",
    "get_settings",
]
