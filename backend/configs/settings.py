"""
Top-level Mindwell settings.

Each concern keeps its own env prefix (POSTGRES_, CELERY_, GEMINI_,
AUTH_, THERAPY_); Settings only groups them. Sub-settings use
default_factory so the environment is read when Settings is built, not
when this module is imported.

Dependencies: pydantic, backend.configs
System role: Central configuration aggregator for API and workers
"""

from functools import lru_cache

from pydantic import Field

from backend.configs.auth import AuthSettings
from backend.configs.base import BaseSettings
from backend.configs.celery_config import CelerySettings
from backend.configs.database import DatabaseSettings
from backend.configs.llm import GeminiSettings
from backend.configs.therapy import TherapySettings


class Settings(BaseSettings):
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    celery: CelerySettings = Field(default_factory=CelerySettings)
    gemini: GeminiSettings = Field(default_factory=GeminiSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    therapy: TherapySettings = Field(default_factory=TherapySettings)

    cors_origins: list[str] = Field(
        default=["*"],
        description="Allowed browser origins (JSON list in CORS_ORIGINS)",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Process-wide Settings, built once.

    Tests that change the environment call get_settings.cache_clear().
    """
    return Settings()
