"""
Therapy chat pipeline settings.

Limits and thresholds for message ingress, risk alerting and engine calls.

Dependencies: pydantic, pydantic_settings
System role: Chat pipeline tuning
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class TherapySettings(BaseSettings):
    """Chat ingress and pipeline configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="THERAPY_",
        case_sensitive=False,
        extra="ignore",
    )

    max_message_length: int = Field(default=5000, description="Maximum characters per user message")
    risk_alert_threshold: int = Field(
        default=4,
        description="Risk level (0-10) above which a risk alert is emitted",
    )
    engine_timeout_seconds: float = Field(
        default=30.0,
        description="Timeout applied to each analysis/response engine call",
    )
    history_page_size: int = Field(default=50, description="Default history page size")
    history_max_page_size: int = Field(default=100, description="Maximum history page size")
