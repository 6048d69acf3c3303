"""
Generative model configuration settings.

Settings for the Gemini chat model used by the analysis engine and the
response generator.

Dependencies: pydantic, pydantic_settings
System role: LLM provider configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class GeminiSettings(BaseSettings):
    """Google Gemini model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: str | None = Field(default=None, description="Google Generative AI API key")
    model: str = Field(default="gemini-2.0-flash", description="Gemini model identifier")
    analysis_temperature: float = Field(
        default=0.0,
        description="Temperature for structured message analysis",
    )
    response_temperature: float = Field(
        default=0.7,
        description="Temperature for therapeutic reply generation",
    )
