"""
Authentication configuration settings.

Shared secret used to verify bearer tokens issued by the account service.

Dependencies: pydantic, pydantic_settings
System role: Token verification configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from backend.configs.base import BaseSettings


class AuthSettings(BaseSettings):
    """Bearer token verification configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="AUTH_",
        case_sensitive=False,
        extra="ignore",
    )

    jwt_secret: str = Field(
        default="change-me-in-production",
        description="HS256 signing secret shared with the account service",
    )
    jwt_algorithm: str = Field(default="HS256", description="Accepted JWT algorithm")
    token_ttl_seconds: int = Field(
        default=7 * 24 * 3600,
        description="Lifetime of tokens issued by tooling",
    )
