"""
Application configuration using Pydantic Settings.
Loads from environment variables and .env file.
"""

from functools import lru_cache

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Anthropic / Claude
    anthropic_api_key: SecretStr = Field(default=SecretStr(""))
    anthropic_base_url: str = Field(default="https://api.anthropic.com")
    anthropic_version: str = Field(
        default="2023-06-01",
        description="Value sent in the anthropic-version header"
    )

    # Completion settings
    completion_max_tokens: int = Field(
        default=2000, description="Default max output tokens per request"
    )

    # Matcher settings
    matcher_tier: str = Field(default="capable", description="Primary tier for job scoring")
    matcher_fallback_tier: str = Field(default="fast", description="Fallback tier for job scoring")
    matcher_top_jobs: int = Field(default=10, description="Jobs scored per request")

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
