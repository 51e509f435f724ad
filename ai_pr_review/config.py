"""
Configuration module for AI PR Review.

Uses pydantic-settings for configuration management with environment variables.
"""

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ai_pr_review.errors import ConfigurationError

_PLACEHOLDERS = {"your_openai_api_key_here", "your_github_token_here"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OpenAI Configuration
    openai_api_key: str = Field(
        default="",
        description="OpenAI API key for the completion API",
    )
    openai_model: str = Field(
        default="gpt-4o",
        description="OpenAI model used for the review",
    )
    openai_temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI responses (lower = more consistent)",
    )
    openai_max_tokens: int = Field(
        default=4000,
        ge=100,
        le=16000,
        description="Maximum tokens for the review completion",
    )

    # GitHub Configuration
    github_token: str = Field(
        default="",
        description="GitHub personal access token",
    )
    github_api_url: str = Field(
        default="https://api.github.com",
        description="GitHub API base URL",
    )

    # Review Settings
    review_taxonomy: Literal["detailed", "triage"] = Field(
        default="detailed",
        description="Category scheme used for the prompt and the parser",
    )
    max_patch_chars: int = Field(
        default=20_000,
        ge=1000,
        description="Per-file patch size sent to the model before truncation",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="HTTP timeout in seconds for GitHub requests",
    )

    # Application Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="WARNING",
        description="Logging level",
    )

    @field_validator("log_level", "review_taxonomy", mode="before")
    @classmethod
    def normalize_choice(cls, v: str, info) -> str:
        """Normalize case of enumerated string settings."""
        if isinstance(v, str):
            v = v.strip()
            return v.upper() if info.field_name == "log_level" else v.lower()
        return v

    @property
    def is_openai_configured(self) -> bool:
        """Check if OpenAI is properly configured."""
        return bool(self.openai_api_key and self.openai_api_key not in _PLACEHOLDERS)

    @property
    def is_github_configured(self) -> bool:
        """Check if GitHub is properly configured."""
        return bool(self.github_token and self.github_token not in _PLACEHOLDERS)

    def require_credentials(self) -> None:
        """
        Ensure both API credentials are present.

        Raises:
            ConfigurationError: Naming every missing environment variable.
        """
        missing = []
        if not self.is_github_configured:
            missing.append("GITHUB_TOKEN")
        if not self.is_openai_configured:
            missing.append("OPENAI_API_KEY")
        if missing:
            raise ConfigurationError(
                f"{' and '.join(missing)} {'is' if len(missing) == 1 else 'are'} required "
                "(set in the environment or a .env file)"
            )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()


def setup_logging(settings: Settings | None = None) -> logging.Logger:
    """
    Configure application logging.

    Args:
        settings: Optional settings instance. If not provided, uses cached settings.

    Returns:
        logging.Logger: Configured logger instance.
    """
    if settings is None:
        settings = get_settings()

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    logger = logging.getLogger("ai_pr_review")
    logger.setLevel(getattr(logging, settings.log_level))

    return logger
