"""
Truth Checker Configuration Management Module

This module provides configuration management for the Truth Checker backend
using Pydantic Settings. It loads and validates the environment variables
required for:
- Application settings (name, environment, debug mode, logging)
- LangChain AI provider integration (Google Gemini by default)
- Outbound HTTP fetching (identifying headers, timeouts)
- Content normalization limits (webpage text, transcripts, descriptions)

All settings support environment variable overrides and .env file loading.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


# Browser-like User-Agent sent with every outbound fetch
DEFAULT_USER_AGENT: str = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """
    Configuration settings for the Truth Checker backend.

    Configuration Categories:
    - Application: Core app settings like name, environment, debug mode
    - AI Provider: Model selection and generation parameters for fact checking
    - Fetching: Headers and timeouts for webpage and YouTube requests
    - Limits: Character caps applied to extracted content

    Example usage:
        ```python
        from truth_checker.config import Settings

        settings = Settings()
        print(f"Webpage timeout: {settings.webpage_request_timeout}s")
        ```
    """

    # =========================================================================
    # Application Settings
    # =========================================================================

    app_name: str = Field(
        default="Truth-Checker",
        description="Application name displayed in API documentation and logs",
    )

    app_env: str = Field(
        default="development",
        description="Application environment (development, staging, production, testing)",
    )

    debug: bool = Field(default=False, description="Enable debug mode with hot-reload")

    log_level: str = Field(
        default="info", description="Logging level (debug, info, warning, error, critical)"
    )

    json_logs: bool = Field(default=False, description="Emit structured JSON log records")

    host: str = Field(default="0.0.0.0", description="Host address for the API server to bind to")

    port: int = Field(default=3000, description="Port number for the API server", ge=1, le=65535)

    cors_origins: list[str] = Field(
        default=["*"],
        description="List of allowed CORS origins for frontend access",
    )

    # =========================================================================
    # AI Provider Configuration
    # =========================================================================

    google_api_key: str | None = Field(
        default=None, description="Google API key for Gemini model access"
    )

    openai_api_key: str | None = Field(default=None, description="OpenAI API key")

    anthropic_api_key: str | None = Field(default=None, description="Anthropic API key")

    default_ai_provider: str = Field(
        default="google", description="AI provider used for fact checking"
    )

    default_ai_model: str = Field(
        default="gemini-2.0-flash-exp", description="Model name for the selected provider"
    )

    ai_temperature: float = Field(default=0.1, ge=0.0, le=2.0)

    ai_max_output_tokens: int = Field(default=2048, ge=1)

    enable_search_grounding: bool = Field(
        default=True,
        description="Bind the Google Search grounding tool when the provider is google",
    )

    # =========================================================================
    # Outbound Fetch Settings
    # =========================================================================

    user_agent: str = Field(default=DEFAULT_USER_AGENT)

    accept_language: str = Field(default="en-US,en;q=0.9")

    webpage_request_timeout: float = Field(
        default=10.0, description="Timeout in seconds for webpage fetches", gt=0
    )

    youtube_request_timeout: float | None = Field(
        default=None,
        description="Timeout in seconds for YouTube fetches (None waits indefinitely)",
    )

    # =========================================================================
    # Content Limits
    # =========================================================================

    webpage_max_chars: int = Field(default=3000, ge=1)

    transcript_max_chars: int = Field(default=4000, ge=1)

    min_transcript_chars: int = Field(
        default=50, description="Shortest transcript text accepted as a usable result", ge=1
    )

    description_max_chars: int = Field(default=500, ge=1)

    # =========================================================================
    # Model Configuration
    # =========================================================================

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that log_level is a valid logging level."""
        valid_levels = {"debug", "info", "warning", "error", "critical"}
        normalized = v.lower()
        if normalized not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {', '.join(valid_levels)}")
        return normalized

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate that app_env is a valid environment name."""
        valid_envs = {"development", "staging", "production", "testing"}
        normalized = v.lower()
        if normalized not in valid_envs:
            raise ValueError(f"Invalid app_env '{v}'. Must be one of: {', '.join(valid_envs)}")
        return normalized

    @field_validator("default_ai_provider")
    @classmethod
    def validate_ai_provider(cls, v: str) -> str:
        """Validate that default_ai_provider is a supported provider."""
        valid_providers = {"google", "openai", "anthropic", "local"}
        normalized = v.lower()
        if normalized not in valid_providers:
            raise ValueError(
                f"Invalid default_ai_provider '{v}'. Must be one of: {', '.join(valid_providers)}"
            )
        return normalized

    @field_validator("cors_origins", mode="before")
    @classmethod
    def validate_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string if provided as string."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @property
    def fetch_headers(self) -> dict[str, str]:
        """Identifying headers sent with every outbound fetch."""
        return {
            "User-Agent": self.user_agent,
            "Accept-Language": self.accept_language,
        }

    def get_provider_api_key(self, provider: str) -> str | None:
        """Return the configured API key for a provider, or None."""
        return {
            "google": self.google_api_key,
            "openai": self.openai_api_key,
            "anthropic": self.anthropic_api_key,
        }.get(provider)


@lru_cache
def get_settings() -> Settings:
    """
    Get the global Settings instance.

    The @lru_cache decorator ensures that the Settings object is created only
    once on first call, and subsequent calls return the cached instance without
    re-reading environment variables or .env files.

    Returns:
        Settings: The global configuration instance.
    """
    return Settings()
