"""Configuration management for the VibeWriter assistant.

Centralised configuration using pydantic-settings, read from environment
variables and an optional ``.env`` file. API keys are held as SecretStr.

Example:
    >>> from vibewriter.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.ai.resolved_provider
    'anthropic'

Environment Variables:
    VIBEWRITER_AI_PROVIDER: Wire protocol to speak ('anthropic' or 'openai')
    VIBEWRITER_AI_API_KEY: Provider API key
    VIBEWRITER_AI_API_ENDPOINT: Override the provider endpoint URL
    VIBEWRITER_AI_MODEL: Model identifier
    VIBEWRITER_AI_MAX_TOOL_ROUNDS: Tool round budget per user turn
    VIBEWRITER_AI_TIMEOUT_SECONDS: Provider request timeout
    VIBEWRITER_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    VIBEWRITER_LOG_JSON: Emit JSON logs
    VIBEWRITER_LOG_FILE: Also write logs to this file
    VIBEWRITER_DEBUG: Force DEBUG logging
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from vibewriter.core.constants import (
    ANTHROPIC_API_ENDPOINT,
    ANTHROPIC_API_VERSION,
    DEFAULT_MAX_TOKENS,
    DEFAULT_MODEL,
    MAX_TOOL_ROUNDS,
    OPENAI_API_ENDPOINT,
    OPENAI_MODEL_PREFIX,
)
from vibewriter.core.exceptions import ConfigurationError


ProviderName = Literal["anthropic", "openai"]


class AIProviderSettings(BaseSettings):
    """Configuration for the LLM provider connection.

    Attributes:
        provider: Wire protocol to use. When unset, a model name starting
            with ``gpt-`` selects 'openai' and anything else 'anthropic'.
        api_key: Provider API key.
        api_endpoint: Endpoint URL; defaults to the provider's public API.
        model: Model identifier sent with every request.
        max_tokens: Completion budget requested per provider call.
        max_tool_rounds: Maximum tool rounds in one user turn.
        timeout_seconds: Provider request timeout in seconds.
        max_retries: Retries after a connection failure or timeout.
        anthropic_version: Value of the ``anthropic-version`` header.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIBEWRITER_AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    provider: ProviderName | None = Field(
        default=None,
        description="Wire protocol to use",
    )
    api_key: SecretStr | None = Field(
        default=None,
        description="Provider API key",
    )
    api_endpoint: str | None = Field(
        default=None,
        description="Provider endpoint URL override",
    )
    model: str = Field(
        default=DEFAULT_MODEL,
        min_length=1,
        description="Model identifier",
    )
    max_tokens: int = Field(
        default=DEFAULT_MAX_TOKENS,
        ge=1,
        le=32768,
        description="Completion token budget per request",
    )
    max_tool_rounds: int = Field(
        default=MAX_TOOL_ROUNDS,
        ge=1,
        le=20,
        description="Maximum tool rounds per user turn",
    )
    timeout_seconds: float = Field(
        default=60.0,
        gt=0,
        le=600,
        description="Provider request timeout",
    )
    max_retries: int = Field(
        default=1,
        ge=0,
        le=5,
        description="Retries after connection failures",
    )
    anthropic_version: str = Field(
        default=ANTHROPIC_API_VERSION,
        description="anthropic-version header value",
    )

    @model_validator(mode="after")
    def validate_model_for_provider(self) -> "AIProviderSettings":
        """Reject a Claude model paired with the OpenAI protocol.

        Raises:
            ConfigurationError: If provider is 'openai' but the model is a
                Claude model.
        """
        if self.provider == "openai" and self.model.startswith("claude-"):
            raise ConfigurationError(
                f"Model {self.model!r} cannot be used with the OpenAI provider",
                config_key="model",
            )
        return self

    @property
    def resolved_provider(self) -> ProviderName:
        """Provider after applying the model-name fallback."""
        if self.provider is not None:
            return self.provider
        if self.model.startswith(OPENAI_MODEL_PREFIX):
            return "openai"
        return "anthropic"

    @property
    def endpoint(self) -> str:
        """Endpoint URL for the resolved provider."""
        if self.api_endpoint:
            return self.api_endpoint
        if self.resolved_provider == "openai":
            return OPENAI_API_ENDPOINT
        return ANTHROPIC_API_ENDPOINT

    @property
    def is_configured(self) -> bool:
        """True when a non-empty API key is available."""
        return self.api_key is not None and bool(self.api_key.get_secret_value())


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name.
        app_version: Application version string.
        debug: Log at DEBUG regardless of ``log_level``.
        log_level: Application logging level.
        log_json: Emit JSON logs instead of the console renderer.
        log_file: Optional file that also receives standard-library logs.
        ai: AI provider settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="VIBEWRITER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="VibeWriter",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    log_json: bool = Field(
        default=False,
        description="Emit JSON formatted logs",
    )
    log_file: str | None = Field(
        default=None,
        description="Optional log file path",
    )

    ai: AIProviderSettings = Field(default_factory=AIProviderSettings)

    @property
    def effective_log_level(self) -> str:
        """Level handed to configure_logging; debug mode forces DEBUG."""
        return "DEBUG" if self.debug else self.log_level


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the application settings singleton.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "ProviderName",
    "AIProviderSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
