"""Tests for configuration management."""

from __future__ import annotations

import pytest
from pydantic import ValidationError as PydanticValidationError

from vibewriter.core.config import (
    AIProviderSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from vibewriter.core.constants import (
    ANTHROPIC_API_ENDPOINT,
    DEFAULT_MAX_TOKENS,
    MAX_TOOL_ROUNDS,
    OPENAI_API_ENDPOINT,
)
from vibewriter.core.exceptions import ConfigurationError


class TestAIProviderSettings:
    """Tests for AIProviderSettings configuration."""

    def test_default_values(self) -> None:
        """Test default provider settings."""
        settings = AIProviderSettings()

        assert settings.provider is None
        assert settings.api_key is None
        assert settings.max_tokens == DEFAULT_MAX_TOKENS
        assert settings.max_tool_rounds == MAX_TOOL_ROUNDS
        assert settings.timeout_seconds == 60.0
        assert settings.max_retries == 1
        assert settings.is_configured is False

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test values are read from VIBEWRITER_AI_ variables."""
        monkeypatch.setenv("VIBEWRITER_AI_API_KEY", "sk-test")
        monkeypatch.setenv("VIBEWRITER_AI_MAX_TOOL_ROUNDS", "3")

        settings = AIProviderSettings()

        assert settings.is_configured is True
        assert settings.api_key.get_secret_value() == "sk-test"
        assert settings.max_tool_rounds == 3

    def test_blank_api_key_is_not_configured(self) -> None:
        """Test an empty key does not count as configured."""
        assert AIProviderSettings(api_key="").is_configured is False

    def test_api_key_hidden_in_repr(self) -> None:
        """Test the key is held as a secret."""
        settings = AIProviderSettings(api_key="sk-secret")
        assert "sk-secret" not in repr(settings)

    def test_provider_falls_back_to_model_prefix(self) -> None:
        """Test gpt- models select the tool_calls protocol when no provider is set."""
        assert AIProviderSettings(model="gpt-4o").resolved_provider == "openai"
        assert AIProviderSettings(model="claude-3-5-sonnet").resolved_provider == "anthropic"

    def test_explicit_provider_wins(self) -> None:
        """Test an explicit provider overrides the model prefix."""
        settings = AIProviderSettings(provider="anthropic", model="gpt-proxy")
        assert settings.resolved_provider == "anthropic"

    def test_endpoint_defaults_per_provider(self) -> None:
        """Test the endpoint follows the resolved provider."""
        assert AIProviderSettings().endpoint == ANTHROPIC_API_ENDPOINT
        assert AIProviderSettings(provider="openai", model="gpt-4o").endpoint == OPENAI_API_ENDPOINT

    def test_endpoint_override(self) -> None:
        """Test a configured endpoint is used as-is."""
        settings = AIProviderSettings(api_endpoint="http://localhost:8080/v1/messages")
        assert settings.endpoint == "http://localhost:8080/v1/messages"

    def test_claude_model_rejected_for_openai(self) -> None:
        """Test mismatched provider and model raise ConfigurationError."""
        with pytest.raises(ConfigurationError) as exc_info:
            AIProviderSettings(provider="openai", model="claude-3-5-sonnet-20241022")

        assert exc_info.value.details["config_key"] == "model"

    def test_round_budget_bounds(self) -> None:
        """Test max_tool_rounds must be positive."""
        with pytest.raises(PydanticValidationError):
            AIProviderSettings(max_tool_rounds=0)


class TestSettings:
    """Tests for main Settings configuration."""

    def test_default_settings(self) -> None:
        """Test default settings initialization."""
        settings = Settings()

        assert settings.app_name == "VibeWriter"
        assert settings.app_version == "0.1.0"
        assert settings.debug is False
        assert settings.log_level == "INFO"
        assert settings.effective_log_level == "INFO"

    def test_debug_mode(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test debug mode setting."""
        monkeypatch.setenv("VIBEWRITER_DEBUG", "true")

        settings = Settings()

        assert settings.debug is True
        assert settings.effective_log_level == "DEBUG"

    def test_nested_ai_settings(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test AI settings are populated from the environment."""
        monkeypatch.setenv("VIBEWRITER_AI_MODEL", "gpt-4o-mini")

        settings = Settings()

        assert settings.ai.model == "gpt-4o-mini"
        assert settings.ai.resolved_provider == "openai"


class TestGetSettings:
    """Tests for get_settings singleton function."""

    def test_returns_cached_instance(self) -> None:
        """Test get_settings returns the same instance."""
        assert get_settings() is get_settings()

    def test_clear_cache(self) -> None:
        """Test clearing the cache creates a new instance."""
        first = get_settings()
        clear_settings_cache()
        assert get_settings() is not first

    def test_configuration_error_propagates(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test invalid configuration surfaces as ConfigurationError."""
        monkeypatch.setenv("VIBEWRITER_AI_PROVIDER", "openai")
        monkeypatch.setenv("VIBEWRITER_AI_MODEL", "claude-3-opus")

        with pytest.raises(ConfigurationError):
            get_settings()

    def test_invalid_value_wrapped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test other validation failures are wrapped in ConfigurationError."""
        monkeypatch.setenv("VIBEWRITER_LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()

        assert "Failed to load application settings" in exc_info.value.message
