"""LLM provider adapters and the HTTP transport they share."""

from __future__ import annotations

from vibewriter.core.config import AIProviderSettings
from vibewriter.core.exceptions import ConfigurationError
from vibewriter.providers.anthropic import ContentBlockAdapter
from vibewriter.providers.base import ProviderAdapter, ProviderReply
from vibewriter.providers.openai import ToolCallsAdapter
from vibewriter.providers.transport import HttpTransport


def create_adapter(settings: AIProviderSettings) -> ProviderAdapter:
    """Build the adapter for the configured provider.

    Args:
        settings: AI provider settings.

    Returns:
        A ContentBlockAdapter or ToolCallsAdapter.

    Raises:
        ConfigurationError: If no API key is configured.
    """
    if not settings.is_configured:
        raise ConfigurationError("AI API key is not configured", config_key="api_key")

    common = {
        "model": settings.model,
        "api_key": settings.api_key.get_secret_value(),
        "endpoint": settings.endpoint,
        "max_tokens": settings.max_tokens,
    }
    if settings.resolved_provider == "openai":
        return ToolCallsAdapter(**common)
    return ContentBlockAdapter(anthropic_version=settings.anthropic_version, **common)


def create_transport(settings: AIProviderSettings) -> HttpTransport:
    """Build the transport with the configured timeout and retry budget."""
    return HttpTransport(
        timeout_seconds=settings.timeout_seconds,
        max_retries=settings.max_retries,
    )


__all__ = [
    "ProviderAdapter",
    "ProviderReply",
    "ContentBlockAdapter",
    "ToolCallsAdapter",
    "HttpTransport",
    "create_adapter",
    "create_transport",
]
