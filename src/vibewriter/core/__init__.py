"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        VibeWriterError: Base exception for all application errors.
        ConfigurationError, ValidationError, StorageError, ToolError.
        AIControlError, AIConnectionError, AIResponseError,
        RoundsExhaustedError: provider failures that abort a turn.

    Configuration:
        Settings, AIProviderSettings, get_settings, clear_settings_cache.

    Logging:
        configure_logging, get_logger, bind_context, clear_context.
"""

from __future__ import annotations

from vibewriter.core.config import (
    AIProviderSettings,
    Settings,
    clear_settings_cache,
    get_settings,
)
from vibewriter.core.exceptions import (
    AIConnectionError,
    AIControlError,
    AIResponseError,
    ConfigurationError,
    RoundsExhaustedError,
    StorageError,
    ToolError,
    ValidationError,
    VibeWriterError,
)
from vibewriter.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
)


__all__ = [
    # Exceptions
    "VibeWriterError",
    "ConfigurationError",
    "ValidationError",
    "StorageError",
    "ToolError",
    "AIControlError",
    "AIConnectionError",
    "AIResponseError",
    "RoundsExhaustedError",
    # Configuration
    "Settings",
    "AIProviderSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
]
