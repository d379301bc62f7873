"""Custom exception hierarchy for the VibeWriter assistant.

All exceptions inherit from VibeWriterError so the web layer can catch a
single type at its boundary while still receiving domain-specific context
in ``details``.

Tool-level problems (missing fields, unknown ids) are never raised: they
travel back to the model as a failed ToolResult. The exceptions below are
reserved for failures that abort a whole conversation turn.

Example:
    >>> from vibewriter.core.exceptions import AIResponseError
    >>> raise AIResponseError("No text response from API", provider="anthropic")
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    from vibewriter.models.ledger import SideEffectLedger


class VibeWriterError(Exception):
    """Base exception for all VibeWriter errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details."""
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Configuration & Validation Exceptions
# =============================================================================


class ConfigurationError(VibeWriterError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with config key context.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


class ValidationError(VibeWriterError):
    """Raised when caller-supplied input is invalid.

    Used for inbound turn arguments (for example an empty user message).
    Tool arguments coming from the model are validated separately and
    reported as failed tool results instead.
    """

    def __init__(
        self,
        message: str,
        *,
        field_name: str | None = None,
        invalid_value: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize validation error with field context.

        Args:
            message: Human-readable error description.
            field_name: Name of the field that failed validation.
            invalid_value: The value that failed validation.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if field_name:
            combined_details["field_name"] = field_name
        if invalid_value is not None:
            combined_details["invalid_value"] = invalid_value
        super().__init__(message, details=combined_details)


# =============================================================================
# Storage & Tool Exceptions
# =============================================================================


class StorageError(VibeWriterError):
    """Raised by persistence collaborators when an operation fails.

    Tool handlers convert this (and any other store exception) into a
    failed ToolResult.
    """

    def __init__(
        self,
        message: str,
        *,
        entity: str | None = None,
        entity_id: Any | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if entity:
            combined_details["entity"] = entity
        if entity_id is not None:
            combined_details["entity_id"] = entity_id
        super().__init__(message, details=combined_details)


class ToolError(VibeWriterError):
    """Raised when the tool catalogue itself is misconfigured.

    This is a programming error (for example registering two tools with
    the same name), never something the model can trigger.
    """

    def __init__(
        self,
        message: str,
        *,
        tool_name: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if tool_name:
            combined_details["tool_name"] = tool_name
        super().__init__(message, details=combined_details)


# =============================================================================
# AI Control Exceptions
# =============================================================================


class AIControlError(VibeWriterError):
    """Base exception for all provider-related errors.

    Attributes:
        side_effects: The ledger of the turn that failed, attached by the
            conversation loop so callers can still report entities that
            were created or updated before the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize AI control error with model context.

        Args:
            message: Human-readable error description.
            model: Name of the AI model involved.
            provider: Name of the AI provider (e.g., 'anthropic', 'openai').
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if model:
            combined_details["model"] = model
        if provider:
            combined_details["provider"] = provider
        self.side_effects: SideEffectLedger | None = None
        super().__init__(message, details=combined_details)


class AIConnectionError(AIControlError):
    """Raised when the provider cannot be reached or returns a non-2xx status."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if status_code is not None:
            combined_details["status_code"] = status_code
        self.status_code = status_code
        super().__init__(message, model=model, provider=provider, details=combined_details)


class AIResponseError(AIControlError):
    """Raised when a provider response cannot be turned into a reply.

    Covers malformed JSON, missing message structures, truncated answers
    and final responses without any text. The vendor's stop or finish
    reason is kept in ``details`` for logging.
    """


class RoundsExhaustedError(AIResponseError):
    """Raised when the tool round budget runs out and no text is available."""

    def __init__(
        self,
        message: str,
        *,
        rounds: int,
        model: str | None = None,
        provider: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        combined_details["rounds"] = rounds
        self.rounds = rounds
        super().__init__(message, model=model, provider=provider, details=combined_details)


__all__ = [
    "VibeWriterError",
    "ConfigurationError",
    "ValidationError",
    "StorageError",
    "ToolError",
    "AIControlError",
    "AIConnectionError",
    "AIResponseError",
    "RoundsExhaustedError",
]
