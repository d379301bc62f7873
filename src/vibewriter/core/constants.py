"""Application-wide constants for the VibeWriter assistant."""

from __future__ import annotations

# =============================================================================
# Conversation Loop
# =============================================================================

MAX_TOOL_ROUNDS = 5
"""Maximum number of tool rounds in a single user turn."""

DEFAULT_MAX_TOKENS = 2048
"""Completion budget requested from the provider on every call."""

DEFAULT_MODEL = "claude-3-5-sonnet-20241022"
"""Model used when none is configured."""

# =============================================================================
# Provider Endpoints
# =============================================================================

ANTHROPIC_API_ENDPOINT = "https://api.anthropic.com/v1/messages"
OPENAI_API_ENDPOINT = "https://api.openai.com/v1/chat/completions"

ANTHROPIC_API_VERSION = "2023-06-01"
"""Value of the ``anthropic-version`` header."""

OPENAI_MODEL_PREFIX = "gpt-"
"""Model-name prefix that selects the tool_calls protocol when no provider is set."""

ERROR_BODY_PREVIEW_CHARS = 500
"""Characters of a non-JSON error body kept in transport errors."""

# =============================================================================
# Story Entities
# =============================================================================

DEFAULT_ITEM_TYPE = "scene"
DEFAULT_CHARACTER_ROLE = "supporting"
DEFAULT_THREAD_TYPE = "main"
DEFAULT_THREAD_STATUS = "open"

# =============================================================================
# Messages
# =============================================================================

UNCONFIGURED_ASSISTANT_REPLY = (
    "I'm your AI assistant, but I need to be configured with an API key first. "
    "Please set VIBEWRITER_AI_API_KEY to enable AI features.\n\n"
    "In the meantime, I can help you understand that I'm designed to:\n"
    "- Help brainstorm plot ideas\n"
    "- Develop characters\n"
    "- Suggest scene descriptions\n"
    "- Organize your story structure\n\n"
    "Please configure the API key to enable these features!"
)
"""Reply returned when no API key is configured."""


__all__ = [
    "MAX_TOOL_ROUNDS",
    "DEFAULT_MAX_TOKENS",
    "DEFAULT_MODEL",
    "ANTHROPIC_API_ENDPOINT",
    "OPENAI_API_ENDPOINT",
    "ANTHROPIC_API_VERSION",
    "OPENAI_MODEL_PREFIX",
    "ERROR_BODY_PREVIEW_CHARS",
    "DEFAULT_ITEM_TYPE",
    "DEFAULT_CHARACTER_ROLE",
    "DEFAULT_THREAD_TYPE",
    "DEFAULT_THREAD_STATUS",
    "UNCONFIGURED_ASSISTANT_REPLY",
]
