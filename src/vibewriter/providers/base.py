"""Provider adapter interface.

A ProviderAdapter knows one vendor wire protocol: how to start a
conversation, how to read tool requests out of a response, how to fold
tool results back into the transcript and how to pull the final text.
It never talks to the network; the loop hands its requests to an
HttpTransport.

The transcript is the request payload itself. Adapters append to
``payload["messages"]`` in place and the same payload is re-sent each
round.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from vibewriter.tools.base import ToolCall, ToolResult


@dataclass
class ProviderReply:
    """One decoded provider response.

    Attributes:
        raw: The response body as returned by the vendor.
        tool_calls: Tool calls requested in this response, in order.
        text: Text content of the response, possibly empty.
        stop_reason: Vendor stop/finish reason.
        wants_tools: Whether the vendor signalled that tools should run.
    """

    raw: dict[str, Any]
    tool_calls: list[ToolCall] = field(default_factory=list)
    text: str = ""
    stop_reason: str | None = None
    wants_tools: bool = False


class ProviderAdapter(ABC):
    """Strategy for one LLM vendor protocol.

    Attributes:
        model: Model identifier sent with every request.
        api_key: Key placed in the vendor's auth header.
        endpoint: URL requests are posted to.
        max_tokens: Completion budget, where the protocol sends one.
        tools: Tool catalogue in the vendor's shape.
    """

    provider_name: str = ""

    def __init__(
        self,
        *,
        model: str,
        api_key: str,
        endpoint: str,
        max_tokens: int,
        tools: list[dict[str, Any]] | None = None,
    ) -> None:
        self.model = model
        self.api_key = api_key
        self.endpoint = endpoint
        self.max_tokens = max_tokens
        self.tools = tools if tools is not None else self.default_tools()

    @abstractmethod
    def default_tools(self) -> list[dict[str, Any]]:
        """Tool catalogue in the vendor's schema."""

    @abstractmethod
    def headers(self) -> dict[str, str]:
        """HTTP headers for every request."""

    @abstractmethod
    def build_request(self, message: str, system_context: str) -> dict[str, Any]:
        """Build the initial request payload for a user message."""

    @abstractmethod
    def parse_response(self, response: dict[str, Any]) -> ProviderReply:
        """Decode a response body.

        Raises:
            AIResponseError: If the body lacks the protocol's message structure.
        """

    @abstractmethod
    def append_tool_results(
        self,
        payload: dict[str, Any],
        reply: ProviderReply,
        results: list[ToolResult],
    ) -> None:
        """Append the assistant turn and one result per tool call to ``payload``."""

    @abstractmethod
    def final_text(self, reply: ProviderReply) -> str:
        """Final answer text of a reply that requested no tools.

        Raises:
            AIResponseError: If the reply carries no usable text.
        """

    def describe(self) -> dict[str, Any]:
        """Context for log events and error details."""
        return {"provider": self.provider_name, "model": self.model}


__all__ = [
    "ProviderReply",
    "ProviderAdapter",
]
