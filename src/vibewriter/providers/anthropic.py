"""Content-block protocol (Anthropic Messages API).

The model answers with a list of content blocks. ``stop_reason ==
"tool_use"`` means the ``tool_use`` blocks in that list must be executed;
their results go back in a single user message of ``tool_result`` blocks.
A ``tool_use`` stop without any such block is read as a final answer.
"""

from __future__ import annotations

import copy
from typing import Any

from vibewriter.core.constants import ANTHROPIC_API_VERSION
from vibewriter.core.exceptions import AIResponseError
from vibewriter.core.logging import get_logger
from vibewriter.providers.base import ProviderAdapter, ProviderReply
from vibewriter.tools.base import ToolCall, ToolResult
from vibewriter.tools.registry import get_tools_as_anthropic_schema


logger = get_logger(__name__)

TOOL_USE_STOP_REASON = "tool_use"


def _as_input(value: Any) -> dict[str, Any]:
    """Tool inputs are always objects; anything else (``[]``, None) becomes ``{}``."""
    return value if isinstance(value, dict) else {}


class ContentBlockAdapter(ProviderAdapter):
    """Adapter for the content-block tool protocol."""

    provider_name = "anthropic"

    def __init__(self, *, anthropic_version: str = ANTHROPIC_API_VERSION, **kwargs: Any) -> None:
        self.anthropic_version = anthropic_version
        super().__init__(**kwargs)

    def default_tools(self) -> list[dict[str, Any]]:
        return get_tools_as_anthropic_schema()

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.anthropic_version,
        }

    def build_request(self, message: str, system_context: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "tools": self.tools,
            "messages": [
                {"role": "user", "content": f"{system_context}\n\nUser: {message}"},
            ],
        }

    def parse_response(self, response: dict[str, Any]) -> ProviderReply:
        content = response.get("content")
        stop_reason = response.get("stop_reason")
        if not isinstance(content, list):
            raise AIResponseError(
                "Response has no content list",
                details={"stop_reason": stop_reason},
                **self.describe(),
            )

        tool_calls = []
        texts = []
        for block in content:
            if not isinstance(block, dict):
                continue
            if block.get("type") == "tool_use":
                tool_calls.append(
                    ToolCall(
                        tool_name=block.get("name", ""),
                        arguments=_as_input(block.get("input")),
                        call_id=block.get("id", ""),
                    )
                )
            elif block.get("type") == "text" and block.get("text"):
                texts.append(block["text"])

        logger.debug(
            "Parsed content blocks",
            stop_reason=stop_reason,
            blocks=[block.get("type") for block in content if isinstance(block, dict)],
        )
        return ProviderReply(
            raw=response,
            tool_calls=tool_calls,
            text=texts[0] if texts else "",
            stop_reason=stop_reason,
            wants_tools=stop_reason == TOOL_USE_STOP_REASON and bool(tool_calls),
        )

    def append_tool_results(
        self,
        payload: dict[str, Any],
        reply: ProviderReply,
        results: list[ToolResult],
    ) -> None:
        assistant_content = copy.deepcopy(reply.raw["content"])
        for block in assistant_content:
            if isinstance(block, dict) and block.get("type") == "tool_use":
                block["input"] = _as_input(block.get("input"))

        payload["messages"].append({"role": "assistant", "content": assistant_content})
        payload["messages"].append(
            {
                "role": "user",
                "content": [
                    {
                        "type": "tool_result",
                        "tool_use_id": result.call_id,
                        "content": result.to_json(),
                    }
                    for result in results
                ],
            }
        )

    def final_text(self, reply: ProviderReply) -> str:
        if reply.text:
            return reply.text
        raise AIResponseError(
            "No text response from API",
            details={"stop_reason": reply.stop_reason},
            **self.describe(),
        )


__all__ = [
    "ContentBlockAdapter",
    "TOOL_USE_STOP_REASON",
]
