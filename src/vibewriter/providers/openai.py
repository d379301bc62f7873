"""tool_calls protocol (OpenAI Chat Completions API).

The reply is ``choices[0].message``. A non-empty ``tool_calls`` list means
tools must run; the assistant message is echoed back verbatim followed by
one ``role: "tool"`` message per call, each carrying its ``tool_call_id``.
"""

from __future__ import annotations

import copy
import json
from typing import Any

from vibewriter.core.exceptions import AIResponseError
from vibewriter.core.logging import get_logger
from vibewriter.providers.base import ProviderAdapter, ProviderReply
from vibewriter.tools.base import ToolCall, ToolResult
from vibewriter.tools.registry import get_tools_as_openai_schema


logger = get_logger(__name__)

TRUNCATED_FINISH_REASON = "length"


def _decode_arguments(raw: Any) -> dict[str, Any]:
    """Decode a function-call ``arguments`` string; bad or non-object JSON gives ``{}``."""
    if isinstance(raw, dict):
        return raw
    if not isinstance(raw, str) or not raw.strip():
        return {}
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Undecodable tool arguments", arguments=raw[:200])
        return {}
    return decoded if isinstance(decoded, dict) else {}


def _message_text(content: Any) -> str:
    """Text of a message whose content is a string or a list of parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        return "".join(
            part.get("text", "")
            for part in content
            if isinstance(part, dict) and part.get("type") == "text"
        )
    return ""


class ToolCallsAdapter(ProviderAdapter):
    """Adapter for the tool_calls protocol."""

    provider_name = "openai"

    def default_tools(self) -> list[dict[str, Any]]:
        return get_tools_as_openai_schema()

    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def build_request(self, message: str, system_context: str) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_context},
                {"role": "user", "content": message},
            ],
            "tools": self.tools,
            "tool_choice": "auto",
        }

    def parse_response(self, response: dict[str, Any]) -> ProviderReply:
        choices = response.get("choices")
        choice = choices[0] if isinstance(choices, list) and choices else None
        message = choice.get("message") if isinstance(choice, dict) else None
        if not isinstance(message, dict):
            raise AIResponseError("Invalid response from OpenAI API", **self.describe())

        finish_reason = choice.get("finish_reason")
        tool_calls = []
        for call in message.get("tool_calls") or []:
            if not isinstance(call, dict):
                continue
            function = call.get("function")
            if not isinstance(function, dict):
                function = {}
            tool_calls.append(
                ToolCall(
                    tool_name=function.get("name", ""),
                    arguments=_decode_arguments(function.get("arguments")),
                    call_id=call.get("id", ""),
                )
            )

        logger.debug(
            "Parsed chat completion",
            finish_reason=finish_reason,
            tool_calls=[call.tool_name for call in tool_calls],
        )
        return ProviderReply(
            raw=response,
            tool_calls=tool_calls,
            text=_message_text(message.get("content")),
            stop_reason=finish_reason,
            wants_tools=bool(tool_calls),
        )

    def append_tool_results(
        self,
        payload: dict[str, Any],
        reply: ProviderReply,
        results: list[ToolResult],
    ) -> None:
        assistant_message = copy.deepcopy(reply.raw["choices"][0]["message"])
        payload["messages"].append(assistant_message)
        for result in results:
            payload["messages"].append(
                {
                    "role": "tool",
                    "tool_call_id": result.call_id,
                    "content": result.to_json(),
                }
            )

    def final_text(self, reply: ProviderReply) -> str:
        if reply.text.strip():
            return reply.text
        details = {"finish_reason": reply.stop_reason}
        if reply.stop_reason == TRUNCATED_FINISH_REASON:
            raise AIResponseError(
                "OpenAI response was truncated", details=details, **self.describe()
            )
        raise AIResponseError(
            "No text response from OpenAI API", details=details, **self.describe()
        )


__all__ = [
    "ToolCallsAdapter",
    "TRUNCATED_FINISH_REASON",
]
