"""Tests for the content-block protocol adapter."""

from __future__ import annotations

import json

import pytest

from conftest import anthropic_text, anthropic_tool_use
from vibewriter.core.exceptions import AIResponseError
from vibewriter.providers.anthropic import ContentBlockAdapter
from vibewriter.tools.base import ToolResult


@pytest.fixture
def adapter() -> ContentBlockAdapter:
    return ContentBlockAdapter(
        model="claude-3-5-sonnet-20241022",
        api_key="sk-ant-test",
        endpoint="https://api.anthropic.com/v1/messages",
        max_tokens=2048,
    )


class TestRequest:
    """Tests for request building."""

    def test_headers(self, adapter: ContentBlockAdapter) -> None:
        """Test authentication and version headers."""
        headers = adapter.headers()
        assert headers["x-api-key"] == "sk-ant-test"
        assert headers["anthropic-version"] == "2023-06-01"

    def test_initial_request(self, adapter: ContentBlockAdapter) -> None:
        """Test the context and message are joined into one user message."""
        payload = adapter.build_request("Add a chapter", "You help authors.")

        assert payload["model"] == "claude-3-5-sonnet-20241022"
        assert payload["max_tokens"] == 2048
        assert len(payload["tools"]) == 20
        assert payload["messages"] == [
            {"role": "user", "content": "You help authors.\n\nUser: Add a chapter"}
        ]


class TestParseResponse:
    """Tests for response decoding."""

    def test_tool_use(self, adapter: ContentBlockAdapter) -> None:
        """Test tool_use blocks become ToolCalls in order."""
        reply = adapter.parse_response(
            anthropic_tool_use(
                ("t1", "read_binder_items", {}),
                ("t2", "create_character", {"name": "Sarah"}),
                text="Let me look.",
            )
        )

        assert reply.wants_tools is True
        assert [(c.call_id, c.tool_name) for c in reply.tool_calls] == [
            ("t1", "read_binder_items"),
            ("t2", "create_character"),
        ]
        assert reply.text == "Let me look."

    def test_empty_list_input_becomes_object(self, adapter: ContentBlockAdapter) -> None:
        """Test an input encoded as [] is treated as {}."""
        reply = adapter.parse_response(anthropic_tool_use(("t1", "read_characters", [])))
        assert reply.tool_calls[0].arguments == {}

    def test_final_text(self, adapter: ContentBlockAdapter) -> None:
        """Test the first text block is the answer."""
        reply = adapter.parse_response(anthropic_text("Done!"))

        assert reply.wants_tools is False
        assert adapter.final_text(reply) == "Done!"

    def test_tool_use_stop_without_blocks_is_final(self, adapter: ContentBlockAdapter) -> None:
        """Test a tool_use stop carrying only text is read as the answer."""
        reply = adapter.parse_response(
            {"stop_reason": "tool_use", "content": [{"type": "text", "text": "Done"}]}
        )

        assert reply.wants_tools is False
        assert reply.tool_calls == []
        assert adapter.final_text(reply) == "Done"

    def test_no_text(self, adapter: ContentBlockAdapter) -> None:
        """Test a final response without text raises with the stop reason."""
        reply = adapter.parse_response({"stop_reason": "max_tokens", "content": []})

        with pytest.raises(AIResponseError) as exc_info:
            adapter.final_text(reply)

        assert exc_info.value.message == "No text response from API"
        assert exc_info.value.details["stop_reason"] == "max_tokens"

    def test_missing_content(self, adapter: ContentBlockAdapter) -> None:
        """Test a body without a content list is a protocol error."""
        with pytest.raises(AIResponseError):
            adapter.parse_response({"stop_reason": "end_turn"})


class TestAppendToolResults:
    """Tests for folding tool results into the transcript."""

    def test_results_follow_calls(self, adapter: ContentBlockAdapter) -> None:
        """Test the assistant turn and tool_result blocks are appended in call order."""
        payload = adapter.build_request("Hi", "ctx")
        reply = adapter.parse_response(
            anthropic_tool_use(("t1", "read_characters", []), ("t2", "read_locations", {}))
        )
        results = [
            ToolResult(success=True, message="Retrieved 0 characters", call_id="t1"),
            ToolResult(success=False, error="boom", call_id="t2"),
        ]

        adapter.append_tool_results(payload, reply, results)

        assistant, user = payload["messages"][1:]
        assert assistant["role"] == "assistant"
        assert assistant["content"][0]["input"] == {}
        assert user["role"] == "user"
        assert [block["tool_use_id"] for block in user["content"]] == ["t1", "t2"]
        assert all(block["type"] == "tool_result" for block in user["content"])
        assert json.loads(user["content"][1]["content"]) == {"success": False, "error": "boom"}

    def test_raw_response_not_mutated(self, adapter: ContentBlockAdapter) -> None:
        """Test normalising inputs leaves the parsed response untouched."""
        raw = anthropic_tool_use(("t1", "read_characters", []))
        payload = adapter.build_request("Hi", "ctx")
        reply = adapter.parse_response(raw)

        adapter.append_tool_results(payload, reply, [ToolResult(success=True, call_id="t1")])

        assert raw["content"][0]["input"] == []
        assert '"input": {}' in json.dumps(payload)
