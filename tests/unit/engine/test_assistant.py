"""Tests for the WritingAssistant facade."""

from __future__ import annotations

import pytest

from conftest import BOOK_ID, ScriptedTransport, anthropic_text, anthropic_tool_use, openai_text
from vibewriter.core.config import AIProviderSettings, Settings
from vibewriter.core.constants import UNCONFIGURED_ASSISTANT_REPLY
from vibewriter.core.exceptions import AIConnectionError
from vibewriter.engine.assistant import WritingAssistant
from vibewriter.models.scope import BookScope
from vibewriter.providers.anthropic import ContentBlockAdapter
from vibewriter.providers.openai import ToolCallsAdapter
from vibewriter.storage.base import StoryStores
from vibewriter.storage.memory import InMemoryConversationHistory


def static_context(scope: BookScope) -> str:
    return "ctx"


def configured(api_key: str = "sk-ant-test", **ai: object) -> Settings:
    return Settings(ai=AIProviderSettings(api_key=api_key, **ai))


class TestFromSettings:
    """Tests for building the assistant from settings."""

    def test_unconfigured(self, stores: StoryStores) -> None:
        """Test no API key gives an assistant without a loop."""
        assistant = WritingAssistant.from_settings(stores, static_context, Settings())

        assert assistant.is_configured is False
        assert assistant.chat(BOOK_ID, None, "Hello") == {
            "success": True,
            "response": UNCONFIGURED_ASSISTANT_REPLY,
        }

    def test_unconfigured_from_environment(self, stores: StoryStores) -> None:
        """Test the default settings are read when none are passed."""
        assistant = WritingAssistant.from_settings(stores, static_context)
        assert assistant.is_configured is False

    def test_anthropic_by_default(self, stores: StoryStores) -> None:
        """Test a Claude model selects the content-block adapter."""
        assistant = WritingAssistant.from_settings(
            stores, static_context, configured(), transport=ScriptedTransport([])
        )

        assert isinstance(assistant.loop.adapter, ContentBlockAdapter)
        assert assistant.loop.max_rounds == 5

    def test_gpt_model_selects_tool_calls(self, stores: StoryStores) -> None:
        """Test a gpt- model selects the tool_calls adapter."""
        assistant = WritingAssistant.from_settings(
            stores,
            static_context,
            configured("sk-test", model="gpt-4o", max_tool_rounds=3),
            transport=ScriptedTransport([]),
        )

        assert isinstance(assistant.loop.adapter, ToolCallsAdapter)
        assert assistant.loop.adapter.endpoint == "https://api.openai.com/v1/chat/completions"
        assert assistant.loop.max_rounds == 3


class TestChat:
    """Tests for the chat response payload."""

    def test_success_payload(self, stores: StoryStores) -> None:
        """Test the reply and the side effects are merged into one payload."""
        transport = ScriptedTransport(
            [
                anthropic_tool_use(("t1", "create_character", {"name": "Sarah", "role": "protagonist"})),
                anthropic_text("Sarah is in the story now."),
            ]
        )
        assistant = WritingAssistant.from_settings(
            stores, static_context, configured(), transport=transport
        )

        payload = assistant.chat(BOOK_ID, None, "Add Sarah, the detective")

        assert payload["success"] is True
        assert payload["response"] == "Sarah is in the story now."
        assert payload["characters_created"] == [
            {"character_id": 1, "name": "Sarah", "role": "protagonist"}
        ]
        assert payload["items_created"] is None

    def test_failure_payload(self, stores: StoryStores, http_500: AIConnectionError) -> None:
        """Test a failed turn still reports what it changed."""
        transport = ScriptedTransport(
            [
                anthropic_tool_use(("t1", "create_location", {"name": "Harbor"})),
                http_500,
            ]
        )
        assistant = WritingAssistant.from_settings(
            stores, static_context, configured(), transport=transport
        )

        payload = assistant.chat(BOOK_ID, None, "Add the harbor")

        assert payload["success"] is False
        assert payload["message"].startswith("AI request failed: API returned status code: 500")
        assert payload["locations_created"] == [{"location_id": 1, "name": "Harbor"}]

    def test_blank_message(self, stores: StoryStores) -> None:
        """Test a blank message is reported without calling the provider."""
        transport = ScriptedTransport([anthropic_text("unused")])
        assistant = WritingAssistant.from_settings(
            stores, static_context, configured(), transport=transport
        )

        assert assistant.chat(BOOK_ID, None, " ") == {
            "success": False,
            "message": "Message is required",
        }
        assert transport.call_count == 0


class TestHistory:
    """Tests for conversation history."""

    def test_saved_after_success(self, stores: StoryStores) -> None:
        """Test a completed exchange is saved."""
        history = InMemoryConversationHistory()
        assistant = WritingAssistant.from_settings(
            stores,
            static_context,
            configured("sk-test", model="gpt-4o"),
            history=history,
            transport=ScriptedTransport([openai_text("Hello!")]),
        )

        assistant.process_turn(BOOK_ID, 3, "Hi")

        assert len(history.entries) == 1
        assert history.entries[0]["message"] == "Hi"
        assert history.entries[0]["response"] == "Hello!"

    def test_not_saved_on_failure(self, stores: StoryStores, http_500: AIConnectionError) -> None:
        """Test a failed turn leaves no history entry."""
        history = InMemoryConversationHistory()
        assistant = WritingAssistant.from_settings(
            stores,
            static_context,
            configured(),
            history=history,
            transport=ScriptedTransport([http_500]),
        )

        with pytest.raises(AIConnectionError):
            assistant.process_turn(BOOK_ID, None, "Hi")

        assert history.entries == []
