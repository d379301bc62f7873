"""Pytest configuration and shared fixtures.

This module provides common fixtures for the VibeWriter test suite:
fresh in-memory stores, a spy store that records every call, a scripted
transport standing in for the LLM vendor, and builders for vendor-shaped
responses.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

import pytest

from vibewriter.core.exceptions import AIConnectionError
from vibewriter.models.ledger import SideEffectLedger
from vibewriter.models.scope import BookScope
from vibewriter.storage.base import StoryStores
from vibewriter.storage.memory import create_memory_stores
from vibewriter.tools.base import ToolContext


if TYPE_CHECKING:
    from collections.abc import Generator


BOOK_ID = 1


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from vibewriter.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> None:
    """Keep developer environment variables and .env files out of tests."""
    import os

    for key in list(os.environ):
        if key.startswith("VIBEWRITER_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


# =============================================================================
# Store Fixtures
# =============================================================================


class SpyStore:
    """EntityStore wrapper that records every call made to it."""

    def __init__(self, inner: Any) -> None:
        self.inner = inner
        self.calls: list[tuple[str, tuple[Any, ...]]] = []

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def get_all(self, book_id: Any) -> list[dict[str, Any]]:
        self._record("get_all", book_id)
        return self.inner.get_all(book_id)

    def get_one(self, entity_id: Any, book_id: Any) -> dict[str, Any] | None:
        self._record("get_one", entity_id, book_id)
        return self.inner.get_one(entity_id, book_id)

    def create(self, book_id: Any, fields: dict[str, Any]) -> Any:
        self._record("create", book_id, fields)
        return self.inner.create(book_id, fields)

    def update(self, entity_id: Any, book_id: Any, fields: dict[str, Any]) -> bool:
        self._record("update", entity_id, book_id, fields)
        return self.inner.update(entity_id, book_id, fields)

    def delete(self, entity_id: Any, book_id: Any) -> bool:
        self._record("delete", entity_id, book_id)
        return self.inner.delete(entity_id, book_id)

    @property
    def writes(self) -> list[tuple[str, tuple[Any, ...]]]:
        return [call for call in self.calls if call[0] in ("create", "update", "delete")]


@pytest.fixture
def stores() -> StoryStores:
    """Provide an empty set of in-memory stores."""
    return create_memory_stores()


@pytest.fixture
def spy_stores() -> StoryStores:
    """Provide in-memory stores wrapped in SpyStore."""
    inner = create_memory_stores()
    return StoryStores(
        binder_items=SpyStore(inner.binder_items),
        characters=SpyStore(inner.characters),
        locations=SpyStore(inner.locations),
        plot_threads=SpyStore(inner.plot_threads),
        item_metadata=inner.item_metadata,
    )


@pytest.fixture
def context(stores: StoryStores) -> ToolContext:
    """Provide a tool context for book 1 over the in-memory stores."""
    return ToolContext(scope=BookScope(book_id=BOOK_ID), stores=stores, ledger=SideEffectLedger())


@pytest.fixture
def spy_context(spy_stores: StoryStores) -> ToolContext:
    """Provide a tool context over spy stores."""
    return ToolContext(scope=BookScope(book_id=BOOK_ID), stores=spy_stores)


# =============================================================================
# Transport Fixtures
# =============================================================================


class ScriptedTransport:
    """Transport double that replays canned responses.

    Each ``send`` records a deep copy of the payload and returns the next
    scripted response; a scripted exception is raised instead. When the
    script runs out, the last entry is replayed.
    """

    def __init__(self, responses: list[Any]) -> None:
        self.responses = list(responses)
        self.requests: list[dict[str, Any]] = []
        self.headers: list[dict[str, str]] = []
        self.endpoints: list[str] = []

    def send(
        self,
        endpoint: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        self.endpoints.append(endpoint)
        self.headers.append(dict(headers))
        self.requests.append(json.loads(json.dumps(payload)))
        index = min(len(self.requests) - 1, len(self.responses) - 1)
        response = self.responses[index]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def call_count(self) -> int:
        return len(self.requests)


@pytest.fixture
def scripted_transport() -> type[ScriptedTransport]:
    """Provide the ScriptedTransport class."""
    return ScriptedTransport


@pytest.fixture
def http_500() -> AIConnectionError:
    """Provide the error a transport raises for an HTTP 500."""
    return AIConnectionError(
        'API returned status code: 500 - {"type": "api_error"}',
        status_code=500,
    )


# =============================================================================
# Vendor Response Builders
# =============================================================================


def anthropic_tool_use(*calls: tuple[str, str, Any], text: str | None = None) -> dict[str, Any]:
    """Content-block response requesting tools: calls are (id, name, input)."""
    content: list[dict[str, Any]] = []
    if text is not None:
        content.append({"type": "text", "text": text})
    for call_id, name, tool_input in calls:
        content.append({"type": "tool_use", "id": call_id, "name": name, "input": tool_input})
    return {"id": "msg", "role": "assistant", "stop_reason": "tool_use", "content": content}


def anthropic_text(text: str) -> dict[str, Any]:
    """Content-block final answer."""
    return {
        "id": "msg",
        "role": "assistant",
        "stop_reason": "end_turn",
        "content": [{"type": "text", "text": text}],
    }


def openai_tool_calls(*calls: tuple[str, str, str]) -> dict[str, Any]:
    """tool_calls response: calls are (id, name, arguments-json)."""
    return {
        "choices": [
            {
                "finish_reason": "tool_calls",
                "message": {
                    "role": "assistant",
                    "content": None,
                    "tool_calls": [
                        {
                            "id": call_id,
                            "type": "function",
                            "function": {"name": name, "arguments": arguments},
                        }
                        for call_id, name, arguments in calls
                    ],
                },
            }
        ]
    }


def openai_text(content: Any, finish_reason: str = "stop") -> dict[str, Any]:
    """tool_calls-protocol final answer."""
    return {
        "choices": [
            {
                "finish_reason": finish_reason,
                "message": {"role": "assistant", "content": content},
            }
        ]
    }
