"""Tests for tool dispatch: lookup, required fields and error containment."""

from __future__ import annotations

import pytest

from vibewriter.core.exceptions import StorageError
from vibewriter.tools import ToolCall, dispatch, execute_tool_calls
from vibewriter.tools.base import ToolContext


REQUIRED_FIELD_CASES = [
    ("read_binder_item", {}, "Item ID is required"),
    ("update_binder_item", {"title": "x"}, "Item ID is required"),
    ("delete_binder_item", {"item_id": None}, "Item ID is required"),
    ("create_binder_item", {"item_type": "chapter"}, "Title is required"),
    ("create_binder_item", {"title": "Intro"}, "Item type is required"),
    ("create_binder_item", {"title": "   ", "item_type": "chapter"}, "Title is required"),
    ("read_character", {}, "Character ID is required"),
    ("update_character", {"name": "Sam"}, "Character ID is required"),
    ("delete_character", {}, "Character ID is required"),
    ("create_character", {"role": "minor"}, "Character name is required"),
    ("read_location", {}, "Location ID is required"),
    ("update_location", {}, "Location ID is required"),
    ("delete_location", {}, "Location ID is required"),
    ("create_location", {"name": ""}, "Location name is required"),
    ("read_plot_thread", {}, "Thread ID is required"),
    ("update_plot_thread", {}, "Thread ID is required"),
    ("delete_plot_thread", {}, "Thread ID is required"),
    ("create_plot_thread", {}, "Plot thread title is required"),
]


class TestDispatch:
    """Tests for dispatch."""

    def test_unknown_tool(self, spy_context: ToolContext) -> None:
        """Test an unknown name fails without touching any store."""
        result = dispatch("summon_dragon", {}, spy_context, call_id="t1")

        assert result.success is False
        assert result.error == "Unknown tool: summon_dragon"
        assert result.call_id == "t1"
        assert result.tool_name == "summon_dragon"
        assert spy_context.stores.binder_items.calls == []

    @pytest.mark.parametrize(("tool_name", "arguments", "error"), REQUIRED_FIELD_CASES)
    def test_required_fields(
        self,
        spy_context: ToolContext,
        tool_name: str,
        arguments: dict,
        error: str,
    ) -> None:
        """Test a missing required field fails before any persistence call."""
        result = dispatch(tool_name, arguments, spy_context)

        assert result.success is False
        assert result.error == error
        stores = spy_context.stores
        for store in (stores.binder_items, stores.characters, stores.locations, stores.plot_threads):
            assert store.calls == []
        assert spy_context.ledger.is_empty

    def test_non_dict_arguments_treated_as_empty(self, spy_context: ToolContext) -> None:
        """Test list or null arguments behave like {}."""
        assert dispatch("read_binder_item", [], spy_context).error == "Item ID is required"
        assert dispatch("read_characters", None, spy_context).success is True

    def test_float_ids_normalized(self, context: ToolContext) -> None:
        """Test ids sent as 6.0 address record 6."""
        created = dispatch("create_location", {"name": "Harbor"}, context)
        location_id = created.data["location_id"]

        result = dispatch("read_location", {"location_id": float(location_id)}, context)

        assert result.success is True
        assert result.data["location"]["id"] == location_id

    def test_store_exception_becomes_failure(self, context: ToolContext) -> None:
        """Test a raising store yields a failed result instead of an exception."""

        class BrokenStore:
            def get_all(self, book_id):
                raise RuntimeError("database is locked")

        context.stores.characters = BrokenStore()  # type: ignore[assignment]

        result = dispatch("read_characters", {}, context, call_id="c9")

        assert result.success is False
        assert result.error == "database is locked"
        assert result.call_id == "c9"

    def test_execute_tool_calls_in_order(self, context: ToolContext) -> None:
        """Test calls run sequentially and results keep call order and ids."""
        calls = [
            ToolCall("create_binder_item", {"title": "Intro", "item_type": "chapter"}, "a"),
            ToolCall("read_binder_items", {}, "b"),
            ToolCall("bogus", {}, "c"),
        ]

        results = execute_tool_calls(calls, context)

        assert [r.call_id for r in results] == ["a", "b", "c"]
        assert results[1].data["total_count"] == 1
        assert results[2].success is False

    def test_store_error_message_returned(self, context: ToolContext) -> None:
        """Test a StorageError's message becomes the failure text."""

        class LockedStore:
            def get_all(self, book_id):
                raise StorageError("Book is locked", entity="character")

        context.stores.characters = LockedStore()  # type: ignore[assignment]

        result = dispatch("read_characters", {}, context)

        assert result.success is False
        assert result.error == "Book is locked"


class TestTextFields:
    """Tests for text-field checks made before any store call."""

    @pytest.mark.parametrize(
        ("tool_name", "arguments", "error"),
        [
            ("create_character", {"name": True}, "Character name must be text"),
            ("create_location", {"name": ["Harbor"]}, "Location name must be text"),
            (
                "create_binder_item",
                {"title": {"text": "Intro"}, "item_type": "chapter"},
                "Title must be text",
            ),
            ("create_plot_thread", {"title": "Heist", "description": False}, "Description must be text"),
        ],
    )
    def test_non_text_rejected_without_writes(
        self,
        spy_context: ToolContext,
        tool_name: str,
        arguments: dict,
        error: str,
    ) -> None:
        """Test a non-string text value fails with nothing persisted or recorded."""
        result = dispatch(tool_name, arguments, spy_context)

        assert result.success is False
        assert result.error == error
        stores = spy_context.stores
        for store in (stores.binder_items, stores.characters, stores.locations, stores.plot_threads):
            assert store.writes == []
        assert spy_context.ledger.is_empty

    def test_numeric_title_stored_as_text(self, context: ToolContext) -> None:
        """Test a numeric title is saved and recorded as a string."""
        result = dispatch("create_binder_item", {"title": 1984, "item_type": "chapter"}, context)

        assert result.success is True
        assert result.data["title"] == "1984"
        item = context.stores.binder_items.get_one(result.data["item_id"], context.book_id)
        assert item["title"] == "1984"
        assert context.ledger.items_created[0].title == "1984"

    def test_update_with_non_text_title(self, context: ToolContext) -> None:
        """Test an update with an object title leaves the item unchanged."""
        created = dispatch("create_binder_item", {"title": "Intro", "item_type": "chapter"}, context)
        item_id = created.data["item_id"]

        result = dispatch("update_binder_item", {"item_id": item_id, "title": {"x": 1}}, context)

        assert result.error == "Title must be text"
        assert context.stores.binder_items.get_one(item_id, context.book_id)["title"] == "Intro"
        assert context.ledger.items_updated == []


class TestIdResolution:
    """Tests for ids that are not whole numbers."""

    def test_fractional_id_matches_nothing(self, context: ToolContext) -> None:
        """Test item 1.7 is not read as item 1 and nothing is deleted."""
        created = dispatch("create_binder_item", {"title": "Intro", "item_type": "chapter"}, context)
        item_id = created.data["item_id"]

        result = dispatch("delete_binder_item", {"item_id": item_id + 0.7}, context)

        assert result.success is False
        assert result.error == "Item not found"
        assert context.stores.binder_items.get_one(item_id, context.book_id) is not None

    def test_boolean_id_matches_nothing(self, context: ToolContext) -> None:
        """Test true is not read as item 1."""
        dispatch("create_location", {"name": "Harbor"}, context)

        result = dispatch("read_location", {"location_id": True}, context)

        assert result.success is False
