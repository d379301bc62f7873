"""Writing assistant instructions - the context text sent with every turn."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from vibewriter.models.scope import BookScope, EntityId
from vibewriter.storage.base import StoryStores


# =============================================================================
# Assistant Instructions
# =============================================================================


TOOL_USAGE_RULES = """=== CRITICAL TOOL USAGE RULES ===
When the user asks you to create, read, update, or delete binder items, characters, locations, or plot threads, you MUST use the corresponding tool in your response.
DO NOT just describe what you will do - actually invoke the tool.
NEVER say 'I will update...' or 'Now I'll create...' - just USE THE TOOL immediately.

=== ACTION WORKFLOW ===
BINDER ITEMS:
1. If user says 'update the title of X to Y' → call read_binder_items to find X, then update_binder_item
2. If user says 'create a chapter called X' → Immediately call create_binder_item
3. If user says 'delete X' → Immediately call delete_binder_item

CHARACTERS:
1. When user first mentions a character → Immediately call create_character with available details
2. When user adds details about an existing character → Call update_character with character_id
3. When discussing characters, use read_characters first to see what exists

LOCATIONS AND PLOT THREADS:
1. New places → create_location; new storylines, subplots or arcs → create_plot_thread
2. Use read_locations / read_plot_threads before changing existing ones

After tools execute, respond based on the result the tool returns.

WRONG RESPONSE: 'I found chapter "Test" with ID 6. Now I'll update its title to "New Title"'
RIGHT RESPONSE: [Use update_binder_item tool immediately, then say] 'I've updated the chapter title to "New Title"'

Provide helpful, creative assistance for writing this book. Be encouraging and specific in your suggestions."""


def build_book_context(
    book: Mapping[str, Any],
    current_item: Mapping[str, Any] | None = None,
) -> str:
    """Build the instruction text for a book.

    Args:
        book: Book record with ``title`` and optional ``genre`` and
            ``description``.
        current_item: Binder item open in the editor, if any.

    Returns:
        Instruction text to prepend to the user's message.
    """
    lines = [
        "You are an AI writing assistant helping an author with their book.",
        "",
        f"Book Title: {book.get('title', '')}",
    ]
    if book.get("genre"):
        lines.append(f"Genre: {book['genre']}")
    if book.get("description"):
        lines.append(f"Description: {book['description']}")

    if current_item:
        lines.append("")
        lines.append(
            f"Current Section: {current_item.get('title')} ({current_item.get('item_type')})"
        )
        if current_item.get("synopsis"):
            lines.append(f"Synopsis: {current_item['synopsis']}")

    return "\n".join(lines) + "\n\n" + TOOL_USAGE_RULES


class BookContextProvider:
    """ContextProvider backed by a book lookup and the binder store.

    Args:
        get_book: Returns the book record for an id, or None.
        stores: Stores used to resolve the open binder item.
    """

    def __init__(
        self,
        get_book: Callable[[EntityId], Mapping[str, Any] | None],
        stores: StoryStores,
    ) -> None:
        self._get_book = get_book
        self._stores = stores

    def __call__(self, scope: BookScope) -> str:
        book = self._get_book(scope.book_id) or {}
        item = None
        if scope.item_id is not None:
            item = self._stores.binder_items.get_one(scope.item_id, scope.book_id)
        return build_book_context(book, item)


__all__ = [
    "TOOL_USAGE_RULES",
    "build_book_context",
    "BookContextProvider",
]
