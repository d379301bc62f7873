"""Identifiers that scope persistence calls for one conversation turn."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


EntityId = Any
"""Store-assigned identifier (an int for the bundled stores)."""


@dataclass(frozen=True)
class BookScope:
    """The book a turn operates on, plus the item open in the editor.

    Attributes:
        book_id: Owning book; every store call is filtered by it.
        item_id: Binder item currently open in the editor, if any.
    """

    book_id: EntityId
    item_id: EntityId | None = None


__all__ = ["EntityId", "BookScope"]
