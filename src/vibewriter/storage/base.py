"""Persistence collaborator interfaces consumed by the tool handlers.

Story data lives outside the assistant. The tool handlers only depend on
the small protocols below, one store per entity kind, so any backend (an
SQL database, a web service, the in-memory stores in
``vibewriter.storage.memory``) can be plugged in.

Records are plain dictionaries carrying at least ``id`` and ``book_id``
plus the entity's own columns.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from vibewriter.models.scope import EntityId


Record = dict[str, Any]


@runtime_checkable
class EntityStore(Protocol):
    """CRUD operations for one entity kind, always scoped to a book."""

    def get_all(self, book_id: EntityId) -> list[Record]:
        """Return every record of the book in display order."""
        ...

    def get_one(self, entity_id: EntityId, book_id: EntityId) -> Record | None:
        """Return one record, or None when it does not exist in the book."""
        ...

    def create(self, book_id: EntityId, fields: Record) -> EntityId:
        """Insert a record and return its new id."""
        ...

    def update(self, entity_id: EntityId, book_id: EntityId, fields: Record) -> bool:
        """Apply ``fields``; return True when anything changed."""
        ...

    def delete(self, entity_id: EntityId, book_id: EntityId) -> bool:
        """Remove a record; return True when it was deleted."""
        ...


@runtime_checkable
class MetadataStore(Protocol):
    """Key/value side table attached to binder items."""

    def get(self, item_id: EntityId) -> dict[str, Any]:
        ...

    def set(self, item_id: EntityId, key: str, value: Any) -> None:
        ...


@runtime_checkable
class ConversationHistory(Protocol):
    """Log of completed assistant exchanges."""

    def save(self, book_id: EntityId, message: str, response: str) -> None:
        ...


@dataclass
class StoryStores:
    """Bundle of the collaborators a tool handler may touch.

    Attributes:
        binder_items: Chapters, scenes, folders, notes and research items.
        characters: Character sheets.
        locations: Story locations.
        plot_threads: Main plot, subplots and character arcs.
        item_metadata: Per-item key/value metadata.
    """

    binder_items: EntityStore
    characters: EntityStore
    locations: EntityStore
    plot_threads: EntityStore
    item_metadata: MetadataStore


__all__ = [
    "Record",
    "EntityStore",
    "MetadataStore",
    "ConversationHistory",
    "StoryStores",
]
