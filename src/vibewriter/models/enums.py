"""Enumerations for story entities and the tool catalogue.

All enums are string enums so they serialise directly into tool schemas
and JSON tool results.
"""

from __future__ import annotations

from enum import StrEnum


class EntityKind(StrEnum):
    """Kinds of story entity the assistant can manipulate."""

    BINDER_ITEM = "binder_item"
    CHARACTER = "character"
    LOCATION = "location"
    PLOT_THREAD = "plot_thread"

    @property
    def label(self) -> str:
        """Display name used in tool messages ("Item not found")."""
        return _ENTITY_LABELS[self]


_ENTITY_LABELS = {
    EntityKind.BINDER_ITEM: "Item",
    EntityKind.CHARACTER: "Character",
    EntityKind.LOCATION: "Location",
    EntityKind.PLOT_THREAD: "Plot thread",
}


class ToolOperation(StrEnum):
    """The five operations offered for every entity kind."""

    READ_ALL = "read_all"
    READ_ONE = "read_one"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class ItemType(StrEnum):
    """Node types in the binder tree."""

    FOLDER = "folder"
    CHAPTER = "chapter"
    SCENE = "scene"
    NOTE = "note"
    RESEARCH = "research"


class CharacterRole(StrEnum):
    """Narrative role of a character."""

    PROTAGONIST = "protagonist"
    ANTAGONIST = "antagonist"
    SUPPORTING = "supporting"
    MINOR = "minor"


class ThreadType(StrEnum):
    """Kind of plot thread."""

    MAIN = "main"
    SUBPLOT = "subplot"
    CHARACTER_ARC = "character_arc"


class ThreadStatus(StrEnum):
    """Whether a plot thread is still in play."""

    OPEN = "open"
    RESOLVED = "resolved"


__all__ = [
    "EntityKind",
    "ToolOperation",
    "ItemType",
    "CharacterRole",
    "ThreadType",
    "ThreadStatus",
]
