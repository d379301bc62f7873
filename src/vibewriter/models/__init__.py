"""Domain models for the VibeWriter assistant."""

from __future__ import annotations

from vibewriter.models.enums import (
    CharacterRole,
    EntityKind,
    ItemType,
    ThreadStatus,
    ThreadType,
    ToolOperation,
)
from vibewriter.models.ledger import (
    CreatedCharacter,
    CreatedItem,
    CreatedLocation,
    CreatedPlotThread,
    SideEffectLedger,
    UpdatedCharacter,
    UpdatedItem,
    UpdatedLocation,
    UpdatedPlotThread,
)
from vibewriter.models.scope import BookScope, EntityId


__all__ = [
    # Enums
    "EntityKind",
    "ToolOperation",
    "ItemType",
    "CharacterRole",
    "ThreadType",
    "ThreadStatus",
    # Scope
    "BookScope",
    "EntityId",
    # Ledger
    "SideEffectLedger",
    "CreatedItem",
    "UpdatedItem",
    "CreatedCharacter",
    "UpdatedCharacter",
    "CreatedLocation",
    "UpdatedLocation",
    "CreatedPlotThread",
    "UpdatedPlotThread",
]
