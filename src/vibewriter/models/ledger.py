"""Side-effect ledger for a single conversation turn.

Tool handlers record every entity they create or update here so the
caller can tell its client what changed (for example to refresh the
binder tree). A ledger lives for exactly one turn and is handed to the
caller by value once the turn ends, whether it finished or failed.

Models:
    CreatedItem, UpdatedItem: Binder item effects.
    CreatedCharacter, UpdatedCharacter: Character effects.
    CreatedLocation, UpdatedLocation: Location effects.
    CreatedPlotThread, UpdatedPlotThread: Plot thread effects.
    SideEffectLedger: The eight effect lists for one turn.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


EntityRef = int | str


# =============================================================================
# Ledger Entries
# =============================================================================


class _Entry(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, coerce_numbers_to_str=True)


class CreatedItem(_Entry):
    """A binder item created by a tool call."""

    item_id: EntityRef
    title: str
    type: str


class UpdatedItem(_Entry):
    """A binder item updated by a tool call."""

    item_id: EntityRef
    title: str
    updated_fields: list[str] = Field(default_factory=list)


class CreatedCharacter(_Entry):
    """A character created by a tool call."""

    character_id: EntityRef
    name: str
    role: str


class UpdatedCharacter(_Entry):
    """A character updated by a tool call."""

    character_id: EntityRef
    name: str
    updated_fields: list[str] = Field(default_factory=list)


class CreatedLocation(_Entry):
    """A location created by a tool call."""

    location_id: EntityRef
    name: str


class UpdatedLocation(_Entry):
    """A location updated by a tool call."""

    location_id: EntityRef
    name: str
    updated_fields: list[str] = Field(default_factory=list)


class CreatedPlotThread(_Entry):
    """A plot thread created by a tool call."""

    thread_id: EntityRef
    title: str
    thread_type: str


class UpdatedPlotThread(_Entry):
    """A plot thread updated by a tool call."""

    thread_id: EntityRef
    title: str
    updated_fields: list[str] = Field(default_factory=list)


# =============================================================================
# Ledger
# =============================================================================


class SideEffectLedger(BaseModel):
    """Created/updated entities accumulated across all rounds of one turn.

    Entries are appended in the order the tools ran; nothing is ever
    removed, so a failure later in the turn leaves earlier entries intact.

    Example:
        >>> ledger = SideEffectLedger()
        >>> ledger.record_item_created(7, "Intro", "chapter")
        >>> ledger.to_response()["items_created"]
        [{'item_id': 7, 'title': 'Intro', 'type': 'chapter'}]
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    items_created: list[CreatedItem] = Field(default_factory=list)
    items_updated: list[UpdatedItem] = Field(default_factory=list)
    characters_created: list[CreatedCharacter] = Field(default_factory=list)
    characters_updated: list[UpdatedCharacter] = Field(default_factory=list)
    locations_created: list[CreatedLocation] = Field(default_factory=list)
    locations_updated: list[UpdatedLocation] = Field(default_factory=list)
    plot_threads_created: list[CreatedPlotThread] = Field(default_factory=list)
    plot_threads_updated: list[UpdatedPlotThread] = Field(default_factory=list)

    # -------------------------------------------------------------------------
    # Recording
    # -------------------------------------------------------------------------

    def record_item_created(self, item_id: EntityRef, title: str, item_type: str) -> None:
        self.items_created.append(CreatedItem(item_id=item_id, title=title, type=item_type))

    def record_item_updated(
        self, item_id: EntityRef, title: str, updated_fields: list[str]
    ) -> None:
        self.items_updated.append(
            UpdatedItem(item_id=item_id, title=title, updated_fields=list(updated_fields))
        )

    def record_character_created(self, character_id: EntityRef, name: str, role: str) -> None:
        self.characters_created.append(
            CreatedCharacter(character_id=character_id, name=name, role=role)
        )

    def record_character_updated(
        self, character_id: EntityRef, name: str, updated_fields: list[str]
    ) -> None:
        self.characters_updated.append(
            UpdatedCharacter(
                character_id=character_id, name=name, updated_fields=list(updated_fields)
            )
        )

    def record_location_created(self, location_id: EntityRef, name: str) -> None:
        self.locations_created.append(CreatedLocation(location_id=location_id, name=name))

    def record_location_updated(
        self, location_id: EntityRef, name: str, updated_fields: list[str]
    ) -> None:
        self.locations_updated.append(
            UpdatedLocation(
                location_id=location_id, name=name, updated_fields=list(updated_fields)
            )
        )

    def record_plot_thread_created(
        self, thread_id: EntityRef, title: str, thread_type: str
    ) -> None:
        self.plot_threads_created.append(
            CreatedPlotThread(thread_id=thread_id, title=title, thread_type=thread_type)
        )

    def record_plot_thread_updated(
        self, thread_id: EntityRef, title: str, updated_fields: list[str]
    ) -> None:
        self.plot_threads_updated.append(
            UpdatedPlotThread(thread_id=thread_id, title=title, updated_fields=list(updated_fields))
        )

    # -------------------------------------------------------------------------
    # Reporting
    # -------------------------------------------------------------------------

    @property
    def total_changes(self) -> int:
        """Number of recorded effects across all eight lists."""
        return sum(len(getattr(self, name)) for name in type(self).model_fields)

    @property
    def is_empty(self) -> bool:
        return self.total_changes == 0

    def to_response(self) -> dict[str, list[dict[str, Any]] | None]:
        """Render the ledger for the caller's JSON response.

        Empty lists are rendered as ``None`` so clients can test a key for
        truthiness.
        """
        rendered: dict[str, list[dict[str, Any]] | None] = {}
        for name in type(self).model_fields:
            entries = getattr(self, name)
            rendered[name] = [entry.model_dump() for entry in entries] if entries else None
        return rendered


__all__ = [
    "CreatedItem",
    "UpdatedItem",
    "CreatedCharacter",
    "UpdatedCharacter",
    "CreatedLocation",
    "UpdatedLocation",
    "CreatedPlotThread",
    "UpdatedPlotThread",
    "SideEffectLedger",
]
