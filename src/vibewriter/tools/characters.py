"""Character sheet tools."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from vibewriter.core.constants import DEFAULT_CHARACTER_ROLE
from vibewriter.core.logging import get_logger
from vibewriter.models.enums import CharacterRole, EntityKind, ToolOperation
from vibewriter.tools.base import (
    ToolContext,
    ToolResult,
    collect_fields,
    enum_schema,
    id_schema,
    invalid_choice,
    text_schema,
    tool,
)


logger = get_logger(__name__)

UPDATABLE_FIELDS = (
    "name",
    "role",
    "age",
    "gender",
    "physical_description",
    "personality",
    "speech_patterns",
    "voice_description",
    "background",
    "motivation",
    "arc",
    "relationships",
    "notes",
)

_LABELS = {"name": "Character name"}

_ROLE_SCHEMA = enum_schema(
    CharacterRole,
    "The character's role in the story: protagonist, antagonist, supporting, or minor",
)

_PROFILE_PROPERTIES: dict[str, dict[str, Any]] = {
    "age": {"type": "number", "description": "Character's age (optional)"},
    "gender": text_schema("Character's gender (optional)"),
    "physical_description": text_schema("Physical appearance description (optional)"),
    "personality": text_schema("Personality traits and characteristics (optional)"),
    "speech_patterns": text_schema("How the character speaks, dialect, verbal tics (optional)"),
    "background": text_schema("Character's backstory and history (optional)"),
    "motivation": text_schema("What drives the character, their goals (optional)"),
}


def _summary(character: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": character["id"],
        "name": character.get("name"),
        "role": character.get("role"),
        "age": character.get("age"),
        "gender": character.get("gender"),
        "physical_description": character.get("physical_description"),
        "personality": character.get("personality"),
        "has_image": bool(character.get("primary_image")),
    }


@tool(
    name="read_characters",
    entity=EntityKind.CHARACTER,
    operation=ToolOperation.READ_ALL,
    description=(
        "Reads all characters in the book. Use this to see what characters already exist, "
        "their names, roles, and basic information."
    ),
)
def read_characters(args: dict[str, Any], context: ToolContext) -> ToolResult:
    characters = context.stores.characters.get_all(context.book_id)
    return ToolResult.ok(
        f"Retrieved {len(characters)} characters",
        characters=[_summary(character) for character in characters],
        total_count=len(characters),
    )


@tool(
    name="read_character",
    entity=EntityKind.CHARACTER,
    operation=ToolOperation.READ_ONE,
    description=(
        "Reads detailed information about a specific character including their full "
        "profile, personality, background, and relationships."
    ),
    properties={"character_id": id_schema("character", "read")},
    required=("character_id",),
)
def read_character(args: dict[str, Any], context: ToolContext) -> ToolResult:
    character = context.stores.characters.get_one(args["character_id"], context.book_id)
    if character is None:
        return ToolResult.fail("Character not found")

    profile = {"id": character["id"]}
    profile.update({name: character.get(name) for name in UPDATABLE_FIELDS})
    return ToolResult.ok(f"Retrieved character: {character['name']}", character=profile)


@tool(
    name="create_character",
    entity=EntityKind.CHARACTER,
    operation=ToolOperation.CREATE,
    description=(
        "Creates a new character in the book. Use this when the user asks you to create, "
        "add, or develop a new character."
    ),
    properties={
        "name": text_schema("The character's name"),
        "role": _ROLE_SCHEMA,
        **_PROFILE_PROPERTIES,
    },
    required=("name",),
    labels=_LABELS,
)
def create_character(args: dict[str, Any], context: ToolContext) -> ToolResult:
    name = args["name"]
    role = args.get("role") or DEFAULT_CHARACTER_ROLE
    if invalid_choice(role, CharacterRole):
        return ToolResult.fail("Invalid role")

    fields = {
        "name": name,
        "role": role,
        "physical_description": args.get("physical_description") or "",
        "personality": args.get("personality") or "",
        "speech_patterns": args.get("speech_patterns") or "",
        "background": args.get("background") or "",
        "motivation": args.get("motivation") or "",
        "age": args.get("age"),
        "gender": args.get("gender") or "",
        "ai_generated": True,
        "ai_metadata": {
            "created_by_ai": True,
            "created_at": datetime.now().isoformat(sep=" ", timespec="seconds"),
        },
    }
    character_id = context.stores.characters.create(context.book_id, fields)
    context.ledger.record_character_created(character_id, name, role)
    logger.info("Character created", character_id=character_id, role=role)

    return ToolResult.ok(
        f"Created character: {name} ({role})",
        character_id=character_id,
        name=name,
    )


@tool(
    name="update_character",
    entity=EntityKind.CHARACTER,
    operation=ToolOperation.UPDATE,
    description=(
        "Updates an existing character. Use this to modify character details, develop "
        "their personality, add backstory, or change any character attributes."
    ),
    properties={
        "character_id": id_schema("character", "update"),
        "name": text_schema("New name (optional)"),
        "role": _ROLE_SCHEMA,
        **_PROFILE_PROPERTIES,
        "voice_description": text_schema("Description of the character's voice (optional)"),
        "arc": text_schema("The character's development arc (optional)"),
        "relationships": text_schema("Relationships with other characters (optional)"),
        "notes": text_schema("Additional notes (optional)"),
    },
    required=("character_id",),
    labels=_LABELS,
)
def update_character(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.characters
    character = store.get_one(args["character_id"], context.book_id)
    if character is None:
        return ToolResult.fail("Character not found")

    fields = collect_fields(args, UPDATABLE_FIELDS)
    if not fields:
        return ToolResult.fail("No fields to update")
    if invalid_choice(fields.get("role"), CharacterRole):
        return ToolResult.fail("Invalid role")

    if not store.update(character["id"], context.book_id, fields):
        return ToolResult.fail("Character not found or no changes made")

    updated_fields = list(fields)
    context.ledger.record_character_updated(
        character["id"], fields.get("name", character["name"]), updated_fields
    )
    logger.info("Character updated", character_id=character["id"], fields=updated_fields)

    return ToolResult.ok(
        f"Updated character '{character['name']}': {', '.join(updated_fields)}",
        character_id=character["id"],
        updated_fields=updated_fields,
    )


@tool(
    name="delete_character",
    entity=EntityKind.CHARACTER,
    operation=ToolOperation.DELETE,
    description=(
        "Deletes a character from the book. Use this carefully when the user wants to "
        "remove a character."
    ),
    properties={"character_id": id_schema("character", "delete")},
    required=("character_id",),
)
def delete_character(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.characters
    character = store.get_one(args["character_id"], context.book_id)
    if character is None:
        return ToolResult.fail("Character not found")

    if not store.delete(character["id"], context.book_id):
        return ToolResult.fail("Failed to delete character")

    logger.info("Character deleted", character_id=character["id"])
    return ToolResult.ok(
        f"Deleted character: {character['name']}", character_id=character["id"]
    )
