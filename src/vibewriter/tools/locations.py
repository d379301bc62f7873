"""Location tools."""

from __future__ import annotations

from typing import Any

from vibewriter.core.logging import get_logger
from vibewriter.models.enums import EntityKind, ToolOperation
from vibewriter.tools.base import (
    ToolContext,
    ToolResult,
    collect_fields,
    id_schema,
    text_schema,
    tool,
)


logger = get_logger(__name__)

UPDATABLE_FIELDS = ("name", "description", "atmosphere", "significance", "notes")

_LABELS = {"name": "Location name"}

_DETAIL_PROPERTIES: dict[str, dict[str, Any]] = {
    "description": text_schema("What the location looks like (optional)"),
    "atmosphere": text_schema("Mood and sensory feel of the place (optional)"),
    "significance": text_schema("Why the location matters to the story (optional)"),
    "notes": text_schema("Additional notes (optional)"),
}


def _profile(location: dict[str, Any]) -> dict[str, Any]:
    profile = {"id": location["id"]}
    profile.update({name: location.get(name) for name in UPDATABLE_FIELDS})
    return profile


@tool(
    name="read_locations",
    entity=EntityKind.LOCATION,
    operation=ToolOperation.READ_ALL,
    description=(
        "Reads all locations in the book. Use this to see which places already exist "
        "before creating or describing settings."
    ),
)
def read_locations(args: dict[str, Any], context: ToolContext) -> ToolResult:
    locations = context.stores.locations.get_all(context.book_id)
    summaries = [
        {
            "id": location["id"],
            "name": location.get("name"),
            "description": location.get("description"),
            "has_image": bool(location.get("image")),
        }
        for location in locations
    ]
    return ToolResult.ok(
        f"Retrieved {len(locations)} locations",
        locations=summaries,
        total_count=len(locations),
    )


@tool(
    name="read_location",
    entity=EntityKind.LOCATION,
    operation=ToolOperation.READ_ONE,
    description=(
        "Reads detailed information about a specific location including its description, "
        "atmosphere, and significance to the story."
    ),
    properties={"location_id": id_schema("location", "read")},
    required=("location_id",),
)
def read_location(args: dict[str, Any], context: ToolContext) -> ToolResult:
    location = context.stores.locations.get_one(args["location_id"], context.book_id)
    if location is None:
        return ToolResult.fail("Location not found")
    return ToolResult.ok(f"Retrieved location: {location['name']}", location=_profile(location))


@tool(
    name="create_location",
    entity=EntityKind.LOCATION,
    operation=ToolOperation.CREATE,
    description=(
        "Creates a new location in the book. Use this when the user asks you to create "
        "or add a place, setting, or world-building location."
    ),
    properties={"name": text_schema("The location's name"), **_DETAIL_PROPERTIES},
    required=("name",),
    labels=_LABELS,
)
def create_location(args: dict[str, Any], context: ToolContext) -> ToolResult:
    name = args["name"]
    fields = {"name": name}
    fields.update({key: args.get(key) or "" for key in _DETAIL_PROPERTIES})

    location_id = context.stores.locations.create(context.book_id, fields)
    context.ledger.record_location_created(location_id, name)
    logger.info("Location created", location_id=location_id)

    return ToolResult.ok(f"Created location: {name}", location_id=location_id, name=name)


@tool(
    name="update_location",
    entity=EntityKind.LOCATION,
    operation=ToolOperation.UPDATE,
    description=(
        "Updates an existing location. Use this to refine descriptions, adjust the "
        "atmosphere, or record new significance for a place."
    ),
    properties={
        "location_id": id_schema("location", "update"),
        "name": text_schema("New name (optional)"),
        **_DETAIL_PROPERTIES,
    },
    required=("location_id",),
    labels=_LABELS,
)
def update_location(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.locations
    location = store.get_one(args["location_id"], context.book_id)
    if location is None:
        return ToolResult.fail("Location not found")

    fields = collect_fields(args, UPDATABLE_FIELDS)
    if not fields:
        return ToolResult.fail("No fields to update")

    if not store.update(location["id"], context.book_id, fields):
        return ToolResult.fail("Location not found or no changes made")

    updated_fields = list(fields)
    context.ledger.record_location_updated(
        location["id"], fields.get("name", location["name"]), updated_fields
    )
    logger.info("Location updated", location_id=location["id"], fields=updated_fields)

    return ToolResult.ok(
        f"Updated location '{location['name']}': {', '.join(updated_fields)}",
        location_id=location["id"],
        updated_fields=updated_fields,
    )


@tool(
    name="delete_location",
    entity=EntityKind.LOCATION,
    operation=ToolOperation.DELETE,
    description=(
        "Deletes a location from the book. Use this carefully when the user wants to "
        "remove a place."
    ),
    properties={"location_id": id_schema("location", "delete")},
    required=("location_id",),
)
def delete_location(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.locations
    location = store.get_one(args["location_id"], context.book_id)
    if location is None:
        return ToolResult.fail("Location not found")

    if not store.delete(location["id"], context.book_id):
        return ToolResult.fail("Failed to delete location")

    logger.info("Location deleted", location_id=location["id"])
    return ToolResult.ok(f"Deleted location: {location['name']}", location_id=location["id"])
