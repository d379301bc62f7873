"""Binder item tools: chapters, scenes, folders, notes and research.

The binder is the book's content tree. ``read_binder_items`` returns it
nested; the other tools address a single node by ``item_id``. Deleting a
node removes its whole subtree (a property of the binder store).
"""

from __future__ import annotations

from typing import Any

from vibewriter.core.constants import DEFAULT_ITEM_TYPE
from vibewriter.core.logging import get_logger
from vibewriter.models.enums import EntityKind, ItemType, ToolOperation
from vibewriter.storage.base import Record
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

UPDATABLE_FIELDS = ("title", "synopsis", "content", "status", "label")


# =============================================================================
# Tree Formatting
# =============================================================================


def build_tree(items: list[Record], parent_id: Any = None) -> list[Record]:
    """Nest flat binder records under their parents, starting at ``parent_id``."""
    branch: list[Record] = []
    for item in items:
        if item.get("parent_id") == parent_id:
            node = dict(item)
            children = build_tree(items, item["id"])
            if children:
                node["children"] = children
            branch.append(node)
    return branch


def format_tree(nodes: list[Record], indent: int = 0) -> list[dict[str, Any]]:
    """Reduce tree nodes to the fields the model needs."""
    formatted = []
    for node in nodes:
        info: dict[str, Any] = {
            "id": node["id"],
            "title": node.get("title"),
            "type": node.get("item_type"),
            "synopsis": node.get("synopsis"),
            "word_count": node.get("word_count"),
            "status": node.get("status"),
            "indent_level": indent,
        }
        if node.get("children"):
            info["children"] = format_tree(node["children"], indent + 1)
        formatted.append(info)
    return formatted


def _count_nodes(nodes: list[dict[str, Any]]) -> int:
    return sum(1 + _count_nodes(node.get("children", [])) for node in nodes)


# =============================================================================
# Tools
# =============================================================================


@tool(
    name="read_binder_items",
    entity=EntityKind.BINDER_ITEM,
    operation=ToolOperation.READ_ALL,
    description=(
        "Reads all items in the book's binder structure. Use this to see what chapters, "
        "scenes, and other items already exist in the book. Returns the hierarchical "
        "structure with all items."
    ),
    properties={
        "parent_id": {
            "type": "number",
            "description": "Optional: Filter to only show children of a specific parent item",
        },
    },
)
def read_binder_items(args: dict[str, Any], context: ToolContext) -> ToolResult:
    items = context.stores.binder_items.get_all(context.book_id)
    tree = format_tree(build_tree(items, args.get("parent_id")))
    total = _count_nodes(tree)
    return ToolResult.ok(
        f"Retrieved {total} items from the binder",
        items=tree,
        total_count=total,
    )


@tool(
    name="read_binder_item",
    entity=EntityKind.BINDER_ITEM,
    operation=ToolOperation.READ_ONE,
    description=(
        "Reads detailed information about a specific binder item including its title, "
        "type, synopsis, content, and metadata. Use this to examine the details of a "
        "particular chapter, scene, or other item."
    ),
    properties={"item_id": id_schema("item", "read")},
    required=("item_id",),
)
def read_binder_item(args: dict[str, Any], context: ToolContext) -> ToolResult:
    item_id = args["item_id"]
    item = context.stores.binder_items.get_one(item_id, context.book_id)
    if item is None:
        return ToolResult.fail("Item not found")

    metadata = context.stores.item_metadata.get(item["id"])
    return ToolResult.ok(
        f"Retrieved item: {item['title']}",
        item={
            "id": item["id"],
            "title": item.get("title"),
            "type": item.get("item_type"),
            "synopsis": item.get("synopsis"),
            "content": item.get("content"),
            "word_count": item.get("word_count"),
            "status": item.get("status"),
            "label": item.get("label"),
            "parent_id": item.get("parent_id"),
            "metadata": metadata,
        },
    )


@tool(
    name="create_binder_item",
    entity=EntityKind.BINDER_ITEM,
    operation=ToolOperation.CREATE,
    description=(
        "Creates a new item in the book's binder structure (chapter, scene, note, etc.). "
        "Use this when the user asks you to create, add, or outline new sections of "
        "their book."
    ),
    properties={
        "title": text_schema("The title of the item to create"),
        "item_type": enum_schema(
            ItemType,
            "The type of item: folder (for organizing), chapter, scene, note, or research",
        ),
        "synopsis": text_schema("A brief synopsis or description of this item (optional)"),
        "content": text_schema("The initial content for this item (optional)"),
        "parent_id": {
            "type": "number",
            "description": (
                "The ID of the parent item to nest this under "
                "(optional, defaults to root level)"
            ),
        },
    },
    required=("title", "item_type"),
)
def create_binder_item(args: dict[str, Any], context: ToolContext) -> ToolResult:
    title = args["title"]
    item_type = args.get("item_type") or DEFAULT_ITEM_TYPE
    if invalid_choice(item_type, ItemType):
        return ToolResult.fail("Invalid item type")

    parent_id = args.get("parent_id")
    store = context.stores.binder_items
    if parent_id is not None and store.get_one(parent_id, context.book_id) is None:
        return ToolResult.fail("Parent item not found")

    item_id = store.create(
        context.book_id,
        {
            "parent_id": parent_id,
            "item_type": item_type,
            "title": title,
            "synopsis": args.get("synopsis") or "",
            "content": args.get("content") or "",
        },
    )
    context.ledger.record_item_created(item_id, title, item_type)
    logger.info("Binder item created", item_id=item_id, item_type=item_type)

    return ToolResult.ok(
        f"Created {item_type}: {title}",
        item_id=item_id,
        title=title,
        type=item_type,
    )


@tool(
    name="update_binder_item",
    entity=EntityKind.BINDER_ITEM,
    operation=ToolOperation.UPDATE,
    description=(
        "Updates an existing binder item. Can update title, synopsis, content, status, "
        "label, or metadata. Use this to modify, edit, or revise existing chapters, "
        "scenes, or other items."
    ),
    properties={
        "item_id": id_schema("item", "update"),
        "title": text_schema("New title for the item (optional)"),
        "synopsis": text_schema("New synopsis/description (optional)"),
        "content": text_schema("New content for the item (optional)"),
        "status": text_schema(
            'New status (e.g., "draft", "in_progress", "complete") (optional)'
        ),
        "label": text_schema("New label/tag for the item (optional)"),
        "metadata": {
            "type": "object",
            "description": "Key/value pairs to store on the item, e.g. POV or setting (optional)",
        },
    },
    required=("item_id",),
)
def update_binder_item(args: dict[str, Any], context: ToolContext) -> ToolResult:
    item_id = args["item_id"]
    store = context.stores.binder_items
    item = store.get_one(item_id, context.book_id)
    if item is None:
        return ToolResult.fail("Item not found")

    metadata = args.get("metadata")
    if metadata is not None and not isinstance(metadata, dict):
        return ToolResult.fail("Metadata must be an object")

    fields = collect_fields(args, UPDATABLE_FIELDS)
    if not fields and not metadata:
        return ToolResult.fail("No fields to update")

    changed = store.update(item["id"], context.book_id, fields) if fields else False
    if fields and not changed and not metadata:
        return ToolResult.fail("Item not found or no changes made")

    updated_fields = list(fields) if changed else []
    metadata_error = None
    for key, value in (metadata or {}).items():
        try:
            context.stores.item_metadata.set(item["id"], str(key), value)
        except Exception as exc:
            logger.exception("Metadata write failed", item_id=item["id"], key=str(key))
            metadata_error = str(exc) or exc.__class__.__name__
            break
        updated_fields.append(f"metadata.{key}")

    # Whatever was written is recorded, even when a later metadata key failed.
    if updated_fields:
        context.ledger.record_item_updated(
            item["id"], fields.get("title", item["title"]), updated_fields
        )
        logger.info("Binder item updated", item_id=item["id"], fields=updated_fields)

    if metadata_error is not None:
        saved = ", ".join(updated_fields) or "nothing"
        return ToolResult(
            success=False,
            data={"item_id": item["id"], "updated_fields": updated_fields},
            error=f"Metadata update failed: {metadata_error} (saved: {saved})",
        )

    return ToolResult.ok(
        f"Updated item '{item['title']}': {', '.join(updated_fields)}",
        item_id=item["id"],
        updated_fields=updated_fields,
    )


@tool(
    name="delete_binder_item",
    entity=EntityKind.BINDER_ITEM,
    operation=ToolOperation.DELETE,
    description=(
        "Deletes a binder item and all its children. Use this carefully when the user "
        "wants to remove a chapter, scene, or other item from their book."
    ),
    properties={"item_id": id_schema("item", "delete")},
    required=("item_id",),
)
def delete_binder_item(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.binder_items
    item = store.get_one(args["item_id"], context.book_id)
    if item is None:
        return ToolResult.fail("Item not found")

    if not store.delete(item["id"], context.book_id):
        return ToolResult.fail("Failed to delete item")

    logger.info("Binder item deleted", item_id=item["id"])
    return ToolResult.ok(f"Deleted item: {item['title']}", item_id=item["id"])
