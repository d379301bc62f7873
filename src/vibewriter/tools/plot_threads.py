"""Plot thread tools: the main plot, subplots and character arcs."""

from __future__ import annotations

from typing import Any

from vibewriter.core.constants import DEFAULT_THREAD_STATUS, DEFAULT_THREAD_TYPE
from vibewriter.core.logging import get_logger
from vibewriter.models.enums import EntityKind, ThreadStatus, ThreadType, ToolOperation
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

UPDATABLE_FIELDS = ("title", "description", "thread_type", "status", "color")

_LABELS = {"title": "Plot thread title"}

_TYPE_SCHEMA = enum_schema(
    ThreadType, "Kind of thread: main plot, subplot, or character_arc"
)
_STATUS_SCHEMA = enum_schema(ThreadStatus, "Whether the thread is still open or resolved")


def _validate_choices(fields: dict[str, Any]) -> str | None:
    if invalid_choice(fields.get("thread_type"), ThreadType):
        return "Invalid thread type"
    if invalid_choice(fields.get("status"), ThreadStatus):
        return "Invalid status"
    return None


@tool(
    name="read_plot_threads",
    entity=EntityKind.PLOT_THREAD,
    operation=ToolOperation.READ_ALL,
    description=(
        "Reads all plot threads in the book, grouped by type. Use this to review the "
        "main plot, subplots, and character arcs before adding or changing any."
    ),
)
def read_plot_threads(args: dict[str, Any], context: ToolContext) -> ToolResult:
    threads = context.stores.plot_threads.get_all(context.book_id)
    summaries = [
        {
            "id": thread["id"],
            "title": thread.get("title"),
            "thread_type": thread.get("thread_type"),
            "status": thread.get("status"),
            "description": thread.get("description"),
        }
        for thread in threads
    ]
    return ToolResult.ok(
        f"Retrieved {len(threads)} plot threads",
        plot_threads=summaries,
        total_count=len(threads),
    )


@tool(
    name="read_plot_thread",
    entity=EntityKind.PLOT_THREAD,
    operation=ToolOperation.READ_ONE,
    description="Reads detailed information about a specific plot thread.",
    properties={"thread_id": id_schema("plot thread", "read")},
    required=("thread_id",),
)
def read_plot_thread(args: dict[str, Any], context: ToolContext) -> ToolResult:
    thread = context.stores.plot_threads.get_one(args["thread_id"], context.book_id)
    if thread is None:
        return ToolResult.fail("Plot thread not found")

    profile = {"id": thread["id"]}
    profile.update({name: thread.get(name) for name in UPDATABLE_FIELDS})
    return ToolResult.ok(f"Retrieved plot thread: {thread['title']}", plot_thread=profile)


@tool(
    name="create_plot_thread",
    entity=EntityKind.PLOT_THREAD,
    operation=ToolOperation.CREATE,
    description=(
        "Creates a new plot thread. Use this when the user wants to track a new storyline, "
        "subplot, or character arc."
    ),
    properties={
        "title": text_schema("The plot thread's title"),
        "description": text_schema("What happens in this thread (optional)"),
        "thread_type": _TYPE_SCHEMA,
        "status": _STATUS_SCHEMA,
        "color": text_schema('Display color such as "#3b82f6" (optional)'),
    },
    required=("title",),
    labels=_LABELS,
)
def create_plot_thread(args: dict[str, Any], context: ToolContext) -> ToolResult:
    title = args["title"]
    fields = {
        "title": title,
        "description": args.get("description") or "",
        "thread_type": args.get("thread_type") or DEFAULT_THREAD_TYPE,
        "status": args.get("status") or DEFAULT_THREAD_STATUS,
    }
    if args.get("color"):
        fields["color"] = args["color"]

    error = _validate_choices(fields)
    if error:
        return ToolResult.fail(error)

    thread_id = context.stores.plot_threads.create(context.book_id, fields)
    context.ledger.record_plot_thread_created(thread_id, title, fields["thread_type"])
    logger.info("Plot thread created", thread_id=thread_id, thread_type=fields["thread_type"])

    return ToolResult.ok(
        f"Created plot thread: {title} ({fields['thread_type']})",
        thread_id=thread_id,
        title=title,
    )


@tool(
    name="update_plot_thread",
    entity=EntityKind.PLOT_THREAD,
    operation=ToolOperation.UPDATE,
    description=(
        "Updates an existing plot thread. Use this to revise its description, change its "
        "type, or mark it resolved."
    ),
    properties={
        "thread_id": id_schema("plot thread", "update"),
        "title": text_schema("New title (optional)"),
        "description": text_schema("New description (optional)"),
        "thread_type": _TYPE_SCHEMA,
        "status": _STATUS_SCHEMA,
        "color": text_schema("New display color (optional)"),
    },
    required=("thread_id",),
    labels=_LABELS,
)
def update_plot_thread(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.plot_threads
    thread = store.get_one(args["thread_id"], context.book_id)
    if thread is None:
        return ToolResult.fail("Plot thread not found")

    fields = collect_fields(args, UPDATABLE_FIELDS)
    if not fields:
        return ToolResult.fail("No fields to update")

    error = _validate_choices(fields)
    if error:
        return ToolResult.fail(error)

    if not store.update(thread["id"], context.book_id, fields):
        return ToolResult.fail("Plot thread not found or no changes made")

    updated_fields = list(fields)
    context.ledger.record_plot_thread_updated(
        thread["id"], fields.get("title", thread["title"]), updated_fields
    )
    logger.info("Plot thread updated", thread_id=thread["id"], fields=updated_fields)

    return ToolResult.ok(
        f"Updated plot thread '{thread['title']}': {', '.join(updated_fields)}",
        thread_id=thread["id"],
        updated_fields=updated_fields,
    )


@tool(
    name="delete_plot_thread",
    entity=EntityKind.PLOT_THREAD,
    operation=ToolOperation.DELETE,
    description=(
        "Deletes a plot thread. Use this carefully when the user wants to drop a "
        "storyline."
    ),
    properties={"thread_id": id_schema("plot thread", "delete")},
    required=("thread_id",),
)
def delete_plot_thread(args: dict[str, Any], context: ToolContext) -> ToolResult:
    store = context.stores.plot_threads
    thread = store.get_one(args["thread_id"], context.book_id)
    if thread is None:
        return ToolResult.fail("Plot thread not found")

    if not store.delete(thread["id"], context.book_id):
        return ToolResult.fail("Failed to delete plot thread")

    logger.info("Plot thread deleted", thread_id=thread["id"])
    return ToolResult.ok(f"Deleted plot thread: {thread['title']}", thread_id=thread["id"])
