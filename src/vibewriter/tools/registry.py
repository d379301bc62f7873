"""Tool catalogue accessors.

Importing this module registers all 20 writing tools. The handler modules
are imported in catalogue order (binder items, characters, locations,
plot threads) and each registers its tools as read-all, read-one, create,
update, delete, so registry order is the order the model sees.

The catalogue is fixed once this module is imported, so the accessors are
memoised. Vendor schemas are built fresh on every call: callers put them
into request payloads and may mutate them.
"""

from __future__ import annotations

import copy
from functools import cache
from typing import Any

from vibewriter.models.enums import EntityKind
from vibewriter.tools import binder, characters, locations, plot_threads  # noqa: F401
from vibewriter.tools.base import ToolDefinition, registered_tools


def get_tool(name: str) -> ToolDefinition | None:
    """Get a tool definition by name."""
    return registered_tools().get(name)


@cache
def get_all_tools() -> tuple[ToolDefinition, ...]:
    """Get all registered tools in catalogue order."""
    return tuple(registered_tools().values())


@cache
def get_tools_by_entity(entity: EntityKind) -> tuple[ToolDefinition, ...]:
    """Get the five tools operating on one entity kind."""
    return tuple(t for t in get_all_tools() if t.entity == entity)


def get_tools_as_anthropic_schema() -> list[dict[str, Any]]:
    """Get all tools in the content-block (``input_schema``) format."""
    return [
        {
            "name": tool_def.name,
            "description": tool_def.description,
            "input_schema": copy.deepcopy(tool_def.parameters),
        }
        for tool_def in get_all_tools()
    ]


def get_tools_as_openai_schema() -> list[dict[str, Any]]:
    """Get all tools in OpenAI function calling schema format."""
    tools = []
    for tool_def in get_all_tools():
        tools.append({
            "type": "function",
            "function": {
                "name": tool_def.name,
                "description": tool_def.description,
                "parameters": copy.deepcopy(tool_def.parameters),
            },
        })
    return tools


__all__ = [
    "get_tool",
    "get_all_tools",
    "get_tools_by_entity",
    "get_tools_as_anthropic_schema",
    "get_tools_as_openai_schema",
]
