"""Writing tools the model can call, their catalogue and their dispatcher."""

from __future__ import annotations

from vibewriter.tools.base import (
    ToolCall,
    ToolContext,
    ToolDefinition,
    ToolResult,
    tool,
)
from vibewriter.tools.dispatch import dispatch, execute_tool, execute_tool_calls
from vibewriter.tools.registry import (
    get_all_tools,
    get_tool,
    get_tools_as_anthropic_schema,
    get_tools_as_openai_schema,
    get_tools_by_entity,
)


__all__ = [
    # Types
    "ToolCall",
    "ToolContext",
    "ToolDefinition",
    "ToolResult",
    # Registry
    "tool",
    "get_tool",
    "get_all_tools",
    "get_tools_by_entity",
    "get_tools_as_anthropic_schema",
    "get_tools_as_openai_schema",
    # Execution
    "dispatch",
    "execute_tool",
    "execute_tool_calls",
]
