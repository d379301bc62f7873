"""Tool execution.

``dispatch`` is the single entry point between a decoded tool call and
the handlers: it resolves the tool, checks required fields and text
fields before any store is touched, and stamps the result with the call
it answers.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from vibewriter.core.logging import get_logger
from vibewriter.tools.base import ToolCall, ToolContext, ToolResult
from vibewriter.tools.registry import get_tool


logger = get_logger(__name__)


def dispatch(
    tool_name: str,
    arguments: Any,
    context: ToolContext,
    *,
    call_id: str = "",
) -> ToolResult:
    """Execute one tool.

    Args:
        tool_name: Name the model asked for.
        arguments: Decoded arguments; anything but a dict counts as ``{}``.
        context: Book scope, stores and the turn's ledger.
        call_id: Vendor call id to echo on the result.

    Returns:
        The tool's result. Never raises.
    """
    tool_def = get_tool(tool_name)
    if tool_def is None:
        logger.warning("Unknown tool requested", tool=tool_name)
        result = ToolResult.fail(f"Unknown tool: {tool_name}")
        return dataclasses.replace(result, tool_name=tool_name, call_id=call_id)

    args = tool_def.normalize(arguments if isinstance(arguments, dict) else {})
    logger.info("Executing tool", tool=tool_name, arguments=args)

    error = tool_def.check_required(args) or tool_def.check_types(args)
    result = ToolResult.fail(error) if error else tool_def.execute(args, context)

    if not result.success:
        logger.info("Tool returned failure", tool=tool_name, error=result.error)
    return dataclasses.replace(result, tool_name=tool_name, call_id=call_id)


def execute_tool(call: ToolCall, context: ToolContext) -> ToolResult:
    """Execute a ToolCall."""
    return dispatch(call.tool_name, call.arguments, context, call_id=call.call_id)


def execute_tool_calls(calls: list[ToolCall], context: ToolContext) -> list[ToolResult]:
    """Execute multiple tool calls in sequence.

    Args:
        calls: Tool calls in the order the model listed them.
        context: Shared turn context.

    Returns:
        One result per call, same order.
    """
    return [execute_tool(call, context) for call in calls]


__all__ = [
    "dispatch",
    "execute_tool",
    "execute_tool_calls",
]
