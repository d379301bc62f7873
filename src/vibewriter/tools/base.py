"""Base types and registry for the writing tools.

Tools are defined in Python and invoked by the LLM: the model supplies
arguments, Python validates them and runs the handler against the story
stores. Each tool is registered exactly once, at import time, with the
``tool`` decorator, so the catalogue the model sees and the handlers the
dispatcher calls are one data structure.

Handlers share a single contract::

    def handler(args: dict[str, Any], context: ToolContext) -> ToolResult

They never raise: validation and not-found problems come back as a failed
ToolResult and ``ToolDefinition.execute`` converts any store exception
into one as well.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable

from vibewriter.core.exceptions import StorageError, ToolError
from vibewriter.core.logging import get_logger
from vibewriter.models.enums import EntityKind, ToolOperation
from vibewriter.models.ledger import SideEffectLedger
from vibewriter.models.scope import BookScope
from vibewriter.storage.base import StoryStores


logger = get_logger(__name__)


# =============================================================================
# Call / Result Types
# =============================================================================


@dataclass
class ToolCall:
    """A request from the model to execute a tool.

    Attributes:
        tool_name: Name of the tool to call.
        arguments: Decoded arguments object.
        call_id: Vendor-supplied id, echoed back with the result.
    """

    tool_name: str
    arguments: dict[str, Any]
    call_id: str = ""


@dataclass
class ToolResult:
    """Outcome of a tool execution, the only thing the model ever sees.

    Attributes:
        success: Whether the tool did what was asked.
        data: Tool-specific payload (ids, records, counts).
        error: Failure description when ``success`` is False.
        message: Human-readable summary the model can relay to the author.
        tool_name: Name of the tool that produced this result.
        call_id: Id of the originating ToolCall.
    """

    success: bool
    data: dict[str, Any] = field(default_factory=dict)
    error: str = ""
    message: str = ""
    tool_name: str = ""
    call_id: str = ""

    @classmethod
    def ok(cls, message: str = "", **data: Any) -> ToolResult:
        """Build a successful result."""
        return cls(success=True, data=data, message=message)

    @classmethod
    def fail(cls, error: str) -> ToolResult:
        """Build a failed result."""
        return cls(success=False, error=error)

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-serialisable form sent back to the model."""
        payload: dict[str, Any] = {"success": self.success, **self.data}
        if self.message:
            payload["message"] = self.message
        if self.error:
            payload["error"] = self.error
        return payload

    def to_json(self) -> str:
        """Encode ``to_payload()`` as a JSON string."""
        return json.dumps(self.to_payload(), ensure_ascii=False, default=str)


@dataclass
class ToolContext:
    """Everything a handler needs besides its arguments.

    Attributes:
        scope: Book (and open item) the turn operates on.
        stores: Persistence collaborators.
        ledger: Per-turn record of created/updated entities.
    """

    scope: BookScope
    stores: StoryStores
    ledger: SideEffectLedger = field(default_factory=SideEffectLedger)

    @property
    def book_id(self) -> Any:
        return self.scope.book_id


ToolHandler = Callable[[dict[str, Any], ToolContext], ToolResult]


# =============================================================================
# Tool Definition
# =============================================================================


_FIELD_LABELS = {
    "item_id": "Item ID",
    "character_id": "Character ID",
    "location_id": "Location ID",
    "thread_id": "Thread ID",
    "item_type": "Item type",
}


def field_label(field_name: str, overrides: dict[str, str] | None = None) -> str:
    """Human label for a field name ("item_id" -> "Item ID")."""
    if overrides and field_name in overrides:
        return overrides[field_name]
    if field_name in _FIELD_LABELS:
        return _FIELD_LABELS[field_name]
    return field_name.replace("_", " ").capitalize()


def is_missing(value: Any) -> bool:
    """True for absent values: None or a blank string."""
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


def normalize_id(value: Any) -> Any:
    """Coerce an id the model sent as ``6.0`` or ``"6"`` to ``6``."""
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return value


def normalize_text(value: Any) -> Any:
    """Render a number sent for a text field (a title like ``1984``) as a string."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


@dataclass(frozen=True)
class ToolDefinition:
    """A tool the model may invoke.

    Attributes:
        name: Tool name as seen by the model.
        description: Guidance for the model on when to use the tool.
        entity: Entity kind the tool operates on.
        operation: Which of the five CRUD operations it performs.
        parameters: JSON schema object for the arguments.
        handler: Function implementing the tool.
        labels: Field labels used in "<Field> is required" errors.
    """

    name: str
    description: str
    entity: EntityKind
    operation: ToolOperation
    parameters: dict[str, Any]
    handler: ToolHandler
    labels: dict[str, str] = field(default_factory=dict)

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(self.parameters.get("required", ()))

    @property
    def optional_fields(self) -> tuple[str, ...]:
        required = set(self.required_fields)
        return tuple(name for name in self.parameters["properties"] if name not in required)

    @property
    def field_types(self) -> dict[str, str]:
        return {
            name: schema.get("type", "string")
            for name, schema in self.parameters["properties"].items()
        }

    def normalize(self, arguments: dict[str, Any]) -> dict[str, Any]:
        """Return a copy of ``arguments`` with ids and text fields normalised."""
        normalized = dict(arguments)
        types = self.field_types
        for name, value in normalized.items():
            if name.endswith("_id"):
                normalized[name] = normalize_id(value)
            elif types.get(name) == "string":
                normalized[name] = normalize_text(value)
        return normalized

    def check_required(self, arguments: dict[str, Any]) -> str | None:
        """Return an error for the first missing required field, else None."""
        for name in self.required_fields:
            if is_missing(arguments.get(name)):
                return f"{field_label(name, self.labels)} is required"
        return None

    def check_types(self, arguments: dict[str, Any]) -> str | None:
        """Return an error for the first text field holding a non-string, else None."""
        types = self.field_types
        for name, value in arguments.items():
            if types.get(name) == "string" and value is not None and not isinstance(value, str):
                return f"{field_label(name, self.labels)} must be text"
        return None

    def execute(self, arguments: dict[str, Any], context: ToolContext) -> ToolResult:
        """Run the handler, converting any exception into a failed result."""
        try:
            return self.handler(arguments, context)
        except StorageError as exc:
            logger.warning(
                "Store rejected tool", tool=self.name, error=exc.message, details=exc.details
            )
            return ToolResult.fail(exc.message)
        except Exception as exc:
            logger.exception("Tool handler failed", tool=self.name)
            return ToolResult.fail(str(exc) or exc.__class__.__name__)


# =============================================================================
# Registry
# =============================================================================


_tool_registry: dict[str, ToolDefinition] = {}


def tool(
    *,
    name: str,
    entity: EntityKind,
    operation: ToolOperation,
    description: str,
    properties: dict[str, dict[str, Any]] | None = None,
    required: tuple[str, ...] = (),
    labels: dict[str, str] | None = None,
) -> Callable[[ToolHandler], ToolHandler]:
    """Decorator registering a function as a writing tool.

    Args:
        name: Tool name as seen by the model.
        entity: Entity kind the tool operates on.
        operation: CRUD operation it performs.
        description: Guidance for the model.
        properties: JSON schema ``properties`` for the arguments.
        required: Names of required arguments.
        labels: Overrides for field labels in error messages.

    Returns:
        The undecorated handler.

    Raises:
        ToolError: If the name is already registered or a required field
            has no property schema.
    """

    def decorator(func: ToolHandler) -> ToolHandler:
        if name in _tool_registry:
            raise ToolError("Tool registered twice", tool_name=name)

        props = dict(properties or {})
        unknown = [field_name for field_name in required if field_name not in props]
        if unknown:
            raise ToolError(
                "Required fields missing from schema",
                tool_name=name,
                details={"fields": unknown},
            )

        parameters: dict[str, Any] = {"type": "object", "properties": props}
        if required:
            parameters["required"] = list(required)

        _tool_registry[name] = ToolDefinition(
            name=name,
            description=description,
            entity=entity,
            operation=operation,
            parameters=parameters,
            handler=func,
            labels=dict(labels or {}),
        )
        return func

    return decorator


def registered_tools() -> dict[str, ToolDefinition]:
    """Live view of the registry, in registration order."""
    return _tool_registry


# =============================================================================
# Handler Helpers
# =============================================================================


def collect_fields(arguments: dict[str, Any], allowed: tuple[str, ...]) -> dict[str, Any]:
    """Pick the allowed fields that are present; anything else is ignored."""
    return {name: arguments[name] for name in allowed if arguments.get(name) is not None}


def invalid_choice(value: Any, choices: type[StrEnum]) -> bool:
    """True when ``value`` is set but not one of the enum's values."""
    if value is None:
        return False
    return value not in [member.value for member in choices]


def id_schema(entity_label: str, verb: str) -> dict[str, Any]:
    """Schema for the id argument of a read/update/delete tool."""
    return {"type": "number", "description": f"The ID of the {entity_label} to {verb}"}


def text_schema(description: str) -> dict[str, Any]:
    return {"type": "string", "description": description}


def enum_schema(choices: type[StrEnum], description: str) -> dict[str, Any]:
    return {
        "type": "string",
        "enum": [member.value for member in choices],
        "description": description,
    }


__all__ = [
    "ToolCall",
    "ToolResult",
    "ToolContext",
    "ToolHandler",
    "ToolDefinition",
    "tool",
    "registered_tools",
    "field_label",
    "is_missing",
    "normalize_id",
    "normalize_text",
    "collect_fields",
    "invalid_choice",
    "id_schema",
    "text_schema",
    "enum_schema",
]
