"""Round-bounded conversation loop.

One user message becomes one turn:

1. build the initial request from the book context and the message;
2. send it; if the model asks for tools and rounds remain, run every
   requested tool in order, fold the results into the transcript and
   send again;
3. stop when the model answers without tools, or when the round budget
   is spent.

The transcript, the round counter and the side-effect ledger belong to a
single turn and live only on this call stack.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Callable, Protocol

from vibewriter.core.constants import MAX_TOOL_ROUNDS
from vibewriter.core.exceptions import AIControlError, RoundsExhaustedError, ValidationError
from vibewriter.core.logging import bind_context, clear_context, get_logger
from vibewriter.models.ledger import SideEffectLedger
from vibewriter.models.scope import BookScope, EntityId
from vibewriter.providers.base import ProviderAdapter, ProviderReply
from vibewriter.storage.base import StoryStores
from vibewriter.tools.base import ToolContext, ToolResult
from vibewriter.tools.dispatch import execute_tool_calls


logger = get_logger(__name__)


ContextProvider = Callable[[BookScope], str]
"""Builds the instruction text for a book and, optionally, its open item."""


class Transport(Protocol):
    """Anything that can post a JSON payload and return the decoded reply."""

    def send(
        self,
        endpoint: str,
        headers: dict[str, str],
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        ...


# =============================================================================
# Loop State
# =============================================================================


class LoopState(StrEnum):
    """Where a turn is in its lifecycle."""

    AWAITING_PROVIDER = "awaiting_provider"
    """A request has been sent and the reply is pending."""

    TOOLS_REQUESTED = "tools_requested"
    """The model asked for tools."""

    EXECUTING_TOOLS = "executing_tools"
    """The requested tools are running."""

    FINISHED = "finished"
    """The model answered with text."""

    ROUNDS_EXHAUSTED = "rounds_exhausted"
    """The round budget ran out while the model still wanted tools."""

    FAILED = "failed"
    """A transport or protocol error ended the turn."""


@dataclass
class TurnResult:
    """Result of processing one user message.

    Attributes:
        reply_text: Final natural-language answer.
        side_effects: Entities created or updated during the turn.
        rounds: Number of tool rounds executed.
        state: Terminal loop state.
        tool_results: Every tool result of the turn, in execution order.
    """

    reply_text: str
    side_effects: SideEffectLedger
    rounds: int = 0
    state: LoopState = LoopState.FINISHED
    tool_results: list[ToolResult] = field(default_factory=list)


# =============================================================================
# Conversation Loop
# =============================================================================


class ConversationLoop:
    """Drives a multi-round tool conversation for one user message at a time.

    Attributes:
        adapter: Vendor protocol strategy.
        transport: Sends requests to the vendor.
        stores: Persistence collaborators handed to the tools.
        context_provider: Builds the instruction text for a turn.
        max_rounds: Maximum tool rounds per turn.
    """

    def __init__(
        self,
        adapter: ProviderAdapter,
        transport: Transport,
        stores: StoryStores,
        context_provider: ContextProvider,
        *,
        max_rounds: int = MAX_TOOL_ROUNDS,
    ) -> None:
        self.adapter = adapter
        self.transport = transport
        self.stores = stores
        self.context_provider = context_provider
        self.max_rounds = max_rounds

    def _ask(self, payload: dict[str, Any]) -> ProviderReply:
        response = self.transport.send(self.adapter.endpoint, self.adapter.headers(), payload)
        return self.adapter.parse_response(response)

    def process_turn(
        self,
        book_id: EntityId,
        current_item_id: EntityId | None,
        message: str,
    ) -> TurnResult:
        """Run one user turn to completion.

        Args:
            book_id: Book the conversation is about.
            current_item_id: Binder item open in the editor, if any.
            message: The author's message.

        Returns:
            TurnResult with the reply text and the turn's side effects.

        Raises:
            ValidationError: If the message is blank.
            AIControlError: On transport or protocol failure. The turn's
                ledger is attached as ``side_effects``.
        """
        if not message or not message.strip():
            raise ValidationError("Message is required", field_name="message")

        scope = BookScope(book_id=book_id, item_id=current_item_id)
        context = ToolContext(scope=scope, stores=self.stores, ledger=SideEffectLedger())
        bind_context(book_id=book_id, turn_id=uuid.uuid4().hex[:12])
        try:
            return self._run(scope, context, message)
        except AIControlError as exc:
            exc.side_effects = context.ledger
            logger.error(
                "Turn failed",
                state=LoopState.FAILED,
                error=exc.message,
                changes=context.ledger.total_changes,
            )
            raise
        finally:
            clear_context()

    def _run(self, scope: BookScope, context: ToolContext, message: str) -> TurnResult:
        payload = self.adapter.build_request(message, self.context_provider(scope))
        all_results: list[ToolResult] = []
        rounds = 0

        logger.debug("Turn started", state=LoopState.AWAITING_PROVIDER, **self.adapter.describe())
        reply = self._ask(payload)

        while reply.wants_tools and rounds < self.max_rounds:
            rounds += 1
            logger.info(
                "Tool round",
                state=LoopState.TOOLS_REQUESTED,
                round=rounds,
                tools=[call.tool_name for call in reply.tool_calls],
            )

            logger.debug("Executing tools", state=LoopState.EXECUTING_TOOLS, round=rounds)
            results = execute_tool_calls(reply.tool_calls, context)
            all_results.extend(results)
            self.adapter.append_tool_results(payload, reply, results)

            logger.debug("Awaiting provider", state=LoopState.AWAITING_PROVIDER, round=rounds)
            reply = self._ask(payload)

        if reply.wants_tools:
            return self._exhausted(reply, context, rounds, all_results)

        text = self.adapter.final_text(reply)
        logger.info(
            "Turn finished",
            state=LoopState.FINISHED,
            rounds=rounds,
            changes=context.ledger.total_changes,
        )
        return TurnResult(
            reply_text=text,
            side_effects=context.ledger,
            rounds=rounds,
            state=LoopState.FINISHED,
            tool_results=all_results,
        )

    def _exhausted(
        self,
        reply: ProviderReply,
        context: ToolContext,
        rounds: int,
        all_results: list[ToolResult],
    ) -> TurnResult:
        logger.warning(
            "Tool round budget exhausted",
            state=LoopState.ROUNDS_EXHAUSTED,
            rounds=rounds,
            pending=[call.tool_name for call in reply.tool_calls],
        )
        if not reply.text.strip():
            raise RoundsExhaustedError(
                f"No text response after {rounds} tool rounds",
                rounds=rounds,
                details={"stop_reason": reply.stop_reason},
                **self.adapter.describe(),
            )
        return TurnResult(
            reply_text=reply.text,
            side_effects=context.ledger,
            rounds=rounds,
            state=LoopState.ROUNDS_EXHAUSTED,
            tool_results=all_results,
        )


__all__ = [
    "ContextProvider",
    "Transport",
    "LoopState",
    "TurnResult",
    "ConversationLoop",
]
