"""Writing assistant facade.

Wires settings, transport, adapter and conversation loop together once
and turns each chat message into the response payload the web layer
returns to the editor.
"""

from __future__ import annotations

from typing import Any

from vibewriter.core.config import Settings, get_settings
from vibewriter.core.constants import UNCONFIGURED_ASSISTANT_REPLY
from vibewriter.core.exceptions import AIControlError, ValidationError
from vibewriter.core.logging import configure_logging, get_logger
from vibewriter.engine.loop import ContextProvider, ConversationLoop, Transport, TurnResult
from vibewriter.models.ledger import SideEffectLedger
from vibewriter.models.scope import EntityId
from vibewriter.providers import create_adapter, create_transport
from vibewriter.storage.base import ConversationHistory, StoryStores


logger = get_logger(__name__)


class WritingAssistant:
    """Entry point for chat messages.

    Attributes:
        loop: Conversation loop, or None when no API key is configured.
        history: Optional log of completed exchanges.
    """

    def __init__(
        self,
        loop: ConversationLoop | None,
        *,
        history: ConversationHistory | None = None,
    ) -> None:
        self.loop = loop
        self.history = history

    @classmethod
    def from_settings(
        cls,
        stores: StoryStores,
        context_provider: ContextProvider,
        settings: Settings | None = None,
        *,
        history: ConversationHistory | None = None,
        transport: Transport | None = None,
    ) -> WritingAssistant:
        """Build an assistant from application settings.

        Logging is configured from ``settings`` as part of the build.

        Args:
            stores: Persistence collaborators.
            context_provider: Builds the instruction text per turn.
            settings: Settings to use; defaults to ``get_settings()``.
            history: Optional conversation log.
            transport: Transport override; defaults to an HttpTransport.

        Returns:
            A configured WritingAssistant. Without an API key the
            assistant answers every message with setup instructions.
        """
        settings = settings or get_settings()
        configure_logging(settings)
        ai = settings.ai
        if not ai.is_configured:
            logger.warning("AI API key not configured")
            return cls(None, history=history)

        adapter = create_adapter(ai)
        loop = ConversationLoop(
            adapter,
            transport or create_transport(ai),
            stores,
            context_provider,
            max_rounds=ai.max_tool_rounds,
        )
        logger.info(
            "Writing assistant ready",
            provider=adapter.provider_name,
            model=adapter.model,
            max_rounds=ai.max_tool_rounds,
        )
        return cls(loop, history=history)

    @property
    def is_configured(self) -> bool:
        return self.loop is not None

    def process_turn(
        self,
        book_id: EntityId,
        current_item_id: EntityId | None,
        message: str,
    ) -> TurnResult:
        """Run one turn, raising on failure. See ConversationLoop.process_turn."""
        if self.loop is None:
            return TurnResult(
                reply_text=UNCONFIGURED_ASSISTANT_REPLY,
                side_effects=SideEffectLedger(),
            )
        result = self.loop.process_turn(book_id, current_item_id, message)
        if self.history is not None:
            self.history.save(book_id, message, result.reply_text)
        return result

    def chat(
        self,
        book_id: EntityId,
        current_item_id: EntityId | None,
        message: str,
    ) -> dict[str, Any]:
        """Answer a chat message with the editor's response payload.

        Returns:
            ``{"success": True, "response": ..., "items_created": ..., ...}``
            on success; ``{"success": False, "message": "AI request failed:
            ..."}`` plus any side effects already applied on failure.
        """
        if self.loop is None:
            return {"success": True, "response": UNCONFIGURED_ASSISTANT_REPLY}

        try:
            result = self.process_turn(book_id, current_item_id, message)
        except ValidationError as exc:
            return {"success": False, "message": exc.message}
        except AIControlError as exc:
            logger.error("AI chat failed", error=exc.message, details=exc.details)
            ledger = exc.side_effects if exc.side_effects is not None else SideEffectLedger()
            return {
                "success": False,
                "message": f"AI request failed: {exc.message}",
                **ledger.to_response(),
            }

        return {
            "success": True,
            "response": result.reply_text,
            **result.side_effects.to_response(),
        }


__all__ = ["WritingAssistant"]
