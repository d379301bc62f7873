"""Conversation engine: the round-bounded tool loop and the assistant facade."""

from __future__ import annotations

from vibewriter.engine.assistant import WritingAssistant
from vibewriter.engine.loop import (
    ContextProvider,
    ConversationLoop,
    LoopState,
    Transport,
    TurnResult,
)
from vibewriter.engine.prompts import BookContextProvider, build_book_context


__all__ = [
    # Loop
    "ContextProvider",
    "ConversationLoop",
    "LoopState",
    "Transport",
    "TurnResult",
    # Facade
    "WritingAssistant",
    # Context
    "BookContextProvider",
    "build_book_context",
]
