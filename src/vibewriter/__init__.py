"""VibeWriter AI assistant: tool-calling orchestration for a book-writing app.

The model talks to the author's book through 20 CRUD tools over binder
items, characters, locations and plot threads. A turn runs at most
``MAX_TOOL_ROUNDS`` tool rounds and reports every entity it created or
updated.

Example:
    >>> from vibewriter import WritingAssistant, create_memory_stores
    >>> stores = create_memory_stores()
    >>> assistant = WritingAssistant.from_settings(stores, lambda scope: "You help authors.")
    >>> assistant.chat(book_id=1, current_item_id=None, message="Outline chapter one")
"""

from __future__ import annotations

from vibewriter.core.config import Settings, get_settings
from vibewriter.core.constants import MAX_TOOL_ROUNDS
from vibewriter.core.exceptions import VibeWriterError
from vibewriter.core.logging import configure_logging, get_logger
from vibewriter.engine import ConversationLoop, LoopState, TurnResult, WritingAssistant
from vibewriter.models import BookScope, SideEffectLedger
from vibewriter.storage import StoryStores, create_memory_stores


__version__ = "0.1.0"

__all__ = [
    "__version__",
    "MAX_TOOL_ROUNDS",
    "Settings",
    "get_settings",
    "VibeWriterError",
    "configure_logging",
    "get_logger",
    "ConversationLoop",
    "LoopState",
    "TurnResult",
    "WritingAssistant",
    "BookScope",
    "SideEffectLedger",
    "StoryStores",
    "create_memory_stores",
]
