"""Persistence collaborators used by the writing tools."""

from __future__ import annotations

from vibewriter.storage.base import (
    ConversationHistory,
    EntityStore,
    MetadataStore,
    Record,
    StoryStores,
)
from vibewriter.storage.memory import (
    InMemoryBinderStore,
    InMemoryConversationHistory,
    InMemoryEntityStore,
    InMemoryMetadataStore,
    create_memory_stores,
)


__all__ = [
    "Record",
    "EntityStore",
    "MetadataStore",
    "ConversationHistory",
    "StoryStores",
    "InMemoryEntityStore",
    "InMemoryBinderStore",
    "InMemoryMetadataStore",
    "InMemoryConversationHistory",
    "create_memory_stores",
]
