"""In-memory implementations of the persistence protocols.

Used by the test suite and by callers that embed the assistant without a
database. Behaviour mirrors the SQL backend the assistant was designed
against:

- ids are auto-incremented integers per store;
- records of other books are invisible;
- binder items get the next ``position`` among their siblings, track a
  ``word_count`` derived from ``content``, and deleting one removes all
  of its descendants together with their metadata.
"""

from __future__ import annotations

import copy
import itertools
import re
from collections.abc import Callable, Iterable
from datetime import datetime
from typing import Any

from vibewriter.core.exceptions import StorageError
from vibewriter.core.logging import get_logger
from vibewriter.models.scope import EntityId
from vibewriter.storage.base import Record, StoryStores


logger = get_logger(__name__)

_TAG_RE = re.compile(r"<[^>]+>")


def record_key(entity_id: EntityId) -> int | None:
    """Integer key for an id, or None when it names no record.

    Only whole numbers match: ``1.7`` and ``True`` are not ids.
    """
    if isinstance(entity_id, bool):
        return None
    if isinstance(entity_id, int):
        return entity_id
    if isinstance(entity_id, float) and entity_id.is_integer():
        return int(entity_id)
    if isinstance(entity_id, str) and entity_id.strip().isdigit():
        return int(entity_id.strip())
    return None


def count_words(text: str | None) -> int:
    """Count words in ``text`` after stripping HTML tags."""
    if not text:
        return 0
    return len(_TAG_RE.sub(" ", text).split())


# =============================================================================
# Generic Store
# =============================================================================


class InMemoryEntityStore:
    """Dictionary-backed EntityStore.

    Attributes:
        entity: Name used in log events.
        columns: Columns a record may carry besides ``id``/``book_id``.
            Unknown keys passed to create/update are dropped, like an SQL
            insert that only names known columns.
        defaults: Column values applied on create when not supplied.
    """

    def __init__(
        self,
        entity: str,
        columns: Iterable[str],
        *,
        defaults: dict[str, Any] | None = None,
        sort_key: Callable[[Record], Any] | None = None,
    ) -> None:
        self.entity = entity
        self.columns = tuple(columns)
        self.defaults = dict(defaults or {})
        self._sort_key = sort_key or (lambda record: record["id"])
        self._records: dict[int, Record] = {}
        self._ids = itertools.count(1)

    def __len__(self) -> int:
        return len(self._records)

    def _find(self, entity_id: EntityId, book_id: EntityId) -> Record | None:
        key = record_key(entity_id)
        if key is None:
            return None
        record = self._records.get(key)
        if record is None or record["book_id"] != book_id:
            return None
        return record

    def _known(self, fields: Record) -> Record:
        return {k: v for k, v in fields.items() if k in self.columns}

    def get_all(self, book_id: EntityId) -> list[Record]:
        records = [r for r in self._records.values() if r["book_id"] == book_id]
        return [copy.deepcopy(r) for r in sorted(records, key=self._sort_key)]

    def get_one(self, entity_id: EntityId, book_id: EntityId) -> Record | None:
        record = self._find(entity_id, book_id)
        return copy.deepcopy(record) if record is not None else None

    def create(self, book_id: EntityId, fields: Record) -> int:
        entity_id = next(self._ids)
        now = datetime.now().isoformat(timespec="seconds")
        record: Record = {column: None for column in self.columns}
        record.update(copy.deepcopy(self.defaults))
        record.update(copy.deepcopy(self._known(fields)))
        record.update(id=entity_id, book_id=book_id, created_at=now, updated_at=now)
        self._records[entity_id] = record
        logger.debug("Record created", entity=self.entity, entity_id=entity_id, book_id=book_id)
        return entity_id

    def update(self, entity_id: EntityId, book_id: EntityId, fields: Record) -> bool:
        record = self._find(entity_id, book_id)
        if record is None:
            return False
        changes = {
            k: v for k, v in self._known(fields).items() if v is not None and record.get(k) != v
        }
        if not changes:
            return False
        record.update(copy.deepcopy(changes))
        record["updated_at"] = datetime.now().isoformat(timespec="seconds")
        logger.debug(
            "Record updated",
            entity=self.entity,
            entity_id=record["id"],
            fields=sorted(changes),
        )
        return True

    def delete(self, entity_id: EntityId, book_id: EntityId) -> bool:
        record = self._find(entity_id, book_id)
        if record is None:
            return False
        del self._records[record["id"]]
        logger.debug("Record deleted", entity=self.entity, entity_id=record["id"])
        return True


# =============================================================================
# Binder Items
# =============================================================================


BINDER_ITEM_COLUMNS = (
    "parent_id",
    "item_type",
    "title",
    "synopsis",
    "content",
    "status",
    "label",
    "position",
    "word_count",
)


class InMemoryBinderStore(InMemoryEntityStore):
    """Binder tree store with sibling positions, word counts and cascading deletes."""

    def __init__(self, metadata: InMemoryMetadataStore | None = None) -> None:
        super().__init__(
            "binder_item",
            BINDER_ITEM_COLUMNS,
            defaults={"synopsis": "", "content": "", "status": "draft", "label": ""},
            sort_key=lambda record: (record["position"] or 0, record["id"]),
        )
        self._metadata = metadata

    def _children(self, parent_id: int, book_id: EntityId) -> list[Record]:
        return [
            r
            for r in self._records.values()
            if r["book_id"] == book_id and r["parent_id"] == parent_id
        ]

    def create(self, book_id: EntityId, fields: Record) -> int:
        parent_id = fields.get("parent_id")
        if parent_id is not None and self._find(parent_id, book_id) is None:
            raise StorageError("Parent item not found", entity=self.entity, entity_id=parent_id)
        siblings = [
            r
            for r in self._records.values()
            if r["book_id"] == book_id and r["parent_id"] == parent_id
        ]
        positions = [r["position"] or 0 for r in siblings]
        values = dict(fields)
        values["position"] = max(positions) + 1 if positions else 0
        values["word_count"] = count_words(values.get("content"))
        return super().create(book_id, values)

    def update(self, entity_id: EntityId, book_id: EntityId, fields: Record) -> bool:
        values = dict(fields)
        if values.get("content") is not None:
            values["word_count"] = count_words(values["content"])
        return super().update(entity_id, book_id, values)

    def delete(self, entity_id: EntityId, book_id: EntityId) -> bool:
        record = self._find(entity_id, book_id)
        if record is None:
            return False
        pending = [record["id"]]
        removed: list[int] = []
        while pending:
            current = pending.pop()
            pending.extend(child["id"] for child in self._children(current, book_id))
            removed.append(current)
        for item_id in removed:
            del self._records[item_id]
            if self._metadata is not None:
                self._metadata.clear(item_id)
        logger.debug("Binder subtree deleted", root_id=record["id"], removed=len(removed))
        return True


class InMemoryMetadataStore:
    """Per-item key/value metadata."""

    def __init__(self) -> None:
        self._values: dict[Any, dict[str, Any]] = {}

    def get(self, item_id: EntityId) -> dict[str, Any]:
        return dict(self._values.get(item_id, {}))

    def set(self, item_id: EntityId, key: str, value: Any) -> None:
        self._values.setdefault(item_id, {})[key] = value

    def clear(self, item_id: EntityId) -> None:
        self._values.pop(item_id, None)


# =============================================================================
# Conversation History
# =============================================================================


class InMemoryConversationHistory:
    """Append-only list of completed exchanges."""

    def __init__(self) -> None:
        self.entries: list[dict[str, Any]] = []

    def save(self, book_id: EntityId, message: str, response: str) -> None:
        self.entries.append(
            {
                "book_id": book_id,
                "message": message,
                "response": response,
                "created_at": datetime.now().isoformat(timespec="seconds"),
            }
        )


# =============================================================================
# Factory
# =============================================================================


CHARACTER_COLUMNS = (
    "name",
    "role",
    "age",
    "gender",
    "physical_description",
    "personality",
    "speech_patterns",
    "voice_description",
    "background",
    "motivation",
    "arc",
    "relationships",
    "notes",
    "primary_image",
    "ai_generated",
    "ai_metadata",
)

LOCATION_COLUMNS = ("name", "description", "atmosphere", "significance", "notes", "image")

PLOT_THREAD_COLUMNS = ("title", "description", "thread_type", "status", "color")


def create_memory_stores() -> StoryStores:
    """Build a fresh, empty set of in-memory stores."""
    metadata = InMemoryMetadataStore()
    return StoryStores(
        binder_items=InMemoryBinderStore(metadata),
        characters=InMemoryEntityStore(
            "character",
            CHARACTER_COLUMNS,
            sort_key=lambda record: (record["name"] or "", record["id"]),
        ),
        locations=InMemoryEntityStore(
            "location",
            LOCATION_COLUMNS,
            sort_key=lambda record: (record["name"] or "", record["id"]),
        ),
        plot_threads=InMemoryEntityStore(
            "plot_thread",
            PLOT_THREAD_COLUMNS,
            defaults={"thread_type": "main", "status": "open"},
            sort_key=lambda record: (
                record["thread_type"] or "",
                record["title"] or "",
                record["id"],
            ),
        ),
        item_metadata=metadata,
    )


__all__ = [
    "record_key",
    "count_words",
    "InMemoryEntityStore",
    "InMemoryBinderStore",
    "InMemoryMetadataStore",
    "InMemoryConversationHistory",
    "create_memory_stores",
    "BINDER_ITEM_COLUMNS",
    "CHARACTER_COLUMNS",
    "LOCATION_COLUMNS",
    "PLOT_THREAD_COLUMNS",
]
