"""Bounded, persisted ledger of past analyses."""

from __future__ import annotations

import json
import logging
import threading
import time
import uuid

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from analysis.schema import AnalysisResult, HistoryItem
from core.errors import HistoryPersistenceError
from history.stores.base_store import KeyValueStore

logger = logging.getLogger("verinews.history")

DEFAULT_SLOT = "verinews_history"
DEFAULT_CAPACITY = 10
TITLE_LIMIT = 50
TRUNCATION_MARKER = "..."

_STORE_ERRORS = (OSError, SQLAlchemyError)


def make_title(source_text: str, limit: int = TITLE_LIMIT) -> str:
    """Excerpt of ``source_text``: at most ``limit`` characters plus a marker."""
    if len(source_text) > limit:
        return source_text[:limit] + TRUNCATION_MARKER
    return source_text


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


class HistoryLedger:
    """Most-recent-first record of analyses, capped at ``capacity`` items.

    Every mutation writes the full sequence to ``store`` before the in-memory
    copy changes, so a failed write leaves both sides as they were.
    """

    def __init__(
        self,
        store: KeyValueStore,
        slot: str = DEFAULT_SLOT,
        capacity: int = DEFAULT_CAPACITY,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.store = store
        self.slot = slot
        self.capacity = capacity
        self._items: list[HistoryItem] = []
        self._lock = threading.RLock()

    @property
    def items(self) -> tuple[HistoryItem, ...]:
        with self._lock:
            return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def load(self) -> tuple[HistoryItem, ...]:
        """Read persisted history. Absent or corrupt data yields an empty ledger."""
        with self._lock:
            self._items = self._read()
            return tuple(self._items)

    def _read(self) -> list[HistoryItem]:
        try:
            raw = self.store.get(self.slot)
        except _STORE_ERRORS as exc:
            logger.warning("History store unreadable, starting empty: %s", exc)
            return []
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            logger.warning("Discarding malformed history slot %r: %s", self.slot, exc)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding history slot %r: expected a list", self.slot)
            return []
        try:
            items = [HistoryItem.model_validate(entry) for entry in data]
        except ValidationError as exc:
            logger.warning("Discarding history slot %r: invalid entry: %s", self.slot, exc)
            return []
        return items[: self.capacity]

    def _persist(self, items: list[HistoryItem]) -> None:
        payload = json.dumps([item.model_dump(mode="json") for item in items], ensure_ascii=False)
        try:
            self.store.set(self.slot, payload)
        except _STORE_ERRORS as exc:
            logger.error("Failed to persist history slot %r: %s", self.slot, exc)
            raise HistoryPersistenceError(f"Could not persist history: {exc}") from exc

    def record(self, result: AnalysisResult, source_text: str) -> HistoryItem:
        """Prepend an entry for ``result`` and persist the capped sequence."""
        with self._lock:
            newest = self._items[0].timestamp if self._items else 0
            item = HistoryItem(
                id=uuid.uuid4().hex,
                timestamp=max(_now_ms(), newest),
                title=make_title(source_text),
                verdict=result.verdict,
            )
            updated = [item, *self._items][: self.capacity]
            self._persist(updated)
            self._items = updated
            logger.debug("Recorded history item %s (%s)", item.id, item.verdict.value)
            return item

    def clear(self) -> None:
        """Empty the ledger and persist the empty state."""
        with self._lock:
            self._persist([])
            self._items = []
            logger.info("History cleared")
