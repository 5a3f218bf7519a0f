"""History ledger tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from analysis.schema import AnalysisResult, Verdict
from core.errors import HistoryPersistenceError
from history.ledger import HistoryLedger, make_title
from history.stores.memory_store import MemoryStore
from history.stores.sql_store import SQLiteStore


class FailingStore(MemoryStore):
    """Store whose writes fail once ``broken`` is set."""

    def __init__(self) -> None:
        super().__init__()
        self.broken = False

    def set(self, key: str, value: str) -> None:
        if self.broken:
            raise OSError("disk full")
        super().set(key, value)


def _result(verdict: Verdict = Verdict.MIXED) -> AnalysisResult:
    return AnalysisResult(verdict=verdict, confidence=60, summary="ok")


def test_capacity_keeps_newest_ten() -> None:
    ledger = HistoryLedger(MemoryStore())
    for i in range(1, 12):
        ledger.record(_result(), f"story number {i:02d}")

    titles = [item.title for item in ledger.items]
    assert len(titles) == 10
    assert titles == [f"story number {i:02d}" for i in range(11, 1, -1)]


def test_title_truncation() -> None:
    long_text = "x" * 60
    title = make_title(long_text)
    assert title == "x" * 50 + "..."

    assert make_title("short text") == "short text"
    assert make_title("y" * 50) == "y" * 50


def test_record_persists_full_sequence() -> None:
    store = MemoryStore()
    ledger = HistoryLedger(store)
    first = ledger.record(_result(Verdict.FAKE), "first story")
    second = ledger.record(_result(Verdict.REAL), "second story")

    persisted = json.loads(store.get("verinews_history"))
    assert [entry["id"] for entry in persisted] == [second.id, first.id]
    assert persisted[1]["verdict"] == "FAKE"

    reloaded = HistoryLedger(store).load()
    assert reloaded == ledger.items


def test_ids_are_unique_and_timestamps_never_decrease(monkeypatch: pytest.MonkeyPatch) -> None:
    clock = iter([5_000, 4_000, 6_000])
    monkeypatch.setattr("history.ledger._now_ms", lambda: next(clock))
    ledger = HistoryLedger(MemoryStore())
    items = [ledger.record(_result(), f"entry {i}") for i in range(3)]

    assert len({item.id for item in items}) == 3
    assert [item.timestamp for item in items] == [5_000, 5_000, 6_000]


def test_clear_then_fresh_load_is_empty(tmp_path: Path) -> None:
    store = SQLiteStore(tmp_path / "history.db")
    ledger = HistoryLedger(store)
    ledger.load()
    ledger.record(_result(), "something happened somewhere today")
    ledger.clear()
    assert ledger.items == ()
    store.close()

    fresh = HistoryLedger(SQLiteStore(tmp_path / "history.db"))
    assert fresh.load() == ()


@pytest.mark.parametrize(
    "raw",
    [
        "not json at all",
        '{"id": "abc"}',
        '[{"id": "", "timestamp": 1, "title": "t", "verdict": "REAL"}]',
        '[{"id": "a", "timestamp": 1, "title": "t", "verdict": "SATIRE"}]',
    ],
)
def test_malformed_storage_loads_empty(raw: str) -> None:
    ledger = HistoryLedger(MemoryStore({"verinews_history": raw}))
    assert ledger.load() == ()


def test_corrupt_sqlite_file_loads_empty(tmp_path: Path) -> None:
    db_path = tmp_path / "history.db"
    db_path.write_bytes(b"this is not a sqlite database at all" * 100)
    ledger = HistoryLedger(SQLiteStore(db_path))

    assert ledger.load() == ()
    with pytest.raises(HistoryPersistenceError):
        ledger.record(_result(), "a story that cannot be written")
    assert ledger.items == ()


def test_load_accepts_stored_entries_and_caps_length() -> None:
    entries = [
        {"id": f"id{i}", "timestamp": 1000 - i, "title": f"t{i}", "verdict": "LIKELY REAL"}
        for i in range(12)
    ]
    ledger = HistoryLedger(MemoryStore({"verinews_history": json.dumps(entries)}))
    items = ledger.load()
    assert len(items) == 10
    assert items[0].id == "id0"
    assert items[0].verdict is Verdict.LIKELY_REAL


def test_failed_write_leaves_memory_unchanged() -> None:
    store = FailingStore()
    ledger = HistoryLedger(store)
    kept = ledger.record(_result(), "a story that was saved")
    store.broken = True

    with pytest.raises(HistoryPersistenceError):
        ledger.record(_result(), "a story that will not be saved")
    with pytest.raises(HistoryPersistenceError):
        ledger.clear()

    assert ledger.items == (kept,)
    assert [e["id"] for e in json.loads(store.get("verinews_history"))] == [kept.id]


def test_capacity_must_be_positive() -> None:
    with pytest.raises(ValueError):
        HistoryLedger(MemoryStore(), capacity=0)
