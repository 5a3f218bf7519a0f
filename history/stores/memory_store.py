"""Simple in-memory store."""

from __future__ import annotations

from history.stores.base_store import KeyValueStore


class MemoryStore(KeyValueStore):
    """Dictionary-backed transient store. Contents vanish with the process."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._store: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._store.get(key)

    def set(self, key: str, value: str) -> None:
        self._store[key] = value

    def delete(self, key: str) -> None:
        self._store.pop(key, None)
