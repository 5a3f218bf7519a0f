"""Key-value persistence port for the history ledger."""

from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Named text slots. Writes replace the whole slot value."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the slot value, or None when the slot is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Overwrite the slot value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove the slot if present."""
