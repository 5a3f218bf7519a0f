"""Base chat-completion interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class BaseLLM(ABC):
    """Abstract free-text completion backend."""

    name: str = "base"

    @abstractmethod
    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        """Return assistant response text for a message list.

        Raises ``ProviderError`` when the backend is unconfigured, unreachable
        or times out.
        """
