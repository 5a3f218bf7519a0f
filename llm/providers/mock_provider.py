"""Deterministic local chat backend for offline usage."""

from __future__ import annotations

import re
from collections import Counter

from llm.base_llm import BaseLLM

_STOPWORDS = frozenset(
    "a an and are as at be by for from has have in is it its of on or that the this to was were will with".split()
)
_DELIMITED = re.compile(r"^---\s*$\n(.*?)\n^---\s*$", re.DOTALL | re.MULTILINE)


class MockProvider(BaseLLM):
    """Rule-based local responder when external LLM backends are unavailable."""

    name = "mock"

    @staticmethod
    def _tokenize(text: str) -> list[str]:
        return [
            token
            for token in re.split(r"[^a-zA-Z0-9]+", text.lower())
            if len(token) > 2 and token not in _STOPWORDS
        ]

    @staticmethod
    def _summarize_tokens(tokens: list[str], max_items: int = 5) -> str:
        if not tokens:
            return "no salient terms detected"
        top = Counter(tokens).most_common(max_items)
        return ", ".join(term for term, _ in top)

    def chat(self, messages: list[dict[str, str]], **kwargs: object) -> str:
        """Generate deterministic commentary from the last user message."""
        _ = kwargs
        if not messages:
            return ""
        user_messages = [m["content"] for m in messages if m.get("role") == "user"]
        prompt = user_messages[-1] if user_messages else messages[-1]["content"]
        quoted = _DELIMITED.search(prompt)
        if quoted:
            prompt = quoted.group(1)
        salient = self._summarize_tokens(self._tokenize(prompt))
        return (
            "Offline commentary: no model backend was consulted. "
            f"Salient terms: {salient}. Verify the claims against trusted outlets."
        )
