"""Analysis provider interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

from analysis.schema import AnalysisResult, GroundingSource
from analysis.validation import validate_result


@dataclass(frozen=True)
class ProviderPayload:
    """Undecoded provider output plus any grounding citations."""

    raw: Any
    sources: tuple[GroundingSource, ...] = field(default_factory=tuple)


class AnalysisProvider(ABC):
    """Turns free text into an AnalysisResult."""

    name: str = "base"
    supports_grounding: bool = False

    @abstractmethod
    def generate(self, text: str) -> ProviderPayload:
        """Produce the raw payload for ``text``. Raises ProviderError."""

    def analyze(self, text: str) -> AnalysisResult:
        """Generate and validate a result for ``text``."""
        payload = self.generate(text)
        sources = payload.sources if self.supports_grounding else ()
        return validate_result(payload.raw, sources=sources)
