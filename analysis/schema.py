"""Analysis result models."""

from __future__ import annotations

from enum import Enum
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Verdict(str, Enum):
    """Credibility verdict, ordered from least to most credible."""

    FAKE = "FAKE"
    LIKELY_FAKE = "LIKELY FAKE"
    MIXED = "MIXED"
    LIKELY_REAL = "LIKELY REAL"
    REAL = "REAL"

    @property
    def rank(self) -> int:
        return _VERDICT_ORDER.index(self)

    @classmethod
    def parse(cls, value: object) -> Verdict:
        """Parse a wire value or member name. Raises ValueError when unknown."""
        if isinstance(value, Verdict):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Verdict must be a string, got {type(value).__name__}")
        key = " ".join(value.strip().upper().replace("_", " ").replace("-", " ").split())
        for member in cls:
            if member.value == key:
                return member
        raise ValueError(f"Unrecognized verdict: {value!r}")


_VERDICT_ORDER = [Verdict.FAKE, Verdict.LIKELY_FAKE, Verdict.MIXED, Verdict.LIKELY_REAL, Verdict.REAL]


class Metric(BaseModel):
    """Named score in [0, 100]."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    score: int = Field(ge=0, le=100)
    description: str = ""


class GroundingSource(BaseModel):
    """External citation returned by search-grounded providers."""

    model_config = ConfigDict(frozen=True)

    title: str
    uri: str

    @field_validator("uri")
    @classmethod
    def uri_is_absolute(cls, v: str) -> str:
        parsed = urlparse(v)
        if not parsed.scheme or not parsed.netloc:
            raise ValueError(f"uri must be an absolute URL: {v!r}")
        return v


class AnalysisResult(BaseModel):
    """Normalized credibility assessment."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    verdict: Verdict
    confidence: int = Field(ge=0, le=100)
    summary: str = ""
    metrics: tuple[Metric, ...] = ()
    logical_fallacies: tuple[str, ...] = Field(default=(), alias="logicalFallacies")
    linguistic_patterns: tuple[str, ...] = Field(default=(), alias="linguisticPatterns")
    sources: tuple[GroundingSource, ...] = ()

    def to_payload(self) -> dict[str, object]:
        """JSON-ready dict using the camelCase wire names."""
        return self.model_dump(mode="json", by_alias=True)


class HistoryItem(BaseModel):
    """Ledger entry describing one past analysis."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1)
    timestamp: int = Field(ge=0)
    title: str
    verdict: Verdict
