"""Validation and normalization of raw provider output."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping
from typing import Any

from pydantic import ValidationError

from analysis.schema import AnalysisResult, GroundingSource, Metric, Verdict
from core.errors import ResultValidationError

logger = logging.getLogger("verinews.analysis.validation")

_LIST_FIELDS = {
    "logical_fallacies": ("logicalFallacies", "logical_fallacies"),
    "linguistic_patterns": ("linguisticPatterns", "linguistic_patterns"),
}


def clamp_score(value: Any, field: str) -> int:
    """Coerce a numeric value to an int in [0, 100]."""
    if isinstance(value, bool) or value is None:
        raise ResultValidationError(f"{field} must be numeric, got {value!r}")
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError as exc:
            raise ResultValidationError(f"{field} must be numeric, got {value!r}") from exc
    if not isinstance(value, (int, float)) or isinstance(value, float) and not math.isfinite(value):
        raise ResultValidationError(f"{field} must be a finite number, got {value!r}")
    return max(0, min(100, int(round(value))))


def _string_list(raw: Mapping[str, Any], keys: Iterable[str], field: str) -> list[str]:
    value = None
    for key in keys:
        if raw.get(key) is not None:
            value = raw[key]
            break
    if value is None:
        return []
    if not isinstance(value, list):
        raise ResultValidationError(f"{field} must be a list, got {type(value).__name__}")
    items: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ResultValidationError(f"{field} entries must be strings, got {item!r}")
        if item.strip():
            items.append(item.strip())
    return items


def _metrics(value: Any) -> list[Metric]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise ResultValidationError(f"metrics must be a list, got {type(value).__name__}")
    metrics: list[Metric] = []
    for entry in value:
        if not isinstance(entry, Mapping):
            raise ResultValidationError(f"metric entries must be objects, got {entry!r}")
        name = entry.get("name")
        if not isinstance(name, str) or not name.strip():
            raise ResultValidationError(f"metric name must be a non-empty string, got {name!r}")
        description = entry.get("description", "")
        if description is None:
            description = ""
        if not isinstance(description, str):
            raise ResultValidationError(f"metric description must be a string for {name!r}")
        metrics.append(
            Metric(
                name=name.strip(),
                score=clamp_score(entry.get("score"), f"metric {name!r} score"),
                description=description,
            )
        )
    return metrics


def validate_result(
    raw: Any,
    sources: Iterable[GroundingSource] = (),
) -> AnalysisResult:
    """Map an untyped provider payload onto an AnalysisResult.

    Unknown verdicts and non-numeric confidence are rejected. Confidence and
    metric scores outside [0, 100] are clamped. Missing list fields default
    to empty lists. Any ``sources`` key inside ``raw`` is ignored; grounding
    sources are only taken from the ``sources`` argument.
    """
    if not isinstance(raw, Mapping):
        raise ResultValidationError(f"Result payload must be an object, got {type(raw).__name__}")

    if raw.get("verdict") is None:
        raise ResultValidationError("Result payload is missing a verdict")
    try:
        verdict = Verdict.parse(raw["verdict"])
    except ValueError as exc:
        raise ResultValidationError(str(exc)) from exc

    if "confidence" not in raw:
        raise ResultValidationError("Result payload is missing confidence")
    confidence = clamp_score(raw["confidence"], "confidence")

    summary = raw.get("summary")
    if summary is None:
        summary = ""
    if not isinstance(summary, str):
        raise ResultValidationError(f"summary must be a string, got {type(summary).__name__}")
    summary = summary.strip()
    if not summary:
        logger.warning("Analysis result has an empty summary (verdict=%s)", verdict.value)

    lists = {field: _string_list(raw, keys, field) for field, keys in _LIST_FIELDS.items()}

    try:
        return AnalysisResult(
            verdict=verdict,
            confidence=confidence,
            summary=summary,
            metrics=tuple(_metrics(raw.get("metrics"))),
            logical_fallacies=tuple(lists["logical_fallacies"]),
            linguistic_patterns=tuple(lists["linguistic_patterns"]),
            sources=tuple(sources),
        )
    except ValidationError as exc:
        raise ResultValidationError(f"Result payload failed schema validation: {exc}") from exc
