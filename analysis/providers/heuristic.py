"""Deterministic keyword heuristic for offline usage."""

from __future__ import annotations

import time

from analysis.providers.base import AnalysisProvider, ProviderPayload
from analysis.schema import Verdict

SENSATIONAL_PHRASES = (
    "miracle",
    "guaranteed",
    "guarantee",
    "100%",
    "shocking",
    "you won't believe",
    "what they don't want you to know",
    "cure-all",
    "doctors hate",
    "exposed",
)

ATTRIBUTION_PHRASES = (
    "official",
    "government",
    "reported by",
    "according to",
    "spokesperson",
    "peer-reviewed",
    "ministry",
)

_FAKE_TABLE = {
    "metrics": [
        {
            "name": "Linguistic Bias",
            "score": 80,
            "description": "Sensationalist, absolute wording dominates the text.",
        },
        {
            "name": "Factual Consistency",
            "score": 30,
            "description": "Claims are not backed by verifiable detail.",
        },
        {
            "name": "Source Reliability",
            "score": 20,
            "description": "No attributable source is cited.",
        },
    ],
    "logicalFallacies": ["Appeal to Emotion", "Hasty Generalization"],
    "linguisticPatterns": ["Sensationalist language", "Absolute certainty claims"],
}

_DEFAULT_TABLE = {
    "metrics": [
        {
            "name": "Linguistic Bias",
            "score": 25,
            "description": "Wording is mostly neutral.",
        },
        {
            "name": "Factual Consistency",
            "score": 70,
            "description": "No internal contradictions were detected.",
        },
        {
            "name": "Source Reliability",
            "score": 65,
            "description": "Statements are at least partly attributed.",
        },
    ],
    "logicalFallacies": ["None detected"],
    "linguisticPatterns": ["Neutral tone", "Attributed statements"],
}

_SUMMARIES = {
    Verdict.FAKE: (
        "The text relies on sensationalist, absolute claims typical of misinformation. "
        "Treat it as unreliable unless independently confirmed."
    ),
    Verdict.LIKELY_REAL: (
        "The text attributes its claims to institutional sources. "
        "It reads like conventional reporting, though details were not verified."
    ),
    Verdict.MIXED: (
        "No strong credibility signals were found either way. "
        "Verify the claims against trusted outlets."
    ),
}


def classify(text: str) -> tuple[Verdict, int]:
    """Return (verdict, confidence). Sensational phrases win over attribution."""
    lowered = text.lower()
    if any(phrase in lowered for phrase in SENSATIONAL_PHRASES):
        return Verdict.FAKE, 85
    if any(phrase in lowered for phrase in ATTRIBUTION_PHRASES):
        return Verdict.LIKELY_REAL, 75
    return Verdict.MIXED, 60


class HeuristicProvider(AnalysisProvider):
    """Rule-based stand-in when no model backend is available."""

    name = "heuristic"
    supports_grounding = False

    def __init__(self, latency_seconds: float = 0.0) -> None:
        self.latency_seconds = max(0.0, latency_seconds)

    def generate(self, text: str) -> ProviderPayload:
        verdict, confidence = classify(text)
        table = _FAKE_TABLE if verdict is Verdict.FAKE else _DEFAULT_TABLE
        if self.latency_seconds:
            time.sleep(self.latency_seconds)
        return ProviderPayload(
            raw={
                "verdict": verdict.value,
                "confidence": confidence,
                "summary": _SUMMARIES[verdict],
                "metrics": [dict(m) for m in table["metrics"]],
                "logicalFallacies": list(table["logicalFallacies"]),
                "linguisticPatterns": list(table["linguisticPatterns"]),
            }
        )
