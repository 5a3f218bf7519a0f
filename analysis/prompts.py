"""Instruction text and response schema for model-backed analysis."""

from __future__ import annotations

from typing import Any

from analysis.schema import Verdict

SYSTEM_INSTRUCTION = """
You are an expert news analyst and fact-checker.
Analyze the provided news text for authenticity.
Simulate a multi-layered NLP pipeline:
1. Linguistic Pattern Analysis (TF-IDF simulation: identify key terms associated with misinformation).
2. Sentiment & Bias detection.
3. Factual verification using Google Search.
4. Logical fallacy detection.

Return your analysis in a strict JSON format.
""".strip()

PASSTHROUGH_INSTRUCTION = """
You are an expert news analyst and fact-checker.
Assess the credibility of the provided news text in a short paragraph,
covering linguistic patterns, sensationalism, bias and factual consistency.
""".strip()


def build_prompt(content: str) -> str:
    """Wrap user content in the analysis request."""
    return (
        "Please analyze the following news content:\n"
        "---\n"
        f"{content}\n"
        "---\n\n"
        "Assess the content based on linguistic patterns, sensationalism, and factual consistency."
    )


def response_schema() -> dict[str, Any]:
    """JSON schema the remote model is constrained to (OpenAPI subset)."""
    return {
        "type": "OBJECT",
        "properties": {
            "verdict": {
                "type": "STRING",
                "enum": [v.value for v in Verdict],
                "description": "The overall credibility verdict.",
            },
            "confidence": {"type": "NUMBER", "description": "Confidence score from 0-100"},
            "summary": {
                "type": "STRING",
                "description": "A concise 2-sentence summary of why this verdict was reached.",
            },
            "metrics": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "name": {"type": "STRING"},
                        "score": {"type": "NUMBER"},
                        "description": {"type": "STRING"},
                    },
                    "required": ["name", "score", "description"],
                },
            },
            "logicalFallacies": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "List of logical fallacies identified (e.g., Straw Man, Appeal to Fear).",
            },
            "linguisticPatterns": {
                "type": "ARRAY",
                "items": {"type": "STRING"},
                "description": "Keywords or stylistic features (TF-IDF style) that triggered suspicion.",
            },
        },
        "required": [
            "verdict",
            "confidence",
            "summary",
            "metrics",
            "logicalFallacies",
            "linguisticPatterns",
        ],
    }
