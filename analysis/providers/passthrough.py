"""Free-text commentary wrapped as a placeholder result."""

from __future__ import annotations

import logging

from analysis.prompts import PASSTHROUGH_INSTRUCTION, build_prompt
from analysis.providers.base import AnalysisProvider, ProviderPayload
from analysis.schema import Verdict
from core.errors import ProviderError, ProviderErrorKind
from llm.base_llm import BaseLLM

logger = logging.getLogger("verinews.analysis.passthrough")

PLACEHOLDER_VERDICT = Verdict.MIXED
PLACEHOLDER_CONFIDENCE = 50


class PassthroughProvider(AnalysisProvider):
    """Sends text to a chat backend with no output schema.

    The reply becomes the summary; verdict and confidence are fixed
    placeholders whatever the reply says.
    """

    name = "passthrough"
    supports_grounding = False

    def __init__(self, llm: BaseLLM) -> None:
        self.llm = llm

    def generate(self, text: str) -> ProviderPayload:
        reply = self.llm.chat(
            [
                {"role": "system", "content": PASSTHROUGH_INSTRUCTION},
                {"role": "user", "content": build_prompt(text)},
            ]
        )
        if not reply or not reply.strip():
            raise ProviderError(
                ProviderErrorKind.MALFORMED_RESPONSE,
                f"{self.llm.name} backend returned an empty completion",
            )
        logger.info("Passthrough commentary received from %s (%d chars)", self.llm.name, len(reply))
        return ProviderPayload(
            raw={
                "verdict": PLACEHOLDER_VERDICT.value,
                "confidence": PLACEHOLDER_CONFIDENCE,
                "summary": reply.strip(),
                "metrics": [],
                "logicalFallacies": [],
                "linguisticPatterns": [],
            }
        )
