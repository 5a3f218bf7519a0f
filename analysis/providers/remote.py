"""Google Gemini analysis provider with schema-constrained output.

Uses the google-genai SDK. The request carries the analyst instruction, the
response schema and, when enabled, the Google Search grounding tool. Each call
is a single attempt bounded by the transport timeout; failures are mapped onto
``ProviderError`` kinds and never retried here.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from google.genai import errors, types
from pydantic import ValidationError

from analysis.prompts import SYSTEM_INSTRUCTION, build_prompt, response_schema
from analysis.providers.base import AnalysisProvider, ProviderPayload
from analysis.schema import GroundingSource
from core.errors import ProviderError, ProviderErrorKind
from llm.providers.gemini_provider import build_client, resolve_api_key, translate_api_error

logger = logging.getLogger("verinews.analysis.remote")

DEFAULT_MODEL = "gemini-3-flash-preview"
DEFAULT_SOURCE_TITLE = "External Source"


def _strip_code_fence(body: str) -> str:
    if body.startswith("```"):
        body = body.split("\n", 1)[1] if "\n" in body else ""
        if body.rstrip().endswith("```"):
            body = body.rstrip()[:-3]
    return body.strip()


def extract_sources(response: Any) -> tuple[GroundingSource, ...]:
    """Collect web-backed grounding chunks from the first candidate."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return ()
    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    sources: list[GroundingSource] = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        title = getattr(web, "title", None) or DEFAULT_SOURCE_TITLE
        try:
            sources.append(GroundingSource(title=title, uri=getattr(web, "uri", None) or ""))
        except ValidationError:
            logger.debug("Skipping grounding chunk without an absolute URI: %r", web)
    return tuple(sources)


class RemoteModelProvider(AnalysisProvider):
    """Structured analysis from a Gemini model, optionally search-grounded."""

    name = "remote"
    supports_grounding = True

    def __init__(
        self,
        model: str = DEFAULT_MODEL,
        api_key: str | None = None,
        api_key_env: str = "GEMINI_API_KEY",
        grounding: bool = True,
        timeout_seconds: float | None = 30.0,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.api_key = api_key
        self.api_key_env = api_key_env
        self.grounding = grounding
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            key = resolve_api_key(self.api_key, self.api_key_env)
            self._client = build_client(key, self.timeout_seconds)
        return self._client

    def _config(self) -> types.GenerateContentConfig:
        tools = [types.Tool(google_search=types.GoogleSearch())] if self.grounding else None
        return types.GenerateContentConfig(
            system_instruction=SYSTEM_INSTRUCTION,
            response_mime_type="application/json",
            response_schema=types.Schema.model_validate(response_schema()),
            tools=tools,
        )

    def generate(self, text: str) -> ProviderPayload:
        client = self._get_client()
        try:
            response = client.models.generate_content(
                model=self.model,
                contents=build_prompt(text),
                config=self._config(),
            )
        except (errors.APIError, httpx.HTTPError) as exc:
            error = translate_api_error(exc)
            logger.error("Gemini analysis call failed (%s): %s", error.kind.value, exc)
            raise error from exc

        body = _strip_code_fence((response.text or "").strip())
        if not body:
            raise ProviderError(ProviderErrorKind.MALFORMED_RESPONSE, "Gemini returned an empty body")
        try:
            data = json.loads(body)
        except json.JSONDecodeError as exc:
            logger.warning("Gemini returned non-JSON output (%d chars)", len(body))
            raise ProviderError(
                ProviderErrorKind.MALFORMED_RESPONSE,
                f"Gemini response is not valid JSON: {exc}",
            ) from exc
        if not isinstance(data, dict):
            raise ProviderError(
                ProviderErrorKind.MALFORMED_RESPONSE,
                f"Gemini response must be a JSON object, got {type(data).__name__}",
            )

        sources = extract_sources(response) if self.grounding else ()
        logger.info("Gemini analysis received (%d grounding sources)", len(sources))
        return ProviderPayload(raw=data, sources=sources)
