"""Google Gemini chat backend and shared google-genai helpers.

Uses the google-genai SDK without an output schema. A single attempt per
call; the transport timeout bounds how long a call may block.
"""

from __future__ import annotations

import logging
import os
from typing import Any

import httpx
from google import genai
from google.genai import errors, types

from core.errors import ProviderError, ProviderErrorKind
from llm.base_llm import BaseLLM

logger = logging.getLogger("verinews.llm.gemini")

_FALLBACK_KEY_ENV = "API_KEY"
_AUTH_ERROR_CODES = (401, 403)


def resolve_api_key(api_key: str | None, api_key_env: str) -> str:
    """Return the configured credential or raise CONFIG_MISSING."""
    key = api_key or os.getenv(api_key_env) or os.getenv(_FALLBACK_KEY_ENV)
    if not key or not key.strip():
        raise ProviderError(
            ProviderErrorKind.CONFIG_MISSING,
            f"No API key configured (set {api_key_env})",
        )
    return key.strip()


def build_client(api_key: str, timeout_seconds: float | None) -> genai.Client:
    """Create a google-genai client with a bounded transport timeout."""
    http_options = None
    if timeout_seconds:
        http_options = types.HttpOptions(timeout=int(timeout_seconds * 1000))
    return genai.Client(api_key=api_key, http_options=http_options)


def translate_api_error(exc: Exception) -> ProviderError:
    """Map google-genai / httpx exceptions onto ProviderError kinds."""
    if isinstance(exc, httpx.TimeoutException):
        return ProviderError(ProviderErrorKind.TIMEOUT, f"Gemini request timed out: {exc}")
    if isinstance(exc, errors.APIError) and exc.code in _AUTH_ERROR_CODES:
        return ProviderError(
            ProviderErrorKind.CONFIG_MISSING,
            f"Gemini rejected the credential ({exc.code}): {exc}",
        )
    return ProviderError(ProviderErrorKind.REQUEST_FAILED, f"Gemini request failed: {exc}")


class GeminiProvider(BaseLLM):
    """Google Gemini API adapter."""

    name = "gemini"

    def __init__(
        self,
        model: str = "gemini-2.5-flash",
        api_key: str | None = None,
        api_key_env: str = "GEMINI_API_KEY",
        timeout_seconds: float | None = 30.0,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.api_key = api_key
        self.api_key_env = api_key_env
        self.timeout_seconds = timeout_seconds
        self._client = client

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        _ = kwargs
        if self._client is None:
            key = resolve_api_key(self.api_key, self.api_key_env)
            self._client = build_client(key, self.timeout_seconds)
        system_text, contents = self._convert_messages(messages)
        config = types.GenerateContentConfig(system_instruction=system_text) if system_text else None
        try:
            response = self._client.models.generate_content(
                model=self.model,
                contents=contents,
                config=config,
            )
        except (errors.APIError, httpx.HTTPError) as exc:
            error = translate_api_error(exc)
            logger.error("Gemini chat call failed (%s): %s", error.kind.value, exc)
            raise error from exc
        return response.text or ""

    @staticmethod
    def _convert_messages(
        messages: list[dict[str, str]],
    ) -> tuple[str, list[dict[str, Any]]]:
        """Split OpenAI-style messages into a system instruction and Gemini contents."""
        contents: list[dict[str, Any]] = []
        system_parts: list[str] = []

        for msg in messages:
            role = msg.get("role", "user")
            text = msg.get("content", "")

            if role == "system":
                system_parts.append(text)
                continue

            gemini_role = "model" if role == "assistant" else "user"
            contents.append({
                "role": gemini_role,
                "parts": [{"text": text}],
            })

        return "\n\n".join(system_parts), contents
