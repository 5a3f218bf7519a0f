"""OpenAI-compatible chat backend (OpenAI, Groq)."""

from __future__ import annotations

import logging
import os
from typing import Any

import openai
from openai import OpenAI

from core.errors import ProviderError, ProviderErrorKind
from llm.base_llm import BaseLLM

logger = logging.getLogger("verinews.llm.openai")


class OpenAIProvider(BaseLLM):
    """OpenAI API adapter. ``base_url`` points it at compatible endpoints."""

    name = "openai"

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key_env: str = "OPENAI_API_KEY",
        base_url: str | None = None,
        timeout_seconds: float | None = 30.0,
        client: Any | None = None,
    ) -> None:
        self.model = model
        self.api_key_env = api_key_env
        self.base_url = base_url
        self.timeout_seconds = timeout_seconds
        self._client = client

    def _get_client(self) -> Any:
        if self._client is None:
            api_key = os.getenv(self.api_key_env)
            if not api_key:
                raise ProviderError(
                    ProviderErrorKind.CONFIG_MISSING,
                    f"No API key configured (set {self.api_key_env})",
                )
            self._client = OpenAI(
                api_key=api_key,
                base_url=self.base_url,
                timeout=self.timeout_seconds,
                max_retries=0,
            )
        return self._client

    def chat(self, messages: list[dict[str, str]], **kwargs: Any) -> str:
        _ = kwargs
        client = self._get_client()
        try:
            response = client.chat.completions.create(model=self.model, messages=messages)
        except openai.APITimeoutError as exc:
            logger.error("%s chat call timed out: %s", self.model, exc)
            raise ProviderError(ProviderErrorKind.TIMEOUT, f"Request timed out: {exc}") from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise ProviderError(
                ProviderErrorKind.CONFIG_MISSING,
                f"Credential rejected: {exc}",
            ) from exc
        except openai.APIError as exc:
            logger.error("%s chat call failed: %s", self.model, exc)
            raise ProviderError(ProviderErrorKind.REQUEST_FAILED, f"Request failed: {exc}") from exc
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""
