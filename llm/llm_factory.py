"""Chat backend factory."""

from __future__ import annotations

from typing import Any

from llm.base_llm import BaseLLM
from llm.providers.gemini_provider import GeminiProvider
from llm.providers.mock_provider import MockProvider
from llm.providers.openai_provider import OpenAIProvider

GROQ_BASE_URL = "https://api.groq.com/openai/v1"


def build_llm(config: dict[str, Any]) -> BaseLLM:
    """Build the chat backend named by ``config['backend']``.

    ``config`` is the ``passthrough`` block of the models configuration.
    """
    active = config.get("backend", "mock")
    backends = config.get("backends", {})
    active_cfg = backends.get(active, {})
    backend_type = active_cfg.get("type", active)
    timeout = active_cfg.get("timeout_seconds", config.get("timeout_seconds", 30.0))

    if backend_type == "gemini":
        return GeminiProvider(
            model=active_cfg.get("model", "gemini-2.5-flash"),
            api_key_env=active_cfg.get("api_key_env", "GEMINI_API_KEY"),
            timeout_seconds=timeout,
        )
    if backend_type == "openai":
        return OpenAIProvider(
            model=active_cfg.get("model", "gpt-4o-mini"),
            api_key_env=active_cfg.get("api_key_env", "OPENAI_API_KEY"),
            base_url=active_cfg.get("base_url"),
            timeout_seconds=timeout,
        )
    if backend_type == "groq":
        return OpenAIProvider(
            model=active_cfg.get("model", "llama-3.3-70b-versatile"),
            api_key_env=active_cfg.get("api_key_env", "GROQ_API_KEY"),
            base_url=active_cfg.get("base_url", GROQ_BASE_URL),
            timeout_seconds=timeout,
        )
    if backend_type == "mock":
        return MockProvider()
    raise ValueError(f"Unknown chat backend: {backend_type!r}")
