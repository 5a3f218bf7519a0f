"""Analysis provider factory."""

from __future__ import annotations

import os
from typing import Any

from analysis.providers.base import AnalysisProvider
from analysis.providers.heuristic import HeuristicProvider
from analysis.providers.passthrough import PassthroughProvider
from analysis.providers.remote import DEFAULT_MODEL, RemoteModelProvider
from llm.llm_factory import build_llm

PROVIDER_ENV = "VERINEWS_PROVIDER"
PROVIDER_NAMES = ("remote", "heuristic", "passthrough")


def build_provider(config: dict[str, Any], name: str | None = None) -> AnalysisProvider:
    """Build the analysis provider selected by configuration.

    Precedence: explicit ``name``, then ``VERINEWS_PROVIDER``, then
    ``analysis.provider``. Unknown names raise ``ValueError``.
    """
    selected = name or os.getenv(PROVIDER_ENV) or config.get("analysis", {}).get("provider", "heuristic")
    selected = selected.strip().lower()
    models_cfg = config.get("models", {})

    if selected == "remote":
        remote_cfg = models_cfg.get("remote", {})
        return RemoteModelProvider(
            model=remote_cfg.get("model", DEFAULT_MODEL),
            api_key_env=remote_cfg.get("api_key_env", "GEMINI_API_KEY"),
            grounding=bool(remote_cfg.get("grounding", True)),
            timeout_seconds=remote_cfg.get("timeout_seconds", 30.0),
        )
    if selected == "heuristic":
        heuristic_cfg = models_cfg.get("heuristic", {})
        return HeuristicProvider(latency_seconds=float(heuristic_cfg.get("latency_seconds", 0.0)))
    if selected == "passthrough":
        return PassthroughProvider(llm=build_llm(models_cfg.get("passthrough", {})))
    raise ValueError(
        f"Unknown analysis provider {selected!r}; expected one of {', '.join(PROVIDER_NAMES)}"
    )
