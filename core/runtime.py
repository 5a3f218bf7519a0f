"""Runtime wiring for CLI and embedding use."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from analysis.provider_factory import build_provider
from analysis.providers.base import AnalysisProvider
from core.audit_logger import AuditLogger
from core.config import ensure_runtime_dirs, load_effective_config
from core.event_bus import EventBus
from core.orchestrator import MIN_INPUT_CHARS, Orchestrator
from history.ledger import DEFAULT_CAPACITY, DEFAULT_SLOT, HistoryLedger
from history.stores.base_store import KeyValueStore
from history.stores.json_store import JsonFileStore
from history.stores.memory_store import MemoryStore
from history.stores.sql_store import SQLiteStore


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    provider: AnalysisProvider
    ledger: HistoryLedger
    orchestrator: Orchestrator
    event_bus: EventBus


def build_store(config: dict[str, Any], paths: dict[str, Path]) -> KeyValueStore:
    """Build the history store named by ``history.store``."""
    kind = config.get("history", {}).get("store", "sqlite")
    if kind == "sqlite":
        return SQLiteStore(paths["history_db_path"])
    if kind == "json":
        return JsonFileStore(paths["history_json_path"])
    if kind == "memory":
        return MemoryStore()
    raise ValueError(f"Unknown history store: {kind!r}")


class RuntimeBuilder:
    """Creates and wires runtime components from configuration under ``root``."""

    def __init__(self, root: Path | None = None, provider_name: str | None = None) -> None:
        self.root = (root or Path.cwd()).resolve()
        self.provider_name = provider_name

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root)
        paths = ensure_runtime_dirs(self.root, config)
        history_cfg = config.get("history", {})

        ledger = HistoryLedger(
            store=build_store(config, paths),
            slot=history_cfg.get("slot", DEFAULT_SLOT),
            capacity=int(history_cfg.get("capacity", DEFAULT_CAPACITY)),
        )
        ledger.load()

        provider = build_provider(config, name=self.provider_name)
        event_bus = EventBus()
        orchestrator = Orchestrator(
            provider=provider,
            ledger=ledger,
            event_bus=event_bus,
            audit_logger=AuditLogger(paths["audit_log_path"]),
            min_input_chars=int(config.get("analysis", {}).get("min_input_chars", MIN_INPUT_CHARS)),
        )
        return RuntimeBundle(
            config=config,
            provider=provider,
            ledger=ledger,
            orchestrator=orchestrator,
            event_bus=event_bus,
        )
