"""Orchestrator submission flow tests."""

from __future__ import annotations

import json
import threading
from pathlib import Path

import pytest

from analysis.providers.base import AnalysisProvider, ProviderPayload
from analysis.providers.heuristic import HeuristicProvider
from analysis.schema import AnalysisResult, Verdict
from core.audit_logger import AuditLogger
from core.errors import (
    HistoryPersistenceError,
    InputError,
    ProviderError,
    ProviderErrorKind,
    ResultValidationError,
    SubmissionInProgressError,
)
from core.event_bus import ANY_EVENT, HISTORY_CHANGED, SUBMISSION_STATE, EventBus
from core.orchestrator import Orchestrator, SubmissionState
from history.ledger import HistoryLedger
from history.stores.memory_store import MemoryStore

VALID_TEXT = "According to official government reports, the policy reduced costs by 2%."


class StaticProvider(AnalysisProvider):
    name = "static"

    def __init__(self, raw: object = None, error: Exception | None = None) -> None:
        self.raw = raw
        self.error = error
        self.calls = 0

    def generate(self, text: str) -> ProviderPayload:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return ProviderPayload(raw=self.raw)


class BlockingProvider(HeuristicProvider):
    def __init__(self) -> None:
        super().__init__()
        self.started = threading.Event()
        self.release = threading.Event()

    def generate(self, text: str) -> ProviderPayload:
        self.started.set()
        self.release.wait(timeout=5)
        return super().generate(text)


def _orchestrator(provider: AnalysisProvider, store: MemoryStore | None = None, **kwargs) -> Orchestrator:
    ledger = HistoryLedger(store or MemoryStore())
    ledger.load()
    return Orchestrator(provider=provider, ledger=ledger, **kwargs)


@pytest.mark.parametrize("text", [None, "", "   ", "too short", " " * 30 + "nineteen chars here" + " " * 5])
def test_short_input_is_rejected_before_provider(text: str | None) -> None:
    provider = StaticProvider(raw={"verdict": "REAL", "confidence": 90})
    orchestrator = _orchestrator(provider)

    with pytest.raises(InputError):
        orchestrator.submit(text)

    assert provider.calls == 0
    assert orchestrator.history == ()
    assert orchestrator.state is SubmissionState.INPUT_ERROR
    assert orchestrator.view.error == InputError.user_message


def test_successful_submission_records_history() -> None:
    orchestrator = _orchestrator(HeuristicProvider())

    result = orchestrator.submit("  " + VALID_TEXT + "  ")

    assert result.verdict is Verdict.LIKELY_REAL
    assert 0 <= result.confidence <= 100
    assert orchestrator.state is SubmissionState.RECORDED
    assert len(orchestrator.history) == 1
    assert orchestrator.history[0].title == VALID_TEXT[:50] + "..."
    assert orchestrator.history[0].verdict is Verdict.LIKELY_REAL
    assert orchestrator.view.result == result
    assert orchestrator.view.history == orchestrator.history
    assert orchestrator.view.loading is False


def test_confidence_out_of_range_is_clamped() -> None:
    provider = StaticProvider(raw={"verdict": "likely fake", "confidence": 250, "summary": "x"})
    result = _orchestrator(provider).submit(VALID_TEXT)
    assert result.verdict is Verdict.LIKELY_FAKE
    assert result.confidence == 100


def test_unknown_verdict_surfaces_malformed_and_keeps_history() -> None:
    store = MemoryStore()
    orchestrator = _orchestrator(HeuristicProvider(), store=store)
    orchestrator.submit(VALID_TEXT)
    before = store.get("verinews_history")

    orchestrator.provider = StaticProvider(raw={"verdict": "UNCERTAIN", "confidence": 40})
    with pytest.raises(ResultValidationError) as excinfo:
        orchestrator.submit(VALID_TEXT)

    assert excinfo.value.kind is ProviderErrorKind.MALFORMED_RESPONSE
    assert orchestrator.state is SubmissionState.VALIDATION_ERROR
    assert len(orchestrator.history) == 1
    assert store.get("verinews_history") == before


def test_provider_failure_clears_previous_result() -> None:
    orchestrator = _orchestrator(HeuristicProvider())
    orchestrator.submit(VALID_TEXT)
    assert orchestrator.view.result is not None

    orchestrator.provider = StaticProvider(
        error=ProviderError(ProviderErrorKind.TIMEOUT, "no answer in 30s")
    )
    with pytest.raises(ProviderError):
        orchestrator.submit(VALID_TEXT)

    assert orchestrator.view.result is None
    assert orchestrator.view.error == "Failed to analyze the news. Please try again later."
    assert orchestrator.state is SubmissionState.PROVIDER_ERROR
    assert len(orchestrator.history) == 1


def test_config_missing_has_blocking_message() -> None:
    provider = StaticProvider(error=ProviderError(ProviderErrorKind.CONFIG_MISSING))
    orchestrator = _orchestrator(provider)
    with pytest.raises(ProviderError):
        orchestrator.submit(VALID_TEXT)
    assert "not configured" in orchestrator.view.error


def test_persistence_failure_surfaces_no_result() -> None:
    class BrokenStore(MemoryStore):
        def set(self, key: str, value: str) -> None:
            raise OSError("read-only file system")

    orchestrator = _orchestrator(HeuristicProvider(), store=BrokenStore())
    with pytest.raises(HistoryPersistenceError):
        orchestrator.submit(VALID_TEXT)

    assert orchestrator.view.result is None
    assert orchestrator.history == ()
    assert orchestrator.state is SubmissionState.PERSISTENCE_ERROR


def test_state_transitions_are_emitted() -> None:
    bus = EventBus()
    seen: list[str] = []
    bus.subscribe(SUBMISSION_STATE, lambda payload: seen.append(payload["state"]))
    orchestrator = _orchestrator(HeuristicProvider(), event_bus=bus)

    orchestrator.submit(VALID_TEXT)
    with pytest.raises(InputError):
        orchestrator.submit("tiny")

    assert seen == ["validating", "analyzing", "recorded", "validating", "input_error"]


def test_second_submission_while_pending_is_rejected() -> None:
    provider = BlockingProvider()
    orchestrator = _orchestrator(provider)
    results: list[AnalysisResult] = []
    worker = threading.Thread(target=lambda: results.append(orchestrator.submit(VALID_TEXT)))
    worker.start()
    try:
        assert provider.started.wait(timeout=5)
        assert orchestrator.busy
        assert orchestrator.view.loading is True
        with pytest.raises(SubmissionInProgressError):
            orchestrator.submit(VALID_TEXT)
    finally:
        provider.release.set()
        worker.join(timeout=5)

    assert len(results) == 1
    assert len(orchestrator.history) == 1
    assert not orchestrator.busy


def test_clear_history_persists_empty_state() -> None:
    store = MemoryStore()
    orchestrator = _orchestrator(HeuristicProvider(), store=store)
    orchestrator.submit(VALID_TEXT)

    orchestrator.clear_history()

    assert orchestrator.history == ()
    assert orchestrator.view.history == ()
    assert json.loads(store.get("verinews_history")) == []


def test_audit_log_records_outcomes_without_text(tmp_path: Path) -> None:
    audit = AuditLogger(tmp_path / "audit.jsonl")
    orchestrator = _orchestrator(HeuristicProvider(), audit_logger=audit)
    orchestrator.submit(VALID_TEXT)
    orchestrator.provider = StaticProvider(error=ProviderError(ProviderErrorKind.REQUEST_FAILED))
    with pytest.raises(ProviderError):
        orchestrator.submit(VALID_TEXT)

    lines = (tmp_path / "audit.jsonl").read_text(encoding="utf-8").splitlines()
    events = [json.loads(line) for line in lines]
    assert [e["outcome"] for e in events] == ["recorded", "provider_error"]
    assert events[0]["verdict"] == "LIKELY REAL"
    assert events[1]["error_kind"] == "request_failed"
    assert all(e["input_hash"] == AuditLogger.hash_text(VALID_TEXT) for e in events)
    assert VALID_TEXT not in "\n".join(lines)


def test_failing_subscriber_does_not_break_submission() -> None:
    bus = EventBus()
    seen: list[str] = []

    def explode(payload: dict) -> None:
        raise RuntimeError("front end crashed")

    bus.subscribe(SUBMISSION_STATE, explode)
    bus.subscribe(ANY_EVENT, lambda payload: seen.append(payload["event"]))
    orchestrator = _orchestrator(HeuristicProvider(), event_bus=bus)

    result = orchestrator.submit(VALID_TEXT)

    assert result.verdict is Verdict.LIKELY_REAL
    assert orchestrator.state is SubmissionState.RECORDED
    assert HISTORY_CHANGED in seen
    assert seen[-1] == SUBMISSION_STATE
    bus.unsubscribe(SUBMISSION_STATE, explode)


def test_unexpected_backend_error_ends_as_provider_error() -> None:
    orchestrator = _orchestrator(StaticProvider(error=KeyError("choices")))

    with pytest.raises(ProviderError) as excinfo:
        orchestrator.submit(VALID_TEXT)

    assert excinfo.value.kind is ProviderErrorKind.REQUEST_FAILED
    assert isinstance(excinfo.value.__cause__, KeyError)
    assert orchestrator.state is SubmissionState.PROVIDER_ERROR
    assert orchestrator.view.error == "Failed to analyze the news. Please try again later."
    assert orchestrator.view.loading is False
    assert orchestrator.history == ()
    assert not orchestrator.busy
