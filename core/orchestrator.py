"""Submission orchestrator: validate input, analyze, record history."""

from __future__ import annotations

import logging
import threading
from enum import Enum

from analysis.providers.base import AnalysisProvider
from analysis.schema import AnalysisResult, HistoryItem
from core.audit_logger import AuditLogger
from core.errors import (
    HistoryPersistenceError,
    InputError,
    ProviderError,
    ProviderErrorKind,
    ResultValidationError,
    SubmissionInProgressError,
)
from core.event_bus import HISTORY_CHANGED, SUBMISSION_STATE, EventBus
from core.state_manager import StateManager, ViewState
from history.ledger import HistoryLedger

logger = logging.getLogger("verinews.orchestrator")

MIN_INPUT_CHARS = 20


class SubmissionState(str, Enum):
    """Per-submission lifecycle. The last five members are terminal."""

    IDLE = "idle"
    VALIDATING = "validating"
    ANALYZING = "analyzing"
    INPUT_ERROR = "input_error"
    PROVIDER_ERROR = "provider_error"
    VALIDATION_ERROR = "validation_error"
    PERSISTENCE_ERROR = "persistence_error"
    RECORDED = "recorded"


class Orchestrator:
    """The single entry point the presentation layer calls.

    At most one submission is in flight at a time; a concurrent ``submit``
    raises ``SubmissionInProgressError`` instead of queueing.
    """

    def __init__(
        self,
        provider: AnalysisProvider,
        ledger: HistoryLedger,
        event_bus: EventBus | None = None,
        state_manager: StateManager | None = None,
        audit_logger: AuditLogger | None = None,
        min_input_chars: int = MIN_INPUT_CHARS,
    ) -> None:
        self.provider = provider
        self.ledger = ledger
        self.event_bus = event_bus or EventBus()
        self.state_manager = state_manager or StateManager()
        self.audit_logger = audit_logger
        self.min_input_chars = min_input_chars
        self.state = SubmissionState.IDLE
        self._slot = threading.Lock()
        self.state_manager.set_history(self.ledger.items)

    @property
    def view(self) -> ViewState:
        return self.state_manager.state

    @property
    def history(self) -> tuple[HistoryItem, ...]:
        return self.ledger.items

    @property
    def busy(self) -> bool:
        return self._slot.locked()

    def _transition(self, state: SubmissionState, **details: object) -> None:
        self.state = state
        self.event_bus.emit(
            SUBMISSION_STATE,
            {"state": state.value, "provider": self.provider.name, **details},
        )

    def _audit(self, text: str, outcome: str, **details: object) -> None:
        if self.audit_logger is None:
            return
        try:
            self.audit_logger.log(self.provider.name, text, outcome, **details)
        except OSError as exc:
            logger.warning("Audit log write failed: %s", exc)

    def submit(self, text: str | None) -> AnalysisResult:
        """Analyze ``text`` and record it in history.

        Raises InputError, ProviderError (ResultValidationError included),
        HistoryPersistenceError or SubmissionInProgressError. History only
        changes when a result is returned.
        """
        if not self._slot.acquire(blocking=False):
            raise SubmissionInProgressError("A submission is already pending")
        try:
            self.state_manager.begin_attempt()
            return self._run(text)
        finally:
            self.state_manager.finish_attempt()
            self._slot.release()

    def _run(self, text: str | None) -> AnalysisResult:
        self._transition(SubmissionState.VALIDATING)
        cleaned = text.strip() if isinstance(text, str) else ""
        if len(cleaned) < self.min_input_chars:
            error = InputError(
                f"Input has {len(cleaned)} characters; at least {self.min_input_chars} required"
            )
            logger.info("Rejected submission: %s", error)
            self.state_manager.set_error(error.user_message)
            self._transition(SubmissionState.INPUT_ERROR)
            raise error

        self._transition(SubmissionState.ANALYZING)
        try:
            result = self.provider.analyze(cleaned)
        except ResultValidationError as exc:
            logger.warning("Provider %s returned an invalid result: %s", self.provider.name, exc)
            self._fail(cleaned, SubmissionState.VALIDATION_ERROR, exc)
            raise
        except ProviderError as exc:
            logger.warning("Provider %s failed (%s): %s", self.provider.name, exc.kind.value, exc)
            self._fail(cleaned, SubmissionState.PROVIDER_ERROR, exc)
            raise
        except Exception as exc:
            logger.exception("Provider %s raised an unexpected error", self.provider.name)
            error = ProviderError(ProviderErrorKind.REQUEST_FAILED, f"{type(exc).__name__}: {exc}")
            self._fail(cleaned, SubmissionState.PROVIDER_ERROR, error)
            raise error from exc

        try:
            item = self.ledger.record(result, cleaned)
        except HistoryPersistenceError as exc:
            self.state_manager.set_error(exc.user_message)
            self._audit(cleaned, "persistence_error", verdict=result.verdict.value)
            self._transition(SubmissionState.PERSISTENCE_ERROR)
            raise

        self.state_manager.set_result(result)
        self.state_manager.set_history(self.ledger.items)
        self._audit(cleaned, "recorded", verdict=result.verdict.value, history_id=item.id)
        self.event_bus.emit(HISTORY_CHANGED, {"size": len(self.ledger), "latest_id": item.id})
        self._transition(SubmissionState.RECORDED, verdict=result.verdict.value)
        logger.info(
            "Analysis recorded: verdict=%s confidence=%d sources=%d",
            result.verdict.value,
            result.confidence,
            len(result.sources),
        )
        return result

    def _fail(self, text: str, state: SubmissionState, exc: ProviderError) -> None:
        self.state_manager.set_error(exc.user_message)
        self._audit(text, state.value, error_kind=exc.kind.value)
        self._transition(state, error_kind=exc.kind.value)

    def clear_history(self) -> None:
        """Empty the history ledger. Raises HistoryPersistenceError on store failure."""
        self.ledger.clear()
        self.state_manager.set_history(self.ledger.items)
        self.event_bus.emit(HISTORY_CHANGED, {"size": 0, "latest_id": None})
