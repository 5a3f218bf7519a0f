"""View state shared with the presentation layer."""

from __future__ import annotations

from dataclasses import dataclass, field

from analysis.schema import AnalysisResult, HistoryItem


@dataclass
class ViewState:
    """What a front end renders: current result, history, error, loading flag."""

    result: AnalysisResult | None = None
    history: tuple[HistoryItem, ...] = ()
    error: str | None = None
    loading: bool = False


class StateManager:
    """Wraps view state and provides convenience update methods."""

    def __init__(self) -> None:
        self.state = ViewState()

    def begin_attempt(self) -> None:
        """Drop any previous result and error before a new submission."""
        self.state.result = None
        self.state.error = None
        self.state.loading = True

    def finish_attempt(self) -> None:
        self.state.loading = False

    def set_result(self, result: AnalysisResult) -> None:
        self.state.result = result

    def set_error(self, message: str) -> None:
        self.state.error = message

    def set_history(self, history: tuple[HistoryItem, ...]) -> None:
        self.state.history = history
