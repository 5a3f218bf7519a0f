"""Error taxonomy for the analysis pipeline."""

from __future__ import annotations

from enum import Enum

GENERIC_FAILURE_MESSAGE = "Failed to analyze the news. Please try again later."


class ProviderErrorKind(str, Enum):
    """Classification of analysis provider failures."""

    CONFIG_MISSING = "config_missing"
    REQUEST_FAILED = "request_failed"
    TIMEOUT = "timeout"
    MALFORMED_RESPONSE = "malformed_response"


class VeriNewsError(Exception):
    """Base error. ``user_message`` is safe to show to end users."""

    user_message = "Unexpected failure during analysis."

    def __init__(self, message: str = "", user_message: str | None = None) -> None:
        super().__init__(message or self.user_message)
        if user_message is not None:
            self.user_message = user_message


class InputError(VeriNewsError):
    """User-correctable input problem, e.g. text too short."""

    user_message = "Input insufficient. Provide a detailed news segment (min. 20 chars)."


class SubmissionInProgressError(VeriNewsError):
    """Raised when a second submission arrives while one is pending."""

    user_message = "An analysis is already in progress."


class HistoryPersistenceError(VeriNewsError):
    """The history store could not be written."""

    user_message = "Analysis completed but session history could not be saved."


class ProviderError(VeriNewsError):
    """An analysis provider could not produce a result."""

    def __init__(
        self,
        kind: ProviderErrorKind,
        message: str = "",
        user_message: str | None = None,
    ) -> None:
        self.kind = kind
        if user_message is None:
            user_message = _USER_MESSAGES.get(kind, GENERIC_FAILURE_MESSAGE)
        super().__init__(message or kind.value, user_message=user_message)

    @property
    def transient(self) -> bool:
        return self.kind in (ProviderErrorKind.REQUEST_FAILED, ProviderErrorKind.TIMEOUT)


class ResultValidationError(ProviderError):
    """Provider output could not be mapped onto an AnalysisResult."""

    def __init__(self, message: str) -> None:
        super().__init__(ProviderErrorKind.MALFORMED_RESPONSE, message)


_USER_MESSAGES = {
    ProviderErrorKind.CONFIG_MISSING: (
        "Analysis provider is not configured. Set the required API key and try again."
    ),
    ProviderErrorKind.REQUEST_FAILED: GENERIC_FAILURE_MESSAGE,
    ProviderErrorKind.TIMEOUT: GENERIC_FAILURE_MESSAGE,
    ProviderErrorKind.MALFORMED_RESPONSE: GENERIC_FAILURE_MESSAGE,
}
