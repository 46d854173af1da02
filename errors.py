"""Shared error codes, user-facing messages and stream exceptions."""

from __future__ import annotations

NETWORK_ERROR = "NETWORK_ERROR"
AUTH_FAILED = "AUTH_FAILED"
BACKEND_MISSING = "BACKEND_MISSING"
STREAM_OPEN_FAILED = "STREAM_OPEN_FAILED"
STREAM_FAILED = "STREAM_FAILED"
EXPLAIN_FAILED = "EXPLAIN_FAILED"

ERROR_MESSAGES = {
    NETWORK_ERROR: "Network failed, please retry.",
    AUTH_FAILED: "API key is invalid.",
    BACKEND_MISSING: "The text generation backend is not installed.",
    STREAM_OPEN_FAILED: "Could not start the translation stream.",
    STREAM_FAILED: "The translation stream was interrupted.",
    EXPLAIN_FAILED: "Could not explain the code.",
}


class StreamOpenFailure(Exception):
    """Raised when the upstream call to start a stream fails."""

    def __init__(self, code: str, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.retryable = retryable


class StreamFailure(Exception):
    """Raised when a stream fails after it was opened.

    ``partial_text`` holds everything that was accumulated before the failure.
    """

    def __init__(
        self,
        code: str,
        message: str,
        partial_text: str = "",
        retryable: bool = True,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.partial_text = partial_text
        self.retryable = retryable


def classify_error(exc: BaseException, default_code: str) -> tuple[str, bool]:
    """Map an SDK/network exception to ``(code, retryable)``."""
    low = str(exc).lower()
    if "401" in low or "auth" in low or "api key" in low:
        return AUTH_FAILED, False
    if (
        isinstance(exc, (ConnectionError, TimeoutError))
        or "timeout" in low
        or "network" in low
        or "connection" in low
    ):
        return NETWORK_ERROR, True
    return default_code, True
