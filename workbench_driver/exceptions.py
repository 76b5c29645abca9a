from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .retry import RetrySession


class WorkbenchDriverError(RuntimeError):
    """Base class for driver failures. Every failure is a scenario failure."""

    reason_code = "driver_error"

    def __init__(self, message: str, *, reason_code: str | None = None) -> None:
        super().__init__(message)
        if reason_code is not None:
            self.reason_code = reason_code


class WaitTimeoutError(WorkbenchDriverError):
    """
    A polled condition never became true within its budget.

    Carries the diagnostic label and the last value the probe produced so a
    failing scenario shows what the workbench was actually rendering.
    """

    reason_code = "wait_timeout"

    def __init__(
        self,
        label: str,
        *,
        last_value: Any = None,
        timeout_ms: int,
        attempts: int,
    ) -> None:
        self.label = label
        self.last_value = last_value
        self.timeout_ms = timeout_ms
        self.attempts = attempts
        super().__init__(
            f"Timed out after {timeout_ms}ms ({attempts} attempts): {label}; "
            f"last value: {_preview(last_value)}"
        )


# Short alias matching the error taxonomy name.
WaitTimeout = WaitTimeoutError


class ProbeTransientError(WorkbenchDriverError):
    """Raised by a probe when the target is not there yet (retried, not surfaced)."""

    reason_code = "probe_transient"


class ParseFailure(WorkbenchDriverError):
    """A value read from rendered text could not be converted to the expected shape."""

    reason_code = "parse_failure"

    def __init__(self, message: str, *, text: str) -> None:
        super().__init__(message)
        self.text = text


class RetryExhaustedError(WorkbenchDriverError):
    """The retry ceiling was reached while the sub-procedure kept returning its sentinel."""

    reason_code = "retry_exhausted"

    def __init__(self, session: RetrySession, *, label: str) -> None:
        self.session = session
        self.label = label
        super().__init__(
            f"{label}: still {session.sentinel!r} after {session.attempt} attempts "
            f"(ceiling={session.max_attempts})"
        )


class DebugSessionStateError(WorkbenchDriverError):
    reason_code = "invalid_debug_state"

    def __init__(self, state: str, action: str) -> None:
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while debug session is {state}")


def _preview(value: Any, limit: int = 200) -> str:
    text = repr(value)
    if len(text) > limit:
        return text[:limit] + "..."
    return text
