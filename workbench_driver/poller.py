"""
Condition poller.

The workbench exposes no event channel to the automation layer, only
queryable rendered state. Every wait in this package therefore reduces to one
primitive: call an async probe, test its result, suspend, repeat until the
result is accepted or the deadline passes.

    from workbench_driver.poller import WaitPolicy, poll_until

    text = await poll_until(
        lambda: client.query_text(".statusbar"),
        lambda t: "debugging" in t,
        policy=WaitPolicy(timeout_ms=5_000, interval_ms=100),
        label="status bar shows debugging",
    )

Timing guarantees:
- the first probe runs immediately, so an already-true condition costs no sleep
- probes for one wait never overlap; ``interval`` is the lower bound on spacing
- every sleep is a full interval, and the deadline is checked after each
  probe, so a timeout is raised no earlier than ``timeout_ms`` and no more
  than one interval (plus one probe) after it
"""

from __future__ import annotations

import asyncio
import dataclasses
import logging
import math
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from .constants import DEFAULT_INTERVAL_MS, DEFAULT_TIMEOUT_MS
from .exceptions import ProbeTransientError, WaitTimeoutError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Probe = Callable[[], Awaitable[T]]
Predicate = Callable[[T], bool]
ErrorClassifier = Callable[[BaseException], bool]
Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


@dataclass(frozen=True)
class WaitPolicy:
    """Timeout and polling cadence shared by every wait of a page object."""

    timeout_ms: int = DEFAULT_TIMEOUT_MS
    interval_ms: int = DEFAULT_INTERVAL_MS
    backoff: float = 1.0
    """Multiplier applied to the interval after each unsatisfied attempt (1.0 = fixed)."""
    max_interval_ms: int | None = None

    def __post_init__(self) -> None:
        if self.timeout_ms < 0:
            raise ValueError("timeout_ms must be >= 0")
        if self.interval_ms <= 0:
            raise ValueError("interval_ms must be > 0")
        if self.backoff < 1.0:
            raise ValueError("backoff must be >= 1.0")
        if self.max_interval_ms is not None and self.max_interval_ms < self.interval_ms:
            raise ValueError("max_interval_ms must be >= interval_ms")

    def interval_s(self, attempt: int) -> float:
        """Sleep before the next attempt, given the 1-based attempt just made."""
        steps = max(attempt - 1, 0)
        if self.max_interval_ms is not None and self.backoff > 1.0:
            # Stop growing once the cap is reached.
            cap_steps = math.ceil(math.log(self.max_interval_ms / self.interval_ms, self.backoff))
            steps = min(steps, cap_steps)
        interval = self.interval_ms * (self.backoff**steps)
        if self.max_interval_ms is not None:
            interval = min(interval, self.max_interval_ms)
        return interval / 1000.0

    def replace(self, **changes: Any) -> WaitPolicy:
        return dataclasses.replace(self, **changes)


def is_truthy(value: Any) -> bool:
    """Default predicate: accept any truthy / non-empty result."""
    return bool(value)


def is_transient_error(e: BaseException) -> bool:
    return isinstance(e, ProbeTransientError)


async def poll_until(
    probe: Probe[T],
    predicate: Predicate[T] | None = None,
    *,
    policy: WaitPolicy | None = None,
    label: str = "condition",
    is_transient: ErrorClassifier | None = None,
    clock: Clock = time.monotonic,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Poll ``probe`` until ``predicate`` accepts its result.

    Args:
        probe: Async read of the current rendered state.
        predicate: Acceptance test; defaults to truthiness.
        policy: Timeout and interval; defaults to ``WaitPolicy()``.
        label: Diagnostic label carried by the timeout error.
        is_transient: Extra classifier for probe errors that mean "not yet".
            ``ProbeTransientError`` is always treated as transient.
        clock: Monotonic clock in seconds.
        sleep: Cooperative sleep.

    Returns:
        The first probe result the predicate accepted.

    Raises:
        WaitTimeoutError: The deadline passed without an accepted result.
        Exception: Any probe error not classified as transient, immediately.
    """
    policy = policy or WaitPolicy()
    accept = predicate or is_truthy
    deadline = clock() + policy.timeout_ms / 1000.0

    attempt = 0
    last_value: Any = None
    last_error: BaseException | None = None

    while True:
        attempt += 1
        try:
            value = await probe()
        except Exception as e:
            if not (is_transient_error(e) or (is_transient is not None and is_transient(e))):
                raise
            last_error = e
            logger.debug(f"[{label}] attempt {attempt}: transient probe error: {e}")
        else:
            last_error = None
            last_value = value
            if accept(value):
                logger.debug(f"[{label}] satisfied on attempt {attempt}")
                return value
            logger.debug(f"[{label}] attempt {attempt}: not yet ({value!r:.80})")

        if clock() >= deadline:
            error = WaitTimeoutError(
                label,
                last_value=last_value,
                timeout_ms=policy.timeout_ms,
                attempts=attempt,
            )
            if last_error is not None:
                raise error from last_error
            raise error

        await sleep(policy.interval_s(attempt))


@dataclass(frozen=True)
class WaitSpec(Generic[T]):
    """
    One fully configured poll request.

    Built per call and awaited once; nothing keeps a reference to it after
    ``run()`` returns.
    """

    probe: Probe[T]
    predicate: Predicate[T] | None = None
    policy: WaitPolicy = field(default_factory=WaitPolicy)
    label: str = "condition"
    is_transient: ErrorClassifier | None = None

    async def run(self, *, clock: Clock = time.monotonic, sleep: Sleep = asyncio.sleep) -> T:
        return await poll_until(
            self.probe,
            self.predicate,
            policy=self.policy,
            label=self.label,
            is_transient=self.is_transient,
            clock=clock,
            sleep=sleep,
        )
