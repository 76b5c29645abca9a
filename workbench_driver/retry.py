"""
Whole-procedure retry for results that are "not ready yet".

A single poll cannot tell "still loading" from "genuinely empty" when the
workbench renders a placeholder (e.g. the quick outline's "No symbol
information for the file" before the language server answers). This wrapper
re-issues the entire sub-procedure while the sentinel is observed.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from .constants import RETRY_CEILING, RETRY_DELAY_MS
from .exceptions import RetryExhaustedError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class RetrySession:
    """State of one wrapper invocation; discarded when the call returns or raises."""

    max_attempts: int
    sentinel: Any
    delay_ms: int
    attempt: int = 0


async def retry_until_ready(
    procedure: Callable[[], Awaitable[T]],
    *,
    sentinel: Any,
    reset: Callable[[], Awaitable[Any]] | None = None,
    max_attempts: int = RETRY_CEILING,
    delay_ms: int = RETRY_DELAY_MS,
    is_sentinel: Callable[[T], bool] | None = None,
    label: str = "procedure",
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """
    Run ``procedure`` until it returns something other than ``sentinel``.

    Between attempts ``reset`` closes whatever transient UI the attempt opened,
    then the wrapper sleeps ``delay_ms``. Errors raised by the procedure
    (including wait timeouts) propagate; only the sentinel is retried.

    Raises:
        RetryExhaustedError: every one of ``max_attempts`` attempts produced the sentinel.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")

    session = RetrySession(max_attempts=max_attempts, sentinel=sentinel, delay_ms=delay_ms)
    matches = is_sentinel or (lambda value: value == sentinel)

    while session.attempt < session.max_attempts:
        session.attempt += 1
        result = await procedure()
        if not matches(result):
            if session.attempt > 1:
                logger.debug(f"{label}: ready on attempt {session.attempt}")
            return result

        logger.warning(
            f"{label}: attempt {session.attempt}/{session.max_attempts} returned {sentinel!r}"
        )
        if reset is not None:
            await reset()
        if session.attempt < session.max_attempts:
            await sleep(session.delay_ms / 1000.0)

    raise RetryExhaustedError(session, label=label)
