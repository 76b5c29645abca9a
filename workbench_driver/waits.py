"""
Element waits over the live workbench tree.

Each method is a thin ``WaitSpec`` over a fixed probe. All of them share the
facade's single ``WaitPolicy`` so the driver's tolerance for a slow workbench
is tuned in one place.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any, TypeVar

from .poller import Clock, Predicate, Probe, Sleep, WaitPolicy, WaitSpec

T = TypeVar("T")


def _as_list(text: str | list[str]) -> list[str]:
    if isinstance(text, list):
        return text
    return [text]


def _first_text(text: str | list[str]) -> str:
    if isinstance(text, list):
        return text[0] if text else ""
    return text or ""


class ElementWaits:
    """
    Wait helpers bound to one automation client.

    Attributes:
        client: AutomationClient implementation
        policy: WaitPolicy applied to every wait issued through this facade
    """

    def __init__(
        self,
        client: Any,
        policy: WaitPolicy | None = None,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.policy = policy or WaitPolicy()
        self.clock = clock
        self.sleep = sleep
        # Clients may classify their own transport errors as "not there yet".
        self._is_transient = getattr(client, "is_transient_error", None)

    def with_policy(self, policy: WaitPolicy) -> ElementWaits:
        return ElementWaits(self.client, policy, clock=self.clock, sleep=self.sleep)

    async def wait_for(
        self,
        probe: Probe[T],
        accept: Predicate[T] | None = None,
        label: str = "condition",
    ) -> T:
        """Generic wait: poll ``probe`` until ``accept`` is true."""
        spec = WaitSpec(
            probe=probe,
            predicate=accept,
            policy=self.policy,
            label=label,
            is_transient=self._is_transient,
        )
        return await spec.run(clock=self.clock, sleep=self.sleep)

    async def wait_for_element(self, selector: str) -> bool:
        return await self.wait_for(
            lambda: self.client.element_exists(selector),
            label=f"element {selector}",
        )

    async def wait_for_no_element(self, selector: str) -> bool:
        await self.wait_for(
            lambda: self.client.element_exists(selector),
            lambda exists: not exists,
            label=f"no element {selector}",
        )
        return True

    async def wait_for_active_element(self, selector: str) -> bool:
        return await self.wait_for(
            lambda: self.client.active_element_matches(selector),
            label=f"focus on {selector}",
        )

    async def wait_for_element_count(
        self,
        selector: str,
        accept: int | Callable[[int], bool],
    ) -> int:
        """Wait until the number of matches equals ``accept`` (or satisfies it, when callable)."""
        if callable(accept):
            check = accept
            label = f"count of {selector}"
        else:
            expected = int(accept)

            def check(count: int) -> bool:
                return count == expected

            label = f"count of {selector} == {expected}"
        return await self.wait_for(
            lambda: self.client.query_element_count(selector),
            check,
            label=label,
        )

    async def wait_for_elements(
        self,
        selector: str,
        accept: Callable[[list[str]], bool],
    ) -> list[str]:
        """Wait until ``accept`` holds over the text contents of all matches."""

        async def probe() -> list[str]:
            return _as_list(await self.client.query_text(selector))

        return await self.wait_for(probe, accept, label=f"elements {selector}")

    async def wait_for_text(
        self,
        selector: str,
        text: str | None = None,
        accept: Callable[[str], bool] | None = None,
    ) -> str:
        """
        Wait for the first match's text.

        With neither ``text`` nor ``accept`` any non-empty text is accepted.
        ``accept`` can compare against a baseline captured earlier, e.g.
        ``lambda t: t != before`` to detect that a row was removed.
        """
        check = accept
        if check is None and text is not None:

            def check(value: str) -> bool:
                return value == text

        async def probe() -> str:
            return _first_text(await self.client.query_text(selector))

        return await self.wait_for(probe, check, label=f"text of {selector}")

    async def wait_for_text_content(self, selector: str, text: str) -> str:
        """Wait until some match's text content equals ``text`` exactly."""
        await self.wait_for_elements(selector, lambda texts: text in texts)
        return text

    async def wait_and_click(
        self,
        selector: str,
        x_offset: float | None = None,
        y_offset: float | None = None,
    ) -> None:
        """
        Click as soon as the target accepts the click.

        The probe has a side effect: it performs the click itself. A click on a
        target not yet rendered raises a transient error and is retried.
        """

        async def probe() -> bool:
            await self.client.click(selector, x_offset, y_offset)
            return True

        await self.wait_for(probe, label=f"click {selector}")

    async def wait_and_move_to(self, selector: str) -> None:
        """Hover as soon as the target exists (side-effecting probe, like ``wait_and_click``)."""

        async def probe() -> bool:
            await self.client.move_to(selector)
            return True

        await self.wait_for(probe, label=f"move to {selector}")

    async def does_element_exist(self, selector: str) -> bool:
        """One-shot existence check, no waiting."""
        return bool(await self.client.element_exists(selector))
