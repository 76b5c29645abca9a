"""
Shared fakes for workbench-driver tests.

``FakeClient`` implements the AutomationClient protocol over a scripted,
in-memory "DOM"; ``FakeClock`` replaces the monotonic clock and the sleep so
poll timing is deterministic.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from workbench_driver.exceptions import ProbeTransientError


class Seq:
    """Successive values for repeated reads; the last value repeats forever."""

    def __init__(self, *values: Any) -> None:
        if not values:
            raise ValueError("Seq needs at least one value")
        self._values = list(values)
        self.reads = 0

    def next(self) -> Any:
        self.reads += 1
        if len(self._values) > 1:
            return self._values.pop(0)
        return self._values[0]


def _read(mapping: dict[str, Any], key: str, default: Any) -> Any:
    value = mapping.get(key, default)
    if isinstance(value, Seq):
        return value.next()
    return value


class FakeClient:
    def __init__(self) -> None:
        self.counts: dict[str, Any] = {}
        self.texts: dict[str, Any] = {}
        self.page_data: dict[str, Any] = {}
        self.active: set[str] = set()
        self.on_click: dict[str, Callable[[], None]] = {}
        self.on_set_value: dict[str, Callable[[str], None]] = {}
        self.calls: list[tuple] = []
        self.keys: list[str] = []

    def show(self, *selectors: str) -> None:
        for selector in selectors:
            self.counts[selector] = 1

    def hide(self, *selectors: str) -> None:
        for selector in selectors:
            self.counts[selector] = 0

    async def set_value(self, selector: str, text: str) -> None:
        self.calls.append(("set_value", selector, text))
        hook = self.on_set_value.get(selector)
        if hook is not None:
            hook(text)

    async def send_keys(self, keys: Sequence[str]) -> None:
        self.calls.append(("send_keys", list(keys)))
        self.keys.extend(keys)

    async def element_exists(self, selector: str) -> bool:
        return int(_read(self.counts, selector, 0)) > 0

    async def query_text(self, selector: str) -> str | list[str]:
        return _read(self.texts, selector, [])

    async def query_element_count(self, selector: str) -> int:
        return int(_read(self.counts, selector, 0))

    async def active_element_matches(self, selector: str) -> bool:
        return selector in self.active

    async def evaluate_in_page(self, selector: str, script: str) -> Any:
        self.calls.append(("evaluate_in_page", selector))
        return _read(self.page_data, selector, [])

    async def click(self, selector: str, offset_x=None, offset_y=None) -> None:
        if not await self.element_exists(selector):
            raise ProbeTransientError(f"not rendered: {selector}")
        self.calls.append(("click", selector, offset_x, offset_y))
        hook = self.on_click.get(selector)
        if hook is not None:
            hook()

    async def move_to(self, selector: str) -> None:
        if not await self.element_exists(selector):
            raise ProbeTransientError(f"not rendered: {selector}")
        self.calls.append(("move_to", selector))

    def clicked(self) -> list[str]:
        return [call[1] for call in self.calls if call[0] == "click"]


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def client() -> FakeClient:
    return FakeClient()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
