"""
Playwright implementation of the AutomationClient protocol.

Usage:
    from playwright.async_api import async_playwright
    from workbench_driver.backends import PlaywrightClient

    async with async_playwright() as p:
        app = await p._electron.launch(args=["out/main.js"])
        page = await app.first_window()
        client = PlaywrightClient(page)
        await client.click(".icon[title='Start Debugging']")

Probes must not block, so every read here uses non-waiting locator calls
(``count()``, ``all_text_contents()``, ``evaluate_all()``). Actions use a short
``action_timeout_ms`` and surface a missing target as ``ProbeTransientError``
so a poller can retry them.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from ..constants import NULL_KEY
from ..exceptions import ProbeTransientError

if TYPE_CHECKING:
    from playwright.async_api import Page

logger = logging.getLogger(__name__)

MODIFIER_KEYS = {"Control", "Shift", "Alt", "Meta"}

# WebDriver key names that Playwright spells differently.
KEY_ALIASES = {
    "Command": "Meta",
    "Return": "Enter",
    "Esc": "Escape",
    "Up": "ArrowUp",
    "Down": "ArrowDown",
    "Left": "ArrowLeft",
    "Right": "ArrowRight",
}

_ACTIVE_ELEMENT_MATCHES_JS = """
(selector) => {
  const active = document.activeElement;
  return !!active && active.matches(selector);
}
""".strip()


class PlaywrightClient:
    """AutomationClient over a Playwright ``Page`` (browser tab or Electron window)."""

    def __init__(self, page: Page, *, action_timeout_ms: int = 2_000) -> None:
        self.page = page
        self.action_timeout_ms = action_timeout_ms

    @staticmethod
    def is_transient_error(e: BaseException) -> bool:
        """Classifier handed to the poller so mid-render Playwright errors are retried."""
        return is_playwright_transient_error(e)

    async def set_value(self, selector: str, text: str) -> None:
        try:
            await self.page.locator(selector).first.fill(text, timeout=self.action_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ProbeTransientError(f"set_value target not ready: {selector}") from e

    async def send_keys(self, keys: Sequence[str]) -> None:
        keyboard = self.page.keyboard
        held: list[str] = []
        for raw in keys:
            if raw == NULL_KEY:
                # NULL releases every held modifier, like WebDriver.
                while held:
                    await keyboard.up(held.pop())
                continue
            key = KEY_ALIASES.get(raw, raw)
            if key in MODIFIER_KEYS:
                await keyboard.down(key)
                held.append(key)
            else:
                await keyboard.press(key)
        while held:
            await keyboard.up(held.pop())

    async def element_exists(self, selector: str) -> bool:
        return await self.page.locator(selector).count() > 0

    async def query_text(self, selector: str) -> str | list[str]:
        texts = await self.page.locator(selector).all_text_contents()
        if len(texts) == 1:
            return texts[0]
        return texts

    async def query_element_count(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    async def active_element_matches(self, selector: str) -> bool:
        return bool(await self.page.evaluate(_ACTIVE_ELEMENT_MATCHES_JS, selector))

    async def evaluate_in_page(self, selector: str, script: str) -> Any:
        return await self.page.locator(selector).evaluate_all(script)

    async def click(
        self,
        selector: str,
        offset_x: float | None = None,
        offset_y: float | None = None,
    ) -> None:
        kwargs: dict[str, Any] = {"timeout": self.action_timeout_ms}
        if offset_x is not None or offset_y is not None:
            kwargs["position"] = {"x": float(offset_x or 0), "y": float(offset_y or 0)}
        try:
            await self.page.locator(selector).first.click(**kwargs)
        except PlaywrightTimeoutError as e:
            raise ProbeTransientError(f"click target not ready: {selector}") from e

    async def move_to(self, selector: str) -> None:
        try:
            await self.page.locator(selector).first.hover(timeout=self.action_timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ProbeTransientError(f"hover target not ready: {selector}") from e


def is_playwright_transient_error(e: BaseException) -> bool:
    """
    Playwright errors that mean "the tree is mid-update", not "the call is wrong".

    Common symptoms:
    - "Execution context was destroyed, most likely because of a navigation"
    - "Cannot find context with specified id"
    - "Element is not attached to the DOM"
    """
    if isinstance(e, PlaywrightTimeoutError):
        return True
    if not isinstance(e, PlaywrightError):
        return False
    msg = str(e).lower()
    return (
        "execution context was destroyed" in msg
        or "most likely because of a navigation" in msg
        or "cannot find context with specified id" in msg
        or "not attached to the dom" in msg
    )
