"""
Remote automation client protocol.

This is the only capability boundary the page objects consume. Any transport
(Playwright, a WebDriver session, an in-memory fake) works as long as it
provides these coroutines.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class AutomationClient(Protocol):
    """
    Minimal async surface for driving a rendered workbench window.

    Selectors are CSS selectors into the workbench DOM. Key names follow the
    WebDriver convention (``"Enter"``, ``"ArrowDown"``, ``"Control"``,
    ``"NULL"`` to release held modifiers).
    """

    async def set_value(self, selector: str, text: str) -> None:
        """Replace the value of the input matched by selector."""
        ...

    async def send_keys(self, keys: Sequence[str]) -> None:
        """Send a key sequence to the focused element."""
        ...

    async def element_exists(self, selector: str) -> bool:
        """True when at least one element matches selector."""
        ...

    async def query_text(self, selector: str) -> str | list[str]:
        """
        Text content of the matched elements.

        Returns a single string when exactly one element matches and a list
        otherwise (an empty list when nothing matches).
        """
        ...

    async def query_element_count(self, selector: str) -> int:
        ...

    async def active_element_matches(self, selector: str) -> bool:
        """True when the focused element is one of the elements matched by selector."""
        ...

    async def evaluate_in_page(self, selector: str, script: str) -> Any:
        """
        Run a JS function over all matched elements and return its JSON result.

        ``script`` is a function expression receiving the array of matched
        elements, e.g. ``"(els) => els.map(e => e.textContent)"``.
        """
        ...

    async def click(
        self,
        selector: str,
        offset_x: float | None = None,
        offset_y: float | None = None,
    ) -> None:
        """Click the first match, optionally at an offset from its top-left corner."""
        ...

    async def move_to(self, selector: str) -> None:
        """Hover the first match (reveals row actions)."""
        ...
