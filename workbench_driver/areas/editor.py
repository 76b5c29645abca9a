from __future__ import annotations

from collections.abc import Callable

from ..locators import EditorLocators
from ..waits import ElementWaits

_NBSP = "\u00a0"


class Editor:
    """Reads the rendered text of a code editor identified by its document URI suffix."""

    def __init__(self, waits: ElementWaits, locators: EditorLocators) -> None:
        self.waits = waits
        self.locators = locators

    async def wait_for_editor_contents(
        self,
        filename: str,
        accept: Callable[[str], bool],
    ) -> str:
        """
        Wait until the editor's view lines satisfy ``accept``.

        The editor renders spaces as non-breaking spaces; they are normalised
        before ``accept`` sees the text.
        """
        selector = self.locators.for_file(self.locators.view_lines, filename)

        async def probe() -> str:
            text = await self.waits.client.query_text(selector)
            if isinstance(text, list):
                text = "".join(text)
            return (text or "").replace(_NBSP, " ")

        return await self.waits.wait_for(probe, accept, label=f"editor contents of {filename}")


class Editors:
    """Editor tabs."""

    def __init__(self, waits: ElementWaits, locators: EditorLocators) -> None:
        self.waits = waits
        self.locators = locators

    async def wait_for_tab(self, filename: str) -> None:
        await self.waits.wait_for_element(self.locators.for_file(self.locators.tab, filename))

    async def wait_for_active_tab(self, filename: str) -> None:
        await self.waits.wait_for_element(self.locators.for_file(self.locators.active_tab, filename))

    async def wait_for_editor_focus(self, filename: str) -> None:
        await self.wait_for_active_tab(filename)
        await self.waits.wait_for_active_element(
            self.locators.for_file(self.locators.focused_textarea, filename)
        )
