from __future__ import annotations

from collections.abc import Callable

from ..commands import CLOSE_QUICK_OPEN_COMMAND, QUICK_OPEN_COMMAND, CommandDispatch, Commands
from ..constants import NO_SYMBOLS_SENTINEL, RETRY_CEILING, RETRY_DELAY_MS
from ..locators import QuickOpenLocators
from ..retry import retry_until_ready
from ..waits import ElementWaits
from .editor import Editors

GOTO_SYMBOL_COMMAND = "workbench.action.gotoSymbol"


class QuickOpen:
    """
    Quick open widget: file picker, command palette and symbol outline.

    Usage:
        await quick_open.open_file("app.js")
        await quick_open.run_command("View: Toggle Integrated Terminal")
        first_symbol = await quick_open.open_quick_outline()
    """

    def __init__(
        self,
        waits: ElementWaits,
        dispatch: CommandDispatch,
        commands: Commands,
        editors: Editors,
        locators: QuickOpenLocators,
        *,
        retry_ceiling: int = RETRY_CEILING,
        retry_delay_ms: int = RETRY_DELAY_MS,
    ) -> None:
        self.waits = waits
        self.dispatch = dispatch
        self.commands = commands
        self.editors = editors
        self.locators = locators
        self.retry_ceiling = retry_ceiling
        self.retry_delay_ms = retry_delay_ms

    async def open_quick_open(self, value: str = "") -> None:
        await self.commands.run_command(QUICK_OPEN_COMMAND)
        await self.wait_for_quick_open_opened()
        if value:
            await self.dispatch.set_value(self.locators.input, value)

    async def close_quick_open(self) -> None:
        await self.commands.run_command(CLOSE_QUICK_OPEN_COMMAND)
        await self.wait_for_quick_open_closed()

    async def open_file(self, filename: str) -> None:
        await self.open_quick_open(filename)
        await self.wait_for_quick_open_elements(lambda names: filename in names)
        await self.dispatch.send_keys(["Enter"])
        await self.editors.wait_for_active_tab(filename)
        await self.editors.wait_for_editor_focus(filename)

    async def wait_for_quick_open_opened(self) -> None:
        await self.waits.wait_for_active_element(self.locators.input)

    async def wait_for_quick_open_closed(self) -> None:
        await self.waits.wait_for_element(self.locators.hidden)

    async def submit(self, text: str) -> None:
        await self.dispatch.set_value(self.locators.input, text)
        await self.dispatch.send_keys(["Enter"])
        await self.wait_for_quick_open_closed()

    async def select_quick_open_element(self, index: int) -> None:
        await self.wait_for_quick_open_opened()
        await self.dispatch.send_keys(["ArrowDown"] * index + ["Enter"])
        await self.wait_for_quick_open_closed()

    async def wait_for_quick_open_elements(
        self, accept: Callable[[list[str]], bool]
    ) -> list[str]:
        return await self.waits.wait_for_elements(self.locators.entry_label, accept)

    async def run_command(self, command: str) -> None:
        """Run a command by its palette label."""
        await self.open_quick_open(f"{self.locators.command_prefix}{command}")
        # The best match gets focus once the palette has filtered.
        await self.waits.wait_for_text_content(self.locators.focused_entry, command)
        await self.waits.wait_and_click(self.locators.focused_entry)

    async def open_quick_outline(self) -> str:
        """
        Open the symbol outline of the active editor and return its first entry.

        Right after a file opens, the outline can show the "no symbols"
        placeholder because the symbol provider has not answered yet. The
        whole open is retried (closing the widget in between) until a real
        entry shows up.
        """

        async def attempt() -> str:
            await self.commands.run_command(GOTO_SYMBOL_COMMAND)
            return await self.waits.wait_for_text(self.locators.outline_first_label)

        return await retry_until_ready(
            attempt,
            sentinel=NO_SYMBOLS_SENTINEL,
            reset=self.close_quick_open,
            max_attempts=self.retry_ceiling,
            delay_ms=self.retry_delay_ms,
            label="quick outline",
            sleep=self.waits.sleep,
        )
