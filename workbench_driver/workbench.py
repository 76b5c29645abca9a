"""
Workbench: every page object wired over one automation client.

Usage with Playwright (Electron build of the editor):
    from playwright.async_api import async_playwright
    from workbench_driver import DriverConfig, Workbench

    async with async_playwright() as p:
        app = await p._electron.launch(args=[".", "--extensions-dir=/tmp/ext"])
        window = await app.first_window()

        workbench = Workbench.from_playwright_page(window, config=DriverConfig.from_env())
        await workbench.quick_open.open_file("app.js")
        await workbench.debug.set_breakpoint(6)
        port = await workbench.debug.start()

Usage with any other client:
    workbench = Workbench(client=my_client)
"""

from __future__ import annotations

import asyncio
import time
from typing import TYPE_CHECKING, Any

from .areas import DebugSession, Editor, Editors, QuickOpen, Search
from .commands import CommandDispatch, Commands
from .config import DriverConfig
from .poller import Clock, Sleep
from .waits import ElementWaits

if TYPE_CHECKING:
    from playwright.async_api import Page


class Workbench:
    """
    Entry point for scenario code.

    Attributes:
        client: AutomationClient all page objects talk through
        config: DriverConfig (wait policy, locators, keybindings)
        waits: shared ElementWaits, also usable standalone
        dispatch: CommandDispatch
        commands: Commands (keybinding first, palette fallback)
        editor, editors, quick_open, search, debug: page objects
    """

    def __init__(
        self,
        client: Any,
        config: DriverConfig | None = None,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.config = config or DriverConfig()
        locators = self.config.locators

        self.waits = ElementWaits(client, self.config.policy, clock=clock, sleep=sleep)
        self.dispatch = CommandDispatch(client)
        self.commands = Commands(self.dispatch, self.config.keybindings)

        self.editor = Editor(self.waits, locators.editor)
        self.editors = Editors(self.waits, locators.editor)
        self.quick_open = QuickOpen(
            self.waits,
            self.dispatch,
            self.commands,
            self.editors,
            locators.quick_open,
            retry_ceiling=self.config.retry_ceiling,
            retry_delay_ms=self.config.retry_delay_ms,
        )
        # Commands without a keybinding go through the palette.
        self.commands.palette = self.quick_open.run_command

        self.search = Search(self.waits, self.dispatch, self.commands, locators.search)
        self.debug = DebugSession(
            self.waits,
            self.dispatch,
            self.commands,
            self.editors,
            self.editor,
            locators.debug,
        )

    @classmethod
    def from_playwright_page(
        cls,
        page: Page,
        config: DriverConfig | None = None,
        *,
        action_timeout_ms: int = 2_000,
    ) -> Workbench:
        """Create a Workbench driving a Playwright page (or Electron window)."""
        from .backends.playwright_backend import PlaywrightClient

        return cls(PlaywrightClient(page, action_timeout_ms=action_timeout_ms), config=config)

    async def run_command(self, command: str) -> None:
        await self.commands.run_command(command)
