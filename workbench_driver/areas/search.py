from __future__ import annotations

from ..commands import CommandDispatch, Commands
from ..locators import SearchLocators
from ..waits import ElementWaits

SEARCH_VIEW_COMMAND = "workbench.view.search"


class Search:
    """Search viewlet: find, include filters, per-file remove and replace."""

    def __init__(
        self,
        waits: ElementWaits,
        dispatch: CommandDispatch,
        commands: Commands,
        locators: SearchLocators,
    ) -> None:
        self.waits = waits
        self.dispatch = dispatch
        self.commands = commands
        self.locators = locators

    async def open_search_viewlet(self) -> None:
        await self.commands.run_command(SEARCH_VIEW_COMMAND)
        await self.waits.wait_for_active_element(self.locators.input)

    async def search_for(self, text: str) -> None:
        await self._focus(self.locators.input)
        await self.dispatch.set_value(self.locators.input, text)
        await self.submit_search()

    async def submit_search(self) -> None:
        await self._focus(self.locators.input)
        await self.dispatch.send_keys(["Enter"])
        await self.waits.wait_for_element(self.locators.messages_visible)

    async def set_files_to_include_text(self, text: str) -> None:
        await self._focus(self.locators.include_input)
        await self.dispatch.set_value(self.locators.include_input, text or "")

    async def show_query_details(self) -> None:
        if not await self.are_details_visible():
            await self.waits.wait_and_click(self.locators.show_details)

    async def hide_query_details(self) -> None:
        if await self.are_details_visible():
            await self.waits.wait_and_click(self.locators.hide_details)

    async def are_details_visible(self) -> bool:
        return await self.waits.does_element_exist(self.locators.details_visible)

    async def remove_file_match(self, index: int) -> None:
        """
        Remove the ``index``-th (1-based) file match and wait for it to go.

        Removal is detected by the row's label changing from the captured
        baseline: the next match shifts into the same position.
        """
        await self.waits.wait_and_move_to(self.locators.row(self.locators.file_match, index))
        label = self.locators.row(self.locators.file_match_label, index)
        before = await self.waits.wait_for_text(label)
        await self.waits.wait_and_click(self.locators.row(self.locators.file_match_remove, index))
        await self.waits.wait_for_text(label, accept=lambda text: text != before)

    async def expand_replace(self) -> None:
        await self.waits.wait_and_click(self.locators.toggle_replace)

    async def set_replace_text(self, text: str) -> None:
        await self.waits.wait_and_click(self.locators.replace_input)
        await self.waits.wait_for_element(self.locators.replace_input_focused)
        await self.dispatch.set_value(self.locators.replace_input_focused, text)

    async def replace_file_match(self, index: int) -> None:
        await self.waits.wait_and_move_to(self.locators.row(self.locators.file_match, index))
        await self.waits.wait_and_click(self.locators.row(self.locators.file_match_replace, index))

    async def wait_for_result_text(self, text: str) -> str:
        return await self.waits.wait_for_text(self.locators.result_message, text)

    async def _focus(self, selector: str) -> None:
        await self.waits.wait_and_click(selector)
        await self.waits.wait_for_active_element(selector)
