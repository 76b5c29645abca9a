from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from workbench_driver.backends import AutomationClient
from workbench_driver.backends.playwright_backend import (
    PlaywrightClient,
    is_playwright_transient_error,
)
from workbench_driver.config import DriverConfig
from workbench_driver.exceptions import ProbeTransientError
from workbench_driver.poller import WaitPolicy
from workbench_driver.workbench import Workbench


def make_page() -> MagicMock:
    page = MagicMock()
    page.keyboard.down = AsyncMock()
    page.keyboard.up = AsyncMock()
    page.keyboard.press = AsyncMock()
    page.evaluate = AsyncMock(return_value=True)
    locator = MagicMock()
    locator.count = AsyncMock(return_value=0)
    locator.all_text_contents = AsyncMock(return_value=[])
    locator.evaluate_all = AsyncMock(return_value=[])
    locator.first.click = AsyncMock()
    locator.first.fill = AsyncMock()
    locator.first.hover = AsyncMock()
    page.locator.return_value = locator
    return page


# Workbench wiring


def test_page_objects_share_one_wait_facade(client) -> None:
    wb = Workbench(client)

    assert wb.quick_open.waits is wb.waits
    assert wb.search.waits is wb.waits
    assert wb.debug.waits is wb.waits
    assert wb.commands.palette == wb.quick_open.run_command


@pytest.mark.asyncio
async def test_unbound_command_goes_through_palette(client, clock) -> None:
    config = DriverConfig(policy=WaitPolicy(timeout_ms=1_000, interval_ms=100))
    wb = Workbench(client, config, clock=clock, sleep=clock.sleep)
    q = config.locators.quick_open
    client.active.add(q.input)
    client.texts[q.focused_entry] = ["View: Toggle Terminal"]
    client.show(q.focused_entry)

    await wb.run_command("View: Toggle Terminal")

    assert client.keys == ["Control", "p", "NULL"]
    assert ("set_value", q.input, "> View: Toggle Terminal") in client.calls
    assert client.clicked() == [q.focused_entry]


@pytest.mark.asyncio
async def test_custom_keybinding_bypasses_palette(client, clock) -> None:
    config = DriverConfig()
    config.keybindings["workbench.action.debug.start"] = "f5"
    wb = Workbench(client, config, clock=clock, sleep=clock.sleep)

    await wb.run_command("workbench.action.debug.start")

    assert client.keys == ["F5", "NULL"]


def test_from_playwright_page() -> None:
    wb = Workbench.from_playwright_page(make_page(), action_timeout_ms=500)

    assert isinstance(wb.client, PlaywrightClient)
    assert wb.client.action_timeout_ms == 500
    assert isinstance(wb.client, AutomationClient)


# PlaywrightClient


@pytest.mark.asyncio
async def test_send_keys_holds_modifiers_until_null() -> None:
    page = make_page()

    await PlaywrightClient(page).send_keys(["Control", "Shift", "p", "NULL", "Esc", "NULL"])

    assert [c.args[0] for c in page.keyboard.down.await_args_list] == ["Control", "Shift"]
    assert [c.args[0] for c in page.keyboard.up.await_args_list] == ["Shift", "Control"]
    assert [c.args[0] for c in page.keyboard.press.await_args_list] == ["p", "Escape"]


@pytest.mark.asyncio
async def test_send_keys_releases_modifiers_left_held() -> None:
    page = make_page()

    await PlaywrightClient(page).send_keys(["Control", "s"])

    page.keyboard.up.assert_awaited_once_with("Control")


@pytest.mark.asyncio
async def test_query_text_single_match_is_a_string() -> None:
    page = make_page()
    page.locator.return_value.all_text_contents = AsyncMock(return_value=["Port: 9230"])
    client = PlaywrightClient(page)

    assert await client.query_text(".value") == "Port: 9230"

    page.locator.return_value.all_text_contents = AsyncMock(return_value=["a", "b"])
    assert await client.query_text(".value") == ["a", "b"]


@pytest.mark.asyncio
async def test_click_with_offset_uses_position() -> None:
    page = make_page()

    await PlaywrightClient(page, action_timeout_ms=100).click(".row", 5, 5)

    page.locator.return_value.first.click.assert_awaited_once_with(
        timeout=100, position={"x": 5.0, "y": 5.0}
    )


@pytest.mark.asyncio
async def test_click_timeout_becomes_transient() -> None:
    page = make_page()
    page.locator.return_value.first.click = AsyncMock(
        side_effect=PlaywrightTimeoutError("Timeout 100ms exceeded.")
    )

    with pytest.raises(ProbeTransientError):
        await PlaywrightClient(page).click(".debug-action.stop")


@pytest.mark.asyncio
async def test_active_element_matches_passes_selector() -> None:
    page = make_page()

    assert await PlaywrightClient(page).active_element_matches(".repl textarea") is True
    assert page.evaluate.await_args.args[1] == ".repl textarea"


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (PlaywrightTimeoutError("Timeout 30000ms exceeded."), True),
        (PlaywrightError("Execution context was destroyed"), True),
        (PlaywrightError("Element is not attached to the DOM"), True),
        (PlaywrightError("Unknown engine \"xpath2\""), False),
        (ValueError("boom"), False),
    ],
)
def test_transient_error_classification(error, expected) -> None:
    assert is_playwright_transient_error(error) is expected
    assert PlaywrightClient.is_transient_error(error) is expected
