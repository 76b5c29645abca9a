from __future__ import annotations

import pytest

from conftest import Seq
from workbench_driver.config import DriverConfig
from workbench_driver.constants import NO_SYMBOLS_SENTINEL
from workbench_driver.exceptions import RetryExhaustedError, WaitTimeoutError
from workbench_driver.poller import WaitPolicy
from workbench_driver.workbench import Workbench


def make_workbench(client, clock, **config) -> Workbench:
    config.setdefault("policy", WaitPolicy(timeout_ms=1_000, interval_ms=100))
    return Workbench(client, DriverConfig(**config), clock=clock, sleep=clock.sleep)


@pytest.mark.asyncio
async def test_open_quick_open_with_value(client, clock) -> None:
    wb = make_workbench(client, clock)
    q = wb.config.locators.quick_open
    client.active.add(q.input)

    await wb.quick_open.open_quick_open("app.js")

    assert client.keys == ["Control", "p", "NULL"]
    assert client.calls[-1] == ("set_value", q.input, "app.js")


@pytest.mark.asyncio
async def test_open_quick_open_times_out_if_input_never_focused(client, clock) -> None:
    wb = make_workbench(client, clock)

    with pytest.raises(WaitTimeoutError) as exc_info:
        await wb.quick_open.open_quick_open()

    assert exc_info.value.label == f"focus on {wb.config.locators.quick_open.input}"


@pytest.mark.asyncio
async def test_open_file(client, clock) -> None:
    wb = make_workbench(client, clock)
    q = wb.config.locators.quick_open
    e = wb.config.locators.editor
    client.active.add(q.input)
    client.texts[q.entry_label] = Seq([], ["app.js", "app.test.js"])
    client.show(e.for_file(e.active_tab, "app.js"))
    client.active.add(e.for_file(e.focused_textarea, "app.js"))

    await wb.quick_open.open_file("app.js")

    assert client.keys == ["Control", "p", "NULL", "Enter", "NULL"]


@pytest.mark.asyncio
async def test_select_quick_open_element(client, clock) -> None:
    wb = make_workbench(client, clock)
    q = wb.config.locators.quick_open
    client.active.add(q.input)
    client.show(q.hidden)

    await wb.quick_open.select_quick_open_element(2)

    assert client.keys == ["ArrowDown", "NULL", "ArrowDown", "NULL", "Enter", "NULL"]


@pytest.mark.asyncio
async def test_submit_waits_for_widget_to_close(client, clock) -> None:
    wb = make_workbench(client, clock)
    q = wb.config.locators.quick_open
    client.counts[q.hidden] = Seq(0, 1)

    await wb.quick_open.submit(":12")

    assert client.calls[0] == ("set_value", q.input, ":12")
    assert client.keys == ["Enter", "NULL"]


@pytest.mark.asyncio
async def test_run_command_through_palette(client, clock) -> None:
    wb = make_workbench(client, clock)
    q = wb.config.locators.quick_open
    client.active.add(q.input)
    client.texts[q.focused_entry] = Seq(["Debug: Start"], ["Debug: Focus Debug Console"])
    client.show(q.focused_entry)

    await wb.quick_open.run_command("Debug: Focus Debug Console")

    assert ("set_value", q.input, "> Debug: Focus Debug Console") in client.calls
    assert client.clicked() == [q.focused_entry]


@pytest.mark.asyncio
async def test_quick_outline_retries_past_no_symbols_placeholder(client, clock) -> None:
    wb = make_workbench(client, clock)
    q = wb.config.locators.quick_open
    client.texts[q.outline_first_label] = Seq(
        NO_SYMBOLS_SENTINEL, NO_SYMBOLS_SENTINEL, "activate"
    )
    client.show(q.hidden)

    first = await wb.quick_open.open_quick_outline()

    assert first == "activate"
    goto_symbol = ["Control", "Shift", "o", "NULL"]
    close = ["Escape", "NULL"]
    assert client.keys == goto_symbol + close + goto_symbol + close + goto_symbol
    assert clock.sleeps == [0.25, 0.25]


@pytest.mark.asyncio
async def test_quick_outline_gives_up_at_ceiling(client, clock) -> None:
    wb = make_workbench(client, clock, retry_ceiling=3, retry_delay_ms=100)
    q = wb.config.locators.quick_open
    client.texts[q.outline_first_label] = NO_SYMBOLS_SENTINEL
    client.show(q.hidden)

    with pytest.raises(RetryExhaustedError) as exc_info:
        await wb.quick_open.open_quick_outline()

    assert exc_info.value.session.attempt == 3
    assert exc_info.value.label == "quick outline"
