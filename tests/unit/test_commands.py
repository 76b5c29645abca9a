from __future__ import annotations

import json
from unittest.mock import AsyncMock

import pytest

from workbench_driver.commands import (
    QUICK_OPEN_COMMAND,
    CommandDispatch,
    Commands,
    chord_keys,
    load_keybindings,
    transliterate,
)


def test_transliterate_modifiers_and_function_keys() -> None:
    assert transliterate("ctrl") == "Control"
    assert transliterate("Shift") == "Shift"
    assert transliterate("cmd") == "Meta"
    assert transliterate("f5") == "F5"
    assert transliterate("P") == "p"
    assert transliterate("escape") == "Escape"


def test_chord_keys_releases_modifiers_after_each_chord() -> None:
    assert chord_keys("ctrl+shift+p") == ["Control", "Shift", "p", "NULL"]
    assert chord_keys("ctrl+k ctrl+s") == ["Control", "k", "NULL", "Control", "s", "NULL"]


def test_load_keybindings_last_entry_wins(tmp_path) -> None:
    path = tmp_path / "keybindings.json"
    path.write_text(
        json.dumps(
            [
                {"key": "ctrl+p", "command": "workbench.action.quickOpen"},
                {"key": "f5", "command": "workbench.action.debug.start"},
                {"key": "ctrl+e", "command": "workbench.action.quickOpen"},
                {"key": "", "command": "ignored"},
            ]
        )
    )

    bindings = load_keybindings(path)

    assert bindings == {
        "workbench.action.quickOpen": "ctrl+e",
        "workbench.action.debug.start": "f5",
    }


def test_load_keybindings_rejects_non_list(tmp_path) -> None:
    path = tmp_path / "keybindings.json"
    path.write_text(json.dumps({"key": "ctrl+p"}))

    with pytest.raises(ValueError):
        load_keybindings(path)


@pytest.mark.asyncio
async def test_send_keys_flushes_every_key(client) -> None:
    await CommandDispatch(client).send_keys(["ArrowDown", "ArrowDown", "Enter"])

    assert client.keys == ["ArrowDown", "NULL", "ArrowDown", "NULL", "Enter", "NULL"]


@pytest.mark.asyncio
async def test_send_keys_does_not_double_flush(client) -> None:
    await CommandDispatch(client).send_keys(["Enter", "NULL"])

    assert client.keys == ["Enter", "NULL"]


@pytest.mark.asyncio
async def test_set_value_passes_through(client) -> None:
    await CommandDispatch(client).set_value(".quick-open-input input", "app.js")

    assert client.calls == [("set_value", ".quick-open-input input", "app.js")]


@pytest.mark.asyncio
async def test_run_command_prefers_keybinding(client) -> None:
    palette = AsyncMock()
    commands = Commands(
        CommandDispatch(client),
        {"workbench.view.debug": "ctrl+shift+d"},
        palette=palette,
    )

    await commands.run_command("workbench.view.debug")

    assert client.keys == ["Control", "Shift", "d", "NULL"]
    palette.assert_not_awaited()


@pytest.mark.asyncio
async def test_run_command_falls_back_to_palette(client) -> None:
    palette = AsyncMock()
    commands = Commands(CommandDispatch(client), {}, palette=palette)

    await commands.run_command("Debug: Focus Debug Console")

    palette.assert_awaited_once_with("Debug: Focus Debug Console")
    assert client.keys == []


@pytest.mark.asyncio
async def test_run_command_without_route_raises(client) -> None:
    with pytest.raises(LookupError):
        await Commands(CommandDispatch(client)).run_command("workbench.view.search")


@pytest.mark.asyncio
async def test_quick_open_itself_never_goes_through_palette(client) -> None:
    palette = AsyncMock()
    commands = Commands(CommandDispatch(client), {}, palette=palette)

    with pytest.raises(LookupError):
        await commands.run_command(QUICK_OPEN_COMMAND)
    palette.assert_not_awaited()
