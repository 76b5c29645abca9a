"""
Command dispatch.

``CommandDispatch`` performs one interaction unit (set a value, send keys) and
makes no claim about the outcome; callers confirm the resulting state with
``ElementWaits``.

``Commands`` runs a workbench command by id: through its keybinding when one
is configured, otherwise through the command palette.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path
from typing import Any

from .constants import NULL_KEY

logger = logging.getLogger(__name__)

QUICK_OPEN_COMMAND = "workbench.action.quickOpen"
CLOSE_QUICK_OPEN_COMMAND = "workbench.action.closeQuickOpen"

# Commands the palette itself depends on; they must have a keybinding.
_PALETTE_COMMANDS = {QUICK_OPEN_COMMAND, CLOSE_QUICK_OPEN_COMMAND}

DEFAULT_KEYBINDINGS = {
    QUICK_OPEN_COMMAND: "ctrl+p",
    CLOSE_QUICK_OPEN_COMMAND: "escape",
    "workbench.action.gotoSymbol": "ctrl+shift+o",
    "workbench.view.debug": "ctrl+shift+d",
    "workbench.view.search": "ctrl+shift+f",
}

# Keybinding tokens -> WebDriver key names.
_KEY_NAMES = {
    "ctrl": "Control",
    "shift": "Shift",
    "alt": "Alt",
    "cmd": "Meta",
    "meta": "Meta",
    "win": "Meta",
    "enter": "Enter",
    "escape": "Escape",
    "tab": "Tab",
    "space": " ",
    "backspace": "Backspace",
    "delete": "Delete",
    "up": "ArrowUp",
    "down": "ArrowDown",
    "left": "ArrowLeft",
    "right": "ArrowRight",
    "pageup": "PageUp",
    "pagedown": "PageDown",
    "home": "Home",
    "end": "End",
}


def transliterate(token: str) -> str:
    """Map one keybinding token (``ctrl``, ``f5``, ``p``) to a WebDriver key name."""
    lowered = token.strip().lower()
    if lowered in _KEY_NAMES:
        return _KEY_NAMES[lowered]
    if len(lowered) > 1 and lowered[0] == "f" and lowered[1:].isdigit():
        return lowered.upper()
    return lowered


def chord_keys(binding: str) -> list[str]:
    """
    Expand a keybinding into a key sequence.

    ``"ctrl+k ctrl+s"`` is two chords; each chord's keys are followed by
    ``NULL`` so held modifiers are released before the next chord.
    """
    keys: list[str] = []
    for chord in binding.split():
        keys.extend(transliterate(part) for part in chord.split("+") if part)
        keys.append(NULL_KEY)
    return keys


def load_keybindings(path: str | Path) -> dict[str, str]:
    """
    Read a keybindings JSON file (list of ``{"key": ..., "command": ...}``).

    Later entries win, like the workbench's own resolution order.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError(f"Keybindings file must contain a JSON list: {path}")
    bindings: dict[str, str] = {}
    for entry in data:
        if isinstance(entry, dict) and entry.get("key") and entry.get("command"):
            bindings[str(entry["command"])] = str(entry["key"])
    return bindings


class CommandDispatch:
    """Low-level input to the workbench, with key flushing."""

    def __init__(self, client: Any) -> None:
        self.client = client

    async def set_value(self, selector: str, text: str) -> None:
        await self.client.set_value(selector, text)

    async def send_keys(self, keys: Sequence[str]) -> None:
        """
        Send keys one by one, each followed by ``NULL``.

        The workbench batches input events; the neutral key forces each press
        to be flushed before the next one is sent.
        """
        sequence: list[str] = []
        for key in keys:
            if key == NULL_KEY:
                continue
            sequence.extend((key, NULL_KEY))
        await self.client.send_keys(sequence)

    async def send_chords(self, binding: str) -> None:
        """Send a keybinding string (already NULL-separated per chord)."""
        await self.client.send_keys(chord_keys(binding))


class Commands:
    """
    Run workbench commands by id.

    Attributes:
        dispatch: CommandDispatch used to send keys
        keybindings: command id -> keybinding string
        palette: coroutine running a command through the command palette;
                 wired by ``Workbench`` once quick open exists
    """

    def __init__(
        self,
        dispatch: CommandDispatch,
        keybindings: dict[str, str] | None = None,
        palette: Callable[[str], Awaitable[None]] | None = None,
    ) -> None:
        self.dispatch = dispatch
        self.keybindings = dict(keybindings or {})
        self.palette = palette

    async def run_command(self, command: str) -> None:
        binding = self.keybindings.get(command)
        if binding:
            logger.debug(f"run_command({command!r}) via keybinding {binding!r}")
            await self.dispatch.send_chords(binding)
            return

        if self.palette is None or command in _PALETTE_COMMANDS:
            raise LookupError(f"No keybinding for {command!r} and it cannot go through the palette")
        logger.debug(f"run_command({command!r}) via command palette")
        await self.palette(command)
