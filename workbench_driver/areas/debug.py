"""
Debug session controller.

Drives the workbench debugger and observes the debuggee only through what the
workbench renders: there is no handle on the debug adapter process, so
"paused" means "the call stack view has frames" and "stopped" means "the debug
toolbar is hidden and the status bar left debugging mode".

Usage:
    debug = workbench.debug
    await debug.open_debug_viewlet()
    await debug.set_breakpoint(6)
    port = await debug.start()
    frame = await debug.wait_for_stack_frame(lambda f: f.name == "index.js", "index.js")
    await debug.step_over()
    assert await debug.evaluate("1+1", lambda line: line == "2") == "2"
    await debug.continue_()
    await debug.stop()
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Callable
from enum import Enum

from ..commands import CommandDispatch, Commands
from ..constants import DEBUG_PORT_PREFIX, DEFAULT_DEBUG_PORT
from ..exceptions import DebugSessionStateError, ParseFailure
from ..locators import DebugLocators
from ..models import StackFrame
from ..waits import ElementWaits
from .editor import Editor, Editors

logger = logging.getLogger(__name__)

DEBUG_VIEW_COMMAND = "workbench.view.debug"

# Click inside the gutter row, clear of its border.
BREAKPOINT_CLICK_OFFSET = (5, 5)

_STACK_FRAMES_JS = """
(elements) => elements.map(element => {{
  const name = element.querySelector({name});
  const line = element.querySelector({line});
  return {{
    name: name ? name.textContent : null,
    line: line ? line.textContent : null,
  }};
}})
""".strip()

_CONSOLE_OUTPUT_JS = """
(elements) => elements.map(element => {{
  const value = element.querySelector({value});
  return value ? value.textContent : null;
}})
""".strip()

_PORT_RE = re.compile(r"\s*(\d+)")


class DebugState(str, Enum):
    IDLE = "idle"
    CONFIGURING = "configuring"
    RUNNING = "running"
    PAUSED = "paused"
    STEPPING = "stepping"
    EVALUATING = "evaluating"
    STOPPED = "stopped"


_ACTIVE_STATES = {
    DebugState.RUNNING,
    DebugState.PAUSED,
    DebugState.STEPPING,
    DebugState.EVALUATING,
}


def parse_port(line: str, prefix: str = DEBUG_PORT_PREFIX) -> int:
    """
    Parse the port announced in a console line such as ``"Port: 9230"``.

    Raises:
        ParseFailure: the prefix is missing or not followed by digits.
    """
    idx = line.find(prefix)
    if idx < 0:
        raise ParseFailure(f"{prefix!r} not found in console line", text=line)
    match = _PORT_RE.match(line[idx + len(prefix) :])
    if match is None:
        raise ParseFailure(f"No port number after {prefix!r}", text=line)
    return int(match.group(1))


class DebugSession:
    """
    Debug viewlet and debug toolbar.

    The session tracks a coarse state (``DebugState``) so control actions are
    refused while no session is active. Every read (stack frames, console
    output) is re-derived from the live tree; nothing is cached across actions.

    Attributes:
        state: current DebugState
        port: port parsed by the last successful ``start()``, else None
    """

    def __init__(
        self,
        waits: ElementWaits,
        dispatch: CommandDispatch,
        commands: Commands,
        editors: Editors,
        editor: Editor,
        locators: DebugLocators,
        *,
        port_prefix: str = DEBUG_PORT_PREFIX,
        default_port: int = DEFAULT_DEBUG_PORT,
    ) -> None:
        self.waits = waits
        self.dispatch = dispatch
        self.commands = commands
        self.editors = editors
        self.editor = editor
        self.locators = locators
        self.port_prefix = port_prefix
        self.default_port = default_port

        self.state = DebugState.IDLE
        self.port: int | None = None

        self._stack_frames_js = _STACK_FRAMES_JS.format(
            name=json.dumps(locators.stack_frame_name),
            line=json.dumps(locators.stack_frame_line),
        )
        self._console_output_js = _CONSOLE_OUTPUT_JS.format(
            value=json.dumps(locators.console_output_value),
        )

    @property
    def is_active(self) -> bool:
        return self.state in _ACTIVE_STATES

    def _transition(self, state: DebugState) -> None:
        if state is not self.state:
            logger.debug(f"debug session: {self.state.value} -> {state.value}")
            self.state = state

    def _require_active(self, action: str) -> None:
        if not self.is_active:
            raise DebugSessionStateError(self.state.value, action)

    def _require_inactive(self, action: str) -> None:
        if self.is_active:
            raise DebugSessionStateError(self.state.value, action)

    # Viewlet / configuration

    async def open_debug_viewlet(self) -> None:
        await self.commands.run_command(DEBUG_VIEW_COMMAND)
        await self.waits.wait_for_element(self.locators.view_content)

    async def configure(self) -> None:
        """Open the launch configuration from the debug viewlet's gear action."""
        self._require_inactive("configure")
        await self.waits.wait_and_click(self.locators.configure)
        self._transition(DebugState.CONFIGURING)
        await self.editors.wait_for_editor_focus(self.locators.launch_config_file)

    async def set_breakpoint(self, line: int, *, verify_line: bool = True) -> None:
        """
        Toggle a breakpoint by clicking the gutter at ``line`` (1-based).

        With ``verify_line`` the breakpoint glyph must appear inside that same
        gutter row; without it any breakpoint glyph in the editor is accepted.
        """
        row = self.locators.glyph_row_at(line)
        await self.waits.wait_for_element(row)
        await self.waits.wait_and_click(row, *BREAKPOINT_CLICK_OFFSET)
        glyph = self.locators.breakpoint_glyph
        if verify_line:
            glyph = f"{row} {glyph}"
        await self.waits.wait_for_element(glyph)

    # Session lifecycle

    async def start(self) -> int:
        """
        Start debugging and return the debuggee's inspector port.

        Waits for the debug toolbar and the debugging status bar, then polls
        the debug console until a line announcing the port appears. A line
        whose port cannot be parsed yields ``default_port`` with a warning.

        The session only counts as running once the debug toolbar shows; if
        it never does, the state is unchanged and ``start()`` can be retried.

        Raises:
            WaitTimeoutError: the toolbar, status bar or port line never appeared.
        """
        self._require_inactive("start debugging")
        await self.waits.wait_and_click(self.locators.start)
        await self.waits.wait_for_element(self.locators.pause)
        self._transition(DebugState.RUNNING)
        await self.waits.wait_for_element(self.locators.status_bar_debugging)

        prefix = self.port_prefix
        lines = await self.waits.wait_for(
            self.get_console_output,
            lambda output: any(prefix in line for line in output),
            label=f"debug console line containing {prefix!r}",
        )
        port_line = next(line for line in reversed(lines) if prefix in line)
        try:
            port = parse_port(port_line, prefix)
        except ParseFailure as e:
            logger.warning(f"{e} ({e.text!r}); using default port {self.default_port}")
            port = self.default_port

        self.port = port
        logger.info(f"Debug session started (port={port})")
        return port

    async def step_over(self) -> None:
        await self._step("step over", self.locators.step_over)

    async def step_in(self) -> None:
        await self._step("step in", self.locators.step_in)

    async def step_out(self) -> None:
        await self._step("step out", self.locators.step_out)

    async def _step(self, action: str, selector: str) -> None:
        self._require_active(action)
        await self.waits.wait_and_click(selector)
        self._transition(DebugState.STEPPING)

    async def continue_(self) -> None:
        """Resume and wait for the call stack to clear."""
        self._require_active("continue")
        await self.waits.wait_and_click(self.locators.continue_)
        await self.wait_for_stack_frame_length(0)
        self._transition(DebugState.RUNNING)

    async def pause(self) -> None:
        self._require_active("pause")
        await self.waits.wait_and_click(self.locators.pause)
        self._transition(DebugState.PAUSED)

    async def stop(self) -> None:
        """Stop debugging; done once the toolbar hides and the status bar leaves debugging."""
        self._require_active("stop debugging")
        await self.waits.wait_and_click(self.locators.stop)
        await self.waits.wait_for_element(self.locators.toolbar_hidden)
        await self.waits.wait_for_element(self.locators.status_bar_not_debugging)
        self._transition(DebugState.STOPPED)
        logger.info("Debug session stopped")

    # Call stack

    async def get_stack_frames(self) -> list[StackFrame]:
        raw = await self.waits.client.evaluate_in_page(self.locators.stack_frame, self._stack_frames_js)
        if not isinstance(raw, list):
            return []
        return [StackFrame.from_raw(item) for item in raw if isinstance(item, dict)]

    async def wait_for_stack_frame(
        self,
        predicate: Callable[[StackFrame], bool],
        message: str = "",
    ) -> StackFrame:
        """
        Wait for a call stack frame matching ``predicate``.

        The full frame list is re-read on every poll. Finding a frame means
        the debuggee is paused.
        """

        async def probe() -> StackFrame | None:
            frames = await self.get_stack_frames()
            return next((frame for frame in frames if predicate(frame)), None)

        frame = await self.waits.wait_for(
            probe,
            lambda found: found is not None,
            label=f"Waiting for Stack Frame: {message}",
        )
        if self.is_active:
            self._transition(DebugState.PAUSED)
        return frame

    async def wait_for_stack_frame_length(self, length: int) -> int:
        return await self.waits.wait_for_element_count(self.locators.stack_frame, length)

    async def focus_stack_frame(self, name: str) -> None:
        await self.waits.wait_and_click(self.locators.stack_frame_for(name))
        await self.editors.wait_for_tab(name)

    async def get_local_variable_count(self) -> int:
        return await self.waits.client.query_element_count(self.locators.variable)

    # Debug console

    async def get_console_output(self) -> list[str]:
        """Current console output lines, oldest first; empty and missing values are dropped."""
        raw = await self.waits.client.evaluate_in_page(
            self.locators.console_output, self._console_output_js
        )
        if not isinstance(raw, list):
            return []
        return [str(value) for value in raw if value]

    async def evaluate(
        self,
        expression: str,
        accept: Callable[[str], bool] | None = None,
    ) -> str:
        """
        Evaluate ``expression`` in the debug console and return the accepted result line.

        The expression is only submitted once the console's editor model
        holds it; submitting earlier can evaluate a partially typed input.

        Args:
            expression: Text to evaluate.
            accept: Test for the newest console line; any non-empty line by default.

        Raises:
            WaitTimeoutError: the console never showed an accepted line.
        """
        self._require_active("evaluate")
        previous = self.state
        self._transition(DebugState.EVALUATING)
        try:
            await self.commands.run_command(self.locators.focus_console_command)
            await self.waits.wait_for_active_element(self.locators.console_input)
            await self.dispatch.set_value(self.locators.console_input, expression)
            await self.editor.wait_for_editor_contents(
                self.locators.console_input_uri, lambda text: expression in text
            )
            await self.dispatch.send_keys(["Enter"])
            await self.waits.wait_for_element(self.locators.console_result)
            return await self.waits.wait_for(
                self._newest_console_line,
                accept,
                label=f"debug console result of {expression!r}",
            )
        finally:
            self._transition(previous)

    async def _newest_console_line(self) -> str:
        output = await self.get_console_output()
        return output[-1] if output else ""
