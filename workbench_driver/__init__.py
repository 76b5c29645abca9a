"""
workbench-driver: async page objects for driving a code-editor workbench.

Everything is built on one primitive, ``poll_until``: the workbench exposes
only rendered state, so each action is confirmed by polling that state.
"""

from .areas import DebugSession, DebugState, Editor, Editors, QuickOpen, Search, parse_port
from .backends import AutomationClient
from .commands import CommandDispatch, Commands, chord_keys, load_keybindings
from .config import DriverConfig
from .exceptions import (
    DebugSessionStateError,
    ParseFailure,
    ProbeTransientError,
    RetryExhaustedError,
    WaitTimeout,
    WaitTimeoutError,
    WorkbenchDriverError,
)
from .locators import WorkbenchLocators
from .models import StackFrame
from .poller import WaitPolicy, WaitSpec, poll_until
from .retry import RetrySession, retry_until_ready
from .waits import ElementWaits
from .workbench import Workbench

__version__ = "0.1.0"

__all__ = [
    # Core
    "poll_until",
    "WaitPolicy",
    "WaitSpec",
    "ElementWaits",
    "retry_until_ready",
    "RetrySession",
    # Dispatch
    "CommandDispatch",
    "Commands",
    "chord_keys",
    "load_keybindings",
    # Page objects
    "Workbench",
    "DebugSession",
    "DebugState",
    "Editor",
    "Editors",
    "QuickOpen",
    "Search",
    "parse_port",
    # Models / config
    "StackFrame",
    "DriverConfig",
    "WorkbenchLocators",
    "AutomationClient",
    # Errors
    "WorkbenchDriverError",
    "WaitTimeoutError",
    "WaitTimeout",
    "ProbeTransientError",
    "ParseFailure",
    "RetryExhaustedError",
    "DebugSessionStateError",
]
