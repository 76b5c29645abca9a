"""
Page objects for the workbench areas.

Each page object takes its collaborators (waits, dispatch, commands) and its
slice of ``WorkbenchLocators`` at construction; ``Workbench`` wires them.
"""

from .debug import DebugSession, DebugState, parse_port
from .editor import Editor, Editors
from .quickopen import QuickOpen
from .search import Search

__all__ = [
    "DebugSession",
    "DebugState",
    "Editor",
    "Editors",
    "QuickOpen",
    "Search",
    "parse_port",
]
