"""
Locator configuration: logical UI region name -> CSS selector.

Page objects never hard-code selectors; they receive a ``WorkbenchLocators``
at construction so the binding to a given workbench build's DOM can be
swapped (or faked in tests) without touching the polling logic.

Parametric locators are ``str.format`` templates (``{line}``, ``{index}``,
``{filename}``).

Override a subset from JSON:
    {
      "debug": {"start": ".codicon-debug-start"},
      "quick_open": {"widget": "div.quick-input-widget"}
    }
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

_DEBUG_VIEWLET = 'div[id="workbench.view.debug"]'
_SEARCH_VIEWLET = 'div[id="workbench.view.search"] .search-view'
_QUICK_OPEN = 'div.monaco-quick-open-widget[aria-hidden="false"]'
_QUICK_PICKER_ROWS = 'div[aria-label="Quick Picker"] .monaco-tree-rows.show-twisties'
_SEARCH_ROW = _SEARCH_VIEWLET + " .results .monaco-tree-rows>:nth-child({index}) .filematch"


class _Locators(BaseModel):
    # Reject misspelled overrides instead of silently keeping the default.
    model_config = {"extra": "forbid"}


class DebugLocators(_Locators):
    viewlet: str = _DEBUG_VIEWLET
    view_content: str = f"{_DEBUG_VIEWLET} .debug-view-content"
    configure: str = 'div[id="workbench.parts.sidebar"] .actions-container .configure'
    start: str = '.icon[title="Start Debugging"]'
    stop: str = ".debug-actions-widget .debug-action.stop"
    step_over: str = ".debug-actions-widget .debug-action.step-over"
    step_in: str = ".debug-actions-widget .debug-action.step-into"
    step_out: str = ".debug-actions-widget .debug-action.step-out"
    continue_: str = ".debug-actions-widget .debug-action.continue"
    pause: str = ".debug-actions-widget .debug-action.pause"
    glyph_row: str = ".margin-view-overlays>:nth-child({line})"
    breakpoint_glyph: str = ".debug-breakpoint"
    status_bar_debugging: str = ".statusbar.debugging"
    status_bar_not_debugging: str = ".statusbar:not(.debugging)"
    toolbar_hidden: str = ".debug-actions-widget.monaco-builder-hidden"
    stack_frame: str = f"{_DEBUG_VIEWLET} .monaco-tree-row .stack-frame"
    stack_frame_name: str = ".file-name"
    stack_frame_line: str = ".line-number"
    stack_frame_file: str = '{stack_frame} .file[title$="{filename}"]'
    variable: str = f"{_DEBUG_VIEWLET} .debug-variables .monaco-tree-row .expression"
    console_output: str = ".repl .output.expression"
    console_output_value: str = ".value"
    console_result: str = ".repl .input-output-pair .output.expression .value"
    console_input: str = ".repl-input-wrapper .monaco-editor textarea"
    console_input_uri: str = "debug:input"
    focus_console_command: str = "Debug: Focus Debug Console"
    launch_config_file: str = "launch.json"

    def glyph_row_at(self, line: int) -> str:
        return self.glyph_row.format(line=line)

    def stack_frame_for(self, filename: str) -> str:
        return self.stack_frame_file.format(stack_frame=self.stack_frame, filename=filename)


class QuickOpenLocators(_Locators):
    hidden: str = 'div.monaco-quick-open-widget[aria-hidden="true"]'
    widget: str = _QUICK_OPEN
    input: str = f"{_QUICK_OPEN} .quick-open-input input"
    focused_entry: str = (
        f"{_QUICK_OPEN} .quick-open-tree .monaco-tree-row.focused .monaco-highlighted-label"
    )
    entry: str = f"{_QUICK_PICKER_ROWS} .monaco-tree-row .quick-open-entry"
    entry_label: str = f"{_QUICK_PICKER_ROWS} .monaco-tree-row .quick-open-entry .label-name"
    outline_first_label: str = (
        f"{_QUICK_PICKER_ROWS} div.monaco-tree-row .quick-open-entry .monaco-icon-label "
        ".label-name .monaco-highlighted-label span"
    )
    command_prefix: str = "> "


class SearchLocators(_Locators):
    viewlet: str = _SEARCH_VIEWLET
    input: str = f"{_SEARCH_VIEWLET} .search-widget .search-container .monaco-inputbox input"
    include_input: str = (
        f"{_SEARCH_VIEWLET} .query-details .monaco-inputbox "
        'input[aria-label="Search Include/Exclude Patterns"]'
    )
    messages_visible: str = f'{_SEARCH_VIEWLET} .messages[aria-hidden="false"]'
    result_message: str = f'{_SEARCH_VIEWLET} .messages[aria-hidden="false"] .message>p'
    details_visible: str = f"{_SEARCH_VIEWLET} .query-details.more"
    show_details: str = f"{_SEARCH_VIEWLET} .query-details .more"
    hide_details: str = f"{_SEARCH_VIEWLET} .query-details.more .more"
    file_match: str = _SEARCH_ROW
    file_match_label: str = _SEARCH_ROW + " a.label-name"
    file_match_remove: str = _SEARCH_ROW + " .action-label.icon.action-remove"
    file_match_replace: str = _SEARCH_ROW + " .action-label.icon.action-replace-all"
    toggle_replace: str = (
        f"{_SEARCH_VIEWLET} .search-widget .monaco-button.toggle-replace-button.collapse"
    )
    replace_input: str = (
        f"{_SEARCH_VIEWLET} .search-widget .replace-container .monaco-inputbox "
        'input[title="Replace"]'
    )
    replace_input_focused: str = (
        f"{_SEARCH_VIEWLET} .search-widget .replace-container "
        '.monaco-inputbox.synthetic-focus input[title="Replace"]'
    )

    def row(self, template: str, index: int) -> str:
        return template.format(index=index)


class EditorLocators(_Locators):
    editor: str = '.monaco-editor[data-uri$="{filename}"]'
    view_lines: str = '.monaco-editor[data-uri$="{filename}"] .view-lines'
    focused_textarea: str = '.editor-container .monaco-editor[data-uri$="{filename}"] textarea'
    tab: str = '.tabs-container div.tab[aria-label="{filename}, tab"]'
    active_tab: str = (
        '.tabs-container div.tab.active[aria-selected="true"][aria-label="{filename}, tab"]'
    )

    def for_file(self, template: str, filename: str) -> str:
        return template.format(filename=filename)


class WorkbenchLocators(BaseModel):
    """All selectors the page objects use, grouped by workbench area."""

    debug: DebugLocators = Field(default_factory=DebugLocators)
    quick_open: QuickOpenLocators = Field(default_factory=QuickOpenLocators)
    search: SearchLocators = Field(default_factory=SearchLocators)
    editor: EditorLocators = Field(default_factory=EditorLocators)

    @classmethod
    def with_overrides(cls, overrides: dict[str, Any]) -> WorkbenchLocators:
        """Defaults with the given per-area fields replaced; unknown areas raise."""
        base = cls().model_dump()
        for area, fields in overrides.items():
            if area not in base:
                raise ValueError(f"Unknown locator area: {area!r}")
            base[area].update(fields)
        return cls.model_validate(base)

    @classmethod
    def from_file(cls, path: str | Path) -> WorkbenchLocators:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Locator file must contain a JSON object: {path}")
        return cls.with_overrides(data)
