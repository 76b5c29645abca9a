"""
Pydantic models for values read back from the workbench.

Every model here is a snapshot: it is re-derived from the live tree on each
query and never assumed valid after the next click or key press.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class StackFrame(BaseModel):
    """One row of the call stack view."""

    name: str = ""
    line_number: int = Field(0, ge=0)

    model_config = {"frozen": True}

    @classmethod
    def from_raw(cls, raw: dict) -> StackFrame:
        """
        Build a frame from the raw texts extracted in the page.

        The line label renders as ``"12:5"`` (line:column); a missing or
        unparseable label yields line 0, a missing name yields ``""``.
        """
        name = raw.get("name") or ""
        line_text = raw.get("line") or ""
        head = str(line_text).split(":", 1)[0].strip()
        try:
            line_number = int(head) if head else 0
        except ValueError:
            line_number = 0
        return cls(name=str(name), line_number=max(line_number, 0))
