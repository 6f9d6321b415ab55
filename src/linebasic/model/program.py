"""Saved program snapshots.

A snapshot is the unit exchanged with a program store: the ordered
``(line number, statement text)`` pairs of a program.
"""

from __future__ import annotations

from pydantic import BaseModel, PositiveInt, model_validator


class ProgramSnapshot(BaseModel):
    """An ordered list of ``(line, text)`` pairs."""

    lines: list[tuple[PositiveInt, str]] = []

    @model_validator(mode="after")
    def _unique_lines(self):
        seen: set[int] = set()
        for number, _ in self.lines:
            if number in seen:
                raise ValueError(f"duplicate line number {number}")
            seen.add(number)
        return self

    def __len__(self) -> int:
        return len(self.lines)
