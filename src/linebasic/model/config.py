"""Interpreter configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field


class InterpreterConfig(BaseModel):
    """Tunable constants of an interpreter instance.

    The defaults reproduce the classic machine: 64K of PEEK/POKE memory,
    14-column PRINT zones and AUTO numbering from 10 in steps of 10.
    """

    memory_size: int = Field(65536, gt=0)
    tab_width: int = Field(14, gt=0)
    auto_start: int = Field(10, gt=0)
    auto_increment: int = Field(10, gt=0)
    ready_prompt: str = "Ready"
    rnd_seed: int | None = None
