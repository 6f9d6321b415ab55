"""Interpreter state: the program, variables, stacks and buffers."""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field

from linebasic.model.config import InterpreterConfig
from linebasic.model.program import ProgramSnapshot

from ._arrays import BasicArray
from ._values import Value

# pc value while no program is executing.
HALT = -1


class Program:
    """Statement texts keyed by line number, kept in ascending order."""

    def __init__(self) -> None:
        self._lines: dict[int, str] = {}
        self._order: list[int] = []

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, number: object) -> bool:
        return number in self._lines

    def __getitem__(self, number: int) -> str:
        return self._lines[number]

    def __setitem__(self, number: int, text: str) -> None:
        if number not in self._lines:
            bisect.insort(self._order, number)
        self._lines[number] = text

    def __delitem__(self, number: int) -> None:
        del self._lines[number]
        self._order.remove(number)

    def discard(self, number: int) -> None:
        if number in self._lines:
            del self[number]

    def items(self, start: int | None = None, end: int | None = None) -> list[tuple[int, str]]:
        """``(line, text)`` pairs in ascending order, optionally bounded (inclusive)."""
        lo = 0 if start is None else bisect.bisect_left(self._order, start)
        hi = len(self._order) if end is None else bisect.bisect_right(self._order, end)
        return [(n, self._lines[n]) for n in self._order[lo:hi]]

    def successor(self, number: int) -> int | None:
        """Smallest line strictly greater than *number*."""
        i = bisect.bisect_right(self._order, number)
        if i < len(self._order):
            return self._order[i]
        return None

    def first(self) -> int | None:
        return self._order[0] if self._order else None

    def clear(self) -> None:
        self._lines.clear()
        self._order.clear()

    def snapshot(self) -> ProgramSnapshot:
        return ProgramSnapshot(lines=self.items())

    def replace(self, snapshot: ProgramSnapshot) -> None:
        self.clear()
        for number, text in snapshot.lines:
            self[number] = text


@dataclass
class LoopState:
    """One active FOR loop; ``anchor_line`` is the FOR statement's line."""

    variable: str
    end: int | float
    step: int | float
    anchor_line: int | None


@dataclass
class InterpreterState:
    """Everything one interpreter instance mutates.

    ``pc`` is the line most recently completed. The next line to execute
    is ``jump_target`` when a GOTO/GOSUB set one, else the successor of
    ``resume_after`` when RETURN/NEXT set one, else the successor of
    ``pc``.
    """

    config: InterpreterConfig = field(default_factory=InterpreterConfig)
    program: Program = field(default_factory=Program)
    variables: dict[str, Value] = field(default_factory=dict)
    arrays: dict[str, BasicArray] = field(default_factory=dict)
    loop_stack: list[LoopState] = field(default_factory=list)
    gosub_stack: list[int | None] = field(default_factory=list)

    pc: int = HALT
    current_line: int | None = None
    jump_target: int | None = None
    resume_after: int | None = None
    running: bool = False
    waiting_for_input: bool = False
    pending_input_variable: str | None = None
    error: str | None = None

    output: list[str] = field(default_factory=list)
    line_open: bool = False

    data_pool: list[Value] = field(default_factory=list)
    data_cursor: int = 0
    memory: bytearray = field(init=False)

    auto_mode: bool = False
    next_auto_line: int = field(init=False)
    auto_increment: int = field(init=False)

    def __post_init__(self) -> None:
        self.memory = bytearray(self.config.memory_size)
        self.next_auto_line = self.config.auto_start
        self.auto_increment = self.config.auto_increment

    def clear_runtime(self) -> None:
        """Forget variables, arrays and both control stacks."""
        self.variables.clear()
        self.arrays.clear()
        self.loop_stack.clear()
        self.gosub_stack.clear()

    def halt(self) -> None:
        """Leave program execution; variables survive."""
        self.running = False
        self.pc = HALT
        self.current_line = None
        self.jump_target = None
        self.resume_after = None
        self.waiting_for_input = False
        self.pending_input_variable = None

    def reset(self) -> None:
        """Full machine reset (NEW); the output buffer is kept."""
        self.halt()
        self.program.clear()
        self.clear_runtime()
        self.error = None
        self.data_pool.clear()
        self.data_cursor = 0
        self.memory = bytearray(self.config.memory_size)
        self.auto_mode = False
        self.next_auto_line = self.config.auto_start
        self.auto_increment = self.config.auto_increment
