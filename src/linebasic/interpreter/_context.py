"""Interpreter context: the user-facing object for a BASIC session.

Owns the machine state, routes each submitted line (program edit,
immediate command, AUTO capture or INPUT reply) and drives the run loop.
"""

from __future__ import annotations

import logging
import random
import re

from linebasic.model.config import InterpreterConfig
from linebasic.storage import (
    MemoryProgramStore,
    ProgramNotFoundError,
    ProgramStore,
    ProgramStoreError,
    SnapshotFormatError,
)

from ._evaluator import ExpressionEvaluator
from ._executor import StatementExecutor, statement_keyword
from ._state import HALT, InterpreterState
from ._values import (
    BasicError,
    DeviceIOError,
    FileLoadError,
    LineNotFoundError,
    ProgramFileNotFoundError,
    Value,
    is_string_name,
    parse_data_items,
    parse_number_prefix,
)

logger = logging.getLogger(__name__)

_EDIT_RE = re.compile(r"^(\d+)\s*(.*)$", re.DOTALL)


class Interpreter:
    """One interactive BASIC machine.

    Feed it lines with ``submit()`` and collect what it printed with
    ``consume_output()``.

    Parameters
    ----------
    config : InterpreterConfig
        Machine settings (memory size, tab width, AUTO defaults, seed).
    store : ProgramStore
        Backend for SAVE/LOAD/FILES/KILL (default: in memory).
    rng : random.Random
        Generator behind RND (default: seeded from ``config.rnd_seed``).
    """

    def __init__(
        self,
        config: InterpreterConfig | None = None,
        store: ProgramStore | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or InterpreterConfig()
        self.store = store if store is not None else MemoryProgramStore()
        self.state = InterpreterState(config=self.config)
        self.evaluator = ExpressionEvaluator(
            self.state, rng or random.Random(self.config.rnd_seed),
        )
        self.executor = StatementExecutor(self)

    # -----------------------------------------------------------------------
    # Line dispatcher
    # -----------------------------------------------------------------------

    def submit(self, line: str) -> None:
        """Process one line of user input."""
        state = self.state
        state.error = None

        if state.waiting_for_input:
            self.provide_input(line)
            return

        text = line.strip()
        if state.auto_mode:
            self._capture_auto(text)
            return
        if not text:
            return

        m = _EDIT_RE.match(text)
        if m is not None:
            self._edit_line(int(m.group(1)), m.group(2).strip())
        else:
            self._execute_immediate(text)

    def _capture_auto(self, text: str) -> None:
        state = self.state
        if not text:
            state.auto_mode = False
            return
        state.program[state.next_auto_line] = text
        logger.debug("auto line %d: %s", state.next_auto_line, text)
        state.next_auto_line += state.auto_increment

    def _edit_line(self, number: int, text: str) -> None:
        program = self.state.program
        if number == 0:
            self.state.error = "SYNTAX ERROR"
            self._report_error("SYNTAX ERROR")
            return
        if text:
            program[number] = text
            logger.debug("stored line %d: %s", number, text)
        else:
            program.discard(number)
            logger.debug("deleted line %d", number)

    def _execute_immediate(self, text: str) -> None:
        state = self.state
        if not self.executor.execute(text):
            self._report_error(state.error)
            return
        # A GOTO/GOSUB/NEXT/RETURN typed at the prompt resumes the program.
        pending = state.jump_target is not None or state.resume_after is not None
        if pending and not state.running and not state.waiting_for_input:
            logger.debug("continuing program from immediate mode")
            state.running = True
            self._run_loop()

    def _report_error(self, message: str | None, line: int | None = None) -> None:
        if self.state.line_open:
            self.newline()
        if line is None:
            self.write_line(f"?{message}")
        else:
            self.write_line(f"?{message} IN {line}")
        self.ready()

    # -----------------------------------------------------------------------
    # Run loop
    # -----------------------------------------------------------------------

    def run(self, start: int | None = None) -> None:
        """RUN [start]: execute the program from its first line (or *start*)."""
        state = self.state
        if start is not None and start not in state.program:
            raise LineNotFoundError(start)
        if not state.running:
            state.clear_runtime()
            self._scan_data()
            state.halt()
            state.pc = 0
        if start is not None:
            state.jump_target = start
        state.running = True
        logger.debug("run started (%d lines)", len(state.program))
        self._run_loop()

    def _scan_data(self) -> None:
        state = self.state
        state.data_pool.clear()
        for _number, text in state.program.items():
            text = text.strip()
            if statement_keyword(text) == "DATA":
                state.data_pool.extend(parse_data_items(text[4:]))
        state.data_cursor = 0

    def _next_line(self) -> int | None:
        state = self.state
        if state.jump_target is not None:
            line = state.jump_target
            state.jump_target = None
            state.resume_after = None
            return line
        if state.resume_after is not None:
            anchor = state.resume_after
            state.resume_after = None
            return state.program.successor(anchor)
        if state.pc == HALT:
            return state.program.first()
        return state.program.successor(state.pc)

    def _run_loop(self) -> None:
        state = self.state
        while state.running:
            line = self._next_line()
            if line is None:
                break
            state.current_line = line
            if not self.executor.execute(state.program[line]):
                logger.debug("runtime error in line %d: %s", line, state.error)
                state.halt()
                self._report_error(state.error, line)
                return
            state.pc = line
            if state.waiting_for_input:
                return
        self._finish()

    def _finish(self) -> None:
        logger.debug("run halted")
        self.state.halt()
        self.ready()

    # -----------------------------------------------------------------------
    # Flow control (called by statement handlers)
    # -----------------------------------------------------------------------

    def goto(self, line: int) -> None:
        if line not in self.state.program:
            raise LineNotFoundError(line)
        self.state.jump_target = line

    def gosub(self, line: int) -> None:
        if line not in self.state.program:
            raise LineNotFoundError(line)
        self.state.gosub_stack.append(self.state.current_line)
        self.state.jump_target = line

    # -----------------------------------------------------------------------
    # INPUT
    # -----------------------------------------------------------------------

    def provide_input(self, raw: str) -> None:
        """Answer a pending INPUT and resume the program."""
        state = self.state
        name = state.pending_input_variable
        # echo onto the prompt line
        self.write(raw)
        self.newline()
        try:
            value: Value = raw if is_string_name(name) else parse_number_prefix(raw)
        except BasicError as exc:
            line = state.current_line if state.running else None
            logger.debug("bad input for %s: %s", name, exc)
            state.error = str(exc)
            state.halt()
            self._report_error(state.error, line)
            return
        state.variables[name] = value
        state.waiting_for_input = False
        state.pending_input_variable = None
        logger.debug("input %s = %r", name, value)
        if state.running:
            self._run_loop()
        else:
            self.ready()

    # -----------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------

    def write(self, text: str) -> None:
        """Append *text* to the current output line."""
        state = self.state
        if state.line_open and state.output:
            state.output[-1] += text
        else:
            state.output.append(text)
        state.line_open = True

    def newline(self) -> None:
        state = self.state
        if state.line_open:
            state.line_open = False
        else:
            state.output.append("")

    def write_line(self, text: str) -> None:
        self.write(text)
        self.newline()

    def tab(self) -> None:
        """Pad the current line to the next PRINT zone."""
        state = self.state
        column = len(state.output[-1]) if state.line_open and state.output else 0
        width = self.config.tab_width
        self.write(" " * (width - column % width))

    def ready(self) -> None:
        """Close any open line, then print a blank line and the prompt."""
        if self.state.line_open:
            self.newline()
        self.write_line("")
        self.write_line(self.config.ready_prompt)

    def consume_output(self) -> list[str]:
        """Return the buffered output lines and clear the buffer."""
        lines = list(self.state.output)
        self.state.output.clear()
        return lines

    def clear_output(self) -> None:
        self.state.output.clear()
        self.state.line_open = False

    # -----------------------------------------------------------------------
    # Program management
    # -----------------------------------------------------------------------

    def load_program(self, name: str) -> None:
        """Replace the machine with the program saved as *name*.

        The snapshot is validated before anything is cleared, so a failed
        load leaves the current program in place.
        """
        try:
            snapshot = self.store.load(name)
        except ProgramNotFoundError:
            raise ProgramFileNotFoundError() from None
        except SnapshotFormatError:
            raise FileLoadError() from None
        except ProgramStoreError:
            raise DeviceIOError() from None
        self.state.reset()
        self.state.program.replace(snapshot)
        logger.debug("loaded %s (%d lines)", name, len(snapshot))

    def list_program(self, start: int | None = None, end: int | None = None) -> None:
        lines = self.state.program.items(start, end)
        for number, text in lines:
            self.write_line(f"{number} {text}")
        if lines:
            self.write_line("")
        self.write_line(self.config.ready_prompt)

    def new(self) -> None:
        self.state.reset()
        self.write_line(self.config.ready_prompt)

    # -----------------------------------------------------------------------
    # State access
    # -----------------------------------------------------------------------

    @property
    def output(self) -> list[str]:
        return self.state.output

    @property
    def line_open(self) -> bool:
        """True if the last output line is unfinished (e.g. an INPUT prompt)."""
        return self.state.line_open

    @property
    def running(self) -> bool:
        return self.state.running

    @property
    def waiting_for_input(self) -> bool:
        return self.state.waiting_for_input

    @property
    def error(self) -> str | None:
        return self.state.error

    @property
    def pc(self) -> int:
        return self.state.pc

    @property
    def variables(self) -> dict[str, Value]:
        return self.state.variables

    def listing(self) -> list[tuple[int, str]]:
        """Program lines in ascending order."""
        return self.state.program.items()
