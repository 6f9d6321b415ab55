"""Statement executor: keyword dispatch for one BASIC statement.

``StatementExecutor.execute`` takes the text of a single statement,
identifies its keyword and runs the matching handler. Handlers mutate
the interpreter state directly; flow changes are requested through the
owning ``Interpreter`` (``goto``/``gosub``) or by setting
``state.resume_after``.
"""

from __future__ import annotations

import logging
import math
import re
from collections.abc import Callable
from typing import TYPE_CHECKING

from linebasic.model.expressions import ArrayAccessExpr, Expression, VariableRef
from linebasic.storage import ProgramNotFoundError, ProgramStoreError

from ._arrays import BasicArray
from ._builtins import FUNCTION_SIGNATURES
from ._help import help_lines
from ._lexer import TokenStream
from ._parser import ExpressionParser
from ._state import LoopState
from ._values import (
    BadFileNameError,
    BasicError,
    BasicSyntaxError,
    DeviceIOError,
    IllegalQuantityError,
    NextWithoutForError,
    OutOfDataError,
    ProgramFileNotFoundError,
    ReturnWithoutGosubError,
    TypeMismatchError,
    UndefinedArrayError,
    Value,
    coerce_for,
    format_number,
    format_value,
    is_string_name,
    require_int,
    require_number,
)

if TYPE_CHECKING:
    from ._context import Interpreter

logger = logging.getLogger(__name__)

_KEYWORD_RE = re.compile(r"^([A-Za-z]+\$?)")
_FILENAME_RE = re.compile(r'^"([^"]+)"$')
_LIST_RANGE_RE = re.compile(r"^(\d*)\s*(-?)\s*(\d*)$")


def statement_keyword(text: str) -> str:
    """Leading keyword of a statement: a run of letters, optionally ``$``."""
    m = _KEYWORD_RE.match(text)
    return m.group(1).upper() if m else ""


def parse_filename(args: str) -> str:
    """Validate a quoted program name and case-fold it."""
    m = _FILENAME_RE.match(args.strip())
    if m is None:
        raise BadFileNameError()
    return m.group(1).upper()


class StatementExecutor:
    """Dispatches statements to their handlers.

    Parameters
    ----------
    ctx : Interpreter
        The owning interpreter: state, evaluator, output and program
        store are reached through it.
    """

    def __init__(self, ctx: Interpreter) -> None:
        self.ctx = ctx
        self.state = ctx.state
        self.evaluator = ctx.evaluator

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def execute(self, text: str) -> bool:
        """Run one statement; record any BASIC error in ``state.error``.

        Returns False if the statement failed.
        """
        try:
            self.dispatch(text)
        except BasicError as exc:
            logger.debug("statement %r failed: %s", text, exc)
            self.state.error = str(exc)
            return False
        return True

    def dispatch(self, text: str) -> None:
        """Run one statement, letting errors propagate."""
        text = text.strip()
        keyword = statement_keyword(text)
        args = text[len(keyword):].strip()

        handler = self._STMT_DISPATCH.get(keyword)
        if handler is None and not self.state.running:
            handler = self._IMMEDIATE_DISPATCH.get(keyword)
        if handler is None:
            if "=" not in text:
                raise BasicSyntaxError()
            # LET may be omitted
            handler, args = StatementExecutor._exec_let, text
        handler(self, args)

    # -----------------------------------------------------------------------
    # Parsing helpers
    # -----------------------------------------------------------------------

    @staticmethod
    def _parse(args: str) -> tuple[TokenStream, ExpressionParser]:
        stream = TokenStream(args)
        return stream, ExpressionParser(stream)

    @staticmethod
    def _target(stream: TokenStream, parser: ExpressionParser) -> VariableRef | ArrayAccessExpr:
        """Parse an assignable variable or array element."""
        name = stream.expect("NAME").value
        if name in FUNCTION_SIGNATURES:
            raise BasicSyntaxError()
        if stream.check("LPAREN"):
            return ArrayAccessExpr(name=name, indices=parser.arguments())
        return VariableRef(name=name)

    def _assign(self, target: VariableRef | ArrayAccessExpr, value: Value) -> None:
        if isinstance(target, ArrayAccessExpr):
            array = self.state.arrays.get(target.name)
            if array is None:
                raise UndefinedArrayError(target.name)
            array.set(self.evaluator.indices(target.indices), value)
        else:
            self.state.variables[target.name] = coerce_for(target.name, value)

    def _line_number(self, expr: Expression) -> int:
        value = require_number(self.evaluator.evaluate(expr))
        if value != int(value):
            raise BasicSyntaxError()
        return int(value)

    # -----------------------------------------------------------------------
    # Output
    # -----------------------------------------------------------------------

    def _exec_print(self, args: str) -> None:
        stream, parser = self._parse(args)
        newline = True
        while not stream.at_end():
            if stream.accept("SEMICOLON"):
                newline = False
            elif stream.accept("COMMA"):
                self.ctx.tab()
                newline = False
            else:
                self.ctx.write(format_value(self.evaluator.evaluate(parser.expression())))
                newline = True
        if newline:
            self.ctx.newline()

    def _exec_cls(self, _args: str) -> None:
        self.ctx.clear_output()

    # -----------------------------------------------------------------------
    # Assignment and input
    # -----------------------------------------------------------------------

    def _exec_let(self, args: str) -> None:
        stream, parser = self._parse(args)
        target = self._target(stream, parser)
        stream.expect("OP", "=")
        value = self.evaluator.evaluate(parser.expression())
        stream.expect_end()
        self._assign(target, value)

    def _exec_input(self, args: str) -> None:
        stream, parser = self._parse(args)
        prompt = "? "
        if stream.check("STRING"):
            prompt = stream.next().value
            stream.expect("SEMICOLON")
        target = self._target(stream, parser)
        stream.expect_end()
        if isinstance(target, ArrayAccessExpr):
            # INPUT into an array element is not supported
            raise BasicSyntaxError()
        self.ctx.write(prompt)
        self.state.waiting_for_input = True
        self.state.pending_input_variable = target.name

    # -----------------------------------------------------------------------
    # Flow control
    # -----------------------------------------------------------------------

    def _exec_goto(self, args: str) -> None:
        stream, parser = self._parse(args)
        line = self._line_number(parser.expression())
        stream.expect_end()
        self.ctx.goto(line)

    def _exec_gosub(self, args: str) -> None:
        stream, parser = self._parse(args)
        line = self._line_number(parser.expression())
        stream.expect_end()
        self.ctx.gosub(line)

    def _exec_return(self, args: str) -> None:
        if args:
            raise BasicSyntaxError()
        state = self.state
        if not state.gosub_stack:
            raise ReturnWithoutGosubError()
        call_site = state.gosub_stack.pop()
        if call_site is None:
            # subroutine was entered from immediate mode
            state.running = False
        else:
            state.resume_after = call_site

    def _exec_end(self, _args: str) -> None:
        self.state.running = False

    def _exec_if(self, args: str) -> None:
        stream, parser = self._parse(args)
        condition = parser.expression()
        if stream.accept("KEYWORD", "THEN"):
            number = stream.accept("NUMBER")
            if number is not None and stream.at_end():
                branch = f"GOTO {number.value}"
            elif number is None and not stream.at_end():
                branch = stream.rest()
            else:
                raise BasicSyntaxError()
        elif stream.accept("KEYWORD", "GOTO"):
            branch = f"GOTO {stream.rest()}"
        else:
            raise BasicSyntaxError()
        if self.evaluator.truth(condition):
            self.dispatch(branch)

    def _exec_on(self, args: str) -> None:
        stream, parser = self._parse(args)
        selector = parser.expression()
        if stream.accept("KEYWORD", "GOTO"):
            transfer = self.ctx.goto
        elif stream.accept("KEYWORD", "GOSUB"):
            transfer = self.ctx.gosub
        else:
            raise BasicSyntaxError()
        lines = [self._list_line_number(stream)]
        while stream.accept("COMMA"):
            lines.append(self._list_line_number(stream))
        stream.expect_end()

        index = math.floor(require_number(self.evaluator.evaluate(selector)) + 0.5)
        if 1 <= index <= len(lines):
            transfer(lines[index - 1])

    @staticmethod
    def _list_line_number(stream: TokenStream) -> int:
        token = stream.expect("NUMBER")
        if not isinstance(token.value, int):
            raise BasicSyntaxError()
        return token.value

    # -----------------------------------------------------------------------
    # Loops
    # -----------------------------------------------------------------------

    def _exec_for(self, args: str) -> None:
        stream, parser = self._parse(args)
        name = stream.expect("NAME").value
        if is_string_name(name):
            raise TypeMismatchError()
        stream.expect("OP", "=")
        start_expr = parser.expression()
        stream.expect("KEYWORD", "TO")
        end_expr = parser.expression()
        step_expr = parser.expression() if stream.accept("KEYWORD", "STEP") else None
        stream.expect_end()

        evaluate = self.evaluator.evaluate
        start = require_number(evaluate(start_expr))
        end = require_number(evaluate(end_expr))
        step = require_number(evaluate(step_expr)) if step_expr is not None else 1

        # Re-entering a FOR for an active variable drops that loop and
        # everything nested in it.
        loop_stack = self.state.loop_stack
        for i in range(len(loop_stack) - 1, -1, -1):
            if loop_stack[i].variable == name:
                del loop_stack[i:]
                break

        self.state.variables[name] = start
        loop_stack.append(LoopState(
            variable=name,
            end=end,
            step=step,
            anchor_line=self.state.current_line,
        ))

    def _exec_next(self, args: str) -> None:
        stream, _ = self._parse(args)
        names: list[str | None] = [None]
        if not stream.at_end():
            names = [stream.expect("NAME").value]
            while stream.accept("COMMA"):
                names.append(stream.expect("NAME").value)
        stream.expect_end()

        for name in names:
            if self._step_loop(name):
                return

    def _step_loop(self, name: str | None) -> bool:
        """Advance the loop for *name* (innermost if None).

        Returns True if the loop continues, False if it finished.
        """
        state = self.state
        loop_stack = state.loop_stack
        if not loop_stack:
            raise NextWithoutForError()

        index = len(loop_stack) - 1
        if name is not None:
            while index >= 0 and loop_stack[index].variable != name:
                index -= 1
            if index < 0:
                raise NextWithoutForError(name)
        del loop_stack[index + 1:]

        loop = loop_stack[-1]
        value = require_number(state.variables.get(loop.variable, 0)) + loop.step
        done = value > loop.end if loop.step > 0 else value < loop.end
        if done:
            loop_stack.pop()
            return False
        state.variables[loop.variable] = value
        if loop.anchor_line is not None:
            state.resume_after = loop.anchor_line
        return True

    # -----------------------------------------------------------------------
    # Arrays, DATA, memory
    # -----------------------------------------------------------------------

    def _exec_dim(self, args: str) -> None:
        stream, parser = self._parse(args)
        declarations = []
        while True:
            name = stream.expect("NAME").value
            if name in FUNCTION_SIGNATURES or not stream.check("LPAREN"):
                raise BasicSyntaxError()
            declarations.append((name, parser.arguments()))
            if not stream.accept("COMMA"):
                break
        stream.expect_end()

        for name, bound_exprs in declarations:
            bounds = self.evaluator.indices(bound_exprs)
            self.state.arrays[name] = BasicArray(name, bounds)

    def _exec_read(self, args: str) -> None:
        stream, parser = self._parse(args)
        targets = [self._target(stream, parser)]
        while stream.accept("COMMA"):
            targets.append(self._target(stream, parser))
        stream.expect_end()

        state = self.state
        for target in targets:
            if state.data_cursor >= len(state.data_pool):
                raise OutOfDataError()
            value = state.data_pool[state.data_cursor]
            state.data_cursor += 1
            if is_string_name(target.name) and not isinstance(value, str):
                value = format_number(value)
            self._assign(target, value)

    def _exec_restore(self, args: str) -> None:
        if args:
            raise BasicSyntaxError()
        self.state.data_cursor = 0

    def _exec_poke(self, args: str) -> None:
        stream, parser = self._parse(args)
        address_expr = parser.expression()
        stream.expect("COMMA")
        value_expr = parser.expression()
        stream.expect_end()

        address = require_int(self.evaluator.evaluate(address_expr))
        value = require_int(self.evaluator.evaluate(value_expr))
        memory = self.state.memory
        if address < 0 or address >= len(memory):
            raise IllegalQuantityError()
        memory[address] = value & 0xFF

    def _exec_empty(self, _args: str) -> None:
        pass

    # -----------------------------------------------------------------------
    # Program store
    # -----------------------------------------------------------------------

    def _exec_save(self, args: str) -> None:
        name = parse_filename(args)
        try:
            self.ctx.store.save(name, self.state.program.snapshot())
        except ProgramStoreError:
            raise DeviceIOError() from None
        self.ctx.write_line(self.ctx.config.ready_prompt)

    def _exec_load(self, args: str) -> None:
        self.ctx.load_program(parse_filename(args))
        self.ctx.write_line(self.ctx.config.ready_prompt)

    def _exec_files(self, args: str) -> None:
        if args:
            raise BasicSyntaxError()
        try:
            names = self.ctx.store.list()
        except ProgramStoreError:
            raise DeviceIOError() from None
        self.ctx.write_line("Saved programs:")
        for name in names:
            self.ctx.write_line(f"  {name}")
        if not names:
            self.ctx.write_line("  (None)")
        self.ctx.ready()

    def _exec_kill(self, args: str) -> None:
        name = parse_filename(args)
        try:
            self.ctx.store.delete(name)
        except ProgramNotFoundError:
            raise ProgramFileNotFoundError() from None
        except ProgramStoreError:
            raise DeviceIOError() from None
        self.ctx.write_line(self.ctx.config.ready_prompt)

    # -----------------------------------------------------------------------
    # Editing aids
    # -----------------------------------------------------------------------

    def _exec_auto(self, args: str) -> None:
        config = self.ctx.config
        start, increment = config.auto_start, config.auto_increment
        if args:
            parts = args.split(",")
            if len(parts) > 2:
                raise BasicSyntaxError()
            try:
                numbers = [int(p.strip()) for p in parts]
            except ValueError:
                raise BasicSyntaxError() from None
            start = numbers[0] or start
            if len(numbers) > 1:
                increment = numbers[1] or increment
            if start < 0 or increment < 0:
                raise IllegalQuantityError()
        state = self.state
        state.auto_mode = True
        state.next_auto_line = start
        state.auto_increment = increment

    def _exec_help(self, args: str) -> None:
        for line in help_lines(args):
            self.ctx.write_line(line)
        self.ctx.ready()

    # -----------------------------------------------------------------------
    # Immediate-only commands
    # -----------------------------------------------------------------------

    def _exec_run(self, args: str) -> None:
        if not args:
            self.ctx.run()
        elif args.startswith('"'):
            self.ctx.load_program(parse_filename(args))
            self.ctx.run()
        elif args.isdigit():
            self.ctx.run(start=int(args))
        else:
            raise BasicSyntaxError()

    def _exec_list(self, args: str) -> None:
        m = _LIST_RANGE_RE.match(args)
        if m is None:
            raise BasicSyntaxError()
        first, dash, last = m.groups()
        start = int(first) if first else None
        if dash:
            end = int(last) if last else None
        elif last:
            raise BasicSyntaxError()
        else:
            end = start
        self.ctx.list_program(start, end)

    def _exec_new(self, args: str) -> None:
        if args:
            raise BasicSyntaxError()
        self.ctx.new()

    # Statement dispatch table
    _STMT_DISPATCH: dict[str, Callable[[StatementExecutor, str], None]] = {
        "PRINT": _exec_print,
        "LET": _exec_let,
        "INPUT": _exec_input,
        "GOTO": _exec_goto,
        "IF": _exec_if,
        "FOR": _exec_for,
        "NEXT": _exec_next,
        "GOSUB": _exec_gosub,
        "RETURN": _exec_return,
        "END": _exec_end,
        "CLS": _exec_cls,
        "REM": _exec_empty,
        "DIM": _exec_dim,
        "READ": _exec_read,
        "DATA": _exec_empty,
        "RESTORE": _exec_restore,
        "POKE": _exec_poke,
        "ON": _exec_on,
        "SAVE": _exec_save,
        "LOAD": _exec_load,
        "FILES": _exec_files,
        "KILL": _exec_kill,
        "AUTO": _exec_auto,
        "HELP": _exec_help,
    }

    _IMMEDIATE_DISPATCH: dict[str, Callable[[StatementExecutor, str], None]] = {
        "RUN": _exec_run,
        "LIST": _exec_list,
        "NEW": _exec_new,
    }
