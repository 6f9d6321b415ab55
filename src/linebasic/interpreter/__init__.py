"""linebasic interpreter — an interactive line-numbered BASIC machine.

Entry point::

    from linebasic.interpreter import create_interpreter

    basic = create_interpreter(rnd_seed=1)
    basic.submit('10 PRINT "HELLO"')
    basic.submit("RUN")
    assert basic.consume_output() == ["HELLO", "", "Ready"]
"""

from __future__ import annotations

from typing import Any

from linebasic.model.config import InterpreterConfig
from linebasic.storage import ProgramStore

from ._context import Interpreter
from ._values import (
    BasicError,
    BasicIOError,
    BasicRuntimeError,
    BasicSyntaxError,
    ControlFlowError,
    UndefinedReferenceError,
)


def create_interpreter(
    *,
    store: ProgramStore | None = None,
    config: InterpreterConfig | None = None,
    **overrides: Any,
) -> Interpreter:
    """Create an interpreter.

    Parameters
    ----------
    store
        Program store for SAVE/LOAD/FILES/KILL (default: in memory).
    config
        Base configuration; defaults to ``InterpreterConfig()``.
    **overrides
        Individual ``InterpreterConfig`` fields, validated by pydantic
        (e.g. ``rnd_seed=42``, ``tab_width=10``).

    Returns
    -------
    Interpreter
        A fresh machine with an empty program.
    """
    base = config or InterpreterConfig()
    if overrides:
        base = InterpreterConfig.model_validate({**base.model_dump(), **overrides})
    return Interpreter(config=base, store=store)


__all__ = [
    "BasicError",
    "BasicIOError",
    "BasicRuntimeError",
    "BasicSyntaxError",
    "ControlFlowError",
    "Interpreter",
    "InterpreterConfig",
    "UndefinedReferenceError",
    "create_interpreter",
]
