"""Shared test helpers for the linebasic test suite."""

from linebasic.interpreter import Interpreter, create_interpreter
from linebasic.storage import MemoryProgramStore


def make_interpreter(store=None, **overrides) -> Interpreter:
    """Fresh interpreter with an in-memory store and a fixed RND seed."""
    overrides.setdefault("rnd_seed", 1234)
    return create_interpreter(store=store or MemoryProgramStore(), **overrides)


def enter(interp: Interpreter, *lines: str) -> list[str]:
    """Submit each line in turn and return everything printed."""
    for line in lines:
        interp.submit(line)
    return interp.consume_output()


def run_program(source: str, *, interp: Interpreter | None = None) -> list[str]:
    """Enter a program (one numbered line per source line), RUN it and
    return the output lines, ``Ready`` trailer included."""
    if interp is None:
        interp = make_interpreter()
    lines = [ln.strip() for ln in source.strip().splitlines() if ln.strip()]
    enter(interp, *lines)
    return enter(interp, "RUN")


def program_output(source: str, **kwargs) -> list[str]:
    """Like ``run_program`` but without the trailing blank line and ``Ready``."""
    out = run_program(source, **kwargs)
    assert out[-2:] == ["", "Ready"]
    return out[:-2]
