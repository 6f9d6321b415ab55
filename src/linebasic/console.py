"""Command-line REPL for linebasic.

Usage::

    linebasic [--storage DIR] [--seed N] [-v]
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Callable

from pydantic import ValidationError

from linebasic.interpreter import Interpreter, create_interpreter
from linebasic.storage import DirectoryProgramStore, MemoryProgramStore, ProgramStore

logger = logging.getLogger(__name__)


def flush_output(interp: Interpreter, write: Callable[[str], object]) -> None:
    """Write buffered interpreter output; an open prompt line gets no newline."""
    lines = interp.consume_output()
    for i, line in enumerate(lines):
        last = i == len(lines) - 1
        write(line if last and interp.line_open else line + "\n")


def run_console(
    interp: Interpreter,
    read_line: Callable[[], str],
    write: Callable[[str], object],
) -> None:
    """Read-submit-print loop until *read_line* raises EOFError."""
    interp.ready()
    flush_output(interp, write)
    while True:
        try:
            line = read_line()
        except (EOFError, KeyboardInterrupt):
            write("\n")
            return
        interp.submit(line.rstrip("\r\n"))
        flush_output(interp, write)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linebasic",
        description="Interactive line-numbered BASIC interpreter",
    )
    parser.add_argument(
        "--storage", metavar="DIR",
        help="directory for SAVE/LOAD (default: keep programs in memory)",
    )
    parser.add_argument("--seed", type=int, help="seed for RND")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0,
        help="log interpreter activity to stderr (repeat for debug)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(name)s: %(levelname)s: %(message)s")

    store: ProgramStore
    if args.storage:
        store = DirectoryProgramStore(args.storage)
    else:
        store = MemoryProgramStore()

    try:
        interp = create_interpreter(store=store, rnd_seed=args.seed)
    except ValidationError as exc:
        print(f"linebasic: invalid configuration: {exc}", file=sys.stderr)
        return 2

    logger.info("storage: %s", args.storage or "memory")
    run_console(interp, input, sys.stdout.write)
    return 0


if __name__ == "__main__":
    sys.exit(main())
