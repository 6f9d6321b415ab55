"""Built-in BASIC functions.

``FUNCTION_SIGNATURES`` lists every built-in with its argument types
(``n`` numeric, ``s`` string) and how many of them are required. The
pure functions live in ``PURE_FUNCTIONS``; PEEK and RND need machine
state and are implemented by the evaluator.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from typing import NamedTuple

from ._values import IllegalQuantityError, format_number, parse_number_prefix


class Signature(NamedTuple):
    params: str
    required: int


FUNCTION_SIGNATURES: dict[str, Signature] = {
    "ABS": Signature("n", 1),
    "ASC": Signature("s", 1),
    "ATN": Signature("n", 1),
    "CHR$": Signature("n", 1),
    "COS": Signature("n", 1),
    "EXP": Signature("n", 1),
    "INT": Signature("n", 1),
    "LEFT$": Signature("sn", 2),
    "LEN": Signature("s", 1),
    "LOG": Signature("n", 1),
    "MID$": Signature("snn", 2),
    "PEEK": Signature("n", 1),
    "RIGHT$": Signature("sn", 2),
    "RND": Signature("n", 1),
    "SGN": Signature("n", 1),
    "SIN": Signature("n", 1),
    "SQR": Signature("n", 1),
    "STR$": Signature("n", 1),
    "TAN": Signature("n", 1),
    "VAL": Signature("s", 1),
}


# ---------------------------------------------------------------------------
# String functions
# ---------------------------------------------------------------------------

def _asc(s: str) -> int:
    if not s:
        raise IllegalQuantityError()
    return ord(s[0])


def _chr(code: float) -> str:
    code = int(code)
    if code < 0 or code > 255:
        raise IllegalQuantityError()
    return chr(code)


def _left(s: str, n: float) -> str:
    n = int(n)
    if n < 0:
        raise IllegalQuantityError()
    return s[:n]


def _right(s: str, n: float) -> str:
    n = int(n)
    if n < 0:
        raise IllegalQuantityError()
    return s[max(len(s) - n, 0):]


def _mid(s: str, start: float, length: float | None = None) -> str:
    """MID$(S$, START[, LEN]): 1-indexed, no LEN means to the end."""
    start = int(start)
    if start < 1:
        raise IllegalQuantityError()
    if length is None:
        return s[start - 1:]
    length = int(length)
    if length < 0:
        raise IllegalQuantityError()
    return s[start - 1:start - 1 + length]


# ---------------------------------------------------------------------------
# Numeric functions
# ---------------------------------------------------------------------------

def _int(x: float) -> int:
    return math.floor(x)


def _sgn(x: float) -> int:
    return (x > 0) - (x < 0)


def _log(x: float) -> float:
    if x <= 0:
        raise IllegalQuantityError()
    return math.log(x)


def _sqr(x: float) -> float:
    if x < 0:
        raise IllegalQuantityError()
    return math.sqrt(x)


PURE_FUNCTIONS: dict[str, Callable[..., object]] = {
    "ABS": abs,
    "ASC": _asc,
    "ATN": math.atan,
    "CHR$": _chr,
    "COS": math.cos,
    "EXP": math.exp,
    "INT": _int,
    "LEFT$": _left,
    "LEN": len,
    "LOG": _log,
    "MID$": _mid,
    "RIGHT$": _right,
    "SGN": _sgn,
    "SIN": math.sin,
    "SQR": _sqr,
    "STR$": format_number,
    "TAN": math.tan,
    "VAL": parse_number_prefix,
}
