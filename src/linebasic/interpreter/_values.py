"""Value system for the interpreter.

Provides the BASIC error hierarchy, number parsing and formatting, and
the type checks shared by the evaluator and the statement handlers.
"""

from __future__ import annotations

import math
import re
import sys

Value = int | float | str


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class BasicError(Exception):
    """Error raised while executing a BASIC statement.

    ``message`` is the fixed BASIC error text; ``detail`` is an optional
    qualifier rendered after a colon (``LINE NOT FOUND: 99``).
    """

    message = "ERROR"

    def __init__(self, detail: object = None) -> None:
        self.detail = detail
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.detail is None:
            return self.message
        return f"{self.message}: {self.detail}"


class BasicSyntaxError(BasicError):
    message = "SYNTAX ERROR"


class UndefinedReferenceError(BasicError):
    """Reference to an array, function or line that does not exist."""


class UndefinedArrayError(UndefinedReferenceError):
    message = "UNDEF'D ARRAY"


class UndefinedFunctionError(UndefinedReferenceError):
    message = "UNDEF'D FUNCTION"


class LineNotFoundError(UndefinedReferenceError):
    message = "LINE NOT FOUND"


class BasicRuntimeError(BasicError):
    """Bad value or type at run time."""


class TypeMismatchError(BasicRuntimeError):
    message = "TYPE MISMATCH"


class BadSubscriptError(BasicRuntimeError):
    message = "BAD SUBSCRIPT"


class IllegalQuantityError(BasicRuntimeError):
    message = "ILLEGAL QUANTITY"


class OutOfDataError(BasicRuntimeError):
    message = "OUT OF DATA"


class DivisionByZeroError(BasicRuntimeError):
    message = "DIVISION BY ZERO"


class NumericOverflowError(BasicRuntimeError):
    message = "OVERFLOW"


class ControlFlowError(BasicError):
    """Loop or subroutine stack misuse."""


class NextWithoutForError(ControlFlowError):
    message = "NEXT WITHOUT FOR"


class ReturnWithoutGosubError(ControlFlowError):
    message = "RETURN WITHOUT GOSUB"


class BasicIOError(BasicError):
    """Program store failures."""


class BadFileNameError(BasicIOError):
    message = "BAD FILE NAME"


class ProgramFileNotFoundError(BasicIOError):
    message = "FILE NOT FOUND"


class FileLoadError(BasicIOError):
    message = "FILE LOAD ERROR"


class DeviceIOError(BasicIOError):
    message = "DEVICE I/O ERROR"


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------

def is_string_name(name: str) -> bool:
    """True if a variable or array name holds strings (``A$``)."""
    return name.endswith("$")


def default_value(name: str) -> Value:
    """Value of a never-assigned variable or array element."""
    return "" if is_string_name(name) else 0


# ---------------------------------------------------------------------------
# Numbers
# ---------------------------------------------------------------------------

_NUMBER_PATTERN = r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"
_NUMBER_RE = re.compile(_NUMBER_PATTERN)
_NUMBER_PREFIX_RE = re.compile(r"\s*(" + _NUMBER_PATTERN + ")")


def parse_number_prefix(text: str) -> int | float:
    """Parse the leading decimal number of *text*; 0 if there is none.

    Trailing garbage is ignored, so ``"12abc"`` reads as 12.
    """
    m = _NUMBER_PREFIX_RE.match(text)
    if m is None:
        return 0
    return parse_number(m.group(1))


def parse_number(text: str) -> int | float:
    """Parse a complete decimal literal, preferring int when exact.

    Raises ``ValueError`` for anything else (including ``inf``/``nan``).
    """
    if _NUMBER_RE.fullmatch(text) is None:
        raise ValueError(f"not a number: {text!r}")
    try:
        return check_number(int(text))
    except ValueError:
        pass
    value = float(text)
    if math.isinf(value):
        raise NumericOverflowError()
    return value


def parse_data_items(text: str) -> list[Value]:
    """Split the argument text of a DATA statement into values.

    Items are comma-separated; commas inside double quotes do not split.
    Quoted items become strings without their quotes, numeric items
    numbers, and anything else is kept as trimmed text.
    """
    items: list[str] = []
    current: list[str] = []
    quoted = False
    for ch in text:
        if ch == '"':
            quoted = not quoted
        elif ch == "," and not quoted:
            items.append("".join(current))
            current = []
            continue
        current.append(ch)
    items.append("".join(current))

    values: list[Value] = []
    for item in items:
        item = item.strip()
        if len(item) >= 2 and item.startswith('"') and item.endswith('"'):
            values.append(item[1:-1])
            continue
        try:
            values.append(parse_number(item))
        except ValueError:
            values.append(item)
    return values


def format_number(value: int | float) -> str:
    """Render a number the way PRINT and STR$ show it.

    Integral floats print without a fractional part (``2.0`` -> ``2``).
    """
    if isinstance(value, float):
        if value.is_integer() and abs(value) < 1e16:
            return str(int(value))
        return repr(value)
    return str(value)


def format_value(value: Value) -> str:
    if isinstance(value, str):
        return value
    return format_number(value)


def check_number(value: int | float) -> int | float:
    """Reject results that left the representable range.

    Ints are held to the float range so they stay printable and divisible.
    """
    if isinstance(value, float):
        if math.isinf(value) or math.isnan(value):
            raise NumericOverflowError()
    elif abs(value) > sys.float_info.max:
        raise NumericOverflowError()
    return value


# ---------------------------------------------------------------------------
# Type checks
# ---------------------------------------------------------------------------

def require_number(value: Value) -> int | float:
    if isinstance(value, str):
        raise TypeMismatchError()
    return value


def require_string(value: Value) -> str:
    if not isinstance(value, str):
        raise TypeMismatchError()
    return value


def require_int(value: Value) -> int:
    """Truncate a numeric value to int (for addresses, counts, indices)."""
    number = require_number(value)
    if isinstance(number, float):
        return int(number)
    return number


def coerce_for(name: str, value: Value) -> Value:
    """Check *value* may be stored in variable *name*."""
    if is_string_name(name):
        return require_string(value)
    return require_number(value)
