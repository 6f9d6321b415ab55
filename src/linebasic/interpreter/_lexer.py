"""Tokenizer for BASIC statement arguments and expressions."""

from __future__ import annotations

import re
from typing import NamedTuple

from ._values import BasicSyntaxError, parse_number

# Words that end an expression instead of naming a variable.
KEYWORDS = frozenset({
    "AND", "GOSUB", "GOTO", "NOT", "OR", "STEP", "THEN", "TO",
})

_TOKEN_SPEC = [
    ("NUMBER", r"(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?"),
    ("STRING", r'"[^"]*"?'),
    ("NAME", r"[A-Za-z][A-Za-z0-9]*\$?"),
    ("OP", r"<>|<=|>=|[-+*/^=<>]"),
    ("LPAREN", r"\("),
    ("RPAREN", r"\)"),
    ("COMMA", r","),
    ("SEMICOLON", r";"),
    ("SKIP", r"[ \t]+"),
    ("MISMATCH", r"."),
]

_TOKEN_RE = re.compile("|".join(f"(?P<{kind}>{pattern})" for kind, pattern in _TOKEN_SPEC))


class Token(NamedTuple):
    kind: str
    value: object
    pos: int


def tokenize(text: str) -> list[Token]:
    """Split *text* into tokens.

    Names are upper-cased; names in ``KEYWORDS`` become ``KEYWORD``
    tokens. String tokens carry their text without the quotes (a missing
    closing quote is tolerated at end of line). Unknown characters become
    ``MISMATCH`` tokens, which no parser rule accepts.
    """
    tokens: list[Token] = []
    for m in _TOKEN_RE.finditer(text):
        kind = m.lastgroup
        raw = m.group()
        if kind == "SKIP":
            continue
        if kind == "NUMBER":
            value: object = parse_number(raw)
        elif kind == "STRING":
            value = raw[1:-1] if len(raw) > 1 and raw.endswith('"') else raw[1:]
        elif kind == "NAME":
            value = raw.upper()
            if value in KEYWORDS:
                kind = "KEYWORD"
        else:
            value = raw
        tokens.append(Token(kind, value, m.start()))
    return tokens


class TokenStream:
    """Cursor over the tokens of one piece of source text."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.tokens = tokenize(text)
        self.index = 0

    def peek(self) -> Token | None:
        if self.index < len(self.tokens):
            return self.tokens[self.index]
        return None

    def next(self) -> Token:
        token = self.peek()
        if token is None:
            raise BasicSyntaxError()
        self.index += 1
        return token

    def at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def check(self, kind: str, value: object = None) -> bool:
        token = self.peek()
        if token is None or token.kind != kind:
            return False
        return value is None or token.value == value

    def accept(self, kind: str, value: object = None) -> Token | None:
        """Consume and return the next token if it matches, else None."""
        if self.check(kind, value):
            return self.next()
        return None

    def expect(self, kind: str, value: object = None) -> Token:
        token = self.accept(kind, value)
        if token is None:
            raise BasicSyntaxError()
        return token

    def expect_end(self) -> None:
        if not self.at_end():
            raise BasicSyntaxError()

    def rest(self) -> str:
        """Raw source text from the current token onwards."""
        token = self.peek()
        if token is None:
            return ""
        return self.text[token.pos:].strip()
