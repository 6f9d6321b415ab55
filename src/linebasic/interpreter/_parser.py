"""Precedence-climbing parser from BASIC source to expression trees.

Precedence, lowest first::

    OR
    AND
    NOT                (prefix)
    = <> < > <= >=
    + -
    * /
    - (negation)       (prefix)
    ^

Binary operators of equal precedence associate left to right, so
``2^3^2`` is ``(2^3)^2`` and ``8/4/2`` is ``1``.
"""

from __future__ import annotations

from functools import lru_cache

from linebasic.model.expressions import (
    ArrayAccessExpr,
    BinaryExpr,
    BinaryOp,
    Expression,
    FunctionCallExpr,
    NumberLiteral,
    StringLiteral,
    UnaryExpr,
    UnaryOp,
    VariableRef,
)

from ._builtins import FUNCTION_SIGNATURES
from ._lexer import TokenStream
from ._values import BasicSyntaxError

# ---------------------------------------------------------------------------
# Operator tables
# ---------------------------------------------------------------------------

_BINARY_OPS: dict[tuple[str, str], tuple[BinaryOp, int]] = {
    ("KEYWORD", "OR"): (BinaryOp.OR, 1),
    ("KEYWORD", "AND"): (BinaryOp.AND, 2),
    ("OP", "="): (BinaryOp.EQ, 4),
    ("OP", "<>"): (BinaryOp.NE, 4),
    ("OP", "<"): (BinaryOp.LT, 4),
    ("OP", ">"): (BinaryOp.GT, 4),
    ("OP", "<="): (BinaryOp.LE, 4),
    ("OP", ">="): (BinaryOp.GE, 4),
    ("OP", "+"): (BinaryOp.ADD, 5),
    ("OP", "-"): (BinaryOp.SUB, 5),
    ("OP", "*"): (BinaryOp.MUL, 6),
    ("OP", "/"): (BinaryOp.DIV, 6),
    ("OP", "^"): (BinaryOp.POW, 8),
}

_NOT_OPERAND_PREC = 4
_NEG_OPERAND_PREC = 8


class ExpressionParser:
    """Parses expressions from a shared ``TokenStream``.

    The parser stops at the first token that cannot continue the
    expression (a keyword such as ``THEN``, a comma, ...), leaving it in
    the stream for the statement handler.
    """

    def __init__(self, stream: TokenStream) -> None:
        self.stream = stream

    def expression(self, min_prec: int = 0) -> Expression:
        left = self._prefix()
        while True:
            token = self.stream.peek()
            if token is None:
                break
            entry = _BINARY_OPS.get((token.kind, token.value))
            if entry is None:
                break
            op, prec = entry
            if prec < min_prec:
                break
            self.stream.next()
            right = self.expression(prec + 1)
            left = BinaryExpr(op=op, left=left, right=right)
        return left

    def _prefix(self) -> Expression:
        stream = self.stream
        if stream.accept("KEYWORD", "NOT"):
            return UnaryExpr(op=UnaryOp.NOT, operand=self.expression(_NOT_OPERAND_PREC))
        if stream.accept("OP", "-"):
            return UnaryExpr(op=UnaryOp.NEG, operand=self.expression(_NEG_OPERAND_PREC))
        if stream.accept("OP", "+"):
            return self.expression(_NEG_OPERAND_PREC)
        return self._primary()

    def _primary(self) -> Expression:
        token = self.stream.next()
        if token.kind == "NUMBER":
            return NumberLiteral(value=token.value)
        if token.kind == "STRING":
            return StringLiteral(value=token.value)
        if token.kind == "LPAREN":
            inner = self.expression()
            self.stream.expect("RPAREN")
            return inner
        if token.kind == "NAME":
            return self._name(token.value)
        raise BasicSyntaxError()

    def _name(self, name: str) -> Expression:
        if not self.stream.check("LPAREN"):
            if name in FUNCTION_SIGNATURES:
                raise BasicSyntaxError()
            return VariableRef(name=name)
        args = self.arguments()
        if name in FUNCTION_SIGNATURES:
            return FunctionCallExpr(function_name=name, args=args)
        return ArrayAccessExpr(name=name, indices=args)

    def arguments(self) -> list[Expression]:
        """Parse a parenthesised, comma-separated argument list."""
        self.stream.expect("LPAREN")
        args = [self.expression()]
        while self.stream.accept("COMMA"):
            args.append(self.expression())
        self.stream.expect("RPAREN")
        return args


@lru_cache(maxsize=1024)
def parse_expression(text: str) -> Expression:
    """Parse *text* as one complete expression."""
    stream = TokenStream(text)
    expr = ExpressionParser(stream).expression()
    stream.expect_end()
    return expr
