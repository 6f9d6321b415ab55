"""Expression AST nodes for BASIC expressions."""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class BinaryOp(str, Enum):
    ADD = "ADD"
    SUB = "SUB"
    MUL = "MUL"
    DIV = "DIV"
    POW = "POW"
    EQ = "EQ"
    NE = "NE"
    LT = "LT"
    GT = "GT"
    LE = "LE"
    GE = "GE"
    AND = "AND"
    OR = "OR"


class UnaryOp(str, Enum):
    NEG = "NEG"
    NOT = "NOT"


class NumberLiteral(BaseModel):
    """A numeric constant (e.g. 42, 3.5, 1E3)."""

    kind: Literal["number"] = "number"
    value: int | float


class StringLiteral(BaseModel):
    """A quoted string constant, stored without its quotes."""

    kind: Literal["string"] = "string"
    value: str


class VariableRef(BaseModel):
    """Reference to a scalar variable by (upper-case) name."""

    kind: Literal["variable_ref"] = "variable_ref"
    name: str


class ArrayAccessExpr(BaseModel):
    """Array subscript: A(I) or B$(I, J)."""

    kind: Literal["array_access"] = "array_access"
    name: str
    indices: list[Expression]


class FunctionCallExpr(BaseModel):
    """Call of a built-in function: LEFT$(A$, 2)."""

    kind: Literal["function_call"] = "function_call"
    function_name: str
    args: list[Expression] = []


class BinaryExpr(BaseModel):
    kind: Literal["binary"] = "binary"
    op: BinaryOp
    left: Expression
    right: Expression


class UnaryExpr(BaseModel):
    kind: Literal["unary"] = "unary"
    op: UnaryOp
    operand: Expression


Expression = Annotated[
    Union[
        NumberLiteral,
        StringLiteral,
        VariableRef,
        ArrayAccessExpr,
        FunctionCallExpr,
        BinaryExpr,
        UnaryExpr,
    ],
    Field(discriminator="kind"),
]

# Rebuild models with recursive Expression references.
ArrayAccessExpr.model_rebuild()
FunctionCallExpr.model_rebuild()
BinaryExpr.model_rebuild()
UnaryExpr.model_rebuild()
