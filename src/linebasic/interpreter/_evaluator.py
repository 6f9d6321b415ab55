"""Tree-walking evaluator for BASIC expressions.

The ``ExpressionEvaluator`` evaluates parsed expression trees against
an ``InterpreterState``. Numbers are Python ints or floats, strings are
``str``; comparisons and logical operators yield -1 (true) or 0 (false).
"""

from __future__ import annotations

import math
import random
from collections.abc import Callable

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

from ._builtins import FUNCTION_SIGNATURES, PURE_FUNCTIONS
from ._parser import parse_expression
from ._state import InterpreterState
from ._values import (
    BasicError,
    BasicSyntaxError,
    DivisionByZeroError,
    IllegalQuantityError,
    NumericOverflowError,
    TypeMismatchError,
    UndefinedArrayError,
    UndefinedFunctionError,
    Value,
    check_number,
    default_value,
    require_int,
    require_number,
    require_string,
)

TRUE = -1
FALSE = 0

_COMPARISONS: dict[BinaryOp, Callable[[Value, Value], bool]] = {
    BinaryOp.EQ: lambda a, b: a == b,
    BinaryOp.NE: lambda a, b: a != b,
    BinaryOp.LT: lambda a, b: a < b,
    BinaryOp.GT: lambda a, b: a > b,
    BinaryOp.LE: lambda a, b: a <= b,
    BinaryOp.GE: lambda a, b: a >= b,
}


class ExpressionEvaluator:
    """Evaluates expressions for one interpreter.

    Parameters
    ----------
    state : InterpreterState
        Source of variables, arrays and memory.
    rng : random.Random
        Generator behind RND; seed it for reproducible runs.
    """

    def __init__(self, state: InterpreterState, rng: random.Random | None = None) -> None:
        self.state = state
        self.rng = rng or random.Random()

    # -----------------------------------------------------------------------
    # Public API
    # -----------------------------------------------------------------------

    def evaluate(self, expr: Expression | str) -> Value:
        """Evaluate an expression tree, or source text parsed on the fly."""
        if isinstance(expr, str):
            expr = parse_expression(expr.strip())
        return self._eval(expr)

    def truth(self, expr: Expression) -> bool:
        """Evaluate a condition: any non-zero number is true."""
        return require_number(self._eval(expr)) != 0

    def indices(self, exprs: list[Expression]) -> list[int]:
        return [require_int(self._eval(e)) for e in exprs]

    # -----------------------------------------------------------------------
    # Expression dispatch
    # -----------------------------------------------------------------------

    def _eval(self, expr: Expression) -> Value:
        handler = self._EXPR_DISPATCH.get(expr.kind)
        if handler is None:
            raise BasicSyntaxError(expr.kind)
        return handler(self, expr)

    def _eval_number(self, expr: NumberLiteral) -> Value:
        return expr.value

    def _eval_string(self, expr: StringLiteral) -> Value:
        return expr.value

    def _eval_variable_ref(self, expr: VariableRef) -> Value:
        return self.state.variables.get(expr.name, default_value(expr.name))

    def _eval_array_access(self, expr: ArrayAccessExpr) -> Value:
        array = self.state.arrays.get(expr.name)
        if array is None:
            raise UndefinedArrayError(expr.name)
        return array.get(self.indices(expr.indices))

    def _eval_unary(self, expr: UnaryExpr) -> Value:
        operand = require_number(self._eval(expr.operand))
        if expr.op == UnaryOp.NEG:
            return -operand
        if expr.op == UnaryOp.NOT:
            return ~int(operand)
        raise BasicSyntaxError(expr.op)

    def _eval_binary(self, expr: BinaryExpr) -> Value:
        left = self._eval(expr.left)
        right = self._eval(expr.right)
        return self._apply_binop(expr.op, left, right)

    def _apply_binop(self, op: BinaryOp, left: Value, right: Value) -> Value:
        # Comparison: both operands of the same type
        compare = _COMPARISONS.get(op)
        if compare is not None:
            if isinstance(left, str) != isinstance(right, str):
                raise TypeMismatchError()
            return TRUE if compare(left, right) else FALSE

        # String concatenation
        if op == BinaryOp.ADD and isinstance(left, str):
            return left + require_string(right)

        left = require_number(left)
        right = require_number(right)

        if op == BinaryOp.ADD:
            return check_number(left + right)
        if op == BinaryOp.SUB:
            return check_number(left - right)
        if op == BinaryOp.MUL:
            return check_number(left * right)
        if op == BinaryOp.DIV:
            if right == 0:
                raise DivisionByZeroError()
            try:
                return check_number(left / right)
            except OverflowError:
                # int operands too large for a float quotient
                raise NumericOverflowError() from None
        if op == BinaryOp.POW:
            return self._power(left, right)

        # Logical / bitwise
        if op == BinaryOp.AND:
            return int(left) & int(right)
        if op == BinaryOp.OR:
            return int(left) | int(right)

        raise BasicSyntaxError(op)

    @staticmethod
    def _power(base: int | float, exponent: int | float) -> int | float:
        if base == 0 and exponent < 0:
            raise DivisionByZeroError()
        try:
            result = math.pow(base, exponent)
        except OverflowError:
            raise NumericOverflowError() from None
        except ValueError:
            # negative base with fractional exponent
            raise IllegalQuantityError() from None
        result = check_number(result)
        if isinstance(base, int) and isinstance(exponent, int) and abs(result) < 2 ** 53:
            if result.is_integer():
                return int(result)
        return result

    def _eval_function_call(self, expr: FunctionCallExpr) -> Value:
        name = expr.function_name
        signature = FUNCTION_SIGNATURES.get(name)
        if signature is None:
            raise UndefinedFunctionError(name)
        if not signature.required <= len(expr.args) <= len(signature.params):
            raise BasicSyntaxError(name)

        args: list[Value] = []
        for param, arg in zip(signature.params, expr.args):
            value = self._eval(arg)
            args.append(require_string(value) if param == "s" else require_number(value))

        if name == "PEEK":
            return self._peek(args[0])
        if name == "RND":
            return self.rng.random()

        try:
            result = PURE_FUNCTIONS[name](*args)
        except BasicError:
            raise
        except OverflowError:
            raise NumericOverflowError() from None
        except ValueError:
            raise IllegalQuantityError() from None
        if isinstance(result, float):
            return check_number(result)
        return result

    def _peek(self, address: int | float) -> int:
        address = int(address)
        memory = self.state.memory
        if address < 0 or address >= len(memory):
            raise IllegalQuantityError()
        return memory[address]

    # Expression dispatch table
    _EXPR_DISPATCH: dict[str, Callable[[ExpressionEvaluator, Expression], Value]] = {
        "number": _eval_number,
        "string": _eval_string,
        "variable_ref": _eval_variable_ref,
        "array_access": _eval_array_access,
        "unary": _eval_unary,
        "binary": _eval_binary,
        "function_call": _eval_function_call,
    }
