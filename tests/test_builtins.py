"""Tests for the built-in functions."""

import math

import pytest

from conftest import make_interpreter

from linebasic.interpreter._builtins import FUNCTION_SIGNATURES, PURE_FUNCTIONS
from linebasic.interpreter._values import (
    BasicSyntaxError,
    IllegalQuantityError,
    NumericOverflowError,
    TypeMismatchError,
)


@pytest.fixture
def ev():
    return make_interpreter().evaluator


class TestTable:
    def test_every_pure_function_has_signature(self):
        assert set(PURE_FUNCTIONS) <= set(FUNCTION_SIGNATURES)

    def test_machine_functions(self):
        assert set(FUNCTION_SIGNATURES) - set(PURE_FUNCTIONS) == {"PEEK", "RND"}


# ---------------------------------------------------------------------------
# Numeric functions
# ---------------------------------------------------------------------------

class TestNumeric:
    @pytest.mark.parametrize("text, expected", [
        ("ABS(-3)", 3),
        ("INT(2.7)", 2),
        ("INT(-2.5)", -3),
        ("SGN(-5)", -1),
        ("SGN(0)", 0),
        ("SGN(0.1)", 1),
        ("SQR(16)", 4),
        ("EXP(0)", 1),
        ("LOG(1)", 0),
        ("COS(0)", 1),
        ("SIN(0)", 0),
        ("TAN(0)", 0),
        ("ATN(0)", 0),
    ])
    def test_values(self, ev, text, expected):
        assert ev.evaluate(text) == expected

    def test_log_e(self, ev):
        assert ev.evaluate("LOG(EXP(2))") == pytest.approx(2)

    def test_atn_one(self, ev):
        assert ev.evaluate("ATN(1)*4") == pytest.approx(math.pi)

    @pytest.mark.parametrize("text", ["SQR(-1)", "LOG(0)", "LOG(-2)"])
    def test_illegal_quantity(self, ev, text):
        with pytest.raises(IllegalQuantityError):
            ev.evaluate(text)

    def test_exp_overflow(self, ev):
        with pytest.raises(NumericOverflowError):
            ev.evaluate("EXP(1000)")


# ---------------------------------------------------------------------------
# String functions
# ---------------------------------------------------------------------------

class TestString:
    @pytest.mark.parametrize("text, expected", [
        ('ASC("A")', 65),
        ("CHR$(65)", "A"),
        ('LEFT$("HELLO", 2)', "HE"),
        ('LEFT$("HI", 9)', "HI"),
        ('RIGHT$("HELLO", 3)', "LLO"),
        ('RIGHT$("HI", 5)', "HI"),
        ('RIGHT$("HI", 0)', ""),
        ('MID$("HELLO", 2, 3)', "ELL"),
        ('MID$("HELLO", 2)', "ELLO"),
        ('MID$("HELLO", 9)', ""),
        ('LEN("ABC")', 3),
        ('LEN("")', 0),
        ("STR$(3)", "3"),
        ("STR$(2.5)", "2.5"),
        ("STR$(4/2)", "2"),
        ('VAL("12AB")', 12),
        ('VAL(" 1.5")', 1.5),
        ('VAL("X")', 0),
    ])
    def test_values(self, ev, text, expected):
        assert ev.evaluate(text) == expected

    @pytest.mark.parametrize("text", [
        'ASC("")',
        "CHR$(256)",
        "CHR$(-1)",
        'LEFT$("A", -1)',
        'RIGHT$("A", -1)',
        'MID$("A", 0)',
        'MID$("A", 1, -1)',
    ])
    def test_illegal_quantity(self, ev, text):
        with pytest.raises(IllegalQuantityError):
            ev.evaluate(text)


# ---------------------------------------------------------------------------
# Argument checking
# ---------------------------------------------------------------------------

class TestArguments:
    @pytest.mark.parametrize("text", ['LEFT$("A")', "ABS(1, 2)", 'MID$("A", 1, 2, 3)'])
    def test_wrong_count(self, ev, text):
        with pytest.raises(BasicSyntaxError):
            ev.evaluate(text)

    @pytest.mark.parametrize("text", ["LEN(1)", 'ABS("X")', 'LEFT$(1, 1)', 'CHR$("A")'])
    def test_wrong_type(self, ev, text):
        with pytest.raises(TypeMismatchError):
            ev.evaluate(text)


# ---------------------------------------------------------------------------
# PEEK and RND
# ---------------------------------------------------------------------------

class TestMachineFunctions:
    def test_peek_reads_memory(self, ev):
        ev.state.memory[100] = 44
        assert ev.evaluate("PEEK(100)") == 44
        assert ev.evaluate("PEEK(0)") == 0

    @pytest.mark.parametrize("text", ["PEEK(-1)", "PEEK(65536)"])
    def test_peek_range(self, ev, text):
        with pytest.raises(IllegalQuantityError):
            ev.evaluate(text)

    def test_rnd_range(self, ev):
        for _ in range(50):
            value = ev.evaluate("RND(1)")
            assert 0 <= value < 1

    def test_rnd_seeded(self):
        a = make_interpreter(rnd_seed=7).evaluator
        b = make_interpreter(rnd_seed=7).evaluator
        assert [a.evaluate("RND(1)") for _ in range(5)] == [
            b.evaluate("RND(1)") for _ in range(5)
        ]
