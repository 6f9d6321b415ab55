"""Tests for the line dispatcher, run loop and immediate commands."""

import pytest

from conftest import enter, make_interpreter, program_output, run_program

from linebasic.interpreter._state import HALT


# ---------------------------------------------------------------------------
# Program editing
# ---------------------------------------------------------------------------

class TestEditing:
    def test_lines_stored_in_order(self):
        interp = make_interpreter()
        assert enter(interp, "20 PRINT 2", "10 PRINT 1") == []
        assert interp.listing() == [(10, "PRINT 1"), (20, "PRINT 2")]

    def test_replace_line(self):
        interp = make_interpreter()
        enter(interp, "10 PRINT 1", "10 PRINT 9")
        assert interp.listing() == [(10, "PRINT 9")]

    def test_number_alone_deletes(self):
        interp = make_interpreter()
        enter(interp, "10 PRINT 1", "20 PRINT 2", "10")
        assert interp.listing() == [(20, "PRINT 2")]

    def test_delete_missing_line_is_silent(self):
        interp = make_interpreter()
        assert enter(interp, "30") == []

    def test_no_space_after_number(self):
        interp = make_interpreter()
        enter(interp, '10PRINT "A"')
        assert interp.listing() == [(10, 'PRINT "A"')]

    def test_line_zero_rejected(self):
        interp = make_interpreter()
        assert enter(interp, "0 PRINT 1") == ["?SYNTAX ERROR", "", "Ready"]
        assert interp.listing() == []

    def test_blank_input_ignored(self):
        interp = make_interpreter()
        assert enter(interp, "", "   ") == []


# ---------------------------------------------------------------------------
# Immediate mode
# ---------------------------------------------------------------------------

class TestImmediate:
    def test_print(self):
        interp = make_interpreter()
        assert enter(interp, "PRINT 1+1") == ["2"]

    def test_assignment_persists(self):
        interp = make_interpreter()
        assert enter(interp, "A=4", "PRINT A*A") == ["16"]

    def test_error_reported_without_line(self):
        interp = make_interpreter()
        assert enter(interp, "PRINT 1/0") == ["?DIVISION BY ZERO", "", "Ready"]
        assert interp.error == "DIVISION BY ZERO"

    def test_unknown_command(self):
        interp = make_interpreter()
        assert enter(interp, "FOO") == ["?SYNTAX ERROR", "", "Ready"]

    def test_error_cleared_by_next_line(self):
        interp = make_interpreter()
        enter(interp, "FOO")
        enter(interp, "PRINT 1")
        assert interp.error is None

    def test_goto_continues_program_keeping_variables(self):
        interp = make_interpreter()
        enter(interp, "10 PRINT A", "A=3")
        assert enter(interp, "GOTO 10") == ["3", "", "Ready"]

    def test_goto_missing_line(self):
        interp = make_interpreter()
        assert enter(interp, "GOTO 50") == ["?LINE NOT FOUND: 50", "", "Ready"]

    def test_gosub_returns_to_prompt(self):
        interp = make_interpreter()
        enter(interp, "100 PRINT \"SUB\"", "110 RETURN", "120 PRINT \"AFTER\"")
        assert enter(interp, "GOSUB 100") == ["SUB", "", "Ready"]
        assert not interp.running
        assert interp.state.gosub_stack == []

    def test_return_without_gosub(self):
        interp = make_interpreter()
        assert enter(interp, "RETURN") == ["?RETURN WITHOUT GOSUB", "", "Ready"]

    def test_next_resumes_interrupted_loop(self):
        interp = make_interpreter()
        src = """
        10 FOR I=1 TO 3
        20 PRINT I
        30 IF I=2 THEN 50
        40 NEXT I
        50 END
        """
        assert program_output(src, interp=interp) == ["1", "2"]
        assert enter(interp, "NEXT I") == ["3", "", "Ready"]


# ---------------------------------------------------------------------------
# RUN
# ---------------------------------------------------------------------------

class TestRun:
    def test_empty_program(self):
        assert run_program("") == ["", "Ready"]

    def test_halts_cleanly(self):
        interp = make_interpreter()
        run_program('10 PRINT "A"', interp=interp)
        assert not interp.running
        assert interp.pc == HALT
        assert interp.state.current_line is None

    def test_clears_variables(self):
        interp = make_interpreter()
        enter(interp, "A=3", "10 PRINT A")
        assert enter(interp, "RUN") == ["0", "", "Ready"]

    def test_clears_stacks(self):
        interp = make_interpreter()
        run_program("10 GOSUB 30\n20 END\n30 FOR I=1 TO 2\n40 END", interp=interp)
        assert interp.state.gosub_stack == [10]
        enter(interp, "RUN")
        assert interp.state.gosub_stack == [10]
        assert len(interp.state.loop_stack) == 1

    def test_error_keeps_variables(self):
        interp = make_interpreter()
        run_program("10 A=5\n20 GOTO 99", interp=interp)
        assert interp.variables["A"] == 5
        assert not interp.running
        assert enter(interp, "PRINT A") == ["5"]

    def test_run_from_line(self):
        interp = make_interpreter()
        enter(interp, '10 PRINT "A"', '20 PRINT "B"')
        assert enter(interp, "RUN 20") == ["B", "", "Ready"]

    def test_run_missing_line(self):
        interp = make_interpreter()
        enter(interp, '10 PRINT "A"')
        assert enter(interp, "RUN 50") == ["?LINE NOT FOUND: 50", "", "Ready"]

    def test_run_bad_argument(self):
        interp = make_interpreter()
        assert enter(interp, "RUN X") == ["?SYNTAX ERROR", "", "Ready"]

    def test_rerun_same_output(self):
        interp = make_interpreter()
        enter(interp, "10 FOR I=1 TO 2", "20 PRINT I", "30 NEXT")
        first = enter(interp, "RUN")
        assert enter(interp, "RUN") == first == ["1", "2", "", "Ready"]

    def test_lines_added_after_run(self):
        interp = make_interpreter()
        run_program('10 PRINT "A"', interp=interp)
        enter(interp, '5 PRINT "Z"')
        assert enter(interp, "RUN") == ["Z", "A", "", "Ready"]


# ---------------------------------------------------------------------------
# LIST and NEW
# ---------------------------------------------------------------------------

class TestList:
    @pytest.fixture
    def interp(self):
        interp = make_interpreter()
        enter(interp, "30 END", "10 PRINT 1", "20 PRINT 2")
        return interp

    def test_full_listing(self, interp):
        assert enter(interp, "LIST") == ["10 PRINT 1", "20 PRINT 2", "30 END", "", "Ready"]

    def test_repeatable(self, interp):
        assert enter(interp, "LIST") == enter(interp, "LIST")

    @pytest.mark.parametrize("arg, lines", [
        ("20", [20]),
        ("10-20", [10, 20]),
        ("15-", [20, 30]),
        ("-20", [10, 20]),
        ("25", []),
    ])
    def test_ranges(self, interp, arg, lines):
        out = enter(interp, f"LIST {arg}")
        assert [int(s.split()[0]) for s in out[:len(lines)]] == lines
        assert out[-1] == "Ready"

    def test_empty_program(self):
        assert enter(make_interpreter(), "LIST") == ["Ready"]

    def test_bad_range(self, interp):
        assert enter(interp, "LIST X") == ["?SYNTAX ERROR", "", "Ready"]


class TestNew:
    def test_resets_machine(self):
        interp = make_interpreter()
        run_program("10 DIM A(2)\n20 GOSUB 40\n30 END\n40 FOR I=1 TO 2\n50 END", interp=interp)
        assert enter(interp, "NEW") == ["Ready"]
        assert interp.listing() == []
        assert interp.variables == {}
        assert interp.state.arrays == {}
        assert interp.state.loop_stack == []
        assert interp.state.gosub_stack == []
        assert interp.pc == HALT
        assert enter(interp, "LIST") == ["Ready"]


# ---------------------------------------------------------------------------
# AUTO
# ---------------------------------------------------------------------------

class TestAuto:
    def test_defaults(self):
        interp = make_interpreter()
        enter(interp, "AUTO", "PRINT 1", "PRINT 2", "")
        assert interp.listing() == [(10, "PRINT 1"), (20, "PRINT 2")]
        assert not interp.state.auto_mode

    def test_blank_line_stores_nothing(self):
        interp = make_interpreter()
        enter(interp, "AUTO", "")
        assert interp.listing() == []
        enter(interp, "PRINT 5")
        assert interp.listing() == []

    def test_start_and_increment(self):
        interp = make_interpreter()
        enter(interp, "AUTO 100,5", "A=1", "B=2", "")
        assert interp.listing() == [(100, "A=1"), (105, "B=2")]

    def test_start_only(self):
        interp = make_interpreter()
        enter(interp, "AUTO 50", "A=1", "B=2", "")
        assert [n for n, _ in interp.listing()] == [50, 60]

    def test_zero_start_uses_default(self):
        interp = make_interpreter()
        enter(interp, "AUTO 0", "A=1", "")
        assert interp.listing() == [(10, "A=1")]

    def test_non_numeric(self):
        interp = make_interpreter()
        assert enter(interp, "AUTO X") == ["?SYNTAX ERROR", "", "Ready"]
        assert not interp.state.auto_mode

    def test_config_defaults(self):
        interp = make_interpreter(auto_start=1000, auto_increment=1)
        enter(interp, "AUTO", "A=1", "B=2", "")
        assert [n for n, _ in interp.listing()] == [1000, 1001]


# ---------------------------------------------------------------------------
# HELP
# ---------------------------------------------------------------------------

class TestHelp:
    def test_topic(self):
        interp = make_interpreter()
        assert enter(interp, "HELP print") == [
            "PRINT <expr>[,|;]...",
            "Prints data to the screen.",
            "",
            "Ready",
        ]

    def test_index(self):
        out = enter(make_interpreter(), "HELP")
        assert out[0] == "Available commands:"
        names = out[1].split(", ")
        assert names == sorted(names)
        assert "GOSUB" in names
        assert out[-1] == "Ready"

    def test_unknown_topic(self):
        out = enter(make_interpreter(), "HELP XYZZY")
        assert out == ["?No help found for XYZZY", "", "Ready"]
