from __future__ import annotations

from textwrap import dedent

import pytest

from tests.support.harness import (
    BasicLoopError,
    BasicNumber,
    BasicSyntaxError,
    BasicTypeError,
    run_for_error,
    run_for_state,
    run_program_case,
)

SCENARIOS = [
    pytest.param(
        dedent(
            """\
            10 FOR i = 1 TO 3
            20 PRINT i
            30 NEXT i
        """
        ),
        "12",
        None,
        id="for-end-is-exclusive",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 3 TO 1
            20 PRINT i
            30 NEXT i
        """
        ),
        "32",
        None,
        id="for-descending",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 1 TO 1
            20 PRINT i
            30 NEXT i
        """
        ),
        "1",
        None,
        id="for-equal-bounds-runs-once",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 0 TO 10 STEP 5
            20 PRINT i
            30 NEXT i 5
        """
        ),
        "05",
        None,
        id="for-step-from-next-line",
    ),
    pytest.param(
        dedent(
            """\
            10 LET s = -5
            20 FOR i = 10 TO 0 STEP s
            30 PRINT i
            40 NEXT i s
        """
        ),
        "105",
        None,
        id="for-negative-step",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 10 TO 0 STEP -5
            20 PRINT i
            30 NEXT i -5
        """
        ),
        "105",
        None,
        id="for-negative-literal-step",
    ),
    pytest.param(
        dedent(
            """\
            10 LET n = 5
            20 FOR i = 1 TO n
            30 PRINT i
            40 LET n = 3
            50 NEXT i
        """
        ),
        "12",
        None,
        id="for-bound-reevaluated",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 1 TO 3
            20 FOR j = 1 TO 3
            30 PRINT i
            40 PRINT j
            50 NEXT j
            60 NEXT i
        """
        ),
        "11122122",
        None,
        id="for-nested",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 2 TO 5
            20 PRINT i
            30 GOTO 50
            40 NEXT i
            50 PRINT "out"
            60 NEXT i
        """
        ),
        "2out3out4out",
        None,
        id="for-record-survives-goto",
    ),
    pytest.param(
        dedent(
            """\
            10 FOR i = 1 TO 2
            20 FOR i = 0 TO 2
            30 PRINT i
            40 NEXT i
            50 NEXT i
        """
        ),
        "01",
        BasicLoopError,
        id="for-same-variable-replaces-record",
    ),
    pytest.param(
        dedent(
            """\
            10 WHILE 1 = 2
            20 PRINT "body"
            30 WEND
            40 PRINT "done"
        """
        ),
        "bodydone",
        None,
        id="while-body-runs-once",
    ),
    pytest.param(
        dedent(
            """\
            10 LET n = 1
            20 WHILE n <= 3
            30 PRINT n
            40 LET n = n + 1
            50 WEND
        """
        ),
        "123",
        None,
        id="while-counts",
    ),
    pytest.param(
        dedent(
            """\
            10 LET i = 0
            20 WHILE i < 2
            30 PRINT i
            40 LET j = 0
            50 WHILE j < 2
            60 PRINT j
            70 LET j = j + 1
            80 WEND
            90 LET i = i + 1
            100 WEND
        """
        ),
        "001101",
        None,
        id="while-nested",
    ),
    pytest.param(
        dedent(
            """\
            10 LET k = 0
            20 WHILE k = 0
            30 GOTO 50
            40 WEND
            50 LET k = 1
            60 WEND
            70 PRINT "done"
        """
        ),
        "done",
        None,
        id="while-any-wend-closes-top",
    ),
    pytest.param("10 NEXT i", "", BasicLoopError, id="next-without-for"),
    pytest.param("10 WEND", "", BasicLoopError, id="wend-without-while"),
    pytest.param("10 WHILE 1\n20 WEND", "", BasicTypeError, id="while-non-boolean"),
    pytest.param('10 FOR i = "a" TO 3', "", BasicTypeError, id="for-text-start"),
    pytest.param("10 FOR i = 1 TO 1 = 1", "", BasicTypeError, id="for-bool-end"),
    pytest.param("10 FOR i = 1", "", BasicSyntaxError, id="for-missing-to"),
    pytest.param("10 FOR = 1 TO 3", "", BasicSyntaxError, id="for-missing-variable"),
    pytest.param("10 FOR i = 1 TO 3 STEP", "", BasicSyntaxError, id="for-empty-step"),
    pytest.param(
        "10 FOR i = 0 TO 10 STEP 5\n20 NEXT i",
        "",
        BasicSyntaxError,
        id="next-missing-step",
    ),
    pytest.param(
        '10 FOR i = 1 TO 3\n20 LET i = "a"\n30 NEXT i',
        "",
        BasicTypeError,
        id="next-text-counter",
    ),
    pytest.param("10 NEXT", "", BasicSyntaxError, id="next-missing-variable"),
    pytest.param("10 WHILE 1 = 1\n20 WEND 1", "", BasicSyntaxError, id="wend-trailing-token"),
]


@pytest.mark.parametrize("source, expected_output, expected_exc", SCENARIOS)
def test_loops(source: str, expected_output: str, expected_exc) -> None:
    run_program_case(source, expected_output, expected_exc)


def test_for_counter_keeps_last_body_value() -> None:
    executor = run_for_state("10 FOR i = 1 TO 3\n20 NEXT i")

    assert executor.context.vars["i"] == BasicNumber(2.0)
    assert executor.context.for_loops == {}


def test_for_record_replaced_by_same_variable() -> None:
    err = run_for_error(
        dedent(
            """\
            10 FOR i = 1 TO 2
            20 FOR i = 0 TO 2
            30 NEXT i
            40 NEXT i
        """
        )
    )

    assert err.as_triple() == (40, 4, "FOR loop is out of context")


def test_goto_out_of_while_leaves_record() -> None:
    executor = run_for_state(
        dedent(
            """\
            10 LET n = 0
            20 WHILE n < 5
            30 LET n = n + 1
            40 IF n = 2 THEN 60
            50 WEND
            60 PRINT n
        """
        )
    )

    assert executor.stdout.getvalue() == "2"
    assert len(executor.context.while_stack) == 1
    assert executor.context.while_stack[0].line_number == 20


def test_wend_without_while_location() -> None:
    err = run_for_error('10 PRINT "x"\n20 WEND')

    assert err.as_triple() == (20, 4, "WEND without matching WHILE")


def test_bound_error_reports_for_line() -> None:
    err = run_for_error(
        dedent(
            """\
            10 LET n = 3
            20 FOR i = 1 TO n
            30 LET n = "x"
            40 NEXT i
        """
        )
    )

    assert isinstance(err, BasicTypeError)
    assert err.line == 40
    assert err.message == "FOR end value must be a number"
