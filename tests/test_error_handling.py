from __future__ import annotations

import pytest

from tests.support.harness import (
    BasicExpressionError,
    BasicJumpError,
    BasicLoopError,
    BasicNameError,
    BasicRuntimeError,
    BasicSyntaxError,
    BasicTypeError,
    Context,
    LexError,
    run_for_error,
)

HIERARCHY = [
    pytest.param(BasicSyntaxError, BasicRuntimeError, id="syntax"),
    pytest.param(BasicJumpError, BasicRuntimeError, id="jump"),
    pytest.param(BasicLoopError, BasicRuntimeError, id="loop"),
    pytest.param(BasicExpressionError, BasicRuntimeError, id="expression"),
    pytest.param(BasicTypeError, BasicExpressionError, id="type"),
    pytest.param(BasicNameError, BasicExpressionError, id="name"),
]

LOCATED = [
    pytest.param('10 PRINT "a" - 1', (10, 14, "Cannot subtract string 'a' and number 1"), id="operator-column"),
    pytest.param("10 PRINT (1 + 2", (10, 10, "Mismatched parenthesis in expression"), id="open-paren-column"),
    pytest.param("10 PRINT 1 +", (10, 12, "Operator + requires 2 operands"), id="missing-operand"),
    pytest.param("10 PRINT -", (10, 10, "Operator - requires an operand"), id="missing-unary-operand"),
    pytest.param("10 PRINT 1 2", (10, 10, "Invalid expression"), id="leftover-operand"),
    pytest.param("10 LET x 1", (10, 10, "Invalid syntax for LET"), id="let-syntax"),
    pytest.param("10 GOTO", (10, 4, "GOTO requires a target line number"), id="goto-no-target"),
    pytest.param("10 GOTO x", (10, 9, "GOTO target must be a line number"), id="goto-bad-target"),
    pytest.param("10 IF 1 = 1 THEN 5", (10, 18, "Invalid target line for IF"), id="if-bad-target"),
    pytest.param("10 NEXT i", (10, 4, "FOR loop is out of context"), id="next-no-for"),
    pytest.param("10 WHILE 2\n20 WEND", (10, 10, "WHILE condition must be a Boolean"), id="while-type"),
    pytest.param("10 PRINT !1", (10, 10, "Cannot apply unary not to non-Boolean values"), id="bang-type"),
]


@pytest.mark.parametrize("cls, parent", HIERARCHY)
def test_error_hierarchy(cls: type, parent: type) -> None:
    assert issubclass(cls, parent)


@pytest.mark.parametrize("source, triple", LOCATED)
def test_errors_carry_line_and_column(source: str, triple: tuple) -> None:
    assert run_for_error(source).as_triple() == triple


def test_locate_only_fills_missing_fields() -> None:
    err = BasicTypeError("boom", column=7)

    assert err.locate(30, 99) is err
    assert err.as_triple() == (30, 7, "boom")

    err.locate(40, 1)
    assert err.as_triple() == (30, 7, "boom")


def test_runtime_error_str_includes_location() -> None:
    assert str(BasicRuntimeError("boom")) == "boom"
    assert str(BasicRuntimeError("boom", line=10)) == "boom (line 10)"
    assert str(BasicRuntimeError("boom", line=10, column=4)) == "boom (line 10, col 4)"


def test_lex_error_str_includes_location() -> None:
    assert str(LexError("bad")) == "bad"
    assert str(LexError("bad", line=2, column=5)) == "bad (line 2, col 5)"


def test_context_get_undefined_raises_name_error() -> None:
    context = Context()

    with pytest.raises(BasicNameError) as exc_info:
        context.get("missing")

    assert exc_info.value.message == "Invalid variable reference missing in expression"
