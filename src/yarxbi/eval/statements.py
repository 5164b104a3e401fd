"""Straight-line statements plus the two jump statements (GOTO, IF)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..token_types import TT, Tok
from ..types import BasicBool, BasicSyntaxError, BasicText, BasicTypeError, ProgramLine
from ..utils import stringify
from .common import TokenCursor, expect, expect_end, expect_variable
from .expr import parse_and_eval

if TYPE_CHECKING:
    from ..executor import Executor

def eval_rem(_ex: 'Executor', _line: ProgramLine, _cursor: TokenCursor, _keyword: Tok) -> Optional[int]:
    return None

def _line_target(cursor: TokenCursor, keyword: Tok) -> Tok:
    statement = keyword.type.name
    tok = cursor.next()

    if tok is None:
        raise BasicSyntaxError(f"{statement} requires a target line number", column=keyword.column)
    if tok.type is not TT.NUMBER:
        raise BasicSyntaxError(f"{statement} target must be a line number", column=tok.column)

    return tok

def eval_goto(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, keyword: Tok) -> Optional[int]:
    target = _line_target(cursor, keyword)
    expect_end(cursor, "Invalid syntax for GOTO")

    return ex.index.resolve(target.value, "GOTO", column=target.column)

def eval_let(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, _keyword: Tok) -> Optional[int]:
    name = expect_variable(cursor, "Invalid syntax for LET")
    expect(cursor, TT.EQ, "Invalid syntax for LET")
    value = parse_and_eval(cursor, ex.context)
    expect_end(cursor, "Invalid syntax for LET")

    # Rebinding never looks at the previous type.
    ex.context.define(name, value)
    return None

def eval_print(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, _keyword: Tok) -> Optional[int]:
    value = parse_and_eval(cursor, ex.context)
    expect_end(cursor, "Invalid syntax for PRINT")

    ex.stdout.write(stringify(value))
    ex.stdout.flush()
    return None

def eval_input(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, _keyword: Tok) -> Optional[int]:
    name = expect_variable(cursor, "INPUT must be followed by a variable name")
    expect_end(cursor, "Invalid syntax for INPUT")

    # The line is consumed even when the variable already has a value.
    raw = ex.stdin.readline()
    if not ex.context.has(name):
        ex.context.define(name, BasicText(raw.strip()))
    return None

def eval_if(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, keyword: Tok) -> Optional[int]:
    column = cursor.column()
    cond = parse_and_eval(cursor, ex.context)
    expect(cursor, TT.THEN, "Invalid syntax for IF")
    target = _line_target(cursor, keyword)
    expect_end(cursor, "Invalid syntax for IF")

    if not isinstance(cond, BasicBool):
        raise BasicTypeError("IF condition must be a Boolean", column=column)

    if not cond.value:
        return None

    return ex.index.resolve(target.value, "IF", column=target.column)
