"""FOR/NEXT and WHILE/WEND.

Loop records keep a token position into the header line rather than a
computed value: NEXT re-reads the TO bound and WEND re-reads the WHILE
condition from source each time, so both see variables changed in the body.

Records are never cleaned up when a GOTO leaves a loop early; a stale FOR
record stays live until the next FOR for the same name replaces it, and a
stale WHILE record sits on the stack until some WEND pops it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..token_types import TT, Tok
from ..types import (
    BasicBool,
    BasicLoopError,
    BasicNameError,
    BasicNumber,
    BasicRuntimeError,
    BasicSyntaxError,
    BasicTypeError,
    BasicValue,
    ForLoop,
    ProgramLine,
    WhileLoop,
)
from .common import TokenCursor, expect, expect_end, expect_variable
from .expr import parse_and_eval, parse_expression

if TYPE_CHECKING:
    from ..executor import Executor

def _require_number(value: BasicValue, message: str, column: Optional[int]) -> float:
    if isinstance(value, BasicNumber):
        return value.value
    raise BasicTypeError(message, column=column)

def _require_bool(value: BasicValue, message: str, column: Optional[int]) -> bool:
    if isinstance(value, BasicBool):
        return value.value
    raise BasicTypeError(message, column=column)

def _reeval_header(ex: 'Executor', home: ProgramLine, pos: int) -> BasicValue:
    """Evaluate the expression starting at `pos` in a loop header line."""
    try:
        return parse_and_eval(TokenCursor.over(home, pos), ex.context)
    except BasicRuntimeError as err:
        err.locate(home.number, None)
        raise

def eval_for(ex: 'Executor', line: ProgramLine, cursor: TokenCursor, _keyword: Tok) -> Optional[int]:
    name = expect_variable(cursor, "Invalid syntax for FOR")
    expect(cursor, TT.EQ, "Invalid syntax for FOR")

    start_col = cursor.column()
    start = parse_and_eval(cursor, ex.context)
    expect(cursor, TT.TO, "Invalid syntax for FOR")

    bound_pos = cursor.pos
    end_col = cursor.column()
    end = parse_and_eval(cursor, ex.context)

    has_step = False
    if not cursor.at_end():
        step_tok = expect(cursor, TT.STEP, "Invalid syntax for FOR")
        if cursor.at_end():
            raise BasicSyntaxError("STEP must be followed by an expression", column=step_tok.column)
        # NEXT evaluates the step; here it only has to parse.
        parse_expression(cursor)
        expect_end(cursor, "Invalid syntax for FOR")
        has_step = True

    start_num = _require_number(start, "FOR start value must be a number", start_col)
    end_num = _require_number(end, "FOR end value must be a number", end_col)

    ex.context.define(name, start)
    # Replaces any record for the same name; loops are not stacked per variable.
    ex.context.for_loops[name] = ForLoop(
        line_number=line.number,
        bound_pos=bound_pos,
        ascending=start_num < end_num,
        has_step=has_step,
    )
    return None

def eval_next(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, keyword: Tok) -> Optional[int]:
    name_col = cursor.column()
    name = expect_variable(cursor, "Invalid syntax for NEXT")

    floop = ex.context.for_loops.get(name)
    if floop is None:
        raise BasicLoopError("FOR loop is out of context", column=keyword.column)

    if not ex.context.has(name):
        raise BasicNameError(f"Invalid variable expression {name}", column=name_col)
    current = _require_number(
        ex.context.get(name), f"Variable {name} called by NEXT is not a number", name_col
    )

    home_idx = ex.index.resolve(floop.line_number, "NEXT", column=keyword.column)
    home = ex.index[home_idx]
    end = _require_number(
        _reeval_header(ex, home, floop.bound_pos), "FOR end value must be a number", keyword.column
    )

    if floop.has_step:
        if cursor.at_end():
            raise BasicSyntaxError(
                f"NEXT {name} must give the step of a FOR loop declared with STEP",
                column=name_col,
            )
        step_col = cursor.column()
        step = _require_number(parse_and_eval(cursor, ex.context), "STEP value must be a number", step_col)
        expect_end(cursor, "Invalid syntax for NEXT")
    else:
        expect_end(cursor, "Invalid syntax for NEXT")
        step = 1.0 if floop.ascending else -1.0

    nxt = current + step
    again = nxt < end if floop.ascending else nxt > end

    if again:
        ex.context.define(name, BasicNumber(nxt))
        return home_idx + 1

    del ex.context.for_loops[name]
    return None

def eval_while(ex: 'Executor', line: ProgramLine, cursor: TokenCursor, keyword: Tok) -> Optional[int]:
    cond_pos = cursor.pos
    column = cursor.column() or keyword.column
    cond = parse_and_eval(cursor, ex.context)
    expect_end(cursor, "Invalid syntax for WHILE")

    # Type-checked only: the body always runs once, WEND decides the rest.
    _require_bool(cond, "WHILE condition must be a Boolean", column)

    ex.context.while_stack.append(WhileLoop(line_number=line.number, cond_pos=cond_pos))
    return None

def eval_wend(ex: 'Executor', _line: ProgramLine, cursor: TokenCursor, keyword: Tok) -> Optional[int]:
    expect_end(cursor, "Invalid syntax for WEND")

    if not ex.context.while_stack:
        raise BasicLoopError("WEND without matching WHILE", column=keyword.column)

    top = ex.context.while_stack[-1]
    home_idx = ex.index.resolve(top.line_number, "WEND", column=keyword.column)
    home = ex.index[home_idx]
    again = _require_bool(
        _reeval_header(ex, home, top.cond_pos), "WHILE condition must be a Boolean", keyword.column
    )

    if again:
        return home_idx + 1

    ex.context.while_stack.pop()
    return None
