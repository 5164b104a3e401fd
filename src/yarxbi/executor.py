"""
Control-flow executor: the program-counter loop that drives one run.

Each cycle fetches the line at the program counter, dispatches on its
leading keyword and either falls through to the next line or takes the
jump the statement handler returned.
"""

from __future__ import annotations

import sys
from typing import Callable, Dict, Iterable, Optional, TextIO

from .eval.common import TokenCursor
from .eval.loops import eval_for, eval_next, eval_wend, eval_while
from .eval.statements import eval_goto, eval_if, eval_input, eval_let, eval_print, eval_rem
from .line_index import LineIndex
from .token_types import TT, Tok
from .types import BasicRuntimeError, BasicSyntaxError, Context, ProgramLine

SUCCESS_MESSAGE = "\nCompleted Successfully"

StatementFn = Callable[['Executor', ProgramLine, TokenCursor, Tok], Optional[int]]

STATEMENTS: Dict[TT, StatementFn] = {
    TT.REM: eval_rem,
    TT.GOTO: eval_goto,
    TT.LET: eval_let,
    TT.PRINT: eval_print,
    TT.INPUT: eval_input,
    TT.IF: eval_if,
    TT.FOR: eval_for,
    TT.NEXT: eval_next,
    TT.WHILE: eval_while,
    TT.WEND: eval_wend,
}


class Executor:
    """Owns the state of a single run; build a new one per program run."""

    def __init__(
        self,
        lines: Iterable[ProgramLine],
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
    ):
        self.index = LineIndex(lines)
        self.context = Context()
        self.stdin: TextIO = stdin if stdin is not None else sys.stdin
        self.stdout: TextIO = stdout if stdout is not None else sys.stdout
        self.pc = 0

    def run(self) -> str:
        while self.pc < len(self.index):
            jump = self.step(self.index[self.pc])
            self.pc = self.pc + 1 if jump is None else jump

        return SUCCESS_MESSAGE

    def step(self, line: ProgramLine) -> Optional[int]:
        """Execute one line; return the jump target or None to fall through."""
        if not line.tokens:
            return None

        keyword = line.tokens[0]
        cursor = TokenCursor.over(line, 1)

        try:
            handler = STATEMENTS.get(keyword.type)
            if handler is None:
                raise BasicSyntaxError("Invalid syntax", column=keyword.column)
            return handler(self, line, cursor, keyword)
        except BasicRuntimeError as err:
            err.locate(line.number, keyword.column)
            raise


def execute(
    lines: Iterable[ProgramLine],
    stdin: Optional[TextIO] = None,
    stdout: Optional[TextIO] = None,
) -> str:
    """Run a tokenized program to completion.

    Returns the success message; the first failure propagates as a
    BasicRuntimeError whose as_triple() gives (line, column, message).
    """
    return Executor(lines, stdin=stdin, stdout=stdout).run()
