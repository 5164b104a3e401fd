from __future__ import annotations

from typing import Optional, Sequence

from ..token_types import TT, Tok
from ..types import BasicSyntaxError, ProgramLine

class TokenCursor:
    """Forward-only reader over the tokens of one program line.

    `pos` is a plain index so loop records can remember where an expression
    starts and re-open a cursor there later.
    """

    def __init__(self, tokens: Sequence[Tok], pos: int = 0):
        self.tokens = tokens
        self.pos = pos

    @classmethod
    def over(cls, line: ProgramLine, pos: int = 0) -> 'TokenCursor':
        return cls(line.tokens, pos)

    def peek(self) -> Optional[Tok]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def next(self) -> Optional[Tok]:
        tok = self.peek()
        if tok is not None:
            self.pos += 1
        return tok

    def at_end(self) -> bool:
        return self.pos >= len(self.tokens)

    def column(self) -> Optional[int]:
        """Column of the next token, or of the last one once exhausted."""
        tok = self.peek()
        if tok is not None:
            return tok.column
        if self.tokens:
            return self.tokens[-1].column
        return None

def expect(cursor: TokenCursor, kind: TT, message: str) -> Tok:
    column = cursor.column()
    tok = cursor.next()

    if tok is None or tok.type is not kind:
        raise BasicSyntaxError(message, column=column)

    return tok

def expect_variable(cursor: TokenCursor, message: str) -> str:
    return str(expect(cursor, TT.VARIABLE, message).value)

def expect_end(cursor: TokenCursor, message: str) -> None:
    if not cursor.at_end():
        raise BasicSyntaxError(message, column=cursor.column())
