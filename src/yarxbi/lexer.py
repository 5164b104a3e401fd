"""
Lexer for yarxbi BASIC

Turns program text into ProgramLine records: one per numbered source line,
each holding the positioned tokens that follow the line number.

Features:
- Terminal scanning delegated to lark's basic lexer
- Keywords are upper-case and only match whole words (TOTAL is a variable)
- REM swallows the rest of its line verbatim as a COMMENT token
- Binary vs unary minus resolved here, so the expression parser sees
  two distinct operator tokens
"""

import re
from typing import Dict, Iterator, List, Optional

from lark import Lark
from lark.exceptions import UnexpectedCharacters

from .token_types import TT, Tok, is_keyword, is_operator
from .types import ProgramLine

# ============================================================================
# Grammar
# ============================================================================

# Each terminal is named after its TT member. The start rule only exists so
# lark keeps every terminal; the parser itself is never run.
GRAMMAR = r"""
start: _item*

_item: NUMBER | STRING | VARIABLE
     | EQ | NEQ | LTE | GTE | LT | GT
     | STAR | SLASH | PLUS | MINUS | BANG | LPAR | RPAR
     | REM | GOTO | LET | PRINT | INPUT | IF | THEN
     | FOR | TO | STEP | NEXT | WHILE | WEND

NUMBER: /\d+(\.\d+)?/
STRING: /"[^"\n]*"/
VARIABLE: /[A-Za-z_][A-Za-z0-9_]*/

NEQ: "<>"
LTE: "<="
GTE: ">="
EQ: "="
LT: "<"
GT: ">"
STAR: "*"
SLASH: "/"
PLUS: "+"
MINUS: "-"
BANG: "!"
LPAR: "("
RPAR: ")"

REM: "REM"
GOTO: "GOTO"
LET: "LET"
PRINT: "PRINT"
INPUT: "INPUT"
IF: "IF"
THEN: "THEN"
FOR: "FOR"
TO: "TO"
STEP: "STEP"
NEXT: "NEXT"
WHILE: "WHILE"
WEND: "WEND"

%import common.WS_INLINE
%ignore WS_INLINE
"""

_LARK: Optional[Lark] = None

def _get_lark() -> Lark:
    global _LARK

    if _LARK is None:
        _LARK = Lark(GRAMMAR, parser="lalr", lexer="basic")

    return _LARK

_REM_LINE_RE = re.compile(r"[ \t]*(\d+)[ \t]*(REM)(?![A-Za-z0-9_])(.*)", re.S)

# ============================================================================
# Lexer Implementation
# ============================================================================

class Lexer:
    """
    Line-oriented BASIC lexer.

    Every non-blank source line must start with an integer line number;
    a line holding only its number becomes a line with no tokens.
    """

    KEYWORDS = {
        'REM': TT.REM,
        'GOTO': TT.GOTO,
        'LET': TT.LET,
        'PRINT': TT.PRINT,
        'INPUT': TT.INPUT,
        'IF': TT.IF,
        'THEN': TT.THEN,
        'FOR': TT.FOR,
        'TO': TT.TO,
        'STEP': TT.STEP,
        'NEXT': TT.NEXT,
        'WHILE': TT.WHILE,
        'WEND': TT.WEND,
    }

    def __init__(self, source: str):
        self.source = source
        self.lines: List[ProgramLine] = []
        self.seen: Dict[int, int] = {}

    # ========================================================================
    # Main Tokenization
    # ========================================================================

    def tokenize(self) -> List[ProgramLine]:
        """Tokenize entire source, return program lines in text order"""
        for lineno, text in enumerate(self.source.splitlines(), start=1):
            if not text.strip():
                continue

            program_line = self.tokenize_line(text, lineno)

            if program_line.number in self.seen:
                raise LexError(
                    f"Duplicate line number {program_line.number} "
                    f"(first used on line {self.seen[program_line.number]})",
                    line=lineno,
                    column=len(text) - len(text.lstrip()) + 1,
                )

            self.seen[program_line.number] = lineno
            self.lines.append(program_line)

        return self.lines

    def tokenize_line(self, text: str, line: int = 1) -> ProgramLine:
        """Tokenize one numbered line"""
        rem = _REM_LINE_RE.match(text)
        if rem is not None:
            return ProgramLine(int(rem.group(1)), (
                Tok(TT.REM, rem.group(2), line, rem.start(2) + 1),
                Tok(TT.COMMENT, rem.group(3).strip(), line, rem.start(3) + 1),
            ))

        tokens = list(self.scan(text, line))

        if not tokens:
            raise LexError("Line must begin with a line number", line=line, column=1)

        head = tokens[0]
        if head.type is not TT.NUMBER or not str(head.value).isdigit():
            raise LexError("Line must begin with a line number", line=line, column=head.column)

        body = tokens[1:]
        self.mark_unary(body)

        for tok in body:
            if tok.type is TT.NUMBER:
                tok.value = float(tok.value)

        return ProgramLine(int(head.value), tuple(body))

    # ========================================================================
    # Token Scanners
    # ========================================================================

    def scan(self, text: str, line: int) -> Iterator[Tok]:
        """Run the lark lexer over one line; NUMBER values stay raw text"""
        try:
            for raw in _get_lark().lex(text):
                yield self.emit(raw.type, str(raw), line, raw.column)
        except UnexpectedCharacters as exc:
            if exc.char == '"':
                raise LexError("Unterminated string", line=line, column=exc.column) from exc
            raise LexError(
                f"Unexpected character '{exc.char}'", line=line, column=exc.column
            ) from exc

    def emit(self, kind: str, text: str, line: int, column: int) -> Tok:
        token_type = TT[kind]

        if token_type is TT.STRING:
            return Tok(token_type, text[1:-1], line, column)

        return Tok(token_type, text, line, column)

    @staticmethod
    def mark_unary(tokens: List[Tok]) -> None:
        """Retype '-' as UMINUS wherever it opens an operand."""
        prev: Optional[Tok] = None

        for idx, tok in enumerate(tokens):
            if tok.type is TT.MINUS and (
                prev is None
                or prev.type is TT.LPAR
                or is_operator(prev)
                or is_keyword(prev)
                # NEXT v <step>: the step expression starts after the variable.
                or (idx == 2 and tokens[0].type is TT.NEXT and prev.type is TT.VARIABLE)
            ):
                tok.type = TT.UMINUS
            prev = tok

class LexError(Exception):
    """Lexical analysis error"""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line is None:
            return self.message
        if self.column is None:
            return f"{self.message} (line {self.line})"
        return f"{self.message} (line {self.line}, col {self.column})"

def tokenize(source: str) -> List[ProgramLine]:
    """Convenience function to tokenize a whole program"""
    return Lexer(source).tokenize()

def tokenize_line(text: str, line: int = 1) -> ProgramLine:
    return Lexer(text).tokenize_line(text, line)
