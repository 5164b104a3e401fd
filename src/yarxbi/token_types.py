"""
Token Types for the yarxbi interpreter

Shared between the lexer, the expression parser and the executor to avoid
circular dependencies. Also carries the operator taxonomy (precedence and
associativity) the expression parser climbs over.
"""

from typing import Any
from dataclasses import dataclass
from enum import Enum, auto


class TT(Enum):
    """Token Types - mirrors lexer terminals"""

    # Literals
    NUMBER = auto()
    STRING = auto()
    VARIABLE = auto()
    COMMENT = auto()

    # Comparison
    EQ = auto()  # = (also the assignment sign in LET/FOR)
    NEQ = auto()  # <>
    LT = auto()
    GT = auto()
    LTE = auto()
    GTE = auto()

    # Arithmetic
    STAR = auto()
    SLASH = auto()
    PLUS = auto()
    MINUS = auto()

    # Unary
    UMINUS = auto()
    BANG = auto()  # !

    # Punctuation
    LPAR = auto()
    RPAR = auto()

    # Keywords
    REM = auto()
    GOTO = auto()
    LET = auto()
    PRINT = auto()
    INPUT = auto()
    IF = auto()
    THEN = auto()
    FOR = auto()
    TO = auto()
    STEP = auto()
    NEXT = auto()
    WHILE = auto()
    WEND = auto()


class Assoc(Enum):
    LEFT = auto()
    RIGHT = auto()


@dataclass
class Tok:
    """Token with position info"""

    type: TT
    value: Any
    line: int = 0
    column: int = 0

    def __repr__(self):
        return f"Tok({self.type.name}, {self.value!r}, {self.line}:{self.column})"


KEYWORDS = frozenset({
    TT.REM, TT.GOTO, TT.LET, TT.PRINT, TT.INPUT, TT.IF, TT.THEN,
    TT.FOR, TT.TO, TT.STEP, TT.NEXT, TT.WHILE, TT.WEND,
})

# An expression stops (without consuming it) at any of these.
EXPRESSION_BOUNDARY = frozenset({TT.THEN, TT.TO, TT.STEP})

_VALUES = frozenset({TT.NUMBER, TT.STRING, TT.VARIABLE})
_UNARY = frozenset({TT.UMINUS, TT.BANG})
_COMPARISON = frozenset({TT.EQ, TT.NEQ, TT.LT, TT.GT, TT.LTE, TT.GTE})
_ARITHMETIC = frozenset({TT.STAR, TT.SLASH, TT.PLUS, TT.MINUS})
_OPERATORS = _UNARY | _COMPARISON | _ARITHMETIC

_PRECEDENCE = {
    TT.UMINUS: 12,
    TT.BANG: 12,
    TT.STAR: 10,
    TT.SLASH: 10,
    TT.PLUS: 8,
    TT.MINUS: 8,
}


def is_value(tok: Tok) -> bool:
    return tok.type in _VALUES


def is_operator(tok: Tok) -> bool:
    return tok.type in _OPERATORS


def is_unary_operator(tok: Tok) -> bool:
    return tok.type in _UNARY


def is_comparison_operator(tok: Tok) -> bool:
    return tok.type in _COMPARISON


def is_binary_operator(tok: Tok) -> bool:
    return is_operator(tok) and not is_unary_operator(tok)


def is_keyword(tok: Tok) -> bool:
    return tok.type in KEYWORDS


def precedence(tok: Tok) -> int:
    """Binding strength of an operator; higher binds tighter."""
    if not is_operator(tok):
        raise ValueError(f"Not an operator: {tok.type.name}")

    return _PRECEDENCE.get(tok.type, 4)


def associativity(tok: Tok) -> Assoc:
    if is_unary_operator(tok):
        return Assoc.RIGHT

    return Assoc.LEFT
