from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from typing_extensions import TypeAlias

from .token_types import Tok

# ---------- Value Model ----------

@dataclass(frozen=True)
class BasicNumber:
    value: float
    def __repr__(self) -> str:
        v = self.value
        return str(int(v)) if v.is_integer() else str(v)

@dataclass(frozen=True)
class BasicText:
    value: str
    def __repr__(self) -> str:
        return f'"{self.value}"'

@dataclass(frozen=True)
class BasicBool:
    value: bool
    def __repr__(self) -> str:
        return "true" if self.value else "false"

BasicValue: TypeAlias = BasicNumber | BasicText | BasicBool

# ---------- Program model ----------

@dataclass(frozen=True)
class ProgramLine:
    number: int
    tokens: Tuple[Tok, ...] = ()

@dataclass
class ForLoop:
    """Active FOR record; the bound is re-read from `bound_pos` on every NEXT."""
    line_number: int
    bound_pos: int
    ascending: bool
    has_step: bool

@dataclass
class WhileLoop:
    line_number: int
    cond_pos: int

class Context:
    """Mutable state of one program run: bindings plus loop bookkeeping."""

    def __init__(self) -> None:
        self.vars: Dict[str, BasicValue] = {}
        self.for_loops: Dict[str, ForLoop] = {}
        self.while_stack: List[WhileLoop] = []

    def define(self, name: str, val: BasicValue) -> None:
        self.vars[name] = val

    def get(self, name: str) -> BasicValue:
        if name in self.vars:
            return self.vars[name]

        raise BasicNameError(f"Invalid variable reference {name} in expression")

    def has(self, name: str) -> bool:
        return name in self.vars

# ---------- Exceptions ----------

class BasicRuntimeError(Exception):
    line: Optional[int]
    column: Optional[int]

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    def locate(self, line: Optional[int], column: Optional[int]) -> 'BasicRuntimeError':
        """Fill in whichever half of the location is still unknown."""
        if self.line is None:
            self.line = line
        if self.column is None:
            self.column = column
        return self

    def as_triple(self) -> Tuple[Optional[int], Optional[int], str]:
        return (self.line, self.column, self.message)

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        msg = self.message

        if self.line is None:
            return msg

        if self.column is None:
            return f"{msg} (line {self.line})"

        return f"{msg} (line {self.line}, col {self.column})"

class BasicSyntaxError(BasicRuntimeError):
    pass

class BasicJumpError(BasicRuntimeError):
    pass

class BasicLoopError(BasicRuntimeError):
    pass

class BasicExpressionError(BasicRuntimeError):
    pass

class BasicTypeError(BasicExpressionError):
    pass

class BasicNameError(BasicExpressionError):
    pass
