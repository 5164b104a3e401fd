from __future__ import annotations

import math
import operator
from typing import Callable, Dict

from ..token_types import TT
from ..types import BasicBool, BasicNumber, BasicText, BasicTypeError, BasicValue
from ..utils import format_number, parse_number

def _divide(lhs: float, rhs: float) -> float:
    # IEEE semantics: x/0 is a signed infinity, 0/0 is NaN, never an error.
    try:
        return lhs / rhs
    except ZeroDivisionError:
        if lhs == 0 or math.isnan(lhs):
            return math.nan
        return math.copysign(math.inf, lhs) * math.copysign(1.0, rhs)

_ARITHMETIC: Dict[TT, Callable[[float, float], float]] = {
    TT.PLUS: operator.add,
    TT.MINUS: operator.sub,
    TT.STAR: operator.mul,
    TT.SLASH: _divide,
}

_VERBS = {
    TT.PLUS: "add",
    TT.MINUS: "subtract",
    TT.STAR: "multiply",
    TT.SLASH: "divide",
}

_MISMATCH = {
    TT.PLUS: "Can only add numbers or concatenate strings",
    TT.MINUS: "Can only subtract numbers",
    TT.STAR: "Can only multiply numbers",
    TT.SLASH: "Can only divide numbers",
}

def apply_unary(op: TT, operand: BasicValue) -> BasicValue:
    match op:
        case TT.UMINUS:
            if isinstance(operand, BasicNumber):
                return BasicNumber(-operand.value)
            raise BasicTypeError("Cannot negate non-numeric values")
        case TT.BANG:
            if isinstance(operand, BasicBool):
                return BasicBool(not operand.value)
            raise BasicTypeError("Cannot apply unary not to non-Boolean values")

    raise BasicTypeError(f"Unsupported unary operator {op.name}")

def apply_binary_operator(op: TT, lhs: BasicValue, rhs: BasicValue) -> BasicValue:
    fn = _ARITHMETIC.get(op)
    if fn is None:
        raise BasicTypeError(f"Unknown operator {op.name}")

    verb = _VERBS[op]

    match (lhs, rhs):
        case (BasicNumber(value=a), BasicNumber(value=b)):
            return BasicNumber(fn(a, b))
        case (BasicText(value=a), BasicText(value=b)) if op is TT.PLUS:
            return BasicText(a + b)
        case (BasicNumber(value=a), BasicText(value=b)):
            num = parse_number(b)
            if num is None:
                raise BasicTypeError(f"Cannot {verb} number {format_number(a)} and string {b!r}")
            return BasicNumber(fn(a, num))
        case (BasicText(value=a), BasicNumber(value=b)):
            num = parse_number(a)
            if num is None:
                raise BasicTypeError(f"Cannot {verb} string {a!r} and number {format_number(b)}")
            return BasicNumber(fn(num, b))

    raise BasicTypeError(_MISMATCH[op])

def _coerce_text(text: str, other: float) -> float:
    num = parse_number(text)
    if num is None:
        raise BasicTypeError(f"Cannot compare string {text!r} and number {format_number(other)}")
    return num

def _compare(
    lhs: BasicValue,
    rhs: BasicValue,
    numbers: Callable[[float, float], bool],
    texts: Callable[[str, str], bool],
    flags: Callable[[bool, bool], bool],
) -> bool:
    match (lhs, rhs):
        case (BasicNumber(value=a), BasicNumber(value=b)):
            return numbers(a, b)
        case (BasicText(value=a), BasicText(value=b)):
            return texts(a, b)
        case (BasicBool(value=a), BasicBool(value=b)):
            return flags(a, b)
        case (BasicNumber(value=a), BasicText(value=b)):
            return numbers(a, _coerce_text(b, a))
        case (BasicText(value=a), BasicNumber(value=b)):
            return numbers(_coerce_text(a, b), b)

    raise BasicTypeError(f"Cannot compare values of different types {lhs!r} and {rhs!r}")

def _eq(lhs: BasicValue, rhs: BasicValue) -> bool:
    return _compare(lhs, rhs, operator.eq, operator.eq, operator.eq)

def _lt(lhs: BasicValue, rhs: BasicValue) -> bool:
    # Boolean "<" is equality; kept as-is, see DESIGN.md.
    return _compare(lhs, rhs, operator.lt, operator.lt, operator.eq)

def _gt(lhs: BasicValue, rhs: BasicValue) -> bool:
    return _compare(lhs, rhs, operator.gt, operator.gt, lambda a, b: a and not b)

def compare_values(op: TT, lhs: BasicValue, rhs: BasicValue) -> bool:
    match op:
        case TT.EQ:
            return _eq(lhs, rhs)
        case TT.NEQ:
            return not _eq(lhs, rhs)
        case TT.LT:
            return _lt(lhs, rhs)
        case TT.GT:
            return _gt(lhs, rhs)
        case TT.LTE:
            return not _gt(lhs, rhs)
        case TT.GTE:
            return not _lt(lhs, rhs)

    raise BasicTypeError(f"Unknown comparator {op.name}")
