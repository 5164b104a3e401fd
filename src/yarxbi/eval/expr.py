from __future__ import annotations

from typing import List

from ..token_types import (
    EXPRESSION_BOUNDARY,
    TT,
    Assoc,
    Tok,
    associativity,
    is_binary_operator,
    is_comparison_operator,
    is_operator,
    is_unary_operator,
    is_value,
    precedence,
)
from ..types import (
    BasicBool,
    BasicExpressionError,
    BasicNumber,
    BasicRuntimeError,
    BasicText,
    BasicValue,
    Context,
)
from .common import TokenCursor
from .ops import apply_binary_operator, apply_unary, compare_values

def _yields_to(incoming: Tok, top: Tok) -> bool:
    """True when `top` must be emitted before `incoming` is stacked."""
    if associativity(incoming) is Assoc.LEFT:
        return precedence(incoming) <= precedence(top)
    return precedence(incoming) < precedence(top)

def parse_expression(cursor: TokenCursor) -> List[Tok]:
    """Shunting-yard: infix tokens -> postfix queue.

    Reads until end of line or a THEN/TO/STEP boundary, which is left
    unconsumed for the caller.
    """
    output: List[Tok] = []
    stack: List[Tok] = []

    while True:
        tok = cursor.peek()
        if tok is None or tok.type in EXPRESSION_BOUNDARY:
            break
        cursor.next()

        if is_value(tok):
            output.append(tok)
        elif is_operator(tok):
            while stack and is_operator(stack[-1]) and _yields_to(tok, stack[-1]):
                output.append(stack.pop())
            stack.append(tok)
        elif tok.type is TT.LPAR:
            stack.append(tok)
        elif tok.type is TT.RPAR:
            while True:
                if not stack:
                    raise BasicExpressionError("Mismatched parenthesis in expression", column=tok.column)
                top = stack.pop()
                if top.type is TT.LPAR:
                    break
                output.append(top)
        else:
            raise BasicExpressionError(f"Unexpected {tok.value} in expression", column=tok.column)

    while stack:
        top = stack.pop()
        if top.type in (TT.LPAR, TT.RPAR):
            raise BasicExpressionError("Mismatched parenthesis in expression", column=top.column)
        output.append(top)

    return output

def _pop_operands(stack: List[BasicValue], op: Tok, count: int) -> List[BasicValue]:
    if len(stack) < count:
        noun = "an operand" if count == 1 else f"{count} operands"
        raise BasicExpressionError(f"Operator {op.value} requires {noun}", column=op.column)

    operands = stack[-count:]
    del stack[-count:]
    return operands

def eval_postfix(queue: List[Tok], context: Context) -> BasicValue:
    stack: List[BasicValue] = []
    column = queue[0].column if queue else None

    for tok in queue:
        try:
            match tok.type:
                case TT.NUMBER:
                    stack.append(BasicNumber(float(tok.value)))
                case TT.STRING:
                    stack.append(BasicText(str(tok.value)))
                case TT.VARIABLE:
                    stack.append(context.get(str(tok.value)))
                case _ if is_unary_operator(tok):
                    (operand,) = _pop_operands(stack, tok, 1)
                    stack.append(apply_unary(tok.type, operand))
                case _ if is_comparison_operator(tok):
                    lhs, rhs = _pop_operands(stack, tok, 2)
                    stack.append(BasicBool(compare_values(tok.type, lhs, rhs)))
                case _ if is_binary_operator(tok):
                    lhs, rhs = _pop_operands(stack, tok, 2)
                    stack.append(apply_binary_operator(tok.type, lhs, rhs))
                case _:
                    raise BasicExpressionError(f"Unexpected {tok.value} in expression")
        except BasicRuntimeError as err:
            err.locate(None, tok.column)
            raise

    # A well formed expression leaves exactly its result behind.
    if len(stack) != 1:
        raise BasicExpressionError("Invalid expression", column=column)

    return stack[0]

def parse_and_eval(cursor: TokenCursor, context: Context) -> BasicValue:
    return eval_postfix(parse_expression(cursor), context)
