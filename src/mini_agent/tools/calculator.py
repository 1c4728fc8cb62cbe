"""Restricted arithmetic evaluator."""

from __future__ import annotations

import ast
import logging
import math
import operator
import re

logger = logging.getLogger(__name__)

ALLOWED_CHARS = re.compile(r"^[0-9+\-*/().\s]+$")
UNSAFE_MARKERS = ("eval", "Function", "constructor")

INVALID_CHARS_ERROR = (
    "Error: Invalid characters in expression. "
    "Only numbers and basic math operators (+, -, *, /, (, )) are allowed."
)
UNSAFE_ERROR = "Error: Potentially unsafe expression detected."
INVALID_RESULT_ERROR = "Error: Invalid calculation result."

_BIN_OPS = {
    ast.Add: operator.add,
    ast.Sub: operator.sub,
    ast.Mult: operator.mul,
    ast.Div: operator.truediv,
}
_UNARY_OPS = {
    ast.UAdd: operator.pos,
    ast.USub: operator.neg,
}


class _NonFiniteResult(ArithmeticError):
    pass


def _eval_node(node: ast.AST) -> float:
    if isinstance(node, ast.Expression):
        return _eval_node(node.body)
    if isinstance(node, ast.Constant) and type(node.value) in (int, float):
        return node.value
    if isinstance(node, ast.BinOp) and type(node.op) in _BIN_OPS:
        left = _eval_node(node.left)
        right = _eval_node(node.right)
        return _BIN_OPS[type(node.op)](left, right)
    if isinstance(node, ast.UnaryOp) and type(node.op) in _UNARY_OPS:
        return _UNARY_OPS[type(node.op)](_eval_node(node.operand))
    raise ValueError(f"unsupported syntax: {type(node).__name__}")


def evaluate(expression: str) -> float:
    """Evaluate a validated arithmetic expression.

    Raises ``_NonFiniteResult`` for division by zero or overflow and
    ``SyntaxError``/``ValueError`` for anything that is not plain arithmetic.
    """
    tree = ast.parse(expression, mode="eval")
    try:
        result = _eval_node(tree)
    except (ZeroDivisionError, OverflowError) as e:
        raise _NonFiniteResult(str(e)) from e
    try:
        finite = math.isfinite(result)
    except OverflowError:
        finite = False
    if not finite:
        raise _NonFiniteResult("non-finite result")
    return result


def format_number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return f"{value:.2f}"


def calculate(expression: str) -> str:
    """Evaluate ``expression`` and describe the result. Never raises."""
    clean = expression.strip()

    if any(marker in clean for marker in UNSAFE_MARKERS):
        return UNSAFE_ERROR
    if not ALLOWED_CHARS.match(clean):
        return INVALID_CHARS_ERROR

    try:
        result = evaluate(clean)
    except _NonFiniteResult:
        return INVALID_RESULT_ERROR
    except (SyntaxError, ValueError, TypeError, RecursionError) as e:
        logger.warning("Calculator error for %r: %s", expression, e)
        return f'Error: Could not calculate "{expression}". Please check your expression and try again.'

    return f"The result of {clean} is {format_number(result)}"
