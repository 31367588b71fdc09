"""Arithmetic shared by the create and update paths."""
from collections.abc import Callable as ABCCallable
import operator
from typing import Callable

from calculator_history.common.errors import DivisionByZero, InvalidOperator


# Type alias for operator functions (taking two floats, returning a float)
OperatorFn: ABCCallable[[float, float], float] = Callable[[float, float], float]

# Mapping of operator symbols to their function
OPERATORS: dict[str, OperatorFn] = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
}


def compute(op: str, num1: float, num2: float) -> float:
    """
    Apply a single binary operator to two numbers.

    Division by zero is detected by exact equality on the divisor, before any division happens.

    :param str op: Operator symbol, one of ``+ - * /``
    :param float num1: Left operand
    :param float num2: Right operand

    :return: Computed result
    :rtype: float
    :raises InvalidOperator: If the operator is not supported
    :raises DivisionByZero: If ``op`` is ``/`` and ``num2`` is zero
    """
    if not isinstance(op, str) or op not in OPERATORS:
        raise InvalidOperator(op)

    if op == "/" and num2 == 0:
        raise DivisionByZero()

    return OPERATORS[op](num1, num2)
