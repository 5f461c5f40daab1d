# =============================================================================
# core/calculator.py  -  The "calculator" tool
# =============================================================================
#
# Four operations on two finite numbers.  Division by zero RAISES
# DivisionByZeroError; the registry turns it into an error-flagged result, so
# a caller never sees inf or nan as a "result".
# =============================================================================

import math
import operator as _op
from typing import Callable

from core.errors import DivisionByZeroError, DomainError, UnsupportedOperatorError
from core.models import InvocationResult
from core.schemas import CalculatorInput, CalculatorOutput

_OPERATIONS: dict[str, Callable[[float, float], float]] = {
    "+": _op.add,
    "-": _op.sub,
    "*": _op.mul,
    "/": _op.truediv,
}


def calculate(num1: float, num2: float, operator: str) -> float:
    """Apply ``operator`` to the two operands.

    Raises:
        DivisionByZeroError: operator is "/" and num2 is zero.
        UnsupportedOperatorError: operator is not one of + - * /.
    """
    if operator not in _OPERATIONS:
        raise UnsupportedOperatorError(operator)
    if operator == "/" and num2 == 0:
        raise DivisionByZeroError()
    result = _OPERATIONS[operator](num1, num2)
    if not math.isfinite(result):
        raise DomainError("오류: 계산 결과가 표현 가능한 범위를 벗어났습니다.")
    return result


def format_number(value: float) -> str:
    """Render 10.0 as "10" and 2.5 as "2.5"."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


async def calculator(args: CalculatorInput, context=None) -> InvocationResult:
    result = calculate(args.num1, args.num2, args.operator)
    text = (
        f"{format_number(args.num1)} {args.operator} "
        f"{format_number(args.num2)} = {format_number(result)}"
    )
    structured = CalculatorOutput(
        num1=args.num1, num2=args.num2, operator=args.operator, result=result
    )
    return InvocationResult.text(text, structured=structured.model_dump())
