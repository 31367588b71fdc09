"""Test function compute."""
import pytest

from calculator_history.common.calculator import OPERATORS, compute
from calculator_history.common.errors import CalculationError, DivisionByZero, InvalidOperator


@pytest.mark.parametrize("op,num1,num2,expected", [
    ("+", 3, 4, 7.0),
    ("-", 10, 2.5, 7.5),
    ("*", -3, 4, -12.0),
    ("/", 6, 3, 2.0),
    ("/", 10, 4, 2.5),
    ("+", 0.1, 0.2, 0.1 + 0.2),  # floating-point semantics, no rounding
])
def test_compute_valid(op, num1, num2, expected):
    """Compute applies the operator exactly like Python does."""
    assert compute(op, num1, num2) == expected


@pytest.mark.parametrize("num1", [0, 5, -7.5, 1e300])
def test_compute_division_by_zero(num1):
    """Dividing anything by zero raises DivisionByZero."""
    with pytest.raises(DivisionByZero) as exc_info:
        compute("/", num1, 0)
    assert exc_info.value.message == "Cannot divide by zero"


def test_compute_division_by_negative_zero():
    """Negative zero is equal to zero and is rejected too."""
    with pytest.raises(DivisionByZero):
        compute("/", 1, -0.0)


def test_compute_division_by_tiny_number():
    """Only an exact zero divisor is rejected."""
    assert compute("/", 1, 1e-300) == 1 / 1e-300


@pytest.mark.parametrize("op", ["%", "**", "x", "", "plus", None, 1])
def test_compute_invalid_operator(op):
    """Unsupported operators raise InvalidOperator."""
    with pytest.raises(InvalidOperator) as exc_info:
        compute(op, 1, 2)
    assert exc_info.value.message == "Invalid operation"
    assert exc_info.value.operator == op


def test_invalid_operator_checked_before_division():
    """An invalid operator with a zero divisor is reported as an invalid operator."""
    with pytest.raises(InvalidOperator):
        compute("%", 1, 0)


def test_calculation_errors_share_a_base_class():
    """Both input errors can be handled as CalculationError."""
    assert issubclass(InvalidOperator, CalculationError)
    assert issubclass(DivisionByZero, CalculationError)


def test_supported_operators():
    """Exactly the four basic operators are supported."""
    assert set(OPERATORS) == {"+", "-", "*", "/"}
