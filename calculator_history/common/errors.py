"""Error taxonomy of the calculator history service."""
from typing import Optional


class CalculatorHistoryError(Exception):
    """Base class for every error raised by the service."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class CalculationError(CalculatorHistoryError):
    """Client input that cannot be computed (HTTP 400)."""


class InvalidOperator(CalculationError):
    """Operator outside of the supported set."""

    def __init__(self, operator: object) -> None:
        super().__init__("Invalid operation")
        self.operator = operator


class DivisionByZero(CalculationError):
    """Division with a zero divisor."""

    def __init__(self) -> None:
        super().__init__("Cannot divide by zero")


class NotFound(CalculatorHistoryError):
    """No operation record with the requested id (HTTP 404)."""

    def __init__(self, operation_id: int) -> None:
        super().__init__("Operation not found")
        self.operation_id = operation_id


class StoreFailure(CalculatorHistoryError):
    """
    Any failure of the record store (HTTP 500).

    :param str message: Human readable summary of what failed
    :param str details: Message of the underlying persistence error
    """

    def __init__(self, message: str, details: Optional[str] = None) -> None:
        super().__init__(message)
        self.details = details


class NotificationFailure(CalculatorHistoryError):
    """Push delivery failed. Logged by the notification worker, never propagated."""
