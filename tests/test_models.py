"""Test request, response and record models."""
from datetime import datetime, timezone

from pydantic import ValidationError
import pytest

from calculator_history.common.models import (
    CalculateRequest,
    HistoryMessage,
    OperationRecord,
    ProceedStatus,
    UpdateRequest,
)


def test_calculate_request_reads_device_token_alias() -> None:
    """The wire name deviceToken populates device_token."""
    req = CalculateRequest.model_validate({"num1": 1, "num2": 2, "operation": "+", "deviceToken": "abc"})
    assert req.device_token == "abc"
    assert req.num1 == 1.0
    assert isinstance(req.num1, float)


def test_calculate_request_device_token_is_optional() -> None:
    """A calculation request without a device token is valid."""
    req = CalculateRequest(num1=1, num2=2, operation="+")
    assert req.device_token is None


def test_calculate_request_keeps_unknown_operator() -> None:
    """Operators are not restricted by the model, the calculator rejects them."""
    req = CalculateRequest(num1=1, num2=2, operation="%")
    assert req.operation == "%"


@pytest.mark.parametrize("payload", [
    {"num2": 2, "operation": "+"},
    {"num1": "abc", "num2": 2, "operation": "+"},
    {"num1": 1, "num2": 2},
])
def test_update_request_invalid(payload) -> None:
    """Missing or non numeric fields raise a validation error."""
    with pytest.raises(ValidationError):
        UpdateRequest.model_validate(payload)


def test_operation_record_serializes_camel_case_timestamps() -> None:
    """Timestamps are serialized as createdAt and updatedAt."""
    now = datetime(2024, 1, 1, tzinfo=timezone.utc)
    record = OperationRecord(id=1, num1=3, num2=4, operation="+", result=7, created_at=now, updated_at=now)
    data = record.model_dump(by_alias=True, mode="json")
    assert data["createdAt"] == data["updatedAt"] == "2024-01-01T00:00:00Z"
    assert set(data) == {"id", "num1", "num2", "operation", "result", "createdAt", "updatedAt"}


def test_history_message_serializes_updated_history() -> None:
    """The history of a mutation is serialized as updatedHistory."""
    msg = HistoryMessage(message="done", updated_history=[])
    assert msg.model_dump(by_alias=True) == {"message": "done", "updatedHistory": []}


@pytest.mark.parametrize("status", [-1, 2])
def test_proceed_status_is_a_flag(status) -> None:
    """Proceed status only accepts 0 and 1."""
    with pytest.raises(ValidationError):
        ProceedStatus(status=status)
