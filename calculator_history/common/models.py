"""Pydantic models for operation records, requests and responses."""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OperationRecord(BaseModel):
    """A persisted arithmetic operation, as returned by the record store."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: int = Field(..., description="Surrogate key assigned by the store")
    num1: float = Field(..., description="Left operand")
    num2: float = Field(..., description="Right operand")
    operation: str = Field(..., description="Operator symbol")
    result: float = Field(..., description="Result derived from the operands and operator")
    created_at: Optional[datetime] = Field(
        None, alias="createdAt", description="Creation timestamp"
    )
    updated_at: Optional[datetime] = Field(
        None, alias="updatedAt", description="Last update timestamp"
    )


class UpdateRequest(BaseModel):
    """New operands and operator for an existing record."""

    num1: float = Field(..., description="Left operand")
    num2: float = Field(..., description="Right operand")
    # Kept as a free string so unknown operators are rejected by the calculator, not by parsing
    operation: str = Field(..., description="Operator symbol")


class CalculateRequest(UpdateRequest):
    """Calculation request, with an optional device to notify."""

    model_config = ConfigDict(populate_by_name=True)

    device_token: Optional[str] = Field(
        None, alias="deviceToken", description="Push notification device token"
    )


class CalculateResponse(BaseModel):
    """Result of a calculation together with the full history."""

    model_config = ConfigDict(populate_by_name=True)

    result: float
    operation: OperationRecord
    updated_history: List[OperationRecord] = Field(..., alias="updatedHistory")


class HistoryMessage(BaseModel):
    """Confirmation message of a history mutation together with the full history."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    updated_history: List[OperationRecord] = Field(..., alias="updatedHistory")


class ProceedStatus(BaseModel):
    """Value of the proceed feature flag."""

    status: int = Field(..., ge=0, le=1)
