"""History service: validation, calculation, persistence and notification of operations."""
from contextlib import contextmanager
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from calculator_history.common.calculator import compute
from calculator_history.common.config import AppConfig
from calculator_history.common.errors import NotFound, StoreFailure
from calculator_history.common.logger import logger
from calculator_history.common.models import (
    CalculateRequest,
    CalculateResponse,
    HistoryMessage,
    OperationRecord,
    ProceedStatus,
    UpdateRequest,
)
from calculator_history.server.notifier import NOTIFICATION_TITLE, NotificationDispatcher, calculation_summary
from calculator_history.server.store import OperationStore


@contextmanager
def _store_errors(message: str) -> Iterator[None]:
    """Re-raise store failures with a message describing the failed action."""
    try:
        yield
    except StoreFailure as exc:
        logger.error(f"🗄️❌ {message}: {exc.details}")
        raise StoreFailure(message, details=exc.details) from exc


class HistoryService(BaseModel):
    """
    Orchestrates every operation exposed over HTTP.

    Flow of a mutation:
        1. Validate and compute (errors short-circuit before any write).
        2. Write to the record store.
        3. Schedule a push notification when asked to (calculations only, never awaited).
        4. Re-read the full history.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    config: AppConfig = Field(..., description="Process-wide configuration")
    store: OperationStore = Field(..., description="Record store of the operations")
    dispatcher: Optional[NotificationDispatcher] = Field(
        default=None, description="Background notification sender, None when notifications are disabled"
    )

    def check_proceed(self) -> ProceedStatus:
        """Report the proceed feature flag as 1 or 0."""
        return ProceedStatus(status=1 if self.config.proceed_success else 0)

    def calculate(self, request: CalculateRequest) -> CalculateResponse:
        """
        Compute an operation, record it and return it with the full history.

        :param CalculateRequest request: Operands, operator and optional device token

        :return: Result, created record and history
        :rtype: CalculateResponse
        :raises CalculationError: If the operator is invalid or a division by zero is requested
        :raises StoreFailure: If the record store failed
        """
        result: float = compute(request.operation, request.num1, request.num2)

        with _store_errors("Failed to save operation"):
            record = self.store.create(request.num1, request.num2, request.operation, result)
            logger.info(f"🧮 Recorded operation {record.id}: {record.num1} {record.operation} {record.num2} = {result}")

            if request.device_token:
                self._notify(request.device_token, record)

            history = self.store.list_all()

        return CalculateResponse(result=result, operation=record, updated_history=history)

    def _notify(self, device_token: str, record: OperationRecord) -> None:
        """Schedule the notification of a calculation without waiting for it."""
        if self.dispatcher is None:
            logger.warning(f"🔔 Notifications are disabled, skipping notification of operation {record.id}")
            return
        if not device_token.strip():
            logger.warning(f"🔔 Blank device token, skipping notification of operation {record.id}")
            return

        self.dispatcher.dispatch(
            device_token,
            NOTIFICATION_TITLE,
            calculation_summary(record.num1, record.num2, record.operation, record.result),
        )

    def list_history(self) -> List[OperationRecord]:
        """Return every recorded operation."""
        with _store_errors("Failed to fetch history"):
            return self.store.list_all()

    def update(self, operation_id: int, request: UpdateRequest) -> HistoryMessage:
        """
        Replace the operands and operator of a record and recompute its result.

        :param int operation_id: Id of the record to update
        :param UpdateRequest request: New operands and operator

        :return: Confirmation and history
        :rtype: HistoryMessage
        :raises NotFound: If no record has this id
        :raises CalculationError: If the new operator is invalid or divides by zero
        :raises StoreFailure: If the record store failed
        """
        with _store_errors("Failed to update operation"):
            if self.store.get_by_id(operation_id) is None:
                raise NotFound(operation_id)

            result: float = compute(request.operation, request.num1, request.num2)

            # The record may have been deleted concurrently since it was read
            if self.store.update(operation_id, request.num1, request.num2, request.operation, result) is None:
                raise NotFound(operation_id)
            logger.info(f"✏️ Updated operation {operation_id}: {request.num1} {request.operation} {request.num2} = {result}")

            history = self.store.list_all()

        return HistoryMessage(message="Operation updated successfully", updated_history=history)

    def delete(self, operation_id: int) -> HistoryMessage:
        """
        Delete one record.

        :raises NotFound: If no record has this id
        :raises StoreFailure: If the record store failed
        """
        with _store_errors("Failed to delete operation"):
            if not self.store.delete_by_id(operation_id):
                raise NotFound(operation_id)
            logger.info(f"🗑️ Deleted operation {operation_id}")

            history = self.store.list_all()

        return HistoryMessage(message="Operation deleted successfully", updated_history=history)

    def delete_all(self) -> HistoryMessage:
        """Delete every record."""
        with _store_errors("Failed to delete all operations"):
            count = self.store.delete_all()
        logger.info(f"🗑️ Deleted all operations ({count})")

        return HistoryMessage(message="All operations deleted successfully", updated_history=[])
