"""HTTP endpoints of the calculator history service."""
from typing import List

from fastapi import APIRouter, Request
from fastapi.responses import FileResponse

from calculator_history.common.models import (
    CalculateRequest,
    CalculateResponse,
    HistoryMessage,
    OperationRecord,
    ProceedStatus,
    UpdateRequest,
)
from calculator_history.server.service import HistoryService

router = APIRouter()


def _service(request: Request) -> HistoryService:
    return request.app.state.service


@router.post("/checkProceed", response_model=ProceedStatus)
def check_proceed(request: Request) -> ProceedStatus:
    return _service(request).check_proceed()


@router.post("/calculate", response_model=CalculateResponse)
def calculate(body: CalculateRequest, request: Request) -> CalculateResponse:
    return _service(request).calculate(body)


@router.get("/history", response_model=List[OperationRecord])
def list_history(request: Request) -> List[OperationRecord]:
    return _service(request).list_history()


@router.put("/history/{operation_id}", response_model=HistoryMessage)
def update_operation(operation_id: int, body: UpdateRequest, request: Request) -> HistoryMessage:
    return _service(request).update(operation_id, body)


@router.delete("/history/{operation_id}", response_model=HistoryMessage)
def delete_operation(operation_id: int, request: Request) -> HistoryMessage:
    return _service(request).delete(operation_id)


@router.delete("/history", response_model=HistoryMessage)
def delete_all_operations(request: Request) -> HistoryMessage:
    return _service(request).delete_all()


@router.get("/", include_in_schema=False)
def landing_page(request: Request) -> FileResponse:
    return FileResponse(_service(request).config.static_dir / "index.html")
