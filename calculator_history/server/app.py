"""FastAPI application factory."""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from calculator_history.common.config import AppConfig
from calculator_history.common.errors import CalculationError, NotFound, StoreFailure
from calculator_history.common.logger import logger
from calculator_history.server.notifier import FirebaseNotifier, NotificationDispatcher, Notifier
from calculator_history.server.routes import router
from calculator_history.server.service import HistoryService
from calculator_history.server.store import OperationStore, SqlOperationStore


def _register_error_handlers(app: FastAPI) -> None:
    """Translate service errors into JSON responses carrying at least an ``error`` field."""

    @app.exception_handler(CalculationError)
    async def calculation_error(request: Request, exc: CalculationError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"error": exc.message})

    @app.exception_handler(NotFound)
    async def not_found(request: Request, exc: NotFound) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": exc.message})

    @app.exception_handler(StoreFailure)
    async def store_failure(request: Request, exc: StoreFailure) -> JSONResponse:
        return JSONResponse(status_code=500, content={"error": exc.message, "details": exc.details})

    @app.exception_handler(RequestValidationError)
    async def invalid_request(request: Request, exc: RequestValidationError) -> JSONResponse:
        details = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        return JSONResponse(status_code=400, content={"error": "Invalid request", "details": details})


def create_app(
    config: AppConfig,
    store: Optional[OperationStore] = None,
    notifier: Optional[Notifier] = None,
) -> FastAPI:
    """
    Build the HTTP application.

    :param AppConfig config: Process-wide configuration
    :param OperationStore store: Record store, defaults to a SQL store on ``config.database_url``
    :param Notifier notifier: Push gateway, defaults to Firebase when credentials are configured

    :return: Application ready to be served
    :rtype: FastAPI
    """
    if store is None:
        store = SqlOperationStore.from_url(config.database_url)

    if notifier is None and config.firebase is not None:
        notifier = FirebaseNotifier(firebase_credentials=config.firebase)

    dispatcher: Optional[NotificationDispatcher] = None
    if notifier is not None:
        dispatcher = NotificationDispatcher(notifier=notifier, max_workers=config.notification_workers)
    else:
        logger.warning("🔔 No push gateway configured, notifications are disabled")

    service = HistoryService(config=config, store=store, dispatcher=dispatcher)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(f"🖥️ Server running on port {config.port}")
        yield
        if dispatcher is not None:
            dispatcher.shutdown(wait=True)
        store.close()
        logger.info("🖥️ Server stopped")

    app = FastAPI(title="Calculator History", lifespan=lifespan)
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    _register_error_handlers(app)
    app.include_router(router)
    return app
