# ruff: noqa: I001
import logging
import os
import time
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from i18n_center_api.deps import get_sweeper
from i18n_center_api.errors import (
    BackfillError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    PersistenceError,
    UnknownComponentCodesError,
)
from i18n_center_api.logging_config import configure_logging, correlation_id_var, new_correlation_id
from i18n_center_api.routers.catalog import router as catalog_router
from i18n_center_api.routers.transfer import router as transfer_router
from i18n_center_api.routers.translations import router as translations_router

configure_logging(
    service_name=os.getenv("LOG_SERVICE_NAME", "i18n-center"),
)

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "X-Request-ID"


@asynccontextmanager
async def lifespan(_: FastAPI):
    sweeper = get_sweeper()
    sweeper.start()
    try:
        yield
    finally:
        sweeper.stop()


app = FastAPI(title="I18n Center API", lifespan=lifespan)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start = time.perf_counter()
        try:
            response = await call_next(request)
            if 500 <= response.status_code < 600:
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.error(
                    "HTTP 5xx response",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "duration_ms": duration_ms,
                    },
                )
            return response
        except Exception as exc:  # noqa: BLE001 - log every unhandled exception, then re-raise
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.error(
                "Unhandled exception during request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                },
            )
            raise


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        correlation_id = request.headers.get(CORRELATION_HEADER) or new_correlation_id()
        token = correlation_id_var.set(correlation_id)
        try:
            response = await call_next(request)
        finally:
            correlation_id_var.reset(token)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


# Added last so it wraps the error logger and every log line carries the id
app.add_middleware(ErrorLoggingMiddleware)
app.add_middleware(CorrelationIdMiddleware)


@app.exception_handler(UnknownComponentCodesError)
async def _unknown_codes(_: Request, exc: UnknownComponentCodesError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND,
        content={"detail": str(exc), "missing_codes": exc.missing_codes},
    )


@app.exception_handler(NotFoundError)
async def _not_found(_: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(ConflictError)
async def _conflict(_: Request, exc: ConflictError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(BackfillError)
async def _backfill_failed(_: Request, exc: BackfillError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_502_BAD_GATEWAY,
        content={
            "detail": f"Failed to translate to {exc.failed_locale}",
            "failed_locale": exc.failed_locale,
            "completed_locales": exc.completed_locales,
            "error": str(exc.cause),
        },
    )


@app.exception_handler(ExternalServiceError)
async def _external_failed(_: Request, exc: ExternalServiceError) -> JSONResponse:
    content = {"detail": str(exc)}
    if exc.key_path:
        content["key_path"] = exc.key_path
    return JSONResponse(status_code=status.HTTP_502_BAD_GATEWAY, content=content)


@app.exception_handler(PersistenceError)
async def _persistence_failed(_: Request, exc: PersistenceError) -> JSONResponse:
    logger.error("Persistence failure", extra={"error": str(exc)})
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Failed to persist changes"},
    )


@app.exception_handler(ValueError)
async def _invalid_value(_: Request, exc: ValueError) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


app.include_router(catalog_router)
app.include_router(translations_router)
app.include_router(transfer_router)
