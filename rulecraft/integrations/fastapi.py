"""FastAPI Exception Handlers

Converts ValidationError (raised by validate_and_throw) and AppErrorException
(rule setup and execution errors) to structured JSON responses.

Usage:
    from rulecraft.integrations.fastapi import register_error_handlers

    app = FastAPI()
    register_error_handlers(app)

    @app.post("/customers")
    async def create(payload: CustomerIn):
        await CustomerValidator().validate_and_throw_async(payload)
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from rulecraft.core.errors import AppError, AppErrorException
from rulecraft.core.logging import http_logger
from rulecraft.validation.failure import ValidationError

log = http_logger()


def error_to_response(error: AppError) -> JSONResponse:
    """Convert AppError to JSONResponse, logging it at a status-appropriate level."""
    status_code = error.code.http_status

    log_method = log.warning if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        error_code_num=error.code.value,
        message=error.message,
        category=error.code.category,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
    )

    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    error = exc.error.with_context(
        request_id=request.headers.get("X-Request-ID"),
        correlation_id=request.headers.get("X-Correlation-ID") or exc.error.context.correlation_id,
    )
    return error_to_response(error)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    error = exc.to_app_error().with_context(
        correlation_id=request.headers.get("X-Correlation-ID", ""),
        request_id=request.headers.get("X-Request-ID"),
        origin="validation",
    )
    return error_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
