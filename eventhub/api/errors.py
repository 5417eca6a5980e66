from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from eventhub.services.exceptions import (
    DuplicateError,
    InternalError,
    MethodNotAllowedError,
    NotFoundError,
    ServiceError,
    ValidationError,
)

logger = structlog.get_logger()


def error_response(err: ServiceError, headers: dict[str, str] | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=err.status_code,
        content={"status": err.status, "message": err.message},
        headers=headers,
    )


def service_error_from_http(exc: StarletteHTTPException) -> ServiceError:
    if exc.status_code == 404:
        return NotFoundError()
    if exc.status_code == 405:
        return MethodNotAllowedError()

    err = ServiceError(str(exc.detail))
    err.status_code = exc.status_code
    return err


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return ValidationError.default_message
    first = errors[0]
    field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
    message = str(first.get("msg", "")).removeprefix("Value error, ")
    return f"{field}: {message}" if field else message


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_error", code=exc.code, message=exc.message, path=request.url.path)
    headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
    return error_response(exc, headers)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.info("integrity_error", path=request.url.path)
    return error_response(DuplicateError())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return error_response(ValidationError(_validation_message(exc)))


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return error_response(service_error_from_http(exc), getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", method=request.method, path=request.url.path)
    request_id = getattr(request.state, "request_id", None)
    headers = {"X-Request-ID": request_id} if request_id else None
    return error_response(InternalError(), headers)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
