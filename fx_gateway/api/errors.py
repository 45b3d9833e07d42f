"""Uniform JSON error responses and exception handlers"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from fx_gateway.api.v1.schemas import ErrorResponse
from fx_gateway.domain.exceptions import DealNotFoundError, DealStoreError

logger = logging.getLogger(__name__)


def error_response(request: Request, status: int, error: str, message: str) -> JSONResponse:
    """Build the error body shared by every endpoint"""
    body = ErrorResponse(
        timestamp=datetime.now(timezone.utc),
        status=status,
        error=error,
        message=message,
        path=request.url.path,
    )
    return JSONResponse(status_code=status, content=body.model_dump(mode="json"))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    parts = []
    for err in exc.errors():
        loc = " -> ".join(str(part) for part in err["loc"] if part != "body")
        parts.append(f"{loc}: {err['msg']}" if loc else err["msg"])
    return error_response(request, 400, "Validation Failed", "; ".join(parts) or "Invalid input data")


async def not_found_handler(request: Request, exc: DealNotFoundError) -> JSONResponse:
    logger.warning("Deal not found", extra={"detail": str(exc)})
    return error_response(request, 404, "Not Found", str(exc))


async def store_error_handler(request: Request, exc: DealStoreError) -> JSONResponse:
    logger.error("Deal store error", extra={"detail": str(exc)})
    return error_response(request, 503, "Service Unavailable", "Deal store unavailable")


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error occurred")
    return error_response(request, 500, "Internal Server Error", "An unexpected error occurred")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(DealNotFoundError, not_found_handler)
    app.add_exception_handler(DealStoreError, store_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
