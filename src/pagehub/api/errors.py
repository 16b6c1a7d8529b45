"""Translation of pagehub errors into HTTP responses."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from pagehub.api.schemas import APIError, ErrorDetail
from pagehub.core.exceptions import PageHubError
from pagehub.core.types import ErrorCode

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[ErrorCode, int] = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.INVALID_PARAM: 400,
    ErrorCode.MISSING_PARAM: 400,
    ErrorCode.UPSTREAM_ERROR: 502,
    ErrorCode.SERVER_ERROR: 500,
}


def error_response(status_code: int, code: str, message: str, details: dict | None = None) -> JSONResponse:
    body = APIError(error=ErrorDetail(code=code, message=message, details=details or None))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
    )


async def pagehub_error_handler(request: Request, exc: PageHubError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    return error_response(status_code, exc.code, exc.message, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg")}
        for error in exc.errors()
    ]
    return error_response(
        400,
        ErrorCode.INVALID_PARAM,
        "Invalid request parameters",
        {"errors": errors},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return error_response(500, ErrorCode.SERVER_ERROR, "An internal server error occurred")


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(PageHubError, pagehub_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
