"""
Error translation for the HTTP boundary.

Expected domain failures become precise 4xx responses; request-shape
errors become 400 (not FastAPI's default 422); anything else is an
unexpected fault, reported as an opaque 500 by the correlation middleware.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from lending_service.domain.errors import FailureKind, LendingFailure
from lending_service.api.v1 import schemas as api
from lending_service.api.v1.converters import failure_status_code, failure_to_api
from lending_service.utils.logging_utils import get_correlation_id

logger = logging.getLogger(__name__)


class LendingFailureError(Exception):
    """Raised by endpoints to turn a domain failure into an HTTP error response."""

    def __init__(self, failure: LendingFailure):
        self.failure = failure
        super().__init__(failure.message)


def invalid_argument(message: str) -> LendingFailureError:
    """Shortcut for boundary-level input rejections."""
    return LendingFailureError(LendingFailure(kind=FailureKind.INVALID_ARGUMENT, message=message))


async def lending_failure_handler(request: Request, exc: LendingFailureError) -> JSONResponse:
    status_code = failure_status_code(exc.failure)
    logger.warning(
        f"{request.method} {request.url.path} failed: "
        f"{exc.failure.kind.value} ({exc.failure.message})"
    )
    body = failure_to_api(exc.failure)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True),
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request for {request.method} {request.url.path}: {exc.errors()}")
    body = api.ErrorResponse(
        detail=jsonable_encoder(exc.errors()),
        error=FailureKind.INVALID_ARGUMENT.value,
        correlation_id=get_correlation_id(),
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(by_alias=True),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the domain and validation error handlers to the application."""
    app.add_exception_handler(LendingFailureError, lending_failure_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
