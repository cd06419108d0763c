"""
Correlation id propagation and unexpected-fault translation.

Every request carries the X-Correlation-Id header it arrived with, or a
freshly generated one. The id is bound to the logging context for the
duration of the request and echoed in the response header.

Unhandled exceptions (StorageFault included) are caught here, while the
correlation id is still bound, and reported as an opaque 500 whose body
names the correlation id. The traceback is only included when the
application runs in development mode.
"""

import logging
import traceback
import uuid

from fastapi import Request, status
from fastapi.responses import JSONResponse

from lending_service.api.v1 import schemas as api
from lending_service.utils.logging_utils import (
    CORRELATION_ID_HEADER,
    reset_correlation_id,
    set_correlation_id,
)

logger = logging.getLogger(__name__)


def _fault_response(exc: Exception, correlation_id: str, expose_detail: bool) -> JSONResponse:
    body = api.FaultResponse(
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        correlation_id=correlation_id,
        detail="".join(traceback.format_exception(exc)) if expose_detail else None,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=body.model_dump(by_alias=True),
    )


async def correlation_id_middleware(request: Request, call_next):
    """HTTP middleware: bind the correlation id, log the request, catch faults."""
    correlation_id = request.headers.get(CORRELATION_ID_HEADER, "").strip()
    if not correlation_id:
        correlation_id = str(uuid.uuid4())

    token = set_correlation_id(correlation_id)
    try:
        logger.info(f"Handling HTTP {request.method} {request.url.path}")
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}: {e}",
                exc_info=True,
            )
            expose_detail = getattr(request.app.state, "expose_fault_detail", False)
            response = _fault_response(e, correlation_id, expose_detail)

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        logger.info(
            f"Finished handling HTTP {request.method} {request.url.path} "
            f"with status {response.status_code}"
        )
        return response
    finally:
        reset_correlation_id(token)
