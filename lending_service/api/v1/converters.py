"""
Converters between domain objects and API schemas.

This module centralizes all conversion logic between the domain layer
and the API layer, including the mapping from domain failure kinds to
HTTP status codes.
"""

from fastapi import status

from lending_service.domain import errors as domain_errors
from lending_service.domain import value_objects as domain_vo
from lending_service.api.v1 import schemas as api
from lending_service.utils.logging_utils import get_correlation_id

# Checkout of an unknown book is a 404 and a refused transition is a 400:
# the two are always kept apart.
FAILURE_STATUS_CODES = {
    domain_errors.FailureKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    domain_errors.FailureKind.ALREADY_CHECKED_OUT: status.HTTP_400_BAD_REQUEST,
    domain_errors.FailureKind.ALREADY_AVAILABLE: status.HTTP_400_BAD_REQUEST,
    domain_errors.FailureKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    domain_errors.FailureKind.CONFLICT: status.HTTP_409_CONFLICT,
    domain_errors.FailureKind.DEADLINE_EXCEEDED: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def domain_view_to_api(view: domain_vo.BookView) -> api.Book:
    """
    Convert a domain BookView to an API Book model.

    Args:
        view: Domain BookView value object

    Returns:
        API Book model
    """
    return api.Book(
        id=view.id,
        title=view.title,
        author=view.author,
        isbn=view.isbn,
        published_year=view.published_year,
        is_available=view.is_available,
    )


def api_request_to_domain(request: api.CreateBookRequest) -> domain_vo.NewBook:
    """
    Convert an API CreateBookRequest to a domain NewBook value object.

    Args:
        request: Validated API request model

    Returns:
        Domain NewBook value object
    """
    return domain_vo.NewBook(
        title=request.title,
        author=request.author,
        isbn=request.isbn,
        published_year=request.published_year,
    )


def failure_status_code(failure: domain_errors.LendingFailure) -> int:
    """HTTP status code for a domain failure."""
    return FAILURE_STATUS_CODES[failure.kind]


def failure_to_api(failure: domain_errors.LendingFailure) -> api.ErrorResponse:
    """
    Convert a domain LendingFailure to the API error body.

    The correlation id of the current request is attached when present.
    """
    return api.ErrorResponse(
        detail=failure.message,
        error=failure.kind.value,
        correlation_id=get_correlation_id(),
    )
