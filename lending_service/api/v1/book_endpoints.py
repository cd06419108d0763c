"""
API endpoints for book lending operations.

This module defines the FastAPI routes for listing, creating, checking out
and returning books. It handles HTTP concerns (input shape, status codes,
headers) and delegates every business decision to the LendingService.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Request, Response, status

from lending_service.domain.errors import LendingResult
from lending_service.domain.services import LendingService
from lending_service.domain.value_objects import Deadline
from lending_service.api.errors import LendingFailureError, invalid_argument
from lending_service.api.v1 import schemas as api
from lending_service.api.v1.converters import api_request_to_domain, domain_view_to_api
from lending_service.api.v1.dependencies import get_lending_service, get_request_deadline

logger = logging.getLogger(__name__)

router = APIRouter()

_FAILURE_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": api.ErrorResponse},
    status.HTTP_404_NOT_FOUND: {"model": api.ErrorResponse},
}


def _require_positive_id(book_id: int) -> None:
    if book_id <= 0:
        logger.warning(f"Rejected invalid book id {book_id}")
        raise invalid_argument("Id must be greater than zero.")


def _unwrap(result: LendingResult) -> api.Book:
    """Return the API view of a successful result, or raise its failure."""
    if not result.is_success:
        raise LendingFailureError(result.failure)
    return domain_view_to_api(result.view)


@router.get("/books", response_model=List[api.Book])
def list_books(
    service: LendingService = Depends(get_lending_service),
) -> List[api.Book]:
    """
    List every book in insertion order.
    """
    logger.info("Retrieving all books")
    return [domain_view_to_api(view) for view in service.get_all()]


@router.get("/books/{book_id}", response_model=api.Book, responses=_FAILURE_RESPONSES)
def get_book_by_id(
    book_id: int,
    service: LendingService = Depends(get_lending_service),
    deadline: Deadline = Depends(get_request_deadline),
) -> api.Book:
    """
    Get a book by its identifier.

    Raises:
        400: Id is not a positive integer
        404: Book not found
    """
    _require_positive_id(book_id)
    return _unwrap(service.get_by_id(book_id, deadline=deadline))


@router.post(
    "/books",
    response_model=api.Book,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_400_BAD_REQUEST: {"model": api.ErrorResponse}},
)
def create_book(
    body: api.CreateBookRequest,
    request: Request,
    response: Response,
    service: LendingService = Depends(get_lending_service),
    deadline: Deadline = Depends(get_request_deadline),
) -> api.Book:
    """
    Add a new book; it starts available.

    The Location header points at the created book.

    Raises:
        400: Invalid body (missing field, too long, bad ISBN, year out of range)
    """
    logger.info(f"Create book request received. Title: {body.title}")

    created = _unwrap(service.create(api_request_to_domain(body), deadline=deadline))

    response.headers["Location"] = str(request.url_for("get_book_by_id", book_id=created.id))
    return created


@router.post("/books/{book_id}/checkout", response_model=api.Book, responses=_FAILURE_RESPONSES)
def checkout_book(
    book_id: int,
    service: LendingService = Depends(get_lending_service),
    deadline: Deadline = Depends(get_request_deadline),
) -> api.Book:
    """
    Check a book out.

    Raises:
        400: Invalid id, or the book is already checked out
        404: Book not found
        409: Concurrent updates kept winning; retry the request
    """
    _require_positive_id(book_id)
    return _unwrap(service.checkout(book_id, deadline=deadline))


@router.post("/books/{book_id}/return", response_model=api.Book, responses=_FAILURE_RESPONSES)
def return_book(
    book_id: int,
    service: LendingService = Depends(get_lending_service),
    deadline: Deadline = Depends(get_request_deadline),
) -> api.Book:
    """
    Return a checked-out book.

    Raises:
        400: Invalid id, or the book is already available
        404: Book not found
        409: Concurrent updates kept winning; retry the request
    """
    _require_positive_id(book_id)
    return _unwrap(service.return_book(book_id, deadline=deadline))


@router.get("/health", response_model=api.HealthResponse)
def health_check(
    response: Response,
    service: LendingService = Depends(get_lending_service),
) -> api.HealthResponse:
    """
    Report whether the book store can serve requests.
    """
    if service.is_ready():
        return api.HealthResponse(status="ok")

    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return api.HealthResponse(status="unavailable")
