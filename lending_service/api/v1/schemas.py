"""
Request and response bodies of the books API.

Field names are camelCase on the wire (publishedYear, isAvailable) and
snake_case in Python.
"""

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from typing import Any

from lending_service.domain.entities import validate_text_field


# request body of POST /books
class CreateBookRequest(BaseModel):
    """
    Request body for POST /books.

    Values are stored exactly as sent; title and author use the same
    emptiness rule as the domain so a body accepted here is always a valid NewBook.
    """
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=100, description="Book title")
    author: str = Field(min_length=1, max_length=100, description="Author name")
    isbn: str = Field(
        pattern=r"^[0-9\-]+$",
        description="ISBN, digits and hyphens only",
    )
    published_year: int = Field(
        alias="publishedYear",
        ge=1,
        le=9999,
        description="Year of publication (1-9999)",
    )

    @field_validator("title", "author")
    @classmethod
    def check_not_blank(cls, value: str, info: ValidationInfo) -> str:
        return validate_text_field(info.field_name, value)


class Book(BaseModel):
    """
    API representation of a book.

    Maps from the domain BookView for API responses.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(description="Unique identifier assigned on creation")
    title: str = Field(description="Book title")
    author: str = Field(description="Author name")
    isbn: str = Field(description="ISBN")
    published_year: int = Field(alias="publishedYear", description="Year of publication")
    is_available: bool = Field(
        alias="isAvailable",
        description="False while the book is checked out",
    )


class ErrorResponse(BaseModel):
    """
    Body returned for expected failures (4xx) and request-shape errors.
    """
    model_config = ConfigDict(populate_by_name=True)

    detail: Any = Field(description="What went wrong (message or list of field errors)")
    error: str = Field(description="Failure kind, e.g. 'not_found'")
    correlation_id: str | None = Field(
        default=None,
        alias="correlationId",
        description="Correlation id of the request",
    )


class FaultResponse(BaseModel):
    """
    Body returned for unexpected faults (500). Never carries internal detail
    outside development.
    """
    model_config = ConfigDict(populate_by_name=True)

    status: int = 500
    title: str = "An unexpected error occurred."
    correlation_id: str | None = Field(default=None, alias="correlationId")
    detail: str | None = None


class HealthResponse(BaseModel):
    status: str = Field(description="'ok' when the store is reachable, 'unavailable' otherwise")
