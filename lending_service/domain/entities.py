"""
Domain entities for the book lending system.

Entities are objects with a unique identity that runs through time and
different representations. They are the core building blocks of the domain.
"""

import re
from dataclasses import dataclass, replace

MAX_TEXT_LENGTH = 100
MIN_PUBLISHED_YEAR = 1
MAX_PUBLISHED_YEAR = 9999

_ISBN_PATTERN = re.compile(r"[0-9-]+")


def validate_text_field(name: str, value: str) -> str:
    """
    Check a required, bounded text field (title, author).

    Whitespace-only values count as empty. The value is returned unchanged.

    Raises:
        ValueError: If the value is empty or too long
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError(f"Book {name} cannot be empty")
    if len(value) > MAX_TEXT_LENGTH:
        raise ValueError(
            f"Book {name} cannot exceed {MAX_TEXT_LENGTH} characters, "
            f"got {len(value)}"
        )
    return value


def validate_book_fields(
    title: str,
    author: str,
    isbn: str,
    published_year: int,
) -> None:
    """
    Check the descriptive fields shared by a stored book and a creation candidate.

    Raises:
        ValueError: If any field violates its constraint
    """
    validate_text_field("title", title)
    validate_text_field("author", author)

    if not isinstance(isbn, str) or not _ISBN_PATTERN.fullmatch(isbn):
        raise ValueError(f"isbn must contain only digits and hyphens, got '{isbn}'")

    if not isinstance(published_year, int) or not (
        MIN_PUBLISHED_YEAR <= published_year <= MAX_PUBLISHED_YEAR
    ):
        raise ValueError(
            f"published_year must be between {MIN_PUBLISHED_YEAR} and "
            f"{MAX_PUBLISHED_YEAR}, got {published_year}"
        )


@dataclass(frozen=True)
class Book:
    """
    Represents a single lendable book as persisted by the store.

    A book is either available or checked out. The version is the
    concurrency token used for conditional updates: it starts at 0 and the
    store increments it on every successful mutation.
    """

    id: int
    """Store-assigned identifier, positive and immutable"""

    title: str
    """Book title"""

    author: str
    """Author name"""

    isbn: str
    """ISBN, digits and hyphens only"""

    published_year: int
    """Year of publication"""

    is_available: bool = True
    """True when the book can be checked out"""

    version: int = 0
    """Concurrency token, never exposed to clients"""

    def __post_init__(self) -> None:
        """Validate book data."""
        if self.id < 1:
            raise ValueError(f"Book id must be a positive integer, got {self.id}")

        if self.version < 0:
            raise ValueError(f"version cannot be negative, got {self.version}")

        validate_book_fields(self.title, self.author, self.isbn, self.published_year)

    def is_checked_out(self) -> bool:
        """Check if the book is currently lent out."""
        return not self.is_available

    def with_availability(self, is_available: bool) -> "Book":
        """
        Return a copy with the availability flag set.

        The version is left untouched; only the store advances it.
        """
        return replace(self, is_available=is_available)
