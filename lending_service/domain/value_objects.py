"""
Value objects for the domain layer.

Value objects are immutable objects that represent descriptive aspects
of the domain with no conceptual identity.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from .entities import Book, validate_book_fields


@dataclass(frozen=True)
class NewBook:
    """
    A creation candidate: a book before the store assigns its id and version.
    """

    title: str
    author: str
    isbn: str
    published_year: int

    def __post_init__(self) -> None:
        """Validate candidate fields."""
        validate_book_fields(self.title, self.author, self.isbn, self.published_year)


@dataclass(frozen=True)
class BookView:
    """
    Externally visible projection of a Book.

    Identity mapping of the persisted fields, minus the version token.
    """

    id: int
    title: str
    author: str
    isbn: str
    published_year: int
    is_available: bool

    @staticmethod
    def from_book(book: Book) -> "BookView":
        """Build the view of a persisted book."""
        return BookView(
            id=book.id,
            title=book.title,
            author=book.author,
            isbn=book.isbn,
            published_year=book.published_year,
            is_available=book.is_available,
        )


class UpdateStatus(str, Enum):
    """Outcome of a conditional update at the store level."""

    APPLIED = "applied"
    VERSION_CONFLICT = "version_conflict"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class ConditionalUpdateResult:
    """
    Tagged answer of BookStore.conditional_update().

    `book` is the newly persisted record when the update was applied, the
    current record on a version conflict, and None when the id is unknown.
    """

    status: UpdateStatus
    book: Optional[Book] = None

    def __post_init__(self) -> None:
        if self.status is UpdateStatus.APPLIED and self.book is None:
            raise ValueError("An applied update must carry the updated book")
        if self.status is UpdateStatus.NOT_FOUND and self.book is not None:
            raise ValueError("A not-found update cannot carry a book")

    @property
    def applied(self) -> bool:
        return self.status is UpdateStatus.APPLIED


BookMutator = Callable[[Book], Book]
"""Pure function producing the next state of a book"""


@dataclass(frozen=True)
class Deadline:
    """
    Point in time after which an operation must be abandoned.

    Based on the monotonic clock so wall-clock adjustments cannot extend
    or shorten it.
    """

    expires_at: float
    """Value of time.monotonic() at which the deadline passes"""

    @staticmethod
    def after(seconds: float) -> "Deadline":
        """Create a deadline `seconds` from now."""
        if seconds < 0:
            raise ValueError(f"seconds cannot be negative, got {seconds}")
        return Deadline(expires_at=time.monotonic() + seconds)

    def expired(self) -> bool:
        """Check if the deadline has passed."""
        return time.monotonic() >= self.expires_at

    def remaining(self) -> float:
        """Seconds left before expiry, never negative."""
        return max(0.0, self.expires_at - time.monotonic())
