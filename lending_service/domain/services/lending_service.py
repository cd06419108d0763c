"""
Domain service for lending books.

=============================================================================
NOTES: Optimistic concurrency for checkout/return
=============================================================================

Checkout and return are read-decide-write sequences against a shared
record. Two requests racing on the same book could both read "available"
and both write "checked out" if the write were unconditional.

Every transition is therefore expressed as a conditional update:

    read book (version N) --> decide --> write only if version is still N

If another transition lands first the store answers VERSION_CONFLICT and
the whole sequence restarts from a fresh read, so the business decision is
always re-evaluated against current state. Retries are bounded; running
out of attempts surfaces a CONFLICT failure instead of looping forever.

=============================================================================
"""

import logging
from typing import List, Optional

from lending_service.domain.errors import FailureKind, LendingResult
from lending_service.domain.ports import BookStore
from lending_service.domain.value_objects import (
    BookView,
    Deadline,
    NewBook,
    UpdateStatus,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3


class LendingService:
    """
    Enforces the availability state machine of each book.

        [Available] --checkout--> [CheckedOut] --return--> [Available]

    Checkout of a checked-out book and return of an available book are
    refused with a named failure. The service never caches records: each
    operation reads the current state from the store before deciding.

    Usage:
        service = LendingService(store=InMemoryBookStore())
        created = service.create(NewBook("Dune", "Herbert", "978-0", 1965))
        result = service.checkout(created.view.id)
    """

    def __init__(self, store: BookStore, max_attempts: int = DEFAULT_MAX_ATTEMPTS) -> None:
        """
        Initialize the lending service.

        Args:
            store: Storage port owning the book records
            max_attempts: How many read-decide-write attempts a transition
                gets before reporting CONFLICT (must be >= 1)
        """
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

        self._store = store
        self._max_attempts = max_attempts

    @property
    def max_attempts(self) -> int:
        return self._max_attempts

    def is_ready(self) -> bool:
        """Check if the backing store can serve requests."""
        return self._store.is_ready()

    def get_all(self) -> List[BookView]:
        """Return the view of every book, in insertion order."""
        return [BookView.from_book(book) for book in self._store.list_all()]

    def get_by_id(self, book_id: int, deadline: Optional[Deadline] = None) -> LendingResult:
        """
        Look up a single book.

        Args:
            book_id: Id of the book, must be positive
            deadline: Optional point after which the lookup is abandoned

        Returns:
            LendingResult with the view, or INVALID_ARGUMENT / NOT_FOUND /
            DEADLINE_EXCEEDED
        """
        rejected = self._reject_invalid_id(book_id)
        if rejected is not None:
            return rejected

        if _expired(deadline):
            return _deadline_exceeded("get", book_id)

        book = self._store.get(book_id)
        if book is None:
            return _not_found(book_id)

        return LendingResult.ok(BookView.from_book(book))

    def create(
        self,
        new_book: Optional[NewBook],
        deadline: Optional[Deadline] = None,
    ) -> LendingResult:
        """
        Add a new book to the collection. New books start available.

        Field constraints are already enforced by NewBook itself.

        Args:
            new_book: Descriptive fields of the book
            deadline: Optional point after which creation is abandoned

        Returns:
            LendingResult with the created view, or INVALID_ARGUMENT when no
            candidate was supplied
        """
        if new_book is None:
            return LendingResult.fail(
                FailureKind.INVALID_ARGUMENT, "Book data is required"
            )

        if _expired(deadline):
            return _deadline_exceeded("create", None)

        book = self._store.insert(new_book)
        logger.info(f"Book {book.id} created: '{book.title}' by {book.author}")
        return LendingResult.ok(BookView.from_book(book))

    def checkout(self, book_id: int, deadline: Optional[Deadline] = None) -> LendingResult:
        """
        Lend a book out (available -> checked out).

        Returns:
            LendingResult with the updated view, or INVALID_ARGUMENT /
            NOT_FOUND / ALREADY_CHECKED_OUT / CONFLICT / DEADLINE_EXCEEDED
        """
        return self._transition(
            book_id,
            make_available=False,
            action="checkout",
            deadline=deadline,
        )

    def return_book(self, book_id: int, deadline: Optional[Deadline] = None) -> LendingResult:
        """
        Take a lent book back (checked out -> available).

        Returns:
            LendingResult with the updated view, or INVALID_ARGUMENT /
            NOT_FOUND / ALREADY_AVAILABLE / CONFLICT / DEADLINE_EXCEEDED
        """
        return self._transition(
            book_id,
            make_available=True,
            action="return",
            deadline=deadline,
        )

    def _transition(
        self,
        book_id: int,
        *,
        make_available: bool,
        action: str,
        deadline: Optional[Deadline],
    ) -> LendingResult:
        """Run the bounded read-decide-conditional-write loop for one transition."""
        rejected = self._reject_invalid_id(book_id)
        if rejected is not None:
            return rejected

        for attempt in range(1, self._max_attempts + 1):
            if _expired(deadline):
                return _deadline_exceeded(action, book_id)

            book = self._store.get(book_id)
            if book is None:
                return _not_found(book_id)

            if book.is_available == make_available:
                return self._refuse(book_id, action, make_available)

            if _expired(deadline):
                return _deadline_exceeded(action, book_id)

            outcome = self._store.conditional_update(
                book_id,
                book.version,
                lambda current: current.with_availability(make_available),
            )

            if outcome.applied:
                logger.info(
                    f"Book {book_id} {action} succeeded (version {outcome.book.version})"
                )
                return LendingResult.ok(BookView.from_book(outcome.book))

            if outcome.status is UpdateStatus.NOT_FOUND:
                return _not_found(book_id)

            logger.debug(
                f"Version conflict on {action} of book {book_id} "
                f"(attempt {attempt}/{self._max_attempts}, expected version {book.version})"
            )

        logger.warning(
            f"Giving up {action} of book {book_id} after {self._max_attempts} "
            f"conflicting attempts"
        )
        return LendingResult.fail(
            FailureKind.CONFLICT,
            f"Book {book_id} was modified concurrently; please retry the request",
        )

    @staticmethod
    def _refuse(book_id: int, action: str, make_available: bool) -> LendingResult:
        if make_available:
            kind = FailureKind.ALREADY_AVAILABLE
            message = f"Book {book_id} is already available"
        else:
            kind = FailureKind.ALREADY_CHECKED_OUT
            message = f"Book {book_id} is already checked out"

        logger.warning(f"Refused {action} of book {book_id}: {kind.value}")
        return LendingResult.fail(kind, message)

    @staticmethod
    def _reject_invalid_id(book_id: int) -> Optional[LendingResult]:
        """Early failure for ids that can never exist; checked before any store access."""
        if book_id <= 0:
            return LendingResult.fail(
                FailureKind.INVALID_ARGUMENT,
                f"Id must be greater than zero, got {book_id}",
            )
        return None


def _expired(deadline: Optional[Deadline]) -> bool:
    return deadline is not None and deadline.expired()


def _not_found(book_id: int) -> LendingResult:
    return LendingResult.fail(FailureKind.NOT_FOUND, f"Book with id {book_id} not found")


def _deadline_exceeded(action: str, book_id: Optional[int]) -> LendingResult:
    target = f" of book {book_id}" if book_id is not None else ""
    logger.warning(f"Deadline exceeded during {action}{target}")
    return LendingResult.fail(
        FailureKind.DEADLINE_EXCEEDED,
        f"Deadline exceeded during {action}{target}",
    )
