"""
Port interfaces (protocols) for the domain layer.

Ports define the contracts between the domain and infrastructure layers.
They are implemented by adapters in the infrastructure layer, allowing
the domain to remain independent of technical details.

Following Hexagonal Architecture principles, the domain layer depends only
on these abstract protocols, never on concrete implementations.
"""

from typing import List, Optional, Protocol

from .entities import Book
from .value_objects import BookMutator, ConditionalUpdateResult, NewBook


class BookStore(Protocol):
    """
    Port for durable, keyed storage of Book records.

    The store exclusively owns the persisted representation and the
    version token. Implementations must guarantee that conditional_update()
    is atomic with respect to every other conditional_update() on the same
    id: two calls presenting the same expected version yield exactly one
    APPLIED and one VERSION_CONFLICT.

    Implementations should handle:
    - Assigning ids exactly once, never reusing them
    - Returning records in insertion order from list_all()
    - Wrapping medium errors in StorageFault
    """

    def list_all(self) -> List[Book]:
        """
        Retrieve every stored book in insertion order.

        Returns:
            List of books, empty if none exist

        Raises:
            StorageFault: If the storage medium fails
        """
        ...

    def get(self, book_id: int) -> Optional[Book]:
        """
        Retrieve a book by its id.

        Args:
            book_id: Positive book identifier

        Returns:
            The Book if found, None otherwise

        Raises:
            StorageFault: If the storage medium fails
        """
        ...

    def insert(self, candidate: NewBook) -> Book:
        """
        Persist a new, available book under a freshly assigned id.

        Args:
            candidate: Descriptive fields of the book

        Returns:
            The stored Book with its id and version 0

        Raises:
            StorageFault: If the storage medium fails
        """
        ...

    def conditional_update(
        self,
        book_id: int,
        expected_version: int,
        mutator: BookMutator,
    ) -> ConditionalUpdateResult:
        """
        Apply `mutator` to a book only if its version still matches.

        The read, version check, mutation, version increment and write
        happen as one atomic step. The mutator cannot change the id or the
        version: the store keeps the id and sets the version to
        expected_version + 1.

        Args:
            book_id: Id of the book to update
            expected_version: Version the caller last observed
            mutator: Pure function computing the next state

        Returns:
            ConditionalUpdateResult with status APPLIED, VERSION_CONFLICT
            or NOT_FOUND

        Raises:
            StorageFault: If the storage medium fails
        """
        ...

    def count(self) -> int:
        """
        Get the total number of stored books.

        Returns:
            Total book count
        """
        ...

    def is_ready(self) -> bool:
        """
        Check if the storage medium is reachable.

        Used by the health endpoint.

        Returns:
            True if the store can serve requests, False otherwise
        """
        ...
