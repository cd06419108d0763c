"""
In-memory implementation of the BookStore port.

Reference store used for tests and for running the service without a
database file. All state lives in the instance, so every store is isolated.
"""

import threading
from typing import Dict, List, Optional

from lending_service.domain.entities import Book
from lending_service.domain.ports import BookStore
from lending_service.domain.value_objects import (
    BookMutator,
    ConditionalUpdateResult,
    NewBook,
    UpdateStatus,
)


class InMemoryBookStore(BookStore):
    """
    A single lock serialises every operation, which makes conditional_update()
    trivially atomic. Records are frozen dataclasses, so handing them out
    never exposes mutable storage state.
    """

    def __init__(self) -> None:
        self._books: Dict[int, Book] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def list_all(self) -> List[Book]:
        with self._lock:
            # dicts keep insertion order and ids are never reused
            return list(self._books.values())

    def get(self, book_id: int) -> Optional[Book]:
        with self._lock:
            return self._books.get(book_id)

    def insert(self, candidate: NewBook) -> Book:
        with self._lock:
            book = Book(
                id=self._next_id,
                title=candidate.title,
                author=candidate.author,
                isbn=candidate.isbn,
                published_year=candidate.published_year,
                is_available=True,
                version=0,
            )
            self._books[book.id] = book
            self._next_id += 1
            return book

    def conditional_update(
        self,
        book_id: int,
        expected_version: int,
        mutator: BookMutator,
    ) -> ConditionalUpdateResult:
        with self._lock:
            current = self._books.get(book_id)
            if current is None:
                return ConditionalUpdateResult(status=UpdateStatus.NOT_FOUND)

            if current.version != expected_version:
                return ConditionalUpdateResult(
                    status=UpdateStatus.VERSION_CONFLICT, book=current
                )

            mutated = mutator(current)
            updated = Book(
                id=current.id,
                title=mutated.title,
                author=mutated.author,
                isbn=mutated.isbn,
                published_year=mutated.published_year,
                is_available=mutated.is_available,
                version=current.version + 1,
            )
            self._books[book_id] = updated
            return ConditionalUpdateResult(status=UpdateStatus.APPLIED, book=updated)

    def count(self) -> int:
        with self._lock:
            return len(self._books)

    def is_ready(self) -> bool:
        return True
