"""
Contract tests shared by every BookStore adapter.

Each test runs against both the in-memory reference store and the SQLite
store (backed by a temporary file), so the two cannot drift apart.

=============================================================================
Test Categories:
=============================================================================
1. Insert and lookup: id assignment, initial state, insertion order
2. Conditional update: applied, stale version, unknown id, id/version guard
3. Concurrency: racing conditional updates on the same expected version
=============================================================================
"""

import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import replace
from pathlib import Path

import pytest

from lending_service.domain.entities import Book
from lending_service.domain.ports import BookStore
from lending_service.domain.value_objects import NewBook, UpdateStatus
from lending_service.infrastructure.db.sqlite_book_store import SqliteBookStore
from lending_service.infrastructure.memory.in_memory_book_store import InMemoryBookStore


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture(params=["memory", "sqlite"])
def store(request, tmp_path: Path) -> BookStore:
    """A fresh, empty store of each kind."""
    if request.param == "memory":
        return InMemoryBookStore()
    return SqliteBookStore(tmp_path / "lending.db")


@pytest.fixture
def dune() -> NewBook:
    return NewBook(title="Dune", author="Frank Herbert", isbn="978-0441", published_year=1965)


def checked_out(book: Book) -> Book:
    return book.with_availability(False)


# -----------------------------------------------------------------------------
# Test: Insert and lookup
# -----------------------------------------------------------------------------


class TestInsertAndGet:
    """Tests for insert(), get(), list_all() and count()."""

    def test_insert_assigns_id_and_initial_state(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)

        assert book.id == 1
        assert book.title == "Dune"
        assert book.author == "Frank Herbert"
        assert book.isbn == "978-0441"
        assert book.published_year == 1965
        assert book.is_available is True
        assert book.version == 0

    def test_insert_and_get_roundtrip(self, store: BookStore, dune: NewBook) -> None:
        inserted = store.insert(dune)

        assert store.get(inserted.id) == inserted

    def test_get_returns_none_for_unknown_id(self, store: BookStore) -> None:
        assert store.get(999) is None

    def test_ids_are_unique_and_increasing(self, store: BookStore, dune: NewBook) -> None:
        ids = [store.insert(dune).id for _ in range(5)]

        assert ids == [1, 2, 3, 4, 5]

    def test_list_all_empty(self, store: BookStore) -> None:
        assert store.list_all() == []
        assert store.count() == 0

    def test_list_all_in_insertion_order(self, store: BookStore) -> None:
        for title in ["C", "A", "B"]:
            store.insert(NewBook(title=title, author="X", isbn="1", published_year=2000))

        assert [book.title for book in store.list_all()] == ["C", "A", "B"]
        assert store.count() == 3

    def test_unicode_fields_roundtrip(self, store: BookStore) -> None:
        book = store.insert(
            NewBook(title="Cien años de soledad", author="García Márquez", isbn="84-376", published_year=1967)
        )

        assert store.get(book.id).title == "Cien años de soledad"

    def test_is_ready(self, store: BookStore) -> None:
        assert store.is_ready() is True


# -----------------------------------------------------------------------------
# Test: Conditional update
# -----------------------------------------------------------------------------


class TestConditionalUpdate:
    """Tests for conditional_update()."""

    def test_matching_version_is_applied(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)

        result = store.conditional_update(book.id, 0, checked_out)

        assert result.status is UpdateStatus.APPLIED
        assert result.book.is_available is False
        assert result.book.version == 1
        assert store.get(book.id) == result.book

    def test_stale_version_is_rejected_without_effect(self, store: BookStore, dune: NewBook) -> None:
        """
        GIVEN a book already updated once (version 1)
        WHEN a caller presents version 0
        THEN VERSION_CONFLICT is returned and the record is unchanged
        """
        book = store.insert(dune)
        store.conditional_update(book.id, 0, checked_out)

        result = store.conditional_update(book.id, 0, lambda b: b.with_availability(True))

        assert result.status is UpdateStatus.VERSION_CONFLICT
        assert result.book.version == 1
        current = store.get(book.id)
        assert current.is_available is False
        assert current.version == 1

    def test_future_version_is_rejected(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)

        result = store.conditional_update(book.id, 5, checked_out)

        assert result.status is UpdateStatus.VERSION_CONFLICT

    def test_unknown_id_is_not_found(self, store: BookStore) -> None:
        result = store.conditional_update(42, 0, checked_out)

        assert result.status is UpdateStatus.NOT_FOUND
        assert result.book is None

    @pytest.mark.parametrize("book_id", [2**63, 10**30])
    def test_id_beyond_integer_range_is_not_found(self, store: BookStore, dune: NewBook, book_id: int) -> None:
        store.insert(dune)

        assert store.get(book_id) is None
        result = store.conditional_update(book_id, 0, checked_out)
        assert result.status is UpdateStatus.NOT_FOUND

    def test_versions_increase_by_one(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)

        for expected in range(4):
            result = store.conditional_update(
                book.id, expected, lambda b: b.with_availability(not b.is_available)
            )
            assert result.book.version == expected + 1

    def test_mutator_cannot_change_id_or_version(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)
        other = store.insert(dune)

        result = store.conditional_update(
            book.id, 0, lambda b: replace(b, id=other.id, version=99, is_available=False)
        )

        assert result.book.id == book.id
        assert result.book.version == 1
        assert store.get(other.id).is_available is True

    def test_mutator_failure_leaves_record_untouched(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)

        def explode(_: Book) -> Book:
            raise ValueError("boom")

        with pytest.raises(ValueError, match="boom"):
            store.conditional_update(book.id, 0, explode)

        assert store.get(book.id) == book


# -----------------------------------------------------------------------------
# Test: Concurrency
# -----------------------------------------------------------------------------


class TestConcurrentConditionalUpdates:
    """Racing updates presenting the same expected version."""

    def test_exactly_one_update_applies(self, store: BookStore, dune: NewBook) -> None:
        book = store.insert(dune)
        n_threads = 8
        barrier = threading.Barrier(n_threads)

        def attempt(_):
            barrier.wait()
            return store.conditional_update(book.id, 0, checked_out).status

        with ThreadPoolExecutor(max_workers=n_threads) as pool:
            statuses = list(pool.map(attempt, range(n_threads)))

        assert statuses.count(UpdateStatus.APPLIED) == 1
        assert statuses.count(UpdateStatus.VERSION_CONFLICT) == n_threads - 1
        assert store.get(book.id).version == 1
