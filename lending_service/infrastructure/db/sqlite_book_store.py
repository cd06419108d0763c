"""
SQLite implementation of the BookStore port.

This adapter persists Book records to a SQLite database file, handling
row conversion and implementing conditional updates as a compare-and-set
on the version column inside an IMMEDIATE transaction.
"""

import logging
import sqlite3
from contextlib import closing, contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

from lending_service.domain.entities import Book
from lending_service.domain.errors import StorageFault
from lending_service.domain.ports import BookStore
from lending_service.domain.value_objects import (
    BookMutator,
    ConditionalUpdateResult,
    NewBook,
    UpdateStatus,
)

logger = logging.getLogger(__name__)

# SQLite INTEGER is a signed 64-bit value
_MAX_ROW_ID = 2**63 - 1


class SqliteBookStore(BookStore):
    """
    Every operation opens its own connection, so the store is safe to share
    between request threads. Ids come from AUTOINCREMENT and are never
    reused, even after rows disappear. The database must be a file: each
    ':memory:' connection would see its own empty database.
    """

    def __init__(self, db_path: Path, timeout: float = 5.0) -> None:
        """
        Initialize the store with a database path.

        Args:
            db_path: Location of the SQLite file (parent dirs are created)
            timeout: Seconds a connection waits for a competing writer's lock
        """
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        """Open a connection in autocommit mode with row factory; always closed on exit."""
        conn = sqlite3.connect(
            str(self._db_path),
            timeout=self._timeout,
            isolation_level=None,  # explicit BEGIN/COMMIT
        )
        conn.row_factory = sqlite3.Row
        with closing(conn):
            yield conn

    def _init_schema(self) -> None:
        """Create the books table if it doesn't exist."""
        try:
            with self._connect() as conn:
                conn.execute("""
                    CREATE TABLE IF NOT EXISTS books (
                        id INTEGER PRIMARY KEY AUTOINCREMENT,
                        title TEXT NOT NULL,
                        author TEXT NOT NULL,
                        isbn TEXT NOT NULL,
                        published_year INTEGER NOT NULL,
                        is_available INTEGER NOT NULL DEFAULT 1,
                        version INTEGER NOT NULL DEFAULT 0
                    )
                """)
        except sqlite3.Error as e:
            raise StorageFault("schema initialisation", str(e)) from e

    @staticmethod
    def _row_to_book(row: sqlite3.Row) -> Book:
        """Convert a database row to a Book entity."""
        return Book(
            id=row["id"],
            title=row["title"],
            author=row["author"],
            isbn=row["isbn"],
            published_year=row["published_year"],
            is_available=bool(row["is_available"]),
            version=row["version"],
        )

    def list_all(self) -> List[Book]:
        """Retrieve all books in insertion order."""
        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT * FROM books ORDER BY id").fetchall()
                return [self._row_to_book(row) for row in rows]
        except sqlite3.Error as e:
            raise StorageFault("list_all", str(e)) from e

    @staticmethod
    def _is_storable_id(book_id: int) -> bool:
        """Ids outside SQLite's INTEGER range can never name a row."""
        return 1 <= book_id <= _MAX_ROW_ID

    def get(self, book_id: int) -> Optional[Book]:
        """Retrieve a book by id."""
        if not self._is_storable_id(book_id):
            return None

        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT * FROM books WHERE id = ?",
                    (book_id,)
                ).fetchone()

                if row is None:
                    return None

                return self._row_to_book(row)
        except sqlite3.Error as e:
            raise StorageFault("get", str(e)) from e

    def insert(self, candidate: NewBook) -> Book:
        """Persist a new available book and return it with its assigned id."""
        try:
            with self._connect() as conn:
                cursor = conn.execute("""
                    INSERT INTO books (title, author, isbn, published_year, is_available, version)
                    VALUES (:title, :author, :isbn, :published_year, 1, 0)
                """, {
                    "title": candidate.title,
                    "author": candidate.author,
                    "isbn": candidate.isbn,
                    "published_year": candidate.published_year,
                })
                book_id = cursor.lastrowid
        except sqlite3.Error as e:
            raise StorageFault("insert", str(e)) from e

        return Book(
            id=book_id,
            title=candidate.title,
            author=candidate.author,
            isbn=candidate.isbn,
            published_year=candidate.published_year,
            is_available=True,
            version=0,
        )

    def conditional_update(
        self,
        book_id: int,
        expected_version: int,
        mutator: BookMutator,
    ) -> ConditionalUpdateResult:
        """
        Compare-and-set on the version column.

        BEGIN IMMEDIATE takes the write lock before the read, so no other
        writer can slip in between the version check and the UPDATE. The
        UPDATE still filters on the expected version as a second guard.
        """
        if not self._is_storable_id(book_id):
            return ConditionalUpdateResult(status=UpdateStatus.NOT_FOUND)

        try:
            with self._connect() as conn:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    result = self._compare_and_set(conn, book_id, expected_version, mutator)
                except BaseException:
                    conn.rollback()
                    raise
                conn.commit()
                return result
        except sqlite3.Error as e:
            raise StorageFault("conditional_update", str(e)) from e

    def _compare_and_set(
        self,
        conn: sqlite3.Connection,
        book_id: int,
        expected_version: int,
        mutator: BookMutator,
    ) -> ConditionalUpdateResult:
        row = conn.execute("SELECT * FROM books WHERE id = ?", (book_id,)).fetchone()
        if row is None:
            return ConditionalUpdateResult(status=UpdateStatus.NOT_FOUND)

        current = self._row_to_book(row)
        if current.version != expected_version:
            return ConditionalUpdateResult(status=UpdateStatus.VERSION_CONFLICT, book=current)

        mutated = mutator(current)
        updated = Book(
            id=current.id,
            title=mutated.title,
            author=mutated.author,
            isbn=mutated.isbn,
            published_year=mutated.published_year,
            is_available=mutated.is_available,
            version=expected_version + 1,
        )

        cursor = conn.execute("""
            UPDATE books
            SET title = :title,
                author = :author,
                isbn = :isbn,
                published_year = :published_year,
                is_available = :is_available,
                version = :new_version
            WHERE id = :id AND version = :expected_version
        """, {
            "id": updated.id,
            "title": updated.title,
            "author": updated.author,
            "isbn": updated.isbn,
            "published_year": updated.published_year,
            "is_available": int(updated.is_available),
            "new_version": updated.version,
            "expected_version": expected_version,
        })

        if cursor.rowcount != 1:
            logger.warning(f"Compare-and-set on book {book_id} matched no row")
            return ConditionalUpdateResult(status=UpdateStatus.VERSION_CONFLICT, book=current)

        return ConditionalUpdateResult(status=UpdateStatus.APPLIED, book=updated)

    def count(self) -> int:
        """Get the total number of books."""
        try:
            with self._connect() as conn:
                result = conn.execute("SELECT COUNT(*) as cnt FROM books").fetchone()
                return result["cnt"]
        except sqlite3.Error as e:
            raise StorageFault("count", str(e)) from e

    def is_ready(self) -> bool:
        """Check that the database file can be queried."""
        try:
            with self._connect() as conn:
                conn.execute("SELECT 1 FROM books LIMIT 1").fetchall()
            return True
        except sqlite3.Error as e:
            logger.error(f"SQLite store not ready: {e}")
            return False
