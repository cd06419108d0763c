"""
Infrastructure adapters implementing the domain ports.

This package contains:
- InMemoryBookStore: Lock-guarded reference store kept in process memory
- SqliteBookStore: Durable store backed by a SQLite file
"""

from .memory.in_memory_book_store import InMemoryBookStore
from .db.sqlite_book_store import SqliteBookStore

__all__ = [
    "InMemoryBookStore",
    "SqliteBookStore",
]
