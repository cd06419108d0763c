"""
FastAPI dependencies for dependency injection.

This module provides singleton instances of the store and the lending
service for use with FastAPI's Depends() system.

Note: We use module-level singletons instead of @lru_cache with Depends()
parameters, which is an antipattern that can cause unexpected behavior.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from lending_service.domain.ports import BookStore
from lending_service.domain.services import DEFAULT_MAX_ATTEMPTS, LendingService
from lending_service.domain.value_objects import Deadline
from lending_service.infrastructure.db.sqlite_book_store import SqliteBookStore
from lending_service.infrastructure.memory.in_memory_book_store import InMemoryBookStore

logger = logging.getLogger(__name__)

# Configuration from environment
STORE_BACKEND = os.getenv("LENDING_STORE", "sqlite")
DB_PATH = Path(os.getenv("DB_PATH", "data/lending.db"))
MAX_ATTEMPTS = int(os.getenv("LENDING_MAX_ATTEMPTS", str(DEFAULT_MAX_ATTEMPTS)))
REQUEST_TIMEOUT_SECONDS = float(os.getenv("LENDING_REQUEST_TIMEOUT_SECONDS", "5.0"))

# Module-level singletons (initialized lazily)
_book_store: Optional[BookStore] = None
_lending_service: Optional[LendingService] = None


def get_book_store() -> BookStore:
    """Provide a singleton instance of the configured book store."""
    global _book_store
    if _book_store is None:
        if STORE_BACKEND == "memory":
            _book_store = InMemoryBookStore()
        elif STORE_BACKEND == "sqlite":
            _book_store = SqliteBookStore(DB_PATH)
        else:
            raise ValueError(
                f"LENDING_STORE must be 'sqlite' or 'memory', got '{STORE_BACKEND}'"
            )
        logger.info(f"Using {STORE_BACKEND} book store")
    return _book_store


def get_lending_service() -> LendingService:
    """Provide the Lending Service with its store wired."""
    global _lending_service
    if _lending_service is None:
        _lending_service = LendingService(
            store=get_book_store(),
            max_attempts=MAX_ATTEMPTS,
        )
    return _lending_service


def get_request_deadline() -> Deadline:
    """Deadline for the current request, fresh on every call."""
    return Deadline.after(REQUEST_TIMEOUT_SECONDS)


def reset_dependencies() -> None:
    """
    Reset all singletons. Useful for testing.

    This allows tests to inject their own store by resetting
    the module state between test cases.
    """
    global _book_store, _lending_service

    _book_store = None
    _lending_service = None
