"""
Domain layer - Core business logic and entities.

This layer contains the book entity, value objects, the failure taxonomy,
and defines the ports (interfaces) that the infrastructure layer must implement.

It has NO dependencies on external frameworks, databases, or APIs.
"""

from .entities import Book
from .errors import FailureKind, LendingFailure, LendingResult, StorageFault
from .value_objects import (
    BookView,
    ConditionalUpdateResult,
    Deadline,
    NewBook,
    UpdateStatus,
)

__all__ = [
    # Entities
    "Book",
    # Value Objects
    "NewBook",
    "BookView",
    "Deadline",
    "UpdateStatus",
    "ConditionalUpdateResult",
    # Results and errors
    "FailureKind",
    "LendingFailure",
    "LendingResult",
    "StorageFault",
]
