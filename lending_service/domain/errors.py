"""
Failure taxonomy of the lending domain.

Expected business outcomes (invalid input, unknown book, refused
transition, exhausted retries) are values carried by LendingResult.
Only faults of the storage medium are raised, as StorageFault, so the
HTTP boundary can tell "the request was refused" apart from "something broke".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .value_objects import BookView


class StorageFault(RuntimeError):
    """Raised when the underlying storage medium is unavailable or errored."""

    def __init__(self, operation: str, message: str):
        self.operation = operation
        super().__init__(f"Storage failure during {operation}: {message}")


class FailureKind(str, Enum):
    """Named business failures a lending operation can report."""

    INVALID_ARGUMENT = "invalid_argument"
    NOT_FOUND = "not_found"
    ALREADY_CHECKED_OUT = "already_checked_out"
    ALREADY_AVAILABLE = "already_available"
    CONFLICT = "conflict"
    DEADLINE_EXCEEDED = "deadline_exceeded"


@dataclass(frozen=True)
class LendingFailure:
    """A failure kind plus a human-readable message."""

    kind: FailureKind
    message: str


@dataclass(frozen=True)
class LendingResult:
    """
    Outcome of a lending operation: either a BookView or a LendingFailure.

    Exactly one of `view` and `failure` is set. Use the `ok()` and `fail()`
    constructors rather than building instances directly.
    """

    view: Optional[BookView] = None
    failure: Optional[LendingFailure] = None

    def __post_init__(self) -> None:
        """Validate that the result carries exactly one outcome."""
        if (self.view is None) == (self.failure is None):
            raise ValueError("LendingResult must carry exactly one of view or failure")

    @staticmethod
    def ok(view: BookView) -> "LendingResult":
        return LendingResult(view=view)

    @staticmethod
    def fail(kind: FailureKind, message: str) -> "LendingResult":
        return LendingResult(failure=LendingFailure(kind=kind, message=message))

    @property
    def is_success(self) -> bool:
        return self.view is not None

    @property
    def failure_kind(self) -> Optional[FailureKind]:
        """The failure kind, or None for a successful result."""
        return self.failure.kind if self.failure is not None else None
