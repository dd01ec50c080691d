"""Exception hierarchy for commitments and their scheduling."""

from __future__ import annotations

from collections.abc import Iterable


class CommitmentError(Exception):
    """Base class for errors raised by the commitment package."""

    pass


class AggregateError(CommitmentError):
    """Carrier of several failure causes, produced when every input to ``any`` rejects.

    Args:
        errors: Failure causes in the order their commitments rejected.
        message: Human-readable summary.
    """

    def __init__(self, errors: Iterable[object], message: str = "") -> None:
        super().__init__(message)
        self._errors = tuple(errors)
        self._message = message

    @property
    def errors(self) -> tuple[object, ...]:
        """Collected failure causes."""
        return self._errors

    @property
    def message(self) -> str:
        """Human-readable summary."""
        return self._message

    def __repr__(self) -> str:
        return f"AggregateError({list(self._errors)!r}, {self._message!r})"


class RejectionError(CommitmentError):
    """Raised by ``await`` when a commitment was rejected with a non-exception reason."""

    def __init__(self, reason: object) -> None:
        super().__init__(f"Commitment rejected with non-exception reason: {reason!r}")
        self.reason = reason


class SchedulingError(CommitmentError, RuntimeError):
    """Raised when a deferred callback cannot be scheduled."""

    pass


__all__ = [
    "AggregateError",
    "CommitmentError",
    "RejectionError",
    "SchedulingError",
]
