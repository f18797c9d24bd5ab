"""Domain error taxonomy shared by every core component."""

from __future__ import annotations

from typing import Any


class StaffingError(Exception):
    """Base class for errors reported to callers of the core.

    ``context`` carries whatever a caller needs to retry or to explain the
    failure to a human (requisition id, level, expected vs. actual values).
    """

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value!r}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class ValidationError(StaffingError):
    """Input rejected before any state mutation."""


class AuthorizationError(StaffingError):
    """Acting role is not allowed to perform the operation."""


class NotFoundError(StaffingError):
    """Unknown requisition, candidate, approver or store."""


class ConflictError(StaffingError):
    """Operation is not allowed in the document's current state."""


class ConcurrencyConflict(StaffingError):
    """Stored version marker changed since the caller read it."""

    def __init__(self, message: str, *, expected: Any, actual: Any, **context: Any) -> None:
        super().__init__(message, expected=expected, actual=actual, **context)
        self.expected = expected
        self.actual = actual


class GeocodeUnavailable(StaffingError):
    """No coordinates for a candidate or store."""


__all__ = [
    "StaffingError",
    "ValidationError",
    "AuthorizationError",
    "NotFoundError",
    "ConflictError",
    "ConcurrencyConflict",
    "GeocodeUnavailable",
]
