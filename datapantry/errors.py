"""Custom exception hierarchy for datapantry.

All public errors inherit from DataPantryError so callers can catch the base
class for any datapantry-specific failure.
"""
from __future__ import annotations

from typing import Any


class DataPantryError(Exception):
    """Base exception for all datapantry errors.

    Args:
        message: Human-readable description.
        details: Extra structured context about the failure.
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details: dict[str, Any] = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Returns the error as a JSON-serializable dict."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class RemoteQueryError(DataPantryError):
    """Raised when an executor reports a non-success outcome.

    Carries the message supplied by the remote service when there is one,
    otherwise a generic failure message.  Never retried by the builder.

    Args:
        message: Remote-provided (or generic) failure message.
        status_code: HTTP status code, when the failure came from a response.
    """

    def __init__(self, message: str = "Query failed", status_code: int | None = None) -> None:
        super().__init__(message, details={"status_code": status_code})
        self.status_code = status_code


class MalformedStatementError(DataPantryError):
    """Raised when a statement cannot be assembled or executed as built.

    Args:
        message: Human-readable description.
        clause: The clause being added or required when the error occurred.
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message, details={"clause": clause})
        self.clause = clause


class StatementConsumedError(MalformedStatementError):
    """Raised when a statement is modified or executed after it already ran."""

    def __init__(self, kind: str) -> None:
        super().__init__(
            f"{kind} statement has already been executed; build a new one.",
            clause="execute",
        )
        self.kind = kind


class InvalidArgumentError(DataPantryError, ValueError):
    """Raised synchronously when a builder receives input outside its contract.

    Args:
        message: Human-readable description.
        argument: Name of the offending argument.
    """

    def __init__(self, message: str, argument: str | None = None) -> None:
        super().__init__(message, details={"argument": argument})
        self.argument = argument
