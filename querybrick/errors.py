"""Custom exception hierarchy for querybrick.

All public errors inherit from QueryBrickError so callers can catch the base
class for any querybrick-specific failure.  Errors raised by the connection
itself (driver or network failures) are never wrapped.
"""
from __future__ import annotations


class QueryBrickError(Exception):
    """Base exception for all querybrick errors."""


class QueryError(QueryBrickError):
    """Raised when a statement is configured with invalid input.

    Raised synchronously by the offending builder call, or by ``build()``
    when required state (table, rows, conflict columns) is missing.

    Args:
        message: Human-readable description.
        clause: The statement part being configured when the error occurred
            (e.g. ``'WHERE'``, ``'JOIN'``, ``'UPSERT'``).
    """

    def __init__(self, message: str, clause: str | None = None) -> None:
        super().__init__(message)
        self.clause = clause


class UnsupportedDialectError(QueryError):
    """Raised when a connection carries a dialect tag with no compiler.

    Args:
        dialect: The unrecognised dialect tag.
        registered: Dialect names that do have a compiler.
    """

    def __init__(self, dialect: object, registered: list[str] | None = None) -> None:
        message = f"Unsupported dialect: {dialect!r}."
        if registered:
            message += f" Registered dialects: {registered}."
        super().__init__(message, clause="DIALECT")
        self.dialect = dialect
        self.registered = registered or []
