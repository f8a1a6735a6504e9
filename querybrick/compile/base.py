"""Compiler abstractions: UpsertParts and the SQLCompiler ABC.

The Template Method pattern (GoF) is used:
- ``SQLCompiler`` owns the fragments every dialect renders the same way
  (the ``INSERT INTO ... VALUES ...`` head, the ``ON CONFLICT`` tail).
- ``MySQLCompiler``, ``PostgresCompiler`` and ``SQLiteCompiler`` implement
  the divergent steps (random ordering, date/time extraction, upsert
  conflict resolution).

Every compiler must implement every abstract method, so a new dialect cannot
be registered while leaving one of the branches out.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from querybrick.errors import QueryError
from querybrick.schema.dialect import DatePart, Dialect


@dataclass(frozen=True)
class UpsertParts:
    """The pre-validated pieces of an upsert statement.

    Attributes:
        table: Target table.
        columns: Column list shared by every row.
        tuples: Rendered VALUES tuples, e.g. ``'(?, NULL)'``.
        conflicts: Columns identifying a conflicting row.
        updates: Columns to overwrite on conflict (empty = do nothing).
        returning: Columns to return, where the dialect supports it.
    """

    table: str
    columns: tuple[str, ...]
    tuples: tuple[str, ...]
    conflicts: tuple[str, ...]
    updates: tuple[str, ...] = ()
    returning: tuple[str, ...] = ()


class SQLCompiler(ABC):
    """Abstract base for dialect-specific SQL fragment compilers."""

    @property
    @abstractmethod
    def dialect(self) -> Dialect:
        """Return the dialect this compiler renders for."""

    @abstractmethod
    def random_function(self) -> str:
        """Return the function call used by ``ORDER BY`` for random ordering."""

    @abstractmethod
    def extract(self, part: DatePart, column: str) -> str:
        """Wrap ``column`` in the expression extracting ``part``.

        Args:
            part: The date/time part to extract.
            column: A validated column identifier.

        Returns:
            SQL expression, e.g. ``'YEAR(created_at)'``.
        """

    @abstractmethod
    def upsert(self, parts: UpsertParts) -> str:
        """Render a complete upsert statement, terminated by ``;``."""

    # ------------------------------------------------------------------
    # Shared fragments
    # ------------------------------------------------------------------

    @staticmethod
    def insert_head(parts: UpsertParts, keyword: str = "INSERT") -> str:
        columns = ", ".join(parts.columns)
        values = ", ".join(parts.tuples)
        return f"{keyword} INTO {parts.table} ({columns}) VALUES {values}"

    @staticmethod
    def on_conflict(parts: UpsertParts) -> str:
        """Render the ``ON CONFLICT`` clause shared by PostgreSQL and SQLite."""
        conflicts = ", ".join(parts.conflicts)
        if not parts.updates:
            return f"ON CONFLICT ({conflicts}) DO NOTHING"
        updates = ", ".join(f"{c} = excluded.{c}" for c in parts.updates)
        return f"ON CONFLICT ({conflicts}) DO UPDATE SET {updates}"

    @staticmethod
    def _lookup(templates: dict[DatePart, str], part: DatePart, column: str) -> str:
        template = templates.get(part)
        if template is None:
            raise QueryError(f"Unsupported date part: {part!r}")
        return template.format(col=column)
