"""Multi-row INSERT with per-dialect conflict handling.

The column list is fixed by the first row.  Later rows must carry the same
set of keys; their values are re-ordered to the fixed column order, so
``{"id": 1, "name": "a"}`` and ``{"name": "b", "id": 2}`` describe the same
columns.

``None`` values render as a literal ``NULL`` inside their VALUES tuple and
are not bound.
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from querybrick.compile.base import UpsertParts
from querybrick.errors import QueryError
from querybrick.schema.dialect import Scalar
from querybrick.sql.query import Query


def _is_full_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_row_value(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _columns(label: str, columns: tuple[str, ...]) -> tuple[str, ...]:
    if not columns or not all(_is_full_str(c) for c in columns):
        raise QueryError(f"Invalid {label} columns: {list(columns)}", clause="UPSERT")
    return columns


class Upsert(Query):
    """Builds ``INSERT ... ON CONFLICT`` / ``ON DUPLICATE KEY`` statements.

    Example::

        await (
            Upsert(connection)
            .into("users")
            .row({"id": 1, "name": "John"})
            .conflict("id")
            .set("name")
            .exec()
        )
    """

    def __init__(self, connection: Any) -> None:
        super().__init__(connection)
        self._table: str | None = None
        self._columns: tuple[str, ...] | None = None
        self._rows: list[tuple[Scalar, ...]] = []
        self._conflicts: tuple[str, ...] = ()
        self._updates: tuple[str, ...] = ()
        self._returning: tuple[str, ...] = ()

    def reset(self) -> Upsert:
        self._table = None
        self._columns = None
        self._rows = []
        self._conflicts = ()
        self._updates = ()
        self._returning = ()
        self._values = []
        return self

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def into(self, table: str) -> Upsert:
        if not _is_full_str(table):
            raise QueryError(f"Invalid UPSERT table: {table}", clause="UPSERT")
        self._table = table
        return self

    def row(self, row: Mapping[str, Scalar]) -> Upsert:
        """Add one row.  The first row fixes the column list."""
        columns, values = self._prepare(row, self._columns)
        self._columns = columns
        self._rows.append(values)
        return self

    def rows(self, rows: Sequence[Mapping[str, Scalar]]) -> Upsert:
        """Add two or more rows.  Nothing is added if any row is invalid."""
        if isinstance(rows, (str, bytes)) or not isinstance(rows, Sequence):
            raise QueryError(f"Invalid rows: {rows!r}", clause="UPSERT")
        if not all(isinstance(r, Mapping) for r in rows):
            raise QueryError(f"Invalid rows: {rows!r}", clause="UPSERT")
        if len(rows) < 2:
            raise QueryError("Bulk insert requires at least 2 rows.", clause="UPSERT")

        columns = self._columns
        prepared: list[tuple[Scalar, ...]] = []
        for row in rows:
            columns, values = self._prepare(row, columns)
            prepared.append(values)

        self._columns = columns
        self._rows.extend(prepared)
        return self

    def conflict(self, *columns: str) -> Upsert:
        self._conflicts = _columns("UPSERT conflict", columns)
        return self

    def set(self, *columns: str) -> Upsert:
        self._updates = _columns("UPSERT update", columns)
        return self

    def returning(self, *columns: str) -> Upsert:
        """Columns to return.  Rendered on PostgreSQL only."""
        self._returning = _columns("RETURNING", columns)
        return self

    @staticmethod
    def _prepare(
        row: Any,
        columns: tuple[str, ...] | None,
    ) -> tuple[tuple[str, ...], tuple[Scalar, ...]]:
        if not isinstance(row, Mapping):
            raise QueryError(f"Invalid UPSERT row: {row!r}", clause="UPSERT")
        if not row:
            raise QueryError(f"Empty UPSERT row: {dict(row)!r}", clause="UPSERT")
        for key in row:
            if not _is_full_str(key):
                raise QueryError(f"Invalid UPSERT column: {key!r}", clause="UPSERT")
        if columns is None:
            columns = tuple(row)
        elif len(row) != len(columns) or set(row) != set(columns):
            raise QueryError(f"Invalid UPSERT row: {dict(row)!r}", clause="UPSERT")
        values = tuple(row[c] for c in columns)
        for value in values:
            if not _is_row_value(value):
                raise QueryError(f"Invalid UPSERT value: {value!r}", clause="UPSERT")
        return columns, values

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def build(self) -> str:
        """Render the statement for the connection's dialect.

        Raises:
            QueryError: If the table, rows or conflict columns are missing.
            UnsupportedDialectError: If the connection's dialect is unknown.
        """
        if not _is_full_str(self._table):
            raise QueryError(f"Invalid UPSERT table: {self._table}", clause="UPSERT")
        if not self._rows or self._columns is None:
            raise QueryError(f"Invalid UPSERT values: {self._rows}", clause="UPSERT")
        if not self._conflicts:
            raise QueryError(f"Invalid UPSERT conflict: {list(self._conflicts)}", clause="UPSERT")

        compiler = self.compiler
        parts = UpsertParts(
            table=self._table,
            columns=self._columns,
            tuples=tuple(
                "(" + ", ".join("NULL" if v is None else "?" for v in row) + ")"
                for row in self._rows
            ),
            conflicts=self._conflicts,
            updates=self._updates,
            returning=self._returning,
        )
        sql = compiler.upsert(parts)
        self._values = [[v for v in row if v is not None] for row in self._rows]
        return sql
