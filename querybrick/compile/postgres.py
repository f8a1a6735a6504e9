"""PostgreSQL dialect compiler."""

from __future__ import annotations

from querybrick.compile.base import SQLCompiler, UpsertParts
from querybrick.schema.dialect import DatePart, Dialect

_EXTRACT: dict[DatePart, str] = {
    DatePart.DATE: "DATE({col})",
    DatePart.TIME: "TO_CHAR({col}, 'HH24:MI:SS')",
    DatePart.YEAR: "EXTRACT(YEAR FROM {col})",
    DatePart.MONTH: "EXTRACT(MONTH FROM {col})",
    DatePart.DAY: "EXTRACT(DAY FROM {col})",
    DatePart.HOUR: "EXTRACT(HOUR FROM {col})",
    DatePart.MINUTE: "EXTRACT(MINUTE FROM {col})",
    DatePart.SECOND: "EXTRACT(SECOND FROM {col})",
}


class PostgresCompiler(SQLCompiler):
    """Renders PostgreSQL-flavoured fragments.

    Time of day is compared as text via ``TO_CHAR`` so that a ``'HH:MM:SS'``
    string can be bound directly; every numeric part uses ``EXTRACT``.
    PostgreSQL is the only dialect that honours ``RETURNING`` on upserts.
    """

    @property
    def dialect(self) -> Dialect:
        return Dialect.POSTGRESQL

    def random_function(self) -> str:
        return "RANDOM()"

    def extract(self, part: DatePart, column: str) -> str:
        return self._lookup(_EXTRACT, part, column)

    def upsert(self, parts: UpsertParts) -> str:
        sql = f"{self.insert_head(parts)} {self.on_conflict(parts)}"
        if parts.returning:
            sql += f" RETURNING {', '.join(parts.returning)}"
        return f"{sql};"
