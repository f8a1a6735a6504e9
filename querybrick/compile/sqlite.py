"""SQLite dialect compiler."""
from __future__ import annotations

from querybrick.compile.base import SQLCompiler, UpsertParts
from querybrick.schema.dialect import DatePart, Dialect

_EXTRACT: dict[DatePart, str] = {
    DatePart.DATE: "DATE({col})",
    DatePart.TIME: "STRFTIME('%H:%M:%S', {col})",
    DatePart.YEAR: "STRFTIME('%Y', {col})",
    DatePart.MONTH: "STRFTIME('%m', {col})",
    DatePart.DAY: "STRFTIME('%d', {col})",
    DatePart.HOUR: "STRFTIME('%H', {col})",
    DatePart.MINUTE: "STRFTIME('%M', {col})",
    DatePart.SECOND: "STRFTIME('%S', {col})",
}


class SQLiteCompiler(SQLCompiler):
    """Renders SQLite-flavoured fragments.

    Note: ``STRFTIME`` returns zero-padded text (``'05'``) and a function
    result has no type affinity, so an integer bound against it never
    compares equal.  ``RETURNING`` is not emitted for upserts.
    """

    @property
    def dialect(self) -> Dialect:
        return Dialect.SQLITE

    def random_function(self) -> str:
        return "RANDOM()"

    def extract(self, part: DatePart, column: str) -> str:
        return self._lookup(_EXTRACT, part, column)

    def upsert(self, parts: UpsertParts) -> str:
        return f"{self.insert_head(parts)} {self.on_conflict(parts)};"
