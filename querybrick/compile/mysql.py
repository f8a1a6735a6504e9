"""MySQL dialect compiler."""

from __future__ import annotations

from querybrick.compile.base import SQLCompiler, UpsertParts
from querybrick.schema.dialect import DatePart, Dialect

_EXTRACT: dict[DatePart, str] = {
    DatePart.DATE: "DATE({col})",
    DatePart.TIME: "TIME({col})",
    DatePart.YEAR: "YEAR({col})",
    DatePart.MONTH: "MONTH({col})",
    DatePart.DAY: "DAY({col})",
    DatePart.HOUR: "HOUR({col})",
    DatePart.MINUTE: "MINUTE({col})",
    DatePart.SECOND: "SECOND({col})",
}


class MySQLCompiler(SQLCompiler):
    """Renders MySQL-flavoured fragments.

    MySQL has a dedicated function per date part and resolves conflicts with
    ``ON DUPLICATE KEY UPDATE`` (reading the proposed row via ``VALUES(col)``)
    or ``INSERT IGNORE``.  It has no ``RETURNING`` clause, so returning
    columns are dropped.
    """

    @property
    def dialect(self) -> Dialect:
        return Dialect.MYSQL

    def random_function(self) -> str:
        return "RAND()"

    def extract(self, part: DatePart, column: str) -> str:
        return self._lookup(_EXTRACT, part, column)

    def upsert(self, parts: UpsertParts) -> str:
        if not parts.updates:
            return f"{self.insert_head(parts, 'INSERT IGNORE')};"
        updates = ", ".join(f"{c} = VALUES({c})" for c in parts.updates)
        return f"{self.insert_head(parts)} ON DUPLICATE KEY UPDATE {updates};"
