"""Test fixtures: a recording connection and the sample SQLite DDL."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from querybrick.schema.dialect import Dialect, Driver

_FIXTURES_DIR = Path(__file__).parent


class FakeConnection:
    """Records every ``query()`` call and replays canned results.

    Args:
        dialect: Tag exposed as ``driver.id``.  Any value is accepted so
            tests can exercise unknown tags.
        results: Returned by successive ``query()`` calls, in order.  Once
            exhausted, ``query()`` returns ``[]``.
    """

    def __init__(self, dialect: Any = Dialect.SQLITE, results: list[Any] | None = None) -> None:
        self.driver = Driver(dialect)
        self.results = list(results or [])
        self.calls: list[tuple[str, list[Any] | None]] = []

    async def query(self, sql: str, values: list[Any] | None = None) -> Any:
        self.calls.append((sql, values))
        if self.results:
            return self.results.pop(0)
        return []

    @property
    def last(self) -> tuple[str, list[Any] | None]:
        return self.calls[-1]


def load_ddl() -> str:
    """Return the sample SQLite DDL used by the integration tests."""
    return (_FIXTURES_DIR / "ddl_sqlite.sql").read_text()
