"""SQLite connection adapter over ``aiosqlite``.

Implements the :class:`~querybrick.schema.dialect.Connection` capability so
builders can execute against an embedded database::

    async with SQLiteConnection(":memory:") as connection:
        rows = await Select(connection).from_("users").exec()

The underlying ``aiosqlite`` connection is opened on first use (or on
``__aenter__``) so the object can be created outside an event loop.
"""
from __future__ import annotations

import logging
from typing import Any

import aiosqlite

from querybrick.errors import QueryError
from querybrick.schema.dialect import Dialect, Driver, Scalar

logger = logging.getLogger(__name__)


def _coerce(value: Scalar) -> Any:
    if isinstance(value, bool):
        return int(value)
    return value


class SQLiteConnection:
    """An async :class:`Connection` backed by one ``aiosqlite`` connection.

    Args:
        path: Database file path, or ``":memory:"``.
        foreign_keys: Enable ``PRAGMA foreign_keys``.

    ``query()`` returns a list of dicts for statements producing rows, the
    last inserted row id for an INSERT that changed exactly one row, and
    ``None`` otherwise.  ``aiosqlite.Error`` propagates unchanged.
    """

    driver = Driver(Dialect.SQLITE)

    def __init__(self, path: str = ":memory:", foreign_keys: bool = True) -> None:
        if not isinstance(path, str) or not path:
            raise QueryError(f"Invalid SQLite path: {path!r}")
        self._path = path
        self._foreign_keys = foreign_keys
        self._db: aiosqlite.Connection | None = None
        self._closed = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def connect(self) -> aiosqlite.Connection:
        """Open the database if needed and return the live connection."""
        if self._closed:
            raise QueryError("Cannot perform further operations once the connection is closed")
        if self._db is None:
            db = await aiosqlite.connect(self._path, isolation_level=None)
            db.row_factory = aiosqlite.Row
            if self._foreign_keys:
                await db.execute("PRAGMA foreign_keys = ON")
            self._db = db
            logger.debug("sqlite: opened %s", self._path)
        return self._db

    async def query(self, sql: str, values: list[Scalar] | None = None) -> Any:
        """Execute one statement with positional ``?`` values."""
        if self._closed:
            raise QueryError("Cannot perform further operations once the connection is closed")
        if not isinstance(sql, str):
            raise QueryError(f"Invalid query: {sql!r}")
        params = [_coerce(v) for v in (values or [])]
        db = await self.connect()
        logger.debug("sqlite: %s %r", sql, params)
        cursor = await db.execute(sql, params)
        try:
            if cursor.description is not None:
                return [dict(row) for row in await cursor.fetchall()]
            if sql.lstrip().upper().startswith("INSERT") and cursor.rowcount == 1:
                return cursor.lastrowid
            return None
        finally:
            await cursor.close()

    async def close(self) -> None:
        self._closed = True
        if self._db is not None:
            db, self._db = self._db, None
            await db.close()

    async def __aenter__(self) -> SQLiteConnection:
        await self.connect()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()
