"""Abstract statement builder shared by every statement kind.

A :class:`Query` is bound to one connection for its whole life.  Concrete
builders accumulate state through chained calls and render it in
:meth:`Query.build`, which also repopulates the bound values as one group
per rendered clause.  The groups are flattened in a single step,
:func:`flatten_values`, right before they are exposed or sent to the
connection.

Only :meth:`exec`, :meth:`first`, :meth:`last` and :meth:`raw` await the
connection; everything else is synchronous.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, Generic, TypeVar

from querybrick.compile.base import SQLCompiler
from querybrick.compile.registry import CompilerFactory
from querybrick.errors import QueryError
from querybrick.schema.dialect import Connection, Dialect, Scalar

logger = logging.getLogger(__name__)

Q = TypeVar("Q", bound="Query")


def flatten_values(groups: Iterable[Iterable[Scalar]]) -> list[Scalar]:
    """Flatten per-clause value groups into the positional parameter list."""
    return [value for group in groups for value in group]


def is_connection(connection: Any) -> bool:
    """Return ``True`` if ``connection`` exposes ``query()`` and ``driver``."""
    return callable(getattr(connection, "query", None)) and hasattr(connection, "driver")


class _Getter(Generic[Q]):
    """``statement.get``: rendered SQL and values without executing."""

    def __init__(self, statement: Q) -> None:
        self._statement = statement

    def query(self) -> str:
        return self._statement.build()

    def values(self) -> list[Scalar]:
        self._statement.build()
        return flatten_values(self._statement._values)


class _Logger(Generic[Q]):
    """``statement.log``: emit the rendered SQL or values and keep chaining."""

    def __init__(self, statement: Q) -> None:
        self._statement = statement

    def query(self) -> Q:
        logger.info("%s", self._statement.get.query())
        return self._statement

    def values(self) -> Q:
        logger.info("%r", self._statement.get.values())
        return self._statement


class Query(ABC):
    """Base class for SELECT and UPSERT builders.

    Args:
        connection: The connection statements are executed on.

    Raises:
        QueryError: If ``connection`` does not expose ``query()`` and
            ``driver``.
    """

    def __init__(self, connection: Connection) -> None:
        if not is_connection(connection):
            raise QueryError(f"Invalid connection: {connection!r}")
        self._connection = connection
        self._values: list[list[Scalar]] = []
        self.get: _Getter[Any] = _Getter(self)
        self.log: _Logger[Any] = _Logger(self)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def connection(self) -> Connection:
        return self._connection

    @property
    def compiler(self) -> SQLCompiler:
        """Compiler for the connection's dialect.

        Resolved on each access so an unsupported tag fails at the call that
        needs a dialect-specific fragment.

        Raises:
            UnsupportedDialectError: If the tag has no registered compiler.
        """
        return CompilerFactory.create(self._connection)

    @property
    def dialect(self) -> Dialect:
        return self.compiler.dialect

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------

    async def exec(self) -> Any:
        """Build the statement and execute it on the bound connection.

        Returns:
            Whatever the connection returns (rows for SELECT statements).
        """
        sql = self.build()
        values = flatten_values(self._values)
        logger.debug("Executing %s with %d bound value(s)", sql, len(values))
        return await self._connection.query(sql, values)

    async def first(self) -> Any:
        """Execute and return the first row, ``None`` if there are no rows.

        A result that is not a list is returned unchanged.
        """
        result = await self.exec()
        if isinstance(result, list):
            return result[0] if result else None
        return result

    async def last(self) -> Any:
        """Execute and return the last row, ``None`` if there are no rows."""
        result = await self.exec()
        if isinstance(result, list):
            return result[-1] if result else None
        return result

    async def raw(self, sql: str, values: list[Scalar] | None = None) -> Any:
        """Execute ``sql`` on the bound connection, bypassing the builder."""
        if not isinstance(sql, str) or not sql:
            raise QueryError(f"Invalid query: {sql!r}")
        if values is not None and not isinstance(values, (list, tuple)):
            raise QueryError(f"Invalid query values: {values!r}")
        return await self._connection.query(sql, list(values) if values is not None else None)

    # ------------------------------------------------------------------
    # Builder contract
    # ------------------------------------------------------------------

    @abstractmethod
    def reset(self: Q) -> Q:
        """Clear all statement state so the instance can be reused."""

    @abstractmethod
    def build(self) -> str:
        """Render the statement and repopulate the bound values."""
