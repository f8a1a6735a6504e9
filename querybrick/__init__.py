"""querybrick – Portable, parameterized SQL statement builders.

One fluent API, three dialects (MySQL, PostgreSQL, SQLite).

Public API
----------
``Builder``
    Hands out ``Select`` and ``Upsert`` builders bound to a connection.

``Select`` / ``Upsert``
    Statement builders.  ``build()`` renders SQL with ``?`` placeholders;
    ``await exec()`` sends it with the bound values to the connection.

``Condition`` / ``ref``
    Boolean expressions for WHERE, HAVING and JOIN ... ON clauses.

Connections
-----------
Any object with ``driver.id`` (a ``Dialect``) and an awaitable
``query(sql, values)`` can be used.  ``SQLiteConnection`` wraps an
``aiosqlite`` connection.

Extensibility
-------------
Dialect fragments are rendered by ``SQLCompiler`` subclasses registered
with ``CompilerFactory``::

    from querybrick.compile.registry import CompilerFactory

    CompilerFactory.register_class(Dialect.SQLITE, MySQLiteCompiler)
"""

from __future__ import annotations

from querybrick.builder import Builder
from querybrick.compile.base import SQLCompiler, UpsertParts
from querybrick.compile.mysql import MySQLCompiler
from querybrick.compile.postgres import PostgresCompiler
from querybrick.compile.registry import CompilerFactory
from querybrick.compile.sqlite import SQLiteCompiler
from querybrick.drivers.sqlite import SQLiteConnection
from querybrick.errors import QueryBrickError, QueryError, UnsupportedDialectError
from querybrick.schema.dialect import Connection, DatePart, Dialect, Driver, Scalar
from querybrick.schema.options import CountOptions, PageInfo, Pagination, TotalInfo
from querybrick.sql.condition import (
    Condition,
    Ref,
    ex_date,
    ex_day,
    ex_hour,
    ex_minute,
    ex_month,
    ex_second,
    ex_time,
    ex_year,
    ref,
)
from querybrick.sql.query import Query
from querybrick.sql.select import ASC, DESC, Order, Select
from querybrick.sql.upsert import Upsert

# ---------------------------------------------------------------------------
# Register built-in compilers with CompilerFactory
# ---------------------------------------------------------------------------

CompilerFactory.register_class(Dialect.MYSQL, MySQLCompiler)
CompilerFactory.register_class(Dialect.POSTGRESQL, PostgresCompiler)
CompilerFactory.register_class(Dialect.SQLITE, SQLiteCompiler)

__all__ = [
    # Entry point
    "Builder",
    # Statements
    "Query",
    "Select",
    "Upsert",
    "Order",
    "ASC",
    "DESC",
    # Conditions
    "Condition",
    "Ref",
    "ref",
    "ex_date",
    "ex_time",
    "ex_year",
    "ex_month",
    "ex_day",
    "ex_hour",
    "ex_minute",
    "ex_second",
    # Connections
    "Connection",
    "Driver",
    "Dialect",
    "DatePart",
    "Scalar",
    "SQLiteConnection",
    # Options & results
    "CountOptions",
    "Pagination",
    "PageInfo",
    "TotalInfo",
    # Compilation
    "CompilerFactory",
    "SQLCompiler",
    "UpsertParts",
    "MySQLCompiler",
    "PostgresCompiler",
    "SQLiteCompiler",
    # Errors
    "QueryBrickError",
    "QueryError",
    "UnsupportedDialectError",
]
