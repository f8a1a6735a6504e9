"""Dialect tags and the connection capability consumed by the builders.

The builders never open, pool, or close connections.  They receive an
object satisfying :class:`Connection`: an awaitable ``query(sql, values)``
plus a ``driver`` whose ``id`` is one of the :class:`Dialect` members.
Everything dialect-specific downstream switches on that tag.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, Union, runtime_checkable

from querybrick.errors import UnsupportedDialectError

#: A value that may be bound to a ``?`` placeholder.
Scalar = Union[str, int, float, bool, None]


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Dialect(str, Enum):
    """The SQL back-end families the builders render for."""

    MYSQL = "mysql"
    POSTGRESQL = "postgresql"
    SQLITE = "sqlite"


class DatePart(str, Enum):
    """Date/time parts that can be extracted from a column for comparison."""

    DATE = "date"
    TIME = "time"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"


# ---------------------------------------------------------------------------
# Connection capability
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Driver:
    """Identifies the back-end a connection talks to.

    Attributes:
        id: Dialect tag the builders branch on.
    """

    id: Dialect


@runtime_checkable
class Connection(Protocol):
    """The execution capability a builder is bound to."""

    driver: Driver

    async def query(self, sql: str, values: list[Scalar] | None = None) -> Any:
        """Execute ``sql`` with positional ``values`` and return the result."""
        ...


def dialect_of(source: Any) -> Dialect:
    """Return the dialect tag carried by ``source``.

    ``source`` may be a :class:`Dialect`, a :class:`Driver`, or a connection
    exposing ``driver.id``.

    Raises:
        UnsupportedDialectError: If no recognised tag can be found.
    """
    if isinstance(source, Dialect):
        return source
    driver = getattr(source, "driver", None)
    tag = getattr(driver if driver is not None else source, "id", None)
    if isinstance(tag, Dialect):
        return tag
    if isinstance(tag, str):
        try:
            return Dialect(tag.lower())
        except ValueError:
            pass
    raise UnsupportedDialectError(tag if tag is not None else source)
