"""Entry point handing out statement builders bound to one connection."""
from __future__ import annotations

from typing import Any

from querybrick.errors import QueryError
from querybrick.schema.dialect import Connection, Scalar
from querybrick.sql.query import is_connection
from querybrick.sql.select import Select
from querybrick.sql.upsert import Upsert


class Builder:
    """Creates :class:`Select` and :class:`Upsert` builders for a connection.

    Example::

        builder = Builder(connection)
        users = await builder.select("id", "name").from_("users").exec()

    Args:
        connection: The connection every builder created here is bound to.

    Raises:
        QueryError: If ``connection`` does not expose ``query()`` and
            ``driver``.
    """

    def __init__(self, connection: Connection) -> None:
        self.set_connection(connection)

    @property
    def connection(self) -> Connection:
        return self._connection

    @connection.setter
    def connection(self, connection: Connection) -> None:
        self.set_connection(connection)

    def get_connection(self) -> Connection:
        return self._connection

    def set_connection(self, connection: Connection) -> None:
        """Rebind the builder.  Builders already handed out keep their connection."""
        if not is_connection(connection):
            raise QueryError(f"Invalid connection: {connection!r}")
        self._connection = connection

    def select(self, *columns: str) -> Select:
        select = Select(self._connection)
        return select.col(*columns) if columns else select

    def upsert(self) -> Upsert:
        return Upsert(self._connection)

    async def raw(self, sql: str, values: list[Scalar] | None = None) -> Any:
        """Execute ``sql`` directly on the connection."""
        return await self._connection.query(sql, values)
