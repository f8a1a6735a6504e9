"""SELECT statement builder.

Rendering order is fixed::

    SELECT [DISTINCT] <columns> FROM <table> [<joins>] [WHERE ...]
    [GROUP BY ...] [HAVING ...] [ORDER BY ...] [LIMIT n] [OFFSET n] [<unions>]

Bound values are collected in the same order the clauses are rendered: join
conditions, then WHERE, then HAVING, then each union subquery.

Example::

    rows = await (
        Select(connection)
        .from_("users")
        .where(lambda col, con: col("name").like("J%"))
        .and_()
        .paren()
        .where(lambda col, con: col("city").equal("Paris").or_().col("state").equal("CA"))
        .paren()
        .order_by("name")
        .exec()
    )
"""
from __future__ import annotations

import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import ValidationError

from querybrick.errors import QueryError
from querybrick.schema.dialect import Scalar
from querybrick.schema.options import CountOptions, PageInfo, Pagination, TotalInfo
from querybrick.sql.condition import Condition
from querybrick.sql.query import Query, flatten_values

logger = logging.getLogger(__name__)

#: ``callback(col, condition)``; ``col`` is the condition's bound ``col`` method.
ConditionCallback = Callable[[Callable[[str], Condition], Condition], Any]


class Order(str, Enum):
    """Sort direction for ``ORDER BY``."""

    ASC = "ASC"
    DESC = "DESC"


ASC = Order.ASC
DESC = Order.DESC


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class JoinClause:
    type: str
    table: str
    condition: Condition


@dataclass(frozen=True)
class UnionClause:
    query: str
    all: bool
    values: tuple[Scalar, ...]


@dataclass(frozen=True)
class OrderItem:
    column: str
    direction: Order | None = None
    random: bool = False

    def render(self) -> str:
        return f"{self.column} {self.direction.value}" if self.direction else self.column


@dataclass
class SelectState:
    """Everything a :class:`Select` renders from."""

    table: str | None = None
    columns: list[str] = field(default_factory=list)
    distinct: bool = False
    joins: list[JoinClause] = field(default_factory=list)
    where: Condition | None = None
    group: list[str] = field(default_factory=list)
    having: Condition | None = None
    order: list[OrderItem] = field(default_factory=list)
    limit: int | None = None
    offset: int | None = None
    unions: list[UnionClause] = field(default_factory=list)


def _is_full_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 1


class Select(Query):
    """Builds and executes ``SELECT`` statements.

    Args:
        connection: The connection the statement is executed on.
    """

    def __init__(self, connection: Any) -> None:
        super().__init__(connection)
        self._state = SelectState()

    @property
    def state(self) -> SelectState:
        return self._state

    def reset(self) -> Select:
        self._state = SelectState()
        self._values = []
        return self

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def build(self, subquery: bool = False) -> str:
        """Render the statement.

        Args:
            subquery: Omit the trailing ``;`` so the text can be embedded.

        Raises:
            QueryError: If no table is set or a condition has an unclosed
                parenthesis.
        """
        self._validate()
        sql, groups = self._render(with_ordering=True)
        self._values = groups
        return sql if subquery else f"{sql};"

    def _validate(self) -> None:
        if not _is_full_str(self._state.table):
            raise QueryError(f"Invalid SELECT table: {self._state.table}", clause="SELECT")
        for clause, condition in (("WHERE", self._state.where), ("HAVING", self._state.having)):
            if condition is not None and not condition.is_balanced:
                raise QueryError(f"Unclosed parenthesis in {clause} condition", clause=clause)

    def _render(self, with_ordering: bool) -> tuple[str, list[list[Scalar]]]:
        state = self._state
        groups: list[list[Scalar]] = []

        columns = ", ".join(state.columns) if state.columns else "*"
        distinct = "DISTINCT " if state.distinct else ""
        parts = [f"SELECT {distinct}{columns} FROM {state.table}"]

        for join in state.joins:
            parts.append(f"{join.type} JOIN {join.table} ON {join.condition.build()}")
            groups.append(join.condition.values)

        if state.where is not None and not state.where.is_empty:
            parts.append(f"WHERE {state.where.build()}")
            groups.append(state.where.values)

        if state.group:
            parts.append(f"GROUP BY {', '.join(state.group)}")

        if state.having is not None and not state.having.is_empty:
            parts.append(f"HAVING {state.having.build()}")
            groups.append(state.having.values)

        if with_ordering:
            if state.order:
                parts.append(f"ORDER BY {', '.join(o.render() for o in state.order)}")
            if state.limit is not None:
                parts.append(f"LIMIT {state.limit}")
            if state.offset is not None:
                parts.append(f"OFFSET {state.offset}")

        for union in state.unions:
            parts.append(f"{'UNION ALL' if union.all else 'UNION'} {union.query}")
            groups.append(list(union.values))

        return " ".join(parts), groups

    # ------------------------------------------------------------------
    # Columns, table, modifiers
    # ------------------------------------------------------------------

    def col(self, *columns: str) -> Select:
        """Set the select list.  Aggregates and aliases are accepted verbatim."""
        for column in columns:
            if not _is_full_str(column):
                raise QueryError(f"Invalid SELECT column: {column}", clause="SELECT")
        self._state.columns = list(columns)
        return self

    def from_(self, table: str) -> Select:
        if not _is_full_str(table):
            raise QueryError(f"Invalid SELECT table: {table}", clause="SELECT")
        self._state.table = table
        return self

    def distinct(self) -> Select:
        self._state.distinct = True
        return self

    def limit(self, value: int) -> Select:
        if not _is_count(value):
            raise QueryError(f"Invalid LIMIT value: {value}", clause="LIMIT")
        self._state.limit = value
        return self

    def offset(self, value: int) -> Select:
        if not _is_count(value):
            raise QueryError(f"Invalid OFFSET value: {value}", clause="OFFSET")
        self._state.offset = value
        return self

    def group_by(self, *columns: str) -> Select:
        for column in columns:
            if not _is_full_str(column):
                raise QueryError(f"Invalid GROUP BY column: {column}", clause="GROUP BY")
        self._state.group.extend(columns)
        return self

    def order_by(self, column: str, direction: Order | str = Order.ASC) -> Select:
        if not _is_full_str(column):
            raise QueryError(f"Invalid ORDER BY column: {column}", clause="ORDER BY")
        try:
            direction = Order(direction)
        except ValueError:
            raise QueryError(f"Invalid ORDER BY type: {direction}", clause="ORDER BY") from None
        self._state.order.append(OrderItem(column, direction))
        return self

    def random(self) -> Select:
        """Order randomly: ``RAND()`` on MySQL, ``RANDOM()`` elsewhere."""
        self._state.order.append(OrderItem(self.compiler.random_function(), random=True))
        return self

    # ------------------------------------------------------------------
    # Joins
    # ------------------------------------------------------------------

    def join(self, table: str, condition: ConditionCallback) -> Select:
        return self._join("INNER", table, condition)

    def left_join(self, table: str, condition: ConditionCallback) -> Select:
        return self._join("LEFT", table, condition)

    def right_join(self, table: str, condition: ConditionCallback) -> Select:
        return self._join("RIGHT", table, condition)

    def _join(self, kind: str, table: str, callback: ConditionCallback) -> Select:
        if not _is_full_str(table):
            raise QueryError(f"Invalid JOIN table: {table}", clause="JOIN")
        if not callable(callback):
            raise QueryError(f"Invalid JOIN condition: {callback!r}", clause="JOIN")
        condition = Condition(self._connection, clause="JOIN")
        callback(condition.col, condition)
        if condition.is_empty:
            raise QueryError(f"Empty JOIN condition for table: {table}", clause="JOIN")
        if not condition.is_balanced:
            raise QueryError(f"Unclosed parenthesis in JOIN condition for table: {table}", clause="JOIN")
        self._state.joins.append(JoinClause(kind, table, condition))
        return self

    # ------------------------------------------------------------------
    # WHERE / HAVING
    # ------------------------------------------------------------------

    def where(self, condition: ConditionCallback) -> Select:
        """Extend the WHERE condition; repeated calls append to the same expression."""
        if not callable(condition):
            raise QueryError(f"Invalid SELECT condition: {condition!r}", clause="WHERE")
        where = self._where()
        condition(where.col, where)
        return self

    def having(self, condition: ConditionCallback) -> Select:
        if not callable(condition):
            raise QueryError(f"Invalid HAVING condition: {condition!r}", clause="HAVING")
        if self._state.having is None:
            self._state.having = Condition(self._connection, clause="HAVING")
        having = self._state.having
        condition(having.col, having)
        return self

    def and_(self) -> Select:
        self._existing_where().and_()
        return self

    def or_(self) -> Select:
        self._existing_where().or_()
        return self

    def open(self) -> Select:
        self._where().open()
        return self

    def close(self) -> Select:
        self._existing_where().close()
        return self

    def paren(self) -> Select:
        self._where().paren()
        return self

    def _where(self) -> Condition:
        if self._state.where is None:
            self._state.where = Condition(self._connection, clause="WHERE")
        return self._state.where

    def _existing_where(self) -> Condition:
        if self._state.where is None:
            raise QueryError("Invalid SELECT condition", clause="WHERE")
        return self._state.where

    # ------------------------------------------------------------------
    # Unions
    # ------------------------------------------------------------------

    def union(self, subquery: Callable[[Select], Any]) -> Select:
        return self._union(subquery, all_rows=False)

    def union_all(self, subquery: Callable[[Select], Any]) -> Select:
        return self._union(subquery, all_rows=True)

    def _union(self, subquery: Callable[[Select], Any], all_rows: bool) -> Select:
        keyword = "UNION ALL" if all_rows else "UNION"
        if not callable(subquery):
            raise QueryError(f"Invalid {keyword} subquery: {subquery!r}", clause=keyword)
        select = Select(self._connection)
        subquery(select)
        sql = select.build(subquery=True)
        values = tuple(flatten_values(select._values))
        self._state.unions.append(UnionClause(sql, all_rows, values))
        return self

    # ------------------------------------------------------------------
    # Count & pagination
    # ------------------------------------------------------------------

    async def count(self, options: CountOptions | Mapping[str, Any] | None = None) -> int:
        """Count the rows the current query matches.

        The query, minus its ORDER BY, LIMIT and OFFSET, is wrapped as a
        subquery: ``SELECT COUNT(<column>) AS count FROM (<query>) AS sub``.

        Args:
            options: ``CountOptions`` or a mapping with ``column`` and
                ``distinct`` keys.

        Raises:
            QueryError: On invalid options or a missing table.
        """
        options = _count_options(options)
        self._validate()
        subquery, groups = self._render(with_ordering=False)
        sql = f"SELECT COUNT({options.expression}) AS count FROM ({subquery}) AS sub"
        values = flatten_values(groups)
        logger.debug("Counting with %s", sql)
        rows = await self._connection.query(sql, values)
        return _read_count(rows)

    async def paginate(
        self,
        page: int,
        items: int = 10,
        options: CountOptions | Mapping[str, Any] | None = None,
    ) -> Pagination:
        """Fetch one page of results along with page and total metadata.

        A non-positive or non-integer ``page`` falls back to ``1`` and
        ``items`` to ``10``.  Sets LIMIT and OFFSET on this builder.
        """
        if not _is_positive_int(page):
            page = 1
        if not _is_positive_int(items):
            items = 10
        if any(item.random for item in self._state.order):
            logger.warning("Paginating %s ordered at random; pages may overlap", self._state.table)

        total = await self.count(options)
        self.limit(items).offset((page - 1) * items)
        result = await self.exec()
        pages = math.ceil(total / items)

        return Pagination(
            result=list(result) if result is not None else [],
            page=PageInfo(
                current=page,
                prev=page - 1 if page > 1 else None,
                next=page + 1 if page < pages else None,
                items=items,
            ),
            total=TotalInfo(items=total, pages=pages),
        )


def _count_options(options: CountOptions | Mapping[str, Any] | None) -> CountOptions:
    if options is None:
        return CountOptions()
    if isinstance(options, CountOptions):
        return options
    if not isinstance(options, Mapping):
        raise QueryError(f"Invalid count options: {options!r}", clause="COUNT")
    try:
        return CountOptions.model_validate(dict(options))
    except ValidationError as exc:
        raise QueryError(f"Invalid count options: {dict(options)!r}", clause="COUNT") from exc


def _read_count(rows: Any) -> int:
    if not rows:
        return 0
    row = rows[0]
    try:
        value = row["count"]
    except (KeyError, IndexError, TypeError):
        value = row[0]
    return int(value)
