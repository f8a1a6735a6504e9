"""Boolean condition builder for WHERE, HAVING and JOIN ... ON clauses.

A condition is a flat stack of :class:`Token` units rather than an
expression tree.  Each token carries its SQL fragment and the values it
binds, so rendering the text and collecting the values walk the same list
in the same order and the ``?`` placeholders can never drift out of sync
with the bound values.

Usage::

    cond = Condition(Dialect.POSTGRESQL)
    cond.col("age").not_().less_than(18).and_().col("status").in_("a", "b")
    cond.build()   # 'NOT age < ? AND status IN (?, ?)'
    cond.values    # [18, 'a', 'b']

Comparing one column to another uses :func:`ref`, which is inlined rather
than bound::

    cond.col("users.id").equal(ref("profiles.user_id"))
"""
from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from querybrick.compile.base import SQLCompiler
from querybrick.compile.registry import CompilerFactory
from querybrick.errors import QueryError
from querybrick.schema.dialect import DatePart, Dialect, Scalar

#: ``column`` or ``table.column`` in snake_case.
_IDENTIFIER = re.compile(r"^[a-z_][a-z0-9_]*(?:\.[a-z_][a-z0-9_]*)?$")

_OPEN = "("
_CLOSE = ")"
_CONNECTIVES = frozenset({"AND", "OR"})


def is_identifier(name: Any) -> bool:
    """Return ``True`` if ``name`` is a snake_case ``column`` or ``table.column``."""
    return isinstance(name, str) and _IDENTIFIER.match(name) is not None


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _is_full_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


def _is_comparable(value: Any) -> bool:
    return _is_text(value) or _is_number(value)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _is_in_member(value: Any) -> bool:
    return _is_comparable(value) or isinstance(value, bool)


# ---------------------------------------------------------------------------
# Value types
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Ref:
    """An identifier inlined into the SQL text instead of being bound.

    Attributes:
        column: A validated ``column`` or ``table.column`` identifier.
    """

    column: str

    def __str__(self) -> str:
        return self.column


def ref(column: str) -> Ref:
    """Mark ``column`` as a column reference for the right-hand side of a comparison.

    Raises:
        QueryError: If ``column`` is not a valid identifier.
    """
    if not is_identifier(column):
        raise QueryError(f"Invalid reference: {column}")
    return Ref(column)


@dataclass(frozen=True)
class Token:
    """One unit of a condition: a SQL fragment and the values it binds.

    Attributes:
        sql: The fragment (``'AND'``, ``'('``, ``'age < ?'``, ...).
        values: One value per ``?`` in ``sql``, left to right.
    """

    sql: str
    values: tuple[Scalar, ...] = ()


# ---------------------------------------------------------------------------
# Date/time extraction helpers
# ---------------------------------------------------------------------------


def extract(part: DatePart, column: str, dialect: Any) -> str:
    """Return the ``dialect`` expression extracting ``part`` from ``column``.

    Raises:
        QueryError: If ``column`` is not a valid identifier.
        UnsupportedDialectError: If ``dialect`` has no compiler.
    """
    if not is_identifier(column):
        raise QueryError(f"Invalid column: {column}")
    return CompilerFactory.create(dialect).extract(DatePart(part), column)


def ex_date(column: str, dialect: Any) -> str:
    return extract(DatePart.DATE, column, dialect)


def ex_time(column: str, dialect: Any) -> str:
    return extract(DatePart.TIME, column, dialect)


def ex_year(column: str, dialect: Any) -> str:
    return extract(DatePart.YEAR, column, dialect)


def ex_month(column: str, dialect: Any) -> str:
    return extract(DatePart.MONTH, column, dialect)


def ex_day(column: str, dialect: Any) -> str:
    return extract(DatePart.DAY, column, dialect)


def ex_hour(column: str, dialect: Any) -> str:
    return extract(DatePart.HOUR, column, dialect)


def ex_minute(column: str, dialect: Any) -> str:
    return extract(DatePart.MINUTE, column, dialect)


def ex_second(column: str, dialect: Any) -> str:
    return extract(DatePart.SECOND, column, dialect)


# ---------------------------------------------------------------------------
# Condition builder
# ---------------------------------------------------------------------------


class Condition:
    """Accumulates a boolean SQL expression and its bound values.

    Every call validates its input immediately and raises
    :class:`~querybrick.errors.QueryError` on the offending call; nothing is
    deferred to :meth:`build`.

    Args:
        dialect: A :class:`~querybrick.schema.dialect.Dialect`, a driver, or a
            connection carrying ``driver.id``.  Selects the date/time
            extraction functions.
        clause: Statement part this condition belongs to, reported on errors.

    Raises:
        UnsupportedDialectError: If ``dialect`` has no registered compiler.
    """

    def __init__(self, dialect: Any, clause: str | None = None) -> None:
        self._compiler: SQLCompiler = CompilerFactory.create(dialect)
        self._clause = clause
        self._tokens: list[Token] = []
        self._column: str | None = None
        self._negate = False
        self._opened = 0

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def dialect(self) -> Dialect:
        return self._compiler.dialect

    @property
    def tokens(self) -> tuple[Token, ...]:
        return tuple(self._tokens)

    @property
    def values(self) -> list[Scalar]:
        """Bound values in placeholder order."""
        return [value for token in self._tokens for value in token.values]

    @property
    def active_column(self) -> str | None:
        return self._column

    @property
    def negated(self) -> bool:
        """Whether the next comparison will be prefixed with ``NOT``."""
        return self._negate

    @property
    def is_empty(self) -> bool:
        return not self._tokens

    @property
    def is_balanced(self) -> bool:
        return self._opened == 0

    def build(self) -> str:
        """Join the token stack with single spaces.

        Parentheses hug their contents: ``(age < ? OR age > ?)``.
        """
        sql = ""
        for token in self._tokens:
            if sql and not sql.endswith(_OPEN) and token.sql != _CLOSE:
                sql += " "
            sql += token.sql
        return sql

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def col(self, name: str) -> Condition:
        """Select the column compared by the following operators.

        The column stays selected until the next ``col()`` call, so
        ``col("age").greater_than(18).and_().less_than(65)`` is valid.
        """
        if not is_identifier(name):
            raise self._error(f"Invalid column: {name}")
        self._column = name
        return self

    column = col

    def not_(self) -> Condition:
        """Negate the next comparison only."""
        self._negate = True
        return self

    def and_(self) -> Condition:
        return self._connective("AND")

    def or_(self) -> Condition:
        return self._connective("OR")

    def open(self) -> Condition:
        self._tokens.append(Token(_OPEN))
        self._opened += 1
        return self

    def close(self) -> Condition:
        if self._opened == 0:
            raise self._error("No open parenthesis to close")
        self._tokens.append(Token(_CLOSE))
        self._opened -= 1
        return self

    def paren(self) -> Condition:
        """Close the innermost open parenthesis, or open one if none is open."""
        return self.close() if self._opened > 0 else self.open()

    def raw(self, sql: str, *values: Scalar) -> Condition:
        """Append literal SQL and the values bound by its placeholders."""
        if not _is_full_text(sql):
            raise self._error(f"Invalid condition: {sql}")
        for value in values:
            if not _is_scalar(value):
                raise self._error(f"Invalid value: {value}")
        self._tokens.append(Token(sql, tuple(values)))
        return self

    # ------------------------------------------------------------------
    # Comparisons
    # ------------------------------------------------------------------

    def equal(self, value: Scalar | Ref) -> Condition:
        """``col = ?``; ``None`` renders ``col IS NULL``."""
        column = self._require_column()
        if value is None:
            return self._push(f"{column} IS NULL")
        operand, values = self._operand(value, _is_scalar, "value")
        return self._push(f"{column} = {operand}", values)

    def less_than(self, value: str | int | float | Ref) -> Condition:
        return self._compare("<", value)

    def less_than_or_equal(self, value: str | int | float | Ref) -> Condition:
        return self._compare("<=", value)

    def greater_than(self, value: str | int | float | Ref) -> Condition:
        return self._compare(">", value)

    def greater_than_or_equal(self, value: str | int | float | Ref) -> Condition:
        return self._compare(">=", value)

    def like(self, pattern: str | Ref) -> Condition:
        column = self._require_column()
        operand, values = self._operand(pattern, _is_full_text, "value")
        return self._push(f"{column} LIKE {operand}", values)

    def is_null(self) -> Condition:
        return self._push(f"{self._require_column()} IS NULL")

    def is_true(self) -> Condition:
        return self._push(f"{self._require_column()} = ?", (True,))

    def is_false(self) -> Condition:
        return self._push(f"{self._require_column()} = ?", (False,))

    def between(self, start: str | int | float | Ref, end: str | int | float | Ref) -> Condition:
        column = self._require_column()
        low, low_values = self._operand(start, _is_comparable, "start value")
        high, high_values = self._operand(end, _is_comparable, "end value")
        return self._push(f"{column} BETWEEN {low} AND {high}", low_values + high_values)

    def in_(self, *values: Any) -> Condition:
        """``col IN (?, ...)``.

        Accepts the members either as separate arguments or as one list /
        tuple / set: ``in_(1, 2)`` and ``in_([1, 2])`` are equivalent.
        """
        column = self._require_column()
        if len(values) == 1 and isinstance(values[0], (list, tuple, set, frozenset)):
            values = tuple(values[0])
        if not values:
            raise self._error("Values array cannot be empty for IN clause")
        operands: list[str] = []
        bound: tuple[Scalar, ...] = ()
        for value in values:
            operand, value_bound = self._operand(value, _is_in_member, "value")
            operands.append(operand)
            bound += value_bound
        return self._push(f"{column} IN ({', '.join(operands)})", bound)

    # ------------------------------------------------------------------
    # Date/time comparisons
    # ------------------------------------------------------------------

    def in_date(self, value: str | Ref) -> Condition:
        return self._date_part(DatePart.DATE, value, _is_full_text)

    def in_time(self, value: str | Ref) -> Condition:
        return self._date_part(DatePart.TIME, value, _is_full_text)

    def in_year(self, value: int | Ref) -> Condition:
        return self._date_part(DatePart.YEAR, value, lambda v: _is_int(v) and v > 0)

    def in_month(self, value: int | Ref) -> Condition:
        return self._date_part(DatePart.MONTH, value, lambda v: _is_int(v) and 1 <= v <= 12)

    def in_day(self, value: int | Ref) -> Condition:
        return self._date_part(DatePart.DAY, value, lambda v: _is_int(v) and 1 <= v <= 31)

    def in_hour(self, value: int | Ref) -> Condition:
        return self._date_part(DatePart.HOUR, value, lambda v: _is_int(v) and 0 <= v <= 23)

    def in_minute(self, value: int | Ref) -> Condition:
        return self._date_part(DatePart.MINUTE, value, lambda v: _is_int(v) and 0 <= v <= 59)

    def in_second(self, value: int | Ref) -> Condition:
        return self._date_part(DatePart.SECOND, value, lambda v: _is_int(v) and 0 <= v <= 59)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _error(self, message: str) -> QueryError:
        return QueryError(message, clause=self._clause)

    def _require_column(self) -> str:
        if self._column is None:
            raise self._error(f"Invalid column: {self._column}")
        return self._column

    def _operand(
        self,
        value: Any,
        valid: Callable[[Any], bool],
        label: str,
    ) -> tuple[str, tuple[Scalar, ...]]:
        if isinstance(value, Ref):
            return value.column, ()
        if not valid(value):
            raise self._error(f"Invalid {label}: {value}")
        return "?", (value,)

    def _compare(self, operator: str, value: Any) -> Condition:
        column = self._require_column()
        operand, values = self._operand(value, _is_comparable, "value")
        return self._push(f"{column} {operator} {operand}", values)

    def _date_part(self, part: DatePart, value: Any, valid: Callable[[Any], bool]) -> Condition:
        column = self._require_column()
        operand, values = self._operand(value, valid, part.value)
        expression = self._compiler.extract(part, column)
        return self._push(f"{expression} = {operand}", values)

    def _push(self, expression: str, values: tuple[Scalar, ...] = ()) -> Condition:
        sql = f"NOT {expression}" if self._negate else expression
        self._negate = False
        self._tokens.append(Token(sql, values))
        return self

    def _connective(self, keyword: str) -> Condition:
        last = self._tokens[-1].sql if self._tokens else None
        if last is None or last == _OPEN:
            raise self._error(f"Condition cannot start with {keyword}")
        if last in _CONNECTIVES:
            raise self._error(f"Condition cannot contain {last} {keyword}")
        self._tokens.append(Token(keyword))
        return self
