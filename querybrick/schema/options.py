"""Pydantic models for ``Select.count()`` options and pagination results."""
from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, model_validator


class CountOptions(BaseModel):
    """Options for :meth:`~querybrick.sql.select.Select.count`.

    Attributes:
        column: Column (or expression) to count.  ``None`` counts ``*``.
        distinct: Count only distinct values of ``column``.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    column: StrictStr | None = None
    distinct: StrictBool = False

    @model_validator(mode="after")
    def _check_column(self) -> CountOptions:
        if self.column is not None and not self.column.strip():
            raise ValueError("column must be a non-empty string")
        if self.distinct and self.column is None:
            raise ValueError("distinct requires a column")
        return self

    @property
    def expression(self) -> str:
        """The argument rendered inside ``COUNT(...)``."""
        column = self.column or "*"
        return f"DISTINCT {column}" if self.distinct else column


class PageInfo(BaseModel):
    """Position of the returned page.

    Attributes:
        current: The page that was fetched (1-based).
        prev: Previous page number, or ``None`` on the first page.
        next: Next page number, or ``None`` on the last page.
        items: Items per page.
    """

    model_config = ConfigDict(extra="forbid")

    current: int
    prev: int | None = None
    next: int | None = None
    items: int


class TotalInfo(BaseModel):
    """Totals across all pages.

    Attributes:
        items: Number of rows matched by the query.
        pages: ``ceil(items / items_per_page)``.
    """

    model_config = ConfigDict(extra="forbid")

    items: int
    pages: int


class Pagination(BaseModel):
    """The result of :meth:`~querybrick.sql.select.Select.paginate`."""

    model_config = ConfigDict(extra="forbid")

    result: list[Any] = Field(default_factory=list)
    page: PageInfo
    total: TotalInfo
