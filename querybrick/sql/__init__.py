"""querybrick statement builders."""
from querybrick.sql.condition import (
    Condition,
    Ref,
    Token,
    ex_date,
    ex_day,
    ex_hour,
    ex_minute,
    ex_month,
    ex_second,
    ex_time,
    ex_year,
    extract,
    ref,
)
from querybrick.sql.query import Query, flatten_values
from querybrick.sql.select import ASC, DESC, Order, Select
from querybrick.sql.upsert import Upsert

__all__ = [
    "ASC",
    "DESC",
    "Condition",
    "Order",
    "Query",
    "Ref",
    "Select",
    "Token",
    "Upsert",
    "ex_date",
    "ex_day",
    "ex_hour",
    "ex_minute",
    "ex_month",
    "ex_second",
    "ex_time",
    "ex_year",
    "extract",
    "flatten_values",
    "ref",
]
