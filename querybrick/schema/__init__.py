"""querybrick schema layer: dialect tags, connection capability, option models."""
from querybrick.schema.dialect import Connection, DatePart, Dialect, Driver, Scalar, dialect_of
from querybrick.schema.options import CountOptions, PageInfo, Pagination, TotalInfo

__all__ = [
    "Connection",
    "CountOptions",
    "DatePart",
    "Dialect",
    "Driver",
    "PageInfo",
    "Pagination",
    "Scalar",
    "TotalInfo",
    "dialect_of",
]
