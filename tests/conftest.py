"""Shared pytest fixtures for querybrick unit and integration tests."""
from __future__ import annotations

import pytest

import querybrick  # noqa: F401  registers the built-in compilers
from querybrick.schema.dialect import Dialect
from tests.fixtures import FakeConnection


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def sqlite_conn() -> FakeConnection:
    return FakeConnection(Dialect.SQLITE)


@pytest.fixture
def pg_conn() -> FakeConnection:
    return FakeConnection(Dialect.POSTGRESQL)


@pytest.fixture
def mysql_conn() -> FakeConnection:
    return FakeConnection(Dialect.MYSQL)


@pytest.fixture(params=list(Dialect), ids=lambda d: d.value)
def any_conn(request: pytest.FixtureRequest) -> FakeConnection:
    """One fake connection per supported dialect."""
    return FakeConnection(request.param)
