"""Unit tests for the PostgreSQL finance data source (session mocked)."""

from contextlib import asynccontextmanager
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from finquery.core.exceptions import DataSourceConnectionError, DataSourceError
from finquery.storage.postgres import PostgresFinanceDataSource


class _Result:
    def __init__(self, rows):
        self._rows = rows

    def mappings(self):
        return self

    def all(self):
        return self._rows


class _Session:
    def __init__(self, rows=None, error=None):
        self.rows = rows or []
        self.error = error
        self.calls = []

    async def execute(self, statement, params):
        self.calls.append((str(statement), params))
        if self.error is not None:
            raise self.error
        return _Result(self.rows)


class _DB:
    def __init__(self, session):
        self.session = session
        self.closed = False

    @asynccontextmanager
    async def pg_session(self):
        yield self.session

    async def close(self):
        self.closed = True


@pytest.mark.asyncio
async def test_get_profile_maps_row():
    session = _Session(rows=[{"preferences": {"currency": "INR"}, "currency": "USD"}])
    source = PostgresFinanceDataSource(_DB(session))
    profile = await source.get_profile("u1")
    assert profile.user_id == "u1"
    assert profile.preferred_currency == "INR"
    assert session.calls[0][1] == {"user_id": "u1"}


@pytest.mark.asyncio
async def test_get_profile_missing():
    source = PostgresFinanceDataSource(_DB(_Session(rows=[])))
    assert await source.get_profile("u1") is None


@pytest.mark.asyncio
async def test_transactions_are_parameterized():
    session = _Session(rows=[{"amount": 12, "category_name": "Food"}])
    source = PostgresFinanceDataSource(_DB(session))
    rows = await source.list_recent_transactions(
        "u1", limit=5, since=date(2024, 4, 1), until=date(2024, 4, 30)
    )
    assert rows == [{"amount": 12, "category_name": "Food"}]
    sql, params = session.calls[0]
    assert "LEFT JOIN categories" in sql
    assert params == {
        "user_id": "u1",
        "limit": 5,
        "since": date(2024, 4, 1),
        "until": date(2024, 4, 30),
    }


@pytest.mark.asyncio
async def test_operational_error_is_connection_error():
    error = OperationalError("SELECT 1", {}, Exception("connection refused"))
    source = PostgresFinanceDataSource(_DB(_Session(error=error)))
    with pytest.raises(DataSourceConnectionError):
        await source.list_accounts("u1")


@pytest.mark.asyncio
async def test_other_sqlalchemy_errors_are_data_source_errors():
    source = PostgresFinanceDataSource(_DB(_Session(error=SQLAlchemyError("bad column"))))
    with pytest.raises(DataSourceError, match="bad column"):
        await source.list_budgets("u1")


@pytest.mark.asyncio
async def test_close_disposes_manager():
    db = _DB(_Session())
    await PostgresFinanceDataSource(db).close()
    assert db.closed


class TestDatabaseManager:
    def test_requires_url(self):
        from finquery.core.config import DatabaseSettings
        from finquery.storage.connection import DatabaseManager

        with pytest.raises(ValueError, match="DATABASE__POSTGRES_URL"):
            DatabaseManager(settings=DatabaseSettings(postgres_url=""))

    @pytest.mark.asyncio
    async def test_uses_asyncpg_and_closes_once(self):
        from finquery.core.config import DatabaseSettings
        from finquery.storage.connection import DatabaseManager

        db = DatabaseManager(
            "postgresql://u:p@localhost/finance", settings=DatabaseSettings(pool_size=2)
        )
        assert db.pg_engine.url.drivername == "postgresql+asyncpg"
        await db.close()
        await db.close()
        with pytest.raises(RuntimeError):
            async with db.pg_session():
                pass
