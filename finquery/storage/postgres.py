"""PostgreSQL finance data source over the application's existing tables."""

from datetime import date
from typing import Any

import structlog
from sqlalchemy import text
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from ..core.exceptions import DataSourceConnectionError, DataSourceError
from .base import FinanceDataSource, Row, UserProfile
from .connection import DatabaseManager

logger = structlog.get_logger(__name__)

_PROFILE_SQL = text("SELECT preferences, currency FROM profiles WHERE user_id = :user_id")

_ACCOUNTS_SQL = text(
    "SELECT name, balance, type FROM accounts WHERE user_id = :user_id "
    "ORDER BY is_active DESC, name ASC"
)

_TRANSACTIONS_SQL = text(
    """
    SELECT t.type, t.amount, t.date, t.description, c.name AS category_name
    FROM transactions t
    LEFT JOIN categories c ON t.category_id = c.id
    WHERE t.user_id = :user_id
      AND (CAST(:since AS date) IS NULL OR t.date >= CAST(:since AS date))
      AND (CAST(:until AS date) IS NULL OR t.date <= CAST(:until AS date))
    ORDER BY t.date DESC
    LIMIT :limit
    """
)

_BUDGETS_SQL = text(
    """
    SELECT b.amount, b.period, c.name AS category_name
    FROM budgets b
    LEFT JOIN categories c ON b.category_id = c.id
    WHERE b.user_id = :user_id
    """
)

_GOALS_SQL = text("SELECT * FROM goals WHERE user_id = :user_id ORDER BY created_at DESC")

_DEBTS_SQL = text(
    "SELECT * FROM debts WHERE user_id = :user_id ORDER BY is_active DESC, current_balance DESC"
)


class PostgresFinanceDataSource(FinanceDataSource):
    """Parameterized read queries; every row comes back as a plain dict."""

    def __init__(self, db: DatabaseManager) -> None:
        self.db = db

    async def _fetch(self, statement, params: dict[str, Any]) -> list[Row]:
        try:
            async with self.db.pg_session() as session:
                result = await session.execute(statement, params)
                return [dict(row) for row in result.mappings().all()]
        except OperationalError as e:
            logger.error("finance_db_unreachable", error=str(e))
            raise DataSourceConnectionError(str(e)) from e
        except SQLAlchemyError as e:
            logger.error("finance_db_query_failed", error=str(e))
            raise DataSourceError(str(e)) from e

    async def get_profile(self, user_id: str) -> UserProfile | None:
        rows = await self._fetch(_PROFILE_SQL, {"user_id": user_id})
        if not rows:
            return None
        row = rows[0]
        return UserProfile(
            user_id=user_id,
            currency=row.get("currency"),
            preferences=row.get("preferences") or {},
        )

    async def list_accounts(self, user_id: str) -> list[Row]:
        return await self._fetch(_ACCOUNTS_SQL, {"user_id": user_id})

    async def list_recent_transactions(
        self,
        user_id: str,
        limit: int = 20,
        since: date | None = None,
        until: date | None = None,
    ) -> list[Row]:
        return await self._fetch(
            _TRANSACTIONS_SQL,
            {"user_id": user_id, "limit": limit, "since": since, "until": until},
        )

    async def list_budgets(self, user_id: str) -> list[Row]:
        return await self._fetch(_BUDGETS_SQL, {"user_id": user_id})

    async def list_goals(self, user_id: str) -> list[Row]:
        return await self._fetch(_GOALS_SQL, {"user_id": user_id})

    async def list_debts(self, user_id: str) -> list[Row]:
        return await self._fetch(_DEBTS_SQL, {"user_id": user_id})

    async def close(self) -> None:
        await self.db.close()
