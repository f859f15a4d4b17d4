"""Dict-backed finance data source for development and tests."""

from collections import defaultdict
from datetime import date
from typing import Any

from .base import FinanceDataSource, Row, UserProfile


def _as_date(value: Any) -> date | None:
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


class InMemoryFinanceDataSource(FinanceDataSource):
    """Keeps every record in per-user lists; nothing survives the process."""

    def __init__(self) -> None:
        self.profiles: dict[str, UserProfile] = {}
        self.accounts: dict[str, list[Row]] = defaultdict(list)
        self.transactions: dict[str, list[Row]] = defaultdict(list)
        self.budgets: dict[str, list[Row]] = defaultdict(list)
        self.goals: dict[str, list[Row]] = defaultdict(list)
        self.debts: dict[str, list[Row]] = defaultdict(list)

    # ---- Seeding helpers ----

    def add_profile(self, profile: UserProfile) -> None:
        self.profiles[profile.user_id] = profile

    def add_account(self, user_id: str, **row: Any) -> None:
        self.accounts[user_id].append(row)

    def add_transaction(self, user_id: str, **row: Any) -> None:
        self.transactions[user_id].append(row)

    def add_budget(self, user_id: str, **row: Any) -> None:
        self.budgets[user_id].append(row)

    def add_goal(self, user_id: str, **row: Any) -> None:
        self.goals[user_id].append(row)

    def add_debt(self, user_id: str, **row: Any) -> None:
        self.debts[user_id].append(row)

    # ---- FinanceDataSource ----

    async def get_profile(self, user_id: str) -> UserProfile | None:
        return self.profiles.get(user_id)

    async def list_accounts(self, user_id: str) -> list[Row]:
        return [dict(r) for r in self.accounts.get(user_id, [])]

    async def list_recent_transactions(
        self,
        user_id: str,
        limit: int = 20,
        since: date | None = None,
        until: date | None = None,
    ) -> list[Row]:
        rows = []
        for row in self.transactions.get(user_id, []):
            day = _as_date(row.get("date"))
            if since is not None and (day is None or day < since):
                continue
            if until is not None and (day is None or day > until):
                continue
            rows.append(dict(row))
        rows.sort(key=lambda r: _as_date(r.get("date")) or date.min, reverse=True)
        return rows[:limit]

    async def list_budgets(self, user_id: str) -> list[Row]:
        return [dict(r) for r in self.budgets.get(user_id, [])]

    async def list_goals(self, user_id: str) -> list[Row]:
        return [dict(r) for r in self.goals.get(user_id, [])]

    async def list_debts(self, user_id: str) -> list[Row]:
        return [dict(r) for r in self.debts.get(user_id, [])]
