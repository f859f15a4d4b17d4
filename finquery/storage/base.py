"""Abstract finance data source consumed by the chat service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Any

Row = dict[str, Any]


@dataclass
class UserProfile:
    """The slice of a user's profile the chat needs."""

    user_id: str
    currency: str | None = None
    preferences: dict[str, Any] = field(default_factory=dict)

    @property
    def preferred_currency(self) -> str | None:
        """Currency from preferences, falling back to the profile column."""
        value = self.preferences.get("currency")
        return value if isinstance(value, str) and value else self.currency

    @property
    def llm_api_key(self) -> str | None:
        """Per-user Gemini key stored in preferences, if any."""
        value = self.preferences.get("geminiApiKey")
        return value if isinstance(value, str) and value else None


class FinanceDataSource(ABC):
    """Read-only access to a user's financial records. Rows are plain dicts."""

    @abstractmethod
    async def get_profile(self, user_id: str) -> UserProfile | None:
        ...

    @abstractmethod
    async def list_accounts(self, user_id: str) -> list[Row]:
        """Accounts with name, balance and type."""
        ...

    @abstractmethod
    async def list_recent_transactions(
        self,
        user_id: str,
        limit: int = 20,
        since: date | None = None,
        until: date | None = None,
    ) -> list[Row]:
        """Newest-first transactions with type, amount, date, description, category_name."""
        ...

    @abstractmethod
    async def list_budgets(self, user_id: str) -> list[Row]:
        """Budgets with amount, period and category_name."""
        ...

    @abstractmethod
    async def list_goals(self, user_id: str) -> list[Row]:
        ...

    @abstractmethod
    async def list_debts(self, user_id: str) -> list[Row]:
        ...

    async def close(self) -> None:
        """Release any held resources."""
        return None
