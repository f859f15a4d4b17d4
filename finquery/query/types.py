"""Query classification types for financial questions."""

from dataclasses import dataclass
from decimal import Decimal
from enum import StrEnum
from typing import Any


class IntentType(StrEnum):
    """Primary category of a financial question."""

    BALANCE = "balance"
    SPENDING = "spending"
    INCOME = "income"
    BUDGET = "budget"
    COMPARISON = "comparison"
    FORECAST = "forecast"
    GOALS = "goals"
    DEBT = "debt"
    GENERAL = "general"


class Timeframe(StrEnum):
    """Time window a query restricts itself to."""

    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    LAST_MONTH = "last_month"
    QUARTER = "quarter"
    YEAR = "year"
    ALL = "all"
    CUSTOM = "custom"  # explicit date token in the text


class SpendingCategory(StrEnum):
    """Fixed spending-category vocabulary. Member order is the output order."""

    FOOD = "food"
    TRANSPORT = "transport"
    SHOPPING = "shopping"
    ENTERTAINMENT = "entertainment"
    BILLS = "bills"
    HEALTH = "health"
    EDUCATION = "education"


class Operation(StrEnum):
    """Requested aggregation style."""

    TOTAL = "total"
    AVERAGE = "average"
    COUNT = "count"
    TREND = "trend"
    BREAKDOWN = "breakdown"


class ComparisonBaseline(StrEnum):
    """Baseline a query asks to be compared against."""

    LAST_MONTH = "last_month"
    LAST_YEAR = "last_year"
    BUDGET = "budget"
    GOAL = "goal"


HIGH_CONFIDENCE = 0.9
LOW_CONFIDENCE = 0.3


@dataclass(frozen=True)
class QueryIntent:
    """Combined output of the extraction stages."""

    type: IntentType
    timeframe: Timeframe | None = None
    categories: tuple[SpendingCategory, ...] = ()
    operation: Operation | None = None
    comparison: ComparisonBaseline | None = None
    amount: Decimal | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type.value,
            "timeframe": self.timeframe.value if self.timeframe else None,
            "categories": [c.value for c in self.categories],
            "operation": self.operation.value if self.operation else None,
            "comparison": self.comparison.value if self.comparison else None,
            "amount": float(self.amount) if self.amount is not None else None,
        }


@dataclass(frozen=True)
class ProcessedQuery:
    """Classification result for a single chat message. Built once, never mutated."""

    intent: QueryIntent
    original_query: str
    confidence: float
    suggested_response: str

    @property
    def is_confident(self) -> bool:
        """True when an explicit intent rule fired."""
        return self.confidence >= HIGH_CONFIDENCE

    def to_dict(self) -> dict[str, Any]:
        return {
            "intent": self.intent.to_dict(),
            "original_query": self.original_query,
            "confidence": self.confidence,
            "suggested_response": self.suggested_response,
        }
