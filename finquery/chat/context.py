"""Context planning: which financial records a classified question needs."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, timedelta
from enum import StrEnum

from ..query.types import ComparisonBaseline, IntentType, ProcessedQuery, Timeframe


class DataSet(StrEnum):
    """A collection of user records the chat can pull into the prompt."""

    ACCOUNTS = "accounts"
    TRANSACTIONS = "transactions"
    BUDGETS = "budgets"
    GOALS = "goals"
    DEBTS = "debts"


# Fixed context for unclassified questions.
_GENERAL_DATASETS = (DataSet.ACCOUNTS, DataSet.TRANSACTIONS, DataSet.BUDGETS)

_INTENT_DATASETS: dict[IntentType, tuple[DataSet, ...]] = {
    IntentType.BALANCE: (DataSet.ACCOUNTS,),
    IntentType.SPENDING: (DataSet.TRANSACTIONS, DataSet.BUDGETS),
    IntentType.INCOME: (DataSet.TRANSACTIONS, DataSet.ACCOUNTS),
    IntentType.BUDGET: (DataSet.BUDGETS, DataSet.TRANSACTIONS),
    IntentType.COMPARISON: (DataSet.TRANSACTIONS, DataSet.BUDGETS),
    IntentType.FORECAST: (DataSet.TRANSACTIONS, DataSet.ACCOUNTS, DataSet.BUDGETS),
    IntentType.GOALS: (DataSet.GOALS, DataSet.ACCOUNTS),
    IntentType.DEBT: (DataSet.DEBTS, DataSet.ACCOUNTS),
    IntentType.GENERAL: _GENERAL_DATASETS,
}

_BASELINE_DATASETS: dict[ComparisonBaseline, DataSet] = {
    ComparisonBaseline.BUDGET: DataSet.BUDGETS,
    ComparisonBaseline.GOAL: DataSet.GOALS,
}

_WINDOWED_TRANSACTION_LIMIT = 100


@dataclass(frozen=True)
class ContextPlan:
    """Datasets to fetch plus the transaction date window."""

    datasets: tuple[DataSet, ...]
    since: date | None = None
    until: date | None = None
    transaction_limit: int = 20

    def includes(self, dataset: DataSet) -> bool:
        return dataset in self.datasets


def _month_start(day: date) -> date:
    return day.replace(day=1)


def _previous_month_start(day: date) -> date:
    return _month_start(_month_start(day) - timedelta(days=1))


def timeframe_window(timeframe: Timeframe | None, today: date) -> tuple[date | None, date | None]:
    """Inclusive (since, until) dates for a timeframe; (None, None) when open-ended."""
    if timeframe == Timeframe.TODAY:
        return today, today
    if timeframe == Timeframe.WEEK:
        return today - timedelta(days=6), today
    if timeframe == Timeframe.MONTH:
        return _month_start(today), today
    if timeframe == Timeframe.LAST_MONTH:
        return _previous_month_start(today), _month_start(today) - timedelta(days=1)
    if timeframe == Timeframe.QUARTER:
        first_month = 3 * ((today.month - 1) // 3) + 1
        return today.replace(month=first_month, day=1), today
    if timeframe == Timeframe.YEAR:
        return today.replace(month=1, day=1), today
    # ALL, CUSTOM (dates are left to the model) and unspecified
    return None, None


class ContextPlanner:
    """Generates context plans from classified queries."""

    def __init__(
        self,
        recent_transactions_limit: int = 20,
        clock: Callable[[], date] = date.today,
    ):
        self.recent_transactions_limit = recent_transactions_limit
        self.clock = clock

    def plan(self, processed: ProcessedQuery) -> ContextPlan:
        intent = processed.intent
        if not processed.is_confident:
            return ContextPlan(
                datasets=_GENERAL_DATASETS,
                transaction_limit=self.recent_transactions_limit,
            )

        datasets = list(_INTENT_DATASETS.get(intent.type, _GENERAL_DATASETS))
        extra = _BASELINE_DATASETS.get(intent.comparison) if intent.comparison else None
        if extra is not None and extra not in datasets:
            datasets.append(extra)

        since, until = timeframe_window(intent.timeframe, self.clock())
        if since is not None:
            # Widen the window so the baseline period is in the data too.
            if (
                intent.comparison == ComparisonBaseline.LAST_MONTH
                and intent.timeframe != Timeframe.LAST_MONTH
            ):
                since = min(since, _previous_month_start(since))
            elif intent.comparison == ComparisonBaseline.LAST_YEAR:
                since = since.replace(year=since.year - 1, month=1, day=1)

        limit = (
            _WINDOWED_TRANSACTION_LIMIT
            if since is not None
            else self.recent_transactions_limit
        )
        return ContextPlan(
            datasets=tuple(datasets),
            since=since,
            until=until,
            transaction_limit=limit,
        )
