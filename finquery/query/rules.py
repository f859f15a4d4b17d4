"""Ordered regex rule tables for query classification.

Every table is a tuple of ``(tag, pattern)`` pairs evaluated top to bottom.
Each alternative is anchored on a leading word boundary so short tokens such
as "now", "count" or "car" do not fire inside "know", "account" or "card".
"""

import re
from collections.abc import Sequence
from typing import TypeVar

from .types import ComparisonBaseline, IntentType, Operation, SpendingCategory, Timeframe

T = TypeVar("T")

Rule = tuple[T, re.Pattern[str]]


def _words(*alternatives: str) -> re.Pattern[str]:
    """Compile alternatives into one case-insensitive, word-anchored pattern."""
    return re.compile(r"\b(?:" + "|".join(alternatives) + ")", re.IGNORECASE)


# Intent priority: first match wins. Comparison words outrank spending/income
# words so "compare my spending this month vs last month" is a comparison.
INTENT_RULES: tuple[Rule[IntentType], ...] = (
    (
        IntentType.COMPARISON,
        _words(
            "income vs expenses",
            "expenses vs income",
            "compar",
            "difference",
            "change",
            "versus",
            r"vs\b",
            r"than\b",
        ),
    ),
    (IntentType.FORECAST, _words("forecast", "predict", "expect", "project", "future")),
    (
        IntentType.INCOME,
        _words("income", "earn", "salary", "wage", "received", "deposit"),
    ),
    (
        IntentType.DEBT,
        _words("debt", "loan", "credit", r"owe\b", r"owed\b", r"owes\b", "borrow", "payment"),
    ),
    (
        IntentType.BALANCE,
        _words("balance", "account", "total", "net worth", "worth", r"how much\b.*\bhave\b"),
    ),
    (IntentType.SPENDING, _words("spend", "spent", "expense", "cost", "paid", "bought")),
    (IntentType.BUDGET, _words("budget", "limit", "allowance", r"cap\b", "allocated")),
    (IntentType.GOALS, _words("goal", "target", "save", "saving", "objective", r"aim\b")),
)

INTENT_PRIORITY: tuple[IntentType, ...] = tuple(tag for tag, _ in INTENT_RULES)

# "month" must not list "last month"; that phrasing belongs to LAST_MONTH.
TIMEFRAME_RULES: tuple[Rule[Timeframe], ...] = (
    (Timeframe.TODAY, _words("today", r"now\b", r"current(?:ly)?\b")),
    (
        Timeframe.WEEK,
        _words("this week", "past week", "last week", "last 7 days", "past 7 days", "weekly"),
    ),
    (
        Timeframe.MONTH,
        _words("this month", "past month", "last 30 days", "past 30 days", "monthly"),
    ),
    (Timeframe.LAST_MONTH, _words("last month", "previous month")),
    (
        Timeframe.QUARTER,
        _words("this quarter", "past quarter", "last 3 months", "past 90 days", "quarterly"),
    ),
    (
        Timeframe.YEAR,
        _words(
            "this year", "past year", "last 12 months", "past 365 days", "annually", "yearly"
        ),
    ),
    (Timeframe.ALL, _words("all time", r"ever\b", "total", "overall", "lifetime")),
)

DATE_TOKEN = re.compile(r"\b(?:\d{1,2}/\d{1,2}/\d{4}|\d{4}-\d{2}-\d{2})\b")

CATEGORY_RULES: tuple[Rule[SpendingCategory], ...] = (
    (
        SpendingCategory.FOOD,
        _words("food", "dining", "restaurant", "grocer", "eating", "meal"),
    ),
    (
        SpendingCategory.TRANSPORT,
        _words(
            "transport",
            r"cars?\b",
            r"gas\b",
            "fuel",
            "uber",
            "taxi",
            r"bus\b",
            "train",
            "metro",
        ),
    ),
    (
        SpendingCategory.SHOPPING,
        _words("shopping", "clothes", "retail", "amazon", "purchase", r"buy\b"),
    ),
    (
        SpendingCategory.ENTERTAINMENT,
        _words("entertainment", "movie", "netflix", "spotify", r"games?\b", r"fun\b"),
    ),
    (
        SpendingCategory.BILLS,
        _words(r"bills?\b", "utilit", r"rent\b", "mortgage", "insurance", "phone", "internet"),
    ),
    (
        SpendingCategory.HEALTH,
        _words("health", "medical", "doctor", "pharmacy", r"gym\b", "fitness"),
    ),
    (
        SpendingCategory.EDUCATION,
        _words("education", "school", "college", "course", r"books?\b", "tuition"),
    ),
)

OPERATION_RULES: tuple[Rule[Operation], ...] = (
    (Operation.TOTAL, _words("grand total", "total", r"sum\b", "overall", "complete")),
    (Operation.AVERAGE, _words("average", r"mean\b", "typical", "usual", "normal")),
    (Operation.COUNT, _words("count", "number", "how many", "frequency")),
    (Operation.TREND, _words("trend", "pattern", "change", "increase", "decrease")),
    (Operation.BREAKDOWN, _words("breakdown", "break down", "split", "by category", "categor")),
)

COMPARISON_RULES: tuple[Rule[ComparisonBaseline], ...] = (
    (
        ComparisonBaseline.LAST_MONTH,
        _words("last month", "previous month", "month over month", "month-over-month"),
    ),
    (
        ComparisonBaseline.LAST_YEAR,
        _words("last year", "previous year", "year over year", "year-over-year"),
    ),
    (ComparisonBaseline.BUDGET, _words("budget", "allocated", "limit")),
    (ComparisonBaseline.GOAL, _words("goal", "target", "objective")),
)

# Optional "$", digits with optional thousands groups, optional cents.
# The lookbehind keeps digits glued to letters ("xyz123") from counting.
AMOUNT_PATTERN = re.compile(r"(?<![\w.,])\$?(\d+(?:,\d{3})*(?:\.\d{2})?)")


def first_match(rules: Sequence[Rule[T]], text: str) -> T | None:
    """Return the tag of the first rule whose pattern matches ``text``."""
    for tag, pattern in rules:
        if pattern.search(text):
            return tag
    return None


def all_matches(rules: Sequence[Rule[T]], text: str) -> list[T]:
    """Return the tags of every matching rule, in table order."""
    return [tag for tag, pattern in rules if pattern.search(text)]
