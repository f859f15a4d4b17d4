"""Rule-based classifier for natural-language financial questions.

The pipeline is a straight line of independent extraction stages over the
normalized text, followed by a templater that turns the combined intent into
a one-line description of the planned action. Nothing here reads the clock or
touches shared state, so a single processor may serve concurrent requests.
"""

from collections.abc import Sequence
from decimal import Decimal, InvalidOperation

from .rules import (
    AMOUNT_PATTERN,
    CATEGORY_RULES,
    COMPARISON_RULES,
    DATE_TOKEN,
    INTENT_RULES,
    OPERATION_RULES,
    TIMEFRAME_RULES,
    Rule,
    all_matches,
    first_match,
)
from .types import (
    HIGH_CONFIDENCE,
    LOW_CONFIDENCE,
    ComparisonBaseline,
    IntentType,
    Operation,
    ProcessedQuery,
    QueryIntent,
    SpendingCategory,
    Timeframe,
)

DEFAULT_MAX_QUERY_LENGTH = 2000

GENERAL_RESPONSE = "I'll help you with that financial question using your data."

_FIXED_RESPONSES: dict[IntentType, str] = {
    IntentType.BALANCE: (
        "I'll check your current account balances and calculate your total net worth."
    ),
    IntentType.INCOME: "I'll review your income sources and calculate your earnings.",
    IntentType.BUDGET: (
        "I'll check your budget status and show you how you're tracking against your limits."
    ),
    IntentType.FORECAST: "Based on your spending patterns, I'll provide a financial forecast.",
    IntentType.GOALS: (
        "I'll review your savings goals and show your progress toward each target."
    ),
    IntentType.DEBT: "I'll analyze your debt situation and show your payment progress.",
}


def normalize_query(query: str, max_length: int = DEFAULT_MAX_QUERY_LENGTH) -> str:
    """Lower-case, trim and cap the text that the rule tables see."""
    if not isinstance(query, str):
        raise TypeError(f"query must be str, not {type(query).__name__}")
    return query[:max_length].strip().lower()


def determine_intent(
    query: str, rules: Sequence[Rule[IntentType]] = INTENT_RULES
) -> tuple[IntentType, float]:
    """Return the highest-priority matching intent and its confidence."""
    intent = first_match(rules, query)
    if intent is None:
        return IntentType.GENERAL, LOW_CONFIDENCE
    return intent, HIGH_CONFIDENCE


def extract_timeframe(query: str) -> Timeframe | None:
    """None means no explicit timeframe; callers pick their own default."""
    timeframe = first_match(TIMEFRAME_RULES, query)
    if timeframe is not None:
        return timeframe
    if DATE_TOKEN.search(query):
        return Timeframe.CUSTOM
    return None


def extract_categories(query: str) -> tuple[SpendingCategory, ...]:
    return tuple(all_matches(CATEGORY_RULES, query))


def extract_operation(query: str) -> Operation | None:
    return first_match(OPERATION_RULES, query)


def extract_comparison(query: str) -> ComparisonBaseline | None:
    """Comparison baseline, independent of whether the intent is a comparison."""
    return first_match(COMPARISON_RULES, query)


def extract_amount(query: str) -> Decimal | None:
    """First dollar-like number in the text, thousands separators removed."""
    match = AMOUNT_PATTERN.search(query)
    if match is None:
        return None
    try:
        return Decimal(match.group(1).replace(",", ""))
    except InvalidOperation:
        return None


def _humanize(value: str) -> str:
    return value.replace("_", " ")


def generate_suggested_response(intent: QueryIntent) -> str:
    """Describe the planned action for an intent in one sentence."""
    if intent.type == IntentType.SPENDING:
        if intent.categories:
            categories = " and ".join(c.value for c in intent.categories)
            period = f" for {_humanize(intent.timeframe.value)}" if intent.timeframe else ""
            return f"I'll analyze your {categories} spending{period}."
        return "I'll break down your spending patterns and show you where your money is going."

    if intent.type == IntentType.COMPARISON:
        if intent.comparison == ComparisonBaseline.LAST_MONTH:
            return "I'll compare this month's spending with last month to show you the changes."
        return "I'll compare your income and expenses to show your financial picture."

    return _FIXED_RESPONSES.get(intent.type, GENERAL_RESPONSE)


class QueryProcessor:
    """Classifies free-text financial questions into a ``ProcessedQuery``."""

    def __init__(
        self,
        max_query_length: int = DEFAULT_MAX_QUERY_LENGTH,
        intent_rules: Sequence[Rule[IntentType]] = INTENT_RULES,
    ):
        if max_query_length < 1:
            raise ValueError("max_query_length must be positive")
        self.max_query_length = max_query_length
        self.intent_rules = tuple(intent_rules)

    def process(self, query: str) -> ProcessedQuery:
        """Run every extraction stage and template the suggested response."""
        normalized = normalize_query(query, self.max_query_length)
        intent_type, confidence = determine_intent(normalized, self.intent_rules)
        intent = QueryIntent(
            type=intent_type,
            timeframe=extract_timeframe(normalized),
            categories=extract_categories(normalized),
            operation=extract_operation(normalized),
            comparison=extract_comparison(normalized),
            amount=extract_amount(normalized),
        )
        return ProcessedQuery(
            intent=intent,
            original_query=query,
            confidence=confidence,
            suggested_response=generate_suggested_response(intent),
        )


_default_processor = QueryProcessor()


def process_query(query: str) -> ProcessedQuery:
    """Classify ``query`` with the default rule tables and length cap."""
    return _default_processor.process(query)
