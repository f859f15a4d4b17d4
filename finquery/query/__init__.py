"""Natural-language financial query classification."""

from .examples import QUERY_EXAMPLES
from .processor import QueryProcessor, generate_suggested_response, process_query
from .rules import INTENT_PRIORITY
from .types import (
    ComparisonBaseline,
    IntentType,
    Operation,
    ProcessedQuery,
    QueryIntent,
    SpendingCategory,
    Timeframe,
)

__all__ = [
    "INTENT_PRIORITY",
    "QUERY_EXAMPLES",
    "ComparisonBaseline",
    "IntentType",
    "Operation",
    "ProcessedQuery",
    "QueryIntent",
    "QueryProcessor",
    "SpendingCategory",
    "Timeframe",
    "generate_suggested_response",
    "process_query",
]
