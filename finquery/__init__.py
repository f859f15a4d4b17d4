"""Natural-language financial query classification and chat routing."""

from .query import QUERY_EXAMPLES, ProcessedQuery, QueryIntent, process_query

__all__ = [
    "QUERY_EXAMPLES",
    "ProcessedQuery",
    "QueryIntent",
    "process_query",
]
