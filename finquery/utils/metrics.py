"""Prometheus metrics for classification and chat requests."""

from prometheus_client import Counter, Histogram

QUERIES_CLASSIFIED = Counter(
    "finquery_queries_classified_total",
    "Total queries run through the intent classifier",
    ["intent"],
)

CHAT_REQUESTS = Counter(
    "finquery_chat_requests_total",
    "Total chat requests by outcome",
    ["status"],
)

CHAT_LATENCY = Histogram(
    "finquery_chat_latency_seconds",
    "End-to-end chat latency (data fetch + LLM call)",
    buckets=[0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0],
)
