"""Finance data sources: interface, in-memory and PostgreSQL implementations."""

from .base import FinanceDataSource, UserProfile
from .memory import InMemoryFinanceDataSource

__all__ = [
    "FinanceDataSource",
    "InMemoryFinanceDataSource",
    "UserProfile",
]
