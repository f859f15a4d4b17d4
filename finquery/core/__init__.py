"""Core configuration and exceptions for FinQuery."""

from .config import Settings, get_settings
from .exceptions import (
    ConfigurationError,
    DataSourceError,
    FinQueryError,
    LLMError,
    ValidationError,
)

__all__ = [
    "get_settings",
    "Settings",
    "ConfigurationError",
    "DataSourceError",
    "FinQueryError",
    "LLMError",
    "ValidationError",
]
