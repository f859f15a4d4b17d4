"""Utilities: LLM client, logging, metrics."""

from .llm import LLMClient, MockLLMClient, get_llm_client
from .logging_config import configure_logging, get_logger

__all__ = [
    "LLMClient",
    "MockLLMClient",
    "configure_logging",
    "get_llm_client",
    "get_logger",
]
