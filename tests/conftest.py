"""Pytest fixtures shared by the unit tests."""

import pytest

from finquery.storage.memory import InMemoryFinanceDataSource
from finquery.utils.llm import MockLLMClient


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Auto-clear the settings LRU cache after each test so env overrides do not leak."""
    yield
    from finquery.core.config import get_settings

    get_settings.cache_clear()


@pytest.fixture
def empty_data_source():
    return InMemoryFinanceDataSource()


@pytest.fixture
def mock_llm():
    return MockLLMClient()
