"""Unit tests for settings loading and URL normalisation."""

import pytest
from pydantic import ValidationError

from finquery.core.config import Settings, ensure_asyncpg_url, get_settings


class TestEnsureAsyncpgUrl:
    @pytest.mark.parametrize(
        ("url", "expected"),
        [
            ("postgresql://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgres://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql+psycopg2://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
            ("postgresql+asyncpg://u:p@h/db", "postgresql+asyncpg://u:p@h/db"),
        ],
    )
    def test_normalises_driver(self, url, expected):
        assert ensure_asyncpg_url(url) == expected


class TestSettings:
    def test_defaults(self, monkeypatch):
        for name in ("LLM__PROVIDER", "CLASSIFIER__MAX_QUERY_LENGTH", "AUTH__API_KEY"):
            monkeypatch.delenv(name, raising=False)
        settings = Settings(_env_file=None)
        assert settings.classifier.max_query_length == 2000
        assert settings.llm.provider == "gemini"
        assert settings.chat.default_currency == "USD"
        assert settings.auth.rate_limit_requests_per_minute == 60

    def test_nested_env_vars(self, monkeypatch):
        monkeypatch.setenv("CLASSIFIER__MAX_QUERY_LENGTH", "500")
        monkeypatch.setenv("LLM__PROVIDER", "ollama")
        monkeypatch.setenv("CHAT__DEFAULT_CURRENCY", "INR")
        settings = Settings(_env_file=None)
        assert settings.classifier.max_query_length == 500
        assert settings.llm.provider == "ollama"
        assert settings.chat.default_currency == "INR"

    def test_rejects_non_positive_length(self, monkeypatch):
        monkeypatch.setenv("CLASSIFIER__MAX_QUERY_LENGTH", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
