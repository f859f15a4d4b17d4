"""Configuration management with pydantic-settings."""

import re
from functools import lru_cache

from pydantic import BaseModel as PydanticBaseModel
from pydantic import Field
from pydantic_settings import BaseSettings


def ensure_asyncpg_url(url: str) -> str:
    """Normalise a PostgreSQL URL to always use the asyncpg driver.

    ``postgresql://`` and any ``postgresql+<driver>://`` variant become
    ``postgresql+asyncpg://``. URLs that already use ``+asyncpg`` are returned
    unchanged.
    """
    if "+asyncpg" in url:
        return url
    return re.sub(r"^postgres(?:ql)?(\+\w+)?://", "postgresql+asyncpg://", url)


class ClassifierSettings(PydanticBaseModel):
    """Query classifier limits."""

    max_query_length: int = Field(default=2000, ge=1)


class DatabaseSettings(PydanticBaseModel):
    """Database connection settings. Empty postgres_url = in-memory data source."""

    postgres_url: str = Field(default="")
    pool_size: int = Field(default=5, ge=1)
    max_overflow: int = Field(default=5, ge=0)


class LLMSettings(PydanticBaseModel):
    """LLM provider settings."""

    provider: str = Field(default="gemini")  # gemini | openai | openai_compatible | ollama | mock
    model: str = Field(default="gemini-1.5-flash")
    api_key: str | None = Field(default=None)
    base_url: str | None = Field(default=None)
    max_tokens: int = Field(default=800)
    temperature: float = Field(default=0.4)
    timeout_seconds: float = Field(default=30.0, gt=0)


class ChatSettings(PydanticBaseModel):
    """Chat context assembly settings."""

    recent_transactions_limit: int = Field(default=20, ge=1)
    default_currency: str = Field(default="USD")


class AuthSettings(PydanticBaseModel):
    """
    API authentication (keys from environment).
    Env vars (with env_nested_delimiter='__'): AUTH__API_KEY, AUTH__RATE_LIMIT_REQUESTS_PER_MINUTE.
    """

    api_key: str | None = Field(default=None)
    rate_limit_requests_per_minute: int = Field(
        default=60,
        description="Rate limit per API key or client IP (0 = disable).",
    )


class Settings(BaseSettings):
    """Application settings with nested configuration."""

    app_name: str = Field(default="FinQuery")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")
    log_json: bool = Field(default=True)
    cors_origins: list[str] | None = Field(
        default=None
    )  # None = use default; ["*"] disables credentials

    classifier: ClassifierSettings = Field(default_factory=ClassifierSettings)
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "extra": "ignore",
    }


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings.

    The result is cached via ``@lru_cache`` for the process lifetime. Call
    ``get_settings.cache_clear()`` after overriding environment variables via
    ``monkeypatch``; an autouse fixture in ``tests/conftest.py`` does this
    after each test.
    """
    return Settings()
