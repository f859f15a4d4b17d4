"""Unit tests for the financial chat service."""

from datetime import date

import pytest

from finquery.chat.context import ContextPlanner, DataSet
from finquery.chat.service import FinancialChatService
from finquery.core.config import LLMSettings, Settings
from finquery.core.exceptions import (
    ConfigurationError,
    DataSourceError,
    LLMError,
    ValidationError,
)
from finquery.query.types import IntentType
from finquery.storage.base import UserProfile
from finquery.storage.memory import InMemoryFinanceDataSource
from finquery.utils.llm import LLMClient, MockLLMClient


@pytest.fixture
def data_source():
    source = InMemoryFinanceDataSource()
    source.add_profile(
        UserProfile(user_id="u1", currency="USD", preferences={"currency": "INR"})
    )
    source.add_account("u1", name="Checking", balance=1200.0, type="checking")
    source.add_transaction(
        "u1", type="expense", amount=45.0, date="2024-04-10", description="Groceries",
        category_name="Food",
    )
    source.add_transaction(
        "u1", type="expense", amount=30.0, date="2024-05-02", description="Lunch",
        category_name="Food",
    )
    source.add_budget("u1", amount=400.0, period="monthly", category_name="Food")
    return source


@pytest.fixture
def llm():
    return MockLLMClient(fixed_response="You spent 45.00 on food.")


@pytest.fixture
def settings():
    return Settings(llm=LLMSettings(provider="mock"))


def _service(data_source, llm, settings, keys=None):
    def factory(api_key):
        if keys is not None:
            keys.append(api_key)
        return llm

    return FinancialChatService(
        data_source,
        llm_factory=factory,
        planner=ContextPlanner(clock=lambda: date(2024, 5, 15)),
        settings=settings,
    )


class TestAnswer:
    @pytest.mark.asyncio
    async def test_answer_returns_llm_text_and_classification(self, data_source, llm, settings):
        service = _service(data_source, llm, settings)
        result = await service.answer("u1", "How much did I spend on food last month?")

        assert result.response == "You spent 45.00 on food."
        assert result.processed.intent.type == IntentType.SPENDING
        assert result.currency == "INR"
        assert result.plan.datasets == (DataSet.TRANSACTIONS, DataSet.BUDGETS)

    @pytest.mark.asyncio
    async def test_prompt_only_includes_planned_data(self, data_source, llm, settings):
        service = _service(data_source, llm, settings)
        await service.answer("u1", "How much did I spend on food last month?")

        prompt = llm.prompts[-1]
        assert "Groceries" in prompt
        assert "Lunch" not in prompt  # outside last month's window
        assert "- Budgets: " in prompt
        assert "- Accounts: " not in prompt
        assert "The user's preferred currency is: INR" in prompt

    @pytest.mark.asyncio
    async def test_balance_question_sends_accounts(self, data_source, llm, settings):
        service = _service(data_source, llm, settings)
        await service.answer("u1", "What's my net worth?")
        assert "Checking" in llm.prompts[-1]

    @pytest.mark.asyncio
    async def test_default_currency_without_profile(self, llm, settings):
        service = _service(InMemoryFinanceDataSource(), llm, settings)
        result = await service.answer("nobody", "What's my net worth?")
        assert result.currency == "USD"

    @pytest.mark.asyncio
    async def test_per_user_key_is_passed_to_factory(self, data_source, llm, settings):
        data_source.add_profile(
            UserProfile(user_id="u2", preferences={"geminiApiKey": "user-key"})
        )
        keys: list = []
        service = _service(data_source, llm, settings, keys=keys)
        await service.answer("u2", "What's my net worth?")
        await service.answer("u1", "What's my net worth?")
        assert keys == ["user-key", None]


class TestAnswerErrors:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("message", ["", "   ", None])
    async def test_blank_message(self, data_source, llm, settings, message):
        service = _service(data_source, llm, settings)
        with pytest.raises(ValidationError):
            await service.answer("u1", message)
        assert llm.prompts == []

    @pytest.mark.asyncio
    async def test_missing_key_is_configuration_error(self, data_source, settings):
        def factory(api_key):
            raise ConfigurationError("Gemini API key not set")

        service = FinancialChatService(data_source, llm_factory=factory, settings=settings)
        with pytest.raises(ConfigurationError):
            await service.answer("u1", "What's my net worth?")

    @pytest.mark.asyncio
    async def test_llm_failure_is_wrapped(self, data_source, settings):
        class _Failing(LLMClient):
            async def complete(self, prompt, temperature=0.0, max_tokens=500):
                raise RuntimeError("quota exceeded")

        service = _service(data_source, _Failing(), settings)
        with pytest.raises(LLMError, match="quota exceeded"):
            await service.answer("u1", "What's my net worth?")

    @pytest.mark.asyncio
    async def test_empty_llm_response(self, data_source, settings):
        service = _service(data_source, MockLLMClient(fixed_response="  "), settings)
        with pytest.raises(LLMError):
            await service.answer("u1", "What's my net worth?")

    @pytest.mark.asyncio
    async def test_data_source_failure_is_wrapped(self, llm, settings):
        class _Broken(InMemoryFinanceDataSource):
            async def list_accounts(self, user_id):
                raise ConnectionError("db down")

        service = _service(_Broken(), llm, settings)
        with pytest.raises(DataSourceError, match="db down"):
            await service.answer("u1", "What's my net worth?")
        assert llm.prompts == []


def test_classify_uses_configured_length_cap(data_source, llm):
    settings = Settings(llm=LLMSettings(provider="mock"))
    settings.classifier.max_query_length = 5
    service = FinancialChatService(data_source, llm_factory=lambda key: llm, settings=settings)
    assert service.classify("hello, how much did I spend?").intent.type == IntentType.GENERAL
