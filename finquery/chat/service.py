"""Chat service: classify a question, fetch its data, ask the LLM."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import structlog

from ..core.config import Settings, get_settings
from ..core.exceptions import (
    ConfigurationError,
    DataSourceError,
    LLMError,
    ValidationError,
)
from ..query.processor import QueryProcessor
from ..query.types import ProcessedQuery
from ..storage.base import FinanceDataSource
from ..utils.llm import LLMClient, get_llm_client
from .context import ContextPlan, ContextPlanner, DataSet
from .prompt import build_chat_prompt

logger = structlog.get_logger(__name__)

LLMFactory = Callable[[str | None], LLMClient]


@dataclass(frozen=True)
class ChatResult:
    """Model answer plus the classification that steered it."""

    response: str
    processed: ProcessedQuery
    currency: str
    plan: ContextPlan


class FinancialChatService:
    """Routes a chat message through the classifier before forwarding it to the LLM."""

    def __init__(
        self,
        data_source: FinanceDataSource,
        llm_factory: LLMFactory | None = None,
        processor: QueryProcessor | None = None,
        planner: ContextPlanner | None = None,
        settings: Settings | None = None,
    ):
        self.settings = settings or get_settings()
        self.data_source = data_source
        self.llm_factory = llm_factory or (
            lambda api_key: get_llm_client(api_key, self.settings.llm)
        )
        self.processor = processor or QueryProcessor(
            max_query_length=self.settings.classifier.max_query_length
        )
        self.planner = planner or ContextPlanner(
            recent_transactions_limit=self.settings.chat.recent_transactions_limit
        )

    def classify(self, message: str) -> ProcessedQuery:
        processed = self.processor.process(message)
        logger.info(
            "query_classified",
            intent=processed.intent.type.value,
            confidence=processed.confidence,
            timeframe=processed.intent.timeframe,
            categories=[c.value for c in processed.intent.categories],
        )
        return processed

    async def answer(self, user_id: str, message: str) -> ChatResult:
        """Answer ``message`` for ``user_id``.

        Raises ValidationError for a blank message, ConfigurationError when no
        LLM key is available, DataSourceError when records cannot be loaded
        and LLMError when the model call fails.
        """
        if not isinstance(message, str) or not message.strip():
            raise ValidationError("Message is required")

        processed = self.classify(message)
        plan = self.planner.plan(processed)

        try:
            profile = await self.data_source.get_profile(user_id)
        except DataSourceError:
            raise
        except Exception as e:
            raise DataSourceError(f"Failed to load profile: {e}") from e

        currency = (
            profile.preferred_currency if profile else None
        ) or self.settings.chat.default_currency
        api_key = profile.llm_api_key if profile else None

        try:
            llm = self.llm_factory(api_key)
        except ConfigurationError:
            raise
        except ImportError as e:
            raise ConfigurationError(str(e)) from e

        context = await self._load_context(user_id, plan)
        prompt = build_chat_prompt(message, processed, currency, context)

        try:
            response = await llm.complete(
                prompt,
                temperature=self.settings.llm.temperature,
                max_tokens=self.settings.llm.max_tokens,
            )
        except Exception as e:
            logger.error("llm_call_failed", user_id=user_id, error=str(e))
            raise LLMError(f"Language model call failed: {e}") from e
        if not response or not response.strip():
            raise LLMError("Language model returned an empty response")

        logger.info(
            "chat_completed",
            user_id=user_id,
            intent=processed.intent.type.value,
            datasets=[d.value for d in plan.datasets],
            response_chars=len(response),
        )
        return ChatResult(response=response, processed=processed, currency=currency, plan=plan)

    async def _load_context(self, user_id: str, plan: ContextPlan) -> dict[str, list[dict[str, Any]]]:
        source = self.data_source
        context: dict[str, list[dict[str, Any]]] = {}
        try:
            for dataset in plan.datasets:
                if dataset == DataSet.ACCOUNTS:
                    context[dataset.value] = await source.list_accounts(user_id)
                elif dataset == DataSet.TRANSACTIONS:
                    context[dataset.value] = await source.list_recent_transactions(
                        user_id,
                        limit=plan.transaction_limit,
                        since=plan.since,
                        until=plan.until,
                    )
                elif dataset == DataSet.BUDGETS:
                    context[dataset.value] = await source.list_budgets(user_id)
                elif dataset == DataSet.GOALS:
                    context[dataset.value] = await source.list_goals(user_id)
                elif dataset == DataSet.DEBTS:
                    context[dataset.value] = await source.list_debts(user_id)
        except DataSourceError:
            raise
        except Exception as e:
            logger.error("context_load_failed", user_id=user_id, error=str(e))
            raise DataSourceError(f"Failed to load financial data: {e}") from e
        return context
