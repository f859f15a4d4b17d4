"""API routes for query classification and financial chat."""

import time
import traceback
from datetime import UTC, datetime

import structlog
from fastapi import APIRouter, Depends, HTTPException

from ..chat.service import FinancialChatService
from ..core.config import get_settings
from ..core.exceptions import ConfigurationError, DataSourceError, LLMError, ValidationError
from ..query.examples import QUERY_EXAMPLES
from ..utils.metrics import CHAT_LATENCY, CHAT_REQUESTS, QUERIES_CLASSIFIED
from .dependencies import AuthContext, get_auth_context, get_chat_service, require_user
from .schemas import (
    ChatRequest,
    ChatResponse,
    HealthResponse,
    QueryExamplesResponse,
    QueryRequest,
    QueryResponse,
)

logger = structlog.get_logger()
router = APIRouter(tags=["ai"])


def _safe_500_detail(e: Exception) -> str:
    """Avoid leaking internal details in 500 responses unless debug."""
    return str(e) if get_settings().debug else "Server error"


@router.get("/ai/query/examples", response_model=QueryExamplesResponse)
async def query_examples(auth: AuthContext = Depends(get_auth_context)):
    """Suggested prompts for the chat box."""
    return QueryExamplesResponse(examples=list(QUERY_EXAMPLES))


@router.post("/ai/query", response_model=QueryResponse)
async def classify_query(
    body: QueryRequest,
    auth: AuthContext = Depends(get_auth_context),
    service: FinancialChatService = Depends(get_chat_service),
):
    """Classify a question without fetching data or calling the LLM."""
    processed = service.classify(body.query)
    QUERIES_CLASSIFIED.labels(intent=processed.intent.type.value).inc()
    return QueryResponse.from_processed(processed)


@router.post("/ai/chat", response_model=ChatResponse)
async def chat(
    body: ChatRequest,
    auth: AuthContext = Depends(require_user),
    service: FinancialChatService = Depends(get_chat_service),
):
    """Answer a financial question using the user's own data."""
    start = time.perf_counter()
    try:
        result = await service.answer(auth.user_id, body.message)
    except (ValidationError, ConfigurationError) as e:
        CHAT_REQUESTS.labels(status="rejected").inc()
        raise HTTPException(status_code=400, detail=str(e))
    except DataSourceError as e:
        CHAT_REQUESTS.labels(status="error").inc()
        logger.error("chat_data_unavailable", user_id=auth.user_id, error=str(e))
        raise HTTPException(status_code=503, detail="Financial data unavailable")
    except LLMError as e:
        CHAT_REQUESTS.labels(status="error").inc()
        logger.error("chat_llm_failed", user_id=auth.user_id, error=str(e))
        raise HTTPException(status_code=502, detail="Language model request failed")
    except Exception as e:
        CHAT_REQUESTS.labels(status="error").inc()
        logger.error(
            "chat_failed",
            user_id=auth.user_id,
            error=str(e),
            traceback=traceback.format_exc(),
        )
        raise HTTPException(status_code=500, detail=_safe_500_detail(e))
    finally:
        CHAT_LATENCY.observe(time.perf_counter() - start)

    CHAT_REQUESTS.labels(status="success").inc()
    QUERIES_CLASSIFIED.labels(intent=result.processed.intent.type.value).inc()
    return ChatResponse(
        response=result.response,
        intent=result.processed.intent.type.value,
        confidence=result.processed.confidence,
        suggested_response=result.processed.suggested_response,
    )


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """Liveness probe."""
    return HealthResponse(status="healthy", timestamp=datetime.now(UTC))
