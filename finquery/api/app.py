"""FastAPI application factory and entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..chat.service import FinancialChatService
from ..core.config import get_settings
from ..storage.base import FinanceDataSource
from ..storage.memory import InMemoryFinanceDataSource
from ..utils.logging_config import configure_logging
from .middleware import RateLimitMiddleware, RequestLoggingMiddleware
from .routes import router

logger = structlog.get_logger()


def build_data_source() -> FinanceDataSource:
    """PostgreSQL when DATABASE__POSTGRES_URL is set, else an empty in-memory source."""
    settings = get_settings()
    if settings.database.postgres_url:
        from ..storage.connection import DatabaseManager
        from ..storage.postgres import PostgresFinanceDataSource

        return PostgresFinanceDataSource(DatabaseManager(settings.database.postgres_url))
    logger.warning(
        "finance_data_source_in_memory",
        msg="DATABASE__POSTGRES_URL not set; chat answers will see no user data",
    )
    return InMemoryFinanceDataSource()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator:
    """Application lifespan handler."""
    settings = get_settings()
    configure_logging(
        settings.log_level, json_output=settings.log_json, service=settings.app_name
    )

    data_source = build_data_source()
    app.state.data_source = data_source
    app.state.chat_service = FinancialChatService(data_source, settings=settings)

    yield

    await data_source.close()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    app = FastAPI(
        title="FinQuery",
        description="Natural-language financial questions routed to your own data",
        version="1.0.0",
        lifespan=lifespan,
    )

    settings = get_settings()
    if settings.cors_origins is not None:
        origins = settings.cors_origins
    elif settings.debug:
        origins = ["*"]
    else:
        origins = ["http://localhost:3000", "http://localhost:5173"]

    # CORS: credentials are incompatible with wildcard origins
    allow_credentials = "*" not in origins

    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    rpm = settings.auth.rate_limit_requests_per_minute
    if rpm > 0:
        app.add_middleware(RateLimitMiddleware, requests_per_minute=rpm)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(router, prefix="/api/v1")

    # Prometheus metrics endpoint
    from prometheus_client import make_asgi_app

    app.mount("/metrics", make_asgi_app())

    return app


app = create_app()
