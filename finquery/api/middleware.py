"""API middleware: request logging and rate limiting."""

import asyncio
import hashlib
import time

import structlog
from cachetools import TTLCache  # type: ignore[import-untyped]
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

from ..utils.logging_config import bind_request_context, clear_request_context

logger = structlog.get_logger()


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log all requests with timing."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = f"{time.time_ns()}"
        request.state.request_id = request_id
        bind_request_context(request_id, request.headers.get("X-User-Id"))

        logger.info(
            "request_started",
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
            elapsed = time.time() - start_time
            logger.info(
                "request_completed",
                status_code=response.status_code,
                elapsed_ms=elapsed * 1000,
            )
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{elapsed * 1000:.2f}ms"
            return response
        except Exception as e:
            logger.error("request_failed", error=str(e))
            raise
        finally:
            clear_request_context()


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Fixed one-minute window per (frontend key, user), else per client IP.

    Each bucket is a one-element counter list stored in a TTLCache; the entry
    expires one window after the first request, which resets the count.
    Counts are per process.
    """

    EXEMPT_PATHS = ("/api/v1/health", "/metrics")
    WINDOW_SECONDS = 60

    def __init__(self, app, requests_per_minute: int = 60, max_clients: int = 10_000):
        super().__init__(app)
        self.requests_per_minute = requests_per_minute
        self._windows: TTLCache[str, list[int]] = TTLCache(
            maxsize=max_clients, ttl=self.WINDOW_SECONDS
        )
        self._lock = asyncio.Lock()

    @staticmethod
    def bucket_key(request: Request) -> str:
        api_key = request.headers.get("X-API-Key")
        if api_key:
            digest = hashlib.sha256(api_key.encode()).hexdigest()[:16]
            return f"apikey:{digest}:{request.headers.get('X-User-Id', '')}"
        return f"ip:{request.client.host if request.client else 'unknown'}"

    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith(self.EXEMPT_PATHS):
            return await call_next(request)
        key = self.bucket_key(request)
        if not await self._consume(key):
            logger.warning("rate_limited", bucket=key.split(":", 1)[0])
            return JSONResponse(
                status_code=429,
                content={"detail": "Rate limit exceeded. Try again later."},
                headers={"Retry-After": str(self.WINDOW_SECONDS)},
            )
        return await call_next(request)

    async def _consume(self, key: str) -> bool:
        async with self._lock:
            window = self._windows.get(key)
            if window is None:
                self._windows[key] = [1]
                return True
            if window[0] >= self.requests_per_minute:
                return False
            # In-place so the entry keeps its original expiry
            window[0] += 1
            return True
