"""API authentication (config-based, no hardcoded keys)."""

import hmac
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Header, HTTPException, Security
from fastapi.security import APIKeyHeader

from ..core.config import get_settings

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


@dataclass
class AuthContext:
    """Authentication context for a request."""

    user_id: Optional[str] = None
    api_key: str = ""


async def get_auth_context(
    api_key: Optional[str] = Security(api_key_header),
    x_user_id: Optional[str] = Header(None),
) -> AuthContext:
    """Dependency to get auth context from request.

    The API key (AUTH__API_KEY) authenticates the calling frontend; the
    X-User-Id header carries the user id that frontend has already verified.
    """
    if not api_key:
        raise HTTPException(status_code=401, detail="API key required")

    known_key = get_settings().auth.api_key
    if not known_key or not hmac.compare_digest(api_key, known_key):
        raise HTTPException(status_code=401, detail="Invalid API key")

    user_id = (x_user_id or "").strip() or None
    return AuthContext(user_id=user_id, api_key=api_key)


async def require_user(
    context: AuthContext = Depends(get_auth_context),
) -> AuthContext:
    """Require an authenticated user id."""
    if not context.user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return context
