"""Shared FastAPI dependencies for API routes.

Re-exports auth dependencies and app-state accessors so route modules can
import from a single place::

    from .dependencies import AuthContext, get_chat_service, require_user
"""

from fastapi import Request

from ..chat.service import FinancialChatService
from .auth import AuthContext, get_auth_context, require_user


def get_chat_service(request: Request) -> FinancialChatService:
    """Get the chat service from app state."""
    return request.app.state.chat_service


__all__ = [
    "AuthContext",
    "get_auth_context",
    "get_chat_service",
    "require_user",
]
