"""Chat routing: context planning, prompt assembly and LLM forwarding."""

from .context import ContextPlan, ContextPlanner, DataSet, timeframe_window
from .prompt import build_chat_prompt
from .service import ChatResult, FinancialChatService

__all__ = [
    "ChatResult",
    "ContextPlan",
    "ContextPlanner",
    "DataSet",
    "FinancialChatService",
    "build_chat_prompt",
    "timeframe_window",
]
