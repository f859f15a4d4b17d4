"""Advisor prompt assembly for the hosted language model."""

import json
from typing import Any

from ..query.types import ProcessedQuery

_CURRENCY_EXAMPLES = """- INR: ₹1,00,000 (Indian format with lakhs)
- USD: $100,000
- EUR: €100,000
- GBP: £100,000"""

_DATA_LABELS = {
    "accounts": "Accounts",
    "transactions": "Recent Transactions",
    "budgets": "Budgets",
    "goals": "Savings Goals",
    "debts": "Debts",
}

PROMPT_TEMPLATE = """You are a helpful, friendly financial advisor assistant. The user is asking about their personal finances.

**IMPORTANT: Currency Setting**
The user's preferred currency is: {currency}
ALWAYS format all monetary values using {currency} symbol and format. For example:
{currency_examples}

**User's Financial Data:**
{data}

**Query Analysis:**
- Intent: {intent} (confidence {confidence})
- Details: {details}
- Planned approach: {suggested_response}

**User's Question:** {message}

**Instructions:**
1. Be concise but helpful (keep responses under 150 words unless more detail is needed)
2. Use the actual data provided to give specific, personalized advice
3. ALWAYS format numbers in {currency} - this is critical!
4. If asked about balance, calculate totals from the accounts data
5. Be encouraging and positive while being honest about financial health
6. Suggest actionable next steps when appropriate
7. DO NOT use any emojis in your responses."""


def _dumps(rows: Any) -> str:
    return json.dumps(rows, default=str, ensure_ascii=False)


def build_chat_prompt(
    message: str,
    processed: ProcessedQuery,
    currency: str,
    context: dict[str, list[dict[str, Any]]],
) -> str:
    """Render the prompt from the question, its classification and fetched data.

    ``context`` maps dataset names (``accounts``, ``transactions``, ...) to
    rows; datasets that were not fetched are simply omitted.
    """
    lines = []
    for name, rows in context.items():
        label = _DATA_LABELS.get(name, name.replace("_", " ").title())
        if name == "transactions":
            label = f"{label} (last {len(rows)})"
        lines.append(f"- {label}: {_dumps(rows)}")
    data = "\n".join(lines) if lines else "- No financial records available."

    intent = processed.intent.to_dict()
    details = {k: v for k, v in intent.items() if k != "type" and v not in (None, [])}
    return PROMPT_TEMPLATE.format(
        currency=currency,
        currency_examples=_CURRENCY_EXAMPLES,
        data=data,
        intent=intent["type"],
        confidence=processed.confidence,
        details=_dumps(details) if details else "none",
        suggested_response=processed.suggested_response,
        message=message,
    )
