"""Unit tests for advisor prompt assembly."""

from datetime import date
from decimal import Decimal

from finquery.chat.prompt import build_chat_prompt
from finquery.query import process_query


def test_prompt_contains_question_currency_and_hint():
    message = "How much did I spend on food last month?"
    processed = process_query(message)
    prompt = build_chat_prompt(message, processed, "EUR", {})

    assert "The user's preferred currency is: EUR" in prompt
    assert "ALWAYS format numbers in EUR" in prompt
    assert f"**User's Question:** {message}" in prompt
    assert "Intent: spending (confidence 0.9)" in prompt
    assert processed.suggested_response in prompt
    assert '"categories": ["food"]' in prompt
    assert "DO NOT use any emojis" in prompt
    assert "No financial records available." in prompt


def test_prompt_serializes_rows_with_decimals_and_dates():
    processed = process_query("What did I spend this month?")
    context = {
        "accounts": [{"name": "Checking", "balance": Decimal("2500.00"), "type": "checking"}],
        "transactions": [
            {"type": "expense", "amount": Decimal("12.50"), "date": date(2024, 5, 3)},
        ],
    }
    prompt = build_chat_prompt("What did I spend this month?", processed, "USD", context)

    assert "- Accounts: " in prompt
    assert '"balance": "2500.00"' in prompt
    assert "- Recent Transactions (last 1): " in prompt
    assert '"date": "2024-05-03"' in prompt
    assert "No financial records available." not in prompt


def test_prompt_for_general_query_has_no_details():
    processed = process_query("hello")
    prompt = build_chat_prompt("hello", processed, "GBP", {"budgets": []})
    assert "Intent: general (confidence 0.3)" in prompt
    assert "Details: none" in prompt
    assert "- Budgets: []" in prompt


def test_braces_in_message_are_kept_literally():
    processed = process_query("what is {this}?")
    prompt = build_chat_prompt("what is {this}?", processed, "USD", {})
    assert "what is {this}?" in prompt
