"""Suggested prompts shown next to the chat box."""

QUERY_EXAMPLES: tuple[str, ...] = (
    "How much did I spend on food last month?",
    "What's my total account balance?",
    "Show me my income vs expenses this month",
    "Compare my spending this month vs last month",
    "How much do I spend on transportation weekly?",
    "What's my average monthly grocery bill?",
    "Am I on track with my savings goals?",
    "Show me a breakdown of my entertainment spending",
    "How much debt do I have left?",
    "What's my net worth?",
    "Forecast my expenses for next month",
    "How much can I save this month?",
    "Which category do I spend the most on?",
    "What's my average daily spending?",
    "How much have I earned this year?",
    "Am I over budget on dining?",
    "When will I reach my savings goal?",
    "What's my financial health score?",
)
