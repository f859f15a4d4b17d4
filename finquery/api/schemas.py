"""API request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from ..query.types import ProcessedQuery


class QueryRequest(BaseModel):
    """Free text to classify without calling the LLM."""

    query: str = Field(max_length=10_000)


class QueryIntentModel(BaseModel):
    """Extracted intent fields; absent extractions are null."""

    type: str
    timeframe: str | None = None
    categories: list[str] = Field(default_factory=list)
    operation: str | None = None
    comparison: str | None = None
    amount: float | None = None


class QueryResponse(BaseModel):
    """Classifier output."""

    intent: QueryIntentModel
    original_query: str
    confidence: float
    suggested_response: str

    @classmethod
    def from_processed(cls, processed: ProcessedQuery) -> "QueryResponse":
        data = processed.to_dict()
        return cls(
            intent=QueryIntentModel(**data["intent"]),
            original_query=data["original_query"],
            confidence=data["confidence"],
            suggested_response=data["suggested_response"],
        )


class QueryExamplesResponse(BaseModel):
    """Suggested prompts for the chat box."""

    examples: list[str]


class ChatRequest(BaseModel):
    """A chat message from the authenticated user."""

    message: str | None = Field(default=None, max_length=10_000)


class ChatResponse(BaseModel):
    """Model answer with the classification shown to the client."""

    response: str
    intent: str
    confidence: float
    suggested_response: str


class HealthResponse(BaseModel):
    status: str
    timestamp: datetime
