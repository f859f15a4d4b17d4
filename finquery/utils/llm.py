"""Language model clients used to answer chat questions."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ..core.config import LLMSettings, get_settings
from ..core.exceptions import ConfigurationError

try:
    from openai import AsyncOpenAI
except ImportError:
    AsyncOpenAI = None  # type: ignore

_BASE_URLS = {
    "openai": "https://api.openai.com/v1",
    "openai_compatible": "http://localhost:8000/v1",
    "ollama": "http://localhost:11434/v1",
}

GEMINI_KEY_PREFIX = "AIzaSy"

# Keys handed out for demos and seeded test accounts; never sent upstream.
DEMO_KEY_PREFIXES = ("demo-key", "test-real-key", "AIzaSyDemoKey")

DEMO_RESPONSE = """Here is a sample analysis based on demo data:

**Income vs Expenses**
- Income: $5,000.00
- Expenses: $730.00
- Net savings: $4,270.00

**Largest categories**
- Food & Dining: $535.00
- Shopping: $120.00
- Transportation: $60.00

Connect a real Gemini API key in your preferences to analyze your own data."""


def is_demo_key(api_key: str | None) -> bool:
    return bool(api_key) and api_key.startswith(DEMO_KEY_PREFIXES)


class LLMClient(ABC):
    """Prompt in, answer text out."""

    @abstractmethod
    async def complete(self, prompt: str, temperature: float = 0.0, max_tokens: int = 500) -> str:
        ...


class OpenAICompatibleClient(LLMClient):
    """OpenAI chat completions API, or any server speaking it (vLLM, Ollama, proxies)."""

    def __init__(self, base_url: str, model: str, api_key: str, timeout: float = 30.0) -> None:
        if AsyncOpenAI is None:
            raise ImportError("openai package is required for OpenAICompatibleClient")
        self.model = model
        self.client = AsyncOpenAI(base_url=base_url, api_key=api_key, timeout=timeout)

    async def complete(self, prompt: str, temperature: float = 0.0, max_tokens: int = 500) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return response.choices[0].message.content or ""


@dataclass
class MockLLMClient(LLMClient):
    """Returns a fixed answer and records every prompt (tests, demo keys)."""

    fixed_response: str = "Here is a summary of your finances."
    prompts: list[str] = field(default_factory=list)

    async def complete(self, prompt: str, temperature: float = 0.0, max_tokens: int = 500) -> str:
        self.prompts.append(prompt)
        return self.fixed_response


def _gemini_client(api_key: str, model: str, timeout: float = 30.0) -> LLMClient:
    try:
        import google.generativeai as genai
        from google.ai import generativelanguage as glm
    except ImportError as e:
        raise ImportError(
            "gemini provider requires the google-generativeai package. "
            "Install with: pip install google-generativeai"
        ) from e

    class _GeminiClient(LLMClient):
        def __init__(self) -> None:
            # Key bound to this instance only; genai.configure() is process-wide
            self._model = genai.GenerativeModel(model)
            self._model._async_client = glm.GenerativeServiceAsyncClient(
                client_options={"api_key": api_key}
            )

        async def complete(
            self, prompt: str, temperature: float = 0.0, max_tokens: int = 500
        ) -> str:
            response = await self._model.generate_content_async(
                prompt,
                generation_config={"temperature": temperature, "max_output_tokens": max_tokens},
                request_options={"timeout": timeout},
            )
            try:
                return response.text
            except ValueError:
                # Blocked or empty candidates have no text part
                return ""

    return _GeminiClient()


def get_llm_client(api_key: str | None = None, settings: LLMSettings | None = None) -> LLMClient:
    """Build the client for one chat request.

    ``api_key`` is the user's own key from their preferences and takes
    precedence over ``LLM__API_KEY``. Demo keys get a canned answer.
    """
    settings = settings or get_settings().llm
    provider = settings.provider
    key = api_key or settings.api_key

    if provider == "mock" or is_demo_key(key):
        return MockLLMClient(fixed_response=DEMO_RESPONSE)

    if provider == "gemini":
        if not key:
            raise ConfigurationError("Gemini API key not set in preferences or LLM__API_KEY")
        if not key.startswith(GEMINI_KEY_PREFIX):
            raise ConfigurationError(
                f'Invalid API key format. Gemini API keys start with "{GEMINI_KEY_PREFIX}".'
            )
        return _gemini_client(key, settings.model, settings.timeout_seconds)

    if provider in _BASE_URLS:
        if provider == "openai" and not key:
            raise ConfigurationError("LLM__API_KEY is required for provider=openai")
        return OpenAICompatibleClient(
            base_url=settings.base_url or _BASE_URLS[provider],
            model=settings.model,
            api_key=key or "dummy",
            timeout=settings.timeout_seconds,
        )

    raise ConfigurationError(f"Unknown LLM provider: {provider}")
