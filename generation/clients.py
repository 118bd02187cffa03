"""Generation backends: send a prompt, get model text back."""
from typing import Optional, Protocol

from anthropic import (
    AsyncAnthropic,
    APIError as AnthropicAPIError,
    APIConnectionError,
    APITimeoutError,
    InternalServerError,
    RateLimitError,
)
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from utils.logger import setup_logger
import config

logger = setup_logger(__name__)

RETRYABLE_STATUS_CODES = {408, 429, 500, 502, 503, 504, 529}


class TransportError(Exception):
    """Raised when a generation backend call fails."""

    def __init__(self, message: str, retryable: bool = False):
        super().__init__(message)
        self.retryable = retryable


class ConfigurationError(Exception):
    """Raised when the pipeline is wired up with unusable settings or definitions."""
    pass


class Generator(Protocol):
    """Anything that turns a prompt into model text."""

    async def __call__(self, prompt: str) -> str:
        ...


class AnthropicGenerator:
    """Claude via the Anthropic Messages API."""

    def __init__(
        self,
        client: AsyncAnthropic,
        model: str = config.ANTHROPIC_MODEL,
        max_tokens: int = config.MAX_OUTPUT_TOKENS,
        temperature: float = config.LLM_TEMPERATURE
    ):
        self.client = client
        self.model = model
        self.max_tokens = max_tokens
        self.temperature = temperature
        self.total_tokens_used = 0

        logger.info(f"AnthropicGenerator initialized with model: {model}")

    async def __call__(self, prompt: str) -> str:
        try:
            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=self.temperature,
                messages=[{"role": "user", "content": prompt}]
            )
        except (RateLimitError, APIConnectionError, APITimeoutError, InternalServerError) as e:
            raise TransportError(f"Anthropic call failed: {e}", retryable=True) from e
        except AnthropicAPIError as e:
            status = getattr(e, "status_code", None)
            raise TransportError(
                f"Anthropic call failed: {e}",
                retryable=status in RETRYABLE_STATUS_CODES
            ) from e

        self.total_tokens_used += message.usage.input_tokens + message.usage.output_tokens
        return "".join(block.text for block in message.content if getattr(block, "type", "") == "text")


class GeminiGenerator:
    """Gemini via the google-genai SDK."""

    def __init__(
        self,
        client: genai.Client,
        model: str = config.GEMINI_MODEL,
        max_tokens: int = config.MAX_OUTPUT_TOKENS,
        temperature: float = config.LLM_TEMPERATURE
    ):
        self.client = client
        self.model = model
        self.generation_config = types.GenerateContentConfig(
            temperature=temperature,
            max_output_tokens=max_tokens,
        )
        self.total_tokens_used = 0

        logger.info(f"GeminiGenerator initialized with model: {model}")

    async def __call__(self, prompt: str) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config=self.generation_config,
            )
        except genai_errors.APIError as e:
            raise TransportError(
                f"Gemini call failed: {e}",
                retryable=isinstance(e, genai_errors.ServerError) or e.code in RETRYABLE_STATUS_CODES
            ) from e

        usage = getattr(response, "usage_metadata", None)
        if usage is not None and usage.total_token_count:
            self.total_tokens_used += usage.total_token_count

        if response.text is None:
            raise TransportError("Gemini returned no text (blocked or empty candidate)")
        return response.text


_generator: Optional[Generator] = None


def build_generator(backend: str = config.GENERATION_BACKEND) -> Generator:
    """Construct a backend from config. Raises ConfigurationError on missing keys."""
    if backend == "anthropic":
        if not config.ANTHROPIC_API_KEY:
            raise ConfigurationError("ANTHROPIC_API_KEY is not set")
        return AnthropicGenerator(AsyncAnthropic(api_key=config.ANTHROPIC_API_KEY))

    if backend == "gemini":
        if not config.GEMINI_API_KEY:
            raise ConfigurationError("GEMINI_API_KEY is not set")
        return GeminiGenerator(genai.Client(api_key=config.GEMINI_API_KEY))

    raise ConfigurationError(f"Unknown generation backend: {backend!r}")


def get_generator() -> Generator:
    """Process-wide generator, built on first use and shared read-only afterwards."""
    global _generator
    if _generator is None:
        _generator = build_generator()
    return _generator
