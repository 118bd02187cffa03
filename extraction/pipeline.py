"""Prompt -> model text -> JSON -> validated result, with a static fallback.

Each call is independent and holds no state, so any number of them can run
concurrently and a caller that retries or replays them sees the same result
for the same model text. Retries belong to whatever wraps `caller`; a
failure here is logged and converted to the fallback, never raised.
"""
import inspect
from typing import Any, Awaitable, Callable, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from extraction.json_extractor import extract_json, NOT_FOUND
from extraction.validation import validate, SchemaValidationError
from utils.logger import setup_logger, truncate

logger = setup_logger(__name__)

T = TypeVar("T", bound=BaseModel)

Caller = Callable[[str], Union[str, Awaitable[str]]]

TRANSPORT_FAILURE = "transport"
EXTRACTION_FAILURE = "extraction"
VALIDATION_FAILURE = "validation"


class PipelineOutcome(BaseModel):
    """Result of one pipeline run and, if it degraded, why."""
    value: Any
    failure: Optional[str] = None  # transport | extraction | validation
    detail: str = ""

    @property
    def used_fallback(self) -> bool:
        return self.failure is not None


async def run_pipeline(
    prompt: str,
    schema: Type[T],
    fallback: T,
    caller: Caller,
    name: str = "generation",
) -> PipelineOutcome:
    """Run one generation and report whether the fallback was used.

    Args:
        prompt: Prompt text for the generation backend
        schema: Output schema the result must satisfy
        fallback: Schema-conformant value returned on any failure
        caller: Sends a prompt, returns raw model text (sync or async)
        name: Label used in log lines

    Returns:
        PipelineOutcome whose value is always a `schema` instance
    """
    def _fallback(failure: str, detail: str) -> PipelineOutcome:
        return PipelineOutcome(
            value=fallback.model_copy(deep=True),
            failure=failure,
            detail=detail,
        )

    try:
        raw = caller(prompt)
        if inspect.isawaitable(raw):
            raw = await raw
    except Exception as e:
        logger.error(f"[{name}] generation call failed: {e}. Using fallback.")
        return _fallback(TRANSPORT_FAILURE, str(e))

    parsed = extract_json(raw)
    if parsed is NOT_FOUND:
        logger.error(f"[{name}] no JSON object recovered. Using fallback. Raw: {truncate(raw)}")
        return _fallback(EXTRACTION_FAILURE, "no JSON object in response")

    try:
        result = validate(parsed, schema)
    except SchemaValidationError as e:
        logger.error(
            f"[{name}] response failed {schema.__name__} validation at '{e.field}': "
            f"{e.expectation}. Using fallback. Raw: {truncate(raw)}"
        )
        return _fallback(VALIDATION_FAILURE, str(e))

    logger.info(f"[{name}] validated {schema.__name__}")
    return PipelineOutcome(value=result)


async def generate_with_fallback(
    prompt: str,
    schema: Type[T],
    fallback: T,
    caller: Caller,
    name: str = "generation",
) -> T:
    """Generate a schema-conformant value, or return `fallback` on any failure."""
    outcome = await run_pipeline(prompt, schema, fallback, caller, name=name)
    return outcome.value
