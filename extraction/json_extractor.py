"""Recovery of a single JSON object from free-form model text.

Models are asked for "ONLY JSON" but routinely wrap it in markdown fences or
add a sentence before or after. Recovery is a heuristic, not a parser:

1. drop a case-insensitive ```json opener and every bare ``` fence,
2. take the greedy block from the first "{" to the last "}",
3. json-parse that block.

Known limits: two top-level objects in one response are glued together by
the greedy match and fail to parse; a truncated response has no closing
brace; stray braces in prose after the object widen the block. All of these
come back as NOT_FOUND so the caller falls back.
"""
import json
import re
from typing import Any

from utils.logger import setup_logger, truncate

logger = setup_logger(__name__)

FENCE_OPENER = re.compile(r"```json", re.IGNORECASE)
FENCE = re.compile(r"```")
OBJECT_BLOCK = re.compile(r"\{[\s\S]*\}")


class _NotFound:
    """Sentinel for "no JSON object could be recovered"."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NOT_FOUND"


NOT_FOUND = _NotFound()


def strip_fences(raw: str) -> str:
    """Remove markdown code fences and surrounding whitespace."""
    cleaned = FENCE_OPENER.sub("", raw, count=1)
    cleaned = FENCE.sub("", cleaned)
    return cleaned.strip()


def extract_json(raw: str) -> Any:
    """Recover the JSON object embedded in raw model output.

    Args:
        raw: Response text from a generation call

    Returns:
        The parsed value, or NOT_FOUND if no brace block exists or it does
        not parse
    """
    if not isinstance(raw, str):
        logger.warning(f"Expected model text, got {type(raw).__name__}")
        return NOT_FOUND

    match = OBJECT_BLOCK.search(strip_fences(raw))
    if not match:
        logger.debug(f"No JSON object in model output: {truncate(raw)}")
        return NOT_FOUND

    try:
        return json.loads(match.group(0))
    except (ValueError, RecursionError) as e:
        logger.debug(f"JSON block did not parse ({e}): {truncate(match.group(0))}")
        return NOT_FOUND
