"""Output processor for model replies.

This module turns the model's free-text replies into structured results.
Replies are often wrapped in markdown code fences and are not always valid
JSON, so both parsers strip fences first. The single-message parser raises
ParseError so callers can retry; the batch parser returns None so the
orchestrator can count the round as zero progress.
"""

import json
import logging
import re
from typing import Any, List, Optional

from babel_fish.utils.text import normalize_for_log

from ..models.message import ParsedBatchResponse
from ..models.result import TranslationResult
from .prompt_engine import AGENT_FIELD, CUSTOMER_FIELD

logger = logging.getLogger(__name__)

# ```json ... ``` or ``` ... ```, anywhere in the reply
CODE_FENCE_PATTERN = re.compile(r"```[\w-]*\s*(.*?)```", re.DOTALL)


class ParseError(ValueError):
    """Raised when a single-message reply does not have the expected shape."""


def strip_code_fence(text: str) -> str:
    """Return the fenced content if the reply contains a code fence."""
    match = CODE_FENCE_PATTERN.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def extract_string_array(value: Any) -> List[str]:
    """Keep only the string elements of a JSON array."""
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def parse_single(response_text: str, expect_json: bool) -> TranslationResult:
    """Parse a single-message reply.

    Args:
        response_text: Raw reply content
        expect_json: True when the prompt asked for the tone JSON object

    Returns:
        TranslationResult

    Raises:
        ParseError: If the reply is empty, not valid JSON, or lacks a string
            ``translation`` field
    """
    if not expect_json:
        translation = response_text.strip()
        if not translation:
            raise ParseError("Empty translation in model reply")
        return TranslationResult(translation=translation)

    try:
        parsed = json.loads(strip_code_fence(response_text))
    except (ValueError, RecursionError) as e:
        raise ParseError(f"Model reply is not valid JSON: {e}") from e

    if not isinstance(parsed, dict):
        raise ParseError("Model reply is not a JSON object")

    translation = parsed.get("translation")
    if not isinstance(translation, str) or not translation.strip():
        raise ParseError("Model reply is missing the 'translation' field")

    toned_original = parsed.get("tonedOriginal")
    if not isinstance(toned_original, str):
        toned_original = None

    return TranslationResult(translation=translation, toned_original=toned_original)


def parse_batch(response_text: str) -> Optional[ParsedBatchResponse]:
    """Parse a batch reply into the two translation arrays.

    Returns None when the reply is not JSON or is not an object carrying at
    least one of the two expected fields. Non-string array entries are
    dropped, which shortens the array; missing positions stay unresolved.
    """
    try:
        parsed = json.loads(strip_code_fence(response_text))
    except (ValueError, RecursionError):
        logger.error(
            "[Batch] Failed to parse batch response: %s",
            normalize_for_log(response_text),
        )
        return None

    if not isinstance(parsed, dict) or not (
        CUSTOMER_FIELD in parsed or AGENT_FIELD in parsed
    ):
        logger.error(
            "[Batch] Unexpected batch response structure: %s",
            normalize_for_log(response_text),
        )
        return None

    return ParsedBatchResponse(
        to_customer_language=extract_string_array(parsed.get(CUSTOMER_FIELD)),
        to_agent_language=extract_string_array(parsed.get(AGENT_FIELD)),
    )
