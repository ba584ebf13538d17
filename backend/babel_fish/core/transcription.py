"""Voice transcription cleanup.

Speech-to-text output is run through the LLM once to drop filler words and
fix punctuation. Cleanup is best effort: if it fails, the raw transcription
is used and a warning is attached for the UI.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

from babel_fish.core.translation.pipeline.llm_gateway import LLMGateway
from babel_fish.core.translation.pipeline.output_processor import ParseError, parse_single
from babel_fish.core.translation.pipeline.prompt_engine import (
    PromptEngine,
    build_cleanup_prompt,
)

logger = logging.getLogger(__name__)

CLEANUP_FAILED_WARNING = "cleanup failed, using raw transcription"


class TranscriptionCleanup(BaseModel):
    """Cleaned transcription alongside the raw one."""

    raw_text: str = Field(..., description="Transcription as recognized")
    cleaned_text: str = Field(..., description="Transcription after cleanup")
    warning: Optional[str] = Field(
        default=None, description="Set when cleanup failed and raw text is used"
    )


async def cleanup_transcription(gateway: LLMGateway, raw_text: str) -> TranscriptionCleanup:
    """Clean up a voice transcription.

    Raises:
        ValueError: If the transcription is blank
    """
    raw_text = raw_text.strip()
    if not raw_text:
        raise ValueError("No speech detected")

    result = await gateway.execute(
        PromptEngine.bundle(build_cleanup_prompt(raw_text), purpose="cleanup")
    )
    if result.text is not None:
        try:
            cleaned = parse_single(result.text, expect_json=False).translation
            return TranscriptionCleanup(raw_text=raw_text, cleaned_text=cleaned)
        except ParseError as e:
            logger.warning("Transcription cleanup returned no text: %s", e)

    logger.warning("Transcription cleanup failed (status=%s), using raw text", result.status)
    return TranscriptionCleanup(
        raw_text=raw_text, cleaned_text=raw_text, warning=CLEANUP_FAILED_WARNING
    )
