"""Single-message translation with bounded retry."""

import logging
from typing import Optional

from tenacity import AsyncRetrying, RetryCallState, stop_after_attempt, wait_fixed

from babel_fish.config import settings

from ..languages import language_name
from ..models.result import TranslationResult
from .llm_gateway import LLMGateway
from .output_processor import parse_single
from .prompt_engine import PromptEngine, build_single_message_prompt

logger = logging.getLogger(__name__)


async def translate(
    gateway: LLMGateway,
    text: str,
    target_language_code: str,
    tone: Optional[str] = None,
    source_language_code: Optional[str] = None,
) -> TranslationResult:
    """Translate one message, optionally rewriting it in a tone first.

    Raises:
        Exception: Transport failure from the gateway
        ParseError: If the reply does not have the expected shape
    """
    prompt = build_single_message_prompt(
        text,
        language_name(target_language_code),
        tone=tone,
        source_language_name=language_name(source_language_code or settings.agent_language),
    )
    response = await gateway.call(PromptEngine.bundle(prompt, purpose="translate"))
    return parse_single(response.content, expect_json=bool(tone))


async def translate_with_retry(
    gateway: LLMGateway,
    text: str,
    target_language_code: str,
    tone: Optional[str] = None,
    max_retries: Optional[int] = None,
    retry_delay: Optional[float] = None,
    source_language_code: Optional[str] = None,
) -> TranslationResult:
    """Translate one message, retrying a small fixed number of times.

    Args:
        gateway: LLM gateway
        text: Message text
        target_language_code: Registry code of the target language
        tone: Optional tone to apply before translating
        max_retries: Attempt ceiling (default ``settings.translation_max_retries``)
        retry_delay: Seconds between attempts (default ``settings.translation_retry_delay``)
        source_language_code: Language the toned rewrite is written in

    Returns:
        TranslationResult from the first successful attempt

    Raises:
        Exception: The last attempt's error once all attempts have failed
    """
    attempts = max_retries if max_retries is not None else settings.translation_max_retries
    delay = retry_delay if retry_delay is not None else settings.translation_retry_delay

    def log_failure(retry_state: RetryCallState) -> None:
        logger.warning(
            "Translation attempt %d/%d failed: %s",
            retry_state.attempt_number,
            attempts,
            retry_state.outcome.exception(),
        )

    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max(1, attempts)),
        wait=wait_fixed(delay),
        after=log_failure,
        reraise=True,
    ):
        with attempt:
            return await translate(
                gateway,
                text,
                target_language_code,
                tone=tone,
                source_language_code=source_language_code,
            )

    raise RuntimeError("Translation failed after retries")
