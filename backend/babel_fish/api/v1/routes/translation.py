"""Translation API routes."""

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from babel_fish.api.dependencies import Gateway
from babel_fish.config import settings
from babel_fish.core.translation.languages import LANGUAGE_NAMES
from babel_fish.core.translation.models import BatchOutcome, PendingMessage, TranslationResult
from babel_fish.core.translation.orchestrator import batch_translate
from babel_fish.core.translation.pipeline.translator import translate_with_retry
from babel_fish.core.translation.tone import validate_tone

logger = logging.getLogger(__name__)

router = APIRouter()


class TranslateRequest(BaseModel):
    """Request to translate one message."""
    text: str = Field(..., min_length=1)
    target_language: str
    tone: Optional[str] = None
    source_language: Optional[str] = None


class BatchTranslateRequest(BaseModel):
    """Request to translate pending messages in both directions."""
    to_customer: List[PendingMessage] = Field(default_factory=list)
    to_agent: List[PendingMessage] = Field(default_factory=list)
    customer_language: str
    agent_language: Optional[str] = None  # Defaults to settings.agent_language


class LanguageInfo(BaseModel):
    code: str
    name: str


@router.get("/languages", response_model=List[LanguageInfo])
async def list_languages() -> List[LanguageInfo]:
    """Supported chat languages."""
    return [LanguageInfo(code=code, name=name) for code, name in LANGUAGE_NAMES.items()]


@router.post("/translation/translate", response_model=TranslationResult)
async def translate_message(request: TranslateRequest, gateway: Gateway) -> TranslationResult:
    """Translate one message, applying a tone first if one is given."""
    tone = request.tone.strip() if request.tone else None
    if tone:
        validation = validate_tone(tone)
        if not validation.is_valid:
            raise HTTPException(status_code=400, detail=validation.error)

    try:
        return await translate_with_retry(
            gateway,
            request.text,
            request.target_language,
            tone=tone,
            source_language_code=request.source_language,
        )
    except Exception as e:
        logger.error("Translation failed after retries: %s", e)
        raise HTTPException(status_code=502, detail="Translation failed") from e


@router.post("/translation/batch", response_model=BatchOutcome)
async def translate_batch(request: BatchTranslateRequest, gateway: Gateway) -> BatchOutcome:
    """Batch translate pending messages.

    Always answers 200; unresolved messages are listed in ``failed_ids`` and
    ``is_rate_limited`` tells the client to wait before retrying.
    """
    return await batch_translate(
        gateway,
        request.to_customer,
        request.to_agent,
        request.customer_language,
        request.agent_language or settings.agent_language,
    )
