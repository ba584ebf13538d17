"""Tone API routes."""

from typing import List

from fastapi import APIRouter
from pydantic import BaseModel

from babel_fish.core.translation.models import ToneValidationResult
from babel_fish.core.translation.tone import Tone, validate_tone

router = APIRouter()


class ToneRequest(BaseModel):
    tone: str


@router.get("/tone/presets", response_model=List[Tone])
async def list_tone_presets() -> List[Tone]:
    """Preset tones, without the custom option."""
    return [tone for tone in Tone if tone != Tone.CUSTOM]


@router.post("/tone/validate", response_model=ToneValidationResult)
async def validate_custom_tone(request: ToneRequest) -> ToneValidationResult:
    """Validate free-text tone as the user types it."""
    return validate_tone(request.tone)
