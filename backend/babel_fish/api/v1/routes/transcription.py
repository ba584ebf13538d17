"""Voice transcription API routes."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from babel_fish.api.dependencies import Gateway
from babel_fish.core.transcription import TranscriptionCleanup, cleanup_transcription

router = APIRouter()


class CleanupRequest(BaseModel):
    raw_text: str


@router.post("/transcription/cleanup", response_model=TranscriptionCleanup)
async def cleanup(request: CleanupRequest, gateway: Gateway) -> TranscriptionCleanup:
    """Clean up speech-to-text output, falling back to the raw text."""
    try:
        return await cleanup_transcription(gateway, request.raw_text)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
