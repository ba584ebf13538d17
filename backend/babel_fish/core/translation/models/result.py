"""Translation and validation result models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TranslationResult(BaseModel):
    """Output of a single-message translation."""

    translation: str = Field(..., description="Text in the target language")
    toned_original: Optional[str] = Field(
        default=None,
        description="Original rewritten in the requested tone (tone requests only)",
    )


class ToneValidationError(str, Enum):
    """Reasons a custom tone is rejected."""

    EMPTY = "empty"
    TOO_LONG = "too-long"
    INJECTION = "injection"
    SPECIAL_CHARS = "special-chars"


class ToneValidationResult(BaseModel):
    """Result of validating a free-text tone."""

    is_valid: bool
    reason: Optional[ToneValidationError] = None
    error: Optional[str] = Field(
        default=None, description="Human-readable message for the UI"
    )
