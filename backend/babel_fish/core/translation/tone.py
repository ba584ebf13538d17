"""Tone presets and validation of free-text custom tones.

A custom tone is interpolated into the translation prompt, so it is checked
for length, prompt-injection phrases and template markers before it is ever
sent to the model.
"""

import re
from enum import Enum
from typing import Optional

from .models.result import ToneValidationError, ToneValidationResult

MAX_TONE_LENGTH = 100
MAX_SPECIAL_CHAR_RATIO = 0.2


class Tone(str, Enum):
    """Tones offered by the tone picker."""

    HAPPY = "happy"
    FORMAL = "formal"
    CASUAL = "casual"
    ANGRY = "angry"
    PLAYFUL = "playful"
    SAD = "sad"
    CUSTOM = "custom"


INJECTION_PATTERNS = [
    # Instruction override phrases
    re.compile(r"ignore\s+(all\s+)?previous", re.IGNORECASE),
    re.compile(r"ignore\s+(all\s+)?instructions", re.IGNORECASE),
    re.compile(r"disregard\s+(all\s+)?previous", re.IGNORECASE),
    re.compile(r"instead[\s,]+output", re.IGNORECASE),
    re.compile(r"return\s+only", re.IGNORECASE),
    re.compile(r"override", re.IGNORECASE),
    re.compile(r"bypass", re.IGNORECASE),
    re.compile(r"jailbreak", re.IGNORECASE),
    # Structural markers
    re.compile(r"```"),
    re.compile(r"</?[a-z]+>", re.IGNORECASE),
    re.compile(r"\[\["),
    re.compile(r"\]\]"),
    re.compile(r"\$\{"),
    re.compile(r"\{\{"),
    re.compile(r"\}\}"),
]

_SPECIAL_CHAR = re.compile(r"[^a-zA-Z0-9\s]")


def has_injection_pattern(text: str) -> bool:
    return any(pattern.search(text) for pattern in INJECTION_PATTERNS)


def has_excessive_special_characters(text: str) -> bool:
    if not text:
        return False
    special = _SPECIAL_CHAR.findall(text)
    return len(special) / len(text) > MAX_SPECIAL_CHAR_RATIO


def _invalid(reason: ToneValidationError, error: str) -> ToneValidationResult:
    return ToneValidationResult(is_valid=False, reason=reason, error=error)


def validate_tone(tone: str) -> ToneValidationResult:
    """Validate a free-text tone.

    Checks run in order and the first failure is reported:
    empty, too long, injection pattern, too many special characters.
    """
    if not tone.strip():
        return _invalid(ToneValidationError.EMPTY, "Tone cannot be empty")

    if len(tone) > MAX_TONE_LENGTH:
        return _invalid(
            ToneValidationError.TOO_LONG,
            f"Tone must be {MAX_TONE_LENGTH} characters or less",
        )

    if has_injection_pattern(tone):
        return _invalid(
            ToneValidationError.INJECTION,
            "Invalid tone: contains restricted patterns",
        )

    if has_excessive_special_characters(tone):
        return _invalid(ToneValidationError.SPECIAL_CHARS, "Too many special characters")

    return ToneValidationResult(is_valid=True)


def resolve_tone(selected: Optional[Tone], custom_text: str = "") -> Optional[str]:
    """Tone string to put in the prompt for a picker selection.

    A custom selection with blank text means no tone at all.
    """
    if selected is None:
        return None
    if selected == Tone.CUSTOM:
        return custom_text.strip() or None
    return selected.value
