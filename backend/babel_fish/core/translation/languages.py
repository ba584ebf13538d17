"""Registry of supported chat languages."""

import logging
from typing import Dict

logger = logging.getLogger(__name__)

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "zh": "Chinese",
    "th": "Thai",
    "vi": "Vietnamese",
    "ja": "Japanese",
    "ko": "Korean",
    "hu": "Hungarian",
    "ru": "Russian",
    "tl": "Tagalog",
}


def is_supported(code: str) -> bool:
    return code in LANGUAGE_NAMES


def language_name(code: str) -> str:
    """Display name for a language code.

    Unknown codes are returned unchanged so the model still gets a usable
    hint instead of an error.
    """
    if not is_supported(code):
        logger.warning("Unknown language code %r, using it as the language name", code)
        return code
    return LANGUAGE_NAMES[code]
