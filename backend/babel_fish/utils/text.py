"""Text utilities for logging prompts and model replies.

Model replies can be long and may contain control characters; these helpers
keep log lines readable without breaking multi-byte characters.
"""

import re
from typing import Optional

_BREAK_CHARS = {" ", "\n", "\t", ",", ".", "!", "?", ";", ":", "-", "。", "，", "、"}


def safe_truncate(text: str, max_chars: int, suffix: str = "...") -> str:
    """Truncate text, preferring a word boundary near the cut.

    Args:
        text: Text to truncate
        max_chars: Maximum characters (excluding suffix)
        suffix: Suffix to append if truncated (default "...")

    Returns:
        Truncated text with suffix if needed
    """
    if not text or len(text) <= max_chars:
        return text

    truncated = text[:max_chars]

    # Look back up to 20 characters for a good break point
    for i in range(min(20, max_chars - 1), 0, -1):
        if truncated[-i] in _BREAK_CHARS:
            truncated = truncated[: len(truncated) - i + 1].rstrip()
            break

    return truncated + suffix


def normalize_for_log(text: Optional[str], max_length: Optional[int] = 300) -> str:
    """Normalize text for a single log line.

    Removes control characters, collapses whitespace runs (newlines included)
    and optionally truncates to max_length.
    """
    if not text:
        return ""

    text = re.sub(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]", "", text)
    text = re.sub(r"\s+", " ", text)

    if max_length:
        text = safe_truncate(text, max_length)

    return text.strip()
