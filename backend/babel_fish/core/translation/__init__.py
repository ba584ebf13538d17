"""Translation package.

Architecture:
- models/: Data models (PendingMessage, BatchOutcome, PromptBundle, ...)
- pipeline/: Prompt building, LLM gateway, reply parsing, single-message translation
- orchestrator.py: Multi-round batch translation
- tone.py: Tone presets and custom tone validation
- languages.py: Supported language registry
"""

from .languages import LANGUAGE_NAMES, language_name
from .models import (
    BatchOutcome,
    PendingMessage,
    PromptBundle,
    ToneValidationError,
    ToneValidationResult,
    TranslationResult,
    TransportResult,
)
from .orchestrator import BatchTranslationOrchestrator, batch_translate
from .pipeline import (
    GatewayFactory,
    LLMGateway,
    ParseError,
    translate,
    translate_with_retry,
)
from .tone import Tone, validate_tone

__all__ = [
    "LANGUAGE_NAMES",
    "language_name",
    "BatchOutcome",
    "PendingMessage",
    "PromptBundle",
    "ToneValidationError",
    "ToneValidationResult",
    "TranslationResult",
    "TransportResult",
    "BatchTranslationOrchestrator",
    "batch_translate",
    "GatewayFactory",
    "LLMGateway",
    "ParseError",
    "translate",
    "translate_with_retry",
    "Tone",
    "validate_tone",
]
