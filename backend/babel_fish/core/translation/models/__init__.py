"""Translation data models.

This module provides structured data models for the translation pipeline,
ensuring type safety and clear contracts between components.
"""

from .message import BatchOutcome, ParsedBatchResponse, PendingMessage
from .prompt import Message, PromptBundle
from .response import (
    HTTP_OK,
    HTTP_TOO_MANY_REQUESTS,
    TRANSPORT_ERROR_STATUS,
    LLMResponse,
    TokenUsage,
    TransportResult,
)
from .result import ToneValidationError, ToneValidationResult, TranslationResult

__all__ = [
    # Batch models
    "PendingMessage",
    "ParsedBatchResponse",
    "BatchOutcome",
    # Prompt models
    "Message",
    "PromptBundle",
    # Response models
    "HTTP_OK",
    "HTTP_TOO_MANY_REQUESTS",
    "TRANSPORT_ERROR_STATUS",
    "TokenUsage",
    "LLMResponse",
    "TransportResult",
    # Result models
    "TranslationResult",
    "ToneValidationError",
    "ToneValidationResult",
]
