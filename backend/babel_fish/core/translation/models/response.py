"""LLM response models.

This module defines the response data structures from the LLM gateway,
providing a provider-agnostic representation.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

HTTP_OK = 200
HTTP_TOO_MANY_REQUESTS = 429
TRANSPORT_ERROR_STATUS = 0


class TokenUsage(BaseModel):
    """Token consumption details."""

    prompt_tokens: int = Field(default=0, description="Tokens in the prompt")
    completion_tokens: int = Field(default=0, description="Tokens in the completion")
    total_tokens: int = Field(default=0, description="Total tokens used")


class LLMResponse(BaseModel):
    """Raw response from LLM provider."""

    content: str = Field(..., description="Response content from LLM")

    # Provider info
    provider: str = Field(..., description="LLM provider name")
    model: str = Field(..., description="Model identifier used")

    usage: TokenUsage = Field(
        default_factory=TokenUsage, description="Token usage details"
    )

    # Timing
    latency_ms: int = Field(default=0, description="Response latency in milliseconds")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Response timestamp",
    )


class TransportResult(BaseModel):
    """Outcome of one transport call that never raises.

    ``text`` is None when the call failed or the reply had no content.
    ``status`` is the HTTP status code, 200 on success, or 0 when the
    endpoint could not be reached at all (including timeouts).
    """

    text: Optional[str] = Field(default=None, description="Reply content, if any")
    status: int = Field(default=HTTP_OK, description="HTTP status of the attempt")
