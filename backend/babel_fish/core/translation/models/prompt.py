"""Prompt bundle models.

This module defines the prompt data structures that are passed to the LLM
gateway.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class Message(BaseModel):
    """Single message in LLM conversation."""

    role: str = Field(
        ..., description="Message role: 'system', 'user', or 'assistant'"
    )
    content: str = Field(..., description="Message content")


class PromptBundle(BaseModel):
    """Complete prompt package ready for LLM.

    This is the output of the PromptEngine and input to LLMGateway.
    Generation parameters are left unset by default so the endpoint's own
    defaults apply; the request then carries only the model and messages.
    """

    messages: List[Message] = Field(..., description="Conversation messages")

    temperature: Optional[float] = Field(
        default=None, ge=0.0, le=2.0, description="Sampling temperature"
    )
    max_tokens: Optional[int] = Field(
        default=None, gt=0, description="Maximum tokens in response"
    )

    # Metadata for logging and debugging
    purpose: str = Field(
        default="translate",
        description="What the prompt is for: translate, batch or cleanup",
    )

    @property
    def user_prompt(self) -> Optional[str]:
        """Extract user prompt from messages."""
        for msg in self.messages:
            if msg.role == "user":
                return msg.content
        return None

    def to_openai_format(self) -> List[Dict[str, str]]:
        """Convert to OpenAI API message format.

        Returns:
            List of message dicts with 'role' and 'content' keys
        """
        return [{"role": m.role, "content": m.content} for m in self.messages]

    def generation_kwargs(self) -> Dict[str, Any]:
        """Generation parameters that were explicitly set."""
        kwargs: Dict[str, Any] = {}
        if self.temperature is not None:
            kwargs["temperature"] = self.temperature
        if self.max_tokens is not None:
            kwargs["max_tokens"] = self.max_tokens
        return kwargs
