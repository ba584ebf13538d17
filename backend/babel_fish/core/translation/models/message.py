"""Batch translation data models.

Messages are correlated with model output by position only. The ``id`` of a
PendingMessage is supplied by the caller and is never generated or changed
here.
"""

from typing import Dict, List

from pydantic import BaseModel, Field, computed_field


class PendingMessage(BaseModel):
    """A chat message still waiting for its translation."""

    id: str = Field(..., description="Opaque, caller-supplied message identity")
    text: str = Field(..., description="Text in the source language")


class ParsedBatchResponse(BaseModel):
    """Validated shape of a batch reply.

    Both arrays hold strings only; position i answers message i of the group
    that was sent in the same round.
    """

    to_customer_language: List[str] = Field(default_factory=list)
    to_agent_language: List[str] = Field(default_factory=list)


class BatchOutcome(BaseModel):
    """Terminal result of one batch translation call."""

    to_customer_language: Dict[str, str] = Field(
        default_factory=dict, description="Resolved agent messages, id -> text"
    )
    to_agent_language: Dict[str, str] = Field(
        default_factory=dict, description="Resolved customer messages, id -> text"
    )
    failed_ids: List[str] = Field(
        default_factory=list, description="Ids never resolved, customer group first"
    )
    is_rate_limited: bool = Field(
        default=False, description="Whether the last round got HTTP 429"
    )

    @computed_field
    @property
    def resolved(self) -> Dict[str, str]:
        """Both groups merged by id."""
        return {**self.to_customer_language, **self.to_agent_language}

    @property
    def failed_count(self) -> int:
        return len(self.failed_ids)
