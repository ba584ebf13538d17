from __future__ import annotations

from typing import List, Union

import pytest

from babel_fish.config import settings
from babel_fish.core.translation.models import LLMResponse, PromptBundle
from babel_fish.core.translation.pipeline.llm_gateway import LLMGateway


class FakeHTTPError(Exception):
    """Stands in for a provider error carrying an HTTP status."""

    def __init__(self, status_code: int) -> None:
        super().__init__(f"HTTP {status_code}")
        self.status_code = status_code


Reply = Union[str, Exception]


class ScriptedGateway(LLMGateway):
    """Gateway that answers from a script and records every prompt."""

    def __init__(self, replies: List[Reply]) -> None:
        self._replies = list(replies)
        self.prompts: List[str] = []

    @property
    def provider(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    async def call(self, bundle: PromptBundle) -> LLMResponse:
        self.prompts.append(bundle.user_prompt or "")
        if not self._replies:
            raise AssertionError("ScriptedGateway ran out of replies")
        reply = self._replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return LLMResponse(content=reply, provider=self.provider, model=self.model)


@pytest.fixture(autouse=True)
def no_delays(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(settings, "translation_retry_delay", 0.0)
    monkeypatch.setattr(settings, "batch_round_delay", 0.0)
