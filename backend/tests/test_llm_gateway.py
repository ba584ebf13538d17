from __future__ import annotations

from types import SimpleNamespace
from typing import Any, Dict, List

import litellm
import pytest

from babel_fish.core.translation.pipeline import llm_gateway
from babel_fish.core.translation.pipeline.llm_gateway import GatewayFactory, LiteLLMGateway
from babel_fish.core.translation.pipeline.prompt_engine import PromptEngine


def completion(content: Any) -> SimpleNamespace:
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))],
        usage=SimpleNamespace(prompt_tokens=3, completion_tokens=2, total_tokens=5),
    )


class FakeCompletion:
    """Replacement for litellm.acompletion answering from a script."""

    def __init__(self) -> None:
        self.replies: List[Any] = []
        self.calls: List[Dict[str, Any]] = []

    async def __call__(self, **kwargs: Any) -> Any:
        self.calls.append(kwargs)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_completion(monkeypatch: pytest.MonkeyPatch) -> FakeCompletion:
    fake = FakeCompletion()
    monkeypatch.setattr(llm_gateway, "acompletion", fake)
    return fake


def make_gateway() -> LiteLLMGateway:
    return LiteLLMGateway(
        api_key="lm-studio",
        model="openai/gpt-oss-20b",
        base_url="http://localhost:1234/v1",
        provider_name="lmstudio",
        timeout=30,
    )


@pytest.mark.asyncio
async def test_call_sends_model_and_single_user_message(fake_completion: FakeCompletion) -> None:
    fake_completion.replies.append(completion("你好"))

    response = await make_gateway().call(PromptEngine.bundle("Translate"))

    assert response.content == "你好"
    assert response.usage.total_tokens == 5
    sent = fake_completion.calls[0]
    assert sent["model"] == "lm_studio/openai/gpt-oss-20b"
    assert sent["messages"] == [{"role": "user", "content": "Translate"}]
    assert sent["api_base"] == "http://localhost:1234/v1"
    assert sent["timeout"] == 30
    assert "temperature" not in sent


@pytest.mark.asyncio
async def test_execute_success(fake_completion: FakeCompletion) -> None:
    fake_completion.replies.append(completion("ok"))

    result = await make_gateway().execute(PromptEngine.bundle("x"))

    assert result.text == "ok"
    assert result.status == 200


@pytest.mark.asyncio
async def test_execute_empty_content_has_no_text(fake_completion: FakeCompletion) -> None:
    fake_completion.replies.append(completion(None))

    result = await make_gateway().execute(PromptEngine.bundle("x"))

    assert result.text is None
    assert result.status == 200


@pytest.mark.asyncio
async def test_execute_reports_rate_limit(fake_completion: FakeCompletion) -> None:
    fake_completion.replies.append(
        litellm.exceptions.RateLimitError(
            message="slow down", llm_provider="openai", model="gpt-oss-20b"
        )
    )

    result = await make_gateway().execute(PromptEngine.bundle("x"))

    assert result.text is None
    assert result.status == 429


@pytest.mark.asyncio
async def test_execute_connection_failure_is_status_zero(fake_completion: FakeCompletion) -> None:
    fake_completion.replies.append(
        litellm.exceptions.APIConnectionError(
            message="refused", llm_provider="openai", model="gpt-oss-20b"
        )
    )

    result = await make_gateway().execute(PromptEngine.bundle("x"))

    assert result.status == 0


@pytest.mark.asyncio
async def test_execute_unknown_error_is_status_zero(fake_completion: FakeCompletion) -> None:
    fake_completion.replies.append(RuntimeError("boom"))

    result = await make_gateway().execute(PromptEngine.bundle("x"))

    assert result.status == 0


def test_factory_uses_provider_defaults() -> None:
    gateway = GatewayFactory.create(provider="OpenAI", api_key="k", model="gpt-4o-mini")

    assert isinstance(gateway, LiteLLMGateway)
    assert gateway.provider == "openai"
    assert gateway.model == "gpt-4o-mini"
    assert gateway._litellm_model == "openai/gpt-4o-mini"
