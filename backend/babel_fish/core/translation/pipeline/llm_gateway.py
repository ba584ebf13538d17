"""LLM Gateway for unified provider access.

This module provides an abstract gateway interface for LLM providers,
along with a unified implementation using LiteLLM. Any OpenAI-compatible
chat completion server (LM Studio, Ollama, hosted APIs) can sit behind it.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

import litellm
from litellm import acompletion

from babel_fish.utils.text import normalize_for_log

from ..models.prompt import PromptBundle
from ..models.response import (
    HTTP_OK,
    TRANSPORT_ERROR_STATUS,
    LLMResponse,
    TokenUsage,
    TransportResult,
)

logger = logging.getLogger(__name__)


class LLMGateway(ABC):
    """Abstract gateway for LLM providers.

    Subclasses implement ``call``, which raises on any failure. ``execute``
    wraps it for callers that need a status code instead of an exception.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        """Get provider name."""
        pass

    @property
    @abstractmethod
    def model(self) -> str:
        """Get model identifier."""
        pass

    @abstractmethod
    async def call(self, bundle: PromptBundle) -> LLMResponse:
        """Make one chat completion call.

        Args:
            bundle: Prompt bundle with messages and configuration

        Returns:
            LLMResponse with content and metadata

        Raises:
            Exception: On transport failure or a non-2xx response
        """
        pass

    async def health_check(self) -> bool:
        """Check if the provider is available.

        Returns:
            True if provider is reachable
        """
        result = await self.execute(
            PromptBundle.model_validate(
                {"messages": [{"role": "user", "content": "Hi"}], "max_tokens": 5}
            )
        )
        return result.status == HTTP_OK

    def status_for_exception(self, exc: Exception) -> int:
        """HTTP status carried by a failed call, or 0 if there is none."""
        status = getattr(exc, "status_code", None)
        return status if isinstance(status, int) else TRANSPORT_ERROR_STATUS

    async def execute(self, bundle: PromptBundle) -> TransportResult:
        """Make one call and report the outcome without raising.

        Returns:
            TransportResult with the reply text (None if empty) and the HTTP
            status, or status 0 if the endpoint was unreachable
        """
        try:
            response = await self.call(bundle)
        except Exception as e:
            status = self.status_for_exception(e)
            logger.error(
                "[LLM Gateway] %s request failed: status=%s, error=%s",
                bundle.purpose,
                status,
                e,
            )
            return TransportResult(text=None, status=status)

        return TransportResult(text=response.content or None, status=HTTP_OK)


class LiteLLMGateway(LLMGateway):
    """Unified Gateway for all providers using LiteLLM."""

    # LiteLLM routing prefix per provider
    MODEL_PREFIXES = {
        "openai": "openai/",
        "lmstudio": "lm_studio/",
        "ollama": "ollama/",
        "deepseek": "deepseek/",
        "gemini": "gemini/",
        "anthropic": "anthropic/",
        "openrouter": "openrouter/",
    }

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        provider_name: str = "openai",
        timeout: Optional[float] = None,
    ):
        """Initialize LiteLLM gateway.

        Args:
            api_key: API key for authentication (local servers accept any value)
            model: Model identifier as the endpoint knows it
            base_url: Optional custom base URL for compatible APIs
            provider_name: Provider name for routing and logging
            timeout: Request timeout in seconds
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._provider = provider_name
        self._timeout = timeout

        prefix = self.MODEL_PREFIXES.get(provider_name, "")
        if prefix and not model.startswith(prefix):
            self._litellm_model = f"{prefix}{model}"
        else:
            self._litellm_model = model

        logger.info(
            f"[LLM Gateway] Initialized: provider={provider_name}, model={model}, "
            f"litellm_model={self._litellm_model}, base_url={base_url}"
        )

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def model(self) -> str:
        return self._model

    def status_for_exception(self, exc: Exception) -> int:
        # Timeouts and connection failures carry synthetic status codes in LiteLLM
        if isinstance(exc, (litellm.exceptions.Timeout, litellm.exceptions.APIConnectionError)):
            return TRANSPORT_ERROR_STATUS
        return super().status_for_exception(exc)

    async def call(self, bundle: PromptBundle) -> LLMResponse:
        """Make LLM API call using LiteLLM.

        Args:
            bundle: Prompt bundle

        Returns:
            LLMResponse with the reply content
        """
        start_time = time.time()

        kwargs = {
            "model": self._litellm_model,
            "messages": bundle.to_openai_format(),
            **bundle.generation_kwargs(),
        }
        if self._api_key:
            kwargs["api_key"] = self._api_key
        if self._base_url:
            kwargs["api_base"] = self._base_url
        if self._timeout:
            kwargs["timeout"] = self._timeout

        logger.info(
            f"[LLM Gateway] Calling LiteLLM: purpose={bundle.purpose}, "
            f"model={self._litellm_model}, prompt={normalize_for_log(bundle.user_prompt, 120)}"
        )

        response = await acompletion(**kwargs)

        latency_ms = int((time.time() - start_time) * 1000)
        content = response.choices[0].message.content if response.choices else None
        usage = getattr(response, "usage", None)

        return LLMResponse(
            content=content or "",
            provider=self._provider,
            model=self._model,
            usage=TokenUsage(
                prompt_tokens=usage.prompt_tokens if usage else 0,
                completion_tokens=usage.completion_tokens if usage else 0,
                total_tokens=usage.total_tokens if usage else 0,
            ),
            latency_ms=latency_ms,
        )


class GatewayFactory:
    """Factory for creating LLM gateways."""

    # Default endpoint per provider; None lets LiteLLM pick
    PROVIDER_BASE_URLS = {
        "lmstudio": "http://localhost:1234/v1",
        "ollama": "http://localhost:11434",
        "openai": None,
        "deepseek": "https://api.deepseek.com/v1",
        "gemini": None,
        "anthropic": None,
        "openrouter": None,
    }

    @classmethod
    def create(
        cls,
        provider: str,
        api_key: Optional[str],
        model: str,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> LLMGateway:
        """Create an LLM gateway for the specified provider.

        Args:
            provider: Provider name (lmstudio, openai, gemini, ...)
            api_key: API key for authentication
            model: Model identifier
            base_url: Override for the provider's default endpoint
            timeout: Request timeout in seconds

        Returns:
            Configured LLMGateway instance
        """
        provider = provider.lower()
        if base_url is None:
            base_url = cls.PROVIDER_BASE_URLS.get(provider)

        return LiteLLMGateway(
            api_key=api_key,
            model=model,
            base_url=base_url,
            provider_name=provider,
            timeout=timeout,
        )

    @classmethod
    def from_settings(cls, settings) -> LLMGateway:
        """Create the gateway described by application settings."""
        return cls.create(
            provider=settings.llm_provider,
            api_key=settings.llm_api_key,
            model=settings.llm_model,
            base_url=settings.llm_base_url,
            timeout=settings.llm_request_timeout,
        )
