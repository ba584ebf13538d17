"""Translation pipeline components.

This module provides the core pipeline components for translation:
- PromptEngine / build_* : Build prompts for single, batch and cleanup requests
- LLMGateway: Unified interface for LLM providers
- output_processor: Parses raw LLM replies
- translator: Single-message translation with retry
"""

from .llm_gateway import GatewayFactory, LiteLLMGateway, LLMGateway
from .output_processor import ParseError, parse_batch, parse_single, strip_code_fence
from .prompt_engine import (
    PromptEngine,
    build_batch_prompt,
    build_cleanup_prompt,
    build_single_message_prompt,
)
from .translator import translate, translate_with_retry

__all__ = [
    "PromptEngine",
    "build_batch_prompt",
    "build_cleanup_prompt",
    "build_single_message_prompt",
    "LLMGateway",
    "LiteLLMGateway",
    "GatewayFactory",
    "ParseError",
    "parse_batch",
    "parse_single",
    "strip_code_fence",
    "translate",
    "translate_with_retry",
]
