"""API dependencies for authentication, the LLM gateway and chat sessions."""

import logging
import secrets
from functools import lru_cache
from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, Path

from babel_fish.config import settings
from babel_fish.core.chat.session import ChatSession, SessionRegistry
from babel_fish.core.translation.pipeline.llm_gateway import GatewayFactory, LLMGateway

logger = logging.getLogger(__name__)


# =============================================================================
# Authentication Dependencies
# =============================================================================


async def verify_api_token(
    authorization: Annotated[Optional[str], Header()] = None,
    x_api_key: Annotated[Optional[str], Header(alias="X-API-Key")] = None,
) -> bool:
    """Verify API token.

    Supports two authentication methods:
    1. Authorization: Bearer <token>
    2. X-API-Key: <token>

    If API_AUTH_TOKEN is not set, authentication is disabled (local use).

    Raises:
        HTTPException: 401 if auth is required but token is invalid/missing
    """
    if not settings.api_auth_token:
        return True

    token = None
    if authorization and authorization.startswith("Bearer "):
        token = authorization[7:]
    elif x_api_key:
        token = x_api_key

    if not token:
        raise HTTPException(
            status_code=401,
            detail="Authentication required. Provide Authorization: Bearer <token> or X-API-Key header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not secrets.compare_digest(token, settings.api_auth_token):
        logger.warning("Rejected request with invalid API token")
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication token",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return True


# =============================================================================
# LLM Gateway
# =============================================================================


@lru_cache
def get_gateway() -> LLMGateway:
    """Process-wide gateway built from settings."""
    return GatewayFactory.from_settings(settings)


Gateway = Annotated[LLMGateway, Depends(get_gateway)]


# =============================================================================
# Chat Sessions
# =============================================================================

_registry = SessionRegistry()


def get_session_registry() -> SessionRegistry:
    return _registry


Registry = Annotated[SessionRegistry, Depends(get_session_registry)]


async def get_session(
    session_id: Annotated[str, Path(description="Chat session ID")],
    registry: Registry,
) -> ChatSession:
    """Look up a chat session.

    Raises:
        HTTPException: 404 if the session does not exist
    """
    session = registry.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


Session = Annotated[ChatSession, Depends(get_session)]
