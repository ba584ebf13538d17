"""Chat session API routes.

Sessions live in memory for the lifetime of the process; message history
persistence belongs to the client.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from babel_fish.api.dependencies import Gateway, Registry, Session
from babel_fish.core.chat.session import (
    ChatMessage,
    ChatSession,
    RetryCooldownError,
    Sender,
    SessionBusyError,
    SessionState,
)
from babel_fish.core.translation.tone import Tone

logger = logging.getLogger(__name__)

router = APIRouter()


class CreateSessionRequest(BaseModel):
    customer_language: Optional[str] = None
    agent_language: Optional[str] = None


class AddMessageRequest(BaseModel):
    text: str = Field(..., min_length=1)
    sender: Sender
    translated_text: Optional[str] = None
    tone: Optional[str] = None


class ToneSelectionRequest(BaseModel):
    tone: Optional[Tone] = None
    custom_text: Optional[str] = None


class LanguageRequest(BaseModel):
    customer_language: str


@router.post("/sessions", response_model=SessionState, status_code=201)
async def create_session(
    request: CreateSessionRequest, gateway: Gateway, registry: Registry
) -> SessionState:
    """Start a new chat session."""
    session = registry.add(
        ChatSession(
            gateway,
            customer_language=request.customer_language,
            agent_language=request.agent_language,
        )
    )
    logger.info("Created chat session %s", session.id)
    return session.state()


@router.get("/sessions/{session_id}", response_model=SessionState)
async def get_session_state(session: Session) -> SessionState:
    return session.state()


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session: Session, registry: Registry) -> None:
    registry.remove(session.id)


@router.post("/sessions/{session_id}/messages", response_model=ChatMessage)
async def add_message(request: AddMessageRequest, session: Session) -> ChatMessage:
    """Append a message; customer messages are translated while fish mode is on."""
    return await session.add_message(
        request.text,
        request.sender,
        translated_text=request.translated_text,
        tone=request.tone,
    )


@router.delete("/sessions/{session_id}/messages", response_model=SessionState)
async def clear_messages(session: Session) -> SessionState:
    session.clear_messages()
    return session.state()


@router.post("/sessions/{session_id}/language", response_model=SessionState)
async def set_customer_language(request: LanguageRequest, session: Session) -> SessionState:
    session.set_customer_language(request.customer_language)
    return session.state()


@router.post("/sessions/{session_id}/tone", response_model=SessionState)
async def select_tone(request: ToneSelectionRequest, session: Session) -> SessionState:
    """Select a preset or custom tone; custom text is validated on every change."""
    session.set_tone(request.tone)
    if request.tone == Tone.CUSTOM and request.custom_text is not None:
        session.set_custom_tone(request.custom_text)
    return session.state()


@router.post("/sessions/{session_id}/translation/toggle", response_model=SessionState)
async def toggle_translation(session: Session) -> SessionState:
    """Toggle fish mode; turning it on batch translates missing messages."""
    try:
        await session.toggle_translation()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return session.state()


@router.post("/sessions/{session_id}/translation/retry", response_model=SessionState)
async def retry_translation(session: Session) -> SessionState:
    """Retry failed translations once any rate-limit cooldown has passed."""
    try:
        await session.retry_batch_translation()
    except SessionBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RetryCooldownError as e:
        raise HTTPException(
            status_code=429,
            detail=str(e),
            headers={"Retry-After": str(e.retry_after)},
        )
    return session.state()
