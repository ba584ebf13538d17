"""Chat session state: messages, fish mode and tone selection."""

from .session import (
    ChatMessage,
    ChatSession,
    RetryCooldownError,
    Sender,
    SessionBusyError,
    SessionRegistry,
    SessionState,
)

__all__ = [
    "ChatMessage",
    "ChatSession",
    "RetryCooldownError",
    "Sender",
    "SessionBusyError",
    "SessionRegistry",
    "SessionState",
]
