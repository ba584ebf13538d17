"""Chat session.

A ChatSession holds one agent/customer conversation and the translation
state around it: whether fish mode (translation display) is on, the batch
translation in flight, its failure count, the rate-limit cooldown that gates
manual retry, and the tone picker selection.

Agent messages are translated into the customer's language and customer
messages into the agent's language.
"""

import logging
import math
import time
import uuid
from enum import Enum
from typing import Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from babel_fish.config import settings
from babel_fish.core.translation.models.message import BatchOutcome, PendingMessage
from babel_fish.core.translation.orchestrator import BatchTranslationOrchestrator
from babel_fish.core.translation.pipeline.llm_gateway import LLMGateway
from babel_fish.core.translation.pipeline.translator import translate_with_retry
from babel_fish.core.translation.tone import Tone, resolve_tone, validate_tone

logger = logging.getLogger(__name__)


class Sender(str, Enum):
    AGENT = "agent"
    CUSTOMER = "customer"


class SessionBusyError(RuntimeError):
    """A batch translation is already running for this session."""


class RetryCooldownError(RuntimeError):
    """Manual retry was requested while the rate-limit cooldown is active."""

    def __init__(self, retry_after: int):
        super().__init__(f"Rate limited, retry in {retry_after}s")
        self.retry_after = retry_after


class ChatMessage(BaseModel):
    """One chat bubble."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    text: str
    sender: Sender
    translated_text: Optional[str] = None
    tone: Optional[str] = None
    timestamp: int = Field(default_factory=lambda: int(time.time() * 1000))
    language: str
    translated_language: str


class SessionState(BaseModel):
    """Serializable snapshot of a session for the UI."""

    id: str
    messages: List[ChatMessage]
    customer_language: str
    agent_language: str
    is_loading: bool
    is_translation_on: bool
    is_batch_translating: bool
    batch_error: Optional[str]
    failed_count: int
    retry_countdown: int
    selected_tone: Optional[Tone]
    custom_tone_text: str
    tone_error: Optional[str]


class ChatSession:
    """State of one conversation and its translations."""

    def __init__(
        self,
        gateway: LLMGateway,
        customer_language: Optional[str] = None,
        agent_language: Optional[str] = None,
        orchestrator: Optional[BatchTranslationOrchestrator] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.id = str(uuid.uuid4())
        self.gateway = gateway
        self.orchestrator = orchestrator or BatchTranslationOrchestrator(gateway)
        self._clock = clock

        self.messages: List[ChatMessage] = []
        self.is_loading = False
        self.customer_language = customer_language or settings.default_customer_language
        self.agent_language = agent_language or settings.agent_language

        # Fish mode
        self.is_translation_on = False
        self.is_batch_translating = False
        self.batch_error: Optional[str] = None
        self.failed_count = 0
        self._cooldown_until = 0.0

        # Tone
        self.selected_tone: Optional[Tone] = None
        self.custom_tone_text = ""
        self.tone_error: Optional[str] = None

    # -------------------------------------------------------------------------
    # Tone management
    # -------------------------------------------------------------------------

    def set_tone(self, tone: Optional[Tone]) -> None:
        self.selected_tone = tone
        if tone != Tone.CUSTOM:
            self.custom_tone_text = ""
            self.tone_error = None

    def set_custom_tone(self, value: str) -> None:
        """Store custom tone text, validating it as it is typed."""
        self.custom_tone_text = value
        if value.strip():
            result = validate_tone(value)
            self.tone_error = None if result.is_valid else (result.error or "Invalid tone")
        else:
            self.tone_error = None

    @property
    def effective_tone(self) -> Optional[str]:
        return resolve_tone(self.selected_tone, self.custom_tone_text)

    @property
    def is_tone_valid(self) -> bool:
        # Blank custom text means no tone, which is fine
        if self.selected_tone != Tone.CUSTOM or not self.custom_tone_text.strip():
            return True
        return validate_tone(self.custom_tone_text).is_valid

    # -------------------------------------------------------------------------
    # Rate-limit cooldown
    # -------------------------------------------------------------------------

    @property
    def retry_countdown(self) -> int:
        """Whole seconds until a manual retry is allowed again."""
        return max(0, math.ceil(self._cooldown_until - self._clock()))

    def _start_cooldown(self) -> None:
        self._cooldown_until = self._clock() + settings.rate_limit_cooldown

    # -------------------------------------------------------------------------
    # Batch translation
    # -------------------------------------------------------------------------

    def messages_needing_translation(self) -> List[ChatMessage]:
        return [m for m in self.messages if not m.translated_text]

    def _set_translation(self, message_id: str, translated_text: str) -> None:
        for message in self.messages:
            if message.id == message_id:
                message.translated_text = translated_text
                return

    async def translate_missing_messages(self) -> Optional[BatchOutcome]:
        """Batch translate every message that has no translation yet.

        Returns:
            The batch outcome, or None if nothing needed translating

        Raises:
            SessionBusyError: If a batch is already running for this session
        """
        if self.is_batch_translating:
            raise SessionBusyError("Batch translation already in progress")

        pending = self.messages_needing_translation()
        if not pending:
            return None

        self.is_batch_translating = True
        self.batch_error = None
        self.failed_count = 0

        # Agent messages go to the customer language and vice versa
        to_customer = [
            PendingMessage(id=m.id, text=m.text) for m in pending if m.sender == Sender.AGENT
        ]
        to_agent = [
            PendingMessage(id=m.id, text=m.text) for m in pending if m.sender == Sender.CUSTOMER
        ]

        try:
            outcome = await self.orchestrator.run(
                to_customer,
                to_agent,
                self.customer_language,
                self.agent_language,
                on_partial_result=self._set_translation,
            )
        except Exception:
            self.batch_error = "Translation failed. Please try again."
            raise
        finally:
            self.is_batch_translating = False

        self.failed_count = outcome.failed_count
        if outcome.failed_count > 0:
            self.batch_error = f"{outcome.failed_count} message(s) could not be translated"
            if outcome.is_rate_limited:
                self._start_cooldown()

        return outcome

    async def toggle_translation(self) -> bool:
        """Flip fish mode. Turning it on translates missing messages.

        Turning it off only hides translations; they stay stored.
        """
        if self.is_batch_translating:
            raise SessionBusyError("Batch translation already in progress")
        self.is_translation_on = not self.is_translation_on
        if self.is_translation_on:
            await self.translate_missing_messages()
        return self.is_translation_on

    async def retry_batch_translation(self) -> Optional[BatchOutcome]:
        """Manual retry of failed translations.

        Raises:
            RetryCooldownError: While the rate-limit cooldown is running
        """
        countdown = self.retry_countdown
        if countdown > 0:
            raise RetryCooldownError(countdown)
        return await self.translate_missing_messages()

    # -------------------------------------------------------------------------
    # Message management
    # -------------------------------------------------------------------------

    async def add_message(
        self,
        text: str,
        sender: Sender,
        translated_text: Optional[str] = None,
        tone: Optional[str] = None,
    ) -> ChatMessage:
        """Append a message.

        Customer messages are translated right away while fish mode is on.
        A failed translation leaves the message untranslated so a later
        batch picks it up.
        """
        if sender == Sender.AGENT:
            language, translated_language = self.agent_language, self.customer_language
        else:
            language, translated_language = self.customer_language, self.agent_language

        message = ChatMessage(
            text=text,
            sender=sender,
            translated_text=translated_text,
            tone=tone,
            language=language,
            translated_language=translated_language,
        )
        self.messages.append(message)

        if sender == Sender.CUSTOMER and self.is_translation_on and not translated_text:
            self.is_loading = True
            try:
                result = await translate_with_retry(
                    self.gateway,
                    text,
                    self.agent_language,
                    max_retries=settings.auto_translate_max_retries,
                )
                message.translated_text = result.translation
            except Exception as e:
                logger.error("Translation failed for message %s: %s", message.id, e)
            finally:
                self.is_loading = False

        return message

    def clear_messages(self) -> None:
        self.messages = []
        self.batch_error = None
        self.failed_count = 0

    def set_customer_language(self, code: str) -> None:
        self.customer_language = code

    def state(self) -> SessionState:
        return SessionState(
            id=self.id,
            messages=list(self.messages),
            customer_language=self.customer_language,
            agent_language=self.agent_language,
            is_loading=self.is_loading,
            is_translation_on=self.is_translation_on,
            is_batch_translating=self.is_batch_translating,
            batch_error=self.batch_error,
            failed_count=self.failed_count,
            retry_countdown=self.retry_countdown,
            selected_tone=self.selected_tone,
            custom_tone_text=self.custom_tone_text,
            tone_error=self.tone_error,
        )


class SessionRegistry:
    """In-memory sessions keyed by id. Nothing is persisted."""

    def __init__(self) -> None:
        self._sessions: Dict[str, ChatSession] = {}

    def add(self, session: ChatSession) -> ChatSession:
        self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> Optional[ChatSession]:
        return self._sessions.get(session_id)

    def remove(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)
