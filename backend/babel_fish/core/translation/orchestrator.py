"""Batch translation orchestrator.

Translates many pending chat messages in a few LLM calls. Each round sends
only the messages that are still unresolved, maps the reply arrays back onto
that round's message lists by position, and records every translation the
moment it is mapped. Rounds are bounded; whatever is still unresolved at the
end is reported in ``failed_ids``. Transport and parse failures never escape
``run``: they count as a round without progress.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from babel_fish.config import settings

from .languages import language_name
from .models.message import BatchOutcome, ParsedBatchResponse, PendingMessage
from .models.response import HTTP_OK, HTTP_TOO_MANY_REQUESTS
from .pipeline.llm_gateway import LLMGateway
from .pipeline.output_processor import parse_batch
from .pipeline.prompt_engine import PromptEngine, build_batch_prompt

logger = logging.getLogger(__name__)

PartialResultCallback = Callable[[str, str], None]


class ResultAccumulator:
    """Translations collected across rounds, write-once per message id."""

    def __init__(self) -> None:
        self.to_customer_language: Dict[str, str] = {}
        self.to_agent_language: Dict[str, str] = {}

    @staticmethod
    def record(bucket: Dict[str, str], message_id: str, text: str) -> bool:
        """Store a translation unless one already exists. Returns True if stored."""
        if message_id in bucket:
            return False
        bucket[message_id] = text
        return True


@dataclass(frozen=True)
class RoundState:
    """Work left after a round and the status of its transport call."""

    remaining_customer: Tuple[PendingMessage, ...]
    remaining_agent: Tuple[PendingMessage, ...]
    last_status: int = HTTP_OK

    @property
    def remaining_count(self) -> int:
        return len(self.remaining_customer) + len(self.remaining_agent)

    @property
    def is_done(self) -> bool:
        return self.remaining_count == 0


def filter_remaining(
    messages: Sequence[PendingMessage], completed: Dict[str, str]
) -> Tuple[PendingMessage, ...]:
    return tuple(m for m in messages if m.id not in completed)


def map_results(
    translations: List[str],
    messages: Sequence[PendingMessage],
    bucket: Dict[str, str],
    on_partial_result: Optional[PartialResultCallback] = None,
) -> int:
    """Record translations by position against this round's message list.

    Entry i answers ``messages[i]``. Empty strings and entries beyond the
    list are ignored. Returns the number of messages newly resolved.
    """
    resolved = 0
    for index, text in enumerate(translations):
        if index >= len(messages) or not text:
            continue
        message = messages[index]
        if not ResultAccumulator.record(bucket, message.id, text):
            continue
        logger.debug("[Batch] Mapped %s -> %r", message.id, text)
        if on_partial_result is not None:
            on_partial_result(message.id, text)
        resolved += 1
    return resolved


class BatchTranslationOrchestrator:
    """Runs bounded retry-and-narrow rounds of batch translation.

    One instance may be reused, but a single ``run`` owns its accumulator for
    its whole lifetime and issues one LLM call at a time.
    """

    def __init__(
        self,
        gateway: LLMGateway,
        max_rounds: Optional[int] = None,
        round_delay: Optional[float] = None,
    ):
        """Initialize the orchestrator.

        Args:
            gateway: LLM gateway used for every round
            max_rounds: Round ceiling (default ``settings.batch_max_rounds``)
            round_delay: Seconds to wait between rounds (default ``settings.batch_round_delay``)
        """
        self.gateway = gateway
        self.max_rounds = max_rounds if max_rounds is not None else settings.batch_max_rounds
        self.round_delay = round_delay if round_delay is not None else settings.batch_round_delay

    async def run(
        self,
        to_customer: Sequence[PendingMessage],
        to_agent: Sequence[PendingMessage],
        customer_language: str,
        agent_language: str,
        on_partial_result: Optional[PartialResultCallback] = None,
    ) -> BatchOutcome:
        """Translate both groups and report what resolved.

        Args:
            to_customer: Agent messages to translate into the customer's language
            to_agent: Customer messages to translate into the agent's language
            customer_language: Customer language code
            agent_language: Agent language code
            on_partial_result: Called with (id, text) as soon as a message resolves

        Returns:
            BatchOutcome; every input id is either resolved or in failed_ids
        """
        customer_name = language_name(customer_language)
        agent_name = language_name(agent_language)
        accumulator = ResultAccumulator()
        state = RoundState(tuple(to_customer), tuple(to_agent))

        for round_number in range(1, self.max_rounds + 1):
            if state.is_done:
                break

            status = await self._attempt_round(
                state, accumulator, customer_name, agent_name, on_partial_result
            )
            state = RoundState(
                remaining_customer=filter_remaining(
                    state.remaining_customer, accumulator.to_customer_language
                ),
                remaining_agent=filter_remaining(
                    state.remaining_agent, accumulator.to_agent_language
                ),
                last_status=status,
            )

            if not state.is_done and round_number < self.max_rounds:
                logger.info(
                    f"[Batch] Round {round_number}/{self.max_rounds}: "
                    f"retrying {state.remaining_count} messages"
                )
                await asyncio.sleep(self.round_delay)

        return self._finalize(accumulator, to_customer, to_agent, state.last_status)

    async def _attempt_round(
        self,
        state: RoundState,
        accumulator: ResultAccumulator,
        customer_name: str,
        agent_name: str,
        on_partial_result: Optional[PartialResultCallback],
    ) -> int:
        """Send one batch request for the remaining messages. Returns its status."""
        prompt = build_batch_prompt(
            state.remaining_customer, state.remaining_agent, customer_name, agent_name
        )
        result = await self.gateway.execute(PromptEngine.bundle(prompt, purpose="batch"))
        if result.text is None:
            return result.status

        parsed = parse_batch(result.text)
        if parsed is None:
            return result.status

        self._apply(parsed, state, accumulator, on_partial_result)
        return result.status

    @staticmethod
    def _apply(
        parsed: ParsedBatchResponse,
        state: RoundState,
        accumulator: ResultAccumulator,
        on_partial_result: Optional[PartialResultCallback],
    ) -> int:
        resolved = map_results(
            parsed.to_customer_language,
            state.remaining_customer,
            accumulator.to_customer_language,
            on_partial_result,
        )
        resolved += map_results(
            parsed.to_agent_language,
            state.remaining_agent,
            accumulator.to_agent_language,
            on_partial_result,
        )
        logger.info(f"[Batch] Resolved {resolved}/{state.remaining_count} messages this round")
        return resolved

    def _finalize(
        self,
        accumulator: ResultAccumulator,
        to_customer: Sequence[PendingMessage],
        to_agent: Sequence[PendingMessage],
        last_status: int,
    ) -> BatchOutcome:
        failed = filter_remaining(to_customer, accumulator.to_customer_language) + filter_remaining(
            to_agent, accumulator.to_agent_language
        )
        if failed:
            logger.warning(
                f"{len(failed)} message(s) could not be translated after {self.max_rounds} attempts"
            )

        return BatchOutcome(
            to_customer_language=dict(accumulator.to_customer_language),
            to_agent_language=dict(accumulator.to_agent_language),
            failed_ids=[m.id for m in failed],
            is_rate_limited=last_status == HTTP_TOO_MANY_REQUESTS,
        )


async def batch_translate(
    gateway: LLMGateway,
    to_customer: Sequence[PendingMessage],
    to_agent: Sequence[PendingMessage],
    customer_language: str,
    agent_language: str,
    on_partial_result: Optional[PartialResultCallback] = None,
    max_rounds: Optional[int] = None,
    round_delay: Optional[float] = None,
) -> BatchOutcome:
    """Convenience wrapper around BatchTranslationOrchestrator.run."""
    orchestrator = BatchTranslationOrchestrator(
        gateway, max_rounds=max_rounds, round_delay=round_delay
    )
    return await orchestrator.run(
        to_customer, to_agent, customer_language, agent_language, on_partial_result
    )
