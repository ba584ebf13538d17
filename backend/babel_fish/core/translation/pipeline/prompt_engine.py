"""Prompt construction for translation, batch translation and cleanup.

Every builder is a pure function of its inputs. Batch prompts tag each entry
with its message id for readability, but replies are matched back to
messages by array position only.
"""

from typing import Optional, Sequence

from ..models.message import PendingMessage
from ..models.prompt import Message, PromptBundle

CUSTOMER_FIELD = "toCustomerLanguage"
AGENT_FIELD = "toAgentLanguage"


def build_single_message_prompt(
    text: str,
    target_language_name: str,
    tone: Optional[str] = None,
    source_language_name: str = "English",
) -> str:
    """Build the prompt for one message.

    Without a tone the model returns the bare translation. With a tone it
    must return a JSON object holding the toned rewrite and its translation.
    """
    if not tone:
        return (
            f"Translate to {target_language_name}. "
            f"Only return the translation, nothing else.\n\nText: {text}"
        )

    return f"""Apply a {tone} tone to this message and translate it to {target_language_name}.

1. Rewrite the original message with a {tone} tone in {source_language_name}.
2. Translate that rewritten message into {target_language_name}, keeping the {tone} tone.

Original: {text}

Return ONLY a JSON object, with no explanation and no markdown:
{{
  "tonedOriginal": "the message rewritten with {tone} tone in {source_language_name}",
  "translation": "the translation in {target_language_name} with {tone} tone"
}}"""


def build_message_section(messages: Sequence[PendingMessage], header: str) -> str:
    """Numbered, id-tagged list of one group (empty string for an empty group)."""
    if not messages:
        return ""
    lines = [f"{i}. [{m.id}] {m.text}" for i, m in enumerate(messages, start=1)]
    return f"{header}:\n" + "\n".join(lines)


def _example_array(count: int) -> str:
    if count == 0:
        return ""
    if count == 1:
        return '"translation1"'
    return '"translation1", ...'


def build_expected_output_format(customer_count: int, agent_count: int) -> str:
    return (
        "{\n"
        f'  "{CUSTOMER_FIELD}": [{_example_array(customer_count)}],\n'
        f'  "{AGENT_FIELD}": [{_example_array(agent_count)}]\n'
        "}"
    )


def build_batch_prompt(
    to_customer: Sequence[PendingMessage],
    to_agent: Sequence[PendingMessage],
    customer_language_name: str,
    agent_language_name: str,
) -> str:
    """Build one prompt covering both translation directions.

    A group with no messages gets no section at all.
    """
    sections = []
    if to_customer:
        sections.append(
            build_message_section(to_customer, f"Translate to {customer_language_name}")
        )
    if to_agent:
        sections.append(
            build_message_section(to_agent, f"Translate to {agent_language_name}")
        )

    output_format = build_expected_output_format(len(to_customer), len(to_agent))
    body = "\n\n".join(sections)

    return f"""You are a translator.

{body}

Return ONLY a JSON object with this exact structure:
{output_format}

Each array should contain translations in the same order as the input messages."""


def build_cleanup_prompt(raw_text: str) -> str:
    """Prompt that tidies a speech-to-text transcript."""
    return f"""Clean up this voice transcription.

- Remove filler words, false starts and repeated words.
- Fix punctuation, capitalization and obvious speech recognition errors.
- Keep the original language and meaning. Do not translate or add content.

Only return the cleaned text, nothing else.

Transcription: {raw_text}"""


class PromptEngine:
    """Wraps built prompts into bundles for the gateway."""

    @staticmethod
    def bundle(prompt: str, purpose: str = "translate") -> PromptBundle:
        """Single user-message bundle, as the chat completion endpoint expects."""
        return PromptBundle(
            messages=[Message(role="user", content=prompt)],
            purpose=purpose,
        )
