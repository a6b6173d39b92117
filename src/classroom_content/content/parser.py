"""
Content Parser

Turns raw document text into a ParsedContent batch using the LLM.

The merge algorithm only depends on the `ContentParser` protocol, so tests
and scripts can substitute a deterministic parser.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

from .models import MalformedContentError, ParsedContent, parse_batch
from ..llm.client import LLMClient
from ..prompts import (
    FULL_ANALYSIS_PROMPT,
    FULL_CONTEXT_PROMPT,
    PARSE_CONTENT_SUFFIX,
    SUBJECT_PROVIDED_PROMPT,
)

logger = logging.getLogger("content.parser")


class ContentParseError(RuntimeError):
    """Raised when text cannot be turned into a usable content batch."""


class ContentParser(Protocol):
    async def parse(
        self,
        text: str,
        subject: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> ParsedContent:
        ...


def build_parse_prompt(
    text: str,
    subject: Optional[str] = None,
    topic: Optional[str] = None,
) -> str:
    """
    Select the prompt for the amount of structure the caller already knows.

    A topic without a subject is ignored.
    """
    if subject and topic:
        system_prompt = FULL_CONTEXT_PROMPT.format(subject=subject, topic=topic)
    elif subject:
        system_prompt = SUBJECT_PROVIDED_PROMPT.format(subject=subject)
    else:
        system_prompt = FULL_ANALYSIS_PROMPT

    return system_prompt + PARSE_CONTENT_SUFFIX.format(text=text)


class GeminiContentParser:
    """
    ContentParser backed by the Gemini client.
    """

    def __init__(self, llm: LLMClient) -> None:
        self._llm = llm

    async def parse(
        self,
        text: str,
        subject: Optional[str] = None,
        topic: Optional[str] = None,
    ) -> ParsedContent:
        """
        Parse `text` into subjects, chapters and topics.

        Raises
        ------
        ContentParseError
            If the text is empty, or the model output is not a batch with
            at least one subject.
        LLMError
            If the model call itself fails.
        """
        if not text or not text.strip():
            raise ContentParseError("Text content is required")

        raw = await self._llm.generate_json(build_parse_prompt(text, subject, topic))

        try:
            batch = parse_batch(raw)
        except MalformedContentError as exc:
            logger.warning("Parser output rejected: %s", exc.errors)
            raise ContentParseError("Invalid response structure from AI") from exc

        if batch.is_empty():
            raise ContentParseError("Invalid response structure from AI")

        logger.info(
            "Parsed %d chars into %d subject(s), %d topic(s)",
            len(text),
            len(batch.subjects),
            batch.topic_count(),
        )
        return batch
