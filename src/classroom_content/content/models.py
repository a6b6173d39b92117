"""
Content Data Models

This module defines the canonical shapes for classroom learning content:

- The parsed batch produced by the upstream parser
  (subjects -> chapters -> topics, each topic carrying body text)
- The per-classroom hierarchical index used for browsing
- The flat topic record addressable by its generated id

The index is stored and transmitted as:

    {"subjects": {S: {"chapters": {C: [{"id": ..., "title": ...}]}}}}

Dict insertion order is significant at every level.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, computed_field


class MalformedContentError(ValueError):
    """Raised when a content batch or index does not have the expected structure."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


# ---------------------------------------------------------------------
# Parsed Batch (upstream parser output)
# ---------------------------------------------------------------------

class ParsedTopic(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = ""

    model_config = ConfigDict(extra="forbid")


class ParsedChapter(BaseModel):
    title: str = Field(..., min_length=1)
    topics: List[ParsedTopic] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ParsedSubject(BaseModel):
    title: str = Field(..., min_length=1)
    chapters: List[ParsedChapter] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class ParsedContent(BaseModel):
    """
    A batch of newly parsed content.

    An empty subject list is structurally valid here; callers that require
    at least one subject check `is_empty()` themselves.
    """
    subjects: List[ParsedSubject] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def is_empty(self) -> bool:
        return not self.subjects

    def topic_count(self) -> int:
        return sum(
            len(chapter.topics)
            for subject in self.subjects
            for chapter in subject.chapters
        )


def parse_batch(data: Any) -> ParsedContent:
    """
    Validate an untyped mapping as a ParsedContent batch.

    Raises
    ------
    MalformedContentError
        If any required field is missing or has the wrong type. Values are
        never coerced into a partial batch.
    """
    if isinstance(data, ParsedContent):
        return data

    if not isinstance(data, dict):
        raise MalformedContentError(
            f"Content batch must be an object, got {type(data).__name__}"
        )

    try:
        return ParsedContent.model_validate(data)
    except ValidationError as exc:
        raise MalformedContentError(
            "Content batch has an invalid structure",
            errors=exc.errors(include_url=False),
        ) from exc


# ---------------------------------------------------------------------
# Content Index (hierarchical browsing structure)
# ---------------------------------------------------------------------

class TopicRef(BaseModel):
    """
    Reference from the index to a stored ContentRecord.
    """
    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)

    model_config = ConfigDict(extra="forbid", frozen=True)


class SubjectNode(BaseModel):
    chapters: Dict[str, List[TopicRef]] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")


class ContentIndex(BaseModel):
    """
    Per-classroom index: subject -> chapter -> ordered topic references.

    Subject and chapter keys are exact strings; "Biology" and "biology"
    are different buckets.
    """
    subjects: Dict[str, SubjectNode] = Field(default_factory=dict)

    model_config = ConfigDict(extra="forbid")

    @classmethod
    def empty(cls) -> "ContentIndex":
        return cls()

    @classmethod
    def from_stored(cls, data: Optional[Dict[str, Any]]) -> "ContentIndex":
        """
        Load an index from its stored JSON form. `None` means no content yet.
        """
        if data is None:
            return cls.empty()

        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise MalformedContentError(
                "Stored content index has an invalid structure",
                errors=exc.errors(include_url=False),
            ) from exc

    def topic_refs(self) -> Iterator[Tuple[str, str, TopicRef]]:
        """Yield (subject, chapter, ref) for every topic, in stored order."""
        for subject_title, subject in self.subjects.items():
            for chapter_title, refs in subject.chapters.items():
                for ref in refs:
                    yield subject_title, chapter_title, ref

    def topic_ids(self) -> List[str]:
        return [ref.id for _, _, ref in self.topic_refs()]


# ---------------------------------------------------------------------
# Content Record (flat, addressable by id)
# ---------------------------------------------------------------------

class ContentRecord(BaseModel):
    """
    Full content of one topic.

    The lower-cased title fields are derived on every access. Supplied
    values for them are discarded (extra="ignore") and recomputed.

    Unlike the batch models this one does not forbid extra keys: its own
    dump contains the computed fields, and FastAPI validates that dump
    against the response model again. Records are never accepted as
    request input, so nothing client-supplied reaches this model.
    """
    id: str = Field(..., min_length=1)
    subject_title: str = Field(..., min_length=1)
    chapter_title: str = Field(..., min_length=1)
    topic_title: str = Field(..., min_length=1)
    body: str = ""
    created_at: Optional[datetime] = None

    model_config = ConfigDict(extra="ignore", frozen=True)

    @computed_field
    @property
    def subject_lower(self) -> str:
        return self.subject_title.lower()

    @computed_field
    @property
    def chapter_lower(self) -> str:
        return self.chapter_title.lower()

    @computed_field
    @property
    def topic_lower(self) -> str:
        return self.topic_title.lower()
