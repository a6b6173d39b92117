"""
Content Tree Ingestion & Merge

Merges a batch of newly parsed content into a classroom's existing
content index, producing:

- the updated index (existing entries untouched, new entries appended)
- one ContentRecord per incoming topic, each with a fresh id

The merge is a pure transformation. It does not read or write storage;
the caller persists the records and the index as one unit.

Title Disambiguation
--------------------
Within one (subject, chapter) bucket, stored topic titles are unique.
For an incoming title T, let k be the number of stored titles exactly
equal to T (case-sensitive), counted against the bucket as it stands at
that moment, including topics added earlier in the same batch.

- k == 0: T is stored unchanged.
- k > 0: T is stored as "T (k+1)". If that title is itself already taken
  (e.g. the bucket holds ["Intro", "Intro (2)"]), the number is
  incremented until the title is free, so the result is "Intro (3)".
"""

from __future__ import annotations

import logging
import secrets
import string
from typing import Callable, Iterable, List, NamedTuple

from .models import (
    ContentIndex,
    ContentRecord,
    MalformedContentError,
    ParsedContent,
    SubjectNode,
    TopicRef,
)

logger = logging.getLogger("content.merge")


TOPIC_ID_LENGTH = 20
_TOPIC_ID_ALPHABET = string.ascii_letters + string.digits


class DuplicateTopicIdError(RuntimeError):
    """Raised when the id factory returns an id that is already in use."""


class MergeResult(NamedTuple):
    """Outcome of merging one batch into an index."""
    index: ContentIndex
    records: List[ContentRecord]


def new_topic_id() -> str:
    """Return a random 20-character alphanumeric topic id."""
    return "".join(secrets.choice(_TOPIC_ID_ALPHABET) for _ in range(TOPIC_ID_LENGTH))


def disambiguate_title(title: str, stored_titles: Iterable[str]) -> str:
    """
    Return the title to store for `title` given the titles already in the bucket.
    """
    stored = list(stored_titles)
    duplicates = sum(1 for t in stored if t == title)
    if duplicates == 0:
        return title

    taken = set(stored)
    n = duplicates + 1
    candidate = f"{title} ({n})"
    while candidate in taken:
        n += 1
        candidate = f"{title} ({n})"
    return candidate


def merge_content(
    existing: ContentIndex,
    batch: ParsedContent,
    *,
    id_factory: Callable[[], str] = new_topic_id,
) -> MergeResult:
    """
    Merge `batch` into a copy of `existing`.

    Parameters
    ----------
    existing : ContentIndex
        Current index of the classroom. Use ContentIndex.empty() for a
        classroom without content. Never mutated.
    batch : ParsedContent
        Subjects, chapters and topics to add, processed in order.
    id_factory : Callable[[], str]
        Source of new topic ids.

    Returns
    -------
    MergeResult
        The updated index and the new records, in insertion order.

    Raises
    ------
    MalformedContentError
        If either input is missing or not a validated model.
    DuplicateTopicIdError
        If `id_factory` yields an id already present in the index or batch.
    """
    if not isinstance(existing, ContentIndex):
        raise MalformedContentError(
            f"Existing content index is required, got {type(existing).__name__}"
        )
    if not isinstance(batch, ParsedContent):
        raise MalformedContentError(
            f"Parsed content batch is required, got {type(batch).__name__}"
        )

    index = existing.model_copy(deep=True)
    used_ids = set(index.topic_ids())
    records: List[ContentRecord] = []

    for subject in batch.subjects:
        subject_node = index.subjects.setdefault(subject.title, SubjectNode())

        for chapter in subject.chapters:
            refs = subject_node.chapters.setdefault(chapter.title, [])

            for topic in chapter.topics:
                stored_title = disambiguate_title(topic.title, (r.title for r in refs))

                topic_id = id_factory()
                if topic_id in used_ids:
                    raise DuplicateTopicIdError(f"Topic id '{topic_id}' is already in use")
                used_ids.add(topic_id)

                records.append(ContentRecord(
                    id=topic_id,
                    subject_title=subject.title,
                    chapter_title=chapter.title,
                    topic_title=stored_title,
                    body=topic.content,
                ))
                refs.append(TopicRef(id=topic_id, title=stored_title))

    logger.debug(
        "Merged %d topic(s) across %d subject(s)",
        len(records),
        len(batch.subjects),
    )

    return MergeResult(index=index, records=records)
