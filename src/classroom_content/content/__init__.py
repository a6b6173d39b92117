"""
Content Package

Data model, merge algorithm and parser for classroom learning content.
"""

from .models import (
    ContentIndex,
    ContentRecord,
    MalformedContentError,
    ParsedChapter,
    ParsedContent,
    ParsedSubject,
    ParsedTopic,
    SubjectNode,
    TopicRef,
    parse_batch,
)
from .merge import DuplicateTopicIdError, MergeResult, merge_content, new_topic_id

__all__ = [
    "ContentIndex",
    "ContentRecord",
    "MalformedContentError",
    "ParsedChapter",
    "ParsedContent",
    "ParsedSubject",
    "ParsedTopic",
    "SubjectNode",
    "TopicRef",
    "parse_batch",
    "DuplicateTopicIdError",
    "MergeResult",
    "merge_content",
    "new_topic_id",
]
