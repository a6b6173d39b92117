"""
API Models

Pydantic request/response models for the classroom content and learning
endpoints. Content shapes themselves (ParsedContent, ContentIndex,
ContentRecord) live in `content.models` and are reused as-is.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..content.models import ContentIndex, ContentRecord
from ..learning.service import (
    ExamTemplate,
    Flashcard,
    FlashcardContext,
    LearningContext,
    QuizQuestion,
    StudySummary,
    StudyTask,
    StudyTime,
)


# ---------------------------------------------------------------------
# Classroom & Content Models
# ---------------------------------------------------------------------

class ClassroomResponse(BaseModel):
    slug: str
    name: str
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ParseContentRequest(BaseModel):
    """
    Raw document text plus whatever structure the teacher already knows.
    """
    text: str = Field(..., min_length=1)
    subject: Optional[str] = Field(default=None, min_length=1)
    topic: Optional[str] = Field(default=None, min_length=1)

    model_config = ConfigDict(extra="forbid")


class IngestResponse(BaseModel):
    """
    Result of merging a batch: the new records and the updated index.
    """
    records: List[ContentRecord]
    tree: ContentIndex


class TopicSearchResponse(BaseModel):
    prefix: str
    results: List[ContentRecord] = Field(default_factory=list)


# ---------------------------------------------------------------------
# Learning Models
# ---------------------------------------------------------------------

class LearningRequest(BaseModel):
    context: LearningContext

    model_config = ConfigDict(extra="forbid")


class FlashcardsResponse(BaseModel):
    flashcards: List[Flashcard]


class SummaryResponse(BaseModel):
    summary: StudySummary


class QuizResponse(BaseModel):
    questions: List[QuizQuestion]


class DoubtRequest(BaseModel):
    question: str = Field(..., min_length=1)
    card: FlashcardContext

    model_config = ConfigDict(extra="forbid")


class DoubtResponse(BaseModel):
    answer: str


class AnalyzeTestRequest(BaseModel):
    questions: List[Dict[str, Any]] = Field(..., min_length=1)
    results: List[Dict[str, Any]] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")


class StudyTasksRequest(BaseModel):
    """
    Exam schedule and weekly time budget, keyed by day name.
    """
    exam_templates: List[ExamTemplate] = Field(..., min_length=1, alias="examTemplates")
    time_availability: Dict[str, StudyTime] = Field(..., alias="timeAvailability")
    current_day: str = Field(..., min_length=1, alias="currentDay")

    model_config = ConfigDict(populate_by_name=True, extra="forbid")


class StudyTasksResponse(BaseModel):
    tasks: List[StudyTask]
