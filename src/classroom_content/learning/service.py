"""
Learning Material Generation

Builds prompts from stored topics (or a free topic name), asks the LLM
for JSON and validates the result before it reaches a client.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..llm.client import LLMClient, LLMResponseError
from ..prompts import (
    ANALYZE_TEST_PROMPT,
    DOUBT_PROMPT,
    FLASHCARDS_PROMPT,
    STUDY_TASKS_PROMPT,
    SUMMARY_PROMPT,
    TEST_PROMPT,
)

logger = logging.getLogger("content.learning")


_CAMEL = ConfigDict(populate_by_name=True, extra="ignore")


# ---------------------------------------------------------------------
# Input
# ---------------------------------------------------------------------

class LearningTopic(BaseModel):
    topic: str = Field(..., min_length=1)
    content: str = ""

    model_config = ConfigDict(extra="forbid")


class LearningContext(BaseModel):
    """
    Material to generate from: either a free topic name or stored topics.
    """
    topic_name: Optional[str] = Field(default=None, min_length=1)
    topics: List[LearningTopic] = Field(default_factory=list)

    model_config = ConfigDict(extra="forbid")

    def render(self) -> str:
        if self.topic_name:
            return f"Topic: {self.topic_name}"
        return "\n\n".join(
            f"Topic: {t.topic}\nContent: {t.content}" for t in self.topics
        )

    def is_empty(self) -> bool:
        return not self.topic_name and not self.topics


class SyllabusItem(BaseModel):
    chapter: str = Field(..., min_length=1)
    topics: List[str] = Field(default_factory=list)
    topic_ids: List[str] = Field(default_factory=list, alias="topicIds")

    model_config = _CAMEL

    def render(self) -> str:
        return (
            f"{self.chapter}: [{', '.join(self.topics)}] "
            f"(IDs: [{', '.join(self.topic_ids)}])"
        )


class ExamEntry(BaseModel):
    subject: str = Field(..., min_length=1)
    date: str
    syllabus: List[SyllabusItem] = Field(default_factory=list)

    model_config = _CAMEL


class ExamTemplate(BaseModel):
    """One exam (e.g. "Mid-terms") with a dated entry per subject."""
    title: str = Field(..., min_length=1)
    entries: List[ExamEntry] = Field(default_factory=list)

    model_config = _CAMEL

    def render(self) -> str:
        lines = [f"{self.title}:"]
        for entry in self.entries:
            lines.append(f"  - {entry.subject} ({entry.date})")
            lines.append(
                "    Syllabus: " + "; ".join(item.render() for item in entry.syllabus)
            )
        return "\n".join(lines)


class StudyTime(BaseModel):
    hours: int = Field(default=0, ge=0)
    mins: int = Field(default=0, ge=0)

    def render(self) -> str:
        if not self.hours and not self.mins:
            return "No time set"
        parts = []
        if self.hours:
            parts.append(f"{self.hours} hour{'s' if self.hours > 1 else ''}")
        if self.mins:
            parts.append(f"{self.mins} minute{'s' if self.mins > 1 else ''}")
        return " ".join(parts)


# ---------------------------------------------------------------------
# Output
# ---------------------------------------------------------------------

class Flashcard(BaseModel):
    id: int
    title: str
    content: str
    explanation: str = ""
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")

    model_config = _CAMEL


class Definition(BaseModel):
    term: str
    definition: str


class StudySummary(BaseModel):
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")
    definitions: List[Definition] = Field(default_factory=list)
    concepts: List[str] = Field(default_factory=list)

    model_config = _CAMEL


class QuizQuestion(BaseModel):
    id: int
    question: str
    options: List[str] = Field(..., min_length=2)
    correct_answer: str = Field(..., alias="correctAnswer")
    explanation: str = ""
    difficulty: Literal["easy", "medium", "hard"] = "medium"

    model_config = _CAMEL


class FlashcardContext(BaseModel):
    title: str
    content: str
    explanation: str = ""


class QuizAnalysis(BaseModel):
    score: float = Field(..., ge=0)
    total_questions: int = Field(..., ge=0, alias="totalQuestions")
    weak_points: List[str] = Field(default_factory=list, alias="weakPoints")
    strong_points: List[str] = Field(default_factory=list, alias="strongPoints")
    suggestions: List[str] = Field(default_factory=list)
    pickup_line: str = Field(default="", alias="pickupLine")

    model_config = _CAMEL


class StudyTask(BaseModel):
    id: str
    title: str
    subject: str
    chapter: str = ""
    topics: List[str] = Field(default_factory=list)
    topic_ids: List[str] = Field(default_factory=list, alias="topicIds")
    estimated_duration: str = Field(..., alias="estimatedDuration")
    difficulty_level: Literal["easy", "medium", "hard"] = Field(
        default="medium", alias="difficultyLevel"
    )
    related_exam: str = Field(default="", alias="relatedExam")

    model_config = _CAMEL


# ---------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------

def _unwrap(data: Any, *keys: str) -> Any:
    """Descend into nested objects, raising LLMResponseError on a missing key."""
    for key in keys:
        if not isinstance(data, dict) or key not in data:
            raise LLMResponseError(f"LLM response missing '{key}' field")
        data = data[key]
    return data


def _validate(model: type[BaseModel], data: Any) -> Any:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        logger.warning("LLM output failed %s validation: %s", model.__name__, exc.errors())
        raise LLMResponseError(f"LLM response is not a valid {model.__name__}") from exc


# ---------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------

async def generate_flashcards(llm: LLMClient, context: LearningContext) -> List[Flashcard]:
    data = await llm.generate_json(FLASHCARDS_PROMPT.format(context=context.render()))
    cards = _unwrap(data, "flashcards")
    if not isinstance(cards, list):
        raise LLMResponseError("'flashcards' must be a list")
    return [_validate(Flashcard, card) for card in cards]


async def generate_summary(llm: LLMClient, context: LearningContext) -> StudySummary:
    data = await llm.generate_json(SUMMARY_PROMPT.format(context=context.render()))
    return _validate(StudySummary, _unwrap(data, "summary"))


async def generate_test(llm: LLMClient, context: LearningContext) -> List[QuizQuestion]:
    data = await llm.generate_json(TEST_PROMPT.format(context=context.render()))
    questions = _unwrap(data, "testData", "questions")
    if not isinstance(questions, list):
        raise LLMResponseError("'questions' must be a list")
    return [_validate(QuizQuestion, q) for q in questions]


async def answer_doubt(llm: LLMClient, card: FlashcardContext, question: str) -> str:
    prompt = DOUBT_PROMPT.format(
        title=card.title,
        content=card.content,
        explanation=card.explanation,
        question=question,
    )
    answer = await llm.generate(prompt)
    return answer.strip()


async def analyze_test(
    llm: LLMClient,
    questions: List[Dict[str, Any]],
    results: List[Dict[str, Any]],
) -> QuizAnalysis:
    prompt = ANALYZE_TEST_PROMPT.format(
        questions=json.dumps(questions),
        results=json.dumps(results),
    )
    return _validate(QuizAnalysis, await llm.generate_json(prompt))


async def generate_study_tasks(
    llm: LLMClient,
    exams: List[ExamTemplate],
    time_availability: Dict[str, StudyTime],
    current_day: str,
) -> List[StudyTask]:
    """
    Plan today's study tasks from upcoming exams and the time available.

    `time_availability` is keyed by day name; a day without an entry has
    no time set.
    """
    available = time_availability.get(current_day) or StudyTime()
    prompt = STUDY_TASKS_PROMPT.format(
        current_day=current_day,
        available_time=available.render(),
        exams="\n\n".join(exam.render() for exam in exams),
    )

    tasks = await llm.generate_json(prompt)
    if not isinstance(tasks, list):
        raise LLMResponseError("Study tasks response must be a list")

    logger.debug("Planned %d study task(s) for %s", len(tasks), current_day)
    return [_validate(StudyTask, task) for task in tasks]
