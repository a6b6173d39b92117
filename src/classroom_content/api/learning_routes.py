"""
Learning Routes

Generate study material from classroom topics: flashcards, summaries,
multiple-choice tests, answers to follow-up questions, test feedback
and daily study plans.

Each route builds one prompt, makes one LLM call and returns validated
JSON. LLM failures surface as 502 through the global handlers.
"""

from typing import Annotated

from fastapi import APIRouter, Depends

from .dependencies import get_llm_client
from .models import (
    AnalyzeTestRequest,
    DoubtRequest,
    DoubtResponse,
    FlashcardsResponse,
    LearningRequest,
    QuizResponse,
    StudyTasksRequest,
    StudyTasksResponse,
    SummaryResponse,
)
from ..content.models import MalformedContentError
from ..learning import service
from ..learning.service import LearningContext, QuizAnalysis
from ..llm.client import LLMClient

router = APIRouter(prefix="/learning", tags=["learning"])


def _require_context(context: LearningContext) -> None:
    if context.is_empty():
        raise MalformedContentError("Either topic_name or topics must be provided")


@router.post(
    "/flashcards",
    response_model=FlashcardsResponse,
    summary="Generate flashcards",
)
async def generate_flashcards(
    req: LearningRequest,
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> FlashcardsResponse:
    _require_context(req.context)
    return FlashcardsResponse(flashcards=await service.generate_flashcards(llm, req.context))


@router.post(
    "/summary",
    response_model=SummaryResponse,
    summary="Generate a study summary",
)
async def generate_summary(
    req: LearningRequest,
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> SummaryResponse:
    _require_context(req.context)
    return SummaryResponse(summary=await service.generate_summary(llm, req.context))


@router.post(
    "/test",
    response_model=QuizResponse,
    summary="Generate a multiple-choice test",
)
async def generate_test(
    req: LearningRequest,
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> QuizResponse:
    _require_context(req.context)
    return QuizResponse(questions=await service.generate_test(llm, req.context))


@router.post(
    "/doubt",
    response_model=DoubtResponse,
    summary="Answer a question about a flashcard",
)
async def ask_doubt(
    req: DoubtRequest,
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> DoubtResponse:
    return DoubtResponse(answer=await service.answer_doubt(llm, req.card, req.question))


@router.post(
    "/analyze-test",
    response_model=QuizAnalysis,
    summary="Analyze a student's test results",
)
async def analyze_test(
    req: AnalyzeTestRequest,
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> QuizAnalysis:
    return await service.analyze_test(llm, req.questions, req.results)


@router.post(
    "/study-tasks",
    response_model=StudyTasksResponse,
    summary="Plan today's study tasks from upcoming exams",
)
async def generate_study_tasks(
    req: StudyTasksRequest,
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> StudyTasksResponse:
    tasks = await service.generate_study_tasks(
        llm,
        req.exam_templates,
        req.time_availability,
        req.current_day,
    )
    return StudyTasksResponse(tasks=tasks)
