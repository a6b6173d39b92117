"""
Classroom Content Routes

This module exposes endpoints for:
- Registering classrooms
- Parsing raw document text into subjects, chapters and topics
- Ingesting parsed content into a classroom's content tree
- Browsing the content tree and fetching individual topics

Handlers stay thin: validation is done by the request models, domain
errors are translated by the global exception handlers, and the request
session commits all writes in one transaction.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status

from .dependencies import get_content_parser, get_content_store
from .models import (
    ClassroomResponse,
    IngestResponse,
    ParseContentRequest,
    TopicSearchResponse,
)
from ..classrooms import ClassroomCreate
from ..content.models import ContentIndex, ContentRecord, MalformedContentError, ParsedContent
from ..content.parser import ContentParser
from ..db import ContentStore

router = APIRouter(prefix="/classrooms", tags=["content"])


def _require_subjects(batch: ParsedContent) -> None:
    if batch.is_empty():
        raise MalformedContentError("Content batch must contain at least one subject")


# ---------------------------------------------------------------------
# Classrooms
# ---------------------------------------------------------------------

@router.post(
    "",
    response_model=ClassroomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a classroom",
)
async def create_classroom(
    req: ClassroomCreate,
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> ClassroomResponse:
    classroom = await store.create_classroom(req.slug, req.name)
    return ClassroomResponse.model_validate(classroom)


# ---------------------------------------------------------------------
# Content Tree
# ---------------------------------------------------------------------

@router.get(
    "/{slug}/content",
    response_model=ContentIndex,
    summary="Get the classroom content tree",
)
async def get_content_tree(
    slug: str,
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> ContentIndex:
    return await store.get_content_tree(slug)


@router.post(
    "/{slug}/content",
    response_model=IngestResponse,
    summary="Merge parsed content into the classroom",
)
async def ingest_content(
    slug: str,
    batch: ParsedContent,
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> IngestResponse:
    _require_subjects(batch)
    result = await store.ingest(slug, batch)
    return IngestResponse(records=result.records, tree=result.index)


@router.post(
    "/{slug}/content/parse",
    response_model=ParsedContent,
    summary="Parse document text without storing it",
)
async def parse_content(
    slug: str,
    req: ParseContentRequest,
    parser: Annotated[ContentParser, Depends(get_content_parser)],
) -> ParsedContent:
    """
    Let the teacher review the structure before it is ingested.
    """
    return await parser.parse(req.text, subject=req.subject, topic=req.topic)


@router.post(
    "/{slug}/content/upload",
    response_model=IngestResponse,
    summary="Parse document text and ingest the result",
)
async def upload_content(
    slug: str,
    req: ParseContentRequest,
    parser: Annotated[ContentParser, Depends(get_content_parser)],
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> IngestResponse:
    # Fail before the LLM call if the classroom is unknown
    await store.get_classroom(slug)

    batch = await parser.parse(req.text, subject=req.subject, topic=req.topic)
    result = await store.ingest(slug, batch)
    return IngestResponse(records=result.records, tree=result.index)


# ---------------------------------------------------------------------
# Topics
# ---------------------------------------------------------------------

@router.get(
    "/{slug}/content/search",
    response_model=TopicSearchResponse,
    summary="Find topics by title prefix",
)
async def search_topics(
    slug: str,
    store: Annotated[ContentStore, Depends(get_content_store)],
    prefix: Annotated[str, Query(min_length=1)],
    limit: Annotated[int, Query(ge=1, le=100)] = 20,
) -> TopicSearchResponse:
    results = await store.find_topics(slug, prefix, limit=limit)
    return TopicSearchResponse(prefix=prefix, results=results)


@router.get(
    "/{slug}/content/topics/{topic_id}",
    response_model=ContentRecord,
    summary="Get one topic's full content",
)
async def get_topic(
    slug: str,
    topic_id: str,
    store: Annotated[ContentStore, Depends(get_content_store)],
) -> ContentRecord:
    return await store.get_topic(slug, topic_id)
