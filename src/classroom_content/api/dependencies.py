from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ..content.parser import ContentParser, GeminiContentParser
from ..db import ContentStore, get_async_session
from ..llm.client import LLMClient


@lru_cache
def get_llm_client() -> LLMClient:
    return LLMClient()


def get_content_parser(
    llm: Annotated[LLMClient, Depends(get_llm_client)],
) -> ContentParser:
    return GeminiContentParser(llm)


def get_content_store(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ContentStore:
    return ContentStore(session)
