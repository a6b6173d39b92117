"""
Database Package

Provides SQLAlchemy async session management, model definitions and the
content store for PostgreSQL.
"""

from .session import get_async_session, async_engine, AsyncSessionLocal, create_schema
from .models import Base, Classroom, ContentRecordRow
from .content_store import (
    ContentStore,
    ClassroomExistsError,
    ClassroomNotFoundError,
    TopicNotFoundError,
)

__all__ = [
    "get_async_session",
    "async_engine",
    "AsyncSessionLocal",
    "create_schema",
    "Base",
    "Classroom",
    "ContentRecordRow",
    "ContentStore",
    "ClassroomExistsError",
    "ClassroomNotFoundError",
    "TopicNotFoundError",
]
