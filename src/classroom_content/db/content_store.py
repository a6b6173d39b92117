"""
Content Store

PostgreSQL-backed persistence for classroom content.

Ingestion is a read-modify-write of the classroom's content index:

1. Lock the classroom row (SELECT ... FOR UPDATE) so that concurrent
   batches for the same classroom are serialized.
2. Merge the batch into the current index.
3. Write the new records in chunks, flushing each chunk.
4. Replace the stored index.

All steps run in the caller's transaction. Records are flushed before the
index is written, and both are committed together, so a committed index
never references a missing record.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from .models import Classroom, ContentRecordRow
from ..classrooms import validate_classroom_slug
from ..config import settings
from ..content.merge import MergeResult, merge_content, new_topic_id
from ..content.models import ContentIndex, ContentRecord, ParsedContent

logger = logging.getLogger("content.store")


# ---------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------

class ClassroomNotFoundError(LookupError):
    """Raised when the addressed classroom does not exist."""


class ClassroomExistsError(RuntimeError):
    """Raised when creating a classroom whose slug is taken."""


class TopicNotFoundError(LookupError):
    """Raised when a topic id does not exist in the classroom."""


# ---------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------

class ContentStore:
    """
    Classroom and content persistence on top of one AsyncSession.
    """

    def __init__(self, session: AsyncSession, batch_size: Optional[int] = None) -> None:
        """
        Parameters
        ----------
        session : AsyncSession
            SQLAlchemy async session for database operations.
        batch_size : Optional[int]
            Records flushed per chunk during ingestion. Defaults to
            settings.record_batch_size.
        """
        self._session = session
        self._batch_size = batch_size or settings.record_batch_size

    async def commit(self) -> None:
        await self._session.commit()

    # ------------------------------------------------------------------
    # Classrooms
    # ------------------------------------------------------------------

    async def create_classroom(self, slug: str, name: str) -> Classroom:
        slug = validate_classroom_slug(slug)

        if await self._session.get(Classroom, slug) is not None:
            raise ClassroomExistsError(f"Classroom '{slug}' already exists")

        classroom = Classroom(slug=slug, name=name)
        self._session.add(classroom)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            # Lost a race with a concurrent create of the same slug
            await self._session.rollback()
            raise ClassroomExistsError(f"Classroom '{slug}' already exists") from exc
        await self._session.refresh(classroom)

        logger.info("Created classroom %s", slug)
        return classroom

    async def get_classroom(self, slug: str, *, for_update: bool = False) -> Classroom:
        slug = validate_classroom_slug(slug)

        stmt = select(Classroom).where(Classroom.slug == slug)
        if for_update:
            stmt = stmt.with_for_update()

        result = await self._session.execute(stmt)
        classroom = result.scalar_one_or_none()
        if classroom is None:
            raise ClassroomNotFoundError(f"Classroom '{slug}' not found")
        return classroom

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_content_tree(self, slug: str) -> ContentIndex:
        """
        Return the classroom's index, or an empty index if it has no content.
        """
        classroom = await self.get_classroom(slug)
        return ContentIndex.from_stored(classroom.content_tree)

    async def get_topic(self, slug: str, topic_id: str) -> ContentRecord:
        slug = validate_classroom_slug(slug)

        result = await self._session.execute(
            select(ContentRecordRow).where(
                ContentRecordRow.classroom_slug == slug,
                ContentRecordRow.id == topic_id,
            )
        )
        row = result.scalar_one_or_none()
        if row is None:
            raise TopicNotFoundError(f"Topic '{topic_id}' not found")
        return row.to_record()

    async def find_topics(self, slug: str, prefix: str, limit: int = 20) -> List[ContentRecord]:
        """
        Case-insensitive prefix lookup on topic titles, oldest first.
        """
        classroom = await self.get_classroom(slug)

        result = await self._session.execute(
            select(ContentRecordRow)
            .where(
                ContentRecordRow.classroom_slug == classroom.slug,
                ContentRecordRow.topic_lower.startswith(prefix.lower(), autoescape=True),
            )
            .order_by(ContentRecordRow.created_at, ContentRecordRow.id)
            .limit(limit)
        )
        return [row.to_record() for row in result.scalars().all()]

    # ------------------------------------------------------------------
    # Ingestion
    # ------------------------------------------------------------------

    async def ingest(
        self,
        slug: str,
        batch: ParsedContent,
        *,
        id_factory: Callable[[], str] = new_topic_id,
    ) -> MergeResult:
        """
        Merge `batch` into the classroom's content and stage the writes.

        The caller commits (the request session does so on success).

        Raises
        ------
        ClassroomNotFoundError
            If the classroom does not exist.
        MalformedContentError
            If the stored index or the batch is structurally invalid.
        """
        classroom = await self.get_classroom(slug, for_update=True)
        existing = ContentIndex.from_stored(classroom.content_tree)

        result = merge_content(existing, batch, id_factory=id_factory)

        rows = await self._write_records(classroom.slug, result.records)

        classroom.content_tree = result.index.model_dump(mode="json")
        await self._session.flush()

        logger.info(
            "Ingested %d topic(s) into classroom %s",
            len(result.records),
            classroom.slug,
        )
        # Rows carry the server-assigned created_at after their flush
        return MergeResult(result.index, [row.to_record() for row in rows])

    async def _write_records(
        self, slug: str, records: Sequence[ContentRecord]
    ) -> List[ContentRecordRow]:
        rows: List[ContentRecordRow] = []
        for start in range(0, len(records), self._batch_size):
            chunk = records[start : start + self._batch_size]
            chunk_rows = [ContentRecordRow.from_record(slug, record) for record in chunk]
            self._session.add_all(chunk_rows)
            await self._session.flush()
            rows.extend(chunk_rows)
            logger.debug("Flushed %d record(s) for classroom %s", len(chunk), slug)
        return rows
