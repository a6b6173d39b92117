"""
SQLAlchemy Models

Defines the database schema for:
- Classrooms, each holding its hierarchical content index as JSON
- Content records, one row per topic, addressable by generated id
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from sqlalchemy import (
    JSON,
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    func,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship

from ..content.models import ContentRecord


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


# ---------------------------------------------------------------------
# Classroom Model
# ---------------------------------------------------------------------

class Classroom(Base):
    """
    A classroom and its content index.

    `content_tree` holds ContentIndex in its stored JSON form and is
    replaced as a whole on every ingestion. NULL means no content yet.
    Stored as `json`, not `jsonb`: jsonb reorders object keys, and the
    order of subjects and chapters is part of the index.
    """
    __tablename__ = "classroom"

    slug: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )
    content_tree: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    records: Mapped[List["ContentRecordRow"]] = relationship(
        "ContentRecordRow",
        back_populates="classroom",
        cascade="all, delete-orphan",
    )


# ---------------------------------------------------------------------
# Content Record Model
# ---------------------------------------------------------------------

class ContentRecordRow(Base):
    """
    Full content of one topic. Written once at ingestion, never updated.
    """
    __tablename__ = "content_record"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    classroom_slug: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("classroom.slug", ondelete="CASCADE"),
        nullable=False,
    )
    subject: Mapped[str] = mapped_column(Text, nullable=False)
    chapter: Mapped[str] = mapped_column(Text, nullable=False)
    topic: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # Derived lookup columns, always lower() of the source column
    subject_lower: Mapped[str] = mapped_column(Text, nullable=False)
    chapter_lower: Mapped[str] = mapped_column(Text, nullable=False)
    topic_lower: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=func.now(),
    )

    classroom: Mapped["Classroom"] = relationship("Classroom", back_populates="records")

    __table_args__ = (
        Index("idx_record_topic_lower", "classroom_slug", "topic_lower"),
        Index("idx_record_subject_chapter", "classroom_slug", "subject_lower", "chapter_lower"),
    )

    # Fetch created_at with RETURNING on insert so flushed rows carry it
    __mapper_args__ = {"eager_defaults": True}

    @classmethod
    def from_record(cls, classroom_slug: str, record: ContentRecord) -> "ContentRecordRow":
        return cls(
            id=record.id,
            classroom_slug=classroom_slug,
            subject=record.subject_title,
            chapter=record.chapter_title,
            topic=record.topic_title,
            content=record.body,
            subject_lower=record.subject_lower,
            chapter_lower=record.chapter_lower,
            topic_lower=record.topic_lower,
        )

    def to_record(self) -> ContentRecord:
        return ContentRecord(
            id=self.id,
            subject_title=self.subject,
            chapter_title=self.chapter,
            topic_title=self.topic,
            body=self.content,
            created_at=self.created_at,
        )
