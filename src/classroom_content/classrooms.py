"""
Classroom Identity

Every piece of stored content belongs to exactly one classroom, addressed
by a short URL-safe slug (e.g. "grade-9-biology").

Validation
----------
- Only alphanumeric characters, hyphens, and underscores allowed
- Between 1 and 64 characters
- Surrounding whitespace is stripped before validation
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, field_validator


SLUG_PATTERN = re.compile(r"^[a-zA-Z0-9_-]{1,64}$")


class InvalidClassroomError(ValueError):
    """Raised when a classroom slug is missing or malformed."""


def validate_classroom_slug(slug: str) -> str:
    """
    Return the normalized slug.

    Raises
    ------
    InvalidClassroomError
        If the slug is empty or contains characters outside [a-zA-Z0-9_-].
    """
    if not slug or not isinstance(slug, str):
        raise InvalidClassroomError("classroom slug is required")

    slug = slug.strip()

    if not SLUG_PATTERN.match(slug):
        raise InvalidClassroomError(
            f"Invalid classroom slug '{slug}': must be 1-64 alphanumeric chars, hyphens, or underscores"
        )

    return slug


class ClassroomCreate(BaseModel):
    """
    Payload for registering a new classroom.
    """

    slug: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="URL-safe identifier of the classroom.",
    )

    name: str = Field(
        ...,
        min_length=1,
        description="Display name shown to teachers and students.",
    )

    @field_validator("slug", mode="before")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        return validate_classroom_slug(v)
