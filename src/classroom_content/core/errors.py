"""
Global Error Handling

This module defines application-wide exception handlers.

Design Goals
------------
- Never leak internal exception details to clients
- Always return deterministic, machine-readable error responses:
  {"error": <code>, "detail": <message>}
- Log full stack traces internally for debugging
- Map domain exceptions to HTTP status codes in one place
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..classrooms import InvalidClassroomError
from ..content.merge import DuplicateTopicIdError
from ..content.models import MalformedContentError
from ..content.parser import ContentParseError
from ..db.content_store import (
    ClassroomExistsError,
    ClassroomNotFoundError,
    TopicNotFoundError,
)
from ..llm.client import LLMError

logger = logging.getLogger("content.errors")


# ---------------------------------------------------------------------
# Domain Exception Mapping
# ---------------------------------------------------------------------

# Order matters: the first matching class wins.
DOMAIN_ERRORS: List[Tuple[Type[Exception], int, str]] = [
    (InvalidClassroomError, 422, "invalid_classroom"),
    (MalformedContentError, 422, "malformed_content"),
    (ClassroomNotFoundError, 404, "classroom_not_found"),
    (TopicNotFoundError, 404, "topic_not_found"),
    (ClassroomExistsError, 409, "classroom_exists"),
    (ContentParseError, 502, "content_parse_failed"),
    (LLMError, 502, "llm_failed"),
    (DuplicateTopicIdError, 500, "internal_server_error"),
]


def _error_payload(code: str, detail: str, **extra: Any) -> Dict[str, Any]:
    payload: Dict[str, Any] = {"error": code, "detail": detail}
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------
# Public Exception Handlers
# ---------------------------------------------------------------------

async def domain_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Translate a known domain exception into its mapped status code.

    Server-side failures (5xx) keep their message out of the response.
    """
    for exc_type, status_code, code in DOMAIN_ERRORS:
        if isinstance(exc, exc_type):
            break
    else:
        return await unhandled_exception_handler(request, exc)

    if status_code >= 500:
        logger.error(
            "%s during request %s %s: %s",
            type(exc).__name__,
            request.method,
            request.url.path,
            exc,
        )
        detail = {
            "content_parse_failed": "Failed to parse content",
            "llm_failed": "Language model request failed",
        }.get(code, "Internal server error")
        return JSONResponse(status_code=status_code, content=_error_payload(code, detail))

    extra: Dict[str, Any] = {}
    if isinstance(exc, MalformedContentError) and exc.errors:
        extra["errors"] = [
            {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")} for e in exc.errors
        ]

    return JSONResponse(
        status_code=status_code,
        content=_error_payload(code, str(exc), **extra),
    )


async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """
    Catch-all handler for uncaught exceptions.

    Logs the full stack trace and returns a generic 500 with no internal
    details.
    """
    logger.exception(
        "Unhandled exception during request: %s %s",
        request.method,
        request.url.path,
        exc_info=exc,
    )

    return JSONResponse(
        status_code=500,
        content=_error_payload("internal_server_error", "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    for exc_type, _, _ in DOMAIN_ERRORS:
        app.add_exception_handler(exc_type, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
