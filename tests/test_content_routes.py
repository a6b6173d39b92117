import contextlib
import itertools
from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from classroom_content.api.dependencies import get_content_parser, get_content_store
from classroom_content.classrooms import InvalidClassroomError
from classroom_content.content.merge import merge_content
from classroom_content.content.models import ContentIndex, ContentRecord, ParsedContent
from classroom_content.content.parser import ContentParseError, GeminiContentParser
from classroom_content.db import ContentStore
from classroom_content.db.content_store import ClassroomNotFoundError, TopicNotFoundError
from classroom_content.db.models import Classroom
from classroom_content.llm.client import LLMError
from classroom_content.main import create_app


BATCH = {
    "subjects": [{
        "title": "Math",
        "chapters": [{
            "title": "Algebra",
            "topics": [
                {"title": "Equations", "content": "2x = 4"},
                {"title": "Equations", "content": "x + 1 = 3"},
            ],
        }],
    }]
}


@pytest.fixture
def mock_store():
    mock = AsyncMock(spec=ContentStore)
    ids = itertools.count(1)

    async def ingest(slug, batch):
        return merge_content(ContentIndex.empty(), batch, id_factory=lambda: f"id{next(ids)}")

    mock.ingest.side_effect = ingest
    mock.get_content_tree.return_value = ContentIndex.empty()
    mock.get_classroom.return_value = Classroom(slug="math-101", name="Math 101")
    return mock


@pytest.fixture
def mock_parser():
    mock = AsyncMock(spec=GeminiContentParser)
    mock.parse.return_value = ParsedContent.model_validate(BATCH)
    return mock


@pytest.fixture
def app(mock_store, mock_parser):
    app = create_app()
    app.dependency_overrides[get_content_store] = lambda: mock_store
    app.dependency_overrides[get_content_parser] = lambda: mock_parser

    # Mock lifespan to avoid DB connection
    @contextlib.asynccontextmanager
    async def mock_lifespan(app):
        yield

    app.router.lifespan_context = mock_lifespan
    return app


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_create_classroom(client, mock_store):
    mock_store.create_classroom.return_value = Classroom(slug="math-101", name="Math 101")

    resp = client.post("/classrooms", json={"slug": "math-101", "name": "Math 101"})

    assert resp.status_code == 201
    assert resp.json()["slug"] == "math-101"
    mock_store.create_classroom.assert_awaited_once_with("math-101", "Math 101")


def test_create_classroom_bad_slug(client, mock_store):
    resp = client.post("/classrooms", json={"slug": "math 101", "name": "Math"})

    assert resp.status_code == 422
    mock_store.create_classroom.assert_not_called()


def test_get_empty_tree(client):
    resp = client.get("/classrooms/math-101/content")

    assert resp.status_code == 200
    assert resp.json() == {"subjects": {}}


def test_get_tree_unknown_classroom(client, mock_store):
    mock_store.get_content_tree.side_effect = ClassroomNotFoundError("Classroom 'x' not found")

    resp = client.get("/classrooms/x/content")

    assert resp.status_code == 404
    assert resp.json()["error"] == "classroom_not_found"


def test_invalid_slug_maps_to_422(client, mock_store):
    mock_store.get_content_tree.side_effect = InvalidClassroomError("Invalid classroom slug")

    resp = client.get("/classrooms/bad.slug/content")

    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_classroom"


def test_ingest_content(client, mock_store):
    resp = client.post("/classrooms/math-101/content", json=BATCH)

    assert resp.status_code == 200
    data = resp.json()
    assert [r["topic_title"] for r in data["records"]] == ["Equations", "Equations (2)"]
    assert data["records"][1]["topic_lower"] == "equations (2)"
    assert data["tree"] == {
        "subjects": {
            "Math": {
                "chapters": {
                    "Algebra": [
                        {"id": "id1", "title": "Equations"},
                        {"id": "id2", "title": "Equations (2)"},
                    ]
                }
            }
        }
    }
    mock_store.ingest.assert_awaited_once()


def test_ingest_rejects_empty_batch(client, mock_store):
    resp = client.post("/classrooms/math-101/content", json={"subjects": []})

    assert resp.status_code == 422
    assert resp.json()["error"] == "malformed_content"
    mock_store.ingest.assert_not_called()


def test_ingest_rejects_malformed_batch(client, mock_store):
    resp = client.post("/classrooms/math-101/content", json={"subjects": [{"title": "Math"}, 3]})

    assert resp.status_code == 422
    mock_store.ingest.assert_not_called()


def test_parse_content(client, mock_parser, mock_store):
    resp = client.post(
        "/classrooms/math-101/content/parse",
        json={"text": "Solving equations...", "subject": "Math"},
    )

    assert resp.status_code == 200
    assert resp.json()["subjects"][0]["title"] == "Math"
    mock_parser.parse.assert_awaited_once_with("Solving equations...", subject="Math", topic=None)
    mock_store.ingest.assert_not_called()


def test_parse_content_requires_text(client, mock_parser):
    resp = client.post("/classrooms/math-101/content/parse", json={"text": ""})

    assert resp.status_code == 422
    mock_parser.parse.assert_not_called()


def test_parse_failure_maps_to_502(client, mock_parser):
    mock_parser.parse.side_effect = ContentParseError("Invalid response structure from AI")

    resp = client.post("/classrooms/math-101/content/parse", json={"text": "abc"})

    assert resp.status_code == 502
    assert resp.json() == {"error": "content_parse_failed", "detail": "Failed to parse content"}


def test_llm_failure_maps_to_502(client, mock_parser):
    mock_parser.parse.side_effect = LLMError("LLM request failed: ConnectTimeout")

    resp = client.post("/classrooms/math-101/content/parse", json={"text": "abc"})

    assert resp.status_code == 502
    assert resp.json()["error"] == "llm_failed"


def test_upload_parses_then_ingests(client, mock_parser, mock_store):
    resp = client.post(
        "/classrooms/math-101/content/upload",
        json={"text": "Solving equations...", "subject": "Math", "topic": "Algebra"},
    )

    assert resp.status_code == 200
    assert len(resp.json()["records"]) == 2
    mock_parser.parse.assert_awaited_once_with("Solving equations...", subject="Math", topic="Algebra")
    mock_store.ingest.assert_awaited_once()


def test_upload_unknown_classroom_skips_llm(client, mock_parser, mock_store):
    mock_store.get_classroom.side_effect = ClassroomNotFoundError("Classroom 'ghost' not found")

    resp = client.post("/classrooms/ghost/content/upload", json={"text": "abc"})

    assert resp.status_code == 404
    mock_parser.parse.assert_not_called()


def test_get_topic(client, mock_store):
    mock_store.get_topic.return_value = ContentRecord(
        id="id1",
        subject_title="Math",
        chapter_title="Algebra",
        topic_title="Equations",
        body="2x = 4",
    )

    resp = client.get("/classrooms/math-101/content/topics/id1")

    assert resp.status_code == 200
    data = resp.json()
    assert data["body"] == "2x = 4"
    assert data["subject_lower"] == "math"
    mock_store.get_topic.assert_awaited_once_with("math-101", "id1")


def test_get_missing_topic(client, mock_store):
    mock_store.get_topic.side_effect = TopicNotFoundError("Topic 'nope' not found")

    resp = client.get("/classrooms/math-101/content/topics/nope")

    assert resp.status_code == 404
    assert resp.json()["error"] == "topic_not_found"


def test_search_topics(client, mock_store):
    mock_store.find_topics.return_value = [
        ContentRecord(id="id1", subject_title="Math", chapter_title="Algebra", topic_title="Equations"),
    ]

    resp = client.get("/classrooms/math-101/content/search", params={"prefix": "EQU", "limit": 5})

    assert resp.status_code == 200
    assert resp.json()["results"][0]["id"] == "id1"
    mock_store.find_topics.assert_awaited_once_with("math-101", "EQU", limit=5)


def test_unhandled_error_is_generic(app, mock_store):
    mock_store.get_content_tree.side_effect = RuntimeError("database password is hunter2")

    with TestClient(app, raise_server_exceptions=False) as c:
        resp = c.get("/classrooms/math-101/content")

    assert resp.status_code == 500
    assert resp.json() == {"error": "internal_server_error", "detail": "Internal server error"}
