import pytest
from pydantic import ValidationError

from classroom_content.content.models import (
    ContentIndex,
    ContentRecord,
    MalformedContentError,
    ParsedContent,
    TopicRef,
    parse_batch,
)


VALID_BATCH = {
    "subjects": [
        {
            "title": "Physics",
            "chapters": [
                {
                    "title": "Motion",
                    "topics": [
                        {"title": "Velocity", "content": "Rate of change of position."},
                        {"title": "Acceleration", "content": ""},
                    ],
                }
            ],
        }
    ]
}


def test_parse_batch_accepts_valid_structure():
    parsed = parse_batch(VALID_BATCH)

    assert isinstance(parsed, ParsedContent)
    assert parsed.subjects[0].chapters[0].topics[1].content == ""
    assert parsed.topic_count() == 2
    assert not parsed.is_empty()


def test_parse_batch_returns_existing_model_unchanged():
    parsed = ParsedContent()
    assert parse_batch(parsed) is parsed


def test_parse_batch_rejects_missing_topic_title():
    data = {"subjects": [{"title": "Physics", "chapters": [{"title": "Motion", "topics": [{"content": "x"}]}]}]}

    with pytest.raises(MalformedContentError) as excinfo:
        parse_batch(data)
    assert excinfo.value.errors
    assert "title" in excinfo.value.errors[0]["loc"]


def test_parse_batch_rejects_empty_title():
    data = {"subjects": [{"title": "", "chapters": []}]}

    with pytest.raises(MalformedContentError):
        parse_batch(data)


def test_parse_batch_rejects_non_object():
    with pytest.raises(MalformedContentError):
        parse_batch(["Physics"])


def test_parse_batch_rejects_unknown_fields():
    with pytest.raises(MalformedContentError):
        parse_batch({"subjects": [], "extra": True})


def test_empty_batch_is_structurally_valid():
    assert parse_batch({"subjects": []}).is_empty()


def test_index_from_stored_none_is_empty():
    assert ContentIndex.from_stored(None) == ContentIndex.empty()


def test_index_from_stored_preserves_order():
    stored = {
        "subjects": {
            "Zoology": {"chapters": {"Birds": [{"id": "1", "title": "Owls"}]}},
            "Art": {"chapters": {}},
        }
    }

    index = ContentIndex.from_stored(stored)

    assert list(index.subjects) == ["Zoology", "Art"]
    assert index.topic_ids() == ["1"]
    assert index.model_dump() == stored


def test_index_from_stored_rejects_bad_shape():
    with pytest.raises(MalformedContentError):
        ContentIndex.from_stored({"subjects": {"Art": {"chapters": {"Color": ["not-a-ref"]}}}})


def test_topic_ref_is_immutable():
    ref = TopicRef(id="1", title="Owls")
    with pytest.raises(ValidationError):
        ref.title = "Hawks"


def test_record_lower_fields_are_derived():
    record = ContentRecord(
        id="abc",
        subject_title="Computer Science",
        chapter_title="Sorting",
        topic_title="QuickSort (2)",
        body="...",
    )

    assert record.subject_lower == "computer science"
    assert record.chapter_lower == "sorting"
    assert record.topic_lower == "quicksort (2)"


def test_record_ignores_supplied_lower_fields():
    record = ContentRecord.model_validate({
        "id": "abc",
        "subject_title": "Math",
        "chapter_title": "Algebra",
        "topic_title": "Equations",
        "topic_lower": "something else",
    })

    assert record.topic_lower == "equations"
    assert record.model_dump()["topic_lower"] == "equations"


def test_record_accepts_its_own_dump():
    record = ContentRecord(
        id="abc",
        subject_title="Math",
        chapter_title="Algebra",
        topic_title="Equations",
    )

    dumped = record.model_dump(mode="json")

    assert dumped["chapter_lower"] == "algebra"
    assert ContentRecord.model_validate(dumped) == record
