import json

import httpx
import pytest

from classroom_content.llm.client import (
    LLMClient,
    LLMError,
    LLMResponseError,
    strip_code_fences,
)


def gemini_reply(text):
    return {"candidates": [{"content": {"role": "model", "parts": [{"text": text}]}}]}


def make_client(handler):
    return LLMClient(
        api_key="test-key",
        model="gemini-test",
        base_url="https://llm.test/v1beta/",
        transport=httpx.MockTransport(handler),
    )


def test_strip_code_fences():
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n[1, 2]\n```\n') == "[1, 2]"
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


@pytest.mark.asyncio
async def test_generate_sends_prompt_and_key():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-goog-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=gemini_reply("Hello"))

    text = await make_client(handler).generate("Say hello", temperature=0.1)

    assert text == "Hello"
    assert seen["url"] == "https://llm.test/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    assert seen["body"]["contents"][0]["parts"][0]["text"] == "Say hello"
    assert seen["body"]["generationConfig"]["temperature"] == 0.1


@pytest.mark.asyncio
async def test_generate_joins_parts():
    def handler(request):
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "Hel"}, {"text": "lo"}]}}]
        })

    assert await make_client(handler).generate("x") == "Hello"


@pytest.mark.asyncio
async def test_generate_json_strips_fences():
    def handler(request):
        return httpx.Response(200, json=gemini_reply('```json\n{"subjects": []}\n```'))

    assert await make_client(handler).generate_json("x") == {"subjects": []}


@pytest.mark.asyncio
async def test_generate_json_rejects_prose():
    def handler(request):
        return httpx.Response(200, json=gemini_reply("Sure! Here is your content."))

    with pytest.raises(LLMResponseError):
        await make_client(handler).generate_json("x")


@pytest.mark.asyncio
async def test_http_error_wrapped():
    def handler(request):
        return httpx.Response(429, json={"error": {"message": "quota"}})

    with pytest.raises(LLMError) as excinfo:
        await make_client(handler).generate("x")
    assert "HTTPStatusError" in str(excinfo.value)


@pytest.mark.asyncio
async def test_missing_candidates_rejected():
    def handler(request):
        return httpx.Response(200, json={"promptFeedback": {"blockReason": "SAFETY"}})

    with pytest.raises(LLMError):
        await make_client(handler).generate("x")


@pytest.mark.asyncio
async def test_non_json_body_rejected():
    def handler(request):
        return httpx.Response(200, text="<html>upstream proxy error</html>")

    with pytest.raises(LLMError) as excinfo:
        await make_client(handler).generate("x")
    assert not isinstance(excinfo.value, LLMResponseError)


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [
    ["not", "an", "object"],
    {"candidates": ["just a string"]},
    {"candidates": [{"content": "flat text"}]},
    {"candidates": [{"content": {"parts": [{"text": 42}]}}]},
])
async def test_malformed_candidates_rejected(body):
    def handler(request):
        return httpx.Response(200, json=body)

    with pytest.raises(LLMError):
        await make_client(handler).generate("x")
