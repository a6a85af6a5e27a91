import asyncio
import json

import httpx
import pytest

from plant_identifier.adapters.vision.claude_vision import ClaudeVision
from plant_identifier.adapters.vision.gemini_vision import GeminiVision
from plant_identifier.adapters.vision.mock_vision import MockVision
from plant_identifier.orchestrator.errors import ServiceFailure
from plant_identifier.orchestrator.normalizer import parse_plant_info


def _gemini(status, handler, api_key="test-key"):
    return GeminiVision(status, api_key=api_key, model="gemini-test",
                        base_url="https://gemini.test/v1beta", transport=httpx.MockTransport(handler))


def test_gemini_request_shape_and_reply(status):
    seen = {}

    def handler(request: httpx.Request):
        seen["url"] = str(request.url)
        seen["key"] = request.headers["x-goog-api-key"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={
            "candidates": [{"content": {"parts": [{"text": "```json\n{}"}, {"text": "\n```"}]}}],
        })

    raw = asyncio.run(_gemini(status, handler).generate("PROMPT", "aGVsbG8=", "image/png"))

    assert raw == "```json\n{}\n```"
    assert seen["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
    assert seen["key"] == "test-key"
    parts = seen["body"]["contents"][0]["parts"]
    assert parts[0] == {"text": "PROMPT"}
    assert parts[1] == {"inline_data": {"mime_type": "image/png", "data": "aGVsbG8="}}


@pytest.mark.parametrize("response", [
    httpx.Response(500, text="internal"),
    httpx.Response(403, json={"error": {"message": "API key not valid"}}),
    httpx.Response(200, json={"candidates": []}),
    httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": "  "}]}}]}),
    httpx.Response(200, text="not json"),
])
def test_gemini_bad_responses_are_service_failures(status, response):
    vision = _gemini(status, lambda request: response)
    with pytest.raises(ServiceFailure):
        asyncio.run(vision.generate("PROMPT", "aGVsbG8=", "image/jpeg"))


def test_gemini_transport_error_is_service_failure(status):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ServiceFailure):
        asyncio.run(_gemini(status, handler).generate("PROMPT", "aGVsbG8=", "image/jpeg"))


def test_gemini_without_key_is_not_ready(status):
    vision = GeminiVision(status, api_key="")
    assert not vision.ready
    with pytest.raises(ServiceFailure):
        asyncio.run(vision.generate("PROMPT", "aGVsbG8=", "image/jpeg"))


def test_claude_without_key_is_not_ready(status):
    vision = ClaudeVision(status, api_key="")
    assert not vision.ready
    with pytest.raises(ServiceFailure):
        asyncio.run(vision.generate("PROMPT", "aGVsbG8=", "image/jpeg"))


def test_mock_reply_is_parseable(status):
    vision = MockVision(status)
    raw = asyncio.run(vision.generate("PROMPT", "aGVsbG8=", "image/jpeg"))
    assert parse_plant_info(raw).family == "Rosaceae"
    assert vision.calls == [("PROMPT", "aGVsbG8=", "image/jpeg")]
