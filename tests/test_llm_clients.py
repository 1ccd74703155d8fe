"""
Groq client tests against a mocked HTTP transport.
"""

import json

import httpx
import pytest

from app.core.exceptions import InferenceError, UpstreamRateLimitError
from app.core.llm_clients import GroqClient, LLMMessage, RateLimitSnapshot

BASE_URL = "https://api.groq.test/openai/v1"

RATE_LIMIT_HEADERS = {
    "x-ratelimit-limit-requests": "14400",
    "x-ratelimit-limit-tokens": "6000",
    "x-ratelimit-remaining-requests": "14399",
    "x-ratelimit-remaining-tokens": "5890",
    "x-ratelimit-reset-requests": "6s",
    "x-ratelimit-reset-tokens": "1.1s",
}

MESSAGES = [
    LLMMessage(role="system", content="You are helpful."),
    LLMMessage(role="user", content="Say hi"),
]


def completion_body(content: str) -> dict:
    return {
        "id": "chatcmpl-1",
        "object": "chat.completion",
        "created": 1700000000,
        "model": "llama-3.1-8b-instant",
        "choices": [
            {
                "index": 0,
                "message": {"role": "assistant", "content": content},
                "finish_reason": "stop",
            }
        ],
        "usage": {"prompt_tokens": 11, "completion_tokens": 3, "total_tokens": 14},
    }


def chunk(content: str) -> str:
    body = {
        "id": "chatcmpl-1",
        "object": "chat.completion.chunk",
        "created": 1700000000,
        "model": "llama-3.1-8b-instant",
        "choices": [{"index": 0, "delta": {"content": content}, "finish_reason": None}],
    }
    return f"data: {json.dumps(body)}\n\n"


def make_client(handler) -> GroqClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GroqClient(api_key="test-key", base_url=BASE_URL, http_client=http)


def test_rate_limit_snapshot_parses_leading_integers():
    snapshot = RateLimitSnapshot.from_headers(
        httpx.Headers({"x-ratelimit-limit-requests": "30abc", "x-ratelimit-remaining-tokens": "junk"})
    )
    assert snapshot.limit_requests == 30
    assert snapshot.remaining_tokens == 0
    assert snapshot.limit_tokens == 0
    assert snapshot.retry_after is None


@pytest.mark.asyncio
async def test_generate_reads_content_usage_and_headers():
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json=completion_body("Hi there"), headers=RATE_LIMIT_HEADERS)

    client = make_client(handler)
    response = await client.generate(MESSAGES, model="llama-3.1-8b-instant", temperature=0.7, max_tokens=4000)
    await client.close()

    assert response.content == "Hi there"
    assert response.usage.total == 14
    assert response.rate_limits.limit_requests == 14400
    assert response.rate_limits.remaining_tokens == 5890
    assert response.rate_limits.reset_tokens == "1.1s"
    assert captured["body"]["model"] == "llama-3.1-8b-instant"
    assert captured["body"]["stream"] is False
    assert captured["body"]["max_tokens"] == 4000


@pytest.mark.asyncio
async def test_generate_maps_429_to_rate_limit_error():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(
            429,
            json={"error": {"message": "Rate limit reached", "type": "requests"}},
            headers={"retry-after": "7"},
        )

    client = make_client(handler)
    with pytest.raises(UpstreamRateLimitError) as exc_info:
        await client.generate(MESSAGES, model="llama-3.1-8b-instant")
    await client.close()

    assert exc_info.value.retry_after == 7
    assert exc_info.value.status_code == 429
    assert "Retry after 7 seconds" in str(exc_info.value)
    assert len(calls) == 1  # no retries


@pytest.mark.asyncio
async def test_generate_maps_server_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, json={"error": {"message": "boom"}})

    client = make_client(handler)
    with pytest.raises(InferenceError) as exc_info:
        await client.generate(MESSAGES, model="llama-3.1-8b-instant")
    await client.close()

    assert not isinstance(exc_info.value, UpstreamRateLimitError)
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_stream_generate_yields_non_empty_fragments():
    def handler(request: httpx.Request) -> httpx.Response:
        body = chunk("Hel") + chunk("") + chunk("lo") + "data: [DONE]\n\n"
        return httpx.Response(
            200,
            content=body.encode(),
            headers={"content-type": "text/event-stream"},
        )

    client = make_client(handler)
    stream = await client.stream_generate(MESSAGES, model="llama-3.1-8b-instant")
    fragments = [fragment async for fragment in stream]
    await client.close()

    assert fragments == ["Hel", "lo"]
    assert stream.closed
