from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from apps.coop_monitor.providers import AnthropicVisionProvider
from packages.contracts.errors import AnalysisError
from tests.fixtures.sample_data import make_sample_frame


def _provider(handler, api_key: str = "sk-test") -> AnthropicVisionProvider:
    return AnthropicVisionProvider(
        api_key=api_key,
        model="claude-test",
        max_tokens=1500,
        base_url="https://vision.example",
        transport=httpx.MockTransport(handler),
    )


def test_sends_single_image_and_prompt_message() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"content": [{"type": "text", "text": '{"eggs": 3}'}], "stop_reason": "end_turn"},
        )

    frame = make_sample_frame()
    text = asyncio.run(_provider(handler).complete(frame, "describe the coop"))

    assert text == '{"eggs": 3}'
    assert len(seen) == 1
    request = seen[0]
    assert str(request.url) == "https://vision.example/v1/messages"
    assert request.headers["x-api-key"] == "sk-test"
    assert request.headers["anthropic-version"] == "2023-06-01"
    body = json.loads(request.content)
    assert body["model"] == "claude-test"
    assert body["max_tokens"] == 1500
    image_block, text_block = body["messages"][0]["content"]
    assert image_block["source"] == {"type": "base64", "media_type": "image/jpeg", "data": frame.base64}
    assert text_block == {"type": "text", "text": "describe the coop"}


def test_joins_text_blocks_and_ignores_others() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "content": [
                    {"type": "text", "text": '{"eggs": '},
                    {"type": "thinking", "thinking": "hmm"},
                    {"type": "text", "text": "3}"},
                ]
            },
        )

    assert asyncio.run(_provider(handler).complete(make_sample_frame(), "p")) == '{"eggs": 3}'


def test_provider_error_message_is_surfaced() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            529,
            json={"type": "error", "error": {"type": "overloaded_error", "message": "Overloaded"}},
        )

    with pytest.raises(AnalysisError, match="529: Overloaded"):
        asyncio.run(_provider(handler).complete(make_sample_frame(), "p"))


def test_transport_failure_becomes_analysis_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AnalysisError, match="unreachable"):
        asyncio.run(_provider(handler).complete(make_sample_frame(), "p"))


def test_missing_api_key_fails_without_a_request() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"content": []})

    with pytest.raises(AnalysisError, match="ANTHROPIC_API_KEY"):
        asyncio.run(_provider(handler, api_key="").complete(make_sample_frame(), "p"))
    assert seen == []


@pytest.mark.parametrize(
    "body",
    [["not", "an", "object"], {"content": "plain text"}, {"content": ["text"]}, {"id": "msg_1"}],
)
def test_unexpected_success_body_becomes_analysis_error(body) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=body)

    with pytest.raises(AnalysisError, match="unexpected body"):
        asyncio.run(_provider(handler).complete(make_sample_frame(), "p"))
