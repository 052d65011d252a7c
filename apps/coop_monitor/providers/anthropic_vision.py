from __future__ import annotations

import logging

import httpx

from packages.contracts.errors import AnalysisError
from packages.imaging import EncodedFrame

from .base import VisionProvider

logger = logging.getLogger("coop_monitor.providers.anthropic")

ANTHROPIC_VERSION = "2023-06-01"


def _provider_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"HTTP {response.status_code}: {response.text[:200]}"
    error = body.get("error") if isinstance(body, dict) else None
    if isinstance(error, dict) and error.get("message"):
        return f"HTTP {response.status_code}: {error['message']}"
    return f"HTTP {response.status_code}"


class AnthropicVisionProvider(VisionProvider):
    """Anthropic Messages API adapter.

    One POST per call, no retries. ``transport`` lets tests swap in an
    ``httpx.MockTransport``.
    """

    def __init__(
        self,
        api_key: str,
        model: str,
        max_tokens: int = 1500,
        base_url: str = "https://api.anthropic.com",
        timeout_seconds: float = 60.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._max_tokens = max_tokens
        self._url = f"{base_url.rstrip('/')}/v1/messages"
        self._timeout = timeout_seconds
        self._transport = transport

    def _request_payload(self, frame: EncodedFrame, prompt: str) -> dict:
        return {
            "model": self._model,
            "max_tokens": self._max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {
                            "type": "image",
                            "source": {
                                "type": "base64",
                                "media_type": frame.media_type,
                                "data": frame.base64,
                            },
                        },
                        {"type": "text", "text": prompt},
                    ],
                }
            ],
        }

    async def complete(self, frame: EncodedFrame, prompt: str) -> str:
        if not self._api_key:
            raise AnalysisError("ANTHROPIC_API_KEY is not set")

        headers = {
            "x-api-key": self._api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "content-type": "application/json",
        }
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._url, json=self._request_payload(frame, prompt), headers=headers)
        except httpx.HTTPError as exc:
            raise AnalysisError(f"vision provider unreachable: {exc}") from exc

        if response.is_error:
            raise AnalysisError(_provider_message(response))

        try:
            body = response.json()
        except ValueError as exc:
            raise AnalysisError(f"vision provider returned a non-JSON body: {exc}") from exc
        blocks = body.get("content") if isinstance(body, dict) else None
        if not isinstance(blocks, list) or not all(isinstance(block, dict) for block in blocks):
            raise AnalysisError("vision provider returned an unexpected body")
        text = "".join(str(block.get("text", "")) for block in blocks if block.get("type") == "text")
        logger.debug("provider replied with %d characters (stop_reason=%s)", len(text), body.get("stop_reason"))
        return text
