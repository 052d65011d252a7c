from __future__ import annotations

import httpx

from packages.contracts.models import AnalyzeResponse, FrameResponse, HealthResponse


class ControlApiError(RuntimeError):
    """The coop monitor answered a control request with an error body."""


def _raise_for_error(resp: httpx.Response) -> None:
    if resp.is_error:
        try:
            message = resp.json().get("error") or resp.text
        except ValueError:
            message = resp.text
        raise ControlApiError(f"{resp.status_code}: {message}")


class CoopMonitorClient:
    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 120.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout_seconds, transport=self._transport)

    def health(self) -> HealthResponse:
        with self._client() as client:
            resp = client.get(f"{self.base_url}/api/health")
            _raise_for_error(resp)
            return HealthResponse.model_validate(resp.json())

    def analyze(self) -> AnalyzeResponse:
        with self._client() as client:
            resp = client.post(f"{self.base_url}/api/analyze")
            _raise_for_error(resp)
            return AnalyzeResponse.model_validate(resp.json())

    def frame(self) -> FrameResponse:
        with self._client() as client:
            resp = client.get(f"{self.base_url}/api/frame")
            _raise_for_error(resp)
            return FrameResponse.model_validate(resp.json())
