from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from apps.coop_monitor.adapters import ScreenCapture
from apps.coop_monitor.analyzer import VisionAnalyzer
from apps.coop_monitor.config import Settings
from apps.coop_monitor.hub import BroadcastHub
from apps.coop_monitor.logging_utils import configure_logging
from apps.coop_monitor.providers import AnthropicVisionProvider
from apps.coop_monitor.service import AnalysisLoop, FrameAnalyzer, FrameSource
from packages.contracts.models import AnalyzeResponse, ErrorResponse, FrameResponse, HealthResponse

configure_logging()

logger = logging.getLogger("coop_monitor.main")


def _error(exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(error=str(exc)).model_dump())


def create_app(
    settings: Settings | None = None,
    capture: FrameSource | None = None,
    analyzer: FrameAnalyzer | None = None,
    hub: BroadcastHub | None = None,
    start_loop: bool = True,
) -> FastAPI:
    settings = settings or Settings.from_env()
    hub = hub or BroadcastHub()
    capture = capture or ScreenCapture(
        region=settings.capture_region,
        max_edge=settings.max_edge,
        quality=settings.jpeg_quality,
    )
    analyzer = analyzer or VisionAnalyzer(
        AnthropicVisionProvider(
            api_key=settings.api_key,
            model=settings.model,
            max_tokens=settings.max_tokens,
            base_url=settings.api_url,
        )
    )
    loop = AnalysisLoop(
        capture=capture,
        analyzer=analyzer,
        hub=hub,
        interval_seconds=settings.interval_seconds,
        initial_delay_seconds=settings.initial_delay_seconds,
    )

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        logger.info(
            "coop monitor running overlay=http://localhost:%s/overlay.html interval=%ss api_key=%s",
            settings.port,
            settings.interval_seconds,
            "set" if settings.api_key else "MISSING",
        )
        if start_loop:
            loop.start()
        try:
            yield
        finally:
            await loop.stop()

    app = FastAPI(title="Coop Monitor", version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.hub = hub
    app.state.loop = loop
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

    @app.get("/api/health", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(clients=hub.count, interval=settings.interval_ms)

    @app.post("/api/analyze", response_model=AnalyzeResponse, responses={500: {"model": ErrorResponse}})
    async def analyze():
        try:
            result = await loop.run_cycle()
        except Exception as exc:
            logger.error("manual analysis failed: %s", exc)
            return _error(exc)
        return AnalyzeResponse(result=result)

    @app.get("/api/frame", response_model=FrameResponse, responses={500: {"model": ErrorResponse}})
    async def frame():
        try:
            captured = await loop.capture_frame()
        except Exception as exc:
            logger.error("frame capture failed: %s", exc)
            return _error(exc)
        return FrameResponse(image=captured.base64)

    async def subscribe(websocket: WebSocket) -> None:
        try:
            await hub.connect(websocket)
            # Viewers only listen; anything they send is discarded.
            while True:
                message = await websocket.receive()
                if message["type"] == "websocket.disconnect":
                    break
        finally:
            hub.disconnect(websocket)

    app.add_api_websocket_route("/ws", subscribe)
    app.add_api_websocket_route("/", subscribe)

    if settings.static_dir.is_dir():
        app.mount("/", StaticFiles(directory=settings.static_dir, html=True), name="overlay")
    else:
        logger.warning("static dir %s not found; overlay assets will not be served", settings.static_dir)

    return app


app = create_app()
