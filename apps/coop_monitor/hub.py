from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from starlette.websockets import WebSocketDisconnect, WebSocketState

from packages.contracts.models import AnalysisResult

logger = logging.getLogger("coop_monitor.hub")


class Subscriber(Protocol):
    application_state: WebSocketState

    async def accept(self) -> None:
        ...

    async def send_text(self, data: str) -> None:
        ...


class BroadcastHub:
    """Fan-out of analysis results to connected overlay viewers.

    Membership is by identity. Only subscribers whose connection is open at
    publish time are written to; nothing is queued for the others.
    """

    def __init__(self) -> None:
        self._subscribers: list[Any] = []

    @property
    def count(self) -> int:
        return len(self._subscribers)

    async def connect(self, subscriber: Subscriber) -> None:
        # Registered before the handshake completes; publish skips it until then.
        self._subscribers.append(subscriber)
        await subscriber.accept()
        logger.info("overlay connected (clients=%d)", self.count)

    def disconnect(self, subscriber: Subscriber) -> None:
        self._subscribers = [s for s in self._subscribers if s is not subscriber]
        logger.info("overlay disconnected (clients=%d)", self.count)

    async def publish(self, result: AnalysisResult) -> int:
        message = json.dumps(result, allow_nan=False)
        delivered = 0
        for subscriber in list(self._subscribers):
            if subscriber.application_state != WebSocketState.CONNECTED:
                continue
            try:
                await subscriber.send_text(message)
            except (WebSocketDisconnect, RuntimeError, OSError) as exc:
                logger.warning("failed to push result to a subscriber: %s", exc)
                continue
            delivered += 1
        logger.info("broadcast to %d of %d clients", delivered, self.count)
        return delivered
