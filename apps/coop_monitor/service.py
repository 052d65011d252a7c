from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import Protocol

from packages.contracts.errors import CoopMonitorError
from packages.contracts.models import AnalysisResult
from packages.contracts.utils import new_cycle_id
from packages.imaging import EncodedFrame

from .hub import BroadcastHub
from .logging_utils import CycleAdapter

logger = logging.getLogger("coop_monitor.service")


class FrameSource(Protocol):
    def capture(self) -> EncodedFrame:
        ...


class FrameAnalyzer(Protocol):
    async def analyze(self, frame: EncodedFrame) -> AnalysisResult:
        ...


class AnalysisLoop:
    """Capture -> analyze -> broadcast, on a timer and on demand.

    The timer fires on a fixed cadence measured from its start, not from the
    end of the previous cycle. Ticks that fall due while a cycle is still
    running are skipped, so timer cycles never overlap each other. A manual
    ``run_cycle`` call is not serialized against them.
    """

    def __init__(
        self,
        capture: FrameSource,
        analyzer: FrameAnalyzer,
        hub: BroadcastHub,
        interval_seconds: float,
        initial_delay_seconds: float = 5.0,
    ) -> None:
        self.capture = capture
        self.analyzer = analyzer
        self.hub = hub
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self._tasks: list[asyncio.Task] = []

    @property
    def running(self) -> bool:
        return any(not task.done() for task in self._tasks)

    async def capture_frame(self) -> EncodedFrame:
        return await asyncio.to_thread(self.capture.capture)

    async def run_cycle(self, cycle_id: str | None = None) -> AnalysisResult:
        log = CycleAdapter(logger, {"cycle_id": cycle_id or new_cycle_id()})
        log.info("running analysis")
        frame = await self.capture_frame()
        result = await self.analyzer.analyze(frame)
        delivered = await self.hub.publish(result)
        log.info("cycle complete, delivered to %d clients", delivered)
        return result

    async def run_scheduled_cycle(self) -> AnalysisResult | None:
        cycle_id = new_cycle_id()
        log = CycleAdapter(logger, {"cycle_id": cycle_id})
        try:
            return await self.run_cycle(cycle_id)
        except CoopMonitorError as exc:
            log.error("analysis cycle failed: %s", exc)
        except Exception:
            log.exception("analysis cycle failed unexpectedly")
        return None

    async def _first_cycle(self) -> None:
        await asyncio.sleep(self.initial_delay_seconds)
        await self.run_scheduled_cycle()

    async def _timer(self) -> None:
        clock = asyncio.get_running_loop()
        next_at = clock.time() + self.interval_seconds
        while True:
            await asyncio.sleep(max(0.0, next_at - clock.time()))
            await self.run_scheduled_cycle()
            next_at += self.interval_seconds
            now = clock.time()
            if next_at <= now:
                # Overran one or more ticks; drop them rather than firing back to back.
                missed = int((now - next_at) // self.interval_seconds) + 1
                logger.warning("analysis cycle overran %d tick(s)", missed)
                next_at += missed * self.interval_seconds

    def start(self) -> None:
        if self.running:
            return
        logger.info(
            "starting analysis loop interval=%ss first_cycle_in=%ss",
            self.interval_seconds,
            self.initial_delay_seconds,
        )
        self._tasks = [
            asyncio.create_task(self._first_cycle(), name="coop-monitor-first-cycle"),
            asyncio.create_task(self._timer(), name="coop-monitor-timer"),
        ]

    async def stop(self) -> None:
        tasks, self._tasks = self._tasks, []
        for task in tasks:
            task.cancel()
        for task in tasks:
            with contextlib.suppress(asyncio.CancelledError):
                await task
