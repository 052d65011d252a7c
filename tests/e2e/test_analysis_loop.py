from __future__ import annotations

import asyncio

import pytest

from apps.coop_monitor.hub import BroadcastHub
from apps.coop_monitor.service import AnalysisLoop
from packages.contracts.errors import AnalysisError, CaptureError
from tests.fixtures.sample_data import make_sample_frame


class RecordingHub(BroadcastHub):
    def __init__(self) -> None:
        super().__init__()
        self.published: list[dict] = []

    async def publish(self, result) -> int:
        self.published.append(result)
        return await super().publish(result)


class FixedCapture:
    def capture(self):
        return make_sample_frame()


class FailingCapture:
    def capture(self):
        raise CaptureError("screen capture failed: permission denied")


class CountingAnalyzer:
    def __init__(self, result: dict | None = None, error: Exception | None = None) -> None:
        self.result = result
        self.error = error
        self.calls = 0

    async def analyze(self, frame):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result


def _loop(capture, analyzer, hub, interval: float = 30.0, delay: float = 5.0) -> AnalysisLoop:
    return AnalysisLoop(
        capture=capture,
        analyzer=analyzer,
        hub=hub,
        interval_seconds=interval,
        initial_delay_seconds=delay,
    )


def test_one_cycle_publishes_the_analyzer_record_exactly_once() -> None:
    record = {"temperature": 70, "eggs": 3, "chickens": [{"name": "Goldie", "state": "active", "activity": "Preening"}]}
    hub = RecordingHub()
    loop = _loop(FixedCapture(), CountingAnalyzer(result=record), hub)

    result = asyncio.run(loop.run_scheduled_cycle())

    assert result == record
    assert hub.published == [record]


def test_failing_analyzer_publishes_nothing() -> None:
    hub = RecordingHub()
    loop = _loop(FixedCapture(), CountingAnalyzer(error=AnalysisError("HTTP 500: boom")), hub)

    assert asyncio.run(loop.run_scheduled_cycle()) is None
    assert hub.published == []


def test_failing_capture_never_reaches_analyzer() -> None:
    hub = RecordingHub()
    analyzer = CountingAnalyzer(result={"eggs": 1})
    loop = _loop(FailingCapture(), analyzer, hub)

    assert asyncio.run(loop.run_scheduled_cycle()) is None
    assert analyzer.calls == 0
    assert hub.published == []


def test_unexpected_errors_are_contained() -> None:
    hub = RecordingHub()
    loop = _loop(FixedCapture(), CountingAnalyzer(error=KeyError("content")), hub)
    assert asyncio.run(loop.run_scheduled_cycle()) is None


def test_manual_cycle_propagates_failure() -> None:
    hub = RecordingHub()
    loop = _loop(FixedCapture(), CountingAnalyzer(error=AnalysisError("HTTP 500: boom")), hub)
    with pytest.raises(AnalysisError):
        asyncio.run(loop.run_cycle())


def test_timer_keeps_running_after_failed_cycles() -> None:
    hub = RecordingHub()
    analyzer = CountingAnalyzer(error=AnalysisError("HTTP 529: Overloaded"))
    loop = _loop(FixedCapture(), analyzer, hub, interval=0.01, delay=0.0)

    async def scenario() -> bool:
        loop.start()
        await asyncio.sleep(0.2)
        still_running = loop.running
        await loop.stop()
        return still_running

    assert asyncio.run(scenario()) is True
    assert analyzer.calls >= 2
    assert hub.published == []
    assert loop.running is False


def test_first_cycle_runs_after_initial_delay_only() -> None:
    hub = RecordingHub()
    analyzer = CountingAnalyzer(result={"eggs": 2})
    loop = _loop(FixedCapture(), analyzer, hub, interval=60.0, delay=0.01)

    async def scenario() -> None:
        loop.start()
        await asyncio.sleep(0.2)
        await loop.stop()

    asyncio.run(scenario())
    assert analyzer.calls == 1
    assert hub.published == [{"eggs": 2}]


class SlowAnalyzer:
    def __init__(self, duration: float) -> None:
        self.duration = duration
        self.starts: list[float] = []
        self.active = 0
        self.max_active = 0

    async def analyze(self, frame):
        self.starts.append(asyncio.get_running_loop().time())
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(self.duration)
        self.active -= 1
        return {"eggs": len(self.starts)}


def _run_for(loop: AnalysisLoop, seconds: float) -> None:
    async def scenario() -> None:
        loop.start()
        await asyncio.sleep(seconds)
        await loop.stop()

    asyncio.run(scenario())


def test_timer_cadence_does_not_include_cycle_time() -> None:
    analyzer = SlowAnalyzer(duration=0.2)
    loop = _loop(FixedCapture(), analyzer, RecordingHub(), interval=0.3, delay=60.0)

    _run_for(loop, 1.05)

    gaps = [b - a for a, b in zip(analyzer.starts, analyzer.starts[1:])]
    assert len(analyzer.starts) >= 2
    assert all(0.25 < gap < 0.42 for gap in gaps), gaps


def test_overrunning_cycles_skip_ticks_instead_of_overlapping() -> None:
    analyzer = SlowAnalyzer(duration=0.25)
    loop = _loop(FixedCapture(), analyzer, RecordingHub(), interval=0.1, delay=60.0)

    _run_for(loop, 0.9)

    assert len(analyzer.starts) >= 2
    assert analyzer.max_active == 1
    gaps = [b - a for a, b in zip(analyzer.starts, analyzer.starts[1:])]
    assert all(gap >= 0.24 for gap in gaps), gaps
