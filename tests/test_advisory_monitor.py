"""Tests for AdvisoryMonitor: concurrent refresh, close semantics, error recording."""

import asyncio
import random

from advisory.client import AdvisoryClient
from advisory.monitor import AdvisoryMonitor
from conftest import NOW, FakeTransport
from feed.generator import FeedGenerator


class ConcurrencyTransport:
    """Sleeps inside each call and records the peak number of overlapping calls."""

    def __init__(self, analysis_json):
        self.analysis_json = analysis_json
        self.active = 0
        self.peak = 0
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(0.05)
        finally:
            self.active -= 1
        if kwargs["max_tokens"] == 1000:
            return self.analysis_json
        return "Heavy rain expected."


class BrokenClient:
    enabled = True

    async def analyze(self, snapshot):
        raise RuntimeError("analysis backend exploded")

    async def predict(self, history, conditions):
        return "n/a"


def _snapshot(settings):
    return FeedGenerator(settings=settings, rng=random.Random(2), clock=lambda: NOW).current_snapshot()


class TestRefresh:
    def test_disabled_is_noop(self, settings):
        transport = FakeTransport("x")
        monitor = AdvisoryMonitor(AdvisoryClient(settings=settings, transport=transport))
        assert asyncio.run(monitor.refresh(_snapshot(settings))) is False
        assert transport.calls == []
        assert monitor.to_dict()["enabled"] is False
        assert monitor.result is None

    def test_analyze_and_predict_run_concurrently(self, ai_settings, valid_advisory_json):
        transport = ConcurrencyTransport(valid_advisory_json)
        monitor = AdvisoryMonitor(AdvisoryClient(settings=ai_settings, transport=transport), clock=lambda: NOW)
        assert asyncio.run(monitor.refresh(_snapshot(ai_settings))) is True
        assert len(transport.calls) == 2
        assert transport.peak == 2
        assert monitor.result.score == 72
        assert monitor.prediction == "Heavy rain expected."
        assert monitor.last_updated == NOW
        assert monitor.in_flight is False

    def test_to_dict(self, ai_settings, valid_advisory_json):
        monitor = AdvisoryMonitor(
            AdvisoryClient(settings=ai_settings, transport=ConcurrencyTransport(valid_advisory_json)),
            clock=lambda: NOW,
        )
        asyncio.run(monitor.refresh(_snapshot(ai_settings)))
        d = monitor.to_dict()
        assert d["enabled"] is True
        assert d["result"]["risk_assessment"]["overall_risk"] == "high"
        assert d["last_updated"] == "2025-01-01T12:00:00Z"
        assert d["error"] is None

    def test_in_flight_while_running(self, ai_settings, valid_advisory_json):
        monitor = AdvisoryMonitor(AdvisoryClient(settings=ai_settings, transport=ConcurrencyTransport(valid_advisory_json)))
        seen = []

        async def scenario():
            task = asyncio.create_task(monitor.refresh(_snapshot(ai_settings)))
            await asyncio.sleep(0.01)
            seen.append(monitor.in_flight)
            await task
            seen.append(monitor.in_flight)

        asyncio.run(scenario())
        assert seen == [True, False]

    def test_failure_recorded_and_previous_result_kept(self, ai_settings, valid_advisory_json):
        good = AdvisoryMonitor(
            AdvisoryClient(settings=ai_settings, transport=ConcurrencyTransport(valid_advisory_json)),
        )
        asyncio.run(good.refresh(_snapshot(ai_settings)))
        previous = good.result

        good.client = BrokenClient()
        assert asyncio.run(good.refresh(_snapshot(ai_settings))) is False
        assert good.error == "analysis backend exploded"
        assert good.result == previous


class TestClose:
    def test_results_after_close_are_discarded(self, ai_settings, valid_advisory_json):
        monitor = AdvisoryMonitor(AdvisoryClient(settings=ai_settings, transport=None))
        transport = FakeTransport(valid_advisory_json, on_call=lambda _kwargs: monitor.close())
        monitor.client = AdvisoryClient(settings=ai_settings, transport=transport)

        assert asyncio.run(monitor.refresh(_snapshot(ai_settings))) is False
        assert transport.calls
        assert monitor.closed
        assert monitor.result is None
        assert monitor.prediction is None
        assert monitor.last_updated is None

    def test_refresh_after_close_is_noop(self, ai_settings, valid_advisory_json):
        transport = FakeTransport(valid_advisory_json)
        monitor = AdvisoryMonitor(AdvisoryClient(settings=ai_settings, transport=transport))
        monitor.close()
        assert asyncio.run(monitor.refresh(_snapshot(ai_settings))) is False
        assert transport.calls == []

    def test_run_periodic_stops_on_close(self, ai_settings, valid_advisory_json):
        transport = FakeTransport(valid_advisory_json)
        monitor = AdvisoryMonitor(AdvisoryClient(settings=ai_settings, transport=transport))
        snapshot = _snapshot(ai_settings)

        async def scenario():
            task = asyncio.create_task(monitor.run_periodic(lambda: snapshot, 0.01))
            await asyncio.sleep(0.1)
            monitor.close()
            await asyncio.wait_for(task, timeout=1)

        asyncio.run(scenario())
        assert monitor.result is not None
        assert len(transport.calls) >= 2
