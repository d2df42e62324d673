"""Pytest fixtures for feed, advisory and API tests."""

import json
import random
from datetime import datetime, timedelta, timezone

import pytest

from core.config import Settings
from feed.generator import FeedGenerator

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

VALID_ADVISORY = {
    "riskAssessment": {"overallRisk": "high", "score": 72, "factors": ["Cyclone approaching", "Flooding in Chennai"]},
    "recommendations": {
        "immediate": ["Evacuate coastal villages"],
        "shortTerm": ["Stage rescue teams in Chennai"],
        "longTerm": ["Improve drainage"],
    },
    "resourceAllocation": {"priority": ["RES005", "RES006"], "suggestions": ["Move NDRF team to coast"]},
    "summary": "Cyclone and flash flooding dominate current risk.",
}


class SequenceRandom:
    """Fixed-sequence random source. Values are reused cyclically."""

    def __init__(self, values):
        self.values = list(values)
        self.calls = 0

    def random(self):
        v = self.values[self.calls % len(self.values)]
        self.calls += 1
        return v

    def uniform(self, a, b):
        return a + (b - a) * self.random()

    def choice(self, seq):
        return seq[min(int(self.random() * len(seq)), len(seq) - 1)]


class StepClock:
    """Clock that advances by `step` on every call."""

    def __init__(self, start=NOW, step=timedelta(seconds=5)):
        self.now = start
        self.step = step

    def __call__(self):
        current = self.now
        self.now = self.now + self.step
        return current


class FakeTransport:
    """Records calls; returns `response` or raises it when it is an exception."""

    def __init__(self, response=None, on_call=None):
        self.response = response
        self.on_call = on_call
        self.calls = []

    async def __call__(self, **kwargs):
        self.calls.append(kwargs)
        if self.on_call is not None:
            self.on_call(kwargs)
        if isinstance(self.response, Exception):
            raise self.response
        return self.response


@pytest.fixture
def settings():
    """Settings with no OpenAI key (advisory gate closed)."""
    return Settings(openai_api_key=None)


@pytest.fixture
def ai_settings():
    return Settings(openai_api_key="sk-test", openai_model="gpt-test")


@pytest.fixture
def fixed_clock():
    return lambda: NOW


@pytest.fixture
def generator(settings, fixed_clock):
    """Seeded generator with a fixed clock."""
    return FeedGenerator(settings=settings, rng=random.Random(42), clock=fixed_clock)


@pytest.fixture
def valid_advisory_json():
    return json.dumps(VALID_ADVISORY)

