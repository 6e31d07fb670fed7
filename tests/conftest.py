"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the Sensor Monitor test suite.
"""
import os
from datetime import UTC, datetime, timedelta

import numpy as np
import pytest

# Keep tests off the network and deterministic
os.environ.setdefault("SENSOR_API_URL", "")
os.environ.setdefault("SENSOR_PUSH_URL", "")
os.environ.setdefault("SIMULATION_SEED", "42")
os.environ.setdefault("SUMMARY_API_KEY", "")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=UTC)


@pytest.fixture
def make_reading(now):
    """Factory: make_reading(minutes=0, **metrics) → SensorReading at now + minutes."""
    from src.data.models import SensorReading

    def _make(minutes: float = 0, **values):
        base = {"temperature": 25.0, "humidity": 50.0, "soil_moisture": 40.0, "luminosity": 200.0}
        base.update(values)
        return SensorReading(timestamp=now + timedelta(minutes=minutes), **base)

    return _make


@pytest.fixture
def normal_reading(make_reading):
    return make_reading()


@pytest.fixture
def empty_reading(now):
    """A reading with every metric missing."""
    from src.data.models import SensorReading

    return SensorReading(timestamp=now)


class FakePoller:
    """Scripted stand-in for ReadingPoller: each fetch pops the next response, the last one repeats."""

    def __init__(self, responses=None, delay: float = 0.0):
        self.responses = list(responses or [])
        self.delay = delay
        self.calls = 0
        self.timeouts: list[float | None] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def fetch(self, timeout=None):
        import asyncio

        self.calls += 1
        self.timeouts.append(timeout)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        if not self.responses:
            from src.sync.errors import ConnectionFailure

            raise ConnectionFailure("no scripted response")
        response = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    async def close(self):
        self.closed = True


class FakePush:
    """Push source driven by the test: run() parks until the test releases it."""

    def __init__(self):
        import asyncio

        self.handler = None
        self.released = asyncio.Event()
        self.closed = False

    async def run(self, handler):
        self.handler = handler
        await self.released.wait()

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_poller_cls():
    return FakePoller


@pytest.fixture
def fake_push_cls():
    return FakePush


def payload(ts: datetime, **values) -> dict:
    """Raw feed payload with the sensor feed's Spanish keys."""
    data = {"timestamp": ts.isoformat(), "temperatura": 25.0, "humedad": 50.0,
            "humedad_suelo": 40.0, "luminosidad": 200.0}
    data.update(values)
    return data


@pytest.fixture
def make_payload(now):
    def _make(minutes: float = 0, **values):
        return payload(now + timedelta(minutes=minutes), **values)

    return _make
