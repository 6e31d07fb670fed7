"""
tests/test_monitor.py
──────────────────────
Tests for the engine owner: wiring from settings, background loop, snapshots.
"""
import asyncio

import pytest

from config.sensors import Metric
from config.settings import Settings
from src.data.simulator import SimulatedPoller
from src.data.validation import ValidationPolicy
from src.sync.monitor import TelemetryMonitor
from src.sync.synchronizer import SyncState
from src.sync.transports import PushChannel, ReadingPoller


@pytest.fixture
def demo_settings() -> Settings:
    return Settings(
        SENSOR_API_URL="",
        SENSOR_PUSH_URL="",
        POLL_INTERVAL_S=0.05,
        HISTORY_CAPACITY=50,
        SIMULATION_SEED=3,
    )


class TestFromSettings:
    def test_demo_mode_uses_simulator(self, demo_settings):
        monitor = TelemetryMonitor.from_settings(demo_settings)
        assert isinstance(monitor.synchronizer._poller, SimulatedPoller)
        assert monitor.synchronizer._push is None

    def test_real_endpoints(self, demo_settings):
        demo_settings.SENSOR_API_URL = "http://sensors.test/api"
        demo_settings.SENSOR_PUSH_URL = "ws://sensors.test/live"
        demo_settings.VALIDATION_POLICY = "ALL"
        monitor = TelemetryMonitor.from_settings(demo_settings)
        assert isinstance(monitor.synchronizer._poller, ReadingPoller)
        assert isinstance(monitor.synchronizer._push, PushChannel)
        assert monitor._history.policy == ValidationPolicy.ALL


class TestLifecycle:
    def test_run_coroutine_requires_start(self, demo_settings):
        monitor = TelemetryMonitor.from_settings(demo_settings)
        coro = asyncio.sleep(0)
        with pytest.raises(RuntimeError):
            monitor.run_coroutine(coro)
        coro.close()

    def test_start_serves_snapshots(self, demo_settings):
        monitor = TelemetryMonitor.from_settings(demo_settings)
        monitor.start()
        try:
            assert monitor.state() == SyncState.POLLING
            history = monitor.history()
            assert 0 < len(history) <= 50
            assert monitor.latest() is not None
            assert monitor.connection().last_successful_sync is not None
            assert set(monitor.series()) == set(Metric)
            assert monitor.run_coroutine(asyncio.sleep(0, result="ok"), timeout=2) == "ok"
            assert isinstance(monitor.alerts(), list)
            assert isinstance(monitor.trends(), dict)
        finally:
            monitor.stop()

    def test_stop_is_idempotent(self, demo_settings):
        monitor = TelemetryMonitor.from_settings(demo_settings)
        monitor.stop()
        monitor.start()
        monitor.stop()
        monitor.stop()
