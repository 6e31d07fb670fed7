"""
src/sync/monitor.py
───────────────────
Owner of the telemetry engine.

Wires the history buffer, alert rule engine, lazy aggregator and live data
synchronizer together, runs the synchronizer's asyncio loop on a daemon
thread, and exposes read-only snapshots to the dashboard.

Thread model:
  - engine thread : asyncio loop; the only writer of history, alerts and
                    connection state
  - server thread : Dash callbacks; read snapshots, submit coroutines via
                    run_coroutine()
"""
from __future__ import annotations

import asyncio
import logging
import threading
from collections.abc import Coroutine
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from config.sensors import Metric
from config.settings import Settings, settings
from src.analytics.aggregator import LazyAggregator, Series
from src.analytics.alert_rules import AlertRuleEngine
from src.data.history import HistoryBuffer
from src.data.models import Alert, ConnectionState, SensorReading, TrendDelta
from src.data.simulator import SimulatedPoller
from src.data.validation import ValidationPolicy
from src.sync.synchronizer import LiveDataSynchronizer, SyncState
from src.sync.transports import PushChannel, ReadingPoller

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TelemetryMonitor:
    def __init__(
        self,
        synchronizer: LiveDataSynchronizer,
        history: HistoryBuffer,
        rules: AlertRuleEngine,
        aggregator: LazyAggregator,
    ):
        self.synchronizer = synchronizer
        self._history = history
        self._rules = rules
        self._aggregator = aggregator
        self._loop: asyncio.AbstractEventLoop | None = None
        self._thread: threading.Thread | None = None
        self._ready = threading.Event()

    @classmethod
    def from_settings(cls, cfg: Settings = settings) -> TelemetryMonitor:
        """Build the engine from configuration; no API URL means simulated feed."""
        history = HistoryBuffer(
            capacity=cfg.HISTORY_CAPACITY,
            policy=ValidationPolicy(cfg.VALIDATION_POLICY.lower()),
        )
        rules = AlertRuleEngine(max_display=cfg.MAX_ALERTS_DISPLAY)
        aggregator = LazyAggregator(
            history,
            bucket_minutes=cfg.BUCKET_MINUTES,
            tz=ZoneInfo(cfg.DISPLAY_TIMEZONE) if cfg.DISPLAY_TIMEZONE else None,
        )

        if cfg.SENSOR_API_URL:
            poller = ReadingPoller(cfg.SENSOR_API_URL, timeout=cfg.POLL_TIMEOUT_S)
        else:
            logger.info("SENSOR_API_URL not set; using simulated sensor feed")
            poller = SimulatedPoller(seed=cfg.SIMULATION_SEED)

        push = None
        if cfg.SENSOR_PUSH_URL:
            push = PushChannel(
                cfg.SENSOR_PUSH_URL,
                reconnect_attempts=cfg.PUSH_RECONNECT_ATTEMPTS,
                reconnect_delay=cfg.PUSH_RECONNECT_DELAY_S,
                handshake_timeout=cfg.CATCHUP_TIMEOUT_S,
            )

        synchronizer = LiveDataSynchronizer(
            poller=poller,
            history=history,
            rules=rules,
            push=push,
            poll_interval=cfg.POLL_INTERVAL_S,
            poll_timeout=cfg.POLL_TIMEOUT_S,
            catchup_timeout=cfg.CATCHUP_TIMEOUT_S,
        )
        return cls(synchronizer, history, rules, aggregator)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run_loop, name="telemetry-engine", daemon=True)
        self._thread.start()
        self._ready.wait()
        self.run_coroutine(self.synchronizer.start())
        logger.info("Telemetry engine started")

    def stop(self, timeout: float = 5.0) -> None:
        if self._loop is None or self._thread is None:
            return
        try:
            self.run_coroutine(self.synchronizer.stop(), timeout=timeout)
        finally:
            self._loop.call_soon_threadsafe(self._loop.stop)
            self._thread.join(timeout=timeout)
            self._thread = None
            self._loop = None
            self._ready.clear()
            logger.info("Telemetry engine stopped")

    def _run_loop(self) -> None:
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._loop = loop
        self._ready.set()
        try:
            loop.run_forever()
        finally:
            loop.close()

    def run_coroutine(self, coro: Coroutine[Any, Any, T], timeout: float | None = None) -> T:
        """Run `coro` on the engine loop and block for its result."""
        if self._loop is None:
            raise RuntimeError("Telemetry engine is not running")
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout)

    # ── Snapshots ─────────────────────────────────────────────────────────────

    def history(self) -> tuple[SensorReading, ...]:
        return self._history.snapshot()

    def latest(self) -> SensorReading | None:
        return self._history.latest()

    def connection(self) -> ConnectionState:
        return self.synchronizer.connection

    def state(self) -> SyncState:
        return self.synchronizer.state

    def trends(self) -> dict[Metric, TrendDelta]:
        return self.synchronizer.trends

    def series(self) -> Series:
        return self._aggregator.series()

    def alerts(self) -> list[Alert]:
        return self._rules.active_alerts()
