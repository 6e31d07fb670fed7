"""
src/sync/synchronizer.py
────────────────────────
Live data synchronizer: reconciles the push channel and the polling fallback.

State machine:
  INITIALIZING ──push handshake ok──────────────▶ CONNECTED_PUSH
  INITIALIZING ──push fails / no push, history──▶ POLLING
  INITIALIZING ──push fails, no history─────────▶ ERROR
  CONNECTED_PUSH ──push drops──────────────────▶ POLLING | ERROR
  POLLING | ERROR ──push handshake ok──────────▶ CONNECTED_PUSH
  POLLING ──poll fails, no history─────────────▶ ERROR
  ERROR ──poll succeeds────────────────────────▶ POLLING

Polling runs only outside CONNECTED_PUSH; a push handshake cancels it and
triggers one catch-up pull. Without a push channel, start() runs that
catch-up itself to seed the history. At most one pull is in flight at a
time; a poll tick that finds one outstanding is skipped.

Every reading goes parse → validate → append → alerts → trends, in that
order, on the event loop. Failures only change connection state: history
and alerts are never cleared here.
"""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Protocol

from config.sensors import Metric
from config.settings import settings
from src.analytics.alert_rules import AlertRuleEngine
from src.analytics.trends import compute_trends
from src.data.history import HistoryBuffer
from src.data.models import (
    Alert,
    Channel,
    ConnectionState,
    FailureKind,
    SensorReading,
    SyncStatus,
    TrendDelta,
)
from src.data.validation import parse_reading, validate
from src.sync.errors import DataFailure, TelemetryError, ValidationFailure

logger = logging.getLogger(__name__)


class SyncState(str, Enum):
    INITIALIZING = "initializing"
    CONNECTED_PUSH = "connected_push"
    POLLING = "polling"
    ERROR = "error"


class Poller(Protocol):
    async def fetch(self, timeout: float | None = None) -> list[Any]: ...

    async def close(self) -> None: ...


class PushSource(Protocol):
    async def run(self, handler: Any) -> None: ...

    async def close(self) -> None: ...


@dataclass(frozen=True)
class ReadingUpdate:
    reading: SensorReading
    channel: Channel
    trends: dict[Metric, TrendDelta] = field(default_factory=dict)
    new_alerts: list[Alert] = field(default_factory=list)


Listener = Callable[[ReadingUpdate], None]


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class LiveDataSynchronizer:
    def __init__(
        self,
        poller: Poller,
        history: HistoryBuffer,
        rules: AlertRuleEngine,
        push: PushSource | None = None,
        poll_interval: float = settings.POLL_INTERVAL_S,
        poll_timeout: float = settings.POLL_TIMEOUT_S,
        catchup_timeout: float = settings.CATCHUP_TIMEOUT_S,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._poller = poller
        self._push = push
        self._history = history
        self._rules = rules
        self._poll_interval = poll_interval
        self._poll_timeout = poll_timeout
        self._catchup_timeout = catchup_timeout
        self._clock = clock

        self._state = SyncState.INITIALIZING
        self._connection = ConnectionState()
        self._previous: SensorReading | None = None
        self._trends: dict[Metric, TrendDelta] = {}
        self._listeners: list[Listener] = []

        self._pull_in_flight = False
        self._poll_task: asyncio.Task | None = None
        self._push_task: asyncio.Task | None = None
        self._pull_tasks: set[asyncio.Task] = set()
        self._running = False

        self.poll_requests = 0
        self.skipped_ticks = 0

    # ── Read-only views ───────────────────────────────────────────────────────

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def connection(self) -> ConnectionState:
        return self._connection

    @property
    def trends(self) -> dict[Metric, TrendDelta]:
        return dict(self._trends)

    @property
    def polling(self) -> bool:
        return self._poll_task is not None and not self._poll_task.done()

    def add_listener(self, listener: Listener) -> None:
        self._listeners.append(listener)

    # ── Lifecycle ─────────────────────────────────────────────────────────────

    async def start(self) -> None:
        if self._running:
            return
        self._running = True
        logger.info("Synchronizer starting")
        if self._push is not None:
            self._push_task = asyncio.create_task(self._run_push(), name="push-channel")
        else:
            self._fall_back_to_polling("no push channel configured")
            await self.catch_up(Channel.POLL)

    async def stop(self) -> None:
        """Cancel polling, pulls and the push task; close transports."""
        self._running = False
        tasks = [t for t in (self._poll_task, self._push_task, *self._pull_tasks) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._poll_task = None
        self._push_task = None
        self._pull_tasks.clear()

        if self._push is not None:
            await self._push.close()
        await self._poller.close()
        logger.info("Synchronizer stopped")

    async def disconnect_push(self) -> None:
        """Drop the push channel (and any pending reconnect) and hand over to polling."""
        if self._push_task is not None:
            self._push_task.cancel()
            await asyncio.gather(self._push_task, return_exceptions=True)
            self._push_task = None
        if self._push is not None:
            await self._push.close()
        await self.on_push_disconnected("push disconnected by owner")

    # ── Push channel callbacks ────────────────────────────────────────────────

    async def _run_push(self) -> None:
        await self._push.run(self)
        if self._running and self._state != SyncState.CONNECTED_PUSH:
            logger.warning("Push channel exhausted its reconnect attempts; staying on polling")

    async def on_push_connected(self) -> None:
        logger.info("Push channel connected; polling suspended")
        await self._cancel_polling()
        self._set_state(SyncState.CONNECTED_PUSH)
        self._connection = self._connection.model_copy(update={"channel": Channel.PUSH})
        await self.catch_up()

    async def on_push_message(self, payload: Any) -> None:
        try:
            reading = parse_reading(payload, received_at=self._clock())
            self._process(reading, Channel.PUSH)
        except TelemetryError as e:
            self._record_failure(e, Channel.PUSH)

    async def on_push_disconnected(self, reason: str) -> None:
        if not self._running:
            return
        if self._state == SyncState.CONNECTED_PUSH:
            logger.warning(f"Push channel lost: {reason}")
        else:
            logger.debug(f"Push channel unavailable: {reason}")
        self._fall_back_to_polling(reason)

    # ── Pulls ─────────────────────────────────────────────────────────────────

    async def catch_up(self, channel: Channel = Channel.PUSH) -> int:
        """Pull recent history once and append readings newer than what we hold."""
        return await self._single_flight(lambda: self._catch_up(channel), channel)

    async def pull_latest(self) -> int:
        """One poll tick: fetch and process the most recent reading."""
        return await self._single_flight(self._pull_latest, Channel.POLL)

    async def _single_flight(
        self,
        pull: Callable[[], Awaitable[int]],
        channel: Channel,
    ) -> int:
        if self._pull_in_flight:
            self.skipped_ticks += 1
            logger.debug("Pull already in flight; tick skipped")
            return 0
        self._pull_in_flight = True
        try:
            return await pull()
        except TelemetryError as e:
            self._record_failure(e, channel)
            return 0
        finally:
            self._pull_in_flight = False

    async def _catch_up(self, channel: Channel) -> int:
        received_at = self._clock()
        payload = await self._poller.fetch(timeout=self._catchup_timeout)
        latest = self._history.latest()

        processed = 0
        rejected = 0
        for item in payload:
            try:
                reading = parse_reading(item, received_at=received_at)
                if latest is not None and reading.timestamp <= latest.timestamp:
                    continue
                self._process(reading, channel)
                processed += 1
            except (DataFailure, ValidationFailure) as e:
                rejected += 1
                logger.debug(f"Catch-up item dropped: {e.message}")

        if rejected:
            logger.warning(f"Catch-up pull dropped {rejected} unusable item(s)")
            if not processed:
                raise DataFailure(f"Catch-up batch had no usable reading ({rejected} rejected)")
        logger.info(f"Catch-up pull processed {processed} reading(s)")
        return processed

    async def _pull_latest(self) -> int:
        self.poll_requests += 1
        payload = await self._poller.fetch(timeout=self._poll_timeout)
        reading = parse_reading(payload[-1], received_at=self._clock())
        latest = self._history.latest()
        if latest is not None and reading.timestamp <= latest.timestamp:
            logger.debug("Poll returned no newer reading")
            self._mark_synced(Channel.POLL)
            return 0
        self._process(reading, Channel.POLL)
        return 1

    # ── Polling loop ──────────────────────────────────────────────────────────

    def _fall_back_to_polling(self, reason: str) -> None:
        if self.polling or not self._running:
            return
        has_history = len(self._history) > 0
        self._set_state(SyncState.POLLING if has_history else SyncState.ERROR)
        self._connection = self._connection.model_copy(
            update={
                "channel": Channel.POLL,
                "status": SyncStatus.DEGRADED if has_history else SyncStatus.ERROR,
                "last_failure": FailureKind.CONNECTION,
                "detail": reason,
            }
        )
        self._poll_task = asyncio.create_task(self._poll_loop(), name="poll-loop")
        logger.info(f"Polling fallback started (every {self._poll_interval}s)")

    async def _poll_loop(self) -> None:
        while self._state != SyncState.CONNECTED_PUSH:
            if self._pull_in_flight:
                self.skipped_ticks += 1
                logger.debug("Poll tick skipped: previous pull outstanding")
            else:
                task = asyncio.create_task(self.pull_latest(), name="poll-pull")
                self._pull_tasks.add(task)
                task.add_done_callback(self._pull_tasks.discard)
            await asyncio.sleep(self._poll_interval)

    async def _cancel_polling(self) -> None:
        tasks = [t for t in (self._poll_task, *self._pull_tasks) if t is not None]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._poll_task = None
        self._pull_tasks.clear()
        self._pull_in_flight = False

    # ── Reading pipeline ──────────────────────────────────────────────────────

    def _process(self, reading: SensorReading, channel: Channel) -> ReadingUpdate:
        if not validate(reading, self._history.policy):
            raise ValidationFailure("Reading carries no usable metric")

        self._history.append(reading)
        new_alerts = self._rules.record(reading)
        trends = compute_trends(self._previous, reading)
        self._previous = reading
        self._trends = trends
        self._mark_synced(channel)

        if channel == Channel.POLL and self._state == SyncState.ERROR:
            self._set_state(SyncState.POLLING)

        update = ReadingUpdate(reading=reading, channel=channel, trends=trends, new_alerts=new_alerts)
        for alert in new_alerts:
            logger.info(f"Alert raised: {alert.kind.value} {alert.sensor.value} {alert.description}")
        self._notify(update)
        return update

    def _mark_synced(self, channel: Channel) -> None:
        self._connection = ConnectionState(
            channel=channel,
            status=SyncStatus.CONNECTED,
            last_successful_sync=self._clock(),
        )

    def _record_failure(self, error: TelemetryError, channel: Channel) -> None:
        has_history = len(self._history) > 0
        logger.warning(f"{channel.value} sync failed ({error.failure_kind.value}): {error.message}")
        self._connection = self._connection.model_copy(
            update={
                "status": SyncStatus.DEGRADED if has_history else SyncStatus.ERROR,
                "last_failure": error.failure_kind,
                "detail": error.message,
            }
        )
        if not has_history and self._state == SyncState.POLLING:
            self._set_state(SyncState.ERROR)

    def _notify(self, update: ReadingUpdate) -> None:
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                logger.exception("Reading listener failed")

    def _set_state(self, state: SyncState) -> None:
        if state != self._state:
            logger.info(f"Sync state {self._state.value} → {state.value}")
            self._state = state
