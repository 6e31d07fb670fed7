"""
src/data/history.py
───────────────────
Rolling in-memory history of validated readings.

Provides:
  - append()    : Add one reading (no-op when it fails validation)
  - extend()    : Add several readings in order
  - snapshot()  : Immutable copy, oldest first
  - latest()    : Most recent reading

Bounded FIFO: once `capacity` is exceeded the oldest readings are evicted.
Thread safety: every mutation and snapshot runs under one lock, so a
snapshot never sees a half-applied append.
"""
from __future__ import annotations

import threading
from collections import deque
from collections.abc import Iterable

from config.settings import settings
from src.data.models import SensorReading
from src.data.validation import ValidationPolicy, validate


class HistoryBuffer:
    def __init__(
        self,
        capacity: int = settings.HISTORY_CAPACITY,
        policy: ValidationPolicy = ValidationPolicy.ANY,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._capacity = capacity
        self._policy = policy
        self._readings: deque[SensorReading] = deque(maxlen=capacity)
        self._lock = threading.Lock()
        self._version = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def policy(self) -> ValidationPolicy:
        return self._policy

    @property
    def version(self) -> int:
        """Incremented on every mutation; lets readers detect change cheaply."""
        with self._lock:
            return self._version

    def append(self, reading: SensorReading) -> bool:
        if not validate(reading, self._policy):
            return False
        with self._lock:
            self._readings.append(reading)
            self._version += 1
        return True

    def extend(self, readings: Iterable[SensorReading]) -> int:
        accepted = [r for r in readings if validate(r, self._policy)]
        if not accepted:
            return 0
        with self._lock:
            self._readings.extend(accepted)
            self._version += 1
        return len(accepted)

    def snapshot(self) -> tuple[SensorReading, ...]:
        with self._lock:
            return tuple(self._readings)

    def latest(self) -> SensorReading | None:
        with self._lock:
            return self._readings[-1] if self._readings else None

    def clear(self) -> None:
        with self._lock:
            self._readings.clear()
            self._version += 1

    def __len__(self) -> int:
        with self._lock:
            return len(self._readings)
