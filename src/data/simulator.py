"""
src/data/simulator.py
─────────────────────
Synthetic environmental sensor feed.

Generates:
  - A backlog of readings at a fixed cadence (diurnal temperature/light cycle)
  - Occasional sensor drop-outs (metric reported as null)
  - A SimulatedPoller that stands in for the sensor API in demo mode

Design:
  - Reproducible with SIMULATION_SEED for consistent demos
  - Output is raw feed payloads (dicts with the feed's Spanish keys), so the
    same parse/validate path runs as with the real API
"""
from __future__ import annotations

import asyncio
import math
from datetime import UTC, datetime, timedelta
from typing import Any

import numpy as np
import pandas as pd

from config.settings import settings
from src.data.models import SensorReading

# ── Baseline operating points ─────────────────────────────────────────────────

BASELINES: dict[str, float] = {
    "temperatura": 27.0,
    "humedad": 55.0,
    "humedad_suelo": 40.0,
    "luminosidad": 250.0,
}

# Diurnal swing amplitude (peak at 14:00 local solar time)
AMPLITUDE: dict[str, float] = {
    "temperatura": 7.0,
    "humedad": -15.0,   # humidity falls as temperature rises
    "humedad_suelo": -4.0,
    "luminosidad": 220.0,
}

# Noise scales (σ)
NOISE: dict[str, float] = {
    "temperatura": 0.4,
    "humedad": 1.5,
    "humedad_suelo": 0.8,
    "luminosidad": 15.0,
}

LIMITS: dict[str, tuple[float, float]] = {
    "temperatura": (-10.0, 60.0),
    "humedad": (0.0, 100.0),
    "humedad_suelo": (0.0, 100.0),
    "luminosidad": (0.0, 1_000.0),
}


def _diurnal(ts: datetime) -> float:
    """-1..1 daily cycle peaking at 14:00 UTC."""
    hours = ts.hour + ts.minute / 60.0
    return math.cos((hours - 14.0) / 24.0 * 2.0 * math.pi)


def generate_payload(
    ts: datetime,
    rng: np.random.Generator,
    dropout: float = 0.02,
) -> dict[str, Any]:
    """One raw feed payload; each metric independently drops out with probability `dropout`."""
    cycle = _diurnal(ts)
    payload: dict[str, Any] = {"timestamp": ts.isoformat()}
    for key, base in BASELINES.items():
        if rng.random() < dropout:
            payload[key] = None
            continue
        value = base + AMPLITUDE[key] * cycle + rng.normal(0, NOISE[key])
        if key == "luminosidad":
            value = max(value, 0.0)
        lo, hi = LIMITS[key]
        payload[key] = round(float(np.clip(value, lo, hi)), 2)
    return payload


def generate_history(
    seed: int = settings.SIMULATION_SEED,
    count: int = 120,
    interval: timedelta = timedelta(minutes=1),
    end: datetime | None = None,
    dropout: float = 0.02,
) -> list[dict[str, Any]]:
    """
    Generate `count` payloads spaced `interval` apart, ending at `end` (now by default).
    Returned oldest first, like the sensor API.
    """
    rng = np.random.default_rng(seed)
    end_ts = (end or datetime.now(tz=UTC)).replace(microsecond=0)
    start_ts = end_ts - interval * (count - 1)
    return [generate_payload(start_ts + interval * i, rng, dropout) for i in range(count)]


def to_dataframe(readings: list[SensorReading]) -> pd.DataFrame:
    """Convert a list of SensorReadings to a pandas DataFrame."""
    return pd.DataFrame([r.model_dump() for r in readings])


class SimulatedPoller:
    """
    Stand-in for the sensor API.

    The first fetch returns a backlog; each later fetch appends one fresh
    reading stamped with the current time.
    """

    def __init__(
        self,
        seed: int = settings.SIMULATION_SEED,
        backlog: int = 120,
        dropout: float = 0.02,
        latency: float = 0.05,
    ):
        self._rng = np.random.default_rng(seed)
        self._dropout = dropout
        self._latency = latency
        self._buffer = generate_history(seed=seed, count=backlog, dropout=dropout)
        self._max_buffer = max(backlog, 1)

    async def fetch(self, timeout: float | None = None) -> list[dict[str, Any]]:
        await asyncio.sleep(self._latency)
        now = datetime.now(tz=UTC).replace(microsecond=0)
        if not self._buffer or self._buffer[-1]["timestamp"] < now.isoformat():
            self._buffer.append(generate_payload(now, self._rng, self._dropout))
            self._buffer = self._buffer[-self._max_buffer:]
        return list(self._buffer)

    async def close(self) -> None:
        return None
