"""
tests/test_simulator.py
────────────────────────
Tests for the synthetic sensor feed.
"""
from datetime import UTC, datetime, timedelta

import pandas as pd
import pytest

from src.data.simulator import (
    LIMITS,
    SimulatedPoller,
    generate_history,
    generate_payload,
    to_dataframe,
)
from src.data.validation import parse_reading


class TestGeneratePayload:
    def test_uses_feed_keys(self, rng, now):
        payload = generate_payload(now, rng, dropout=0.0)
        assert set(payload) == {"timestamp", "temperatura", "humedad", "humedad_suelo", "luminosidad"}

    def test_values_within_limits(self, rng, now):
        for i in range(200):
            payload = generate_payload(now + timedelta(minutes=i), rng)
            for key, (lo, hi) in LIMITS.items():
                if payload[key] is not None:
                    assert lo <= payload[key] <= hi

    def test_full_dropout(self, rng, now):
        payload = generate_payload(now, rng, dropout=1.0)
        assert all(payload[k] is None for k in LIMITS)

    def test_parses_into_reading(self, rng, now):
        reading = parse_reading(generate_payload(now, rng, dropout=0.0))
        assert reading.timestamp == now
        assert reading.temperature is not None


class TestGenerateHistory:
    def test_count_and_order(self):
        end = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
        history = generate_history(seed=42, count=30, end=end)
        assert len(history) == 30
        stamps = [p["timestamp"] for p in history]
        assert stamps == sorted(stamps)
        assert stamps[-1] == end.isoformat()

    def test_reproducibility(self):
        end = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
        assert generate_history(seed=7, count=20, end=end) == generate_history(seed=7, count=20, end=end)

    def test_different_seeds_differ(self):
        end = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
        assert generate_history(seed=1, count=20, end=end) != generate_history(seed=2, count=20, end=end)


class TestToDataframe:
    def test_returns_dataframe(self):
        readings = [parse_reading(p) for p in generate_history(seed=42, count=10, dropout=0.0)]
        df = to_dataframe(readings)
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 10
        assert "soil_moisture" in df.columns


class TestSimulatedPoller:
    @pytest.mark.asyncio
    async def test_backlog_then_growth(self):
        poller = SimulatedPoller(seed=42, backlog=10, latency=0)
        first = await poller.fetch()
        assert 10 <= len(first) <= 11
        second = await poller.fetch()
        assert len(second) <= 11
        assert second[-1]["timestamp"] >= first[-1]["timestamp"]
        await poller.close()
