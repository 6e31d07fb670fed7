"""
tests/test_aggregator.py
─────────────────────────
Tests for time-bucket aggregation.
"""
import os
import time
from datetime import UTC, datetime, timedelta, timezone
from zoneinfo import ZoneInfo

import pytest

from config.sensors import Metric
from src.analytics.aggregator import LazyAggregator, aggregate, to_chart_records
from src.data.history import HistoryBuffer
from src.data.models import SensorReading


class TestAggregate:
    def test_empty_history(self):
        series = aggregate([], tz=UTC)
        assert set(series) == set(Metric)
        assert all(buckets == [] for buckets in series.values())

    def test_fifteen_minute_buckets(self, make_reading):
        history = [
            make_reading(minutes=0, temperature=20.0),
            make_reading(minutes=5, temperature=22.0),
            make_reading(minutes=14, temperature=24.0),
            make_reading(minutes=15, temperature=30.0),
        ]
        series = aggregate(history, bucket_minutes=15, tz=UTC)
        temps = series[Metric.TEMPERATURE]
        assert [b.bucket_key for b in temps] == ["12:00", "12:15"]
        assert temps[0].mean_value == 22.0
        assert temps[1].mean_value == 30.0

    def test_mean_equals_member_mean(self, make_reading):
        values = [41.13, 47.29, 52.51]
        history = [make_reading(minutes=i, humidity=v) for i, v in enumerate(values)]
        series = aggregate(history, tz=UTC)
        assert series[Metric.HUMIDITY][0].mean_value == round(sum(values) / 3, 2)

    def test_rounding_per_metric(self, make_reading):
        history = [
            make_reading(minutes=0, temperature=20.04, humidity=33.333, luminosity=100.06),
            make_reading(minutes=1, temperature=20.08, humidity=33.334, luminosity=100.02),
        ]
        series = aggregate(history, tz=UTC)
        assert series[Metric.TEMPERATURE][0].mean_value == 20.1
        assert series[Metric.HUMIDITY][0].mean_value == 33.33
        assert series[Metric.LUMINOSITY][0].mean_value == 100.0

    def test_missing_values_excluded_from_mean(self, make_reading):
        history = [
            make_reading(minutes=0, soil_moisture=30.0),
            make_reading(minutes=1, soil_moisture=None),
            make_reading(minutes=2, soil_moisture=40.0),
        ]
        series = aggregate(history, tz=UTC)
        assert series[Metric.SOIL_MOISTURE][0].mean_value == 35.0

    def test_bucket_without_metric_is_omitted(self, make_reading):
        history = [
            make_reading(minutes=0, luminosity=100.0),
            make_reading(minutes=20, luminosity=None),
        ]
        series = aggregate(history, tz=UTC)
        assert [b.bucket_key for b in series[Metric.LUMINOSITY]] == ["12:00"]
        assert [b.bucket_key for b in series[Metric.TEMPERATURE]] == ["12:00", "12:15"]

    def test_invalid_readings_filtered(self, make_reading, empty_reading):
        history = [empty_reading, make_reading(minutes=1, temperature=21.0)]
        series = aggregate(history, tz=UTC)
        assert series[Metric.TEMPERATURE][0].mean_value == 21.0

    def test_labels_in_local_zone(self, make_reading):
        history = [make_reading(minutes=0)]
        series = aggregate(history, tz=timezone(timedelta(hours=-6)))
        assert series[Metric.TEMPERATURE][0].bucket_key == "06:00"

    def test_first_seen_order(self, make_reading):
        history = [make_reading(minutes=m) for m in (0, 16, 31, 46)]
        keys = [b.bucket_key for b in aggregate(history, tz=UTC)[Metric.HUMIDITY]]
        assert keys == ["12:00", "12:15", "12:30", "12:45"]

    def test_deterministic(self, make_reading):
        history = [make_reading(minutes=i, temperature=20 + i) for i in range(40)]
        assert aggregate(history, tz=UTC) == aggregate(history, tz=UTC)

    def test_chart_records(self, make_reading):
        series = aggregate([make_reading(temperature=26.0)], tz=UTC)
        assert to_chart_records(series[Metric.TEMPERATURE]) == [{"date": "12:00", "value": 26.0}]


class TestLazyAggregator:
    def test_recomputes_only_on_change(self, make_reading):
        buf = HistoryBuffer(capacity=50)
        lazy = LazyAggregator(buf, tz=UTC)
        buf.append(make_reading(minutes=0, temperature=20.0))
        first = lazy.series()
        assert lazy.series() is first

        buf.append(make_reading(minutes=1, temperature=22.0))
        second = lazy.series()
        assert second is not first
        assert second[Metric.TEMPERATURE][0].mean_value == 21.0


class TestDaylightSaving:
    """2024-03-10 in New York: 02:00 EST jumps to 03:00 EDT (07:00 UTC)."""

    def _history(self):
        return [
            SensorReading(timestamp=datetime(2024, 3, 10, 6, 30, tzinfo=UTC), temperature=20.0),
            SensorReading(timestamp=datetime(2024, 3, 10, 7, 30, tzinfo=UTC), temperature=21.0),
        ]

    @pytest.fixture
    def system_zone_new_york(self):
        previous = os.environ.get("TZ")
        os.environ["TZ"] = "America/New_York"
        time.tzset()
        yield
        if previous is None:
            os.environ.pop("TZ", None)
        else:
            os.environ["TZ"] = previous
        time.tzset()

    def test_named_zone_labels_follow_offset_change(self):
        series = aggregate(self._history(), tz=ZoneInfo("America/New_York"))
        assert [b.bucket_key for b in series[Metric.TEMPERATURE]] == ["01:30", "03:30"]

    @pytest.mark.skipif(not hasattr(time, "tzset"), reason="needs time.tzset")
    def test_system_zone_labels_follow_offset_change(self, system_zone_new_york):
        series = aggregate(self._history())
        assert [b.bucket_key for b in series[Metric.TEMPERATURE]] == ["01:30", "03:30"]
