"""
src/analytics/aggregator.py
───────────────────────────
Time-bucket aggregation of the rolling history for charting.

Algorithm:
  1. Keep only readings that pass validation
  2. Floor each timestamp to a fixed-width, epoch-aligned boundary
     (BUCKET_MINUTES, 15 by default) and label it "HH:MM" in local time
  3. Group by label in first-seen order (history is append-ordered, so
     this is chronological)
  4. Mean per metric and bucket, rounded to the metric's precision
  5. Buckets with no value for a metric are left out of that metric's series

Labels carry no date, so within one window a slot from a previous day
shares its label with today's slot and the two are merged.
"""
from __future__ import annotations

from collections.abc import Sequence
from datetime import tzinfo

import pandas as pd

from config.sensors import SENSOR_CONFIG, Metric
from config.settings import settings
from src.data.history import HistoryBuffer
from src.data.models import SensorReading, TimeBucket
from src.data.validation import ValidationPolicy, validate

Series = dict[Metric, list[TimeBucket]]


def _labels(buckets: pd.Series, tz: tzinfo | None) -> pd.Series:
    if tz is not None:
        return buckets.dt.tz_convert(tz).dt.strftime("%H:%M")
    # system zone, offset resolved per instant so labels follow DST changes
    return buckets.map(lambda ts: ts.to_pydatetime().astimezone().strftime("%H:%M"))


def empty_series() -> Series:
    return {m: [] for m in Metric}


def aggregate(
    history: Sequence[SensorReading],
    bucket_minutes: int = settings.BUCKET_MINUTES,
    tz: tzinfo | None = None,
    policy: ValidationPolicy = ValidationPolicy.ANY,
) -> Series:
    """
    Convert a history snapshot into per-metric bucket series.

    Args:
        history: Readings, oldest first
        bucket_minutes: Bucket width in minutes
        tz: Time zone for labels; system local zone if None
        policy: Validation policy used to filter the input

    Returns:
        Fresh dict metric → [TimeBucket, ...] in first-seen bucket order
    """
    readings = [r for r in history if validate(r, policy)]
    result = empty_series()
    if not readings:
        return result

    df = pd.DataFrame([r.model_dump() for r in readings])
    buckets = pd.to_datetime(df["timestamp"], utc=True).dt.floor(f"{bucket_minutes}min")
    df["bucket"] = _labels(buckets, tz)

    for metric in Metric:
        df[metric.value] = pd.to_numeric(df[metric.value], errors="coerce")

    grouped = df.groupby("bucket", sort=False)
    for metric in Metric:
        precision = SENSOR_CONFIG[metric].precision
        means = grouped[metric.value].mean().dropna()
        result[metric] = [
            TimeBucket(bucket_key=str(label), mean_value=round(float(value), precision))
            for label, value in means.items()
        ]
    return result


def to_chart_records(buckets: list[TimeBucket]) -> list[dict]:
    """Shape a series for the chart widgets: [{"date": label, "value": mean}]."""
    return [{"date": b.bucket_key, "value": b.mean_value} for b in buckets]


class LazyAggregator:
    """Caches aggregate() output and recomputes only when the buffer changed."""

    def __init__(
        self,
        buffer: HistoryBuffer,
        bucket_minutes: int = settings.BUCKET_MINUTES,
        tz: tzinfo | None = None,
    ) -> None:
        self._buffer = buffer
        self._bucket_minutes = bucket_minutes
        self._tz = tz
        self._version: int | None = None
        self._series: Series = empty_series()

    def series(self) -> Series:
        version = self._buffer.version
        if version != self._version:
            self._series = aggregate(
                self._buffer.snapshot(),
                bucket_minutes=self._bucket_minutes,
                tz=self._tz,
                policy=self._buffer.policy,
            )
            self._version = version
        return self._series
