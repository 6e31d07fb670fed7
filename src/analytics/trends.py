"""
src/analytics/trends.py
───────────────────────
Per-metric trend between two consecutive readings.

  percent_change = |current - previous| / (previous or 1) × 100, 1 decimal
  direction      = UP if current > previous else DOWN

When the previous value is exactly 0 the divisor is 1, so the result is an
absolute change rather than a true percentage.
"""
from __future__ import annotations

from config.sensors import Metric
from src.data.models import Direction, SensorReading, TrendDelta
from src.data.validation import is_number


def delta(previous: float, current: float, metric: Metric) -> TrendDelta:
    divisor = previous if previous != 0 else 1.0
    change = abs(current - previous) / divisor * 100.0
    return TrendDelta(
        metric=metric,
        percent_change=round(change, 1),
        direction=Direction.UP if current > previous else Direction.DOWN,
    )


def compute_trends(
    previous: SensorReading | None,
    current: SensorReading,
) -> dict[Metric, TrendDelta]:
    """Trend for every metric present in both readings."""
    if previous is None:
        return {}
    trends: dict[Metric, TrendDelta] = {}
    for metric in Metric:
        prev_value = previous.value(metric)
        cur_value = current.value(metric)
        if is_number(prev_value) and is_number(cur_value):
            trends[metric] = delta(prev_value, cur_value, metric)
    return trends
