"""
src/analytics/alert_rules.py
────────────────────────────
Threshold alert rule engine.

Per metric (independently), first matching rule wins:
  value missing / NaN → the metric's missing-sensor alert
  value > upper       → WARNING "too high"
  value < lower       → WARNING "too low"

Alerts are deduplicated on (description, sensor): one alert per distinct
condition, the earliest-timestamped occurrence is kept. The published list
is newest first and capped for display.
"""
from __future__ import annotations

import threading
from collections.abc import Iterable

from config.alerts import DESC_TOO_HIGH, DESC_TOO_LOW, AlertCategory, AlertKind
from config.sensors import SENSOR_CONFIG, Metric, SensorSpec
from config.settings import settings
from src.data.models import Alert, SensorReading
from src.data.validation import is_number

IdentityKey = tuple[str, Metric]


def _evaluate_metric(spec: SensorSpec, reading: SensorReading) -> Alert | None:
    value = reading.value(spec.metric)

    if not is_number(value):
        rule = spec.missing
        return Alert(
            kind=rule.kind,
            category=rule.category,
            description=rule.description,
            sensor=spec.metric,
            timestamp=reading.timestamp,
        )
    if spec.upper is not None and value > spec.upper:
        description = DESC_TOO_HIGH
    elif spec.lower is not None and value < spec.lower:
        description = DESC_TOO_LOW
    else:
        return None

    return Alert(
        kind=AlertKind.WARNING,
        category=AlertCategory.WARNING,
        description=description,
        sensor=spec.metric,
        timestamp=reading.timestamp,
    )


def evaluate(
    reading: SensorReading,
    sensors: dict[Metric, SensorSpec] = SENSOR_CONFIG,
) -> list[Alert]:
    """Return every alert a single reading triggers (no deduplication)."""
    alerts = []
    for spec in sensors.values():
        alert = _evaluate_metric(spec, reading)
        if alert is not None:
            alerts.append(alert)
    return alerts


def _merge(kept: dict[IdentityKey, Alert], alert: Alert) -> bool:
    """Insert `alert` unless an equal-or-earlier one holds its key. Returns True if new key."""
    current = kept.get(alert.identity_key)
    if current is None:
        kept[alert.identity_key] = alert
        return True
    if alert.timestamp < current.timestamp:
        kept[alert.identity_key] = alert
    return False


def rank(alerts: Iterable[Alert], limit: int = settings.MAX_ALERTS_DISPLAY) -> list[Alert]:
    """Newest first, truncated to `limit`."""
    return sorted(alerts, key=lambda a: a.timestamp, reverse=True)[:limit]


def build_alerts(
    readings: Iterable[SensorReading],
    limit: int = settings.MAX_ALERTS_DISPLAY,
    sensors: dict[Metric, SensorSpec] = SENSOR_CONFIG,
) -> list[Alert]:
    """Batch form: evaluate, deduplicate, rank."""
    kept: dict[IdentityKey, Alert] = {}
    for reading in readings:
        for alert in evaluate(reading, sensors):
            _merge(kept, alert)
    return rank(kept.values(), limit)


class AlertRuleEngine:
    """
    Holds the running deduplicated alert set.

    Only the synchronizer calls record(); everyone else reads
    active_alerts(), which returns a fresh list of frozen Alert values.
    """

    def __init__(
        self,
        max_display: int = settings.MAX_ALERTS_DISPLAY,
        sensors: dict[Metric, SensorSpec] = SENSOR_CONFIG,
    ) -> None:
        self._max_display = max_display
        self._sensors = sensors
        self._alerts: dict[IdentityKey, Alert] = {}
        self._lock = threading.Lock()

    def evaluate(self, reading: SensorReading) -> list[Alert]:
        return evaluate(reading, self._sensors)

    def record(self, reading: SensorReading) -> list[Alert]:
        """Merge a reading's alerts into the active set; return those with new identity keys."""
        fired = self.evaluate(reading)
        new_alerts = []
        with self._lock:
            for alert in fired:
                if _merge(self._alerts, alert):
                    new_alerts.append(alert)
        return new_alerts

    def active_alerts(self) -> list[Alert]:
        with self._lock:
            alerts = list(self._alerts.values())
        return rank(alerts, self._max_display)

    def reset(self) -> None:
        with self._lock:
            self._alerts.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._alerts)
