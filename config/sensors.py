"""
config/sensors.py
─────────────────
Environmental sensor definitions and alert thresholds.

Each metric carries:
  - display unit and colour
  - rounding precision for bucket means (product requirement: 1 decimal for
    temperature/luminosity, 2 decimals for humidity/soil moisture)
  - optional upper / lower alert limits (strict comparisons)
  - the alert emitted when the sensor reports no value
"""
from dataclasses import dataclass
from enum import Enum

from config.alerts import (
    DESC_DISCONNECTED,
    DESC_NO_READING,
    AlertCategory,
    AlertKind,
)


class Metric(str, Enum):
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"
    SOIL_MOISTURE = "soil_moisture"
    LUMINOSITY = "luminosity"


@dataclass(frozen=True)
class MissingRule:
    kind: AlertKind
    category: AlertCategory
    description: str


@dataclass(frozen=True)
class SensorSpec:
    metric: Metric
    unit: str
    precision: int
    color: str
    icon: str
    upper: float | None  # value > upper → WARNING "too high"
    lower: float | None  # value < lower → WARNING "too low"
    missing: MissingRule


_DISCONNECTED = MissingRule(AlertKind.CRITICAL, AlertCategory.CRITICAL_ALERT, DESC_DISCONNECTED)


# ── Sensor registry ───────────────────────────────────────────────────────────
SENSOR_CONFIG: dict[Metric, SensorSpec] = {
    Metric.TEMPERATURE: SensorSpec(
        metric=Metric.TEMPERATURE,
        unit="°C",
        precision=1,
        color="#EF4444",
        icon="🌡",
        upper=35.0,
        lower=None,
        missing=_DISCONNECTED,
    ),
    Metric.HUMIDITY: SensorSpec(
        metric=Metric.HUMIDITY,
        unit="%",
        precision=2,
        color="#3B82F6",
        icon="💧",
        upper=80.0,
        lower=30.0,
        missing=_DISCONNECTED,
    ),
    Metric.SOIL_MOISTURE: SensorSpec(
        metric=Metric.SOIL_MOISTURE,
        unit="%",
        precision=2,
        color="#8B5CF6",
        icon="🌱",
        upper=60.0,
        lower=20.0,
        missing=_DISCONNECTED,
    ),
    Metric.LUMINOSITY: SensorSpec(
        metric=Metric.LUMINOSITY,
        unit="lx",
        precision=1,
        color="#F59E0B",
        icon="☀",
        upper=400.0,
        lower=None,
        # Luminosity dropping out is shown as a notification, still critical
        missing=MissingRule(AlertKind.CRITICAL, AlertCategory.NOTIFICATION, DESC_NO_READING),
    ),
}

METRICS = list(SENSOR_CONFIG.keys())
