"""
src/data/models.py
──────────────────
Pydantic v2 data models for sensor readings, alerts, trends, and sync state.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from config.alerts import AlertCategory, AlertKind
from config.sensors import Metric


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class Channel(str, Enum):
    PUSH = "push"
    POLL = "poll"


class SyncStatus(str, Enum):
    CONNECTED = "connected"
    DEGRADED = "degraded"
    ERROR = "error"


class FailureKind(str, Enum):
    CONNECTION = "connection"  # can't reach sensors
    DATA = "data"              # sensors sending bad data


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class SensorReading(BaseModel):
    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=_utcnow)
    temperature: float | None = Field(
        default=None, validation_alias=AliasChoices("temperature", "temperatura")
    )
    humidity: float | None = Field(
        default=None, validation_alias=AliasChoices("humidity", "humedad")
    )
    soil_moisture: float | None = Field(
        default=None,
        validation_alias=AliasChoices("soil_moisture", "soilMoisture", "humedad_suelo"),
    )
    luminosity: float | None = Field(
        default=None, validation_alias=AliasChoices("luminosity", "luminosidad")
    )

    @field_validator("temperature", "humidity", "soil_moisture", "luminosity", mode="before")
    @classmethod
    def _non_numeric_as_missing(cls, value: object) -> float | None:
        # garbage from one sensor reads as that sensor missing
        if value is None or isinstance(value, bool):
            return None
        try:
            return float(value)
        except (TypeError, ValueError):
            return None

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    def value(self, metric: Metric) -> float | None:
        return getattr(self, metric.value)

    def values(self) -> dict[Metric, float | None]:
        return {m: self.value(m) for m in Metric}


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: AlertKind
    category: AlertCategory
    description: str
    sensor: Metric
    timestamp: datetime

    @property
    def identity_key(self) -> tuple[str, Metric]:
        return (self.description, self.sensor)


class TimeBucket(BaseModel):
    model_config = ConfigDict(frozen=True)

    bucket_key: str
    mean_value: float


class TrendDelta(BaseModel):
    model_config = ConfigDict(frozen=True)

    metric: Metric
    percent_change: float
    direction: Direction

    @property
    def up(self) -> bool:
        return self.direction == Direction.UP


class ConnectionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: Channel = Channel.PUSH
    status: SyncStatus = SyncStatus.DEGRADED
    last_successful_sync: datetime | None = None
    last_failure: FailureKind | None = None
    detail: str | None = None
