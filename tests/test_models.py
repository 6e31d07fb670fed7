"""
tests/test_models.py
─────────────────────
Tests for Pydantic v2 data models.
"""
from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from config.alerts import AlertCategory, AlertKind
from config.sensors import Metric
from src.data.models import (
    Alert,
    Channel,
    ConnectionState,
    Direction,
    SensorReading,
    SyncStatus,
    TrendDelta,
)


class TestSensorReading:
    def test_fixed_fields(self, normal_reading):
        data = normal_reading.model_dump()
        assert set(data) == {"timestamp", "temperature", "humidity", "soil_moisture", "luminosity"}

    def test_spanish_aliases(self, now):
        r = SensorReading.model_validate(
            {"timestamp": now, "temperatura": 30.5, "humedad": 61, "humedad_suelo": 22.0, "luminosidad": 150}
        )
        assert r.temperature == 30.5
        assert r.humidity == 61.0
        assert r.soil_moisture == 22.0
        assert r.luminosity == 150.0

    def test_camel_case_soil_moisture(self, now):
        r = SensorReading.model_validate({"timestamp": now, "soilMoisture": 33.0})
        assert r.soil_moisture == 33.0

    def test_missing_metrics_default_to_none(self, now):
        r = SensorReading(timestamp=now, temperature=20.0)
        assert r.humidity is None
        assert r.soil_moisture is None
        assert r.luminosity is None

    def test_naive_timestamp_is_utc(self):
        r = SensorReading(timestamp=datetime(2024, 6, 1, 12, 0), temperature=20.0)
        assert r.timestamp.tzinfo is not None
        assert r.timestamp.utcoffset().total_seconds() == 0

    def test_timestamp_defaults_to_now(self):
        r = SensorReading(temperature=20.0)
        assert r.timestamp.tzinfo is not None
        assert (datetime.now(tz=UTC) - r.timestamp).total_seconds() < 5

    def test_frozen(self, normal_reading):
        with pytest.raises(ValidationError):
            normal_reading.temperature = 99.0

    def test_non_numeric_metric_reads_as_missing(self, now):
        r = SensorReading.model_validate(
            {"timestamp": now, "temperatura": "hot", "humedad": "55.5", "luminosidad": True}
        )
        assert r.temperature is None
        assert r.humidity == 55.5
        assert r.luminosity is None

    def test_value_accessor(self, normal_reading):
        assert normal_reading.value(Metric.HUMIDITY) == 50.0
        assert normal_reading.values()[Metric.LUMINOSITY] == 200.0


class TestAlert:
    def test_identity_key(self, now):
        alert = Alert(
            kind=AlertKind.WARNING,
            category=AlertCategory.WARNING,
            description="too high",
            sensor=Metric.TEMPERATURE,
            timestamp=now,
        )
        assert alert.identity_key == ("too high", Metric.TEMPERATURE)

    def test_invalid_kind(self, now):
        with pytest.raises(ValidationError):
            Alert(
                kind="fatal",
                category=AlertCategory.WARNING,
                description="too high",
                sensor=Metric.TEMPERATURE,
                timestamp=now,
            )


class TestTrendDelta:
    def test_up_property(self):
        assert TrendDelta(metric=Metric.HUMIDITY, percent_change=4.2, direction=Direction.UP).up
        assert not TrendDelta(metric=Metric.HUMIDITY, percent_change=4.2, direction=Direction.DOWN).up


class TestConnectionState:
    def test_initial_value(self):
        state = ConnectionState()
        assert state.channel == Channel.PUSH
        assert state.status == SyncStatus.DEGRADED
        assert state.last_successful_sync is None
        assert state.last_failure is None
