"""
src/data/validation.py
──────────────────────
Reading validator and raw-payload parsing.

Two policies exist because the feed historically had two conflicting checks:
  ANY → at least one metric present and numeric (canonical)
  ALL → every metric present and numeric (stricter alternative)
"""
from __future__ import annotations

import math
from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import ValidationError

from config.sensors import Metric
from src.data.models import SensorReading
from src.sync.errors import DataFailure


class ValidationPolicy(str, Enum):
    ANY = "any"
    ALL = "all"


def is_number(value: float | None) -> bool:
    return value is not None and not math.isnan(value)


def validate(reading: SensorReading, policy: ValidationPolicy = ValidationPolicy.ANY) -> bool:
    """Return True if the reading is usable under `policy`."""
    present = [is_number(reading.value(m)) for m in Metric]
    if policy == ValidationPolicy.ALL:
        return all(present)
    return any(present)


def parse_reading(payload: Any, received_at: datetime | None = None) -> SensorReading:
    """
    Build a SensorReading from a raw feed payload.

    A payload without a timestamp is stamped with `received_at`. Non-numeric
    metric values parse as missing, so only that metric is lost.

    Raises:
        DataFailure: payload is not a mapping or its timestamp is unusable
    """
    if not isinstance(payload, dict):
        raise DataFailure(f"Expected a JSON object, got {type(payload).__name__}")

    data = dict(payload)
    if data.get("timestamp") is None:
        data.pop("timestamp", None)
        if received_at is not None:
            data["timestamp"] = received_at
    try:
        return SensorReading.model_validate(data)
    except ValidationError as e:
        raise DataFailure(f"Malformed reading: {e.error_count()} invalid field(s)") from e
