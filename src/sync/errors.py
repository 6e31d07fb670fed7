"""
src/sync/errors.py
──────────────────
Error taxonomy for the telemetry synchronizer.

None of these escape the synchronizer: they are caught at its boundary and
turned into connection-state transitions.
"""

from src.data.models import FailureKind


class TelemetryError(Exception):
    """Base exception for telemetry ingestion errors"""

    failure_kind: FailureKind = FailureKind.DATA

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ValidationFailure(TelemetryError):
    """Reading has no usable metric; dropped, never stored"""

    failure_kind = FailureKind.DATA


class ConnectionFailure(TelemetryError):
    """Push/poll transport error or timeout"""

    failure_kind = FailureKind.CONNECTION

    def __init__(self, message: str, url: str | None = None):
        self.url = url
        super().__init__(message)


class DataFailure(TelemetryError):
    """Transport succeeded but the payload is unusable"""

    failure_kind = FailureKind.DATA
