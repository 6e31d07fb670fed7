"""
config/alerts.py
────────────────
Alert kinds, display categories, and display configuration.
"""

from enum import Enum


class AlertKind(str, Enum):
    INFO = "info"
    WARNING = "warning"
    CRITICAL = "critical"


class AlertCategory(str, Enum):
    CRITICAL_ALERT = "critical_alert"
    WARNING = "warning"
    NOTIFICATION = "notification"


# Canonical rule descriptions (translated only at display time)
DESC_DISCONNECTED = "sensor disconnected"
DESC_NO_READING = "no reading"
DESC_TOO_HIGH = "too high"
DESC_TOO_LOW = "too low"


KIND_COLORS: dict[str, str] = {
    AlertKind.INFO: "#58a6ff",
    AlertKind.WARNING: "#e8a020",
    AlertKind.CRITICAL: "#da3633",
}

KIND_BG: dict[str, str] = {
    AlertKind.INFO: "rgba(88,166,255,0.12)",
    AlertKind.WARNING: "rgba(232,160,32,0.12)",
    AlertKind.CRITICAL: "rgba(218,54,51,0.12)",
}

KIND_ICONS: dict[str, str] = {
    AlertKind.INFO: "ℹ",
    AlertKind.WARNING: "⚠",
    AlertKind.CRITICAL: "🚨",
}

# Kind ordering for filters and summaries (higher = more severe)
KIND_ORDER: dict[str, int] = {
    AlertKind.CRITICAL: 3,
    AlertKind.WARNING: 2,
    AlertKind.INFO: 1,
}
