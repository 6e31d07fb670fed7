"""
config/settings.py
──────────────────
Application configuration loaded from environment variables.
"""
import os
from dataclasses import dataclass


@dataclass
class Settings:
    # Server
    DEBUG: bool = os.getenv("DEBUG", "true").lower() == "true"
    PORT: int = int(os.getenv("PORT", "8050"))
    HOST: str = os.getenv("HOST", "0.0.0.0")

    # Sensor feed (empty API URL → simulated feed, empty push URL → polling only)
    SENSOR_API_URL: str = os.getenv("SENSOR_API_URL", "")
    SENSOR_PUSH_URL: str = os.getenv("SENSOR_PUSH_URL", "")

    # Synchronizer timings (seconds)
    POLL_INTERVAL_S: float = float(os.getenv("POLL_INTERVAL_S", "1.0"))
    POLL_TIMEOUT_S: float = float(os.getenv("POLL_TIMEOUT_S", "5.0"))
    CATCHUP_TIMEOUT_S: float = float(os.getenv("CATCHUP_TIMEOUT_S", "10.0"))
    PUSH_RECONNECT_ATTEMPTS: int = int(os.getenv("PUSH_RECONNECT_ATTEMPTS", "5"))
    PUSH_RECONNECT_DELAY_S: float = float(os.getenv("PUSH_RECONNECT_DELAY_S", "1.0"))

    # Rolling history and aggregation
    HISTORY_CAPACITY: int = int(os.getenv("HISTORY_CAPACITY", "1000"))
    BUCKET_MINUTES: int = int(os.getenv("BUCKET_MINUTES", "15"))
    DISPLAY_TIMEZONE: str = os.getenv("DISPLAY_TIMEZONE", "")  # IANA name; empty = system zone

    # Alerts
    MAX_ALERTS_DISPLAY: int = int(os.getenv("MAX_ALERTS_DISPLAY", "20"))
    VALIDATION_POLICY: str = os.getenv("VALIDATION_POLICY", "any")

    # Dashboard refresh interval in milliseconds
    UPDATE_INTERVAL_MS: int = int(os.getenv("UPDATE_INTERVAL_MS", "2000"))

    # Simulation
    SIMULATION_SEED: int = int(os.getenv("SIMULATION_SEED", "42"))

    # i18n
    DEFAULT_LANG: str = os.getenv("DEFAULT_LANG", "es")

    # Report
    SITE_LOCATION: str = os.getenv("SITE_LOCATION", "Universidad Politécnica de Chiapas")

    # Summarization collaborator
    SUMMARY_API_KEY: str = os.getenv("SUMMARY_API_KEY", "")
    SUMMARY_MODEL: str = os.getenv("SUMMARY_MODEL", "gemini-1.5-flash")
    SUMMARY_TIMEOUT_S: float = float(os.getenv("SUMMARY_TIMEOUT_S", "20.0"))

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv("LOG_FORMAT", "text")


settings = Settings()
