"""
app.py
──────
Sensor Telemetry Monitor — Application Entry Point.

Startup sequence:
  1. Configure logging
  2. Build the telemetry engine and start its background loop
  3. Create Dash app with DARKLY bootstrap theme
  4. Register all callbacks
  5. Run dev server (or expose `server` for gunicorn in production)
"""
import atexit
import logging

import dash
import dash_bootstrap_components as dbc

from config.settings import settings
from src.i18n.translator import set_lang
from src.layout.main import create_layout
from src.logging_setup import setup_logging
from src.sync.monitor import TelemetryMonitor

# ── 1. Logging ────────────────────────────────────────────────────────────────
setup_logging(settings.LOG_LEVEL, json_format=settings.LOG_FORMAT == "json")
logger = logging.getLogger("src.app")

# ── 2. Telemetry engine ───────────────────────────────────────────────────────
set_lang(settings.DEFAULT_LANG)
monitor = TelemetryMonitor.from_settings(settings)
monitor.start()
atexit.register(monitor.stop)
logger.info(f"Telemetry engine running (state: {monitor.state().value})")

# ── 3. Dash app ───────────────────────────────────────────────────────────────
app = dash.Dash(
    __name__,
    external_stylesheets=[dbc.themes.DARKLY],
    suppress_callback_exceptions=True,
    meta_tags=[{"name": "viewport", "content": "width=device-width, initial-scale=1"}],
    title="Sensor Monitor",
)

server = app.server  # gunicorn entry point
app.layout = create_layout()

# ── 4. Register callbacks ─────────────────────────────────────────────────────
from src.callbacks import alerts, navigation, overview, report

navigation.register(app)
overview.register(app, monitor)
alerts.register(app, monitor)
report.register(app, monitor)

# ── 5. Run ────────────────────────────────────────────────────────────────────
if __name__ == "__main__":
    # The reloader would start a second engine in the child process
    app.run(
        debug=settings.DEBUG,
        host=settings.HOST,
        port=settings.PORT,
        use_reloader=False,
    )
