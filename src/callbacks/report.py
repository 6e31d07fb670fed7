"""
src/callbacks/report.py
────────────────────────
Report page callbacks.

The charts cover today's readings only (local calendar day). The prose
summary is generated on demand: the coroutine runs on the engine loop and
the callback blocks for at most SUMMARY_TIMEOUT_S plus a margin.
"""
from __future__ import annotations

import logging
from collections.abc import Sequence
from concurrent.futures import TimeoutError as FutureTimeout
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

from dash import Input, Output, State

from config.sensors import METRICS
from config.settings import settings
from src.analytics.aggregator import aggregate
from src.analytics.summary import fallback_summary, safe_summarize, system_status
from src.callbacks.overview import build_chart
from src.data.models import SensorReading
from src.layout.components.alert_badge import alert_table

logger = logging.getLogger(__name__)


def _display_tz() -> tzinfo | None:
    return ZoneInfo(settings.DISPLAY_TIMEZONE) if settings.DISPLAY_TIMEZONE else None


def readings_on(
    history: Sequence[SensorReading],
    day: date,
    tz: tzinfo | None = None,
) -> list[SensorReading]:
    """Readings whose local calendar date is `day` (system zone if tz is None)."""
    return [r for r in history if r.timestamp.astimezone(tz).date() == day]


def register(app, monitor) -> None:

    @app.callback(
        [
            Output("report-date", "children"),
            Output("report-status", "children"),
            Output("report-alerts-table", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("store-lang", "data"),
        ],
    )
    def update_report(n_intervals: int, lang: str):
        alerts = monitor.alerts()
        return (
            datetime.now().strftime("%d/%m/%Y %H:%M"),
            system_status(alerts, lang),
            alert_table(alerts, lang),
        )

    @app.callback(
        [Output(f"report-chart-{m.value}", "figure") for m in METRICS],
        [
            Input("interval-live", "n_intervals"),
            Input("store-lang", "data"),
        ],
    )
    def update_report_charts(n_intervals: int, lang: str):
        tz = _display_tz()
        today = datetime.now(tz).date()
        series = aggregate(
            readings_on(monitor.history(), today, tz),
            bucket_minutes=settings.BUCKET_MINUTES,
            tz=tz,
        )
        return [build_chart(m, series[m], lang) for m in METRICS]

    @app.callback(
        Output("report-summary", "children"),
        Input("report-generate-btn", "n_clicks"),
        State("store-lang", "data"),
        prevent_initial_call=True,
    )
    def generate_summary(n_clicks: int, lang: str) -> str:
        alerts = monitor.alerts()
        history = monitor.history()
        try:
            return monitor.run_coroutine(
                safe_summarize(alerts, history, lang=lang),
                timeout=settings.SUMMARY_TIMEOUT_S + 5.0,
            )
        except (FutureTimeout, RuntimeError) as e:
            logger.warning(f"Summary request abandoned: {e.__class__.__name__}: {e}")
            return fallback_summary(lang)
