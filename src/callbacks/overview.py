"""
src/callbacks/overview.py
──────────────────────────
Live panel callbacks.

Reads engine snapshots only; the refresh interval never triggers a fetch.
"""
from __future__ import annotations

from collections.abc import Sequence

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Input, Output

from config.sensors import METRICS, SENSOR_CONFIG, Metric
from config.settings import settings
from src.analytics.aggregator import to_chart_records
from src.data.models import SensorReading, SyncStatus, TimeBucket
from src.data.validation import is_number
from src.i18n.translator import t
from src.layout.components.sensor_card import sensor_card
from src.layout.components.status_banner import failure_banner, status_pill

CARD_BG = "#161b22"
GRID_CLR = "#30363d"
MUTED = "#8b949e"
PLOTLY_TMPL = "plotly_dark"


def _layout(height: int = 220) -> dict:
    return {
        "template": PLOTLY_TMPL,
        "paper_bgcolor": CARD_BG,
        "plot_bgcolor": CARD_BG,
        "margin": {"l": 10, "r": 10, "t": 10, "b": 10},
        "font": {"color": "#c9d1d9", "size": 11},
        "xaxis": {"gridcolor": GRID_CLR, "type": "category"},
        "yaxis": {"gridcolor": GRID_CLR},
        "height": height,
        "showlegend": False,
    }


def last_known_values(history: Sequence[SensorReading]) -> dict[Metric, float | None]:
    """Most recent numeric value per metric, scanning newest first."""
    values: dict[Metric, float | None] = {m: None for m in METRICS}
    missing = set(METRICS)
    for reading in reversed(history):
        for metric in list(missing):
            value = reading.value(metric)
            if is_number(value):
                values[metric] = value
                missing.discard(metric)
        if not missing:
            break
    return values


def build_chart(metric: Metric, buckets: list[TimeBucket], lang: str = "es") -> go.Figure:
    spec = SENSOR_CONFIG[metric]
    fig = go.Figure()
    records = to_chart_records(buckets)
    if records:
        fig.add_trace(
            go.Scatter(
                x=[r["date"] for r in records],
                y=[r["value"] for r in records],
                mode="lines+markers",
                line={"color": spec.color, "width": 2},
                marker={"size": 4},
                name=t(f"metrics.{metric.value}", lang),
                hovertemplate=f"%{{x}}<br>%{{y}} {spec.unit}<extra></extra>",
            )
        )
        for limit in (spec.upper, spec.lower):
            if limit is not None:
                fig.add_hline(y=limit, line_dash="dot", line_color=MUTED, line_width=1)
    else:
        fig.add_annotation(
            text=t("cards.no_history", lang),
            showarrow=False,
            font={"color": MUTED},
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
        )
    fig.update_layout(**_layout())
    return fig


def register(app, monitor) -> None:

    @app.callback(
        [
            Output("overview-status-pill", "children"),
            Output("overview-failure-banner", "children"),
            Output("overview-sensor-cards", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("store-lang", "data"),
        ],
    )
    def update_cards(n_intervals: int, lang: str):
        connection = monitor.connection()
        latest = monitor.latest()
        values = last_known_values(monitor.history())
        trends = monitor.trends()
        healthy = connection.status == SyncStatus.CONNECTED

        cards = dbc.Row(
            [
                dbc.Col(
                    sensor_card(
                        SENSOR_CONFIG[metric],
                        values[metric],
                        trend=trends.get(metric),
                        active=healthy and latest is not None and is_number(latest.value(metric)),
                        updated_at=connection.last_successful_sync,
                        lang=lang,
                    ),
                    xs=12,
                    sm=6,
                    lg=3,
                )
                for metric in METRICS
            ],
            className="g-3",
        )
        return status_pill(monitor.state(), connection, lang), failure_banner(connection, lang), cards

    @app.callback(
        [Output(f"overview-chart-{m.value}", "figure") for m in METRICS]
        + [Output(f"overview-chart-caption-{m.value}", "children") for m in METRICS],
        [
            Input("interval-live", "n_intervals"),
            Input("store-lang", "data"),
        ],
    )
    def update_charts(n_intervals: int, lang: str):
        series = monitor.series()
        caption = t("cards.chart_caption", lang).format(minutes=settings.BUCKET_MINUTES)
        figures = [build_chart(m, series[m], lang) for m in METRICS]
        captions = [
            f"{caption} ({SENSOR_CONFIG[m].unit})" if series[m] else t("cards.invalid_data", lang)
            for m in METRICS
        ]
        return figures + captions
