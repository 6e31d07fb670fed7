"""
src/pages/overview.py
──────────────────────
Live panel: connection status, one card per metric, bucketed charts.

Static structure; dynamic data injected via callbacks.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.sensors import METRICS
from src.i18n.translator import t


def _chart_card(metric, lang: str) -> dbc.Col:
    return dbc.Col(
        html.Div(
            [
                html.Div(t(f"metrics.{metric.value}", lang), className="chart-title"),
                dcc.Graph(
                    id=f"overview-chart-{metric.value}",
                    config={"displayModeBar": False},
                    style={"height": "220px"},
                ),
                html.Div(id=f"overview-chart-caption-{metric.value}", className="chart-caption"),
            ],
            className="chart-card",
        ),
        md=6,
    )


def layout(lang: str = "es") -> html.Div:
    return html.Div(
        [
            # ── Page header ───────────────────────────────────────────────────
            html.Div(
                [
                    html.H2(t("app.title", lang), className="page-title"),
                    html.P(t("app.subtitle", lang), className="page-subtitle"),
                    html.Div(id="overview-status-pill"),
                ],
                className="page-header",
            ),
            # ── Failure banner (dynamic, hidden while healthy) ────────────────
            html.Div(id="overview-failure-banner", className="mb-3"),
            # ── Sensor cards (dynamic) ────────────────────────────────────────
            html.Div(id="overview-sensor-cards", className="mb-4"),
            # ── Bucketed charts ───────────────────────────────────────────────
            dbc.Row([_chart_card(m, lang) for m in METRICS], className="g-3"),
        ],
        style={"padding": "1.5rem"},
    )
