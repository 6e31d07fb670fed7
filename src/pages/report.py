"""
src/pages/report.py
────────────────────
Monitoring report: date, location, overall status, prose summary, today's
charts, alerts.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.sensors import METRICS
from config.settings import settings
from src.i18n.translator import t

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"


def _field(label: str, child) -> html.Div:
    return html.Div(
        [
            html.Div(label, style={"fontSize": ".68rem", "color": MUTED, "textTransform": "uppercase"}),
            html.Div(child, style={"fontSize": ".95rem", "fontWeight": "600"}),
        ],
        style={"marginBottom": "10px"},
    )


def _chart(metric, lang: str) -> dbc.Col:
    return dbc.Col(
        html.Div(
            [
                html.Div(t(f"metrics.{metric.value}", lang), className="chart-title"),
                dcc.Graph(
                    id=f"report-chart-{metric.value}",
                    config={"displayModeBar": False},
                    style={"height": "220px"},
                ),
            ],
            className="chart-card",
        ),
        md=6,
    )


def layout(lang: str = "es") -> html.Div:
    return html.Div(
        [
            html.Div(
                [html.H2(t("report.title", lang), className="page-title")],
                className="page-header",
            ),
            html.Div(
                [
                    _field(t("report.date", lang), html.Span(id="report-date")),
                    _field(t("report.location", lang), settings.SITE_LOCATION),
                    _field(t("report.status", lang), html.Span(id="report-status")),
                ],
                style={
                    "backgroundColor": CARD_BG,
                    "border": f"1px solid {BORDER}",
                    "borderRadius": "8px",
                    "padding": "14px 16px",
                },
                className="mb-3",
            ),
            html.Div(
                [
                    html.Div(
                        [
                            html.Div(t("report.summary", lang), className="chart-title"),
                            dbc.Button(
                                t("report.generate", lang),
                                id="report-generate-btn",
                                n_clicks=0,
                                size="sm",
                                color="primary",
                                outline=True,
                            ),
                        ],
                        style={"display": "flex", "justifyContent": "space-between", "alignItems": "center"},
                    ),
                    dcc.Loading(
                        html.Div(
                            id="report-summary",
                            style={"whiteSpace": "pre-wrap", "fontSize": ".85rem", "marginTop": "8px"},
                        ),
                        type="dot",
                    ),
                ],
                className="chart-card mb-3",
            ),
            # ── Today's charts ─────────────────────────────────────────────────
            dbc.Row([_chart(m, lang) for m in METRICS], className="g-3 mb-3"),
            html.Div(
                html.Div(id="report-alerts-table"),
                className="chart-card",
            ),
        ],
        style={"padding": "1.5rem"},
    )
