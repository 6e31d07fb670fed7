"""
src/pages/alerts.py
────────────────────
Alert history page with a kind filter.
"""

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.alerts import KIND_ORDER
from src.i18n.translator import t

MUTED = "#8b949e"


def kind_options(lang: str) -> list[dict]:
    kinds = sorted(KIND_ORDER, key=KIND_ORDER.get, reverse=True)
    return [{"label": t("alerts.all", lang), "value": "all"}] + [
        {"label": t(f"alerts.kind.{k.value}", lang), "value": k.value} for k in kinds
    ]


def layout(lang: str = "es") -> html.Div:
    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("alerts.title", lang), className="page-title"),
                    html.P(t("alerts.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            # ── Summary badges ─────────────────────────────────────────────────
            html.Div(id="alerts-summary-badges", className="mb-3"),
            # ── Filter row ─────────────────────────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(
                        [
                            html.Label(
                                t("alerts.filter", lang),
                                style={
                                    "fontSize": ".72rem",
                                    "color": MUTED,
                                    "textTransform": "uppercase",
                                },
                            ),
                            dcc.Dropdown(
                                id="alerts-filter-kind",
                                options=kind_options(lang),
                                value="all",
                                clearable=False,
                                style={"fontSize": ".85rem"},
                                className="dark-dropdown",
                            ),
                        ],
                        md=3,
                    ),
                ],
                className="g-3 mb-3",
            ),
            # ── Alert table ────────────────────────────────────────────────────
            html.Div(
                html.Div(id="alerts-table"),
                className="chart-card",
            ),
        ],
        style={"padding": "1.5rem"},
    )
