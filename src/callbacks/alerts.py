"""
src/callbacks/alerts.py
────────────────────────
Alert history page callbacks.
"""
from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import dash_bootstrap_components as dbc
from dash import Input, Output, html

from config.alerts import KIND_COLORS, KIND_ORDER
from src.data.models import Alert
from src.i18n.translator import t
from src.layout.components.alert_badge import alert_table

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"


def filter_alerts(alerts: Sequence[Alert], kind: str | None) -> list[Alert]:
    """Keep the published order; `all` (or nothing) keeps every alert."""
    if not kind or kind == "all":
        return list(alerts)
    return [a for a in alerts if a.kind.value == kind]


def _summary_badges(alerts: Sequence[Alert], lang: str) -> dbc.Row:
    counts = Counter(a.kind for a in alerts)
    kinds = sorted(KIND_ORDER, key=KIND_ORDER.get, reverse=True)
    return dbc.Row(
        [
            dbc.Col(
                html.Div(
                    [
                        html.Div(
                            str(counts.get(kind, 0)),
                            style={"fontSize": "1.4rem", "fontWeight": "700", "color": KIND_COLORS.get(kind, MUTED)},
                        ),
                        html.Div(
                            t(f"alerts.kind.{kind.value}", lang),
                            style={"fontSize": ".65rem", "color": MUTED, "textTransform": "uppercase"},
                        ),
                    ],
                    style={"backgroundColor": CARD_BG, "border": f"1px solid {BORDER}", "borderRadius": "8px", "padding": "10px 16px"},
                ),
                xs=4, md=2,
            )
            for kind in kinds
        ],
        className="g-2",
    )


def register(app, monitor) -> None:

    @app.callback(
        [
            Output("alerts-table", "children"),
            Output("alerts-summary-badges", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("alerts-filter-kind", "value"),
            Input("store-lang", "data"),
        ],
    )
    def update_alerts_table(n_intervals: int, kind_filter: str, lang: str):
        alerts = monitor.alerts()
        return alert_table(filter_alerts(alerts, kind_filter), lang), _summary_badges(alerts, lang)
