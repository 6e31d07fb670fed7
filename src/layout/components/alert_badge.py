"""
src/layout/components/alert_badge.py
──────────────────────────────────────
Alert kind badge and the shared alert table (alerts page and report).
"""
from __future__ import annotations

from collections.abc import Sequence

from dash import html

from config.alerts import KIND_BG, KIND_COLORS, KIND_ICONS, AlertKind
from src.data.models import Alert
from src.i18n.translator import t

BORDER = "#30363d"
MUTED = "#8b949e"


def alert_badge(kind: AlertKind, lang: str = "es") -> html.Span:
    """Inline kind badge with color-coded border."""
    color = KIND_COLORS.get(kind, MUTED)
    return html.Span(
        f"{KIND_ICONS.get(kind, '')} {t(f'alerts.kind.{kind.value}', lang)}",
        style={
            "fontSize": ".65rem",
            "fontWeight": "700",
            "color": color,
            "backgroundColor": KIND_BG.get(kind, "transparent"),
            "border": f"1px solid {color}",
            "borderRadius": "4px",
            "padding": "1px 7px",
            "whiteSpace": "nowrap",
        },
    )


def alert_table(alerts: Sequence[Alert], lang: str = "es") -> html.Div:
    if not alerts:
        return html.Div(
            t("alerts.empty", lang),
            style={"color": MUTED, "padding": "20px", "textAlign": "center"},
        )

    headers = ["type", "sensor", "description", "urgency", "date"]
    rows = [
        html.Tr(
            [
                html.Td(t(f"alerts.category.{a.category.value}", lang), style={"fontSize": ".78rem"}),
                html.Td(
                    t(f"metrics.{a.sensor.value}", lang),
                    style={"color": "#58a6ff", "fontSize": ".82rem", "fontWeight": "600"},
                ),
                html.Td(t(f"alerts.desc.{a.description}", lang), style={"fontSize": ".78rem"}),
                html.Td(alert_badge(a.kind, lang)),
                html.Td(
                    a.timestamp.astimezone().strftime("%d/%m %H:%M:%S"),
                    style={"color": MUTED, "fontSize": ".75rem"},
                ),
            ],
            style={"borderBottom": f"1px solid {BORDER}"},
        )
        for a in alerts
    ]

    return html.Div(
        html.Table(
            [
                html.Thead(
                    html.Tr(
                        [html.Th(t(f"alerts.columns.{h}", lang)) for h in headers],
                        style={"color": MUTED, "fontSize": ".68rem", "textTransform": "uppercase"},
                    )
                ),
                html.Tbody(rows),
            ],
            style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".82rem"},
        ),
        style={"overflowX": "auto"},
    )
