"""
src/layout/components/sensor_card.py
─────────────────────────────────────
Live sensor card: last known value, trend delta, active flag, update time.
"""
from __future__ import annotations

from datetime import datetime

from dash import html

from config.sensors import SensorSpec
from src.data.models import TrendDelta
from src.i18n.translator import t

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"
INACTIVE = "#6B7280"
UP_COLOR = "#2ea44f"
DOWN_COLOR = "#da3633"


def format_value(value: float | None, spec: SensorSpec) -> str:
    if value is None:
        return "—"
    return f"{value:.{spec.precision}f} {spec.unit}"


def _trend_line(trend: TrendDelta, lang: str) -> html.Div:
    arrow, color, label = (
        ("▲", UP_COLOR, t("cards.trend_up", lang))
        if trend.up
        else ("▼", DOWN_COLOR, t("cards.trend_down", lang))
    )
    return html.Div(
        [
            html.Span(f"{arrow} {trend.percent_change:.1f}%", style={"color": color, "fontWeight": "700"}),
            html.Span(f" {label}", style={"color": MUTED}),
        ],
        style={"fontSize": ".72rem", "marginTop": "4px"},
    )


def sensor_card(
    spec: SensorSpec,
    value: float | None,
    trend: TrendDelta | None = None,
    active: bool = True,
    updated_at: datetime | None = None,
    lang: str = "es",
) -> html.Div:
    """
    Card for one metric.

    Args:
        spec: Sensor definition (unit, precision, colour, icon)
        value: Last known valid value, None if never seen
        trend: Delta against the previous reading, hidden when inactive
        active: False when the feed is failing or the metric dropped out
        updated_at: Time of the last successful sync
        lang: Display language
    """
    accent = spec.color if active else INACTIVE
    header = [
        html.Span(spec.icon, style={"fontSize": "1.3rem", "opacity": 1 if active else 0.5}),
        html.Span(
            t(f"metrics.{spec.metric.value}", lang),
            style={
                "fontSize": ".72rem",
                "color": MUTED,
                "textTransform": "uppercase",
                "letterSpacing": ".06em",
                "marginLeft": "8px",
            },
        ),
    ]
    if not active:
        header.append(
            html.Span(
                t("cards.inactive", lang),
                style={
                    "fontSize": ".62rem",
                    "color": INACTIVE,
                    "border": f"1px solid {INACTIVE}",
                    "borderRadius": "4px",
                    "padding": "0 6px",
                    "marginLeft": "auto",
                },
            )
        )

    children = [
        html.Div(header, style={"display": "flex", "alignItems": "center"}),
        html.Div(
            format_value(value, spec),
            style={
                "fontSize": "1.6rem",
                "fontWeight": "700",
                "color": accent,
                "lineHeight": "1.2",
                "marginTop": "8px",
            },
        ),
    ]
    if not active:
        children.append(
            html.Div(t("cards.last_valid", lang), style={"fontSize": ".68rem", "color": MUTED})
        )
    elif trend is not None:
        children.append(_trend_line(trend, lang))

    stamp = updated_at.astimezone().strftime("%H:%M:%S") if updated_at else t("cards.never", lang)
    children.append(
        html.Div(
            f"{t('cards.updated', lang)}: {stamp}",
            style={"fontSize": ".65rem", "color": MUTED, "marginTop": "6px"},
        )
    )

    return html.Div(
        children,
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {accent if active else BORDER}",
            "borderRadius": "8px",
            "padding": "14px 16px",
            "minWidth": "160px",
        },
    )
