"""
src/layout/components/status_banner.py
───────────────────────────────────────
Connection indicators for the live panel.

The failure banner tells "can't reach sensors" (connection) apart from
"sensors sending bad data" (data); it is hidden while the feed is healthy.
"""
from __future__ import annotations

from dash import html

from src.data.models import ConnectionState, FailureKind, SyncStatus
from src.i18n.translator import t
from src.sync.synchronizer import SyncState

MUTED = "#8b949e"

_STATE_STYLE: dict[SyncState, tuple[str, str]] = {
    SyncState.CONNECTED_PUSH: ("#2ea44f", "status.connected_push"),
    SyncState.POLLING: ("#e8a020", "status.polling"),
    SyncState.INITIALIZING: ("#58a6ff", "status.initializing"),
    SyncState.ERROR: ("#da3633", "status.error"),
}


def status_pill(state: SyncState, connection: ConnectionState, lang: str = "es") -> html.Div:
    color, key = _STATE_STYLE[state]
    last = connection.last_successful_sync
    stamp = last.astimezone().strftime("%H:%M:%S") if last else t("cards.never", lang)
    return html.Div(
        [
            html.Span("●", style={"color": color, "marginRight": "6px"}),
            html.Span(t(key, lang), style={"fontWeight": "600", "color": color}),
            html.Span(
                f" · {t('status.last_sync', lang)}: {stamp}",
                style={"color": MUTED, "fontSize": ".75rem"},
            ),
        ],
        style={"fontSize": ".82rem"},
    )


def failure_banner(connection: ConnectionState, lang: str = "es") -> html.Div | None:
    if connection.status == SyncStatus.CONNECTED or connection.last_failure is None:
        return None

    if connection.last_failure == FailureKind.DATA:
        title, body, color = t("status.data_title", lang), t("status.data_body", lang), "#e8a020"
    else:
        title, body, color = t("status.connection_title", lang), t("status.connection_body", lang), "#da3633"

    return html.Div(
        [
            html.Div(f"⚠ {title}", style={"fontWeight": "700", "color": color, "fontSize": ".85rem"}),
            html.Div(body, style={"fontSize": ".78rem", "color": "#c9d1d9", "marginTop": "2px"}),
        ],
        style={
            "border": f"1px solid {color}",
            "borderRadius": "8px",
            "padding": "10px 14px",
            "backgroundColor": "rgba(218,54,51,0.08)",
        },
    )
