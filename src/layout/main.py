"""
src/layout/main.py
───────────────────
Main application layout composition.

Contains:
  - dcc.Location for routing
  - dcc.Store for the selected language
  - dcc.Interval for live snapshot refresh and the wall clock
  - Navbar + page content container
"""
from dash import dcc, html

from config.settings import settings
from src.i18n.translator import get_lang, t
from src.layout.navbar import create_navbar


def create_layout() -> html.Div:
    """Assemble the root application layout."""
    lang = get_lang()
    return html.Div(
        [
            # ── Client-side state ─────────────────────────────────────────────
            dcc.Store(id="store-lang", data=lang),

            # ── Routing ───────────────────────────────────────────────────────
            dcc.Location(id="url", refresh=False),

            # ── Timers ────────────────────────────────────────────────────────
            # Snapshot refresh; reads engine state only, never fetches
            dcc.Interval(id="interval-live", interval=settings.UPDATE_INTERVAL_MS, n_intervals=0),
            dcc.Interval(id="interval-clock", interval=1_000, n_intervals=0),

            # ── Navigation bar ────────────────────────────────────────────────
            create_navbar(lang),

            # ── Page content ──────────────────────────────────────────────────
            html.Div(
                id="page-content",
                style={"minHeight": "calc(100vh - 60px)"},
            ),

            # ── Footer ────────────────────────────────────────────────────────
            html.Footer(
                [
                    html.Span(t("app.title", lang)),
                    html.Span(" · "),
                    html.Span(settings.SITE_LOCATION),
                    html.Span(" · "),
                    html.Span(t("app.footer", lang), id="footer-note"),
                ],
                style={
                    "textAlign": "center",
                    "padding": ".7rem",
                    "fontSize": ".72rem",
                    "color": "#8b949e",
                    "borderTop": "1px solid #30363d",
                    "marginTop": "2rem",
                },
            ),
        ],
        style={"backgroundColor": "#0d1117", "minHeight": "100vh", "color": "#c9d1d9"},
    )
