"""
src/callbacks/navigation.py — Routing, navbar, language and wall clock callbacks.
"""
from __future__ import annotations

from datetime import datetime

from dash import Input, Output, State, ctx

from src.i18n.translator import LANGS, t
from src.layout.navbar import PAGES, lang_btn_style
from src.pages import alerts, overview, report

ROUTES = {
    "/": overview.layout,
    "/alerts": alerts.layout,
    "/report": report.layout,
}


def register(app) -> None:
    """Register routing and navbar callbacks."""

    # ── Page routing ──────────────────────────────────────────────────────────
    @app.callback(
        Output("page-content", "children"),
        Input("url", "pathname"),
        Input("store-lang", "data"),
    )
    def display_page(pathname: str, lang: str):
        return ROUTES.get(pathname, overview.layout)(lang)

    # ── Navbar collapse ───────────────────────────────────────────────────────
    @app.callback(
        Output("navbar-collapse", "is_open"),
        Input("navbar-toggler", "n_clicks"),
        State("navbar-collapse", "is_open"),
        prevent_initial_call=True,
    )
    def toggle_navbar(n_clicks: int, is_open: bool) -> bool:
        return not is_open

    # ── Language toggle ───────────────────────────────────────────────────────
    @app.callback(
        Output("store-lang", "data"),
        Input("lang-es-btn", "n_clicks"),
        Input("lang-en-btn", "n_clicks"),
        prevent_initial_call=True,
    )
    def update_lang(n_es: int, n_en: int) -> str:
        return "en" if ctx.triggered_id == "lang-en-btn" else "es"

    @app.callback(
        [Output(nav_id, "children") for nav_id, _, _ in PAGES]
        + [
            Output("navbar-title", "children"),
            Output("lang-es-btn", "style"),
            Output("lang-en-btn", "style"),
        ],
        Input("store-lang", "data"),
    )
    def relabel_navbar(lang: str):
        lang = lang if lang in LANGS else "es"
        return [t(key, lang) for _, key, _ in PAGES] + [
            t("app.title", lang),
            lang_btn_style(lang == "es"),
            lang_btn_style(lang == "en"),
        ]

    # ── Wall clock ────────────────────────────────────────────────────────────
    @app.callback(
        Output("navbar-clock", "children"),
        Input("interval-clock", "n_intervals"),
    )
    def tick_clock(n_intervals: int) -> str:
        return datetime.now().strftime("%d/%m/%Y %H:%M:%S")
