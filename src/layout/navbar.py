"""
src/layout/navbar.py
─────────────────────
Navigation bar with page links, wall clock and language toggle.
"""

import dash_bootstrap_components as dbc
from dash import html

from src.i18n.translator import t

NAV_BG = "#0d1117"
BORDER = "#30363d"
ACCENT = "#58a6ff"
MUTED = "#8b949e"

PAGES = [
    ("nav-live", "nav.live", "/"),
    ("nav-alerts", "nav.alerts", "/alerts"),
    ("nav-report", "nav.report", "/report"),
]


def create_navbar(lang: str = "es") -> dbc.Navbar:
    return dbc.Navbar(
        dbc.Container(
            [
                # Brand
                dbc.NavbarBrand(
                    [
                        html.Span("📡", style={"marginRight": "8px", "fontSize": "1.1rem"}),
                        html.Span(
                            t("app.title", lang),
                            id="navbar-title",
                            style={"fontWeight": "700", "letterSpacing": ".04em"},
                        ),
                    ],
                    href="/",
                    style={"color": ACCENT, "textDecoration": "none"},
                ),
                dbc.NavbarToggler(id="navbar-toggler", n_clicks=0),
                dbc.Collapse(
                    dbc.Nav(
                        [
                            *[
                                dbc.NavItem(dbc.NavLink(t(key, lang), href=href, id=nav_id, active="exact"))
                                for nav_id, key, href in PAGES
                            ],
                            # Wall clock, ticks independently of synchronization
                            dbc.NavItem(
                                html.Span(
                                    id="navbar-clock",
                                    style={
                                        "color": MUTED,
                                        "fontSize": ".78rem",
                                        "fontFamily": "monospace",
                                        "marginLeft": "12px",
                                    },
                                )
                            ),
                            # Language toggle
                            dbc.NavItem(
                                html.Div(
                                    [
                                        html.Button(
                                            "ES",
                                            id="lang-es-btn",
                                            n_clicks=0,
                                            style=lang_btn_style(lang == "es"),
                                        ),
                                        html.Button(
                                            "EN",
                                            id="lang-en-btn",
                                            n_clicks=0,
                                            style=lang_btn_style(lang == "en"),
                                        ),
                                    ],
                                    style={
                                        "display": "flex",
                                        "gap": "4px",
                                        "alignItems": "center",
                                        "marginLeft": "12px",
                                    },
                                )
                            ),
                        ],
                        className="ms-auto",
                        navbar=True,
                    ),
                    id="navbar-collapse",
                    navbar=True,
                    is_open=False,
                ),
            ],
            fluid=True,
        ),
        color=NAV_BG,
        dark=True,
        sticky="top",
        style={"borderBottom": f"1px solid {BORDER}", "padding": ".5rem 1rem"},
    )


def lang_btn_style(active: bool) -> dict:
    return {
        "background": "rgba(88,166,255,0.15)" if active else "transparent",
        "border": f"1px solid {BORDER}",
        "color": ACCENT if active else MUTED,
        "borderRadius": "4px",
        "fontSize": ".72rem",
        "fontWeight": "700",
        "padding": "2px 8px",
        "cursor": "pointer",
    }
