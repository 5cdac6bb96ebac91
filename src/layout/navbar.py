"""
src/layout/navbar.py
─────────────────────
Navigation bar with page links and EN/AR language toggle.
"""

import dash_bootstrap_components as dbc
from dash import html

from src.i18n.translator import t

NAV_BG = "#0d1117"
BORDER = "#30363d"
ACCENT = "#58a6ff"

NAV_PAGES = [
    ("nav-overview", "nav.overview", "/"),
    ("nav-bridges", "nav.bridges", "/bridges"),
    ("nav-alerts", "nav.alerts", "/alerts"),
]


def create_navbar(lang: str = "en") -> dbc.Navbar:
    links = [
        dbc.NavItem(dbc.NavLink(t(key, lang), href=href, id=link_id, active="exact"))
        for link_id, key, href in NAV_PAGES
    ]
    return dbc.Navbar(
        dbc.Container(
            [
                dbc.NavbarBrand(
                    [
                        html.Span("〰", style={"marginRight": "8px", "fontSize": "1.1rem"}),
                        html.Span(
                            t("app.brand", lang),
                            id="navbar-brand-text",
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
                            *links,
                            dbc.NavItem(
                                html.Div(
                                    [
                                        html.Button("EN", id="lang-en-btn", n_clicks=0, style=lang_btn_style(lang == "en")),
                                        html.Button("ع", id="lang-ar-btn", n_clicks=0, style=lang_btn_style(lang == "ar")),
                                    ],
                                    style={
                                        "display": "flex",
                                        "gap": "4px",
                                        "alignItems": "center",
                                        "marginInlineStart": "12px",
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
        "color": ACCENT if active else "#8b949e",
        "borderRadius": "4px",
        "fontSize": ".72rem",
        "fontWeight": "700",
        "padding": "2px 8px",
        "cursor": "pointer",
    }
