"""
src/pages/bridge.py
────────────────────
Bridge detail page.

Layout: sidebar selector + detail panel with live vibration chart.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from src.i18n.translator import t
from src.layout.sidebar import bridge_options, create_sidebar
from src.monitoring.registry import AssetRegistry

MUTED = "#8b949e"
ACCENT = "#58a6ff"


def layout(registry: AssetRegistry, lang: str = "en", selected: str | None = None) -> html.Div:
    assets = registry.snapshot()
    header = html.Div(
        [
            html.H2(t("bridge.title", lang), className="page-title"),
            html.P(t("bridge.subtitle", lang), className="page-subtitle"),
        ],
        className="page-header",
    )
    if not assets:
        return html.Div(
            [header, html.Div(t("bridge.no_bridge", lang), style={"color": MUTED, "padding": "20px"})],
            style={"padding": "1.5rem"},
        )

    region_names = {r.id: r.name for r in registry.regions()}
    ids = {a.id for a in assets}
    options = bridge_options(assets, region_names)
    value = selected if selected in ids else options[0]["value"]

    return html.Div(
        [
            header,
            dbc.Row(
                [
                    # ── Sidebar ───────────────────────────────────────────────
                    dbc.Col(
                        html.Div(
                            [
                                create_sidebar(options, value, lang),
                                html.Button(
                                    t("bridge.recalibrate", lang),
                                    id="bridge-recalibrate-btn",
                                    n_clicks=0,
                                    style={
                                        "marginTop": "16px",
                                        "width": "100%",
                                        "fontSize": ".78rem",
                                        "fontWeight": "600",
                                        "color": ACCENT,
                                        "background": "transparent",
                                        "border": f"1px solid {ACCENT}",
                                        "borderRadius": "4px",
                                        "padding": "4px 8px",
                                        "cursor": "pointer",
                                    },
                                ),
                                html.Div(id="bridge-recalibrate-msg", style={"fontSize": ".72rem", "color": MUTED, "marginTop": "6px"}),
                            ]
                        ),
                        md=2,
                    ),

                    # ── Main detail panel ─────────────────────────────────────
                    dbc.Col(
                        [
                            dbc.Row(
                                [
                                    dbc.Col(html.Div([html.Div(id="bridge-gauge")], className="chart-card"), md=3),
                                    dbc.Col(html.Div([html.Div(id="bridge-kpi-strip")], className="chart-card"), md=9),
                                ],
                                className="g-3 mb-3",
                            ),
                            html.Div(
                                [
                                    html.Div(t("bridge.chart_title", lang), className="chart-title"),
                                    dcc.Graph(id="bridge-chart-vibration", config={"displayModeBar": False}),
                                ],
                                className="chart-card mb-3",
                            ),
                            html.Div(
                                [
                                    html.Div(t("bridge.alert_log", lang), className="chart-title"),
                                    html.Div(id="bridge-alert-log"),
                                ],
                                className="chart-card",
                            ),
                        ],
                        md=10,
                    ),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
