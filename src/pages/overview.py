"""
src/pages/overview.py
──────────────────────
Network overview page.

Static structure; dynamic KPI data injected via callbacks.
"""

import dash_bootstrap_components as dbc
from dash import html

from src.i18n.translator import t


def layout(lang: str = "en") -> html.Div:
    return html.Div(
        [
            # ── Page header ───────────────────────────────────────────────────
            html.Div(
                [
                    html.H2(t("overview.title", lang), className="page-title"),
                    html.P(t("overview.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            # ── Network KPI banner (dynamic) ──────────────────────────────────
            html.Div(id="overview-kpi-banner", className="mb-4"),
            # ── Bridge cards grouped by region (dynamic) ──────────────────────
            html.Div(id="overview-region-cards", className="mb-3"),
            # ── Recent alerts + live event feed ───────────────────────────────
            dbc.Row(
                [
                    dbc.Col(
                        html.Div(
                            [
                                html.Div(t("overview.recent_alerts", lang), className="chart-title"),
                                html.Div(id="overview-alerts-table"),
                            ],
                            className="chart-card",
                        ),
                        md=7,
                    ),
                    dbc.Col(
                        html.Div(
                            [
                                html.Div(t("overview.live_events", lang), className="chart-title"),
                                html.Div(id="overview-event-feed"),
                            ],
                            className="chart-card",
                        ),
                        md=5,
                    ),
                ],
                className="g-3",
            ),
        ],
        style={"padding": "1.5rem"},
    )
