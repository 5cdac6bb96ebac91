"""
src/pages/alerts.py
────────────────────
Alert log page with severity and bridge filters.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import dcc, html

from config.alerts import AlertSeverity, severity_label
from src.i18n.translator import t
from src.monitoring.registry import AssetRegistry

MUTED = "#8b949e"

_LABEL_STYLE = {"fontSize": ".72rem", "color": MUTED, "textTransform": "uppercase"}


def layout(registry: AssetRegistry, lang: str = "en") -> html.Div:
    all_option = {"label": t("alerts.all", lang), "value": "all"}
    severity_options = [all_option] + [
        {"label": severity_label(sev, lang), "value": sev.value}
        for sev in (AlertSeverity.CRITICAL, AlertSeverity.WARNING)
    ]
    bridge_options = [all_option] + [
        {"label": a.name, "value": a.id} for a in sorted(registry.snapshot(), key=lambda a: a.name)
    ]

    return html.Div(
        [
            html.Div(
                [
                    html.H2(t("alerts.title", lang), className="page-title"),
                    html.P(t("alerts.subtitle", lang), className="page-subtitle"),
                ],
                className="page-header",
            ),
            # ── Summary badges ─────────────────────────────────────────────────
            html.Div(id="alerts-summary-badges", className="mb-3"),
            # ── Filter row ─────────────────────────────────────────────────────
            dbc.Row(
                [
                    dbc.Col(
                        [
                            html.Label(t("alerts.severity", lang), style=_LABEL_STYLE),
                            dcc.Dropdown(
                                id="alerts-filter-severity",
                                options=severity_options,
                                value="all",
                                clearable=False,
                                style={"fontSize": ".85rem"},
                                className="dark-dropdown",
                            ),
                        ],
                        md=3,
                    ),
                    dbc.Col(
                        [
                            html.Label(t("alerts.bridge", lang), style=_LABEL_STYLE),
                            dcc.Dropdown(
                                id="alerts-filter-bridge",
                                options=bridge_options,
                                value="all",
                                clearable=False,
                                style={"fontSize": ".85rem"},
                                className="dark-dropdown",
                            ),
                        ],
                        md=3,
                    ),
                ],
                className="g-3 mb-3",
            ),
            # ── Alert table (dynamic) ──────────────────────────────────────────
            html.Div(html.Div(id="alerts-table"), className="chart-card"),
        ],
        style={"padding": "1.5rem"},
    )
