"""
src/callbacks/alerts.py
────────────────────────
Alert log page callbacks.
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
import pandas as pd
from dash import Input, Output, State, html

from config.alerts import SEVERITY_COLORS, SEVERITY_ORDER, AlertSeverity, severity_label
from src.data import store
from src.i18n.translator import t
from src.layout.components.alert_badge import alert_badge
from src.monitoring.registry import AssetRegistry

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"

_SEVERITY_RANK = {sev.value: rank for sev, rank in SEVERITY_ORDER.items()}


def filter_alerts(df: pd.DataFrame, severity: str = "all", bridge_id: str = "all") -> pd.DataFrame:
    """Apply page filters; most severe first, then newest first."""
    if df.empty:
        return df
    if severity != "all":
        df = df[df["severity"] == severity]
    if bridge_id != "all":
        df = df[df["asset_id"] == bridge_id]
    df = df.assign(_sev_order=df["severity"].map(_SEVERITY_RANK).fillna(0))
    return df.sort_values(["_sev_order", "timestamp"], ascending=[False, False]).drop(columns="_sev_order")


def _build_table(df: pd.DataFrame, lang: str) -> html.Div:
    if df.empty:
        return html.Div(t("alerts.none", lang), style={"color": MUTED, "padding": "20px", "textAlign": "center"})

    rows = [
        html.Tr(
            [
                html.Td(row["timestamp"].strftime("%d/%m %H:%M:%S"), style={"color": MUTED, "fontSize": ".78rem"}),
                html.Td(html.Span(row["asset_name"], style={"color": "#58a6ff", "fontSize": ".82rem", "fontWeight": "600"})),
                html.Td(alert_badge(row["severity"], lang)),
                html.Td(f"{row['vibration']:.5f}", style={"fontSize": ".78rem"}),
                html.Td(f"{row['increase_ratio'] * 100:+.1f}%", style={"fontSize": ".78rem"}),
                html.Td(row["message"], style={"fontSize": ".72rem", "color": MUTED}),
            ],
            style={"borderBottom": f"1px solid {BORDER}"},
        )
        for _, row in df.iterrows()
    ]
    headers = [t(k, lang) for k in
               ("table.time", "table.bridge", "table.severity", "table.vibration", "table.ratio", "table.message")]

    return html.Div(
        html.Table(
            [
                html.Thead(html.Tr([html.Th(h) for h in headers],
                                   style={"color": MUTED, "fontSize": ".68rem", "textTransform": "uppercase"})),
                html.Tbody(rows),
            ],
            style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".82rem"},
        ),
        style={"overflowX": "auto"},
    )


def register(app, registry: AssetRegistry) -> None:

    @app.callback(
        [
            Output("alerts-table", "children"),
            Output("alerts-summary-badges", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("alerts-filter-severity", "value"),
            Input("alerts-filter-bridge", "value"),
        ],
        State("store-lang", "data"),
    )
    def update_alerts_table(n_intervals: int, severity_filter: str, bridge_filter: str, lang: str):
        full_df = store.alerts_frame(registry.snapshot())
        counts = full_df.groupby("severity").size() if not full_df.empty else {}

        badges = dbc.Row(
            [
                dbc.Col(
                    html.Div(
                        [
                            html.Div(str(counts.get(sev.value, 0)), style={"fontSize": "1.4rem", "fontWeight": "700", "color": SEVERITY_COLORS[sev]}),
                            html.Div(severity_label(sev, lang), style={"fontSize": ".65rem", "color": MUTED, "textTransform": "uppercase"}),
                        ],
                        style={"backgroundColor": CARD_BG, "border": f"1px solid {BORDER}", "borderRadius": "8px", "padding": "10px 16px"},
                    ),
                    xs=6, md=3,
                )
                for sev in (AlertSeverity.CRITICAL, AlertSeverity.WARNING)
            ],
            className="g-2",
        )

        df = filter_alerts(full_df, severity_filter or "all", bridge_filter or "all")
        return _build_table(df, lang), badges
