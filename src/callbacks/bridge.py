"""
src/callbacks/bridge.py
────────────────────────
Bridge detail page callbacks.
Updates gauge, KPIs, vibration chart and alert log for the selected bridge.
"""
from __future__ import annotations

import logging

import dash_bootstrap_components as dbc
import plotly.graph_objects as go
from dash import Input, Output, State, html
from dash.exceptions import PreventUpdate

from config.alerts import SEVERITY_COLORS, AlertSeverity
from config.monitoring import MonitoringThresholds
from src.data import store
from src.data.models import Asset
from src.i18n.translator import t
from src.layout.components.alert_badge import alert_badge, status_badge
from src.layout.components.kpi_card import mini_kpi
from src.layout.components.risk_gauge import risk_gauge
from src.monitoring.errors import AssetNotFound
from src.monitoring.registry import AssetRegistry

logger = logging.getLogger(__name__)

CARD_BG = "#161b22"
GRID_CLR = "#30363d"
MUTED = "#8b949e"
ACCENT = "#58a6ff"
PLOTLY_TMPL = "plotly_dark"


def _base_layout(title: str = "") -> dict:
    return {
        "template": PLOTLY_TMPL,
        "paper_bgcolor": CARD_BG,
        "plot_bgcolor": CARD_BG,
        "margin": {"l": 10, "r": 10, "t": 30, "b": 10},
        "font": {"color": "#c9d1d9", "size": 11},
        "title": {"text": title, "font": {"size": 12, "color": MUTED}},
        "xaxis": {"gridcolor": GRID_CLR, "showgrid": True},
        "yaxis": {"gridcolor": GRID_CLR, "showgrid": True},
        "legend": {"bgcolor": "rgba(0,0,0,0)", "font": {"size": 10}},
        "height": 260,
    }


def vibration_figure(asset: Asset, thresholds: MonitoringThresholds, lang: str = "en") -> go.Figure:
    """Vibration history with baseline and deviation bands once calibrated."""
    df = store.readings_frame(asset)
    fig = go.Figure()
    if df.empty:
        fig.update_layout(**_base_layout(t("bridge.no_data", lang)))
        return fig

    fig.add_scatter(
        x=df["timestamp"], y=df["vibration"],
        line={"color": ACCENT, "width": 1.5},
        name=t("bridge.vibration", lang),
        mode="lines",
        hovertemplate="%{x|%H:%M:%S}<br>%{y:.5f}<extra></extra>",
    )

    alerting = df[df["severity"].isin([AlertSeverity.WARNING.value, AlertSeverity.CRITICAL.value])]
    if not alerting.empty:
        fig.add_scatter(
            x=alerting["timestamp"], y=alerting["vibration"],
            mode="markers",
            marker={"color": [SEVERITY_COLORS[AlertSeverity(s)] for s in alerting["severity"]], "size": 7},
            name=t("nav.alerts", lang),
            hoverinfo="skip",
        )

    baseline = asset.baseline
    if baseline is not None:
        fig.add_hline(y=baseline, line_dash="dot", line_color="#2ea44f", line_width=1,
                      annotation_text=t("bridge.baseline", lang), annotation_font_color="#2ea44f",
                      annotation_font_size=9)
        fig.add_hline(y=baseline * (1 + thresholds.warning_ratio), line_dash="dash", line_color="#e8a020",
                      line_width=1, annotation_text="Warn", annotation_font_color="#e8a020",
                      annotation_font_size=9)
        fig.add_hline(y=baseline * (1 + thresholds.critical_ratio), line_dash="solid", line_color="#da3633",
                      line_width=1, annotation_text="Crit", annotation_font_color="#da3633",
                      annotation_font_size=9)

    fig.update_layout(**_base_layout())
    return fig


def _kpi_strip(asset: Asset, lang: str, target: int) -> dbc.Row:
    latest = asset.latest_reading
    last_seen = asset.last_seen_at.strftime("%H:%M:%S") if asset.last_seen_at else t("status.never", lang)
    if latest is not None and latest.deviation is not None:
        severity = latest.deviation.severity
        ratio = f"{latest.deviation.increase_ratio * 100:+.1f}%"
        risk = f"{latest.deviation.risk_percent:.0f}%"
        color = SEVERITY_COLORS[severity]
    else:
        severity, ratio, risk, color = None, "—", "—", MUTED

    if asset.baseline is not None:
        baseline = mini_kpi(t("bridge.baseline", lang), f"{asset.baseline:.5f}", ACCENT)
    else:
        count = t("bridge.calibration_count", lang, count=asset.calibration.sample_count, target=target)
        baseline = mini_kpi(t("bridge.calibrating", lang), count, "#e8a020")

    cols = [
        html.Div([html.Div(t("bridge.status", lang), style={"fontSize": ".62rem", "color": MUTED, "textTransform": "uppercase"}),
                  status_badge(asset.connectivity.value, lang)]),
        mini_kpi(t("bridge.last_seen", lang), last_seen),
        baseline,
        mini_kpi(t("bridge.vibration", lang), f"{latest.vibration:.5f}" if latest else "—"),
        mini_kpi(t("bridge.ratio", lang), ratio, color),
        mini_kpi(t("bridge.risk", lang), risk, color),
    ]
    if severity is not None:
        cols.append(alert_badge(severity.value, lang))
    return dbc.Row([dbc.Col(c, xs=4, md=True) for c in cols], className="g-2", align="center")


def _alert_log(asset: Asset, lang: str) -> html.Div | html.Table:
    if not asset.alerts:
        return html.Div(t("overview.no_alerts", lang), style={"color": MUTED, "padding": "12px"})
    headers = [t(k, lang) for k in ("table.time", "table.severity", "table.vibration", "table.ratio", "table.message")]
    return html.Table(
        [
            html.Thead(html.Tr([html.Th(h) for h in headers],
                               style={"color": MUTED, "fontSize": ".65rem", "textTransform": "uppercase"})),
            html.Tbody([
                html.Tr([
                    html.Td(a.time_formatted, style={"fontSize": ".72rem", "color": MUTED}),
                    html.Td(alert_badge(a.severity.value, lang)),
                    html.Td(f"{a.vibration:.5f}", style={"fontSize": ".72rem"}),
                    html.Td(f"{a.increase_ratio * 100:+.1f}%", style={"fontSize": ".72rem"}),
                    html.Td(a.message, style={"fontSize": ".70rem", "color": MUTED}),
                ])
                for a in asset.alerts
            ]),
        ],
        style={"width": "100%", "borderCollapse": "collapse", "fontSize": ".8rem"},
    )


def register(app, registry: AssetRegistry) -> None:

    @app.callback(
        Output("store-bridge", "data"),
        Input("bridge-selector", "value"),
        prevent_initial_call=True,
    )
    def update_selected_bridge(value: str | None) -> str | None:
        return value

    @app.callback(
        [
            Output("bridge-gauge", "children"),
            Output("bridge-kpi-strip", "children"),
            Output("bridge-chart-vibration", "figure"),
            Output("bridge-alert-log", "children"),
        ],
        [
            Input("interval-live", "n_intervals"),
            Input("bridge-selector", "value"),
        ],
        State("store-lang", "data"),
    )
    def update_bridge_panel(n_intervals: int, bridge_id: str | None, lang: str):
        if not bridge_id:
            raise PreventUpdate
        try:
            asset = registry.get_asset(bridge_id)
        except AssetNotFound:
            no_data = html.Div(t("bridge.no_data", lang), style={"color": MUTED, "padding": "20px"})
            empty_fig = go.Figure()
            empty_fig.update_layout(**_base_layout(t("bridge.no_data", lang)))
            return no_data, no_data, empty_fig, no_data

        latest = asset.latest_reading
        if asset.is_calibrated:
            risk = latest.deviation.risk_percent if latest and latest.deviation else 0.0
            gauge = risk_gauge(risk, t("bridge.risk", lang), thresholds=registry.thresholds, height=180)
        else:
            progress = latest.calibration.progress_percent if latest and latest.calibration else 0.0
            gauge = risk_gauge(progress, t("bridge.calibration_progress", lang), calibrating=True, height=180)

        return (
            gauge,
            _kpi_strip(asset, lang, registry.thresholds.calibration_samples),
            vibration_figure(asset, registry.thresholds, lang),
            _alert_log(asset, lang),
        )

    @app.callback(
        Output("bridge-recalibrate-msg", "children"),
        Input("bridge-recalibrate-btn", "n_clicks"),
        State("bridge-selector", "value"),
        State("store-lang", "data"),
        prevent_initial_call=True,
    )
    def recalibrate_bridge(n_clicks: int, bridge_id: str | None, lang: str) -> str:
        if not n_clicks or not bridge_id:
            raise PreventUpdate
        try:
            registry.recalibrate(bridge_id)
        except AssetNotFound:
            logger.warning("Recalibration requested for unknown bridge %s", bridge_id)
            return t("bridge.no_data", lang)
        return t("bridge.recalibrate_done", lang)
