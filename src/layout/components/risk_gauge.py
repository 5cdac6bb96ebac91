"""
src/layout/components/risk_gauge.py
────────────────────────────────────
Bridge gauge: calibration progress while learning, deviation risk afterwards.
"""
from __future__ import annotations

import plotly.graph_objects as go
from dash import dcc

from config.alerts import SEVERITY_COLORS, AlertSeverity
from config.monitoring import DEFAULT_THRESHOLDS, MonitoringThresholds

CARD_BG = "#161b22"
ACCENT = "#58a6ff"


def _risk_color(risk: float, thresholds: MonitoringThresholds) -> str:
    if risk >= thresholds.critical_ratio * 100:
        return SEVERITY_COLORS[AlertSeverity.CRITICAL]
    if risk >= thresholds.warning_ratio * 100:
        return SEVERITY_COLORS[AlertSeverity.WARNING]
    return SEVERITY_COLORS[AlertSeverity.NONE]


def risk_gauge(
    value: float,
    title: str,
    calibrating: bool = False,
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
    height: int = 200,
) -> dcc.Graph:
    """
    Plotly gauge indicator for one bridge.

    Args:
        value: calibration progress (0–100) or risk percent (0–200, clipped)
        title: Label shown above the number
        calibrating: Render as a calibration progress dial
        height: Figure height in px
    """
    warn = thresholds.warning_ratio * 100
    crit = thresholds.critical_ratio * 100
    if calibrating:
        color = ACCENT
        axis_max = 100.0
        steps = []
        threshold = None
    else:
        color = _risk_color(value, thresholds)
        axis_max = max(crit * 2, 100.0)
        steps = [
            {"range": [0, warn], "color": "rgba(46,164,79,0.10)"},
            {"range": [warn, crit], "color": "rgba(232,160,32,0.12)"},
            {"range": [crit, axis_max], "color": "rgba(218,54,51,0.15)"},
        ]
        threshold = {"line": {"color": "#da3633", "width": 2}, "thickness": 0.75, "value": crit}

    gauge = {
        "axis": {
            "range": [0, axis_max],
            "tickwidth": 1,
            "tickcolor": "#30363d",
            "tickfont": {"color": "#8b949e", "size": 9},
        },
        "bar": {"color": color, "thickness": 0.25},
        "bgcolor": "rgba(0,0,0,0)",
        "borderwidth": 0,
        "steps": steps,
    }
    if threshold:
        gauge["threshold"] = threshold

    fig = go.Figure(go.Indicator(
        mode="gauge+number",
        value=min(value, axis_max),
        number={"suffix": "%", "font": {"color": color, "size": 28}, "valueformat": ".0f"},
        title={"text": title, "font": {"color": "#8b949e", "size": 12}},
        gauge=gauge,
    ))

    fig.update_layout(
        paper_bgcolor=CARD_BG,
        plot_bgcolor=CARD_BG,
        margin=dict(l=20, r=20, t=40, b=20),
        height=height,
        font=dict(color="#c9d1d9"),
    )

    return dcc.Graph(
        figure=fig,
        config={"displayModeBar": False},
        style={"height": f"{height}px"},
    )
