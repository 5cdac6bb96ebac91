"""
src/layout/components/kpi_card.py
──────────────────────────────────
Reusable KPI indicator cards.
"""
from __future__ import annotations

from dash import html

CARD_BG = "#161b22"
MUTED = "#8b949e"
TRACK = "#21262d"


def kpi_card(
    label: str,
    value: str,
    color: str = "#c9d1d9",
    sub_label: str = "",
    border_color: str = "#30363d",
    progress: float | None = None,
) -> html.Div:
    """
    Compact KPI metric card.

    Args:
        label: Metric name (shown above value)
        value: Formatted value string
        color: Value text color (reflects status)
        sub_label: Small secondary label below value
        border_color: Card border color (can reflect severity)
        progress: Optional 0–100 fill shown as a thin bar under the value
    """
    children = [
        html.Div(label, style={"fontSize": ".68rem", "color": MUTED, "textTransform": "uppercase", "letterSpacing": ".06em"}),
        html.Div(value, style={"fontSize": "1.4rem", "fontWeight": "700", "color": color, "lineHeight": "1.2", "marginTop": "2px"}),
    ]
    if progress is not None:
        pct = max(0.0, min(100.0, progress))
        children.append(
            html.Div(
                html.Div(style={"width": f"{pct:.0f}%", "height": "100%", "backgroundColor": color, "borderRadius": "2px"}),
                style={"height": "4px", "backgroundColor": TRACK, "borderRadius": "2px", "marginTop": "6px"},
            )
        )
    if sub_label:
        children.append(html.Div(sub_label, style={"fontSize": ".68rem", "color": MUTED, "marginTop": "2px"}))

    return html.Div(
        children,
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {border_color}",
            "borderRadius": "8px",
            "padding": "14px 16px",
            "minWidth": "120px",
        },
    )


def mini_kpi(label: str, value: str, color: str = "#c9d1d9") -> html.Div:
    """Compact inline KPI for bridge cards."""
    return html.Div([
        html.Div(label, style={"fontSize": ".62rem", "color": MUTED, "textTransform": "uppercase"}),
        html.Div(value, style={"fontSize": ".85rem", "fontWeight": "700", "color": color}),
    ])
