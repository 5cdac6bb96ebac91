"""
src/layout/sidebar.py
──────────────────────
Bridge selector sidebar (shown on /bridges page).
"""
from __future__ import annotations

import dash_bootstrap_components as dbc
from dash import html

from src.data.models import Asset, ConnectivityState
from src.i18n.translator import t

CARD_BG = "#161b22"
BORDER = "#30363d"
MUTED = "#8b949e"
ONLINE = "#2ea44f"


def bridge_options(assets: list[Asset], region_names: dict[str, str]) -> list[dict]:
    return [
        {
            "label": html.Div(
                [
                    html.Span(
                        "● ",
                        style={"color": ONLINE if a.connectivity is ConnectivityState.ONLINE else MUTED},
                    ),
                    html.Span(a.name, style={"fontWeight": "600", "fontSize": ".9rem"}),
                    html.Div(region_names.get(a.region_id, a.region_id), style={"fontSize": ".68rem", "color": MUTED}),
                ]
            ),
            "value": a.id,
        }
        for a in sorted(assets, key=lambda a: (region_names.get(a.region_id, ""), a.name))
    ]


def create_sidebar(options: list[dict], value: str | None, lang: str = "en") -> html.Div:
    """Bridge selector with connectivity dots."""
    return html.Div(
        [
            html.Div(
                t("bridge.select", lang),
                style={
                    "fontSize": ".68rem",
                    "color": MUTED,
                    "textTransform": "uppercase",
                    "letterSpacing": ".08em",
                    "marginBottom": "8px",
                },
            ),
            dbc.RadioItems(
                id="bridge-selector",
                options=options,
                value=value,
                inputStyle={"marginInlineEnd": "8px"},
                labelStyle={"cursor": "pointer", "marginBottom": "8px"},
                style={"display": "flex", "flexDirection": "column", "gap": "4px"},
            ),
        ],
        style={
            "backgroundColor": CARD_BG,
            "border": f"1px solid {BORDER}",
            "borderRadius": "8px",
            "padding": "14px",
            "minWidth": "160px",
        },
    )
