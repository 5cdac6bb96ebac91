"""
src/layout/components/alert_badge.py
──────────────────────────────────────
Severity and connectivity badges.
"""

from dash import html

from config.alerts import SEVERITY_COLORS, AlertSeverity, severity_label
from src.data.models import ConnectivityState
from src.i18n.translator import t

MUTED = "#8b949e"
ONLINE = "#2ea44f"


def _badge(label: str, color: str) -> html.Span:
    return html.Span(
        label,
        style={
            "fontSize": ".65rem",
            "fontWeight": "700",
            "color": color,
            "border": f"1px solid {color}",
            "borderRadius": "4px",
            "padding": "1px 7px",
            "whiteSpace": "nowrap",
        },
    )


def alert_badge(severity: str, lang: str = "en") -> html.Span:
    """Inline severity badge with color-coded border."""
    try:
        color = SEVERITY_COLORS[AlertSeverity(severity)]
    except ValueError:
        color = MUTED
    return _badge(severity_label(severity, lang), color)


def status_badge(state: str, lang: str = "en") -> html.Span:
    online = state == ConnectivityState.ONLINE.value
    return _badge(t(f"status.{state}", lang), ONLINE if online else MUTED)
