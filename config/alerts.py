"""
config/alerts.py
────────────────
Alert severity levels, messages, and display configuration.
"""

from enum import Enum


class AlertSeverity(str, Enum):
    NONE = "none"
    WARNING = "warning"
    CRITICAL = "critical"


SEVERITY_COLORS: dict[str, str] = {
    AlertSeverity.NONE: "#2ea44f",
    AlertSeverity.WARNING: "#e8a020",
    AlertSeverity.CRITICAL: "#da3633",
}

SEVERITY_BG: dict[str, str] = {
    AlertSeverity.NONE: "rgba(46,164,79,0.12)",
    AlertSeverity.WARNING: "rgba(232,160,32,0.12)",
    AlertSeverity.CRITICAL: "rgba(218,54,51,0.12)",
}

SEVERITY_LABELS_EN: dict[str, str] = {
    AlertSeverity.NONE: "Normal",
    AlertSeverity.WARNING: "Warning",
    AlertSeverity.CRITICAL: "Critical",
}

SEVERITY_LABELS_AR: dict[str, str] = {
    AlertSeverity.NONE: "طبيعي",
    AlertSeverity.WARNING: "تحذير",
    AlertSeverity.CRITICAL: "خطر شديد",
}

# Stored on the alert itself; the dashboard translates severity separately
ALERT_MESSAGES: dict[str, str] = {
    AlertSeverity.WARNING: "Warning: high vibration",
    AlertSeverity.CRITICAL: "Critical vibration level",
}

# Severity ordering for sorting (higher = more severe)
SEVERITY_ORDER: dict[str, int] = {
    AlertSeverity.CRITICAL: 2,
    AlertSeverity.WARNING: 1,
    AlertSeverity.NONE: 0,
}


def severity_label(severity: str, lang: str = "en") -> str:
    labels = SEVERITY_LABELS_AR if lang == "ar" else SEVERITY_LABELS_EN
    try:
        return labels[AlertSeverity(severity)]
    except ValueError:
        return severity.capitalize()
