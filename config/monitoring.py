"""
config/monitoring.py
────────────────────
Signal-processing constants and demo registry content.

Deviation zones (relative to the calibrated baseline b):
  ratio = (v - b) / b
  ratio < warning_ratio          → Normal
  warning_ratio ≤ ratio < critical_ratio → Warning  (+50% over baseline)
  ratio ≥ critical_ratio         → Critical (+100% over baseline)
"""
from dataclasses import dataclass

GRAVITY_MS2 = 9.81


@dataclass(frozen=True)
class MonitoringThresholds:
    calibration_samples: int = 50
    warning_ratio: float = 0.5
    critical_ratio: float = 1.0
    history_capacity: int = 200
    alert_capacity: int = 20
    gravity: float = GRAVITY_MS2

    def __post_init__(self) -> None:
        if self.calibration_samples < 1:
            raise ValueError("calibration_samples must be at least 1")
        if not 0.0 < self.warning_ratio <= self.critical_ratio:
            raise ValueError("expected 0 < warning_ratio <= critical_ratio")
        if self.history_capacity < self.calibration_samples - 1:
            raise ValueError("history_capacity must hold a full calibration window")
        if self.alert_capacity < 1:
            raise ValueError("alert_capacity must be at least 1")


DEFAULT_THRESHOLDS = MonitoringThresholds()

# ── Demo regions seeded into an empty database ────────────────────────────────
DEMO_REGIONS: list[dict[str, str]] = [
    {"id": "region_riyadh", "name": "Riyadh Region"},
    {"id": "region_tabuk", "name": "Tabuk Region"},
]

# Bridges created for the simulated feed when a demo region has none
DEMO_BRIDGES: list[dict[str, str]] = [
    {"name": "King Fahd Bridge", "location": "Riyadh, Wadi Hanifa", "region_id": "region_riyadh"},
    {"name": "Northern Ring Overpass", "location": "Riyadh, Northern Ring Rd", "region_id": "region_riyadh"},
    {"name": "Tabuk Valley Bridge", "location": "Tabuk, Route 15", "region_id": "region_tabuk"},
]
