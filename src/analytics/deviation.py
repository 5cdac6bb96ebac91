"""
src/analytics/deviation.py
───────────────────────────
Deviation of a live reading from the calibrated baseline.

  increase_ratio = (v − b) / b      (negative: quieter than baseline)
  risk_percent   = max(0, ratio × 100)

Severity is evaluated in priority order, first match wins:
  ratio ≥ critical_ratio → critical
  ratio ≥ warning_ratio  → warning
  otherwise              → none
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from config.alerts import ALERT_MESSAGES, AlertSeverity
from config.monitoring import DEFAULT_THRESHOLDS, MonitoringThresholds
from src.data.models import DeviationInfo
from src.monitoring.errors import DivisionByZeroBaseline


@dataclass(frozen=True)
class DeviationResult:
    increase_ratio: float
    risk_percent: float
    severity: AlertSeverity

    @property
    def is_alert(self) -> bool:
        return self.severity is not AlertSeverity.NONE

    def info(self) -> DeviationInfo:
        return DeviationInfo(
            increase_ratio=self.increase_ratio,
            risk_percent=self.risk_percent,
            severity=self.severity,
            alert=self.is_alert,
            message=ALERT_MESSAGES.get(self.severity),
        )


def classify_severity(
    increase_ratio: float,
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
) -> AlertSeverity:
    if increase_ratio >= thresholds.critical_ratio:
        return AlertSeverity.CRITICAL
    if increase_ratio >= thresholds.warning_ratio:
        return AlertSeverity.WARNING
    return AlertSeverity.NONE


def analyze(
    vibration: float,
    baseline: float,
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
) -> DeviationResult:
    """
    Compare a vibration value against the baseline. Does not touch state.

    Raises:
        DivisionByZeroBaseline: if baseline is zero or not finite
    """
    if baseline == 0.0 or not math.isfinite(baseline):
        raise DivisionByZeroBaseline(f"cannot compute deviation against baseline {baseline!r}")

    ratio = (vibration - baseline) / baseline
    return DeviationResult(
        increase_ratio=ratio,
        risk_percent=max(0.0, ratio * 100.0),
        severity=classify_severity(ratio, thresholds),
    )
