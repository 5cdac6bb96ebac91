"""
src/monitoring/ledger.py
────────────────────────
Bounded per-bridge logs.

  Alert ledger  : newest first, tail (oldest) dropped past capacity
  History ring  : chronological, head (oldest) dropped past capacity

Both functions return new lists; the inputs are never modified.
"""
from __future__ import annotations

from collections.abc import Sequence

from config.alerts import ALERT_MESSAGES
from config.monitoring import DEFAULT_THRESHOLDS
from src.analytics.deviation import DeviationResult
from src.data.models import Alert, Reading


def next_alert_id(alerts: Sequence[Alert], reading: Reading) -> int:
    """Epoch-millisecond id, bumped past the newest existing id."""
    candidate = int(reading.timestamp.timestamp() * 1000)
    if alerts and alerts[0].id >= candidate:
        return alerts[0].id + 1
    return candidate


def record_if_alerting(
    alerts: Sequence[Alert],
    result: DeviationResult,
    reading: Reading,
    asset_id: str,
    capacity: int = DEFAULT_THRESHOLDS.alert_capacity,
) -> tuple[list[Alert], Alert | None]:
    if not result.is_alert:
        return list(alerts), None

    alert = Alert(
        id=next_alert_id(alerts, reading),
        asset_id=asset_id,
        severity=result.severity,
        message=ALERT_MESSAGES[result.severity],
        vibration=reading.vibration,
        increase_ratio=result.increase_ratio,
        risk_percent=result.risk_percent,
        timestamp=reading.timestamp,
        time_formatted=reading.time_formatted,
    )
    return [alert, *alerts][:capacity], alert


def append_history(
    readings: Sequence[Reading],
    reading: Reading,
    capacity: int = DEFAULT_THRESHOLDS.history_capacity,
) -> list[Reading]:
    history = [*readings, reading]
    if len(history) > capacity:
        history = history[len(history) - capacity:]
    return history
