"""
src/monitoring/pipeline.py
──────────────────────────
Pure per-bridge state transitions.

Each function takes the current Asset and returns the next Asset together
with the events it produced. Nothing here locks, logs to a transport, or
persists; AssetRegistry applies the result and dispatches the events.

Ingestion of one reading:
  1. normalize axes → vibration
  2. last_seen_at = now, connectivity = online
  3. uncalibrated → calibration step, append history, [calibration-complete], data
  4. calibrated   → deviation, alert ledger, append history, data, [alert]
  5. bridges-status (online)
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta

from config.monitoring import DEFAULT_THRESHOLDS, MonitoringThresholds
from src.analytics import calibration, deviation
from src.analytics.normalizer import vibration_from_axes
from src.data.models import Alert, Asset, ConnectivityState, Reading, Uncalibrated
from src.monitoring.errors import InvalidReading
from src.monitoring.events import (
    AlertRaised,
    CalibrationCompleted,
    CalibrationStarted,
    ConnectivityChanged,
    DataEvent,
    Event,
)
from src.monitoring.ledger import append_history, record_if_alerting


@dataclass(frozen=True)
class Transition:
    asset: Asset
    events: tuple[Event, ...] = ()


@dataclass(frozen=True)
class ReadingOutcome(Transition):
    reading: Reading | None = None
    alert: Alert | None = None

    @property
    def calibration_complete(self) -> bool:
        return any(isinstance(e, CalibrationCompleted) for e in self.events)


def format_time(ts: datetime) -> str:
    return ts.strftime("%H:%M:%S")


def _require_finite(**values: float) -> None:
    bad = [name for name, value in values.items() if not math.isfinite(value)]
    if bad:
        raise InvalidReading(f"sample produced non-finite {', '.join(bad)}")


def ingest_reading(
    asset: Asset,
    x: float,
    y: float,
    z: float,
    now: datetime,
    thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
) -> ReadingOutcome:
    """
    Apply one accelerometer sample to a bridge.

    Raises:
        InvalidReading: if the sample's vibration, its calibration sum or
            its deviation ratio is not finite. The asset is left unchanged.
    """
    vibration = vibration_from_axes(x, y, z, thresholds.gravity)
    _require_finite(vibration=vibration)
    base = {"x": x, "y": y, "z": z, "vibration": vibration, "timestamp": now, "time_formatted": format_time(now)}
    events: list[Event] = []
    alert: Alert | None = None

    if isinstance(asset.calibration, Uncalibrated):
        step = calibration.observe(
            asset.calibration,
            vibration,
            [r.vibration for r in asset.readings],
            thresholds.calibration_samples,
        )
        if isinstance(step.state, Uncalibrated):
            _require_finite(calibration_sum=step.state.accumulated_sum)
        reading = Reading(**base, calibration=step.info())
        updated = asset.model_copy(update={
            "calibration": step.state,
            "readings": append_history(asset.readings, reading, thresholds.history_capacity),
            "connectivity": ConnectivityState.ONLINE,
            "last_seen_at": now,
        })
        if step.completed:
            events.append(CalibrationCompleted(asset_id=asset.id, baseline=step.baseline))
    else:
        result = deviation.analyze(vibration, asset.calibration.baseline, thresholds)
        _require_finite(increase_ratio=result.increase_ratio, risk_percent=result.risk_percent)
        reading = Reading(**base, deviation=result.info())
        alerts, alert = record_if_alerting(
            asset.alerts, result, reading, asset.id, thresholds.alert_capacity
        )
        updated = asset.model_copy(update={
            "alerts": alerts,
            "readings": append_history(asset.readings, reading, thresholds.history_capacity),
            "connectivity": ConnectivityState.ONLINE,
            "last_seen_at": now,
        })

    events.append(DataEvent(
        asset_id=asset.id,
        reading=reading,
        baseline=updated.baseline,
        is_calibrated=updated.is_calibrated,
    ))
    if alert is not None:
        events.append(AlertRaised(asset_id=asset.id, alert=alert))
    events.append(ConnectivityChanged(asset_id=asset.id, state=ConnectivityState.ONLINE, last_seen_at=now))

    return ReadingOutcome(asset=updated, events=tuple(events), reading=reading, alert=alert)


def recalibrate(asset: Asset) -> Transition:
    """Reset calibration, history and alert log in one step."""
    updated = asset.model_copy(update={
        "calibration": Uncalibrated(),
        "readings": [],
        "alerts": [],
    })
    return Transition(asset=updated, events=(CalibrationStarted(asset_id=asset.id),))


def is_stale(asset: Asset, now: datetime, timeout: timedelta) -> bool:
    return (
        asset.connectivity is ConnectivityState.ONLINE
        and asset.last_seen_at is not None
        and now - asset.last_seen_at > timeout
    )


def mark_offline_if_stale(asset: Asset, now: datetime, timeout: timedelta) -> Transition | None:
    """Demote a silent online bridge to offline; None when nothing changes."""
    if not is_stale(asset, now, timeout):
        return None
    updated = asset.model_copy(update={"connectivity": ConnectivityState.OFFLINE})
    event = ConnectivityChanged(
        asset_id=asset.id,
        state=ConnectivityState.OFFLINE,
        last_seen_at=asset.last_seen_at,
    )
    return Transition(asset=updated, events=(event,))
