"""
src/monitoring/events.py
────────────────────────
Events emitted by the ingestion pipeline, recalibration and liveness sweep.

An event describes *what happened*; the Asset snapshot describes *what is
currently true*. Events are immutable so they can be logged, buffered, or
handed to any transport. Channel names follow the live-update wire names:

  data-<bridge_id>       enriched reading
  alert-<bridge_id>      alert raised by that reading
  calibration-start      recalibration requested
  calibration-complete   baseline learned
  bridges-status         connectivity change / heartbeat
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from src.data.models import Alert, ConnectivityState, Reading

STATUS_CHANNEL = "bridges-status"
CALIBRATION_START_CHANNEL = "calibration-start"
CALIBRATION_COMPLETE_CHANNEL = "calibration-complete"


@dataclass(frozen=True)
class DataEvent:
    asset_id: str
    reading: Reading
    baseline: float | None
    is_calibrated: bool

    @property
    def channel(self) -> str:
        return f"data-{self.asset_id}"

    def payload(self) -> dict[str, Any]:
        return {
            **self.reading.model_dump(mode="json"),
            "naturalFrequency": self.baseline,
            "isCalibrated": self.is_calibrated,
        }


@dataclass(frozen=True)
class AlertRaised:
    asset_id: str
    alert: Alert

    @property
    def channel(self) -> str:
        return f"alert-{self.asset_id}"

    def payload(self) -> dict[str, Any]:
        return self.alert.model_dump(mode="json")


@dataclass(frozen=True)
class CalibrationStarted:
    asset_id: str

    @property
    def channel(self) -> str:
        return CALIBRATION_START_CHANNEL

    def payload(self) -> dict[str, Any]:
        return {"bridgeId": self.asset_id}


@dataclass(frozen=True)
class CalibrationCompleted:
    asset_id: str
    baseline: float

    @property
    def channel(self) -> str:
        return CALIBRATION_COMPLETE_CHANNEL

    def payload(self) -> dict[str, Any]:
        return {"bridgeId": self.asset_id, "frequency": self.baseline}


@dataclass(frozen=True)
class ConnectivityChanged:
    asset_id: str
    state: ConnectivityState
    last_seen_at: datetime | None

    @property
    def channel(self) -> str:
        return STATUS_CHANNEL

    def payload(self) -> dict[str, Any]:
        return {
            "bridgeId": self.asset_id,
            "status": self.state.value,
            "lastSeen": self.last_seen_at.isoformat() if self.last_seen_at else None,
        }


Event = DataEvent | AlertRaised | CalibrationStarted | CalibrationCompleted | ConnectivityChanged
