"""
src/data/models.py
──────────────────
Pydantic v2 data models for regions, bridges, sensor readings, and alerts.

Readings, alerts and assets are frozen: every pipeline step builds a new
Asset with `model_copy(update=...)` instead of mutating the current one.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from config.alerts import AlertSeverity


class ConnectivityState(str, Enum):
    ONLINE = "online"
    OFFLINE = "offline"


# ── Calibration phase (tagged union on `phase`) ───────────────────────────────

class Uncalibrated(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["uncalibrated"] = "uncalibrated"
    sample_count: int = Field(default=0, ge=0)
    accumulated_sum: float = Field(default=0.0, ge=0.0)


class Calibrated(BaseModel):
    model_config = ConfigDict(frozen=True)

    phase: Literal["calibrated"] = "calibrated"
    baseline: float = Field(gt=0.0, allow_inf_nan=False)


CalibrationState = Annotated[Uncalibrated | Calibrated, Field(discriminator="phase")]


# ── Readings ──────────────────────────────────────────────────────────────────

class AxesPayload(BaseModel):
    """Raw accelerometer sample as posted by a sensor (m/s²)."""
    model_config = ConfigDict(strict=True, extra="ignore")

    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)
    z: float = Field(allow_inf_nan=False)


class CalibrationInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_calibrating: bool = True
    progress_percent: float = Field(ge=0.0, le=100.0)
    calibration_complete: bool = False
    baseline: float | None = None


class DeviationInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    increase_ratio: float = Field(allow_inf_nan=False)
    risk_percent: float = Field(ge=0.0, allow_inf_nan=False)
    severity: AlertSeverity = AlertSeverity.NONE
    alert: bool = False
    message: str | None = None


class Reading(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    z: float
    vibration: float = Field(ge=0.0, allow_inf_nan=False)
    timestamp: datetime
    time_formatted: str
    calibration: CalibrationInfo | None = None
    deviation: DeviationInfo | None = None


class Alert(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    asset_id: str
    severity: AlertSeverity
    message: str
    vibration: float = Field(allow_inf_nan=False)
    increase_ratio: float = Field(allow_inf_nan=False)
    risk_percent: float = Field(allow_inf_nan=False)
    timestamp: datetime
    time_formatted: str


# ── Registry records ──────────────────────────────────────────────────────────

class Region(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    created_at: datetime | None = None


class Asset(BaseModel):
    """A monitored bridge and its signal-processing state."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(min_length=1)
    region_id: str
    location: str = ""
    connectivity: ConnectivityState = ConnectivityState.OFFLINE
    last_seen_at: datetime | None = None
    calibration: CalibrationState = Field(default_factory=Uncalibrated)
    readings: list[Reading] = Field(default_factory=list)
    alerts: list[Alert] = Field(default_factory=list)

    @property
    def is_calibrated(self) -> bool:
        return isinstance(self.calibration, Calibrated)

    @property
    def baseline(self) -> float | None:
        if isinstance(self.calibration, Calibrated):
            return self.calibration.baseline
        return None

    @property
    def latest_reading(self) -> Reading | None:
        return self.readings[-1] if self.readings else None
