"""
src/monitoring/errors.py
────────────────────────
Error kinds raised by the monitoring core and its registry.

Caller-facing errors (AssetNotFound, RegionNotFound, InvalidReading,
InvalidRequest) are raised before any state is touched. The calibration
errors are internal invariant violations.
"""
from __future__ import annotations


class MonitorError(Exception):
    """Base class for all monitoring errors."""


class AssetNotFound(MonitorError):
    def __init__(self, asset_id: str):
        super().__init__(f"bridge not found: {asset_id}")
        self.asset_id = asset_id


class RegionNotFound(MonitorError):
    def __init__(self, region_id: str):
        super().__init__(f"region not found: {region_id}")
        self.region_id = region_id


class InvalidReading(MonitorError):
    """Missing, non-numeric or non-finite axis values."""


class InvalidRequest(MonitorError):
    """Malformed registry request (e.g. empty name)."""


class DivisionByZeroBaseline(MonitorError):
    """A zero baseline would make every deviation ratio infinite."""


class CalibrationWindowError(MonitorError):
    """History does not hold enough samples to close the calibration window."""
