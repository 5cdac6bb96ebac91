"""
tests/conftest.py
─────────────────
Shared pytest fixtures for the Bridge Monitor test suite.
"""
import os
import pytest
import numpy as np
from datetime import datetime, timezone

# Use in-memory SQLite for tests
os.environ.setdefault("DATABASE_URL", ":memory:")
os.environ.setdefault("SIMULATION_SEED", "42")
os.environ.setdefault("SEED_DEMO_REGIONS", "true")



class RecordingWriter:
    """Stands in for SnapshotWriter; keeps every hand-off in memory."""

    def __init__(self):
        self.regions = []
        self.assets = []
        self.deleted = []

    def save_region(self, region):
        self.regions.append(region)

    def save_asset(self, asset):
        self.assets.append(asset)

    def delete_asset(self, asset_id):
        self.deleted.append(asset_id)


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(42)


@pytest.fixture
def now() -> datetime:
    return datetime(2024, 6, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def thresholds():
    from config.monitoring import DEFAULT_THRESHOLDS
    return DEFAULT_THRESHOLDS


@pytest.fixture
def writer() -> RecordingWriter:
    return RecordingWriter()


@pytest.fixture
def registry(writer, now):
    from src.monitoring.registry import AssetRegistry
    reg = AssetRegistry(writer=writer)
    reg.add_region("Riyadh Region", region_id="region_riyadh", now=now)
    return reg


@pytest.fixture
def bridge(registry, now):
    """A freshly registered, uncalibrated bridge."""
    return registry.add_asset("King Fahd Bridge", "region_riyadh", "Wadi Hanifa", now=now)


@pytest.fixture
def make_calibrated():
    """Factory for a bridge already in the calibrated phase."""
    from src.data.models import Asset, Calibrated

    def _make(baseline: float = 10.0, asset_id: str = "bridge_cal") -> Asset:
        return Asset(
            id=asset_id,
            name="Calibrated Bridge",
            region_id="region_riyadh",
            calibration=Calibrated(baseline=baseline),
        )

    return _make
