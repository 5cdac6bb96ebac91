"""
tests/test_store.py
────────────────────
Tests for SQLite persistence and DataFrame views.
"""
from datetime import timedelta

import pytest

from src.data import store
from src.data.models import Asset, Region
from src.monitoring import pipeline


@pytest.fixture
def db():
    store.initialize_db(force_reseed=True, seed_demo=True)
    yield
    store.initialize_db(force_reseed=True, seed_demo=False)


def _with_history(asset: Asset, n: int, now, z: float = 9.81) -> Asset:
    for i in range(n):
        asset = pipeline.ingest_reading(asset, 0.01, 0.0, z, now + timedelta(seconds=i)).asset
    return asset


class TestInitialize:
    def test_demo_regions_seeded(self, db):
        ids = {r.id for r in store.load_regions()}
        assert ids == {"region_riyadh", "region_tabuk"}

    def test_idempotent(self, db):
        store.initialize_db()
        assert len(store.load_regions()) == 2

    def test_without_demo(self):
        store.initialize_db(force_reseed=True, seed_demo=False)
        assert store.load_regions() == []


class TestSnapshots:
    def test_asset_round_trip(self, db, bridge, now):
        asset = _with_history(bridge, 50, now)
        store.save_asset(asset)
        loaded = store.load_assets()
        assert loaded == [asset]
        assert loaded[0].is_calibrated

    def test_last_write_wins(self, db, bridge, now):
        store.save_asset(bridge)
        store.save_asset(_with_history(bridge, 3, now))
        loaded = store.load_assets()
        assert len(loaded) == 1
        assert len(loaded[0].readings) == 3

    def test_delete(self, db, bridge):
        store.save_asset(bridge)
        store.delete_asset(bridge.id)
        assert store.load_assets() == []

    def test_large_sample_survives_reload(self, db, make_calibrated, now):
        asset = pipeline.ingest_reading(make_calibrated(baseline=1.0), 1e200, 0.0, 0.0, now).asset
        store.save_asset(asset)
        loaded = store.load_assets()
        assert [a.id for a in loaded] == [asset.id]
        assert loaded[0].alerts[0].vibration == asset.alerts[0].vibration

    def test_save_region(self, db, now):
        store.save_region(Region(id="region_x", name="Eastern Region", created_at=now))
        assert "region_x" in {r.id for r in store.load_regions()}


class TestSnapshotWriter:
    def test_flush_applies_in_order(self, db, bridge, now):
        writer = store.SnapshotWriter()
        try:
            writer.save_asset(bridge)
            writer.save_asset(_with_history(bridge, 2, now))
            writer.flush(timeout=5.0)
        finally:
            writer.close()
        loaded = store.load_assets()
        assert len(loaded) == 1
        assert len(loaded[0].readings) == 2

    def test_close_drains_pending_writes(self, db, bridge, now):
        writer = store.SnapshotWriter()
        writer.save_asset(_with_history(bridge, 3, now))
        writer.close()
        assert len(store.load_assets()[0].readings) == 3

    def test_delete_via_writer(self, db, bridge):
        writer = store.SnapshotWriter()
        try:
            writer.save_asset(bridge)
            writer.delete_asset(bridge.id)
            writer.flush(timeout=5.0)
        finally:
            writer.close()
        assert store.load_assets() == []


class TestFrames:
    def test_readings_frame(self, bridge, now):
        df = store.readings_frame(_with_history(bridge, 5, now))
        assert len(df) == 5
        assert df["progress_percent"].tolist() == pytest.approx([2.0, 4.0, 6.0, 8.0, 10.0])
        assert df["severity"].isna().all()
        assert df["timestamp"].is_monotonic_increasing

    def test_readings_frame_empty(self, bridge):
        df = store.readings_frame(bridge)
        assert df.empty
        assert "vibration" in df.columns

    def test_alerts_frame_newest_first(self, make_calibrated, now):
        a = _with_history(make_calibrated(baseline=1.0, asset_id="b_a"), 3, now, z=12.81)
        b = _with_history(make_calibrated(baseline=1.0, asset_id="b_b"), 2, now + timedelta(minutes=1), z=12.81)
        df = store.alerts_frame([a, b])
        assert len(df) == 5
        assert df.iloc[0]["asset_id"] == "b_b"
        assert set(df["severity"]) == {"critical"}
        assert df["timestamp"].is_monotonic_decreasing
        assert df.iloc[0]["asset_name"] == "Calibrated Bridge"

    def test_alerts_frame_empty(self, bridge):
        assert store.alerts_frame([bridge]).empty
