"""
tests/test_pipeline.py
───────────────────────
Tests for per-bridge state transitions.
"""
import math
from datetime import timedelta

import pytest

from config.alerts import AlertSeverity
from config.monitoring import MonitoringThresholds
from src.data.models import Asset, ConnectivityState, Uncalibrated
from src.monitoring import pipeline
from src.monitoring.errors import InvalidReading
from src.monitoring.events import (
    AlertRaised,
    CalibrationCompleted,
    CalibrationStarted,
    ConnectivityChanged,
    DataEvent,
)

# small lateral tilt: vibration is tiny but never exactly zero
REST_AXES = (0.01, 0.0, 9.81)


def _feed(asset, n, now, axes=REST_AXES, thresholds=None):
    outcomes = []
    for i in range(n):
        kwargs = {"thresholds": thresholds} if thresholds else {}
        outcome = pipeline.ingest_reading(asset, *axes, now + timedelta(seconds=i), **kwargs)
        asset = outcome.asset
        outcomes.append(outcome)
    return asset, outcomes


class TestCalibrationFlow:
    def test_fifty_readings_calibrate(self, bridge, now):
        asset, outcomes = _feed(bridge, 50, now)
        completions = [e for o in outcomes for e in o.events if isinstance(e, CalibrationCompleted)]
        assert len(completions) == 1
        assert outcomes[-1].calibration_complete
        assert not any(o.calibration_complete for o in outcomes[:-1])
        assert asset.is_calibrated
        assert len(asset.readings) == 50
        assert asset.baseline == pytest.approx(outcomes[0].reading.vibration)
        assert completions[0].baseline == asset.baseline

    def test_progress_reported_per_reading(self, bridge, now):
        _, outcomes = _feed(bridge, 3, now)
        assert [o.reading.calibration.progress_percent for o in outcomes] == pytest.approx([2.0, 4.0, 6.0])
        assert all(o.reading.deviation is None for o in outcomes)

    def test_uncalibrated_never_alerts(self, bridge, now):
        _, outcomes = _feed(bridge, 10, now, axes=(0.0, 0.0, 30.0))
        assert all(o.alert is None for o in outcomes)
        assert all(not isinstance(e, AlertRaised) for o in outcomes for e in o.events)

    def test_perfectly_still_bridge_holds_until_it_moves(self, bridge, now):
        # unit gravity with axes (0, 0, 1) gives a vibration of exactly zero
        unit = MonitoringThresholds(gravity=1.0)
        asset, outcomes = _feed(bridge, 55, now, axes=(0.0, 0.0, 1.0), thresholds=unit)
        assert all(o.reading.vibration == 0.0 for o in outcomes)
        assert not any(isinstance(e, CalibrationCompleted) for o in outcomes for e in o.events)
        assert not asset.is_calibrated
        assert asset.calibration.sample_count == 49
        assert len(asset.readings) == 55
        assert outcomes[-1].reading.calibration.progress_percent == pytest.approx(98.0)

        # |(0, 0, 2)| − 1 = 1.0 closes the window over 49 zeros and one 1.0
        moved = pipeline.ingest_reading(asset, 0.0, 0.0, 2.0, now + timedelta(minutes=1), thresholds=unit)
        assert moved.calibration_complete
        assert moved.asset.is_calibrated
        assert moved.asset.baseline == pytest.approx(1.0 / 50)
        assert len(moved.asset.readings) == 56

    def test_calibrated_reading_has_deviation(self, bridge, now):
        asset, _ = _feed(bridge, 50, now)
        outcome = pipeline.ingest_reading(asset, *REST_AXES, now + timedelta(minutes=1))
        assert outcome.reading.calibration is None
        assert outcome.reading.deviation.severity == AlertSeverity.NONE
        assert outcome.alert is None


class TestDeviationFlow:
    def test_alert_event_and_ledger(self, make_calibrated, now):
        asset = make_calibrated(baseline=1.0)
        # |(0, 0, 12.81)| − g = 3.0 → ratio 2.0
        outcome = pipeline.ingest_reading(asset, 0.0, 0.0, 12.81, now)
        assert outcome.alert is not None
        assert outcome.alert.severity == AlertSeverity.CRITICAL
        assert outcome.asset.alerts[0] == outcome.alert
        assert [type(e) for e in outcome.events] == [DataEvent, AlertRaised, ConnectivityChanged]

    def test_warning_band(self, make_calibrated, now):
        asset = make_calibrated(baseline=1.0)
        outcome = pipeline.ingest_reading(asset, 0.0, 0.0, 11.41, now)
        assert outcome.reading.deviation.severity == AlertSeverity.WARNING
        assert outcome.reading.deviation.risk_percent == pytest.approx(60.0)

    def test_bounds_hold_after_many_readings(self, make_calibrated, now):
        asset, _ = _feed(make_calibrated(baseline=1.0), 300, now, axes=(0.0, 0.0, 12.81))
        assert len(asset.readings) == 200
        assert len(asset.alerts) == 20
        assert asset.readings[-1].timestamp == now + timedelta(seconds=299)
        assert asset.alerts[0].timestamp == now + timedelta(seconds=299)

    def test_custom_capacities(self, make_calibrated, now):
        small = MonitoringThresholds(calibration_samples=5, history_capacity=8, alert_capacity=3)
        asset, _ = _feed(make_calibrated(baseline=1.0), 12, now, axes=(0.0, 0.0, 12.81), thresholds=small)
        assert len(asset.readings) == 8
        assert len(asset.alerts) == 3


class TestConnectivity:
    def test_reading_marks_online(self, bridge, now):
        outcome = pipeline.ingest_reading(bridge, *REST_AXES, now)
        assert outcome.asset.connectivity is ConnectivityState.ONLINE
        assert outcome.asset.last_seen_at == now
        status = outcome.events[-1]
        assert isinstance(status, ConnectivityChanged)
        assert status.payload() == {"bridgeId": bridge.id, "status": "online", "lastSeen": now.isoformat()}

    def test_stale_demoted(self, bridge, now):
        online = pipeline.ingest_reading(bridge, *REST_AXES, now).asset
        transition = pipeline.mark_offline_if_stale(online, now + timedelta(seconds=11), timedelta(seconds=10))
        assert transition.asset.connectivity is ConnectivityState.OFFLINE
        assert transition.asset.last_seen_at == now
        assert transition.events[0].state is ConnectivityState.OFFLINE

    def test_recent_not_demoted(self, bridge, now):
        online = pipeline.ingest_reading(bridge, *REST_AXES, now).asset
        assert pipeline.mark_offline_if_stale(online, now + timedelta(seconds=9), timedelta(seconds=10)) is None

    def test_never_seen_not_demoted(self, bridge, now):
        assert pipeline.mark_offline_if_stale(bridge, now + timedelta(hours=1), timedelta(seconds=10)) is None


class TestRecalibrate:
    def test_resets_everything(self, make_calibrated, now):
        asset, _ = _feed(make_calibrated(baseline=1.0), 5, now, axes=(0.0, 0.0, 12.81))
        transition = pipeline.recalibrate(asset)
        assert transition.asset.calibration == Uncalibrated()
        assert transition.asset.readings == []
        assert transition.asset.alerts == []
        assert [type(e) for e in transition.events] == [CalibrationStarted]
        assert transition.events[0].payload() == {"bridgeId": asset.id}

    def test_idempotent(self, make_calibrated):
        once = pipeline.recalibrate(make_calibrated()).asset
        twice = pipeline.recalibrate(once).asset
        assert once == twice

    def test_keeps_connectivity(self, bridge, now):
        online = pipeline.ingest_reading(bridge, *REST_AXES, now).asset
        reset = pipeline.recalibrate(online).asset
        assert reset.connectivity is ConnectivityState.ONLINE
        assert reset.last_seen_at == now

    def test_original_untouched(self, make_calibrated):
        asset = make_calibrated()
        pipeline.recalibrate(asset)
        assert asset.is_calibrated
        assert isinstance(asset, Asset)


class TestNonFiniteSamples:
    def test_large_finite_axes_stay_finite(self, make_calibrated, now):
        outcome = pipeline.ingest_reading(make_calibrated(baseline=1.0), 1e200, 0.0, 0.0, now)
        deviation = outcome.reading.deviation
        assert outcome.reading.vibration == pytest.approx(1e200)
        assert math.isfinite(deviation.increase_ratio)
        assert math.isfinite(deviation.risk_percent)
        assert outcome.alert.severity == AlertSeverity.CRITICAL
        assert math.isfinite(outcome.alert.risk_percent)

    def test_large_sample_snapshot_reloads(self, make_calibrated, now):
        asset = pipeline.ingest_reading(make_calibrated(baseline=1.0), 1e200, 0.0, 0.0, now).asset
        restored = Asset.model_validate_json(asset.model_dump_json())
        assert restored.readings[0].vibration == asset.readings[0].vibration
        assert restored.alerts[0].increase_ratio == asset.alerts[0].increase_ratio
        assert restored.baseline == 1.0

    def test_overflowing_magnitude_rejected(self, make_calibrated, now):
        with pytest.raises(InvalidReading, match="vibration"):
            pipeline.ingest_reading(make_calibrated(baseline=1.0), 1.7e308, 1.7e308, 0.0, now)

    def test_overflowing_ratio_rejected(self, make_calibrated, now):
        with pytest.raises(InvalidReading, match="increase_ratio"):
            pipeline.ingest_reading(make_calibrated(baseline=1e-300), 1e10, 0.0, 0.0, now)

    def test_overflowing_calibration_sum_rejected(self, bridge, now):
        nearly_full = bridge.model_copy(update={
            "calibration": Uncalibrated(sample_count=1, accumulated_sum=1.5e308),
        })
        with pytest.raises(InvalidReading, match="calibration_sum"):
            pipeline.ingest_reading(nearly_full, 1e308, 0.0, 0.0, now)
