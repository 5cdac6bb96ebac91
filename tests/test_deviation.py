"""
tests/test_deviation.py
────────────────────────
Tests for deviation analysis and severity classification.
"""
import math

import pytest

from config.alerts import AlertSeverity
from config.monitoring import MonitoringThresholds
from src.analytics.deviation import analyze, classify_severity
from src.monitoring.errors import DivisionByZeroBaseline


class TestClassifySeverity:
    def test_boundaries_inclusive(self):
        assert classify_severity(0.5) == AlertSeverity.WARNING
        assert classify_severity(1.0) == AlertSeverity.CRITICAL

    def test_below_warning(self):
        assert classify_severity(0.49) == AlertSeverity.NONE
        assert classify_severity(-0.8) == AlertSeverity.NONE

    def test_custom_thresholds(self):
        strict = MonitoringThresholds(warning_ratio=0.2, critical_ratio=0.4)
        assert classify_severity(0.3, strict) == AlertSeverity.WARNING
        assert classify_severity(0.4, strict) == AlertSeverity.CRITICAL


class TestAnalyze:
    def test_critical_at_double_baseline(self):
        r = analyze(20.0, 10.0)
        assert r.increase_ratio == pytest.approx(1.0)
        assert r.risk_percent == pytest.approx(100.0)
        assert r.severity == AlertSeverity.CRITICAL
        assert r.is_alert

    def test_warning_at_one_and_a_half(self):
        r = analyze(15.0, 10.0)
        assert r.increase_ratio == pytest.approx(0.5)
        assert r.severity == AlertSeverity.WARNING

    def test_just_below_warning(self):
        r = analyze(14.9, 10.0)
        assert r.severity == AlertSeverity.NONE
        assert not r.is_alert

    def test_quieter_than_baseline(self):
        r = analyze(5.0, 10.0)
        assert r.increase_ratio == pytest.approx(-0.5)
        assert r.risk_percent == 0.0
        assert r.severity == AlertSeverity.NONE

    def test_zero_baseline_raises(self):
        with pytest.raises(DivisionByZeroBaseline):
            analyze(1.0, 0.0)

    def test_non_finite_baseline_raises(self):
        with pytest.raises(DivisionByZeroBaseline):
            analyze(1.0, math.inf)

    def test_info_carries_message(self):
        info = analyze(25.0, 10.0).info()
        assert info.alert is True
        assert info.severity == AlertSeverity.CRITICAL
        assert info.message == "Critical vibration level"

    def test_info_no_message_when_normal(self):
        info = analyze(10.0, 10.0).info()
        assert info.alert is False
        assert info.message is None
