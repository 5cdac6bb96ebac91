"""
tests/test_simulator.py
────────────────────────
Tests for the synthetic accelerometer feed.
"""
import logging

import numpy as np
import pytest

from src.analytics.normalizer import vibration_from_axes
from src.data.simulator import DemoFeed, ExcitationEvent, generate_axes, seed_demo_bridges
from src.monitoring.registry import AssetRegistry


class TestGenerateAxes:
    def test_shape(self, rng):
        assert generate_axes(100, rng).shape == (100, 3)

    def test_gravity_on_z(self, rng):
        samples = generate_axes(2_000, rng)
        assert samples[:, 2].mean() == pytest.approx(9.81, abs=0.01)
        assert abs(samples[:, 0].mean()) < 0.01

    def test_excitation_raises_vibration(self, rng):
        events = [ExcitationEvent(start=500, duration=500, gain=5.0)]
        samples = generate_axes(1_000, rng, events=events)
        v = np.array([vibration_from_axes(*s) for s in samples])
        assert v[500:].mean() > 3 * v[:500].mean()

    def test_event_window(self):
        event = ExcitationEvent(start=10, duration=5, gain=2.0)
        assert not event.active(9)
        assert event.active(10)
        assert event.active(14)
        assert not event.active(15)


class TestDemoBridges:
    def test_seeded_once(self):
        registry = AssetRegistry()
        registry.add_region("Riyadh Region", region_id="region_riyadh")
        registry.add_region("Tabuk Region", region_id="region_tabuk")
        created = seed_demo_bridges(registry)
        assert len(created) == 3
        assert seed_demo_bridges(registry) == []

    def test_skips_missing_regions(self):
        registry = AssetRegistry()
        registry.add_region("Tabuk Region", region_id="region_tabuk")
        assert len(seed_demo_bridges(registry)) == 1


class TestDemoFeed:
    def test_step_feeds_every_bridge(self, registry, bridge):
        second = registry.add_asset("Second Bridge", "region_riyadh")
        feed = DemoFeed(registry, seed=7)
        assert feed.step() == 2
        assert len(registry.get_asset(bridge.id).readings) == 1
        assert len(registry.get_asset(second.id).readings) == 1

    def test_feed_calibrates(self, registry, bridge):
        feed = DemoFeed(registry, seed=7)
        for _ in range(50):
            feed.step()
        assert registry.get_asset(bridge.id).is_calibrated

    def test_start_stop(self, registry):
        feed = DemoFeed(registry, interval_s=0.01)
        feed.start()
        feed.stop(timeout=2.0)

    def test_reproducible_for_a_seed(self, registry, bridge):
        other = AssetRegistry()
        other.add_region("Riyadh Region", region_id="region_riyadh")
        twin = other.add_asset("King Fahd Bridge", "region_riyadh")
        for reg in (registry, other):
            feed = DemoFeed(reg, seed=11)
            for _ in range(5):
                feed.step()
        ours = [r.vibration for r in registry.get_asset(bridge.id).readings]
        theirs = [r.vibration for r in other.get_asset(twin.id).readings]
        assert ours == theirs

    def test_bursts_only_on_calibrated_bridges(self, registry, bridge, caplog):
        feed = DemoFeed(registry, seed=7, burst_probability=1.0)
        with caplog.at_level(logging.DEBUG, logger="src.data.simulator"):
            for _ in range(49):
                feed.step()
            assert not any("Excitation burst" in r.getMessage() for r in caplog.records)
            feed.step()
            assert registry.get_asset(bridge.id).is_calibrated
            feed.step()
        assert any(bridge.id in r.getMessage() for r in caplog.records if "Excitation burst" in r.getMessage())
