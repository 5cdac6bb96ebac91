"""
tests/test_bus.py
──────────────────
Tests for the in-process event bus.
"""
from src.monitoring.bus import EventBus
from src.monitoring.events import CalibrationCompleted, CalibrationStarted


class TestSubscriptions:
    def test_channel_subscriber(self):
        bus = EventBus()
        got = []
        bus.subscribe(got.append, channel="calibration-start")
        bus.publish([CalibrationStarted("b1"), CalibrationCompleted("b1", 0.2)])
        assert got == [CalibrationStarted("b1")]

    def test_wildcard_subscriber(self):
        bus = EventBus()
        got = []
        bus.subscribe(got.append)
        bus.publish([CalibrationStarted("b1"), CalibrationCompleted("b1", 0.2)])
        assert [type(e) for e in got] == [CalibrationStarted, CalibrationCompleted]

    def test_unsubscribe(self):
        bus = EventBus()
        got = []
        unsubscribe = bus.subscribe(got.append)
        unsubscribe()
        bus.publish([CalibrationStarted("b1")])
        assert got == []

    def test_failing_subscriber_isolated(self):
        bus = EventBus()
        got = []

        def broken(event):
            raise RuntimeError("socket closed")

        bus.subscribe(broken)
        bus.subscribe(got.append)
        bus.publish([CalibrationStarted("b1")])
        assert got == [CalibrationStarted("b1")]


class TestRecent:
    def test_newest_first(self):
        bus = EventBus()
        bus.publish([CalibrationStarted("b1"), CalibrationStarted("b2")])
        assert [p.event.asset_id for p in bus.recent()] == ["b2", "b1"]

    def test_limit_and_channel(self):
        bus = EventBus()
        bus.publish([CalibrationStarted("b1"), CalibrationCompleted("b1", 0.2), CalibrationStarted("b2")])
        assert len(bus.recent(limit=1)) == 1
        assert [p.channel for p in bus.recent(channel="calibration-complete")] == ["calibration-complete"]

    def test_bounded_buffer(self):
        bus = EventBus(recent_capacity=3)
        bus.publish([CalibrationStarted(f"b{i}") for i in range(5)])
        assert [p.event.asset_id for p in bus.recent()] == ["b4", "b3", "b2"]

    def test_to_dict(self):
        bus = EventBus()
        bus.publish([CalibrationCompleted("b1", 0.25)])
        data = bus.recent()[0].to_dict()
        assert data["channel"] == "calibration-complete"
        assert data["type"] == "CalibrationCompleted"
        assert data["payload"] == {"bridgeId": "b1", "frequency": 0.25}
