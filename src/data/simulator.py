"""
src/data/simulator.py
─────────────────────
Synthetic accelerometer feed for bridge sensors.

Generates:
  - Raw (x, y, z) samples in m/s²: rest gravity on z plus Gaussian noise
  - Excitation windows (heavy traffic, wind gusts) that scale the noise
  - Demo bridges for the seeded regions
  - A DemoFeed background thread that pushes samples into the registry

Design:
  - Reproducible with SIMULATION_SEED for consistent demos and tests
  - The vibration of a sample is |‖a‖ − g|, so noise amplitude drives it
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from config.monitoring import DEMO_BRIDGES, GRAVITY_MS2
from config.settings import settings
from src.data.models import Asset
from src.monitoring.errors import AssetNotFound, RegionNotFound
from src.monitoring.registry import AssetRegistry

logger = logging.getLogger(__name__)

DEFAULT_NOISE = 0.05  # σ per axis, m/s²


@dataclass(frozen=True)
class ExcitationEvent:
    start: int        # index of the first excited sample
    duration: int     # number of excited samples
    gain: float       # noise multiplier while active

    def active(self, index: int) -> bool:
        return self.start <= index < self.start + self.duration


def _noise_scale(index: int, events: Sequence[ExcitationEvent]) -> float:
    for event in events:
        if event.active(index):
            return event.gain
    return 1.0


def generate_axes(
    n: int,
    rng: np.random.Generator,
    noise: float = DEFAULT_NOISE,
    events: Sequence[ExcitationEvent] = (),
    gravity: float = GRAVITY_MS2,
) -> np.ndarray:
    """
    Generate `n` raw samples as an (n, 3) array of x, y, z accelerations.
    """
    scales = np.array([_noise_scale(i, events) for i in range(n)], dtype=float)
    samples = rng.normal(0.0, noise, size=(n, 3)) * scales[:, None]
    samples[:, 2] += gravity
    return samples


def seed_demo_bridges(registry: AssetRegistry) -> list[str]:
    """Add the demo bridges missing from existing demo regions; returns new ids."""
    created = []
    for entry in DEMO_BRIDGES:
        try:
            registry.get_region(entry["region_id"])
        except RegionNotFound:
            continue
        if any(a.name == entry["name"] for a in registry.snapshot(entry["region_id"])):
            continue
        asset = registry.add_asset(entry["name"], entry["region_id"], entry["location"])
        created.append(asset.id)
    if created:
        logger.info("Created %d demo bridge(s)", len(created))
    return created


class DemoFeed:
    """
    Pushes one simulated sample per bridge into the registry every
    `interval_s` seconds. Calibrated bridges occasionally get an excitation
    burst so warnings and critical alerts show up on the dashboard.
    """

    def __init__(
        self,
        registry: AssetRegistry,
        interval_s: float = 1.0,
        seed: int = settings.SIMULATION_SEED,
        burst_probability: float = 0.03,
    ):
        self._registry = registry
        self._interval_s = interval_s
        self._rng = np.random.default_rng(seed)
        self._burst_probability = burst_probability
        self._tick = 0
        self._bursts: dict[str, ExcitationEvent] = {}
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    def _excitation(self, asset: Asset, tick: int) -> ExcitationEvent | None:
        event = self._bursts.get(asset.id)
        if event is not None and event.active(tick):
            return event
        if asset.is_calibrated and self._rng.random() < self._burst_probability:
            event = ExcitationEvent(
                start=tick,
                duration=int(self._rng.integers(3, 10)),
                gain=float(self._rng.uniform(2.0, 6.0)),
            )
            self._bursts[asset.id] = event
            logger.debug(
                "Excitation burst on %s: %d samples at gain %.1f", asset.id, event.duration, event.gain
            )
            return event
        self._bursts.pop(asset.id, None)
        return None

    def step(self) -> int:
        """Send one sample to every bridge; returns how many were accepted."""
        tick = self._tick
        self._tick += 1
        sent = 0
        for asset in self._registry.snapshot():
            event = self._excitation(asset, tick)
            scale = _noise_scale(tick, (event,) if event else ())
            x, y, z = generate_axes(1, self._rng, DEFAULT_NOISE * scale)[0]
            try:
                self._registry.observe_reading(asset.id, float(x), float(y), float(z))
            except AssetNotFound:
                self._bursts.pop(asset.id, None)
                continue
            sent += 1
        return sent

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="demo-feed", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.step()
            except Exception:
                logger.warning("Demo feed step failed; will retry.", exc_info=True)
            self._stop.wait(self._interval_s)
