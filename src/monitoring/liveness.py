"""
src/monitoring/liveness.py
──────────────────────────
Periodic offline detection.

Every `interval_s` seconds the monitor asks the registry to demote online
bridges whose last reading is older than the registry's offline timeout.
The sweep itself runs under each bridge's lock (see AssetRegistry.sweep).
"""
from __future__ import annotations

import logging
import threading
import time

from src.monitoring.registry import AssetRegistry

logger = logging.getLogger(__name__)

_MAX_CONSECUTIVE_FAILURES = 10


class LivenessMonitor:
    def __init__(self, registry: AssetRegistry, interval_s: float = 5.0):
        self._registry = registry
        self._interval_s = max(0.01, interval_s)
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> list[str]:
        return self._registry.sweep()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="liveness-monitor", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def _run(self) -> None:
        consecutive_failures = 0
        while not self._stop.is_set():
            tick_start = time.monotonic()
            try:
                self.tick()
                consecutive_failures = 0
            except Exception:
                consecutive_failures += 1
                if consecutive_failures >= _MAX_CONSECUTIVE_FAILURES:
                    logger.error(
                        "Liveness sweep failed %d consecutive times; backing off.",
                        consecutive_failures,
                        exc_info=True,
                    )
                    self._stop.wait(self._interval_s * 5)
                else:
                    logger.warning("Liveness sweep failed; will retry.", exc_info=True)
            elapsed = time.monotonic() - tick_start
            self._stop.wait(max(0.0, self._interval_s - elapsed))
