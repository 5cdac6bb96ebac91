"""
src/analytics/normalizer.py
────────────────────────────
Raw accelerometer sample → scalar vibration magnitude.

  magnitude = √(x² + y² + z²)
  vibration = |magnitude − g|

A sensor at rest reads ≈ g, so vibration is the deviation from rest gravity.
The magnitude goes through math.hypot, so large finite axes do not overflow
in the intermediate squares.
"""
from __future__ import annotations

import math

from config.monitoring import GRAVITY_MS2


def magnitude(x: float, y: float, z: float) -> float:
    return math.hypot(x, y, z)


def vibration_from_axes(x: float, y: float, z: float, gravity: float = GRAVITY_MS2) -> float:
    return abs(magnitude(x, y, z) - gravity)
