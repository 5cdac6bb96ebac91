"""
src/analytics/calibration.py
─────────────────────────────
Online baseline ("natural frequency") learning for an uncalibrated bridge.

Each observed sample advances the sample counter. On the N-th sample the
baseline is the arithmetic mean of the last N−1 stored vibrations plus the
current one, and the bridge moves to the Calibrated phase.

A zero baseline is refused: the bridge stays uncalibrated with its counter
held at N−1, so every following sample retries over the rolling window.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from config.monitoring import DEFAULT_THRESHOLDS
from src.data.models import CalibrationInfo, Calibrated, Uncalibrated
from src.monitoring.errors import CalibrationWindowError, DivisionByZeroBaseline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CalibrationStep:
    state: Uncalibrated | Calibrated
    progress_percent: float
    completed: bool = False
    baseline: float | None = None

    def info(self) -> CalibrationInfo:
        """Reading metadata for this step."""
        return CalibrationInfo(
            is_calibrating=True,
            progress_percent=self.progress_percent,
            calibration_complete=self.completed,
            baseline=self.baseline,
        )


def progress_percent(sample_count: int, target: int) -> float:
    return min(100.0, sample_count / target * 100.0)


def compute_baseline(window: Sequence[float]) -> float:
    """
    Mean vibration over a full calibration window.

    Raises:
        DivisionByZeroBaseline: if the mean is zero or not finite
    """
    baseline = float(np.mean(np.asarray(window, dtype=float)))
    if not math.isfinite(baseline) or baseline <= 0.0:
        raise DivisionByZeroBaseline(
            f"calibration window of {len(window)} samples produced baseline {baseline!r}"
        )
    return baseline


def observe(
    state: Uncalibrated,
    vibration: float,
    recent_vibrations: Sequence[float],
    target: int = DEFAULT_THRESHOLDS.calibration_samples,
) -> CalibrationStep:
    """
    Feed one vibration sample into the calibration procedure.

    Args:
        state: Current uncalibrated state
        vibration: Vibration of the sample being observed
        recent_vibrations: Vibrations already stored in history, oldest first
        target: Number of samples that closes the window (N)

    Returns:
        CalibrationStep with the next state and progress metadata

    Raises:
        CalibrationWindowError: if history holds fewer than N−1 samples
            when the window closes
    """
    count = state.sample_count + 1
    total = state.accumulated_sum + vibration

    if count < target:
        return CalibrationStep(
            state=Uncalibrated(sample_count=count, accumulated_sum=total),
            progress_percent=progress_percent(count, target),
        )

    needed = target - 1
    if len(recent_vibrations) < needed:
        raise CalibrationWindowError(
            f"need {needed} stored samples to close calibration, have {len(recent_vibrations)}"
        )
    stored = list(recent_vibrations[len(recent_vibrations) - needed:]) if needed else []
    window = [*stored, vibration]

    try:
        baseline = compute_baseline(window)
    except DivisionByZeroBaseline as exc:
        logger.warning(
            "Calibration baseline rejected (%s); staying uncalibrated and retrying on the next sample.",
            exc,
        )
        held = Uncalibrated(sample_count=needed, accumulated_sum=float(sum(window[1:])))
        return CalibrationStep(state=held, progress_percent=progress_percent(needed, target))

    return CalibrationStep(
        state=Calibrated(baseline=baseline),
        progress_percent=100.0,
        completed=True,
        baseline=baseline,
    )
