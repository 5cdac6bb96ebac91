"""
src/monitoring/registry.py
──────────────────────────
Owned collection of regions and bridges.

Locking:
  - `_lock` (RLock) guards the dictionaries only and is held briefly.
  - one Lock per bridge serializes ingestion, recalibration, the liveness
    sweep and deletion for that bridge. Different bridges never contend.

Every mutation replaces the bridge's frozen Asset, publishes the transition's
events in order while still holding the bridge lock, then hands the new
snapshot to the writer (fire-and-forget).
"""
from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from datetime import UTC, datetime, timedelta
from threading import Lock, RLock
from typing import Protocol

from config.monitoring import DEFAULT_THRESHOLDS, MonitoringThresholds
from src.data.models import Asset, Region
from src.monitoring import pipeline
from src.monitoring.bus import EventBus
from src.monitoring.errors import AssetNotFound, InvalidRequest, RegionNotFound
from src.monitoring.pipeline import ReadingOutcome, Transition

logger = logging.getLogger(__name__)

_DEFAULT_OFFLINE_TIMEOUT = timedelta(seconds=10)


class SnapshotSink(Protocol):
    def save_region(self, region: Region) -> None: ...
    def save_asset(self, asset: Asset) -> None: ...
    def delete_asset(self, asset_id: str) -> None: ...


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


def _as_utc(now: datetime | None) -> datetime:
    """Current time when None; naive datetimes are taken to be UTC."""
    if now is None:
        return _utcnow()
    if now.tzinfo is None:
        return now.replace(tzinfo=UTC)
    return now.astimezone(UTC)


def _new_id(prefix: str, now: datetime) -> str:
    return f"{prefix}_{int(now.timestamp() * 1000)}_{uuid.uuid4().hex[:5]}"


def _clean_name(name: object) -> str:
    clean = str(name or "").strip()
    if not clean:
        raise InvalidRequest("name is required")
    return clean


class AssetRegistry:
    def __init__(
        self,
        *,
        regions: Iterable[Region] = (),
        assets: Iterable[Asset] = (),
        bus: EventBus | None = None,
        writer: SnapshotSink | None = None,
        thresholds: MonitoringThresholds = DEFAULT_THRESHOLDS,
        offline_timeout: timedelta = _DEFAULT_OFFLINE_TIMEOUT,
    ):
        self._lock = RLock()
        self._regions: dict[str, Region] = {r.id: r for r in regions}
        self._assets: dict[str, Asset] = {a.id: a for a in assets}
        self._asset_locks: dict[str, Lock] = {asset_id: Lock() for asset_id in self._assets}
        self.bus = bus or EventBus()
        self._writer = writer
        self.thresholds = thresholds
        self.offline_timeout = offline_timeout

    # ── Per-bridge exclusive access ───────────────────────────────────────────

    @contextmanager
    def _exclusive(self, asset_id: str) -> Iterator[Asset]:
        with self._lock:
            asset_lock = self._asset_locks.get(asset_id)
        if asset_lock is None:
            raise AssetNotFound(asset_id)
        with asset_lock:
            with self._lock:
                asset = self._assets.get(asset_id)
            if asset is None:
                # removed while we were waiting for the lock
                raise AssetNotFound(asset_id)
            yield asset

    def _commit(self, transition: Transition) -> None:
        """Apply a transition. Caller holds the bridge lock."""
        with self._lock:
            self._assets[transition.asset.id] = transition.asset
        self.bus.publish(transition.events)
        if self._writer is not None:
            self._writer.save_asset(transition.asset)

    # ── Core operations ───────────────────────────────────────────────────────

    def get_asset(self, asset_id: str) -> Asset:
        with self._lock:
            asset = self._assets.get(asset_id)
        if asset is None:
            raise AssetNotFound(asset_id)
        return asset

    def observe_reading(
        self,
        asset_id: str,
        x: float,
        y: float,
        z: float,
        now: datetime | None = None,
    ) -> ReadingOutcome:
        with self._exclusive(asset_id) as asset:
            outcome = pipeline.ingest_reading(asset, x, y, z, _as_utc(now), self.thresholds)
            self._commit(outcome)
        if outcome.calibration_complete:
            logger.info("Bridge %s calibrated, baseline %.6f", asset_id, outcome.asset.baseline)
        return outcome

    def recalibrate(self, asset_id: str) -> Asset:
        with self._exclusive(asset_id) as asset:
            transition = pipeline.recalibrate(asset)
            self._commit(transition)
        logger.info("Bridge %s recalibration started", asset_id)
        return transition.asset

    def sweep(self, now: datetime | None = None) -> list[str]:
        """Demote stale online bridges to offline; returns the demoted ids."""
        now_ts = _as_utc(now)
        with self._lock:
            asset_ids = list(self._assets)
        demoted: list[str] = []
        for asset_id in asset_ids:
            try:
                with self._exclusive(asset_id) as asset:
                    transition = pipeline.mark_offline_if_stale(asset, now_ts, self.offline_timeout)
                    if transition is None:
                        continue
                    self._commit(transition)
            except AssetNotFound:
                continue
            except Exception:
                logger.exception("Liveness check failed for bridge %s; skipping it this sweep", asset_id)
                continue
            demoted.append(asset_id)
        if demoted:
            logger.info("Marked %d bridge(s) offline: %s", len(demoted), ", ".join(demoted))
        return demoted

    # ── Registry bookkeeping ──────────────────────────────────────────────────

    def add_region(self, name: str, region_id: str | None = None, now: datetime | None = None) -> Region:
        now_ts = _as_utc(now)
        region = Region(id=region_id or _new_id("region", now_ts), name=_clean_name(name), created_at=now_ts)
        with self._lock:
            self._regions[region.id] = region
        if self._writer is not None:
            self._writer.save_region(region)
        return region

    def get_region(self, region_id: str) -> Region:
        with self._lock:
            region = self._regions.get(region_id)
        if region is None:
            raise RegionNotFound(region_id)
        return region

    def regions(self) -> list[Region]:
        with self._lock:
            return list(self._regions.values())

    def add_asset(self, name: str, region_id: str, location: str = "", now: datetime | None = None) -> Asset:
        clean = _clean_name(name)
        if not region_id:
            raise InvalidRequest("regionId is required")
        self.get_region(region_id)
        asset = Asset(
            id=_new_id("bridge", _as_utc(now)),
            name=clean,
            region_id=region_id,
            location=str(location or ""),
        )
        with self._lock:
            self._assets[asset.id] = asset
            self._asset_locks[asset.id] = Lock()
        if self._writer is not None:
            self._writer.save_asset(asset)
        return asset

    def remove_asset(self, asset_id: str) -> None:
        with self._exclusive(asset_id):
            with self._lock:
                self._assets.pop(asset_id, None)
                self._asset_locks.pop(asset_id, None)
        if self._writer is not None:
            self._writer.delete_asset(asset_id)

    def snapshot(self, region_id: str | None = None) -> list[Asset]:
        """Consistent copy of the current bridge records."""
        with self._lock:
            assets = list(self._assets.values())
        if region_id is not None:
            assets = [a for a in assets if a.region_id == region_id]
        return assets
