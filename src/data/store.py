"""
src/data/store.py
─────────────────
SQLite data store abstraction.

Provides:
  - initialize_db()    : Create tables + seed demo regions on first run
  - save_region()      : Upsert a Region row
  - save_asset()       : Upsert a bridge snapshot (last write wins)
  - delete_asset()     : Drop a bridge snapshot
  - load_regions()     : All regions, oldest first
  - load_assets()      : All bridge snapshots
  - readings_frame()   : Reading history of one bridge as a DataFrame
  - alerts_frame()     : Alert logs of many bridges as one DataFrame
  - SnapshotWriter     : Fire-and-forget writes on a single background worker

Bridge state is stored as the pydantic JSON dump of the Asset model.
Thread safety: uses check_same_thread=False + a module-level lock.
"""
from __future__ import annotations

import logging
import sqlite3
import threading
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import UTC, datetime

import pandas as pd

from config.monitoring import DEMO_REGIONS
from config.settings import settings
from src.data.models import Asset, Region

logger = logging.getLogger(__name__)

_lock = threading.RLock()
_DB: sqlite3.Connection | None = None


# ── Connection ────────────────────────────────────────────────────────────────

def _get_conn() -> sqlite3.Connection:
    global _DB
    if _DB is None:
        _DB = sqlite3.connect(settings.DATABASE_URL, check_same_thread=False)
        _DB.row_factory = sqlite3.Row
    return _DB


# ── Schema ────────────────────────────────────────────────────────────────────

_CREATE_REGIONS = """
CREATE TABLE IF NOT EXISTS regions (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    created_at  TEXT
);
"""

_CREATE_ASSETS = """
CREATE TABLE IF NOT EXISTS assets (
    id          TEXT PRIMARY KEY,
    region_id   TEXT NOT NULL,
    payload     TEXT NOT NULL,
    updated_at  TEXT NOT NULL
);
"""

_CREATE_IDX = """
CREATE INDEX IF NOT EXISTS idx_assets_region ON assets (region_id);
"""


def _create_tables(conn: sqlite3.Connection) -> None:
    with conn:
        conn.executescript(_CREATE_REGIONS + _CREATE_ASSETS + _CREATE_IDX)


# ── Public API ────────────────────────────────────────────────────────────────

def initialize_db(force_reseed: bool = False, seed_demo: bool | None = None) -> None:
    """
    Create tables and add the demo regions if the DB has no regions.
    Safe to call multiple times (idempotent).
    """
    if seed_demo is None:
        seed_demo = settings.SEED_DEMO_REGIONS

    conn = _get_conn()
    _create_tables(conn)

    with _lock:
        count = conn.execute("SELECT COUNT(*) FROM regions").fetchone()[0]
        if count > 0 and not force_reseed:
            return  # Already seeded

        with conn:
            conn.execute("DELETE FROM assets")
            conn.execute("DELETE FROM regions")

        if seed_demo:
            now = datetime.now(tz=UTC)
            for entry in DEMO_REGIONS:
                save_region(Region(id=entry["id"], name=entry["name"], created_at=now))
            logger.info("Seeded %d demo regions", len(DEMO_REGIONS))


def save_region(region: Region) -> None:
    conn = _get_conn()
    with _lock, conn:
        conn.execute(
            "INSERT OR REPLACE INTO regions (id, name, created_at) VALUES (?,?,?)",
            (region.id, region.name, region.created_at.isoformat() if region.created_at else None),
        )


def save_asset(asset: Asset) -> None:
    conn = _get_conn()
    with _lock, conn:
        conn.execute(
            """INSERT OR REPLACE INTO assets (id, region_id, payload, updated_at)
               VALUES (?,?,?,?)""",
            (asset.id, asset.region_id, asset.model_dump_json(), datetime.now(tz=UTC).isoformat()),
        )


def delete_asset(asset_id: str) -> None:
    conn = _get_conn()
    with _lock, conn:
        conn.execute("DELETE FROM assets WHERE id = ?", (asset_id,))


def load_regions() -> list[Region]:
    conn = _get_conn()
    with _lock:
        rows = conn.execute("SELECT * FROM regions ORDER BY created_at, id").fetchall()
    return [Region(id=row["id"], name=row["name"], created_at=row["created_at"]) for row in rows]


def load_assets() -> list[Asset]:
    conn = _get_conn()
    with _lock:
        rows = conn.execute("SELECT id, payload FROM assets ORDER BY id").fetchall()
    assets: list[Asset] = []
    for row in rows:
        try:
            assets.append(Asset.model_validate_json(row["payload"]))
        except ValueError:
            logger.error("Skipping unreadable snapshot for bridge %s", row["id"], exc_info=True)
    return assets


# ── DataFrame views for the dashboard ─────────────────────────────────────────

_READING_COLUMNS = [
    "timestamp", "x", "y", "z", "vibration",
    "progress_percent", "increase_ratio", "risk_percent", "severity",
]

_ALERT_COLUMNS = [
    "id", "asset_id", "asset_name", "severity", "message",
    "vibration", "increase_ratio", "risk_percent", "timestamp", "time_formatted",
]


def readings_frame(asset: Asset) -> pd.DataFrame:
    """Chronological reading history of one bridge."""
    rows = []
    for r in asset.readings:
        rows.append({
            "timestamp": r.timestamp,
            "x": r.x,
            "y": r.y,
            "z": r.z,
            "vibration": r.vibration,
            "progress_percent": r.calibration.progress_percent if r.calibration else None,
            "increase_ratio": r.deviation.increase_ratio if r.deviation else None,
            "risk_percent": r.deviation.risk_percent if r.deviation else None,
            "severity": r.deviation.severity.value if r.deviation else None,
        })
    df = pd.DataFrame(rows, columns=_READING_COLUMNS)
    if not df.empty:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
    return df


def alerts_frame(assets: Iterable[Asset]) -> pd.DataFrame:
    """All retained alerts of the given bridges, newest first."""
    rows = [
        {**alert.model_dump(mode="python"), "severity": alert.severity.value, "asset_name": asset.name}
        for asset in assets
        for alert in asset.alerts
    ]
    df = pd.DataFrame(rows, columns=_ALERT_COLUMNS)
    if not df.empty:
        df["timestamp"] = pd.to_datetime(df["timestamp"], utc=True)
        df = df.sort_values(["timestamp", "id"], ascending=False).reset_index(drop=True)
    return df


# ── Background writer ─────────────────────────────────────────────────────────

class SnapshotWriter:
    """
    Hands snapshots to SQLite on one worker thread.

    Writes run in submission order, so the last submitted snapshot of a
    bridge is the one that ends up stored. Failures are logged, never raised
    to the caller.
    """

    def __init__(self) -> None:
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="snapshot-writer")

    def _submit(self, fn, *args) -> Future:
        future = self._executor.submit(fn, *args)
        future.add_done_callback(self._on_done)
        return future

    @staticmethod
    def _on_done(future: Future) -> None:
        exc = future.exception()
        if exc is not None:
            logger.error("Snapshot write failed", exc_info=exc)

    def save_region(self, region: Region) -> None:
        self._submit(save_region, region)

    def save_asset(self, asset: Asset) -> None:
        self._submit(save_asset, asset)

    def delete_asset(self, asset_id: str) -> None:
        self._submit(delete_asset, asset_id)

    def flush(self, timeout: float | None = None) -> None:
        """Block until every write submitted so far has run."""
        self._executor.submit(lambda: None).result(timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)
