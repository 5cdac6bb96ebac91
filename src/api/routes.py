"""
src/api/routes.py
─────────────────
JSON API mounted on the Dash (Flask) server.

  GET    /api/regions                  regions with nested bridges
  GET    /api/regions/list             [{id, name}] for dropdowns
  POST   /api/regions                  {name}
  POST   /api/bridges                  {name, location?, regionId}
  GET    /api/bridges/<id>             bridge detail + regionName
  POST   /api/bridges/<id>/recalibrate
  DELETE /api/bridges/<id>
  POST   /api/data/<bridge_id>         sensor sample {x, y, z}
  GET    /api/events?limit=&channel=   recent live-update events
"""
from __future__ import annotations

import logging
from typing import Any

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from src.data.models import Asset, AxesPayload
from src.monitoring.errors import (
    AssetNotFound,
    InvalidReading,
    InvalidRequest,
    MonitorError,
    RegionNotFound,
)
from src.monitoring.registry import AssetRegistry

logger = logging.getLogger(__name__)

_MAX_EVENTS = 200


def parse_axes(payload: Any) -> AxesPayload:
    """Validate a sensor sample before it reaches the pipeline."""
    if not isinstance(payload, dict):
        raise InvalidReading("expected a JSON object with numeric x, y and z")
    try:
        return AxesPayload.model_validate(payload)
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise InvalidReading(f"invalid axis values: {', '.join(fields) or 'payload'}") from exc


def asset_to_dict(asset: Asset, region_name: str | None = None) -> dict[str, Any]:
    calibration = asset.calibration
    data = {
        "id": asset.id,
        "name": asset.name,
        "location": asset.location,
        "regionId": asset.region_id,
        "status": asset.connectivity.value,
        "lastSeen": asset.last_seen_at.isoformat() if asset.last_seen_at else None,
        "naturalFrequency": asset.baseline,
        "isCalibrated": asset.is_calibrated,
        "calibrationCount": getattr(calibration, "sample_count", None),
        "readings": [r.model_dump(mode="json") for r in asset.readings],
        "alerts": [a.model_dump(mode="json") for a in asset.alerts],
    }
    if region_name is not None:
        data["regionName"] = region_name
    return data


def _error(message: str, status: int):
    return jsonify({"error": message}), status


def create_api(registry: AssetRegistry) -> Blueprint:
    bp = Blueprint("api", __name__, url_prefix="/api")

    # ── Errors ────────────────────────────────────────────────────────────────

    @bp.errorhandler(AssetNotFound)
    def _asset_not_found(exc: AssetNotFound):
        return _error("bridge not found", 404)

    @bp.errorhandler(RegionNotFound)
    def _region_not_found(exc: RegionNotFound):
        return _error("region not found", 404)

    @bp.errorhandler(InvalidReading)
    @bp.errorhandler(InvalidRequest)
    def _bad_request(exc: MonitorError):
        return _error(str(exc), 400)

    @bp.errorhandler(MonitorError)
    def _internal(exc: MonitorError):
        logger.error("Request failed: %s", exc, exc_info=True)
        return _error(str(exc), 500)

    # ── Regions ───────────────────────────────────────────────────────────────

    @bp.get("/regions")
    def list_regions():
        assets = registry.snapshot()
        return jsonify([
            {
                "id": region.id,
                "name": region.name,
                "type": "region",
                "bridges": [asset_to_dict(a) for a in assets if a.region_id == region.id],
            }
            for region in registry.regions()
        ])

    @bp.get("/regions/list")
    def list_region_names():
        return jsonify([{"id": r.id, "name": r.name} for r in registry.regions()])

    @bp.post("/regions")
    def create_region():
        body = request.get_json(silent=True) or {}
        region = registry.add_region(body.get("name"))
        return jsonify({"message": "region added", "region": region.model_dump(mode="json")})

    # ── Bridges ───────────────────────────────────────────────────────────────

    @bp.post("/bridges")
    def create_bridge():
        body = request.get_json(silent=True) or {}
        if not body.get("name") or not body.get("regionId"):
            raise InvalidRequest("bridge name and regionId are required")
        asset = registry.add_asset(body["name"], body["regionId"], body.get("location") or "")
        return jsonify({"message": "bridge added", "bridge": asset_to_dict(asset)})

    @bp.get("/bridges/<bridge_id>")
    def get_bridge(bridge_id: str):
        asset = registry.get_asset(bridge_id)
        try:
            region_name = registry.get_region(asset.region_id).name
        except RegionNotFound:
            region_name = None
        return jsonify(asset_to_dict(asset, region_name=region_name))

    @bp.post("/bridges/<bridge_id>/recalibrate")
    def recalibrate_bridge(bridge_id: str):
        registry.recalibrate(bridge_id)
        return jsonify({"message": "calibration started"})

    @bp.delete("/bridges/<bridge_id>")
    def delete_bridge(bridge_id: str):
        registry.remove_asset(bridge_id)
        return jsonify({"message": "bridge deleted"})

    # ── Sensor data ───────────────────────────────────────────────────────────

    @bp.post("/data/<bridge_id>")
    def ingest(bridge_id: str):
        axes = parse_axes(request.get_json(silent=True))
        outcome = registry.observe_reading(bridge_id, axes.x, axes.y, axes.z)
        reading = outcome.reading
        return jsonify({
            "status": "ok",
            "vibration": reading.vibration,
            "isCalibrated": outcome.asset.is_calibrated,
            "calibrationComplete": outcome.calibration_complete,
            "severity": reading.deviation.severity.value if reading.deviation else None,
        })

    # ── Live-update feed ──────────────────────────────────────────────────────

    @bp.get("/events")
    def recent_events():
        limit = min(request.args.get("limit", 50, type=int), _MAX_EVENTS)
        channel = request.args.get("channel") or None
        return jsonify([e.to_dict() for e in registry.bus.recent(limit, channel)])

    return bp
