"""Flask web application serving asset maintenance reports as JSON."""

import logging
import os
from datetime import date
from pathlib import Path

from flask import Flask, jsonify, request

from maintrecon import (
    IntervalState,
    ReportConfig,
    StoreUnavailableError,
    build_report,
    load_snapshot,
    resolve_maintenance,
)
from maintrecon.collaborators import CostAggregationClient

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Snapshot file (relative to project root unless SNAPSHOT_PATH is set)
app.config["SNAPSHOT_PATH"] = os.environ.get(
    "SNAPSHOT_PATH", str(Path(__file__).parent.parent / "snapshots" / "sample.yaml")
)
app.config["COST_AGGREGATION_URL"] = os.environ.get("COST_AGGREGATION_URL")


def get_store():
    """Load the configured snapshot."""
    return load_snapshot(app.config["SNAPSHOT_PATH"])


def get_cost_source():
    url = app.config.get("COST_AGGREGATION_URL")
    return CostAggregationClient(url) if url else None


def error_response(message: str, status: int):
    return jsonify({"error": message}), status


@app.errorhandler(StoreUnavailableError)
def store_unavailable(e):
    logger.error("Store unavailable: %s", e)
    return error_response(str(e), 500)


@app.route("/api/reports/asset-maintenance-summary", methods=["POST"])
def asset_maintenance_summary():
    """One maintenance and usage summary per in-scope asset."""
    body = request.get_json(silent=True)
    if body is None:
        body = {}
    if not isinstance(body, dict):
        return error_response("Request body must be a JSON object", 400)
    date_from = body.get("dateFrom")
    date_to = body.get("dateTo")
    if not date_from or not date_to:
        return error_response("dateFrom and dateTo are required", 400)

    try:
        config = ReportConfig.for_dates(date_from, date_to)
    except ValueError as e:
        return error_response(str(e), 400)

    summaries = build_report(
        get_store(),
        config,
        cost_source=get_cost_source(),
        business_unit_id=body.get("businessUnitId") or None,
        plant_id=body.get("plantId") or None,
    )
    return jsonify({"assets": [s.to_dict() for s in summaries]})


@app.route("/api/assets/<asset_id>/intervals")
def asset_intervals(asset_id: str):
    """Status and due point of every catalog interval for one asset."""
    store = get_store()
    asset = store.get_asset(asset_id)
    if asset is None:
        return error_response(f"Asset '{asset_id}' not found", 404)

    today = date.today().isoformat()
    config = ReportConfig.for_dates(today, today)
    intervals = store.fetch_intervals([asset.model_id]).get(asset.model_id, [])
    history = store.fetch_service_history([asset.id]).get(asset.id, [])
    resolution, selection = resolve_maintenance(asset, intervals, history, config)

    result = {
        "asset_id": asset.id,
        "asset_code": asset.code,
        "maintenance_unit": asset.maintenance_unit.value,
        "current_value": asset.current_value,
        "cycle": None,
        "selected_interval_id": selection.interval_id,
        "intervals": [],
    }
    if resolution is None:
        return jsonify(result)

    result["cycle"] = {
        "number": resolution.current_cycle,
        "length": resolution.cycle_length,
        "start": resolution.cycle_start,
        "end": resolution.cycle_end,
    }
    # Sort by urgency (OVERDUE first, then UPCOMING, etc.)
    statuses = sorted(resolution.statuses, key=lambda s: (s.state.value, s.interval.interval_value))
    for s in statuses:
        result["intervals"].append({
            "id": s.interval.id,
            "name": s.interval.label,
            "interval_value": s.interval.interval_value,
            "state": s.state.label,
            "due_value": s.due_value,
            "cycle": s.cycle,
            "overdue": s.overdue_by(asset.current_value) if s.state is IntervalState.OVERDUE else None,
        })
    return jsonify(result)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True, port=5000)
