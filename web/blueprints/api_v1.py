"""
API v1 Blueprint.

This blueprint provides versioned API endpoints under /api/v1/*.

The AlertService and TelemetryPoller are injected as blueprint attributes
(api_v1.alert_service, api_v1.poller) by create_web_interface().
"""

from flask import Blueprint, jsonify, request

from core import preferences_core
from logging_config import get_logger

logger = get_logger(__name__)

# Create Blueprint
api_v1 = Blueprint("api_v1", __name__, url_prefix="/api/v1")
api_v1.alert_service = None
api_v1.poller = None


@api_v1.route("/status", methods=["GET"])
def status():
    """
    Returns poller state and alert log size.
    """
    service = api_v1.alert_service
    poller = api_v1.poller
    return jsonify(
        {
            "poller_running": bool(poller and poller.is_running),
            "poll_interval_seconds": poller.interval_seconds if poller else None,
            "alert_count": len(service.event_log),
        }
    )


@api_v1.route("/alerts", methods=["GET"])
def alerts():
    """
    Returns the recent alerts, newest first.
    """
    event_log = api_v1.alert_service.event_log
    events = [event.to_dict() for event in event_log.events()]
    return jsonify(
        {"alerts": events, "count": len(events), "capacity": event_log.capacity}
    )


@api_v1.route("/telemetry", methods=["GET"])
def telemetry():
    """Returns the latest telemetry reading, or null before the first poll."""
    reading = api_v1.alert_service.latest_reading
    return jsonify(reading.to_dict() if reading else None)


@api_v1.route("/weather", methods=["GET"])
def weather():
    """Returns the latest weather snapshot, or null before the first fetch."""
    snapshot = api_v1.alert_service.latest_weather
    return jsonify(snapshot.to_dict() if snapshot else None)


@api_v1.route("/preferences", methods=["GET"])
def preferences_get():
    """
    Returns the current notification preferences.
    """
    return jsonify(api_v1.alert_service.preferences.to_dict())


@api_v1.route("/preferences", methods=["POST"])
def preferences_post():
    """
    Applies a partial preference update.

    Returns 400 with the validation errors if any field is invalid; in
    that case nothing is changed.
    """
    payload = request.get_json(silent=True)
    store = api_v1.alert_service.preference_store

    success, errors = preferences_core.update_preferences(store, payload)
    if not success:
        return jsonify({"status": "error", "errors": errors}), 400

    logger.info(f"Preferences updated: {sorted(payload)}")
    return jsonify(
        {"status": "success", "preferences": store.preferences.to_dict()}
    )


@api_v1.route("/preferences/mark-cleaned", methods=["POST"])
def preferences_mark_cleaned():
    """
    Records that the feeder was cleaned just now.
    """
    updated = api_v1.alert_service.preference_store.mark_cleaned()
    return jsonify({"status": "success", "preferences": updated.to_dict()})


@api_v1.route("/maintenance/cleaning-check", methods=["POST"])
def cleaning_check():
    """
    Runs the cleaning reminder immediately and returns any alert it raised.
    """
    events = api_v1.alert_service.check_cleaning()
    return jsonify({"alerts": [event.to_dict() for event in events]})
