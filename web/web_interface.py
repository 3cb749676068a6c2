# ------------------------------------------------------------------------------
# web_interface.py
# ------------------------------------------------------------------------------

from flask import Flask, jsonify

from logging_config import get_logger
from web.blueprints.api_v1 import api_v1

logger = get_logger(__name__)


def create_web_interface(alert_service, poller=None):
    """
    Builds the Flask server exposing the alert API.

    Args:
        alert_service: core.alerts_core.AlertService shared with the pollers.
        poller: Optional TelemetryPoller, reported by /api/v1/status.

    Returns:
        Dict with the Flask "server" and a "run" callable.
    """
    server = Flask(__name__)

    api_v1.alert_service = alert_service
    api_v1.poller = poller
    server.register_blueprint(api_v1)

    @server.errorhandler(404)
    def not_found(_error):
        return jsonify({"status": "error", "errors": ["Not found"]}), 404

    # -----------------------------
    # Function to Start the Web Interface
    # -----------------------------
    def run(debug=False, host="0.0.0.0", port=8050):
        logger.info(f"Starting API server on http://{host}:{port}")
        server.run(host=host, port=port, debug=debug, use_reloader=False)

    return {"server": server, "run": run}
