# ------------------------------------------------------------------------------
# Main Script for the Feeder Maintenance Alert Service
# main.py
# ------------------------------------------------------------------------------
from config import get_config
config = get_config()
from logging_config import get_logger
logger = get_logger(__name__)
import atexit
import json

from core.alerts_core import AlertService
from core.event_log_core import EventLog
from core.preferences_core import YamlPreferenceStore
from feeder.services.notification_service import TelegramAlertDispatcher
from feeder.services.telemetry_poller import TelemetryPoller
from feeder.services.telemetry_source import create_telemetry_source
from feeder.services.weather_service import start_weather_loop
from utils.settings import get_preferences_path

# --------------------------------------------------------------------------
# Configuration Parameters
# --------------------------------------------------------------------------
_debug = config["DEBUG_MODE"]

logger.info(f"Debug mode is {'enabled' if _debug else 'disabled'}.")
_redacted = {
    key: ("***" if value and ("TOKEN" in key or "KEY" in key) else value)
    for key, value in config.items()
}
logger.info(f"Configuration: {json.dumps(_redacted, indent=2)}")

# -----------------------------
# Alert pipeline
# -----------------------------
preference_store = YamlPreferenceStore(get_preferences_path(config["OUTPUT_DIR"]))
alert_service = AlertService(
    preference_store,
    event_log=EventLog(),
    dispatcher=TelegramAlertDispatcher(),
)

# -----------------------------
# Start the Telemetry Poller
# -----------------------------
poller = TelemetryPoller(alert_service)
poller.start(
    interval_seconds=config["TELEMETRY_POLL_INTERVAL"],
    source=create_telemetry_source(config),
)
atexit.register(poller.stop)

if config["WEATHER_API_KEY"]:
    start_weather_loop(
        interval=config["WEATHER_POLL_INTERVAL"],
        on_snapshot=alert_service.handle_weather,
    )
else:
    logger.warning("WEATHER_API_KEY not set, weather-based cleaning alerts disabled.")

# -----------------------------
# Import and Run the Web Interface
# -----------------------------
from web.web_interface import create_web_interface

# Expose the Flask server as the WSGI app.
interface = create_web_interface(alert_service, poller)
app = interface["server"]

if __name__ == '__main__':
    try:
        interface["run"](debug=_debug, host=config["WEB_HOST"], port=config["WEB_PORT"])
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received. Shutting down telemetry poller...")
        poller.stop()
