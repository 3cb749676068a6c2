# config.py
import os
from dotenv import load_dotenv

# Load environment variables from .env file.
load_dotenv()

_config_cache: dict | None = None


def _env_bool(name: str, default: str = "False") -> bool:
    return os.getenv(name, default).strip().lower() == "true"


def load_config():
    """
    Loads configuration from environment variables and returns a dictionary.
    """
    location_str = os.getenv("LOCATION_DATA", "37.7749, -122.4194")
    try:
        lat_str, lon_str = location_str.split(",")
        LOCATION_DATA = {"latitude": float(lat_str), "longitude": float(lon_str)}
    except Exception:
        # Fallback to defaults if parsing fails
        LOCATION_DATA = {"latitude": 37.7749, "longitude": -122.4194}

    config = {
        # General Settings
        "DEBUG_MODE": _env_bool("DEBUG_MODE"),
        "OUTPUT_DIR": os.getenv("OUTPUT_DIR", "./data/output"),

        # GPS Location (used for weather lookups)
        "LOCATION_DATA": LOCATION_DATA,

        # Feeder telemetry (Firebase Realtime Database REST)
        "FIREBASE_DATABASE_URL": os.getenv("FIREBASE_DATABASE_URL", "").strip(),
        "FIREBASE_AUTH_TOKEN": os.getenv("FIREBASE_AUTH_TOKEN", "").strip(),
        "TELEMETRY_PATH": os.getenv("TELEMETRY_PATH", "feeder/telemetry"),
        "TELEMETRY_POLL_INTERVAL": float(os.getenv("TELEMETRY_POLL_INTERVAL", 60)),
        "HTTP_TIMEOUT": float(os.getenv("HTTP_TIMEOUT", 15)),

        # Weather Settings
        "WEATHER_API_KEY": os.getenv("WEATHER_API_KEY", "").strip(),
        "WEATHER_ENDPOINT": os.getenv("WEATHER_ENDPOINT", "https://api.weatherapi.com/v1"),
        "WEATHER_POLL_INTERVAL": float(os.getenv("WEATHER_POLL_INTERVAL", 1800)),

        # Telegram Notification Settings
        "TELEGRAM_ENABLED": _env_bool("TELEGRAM_ENABLED"),

        # Web API
        "WEB_HOST": os.getenv("WEB_HOST", "0.0.0.0"),
        "WEB_PORT": int(os.getenv("WEB_PORT", 8050)),
    }
    return config


def get_config() -> dict:
    """Returns the process-wide configuration, loading it on first use."""
    global _config_cache
    if _config_cache is None:
        _config_cache = load_config()
    return _config_cache


if __name__ == "__main__":
    # For testing purposes, print the configuration
    config = load_config()
    from pprint import pprint

    pprint(config)
