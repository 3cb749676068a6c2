"""
Weather Service - Fetches and caches current weather from WeatherAPI.

Runs as a background daemon thread, polling every 30 minutes.
The latest snapshot is cached in-memory for the web layer and handed to
an optional callback (the weather-based cleaning rule).
"""

import threading
import time
from collections.abc import Callable

import requests

from config import get_config
from feeder.interfaces.telemetry import as_number
from feeder.interfaces.weather import WeatherSnapshot
from logging_config import get_logger

logger = get_logger(__name__)

# Precipitation above this many millimetres counts as rain.
RAIN_THRESHOLD_MM = 0.1

_SNOW_WORDS = ("snow", "sleet", "blizzard")
_HAIL_WORDS = ("hail", "ice pellets")

# Global cache for the latest weather
_latest_snapshot: WeatherSnapshot | None = None
_cache_lock = threading.Lock()


def get_latest_weather() -> WeatherSnapshot | None:
    """Returns the cached weather snapshot, or None before the first fetch."""
    with _cache_lock:
        return _latest_snapshot


def parse_current_weather(data: dict) -> WeatherSnapshot:
    """
    Builds a WeatherSnapshot from a WeatherAPI current.json response.

    Raises:
        KeyError: If the response has no "current" block.
    """
    current = data["current"]
    location = data.get("location") or {}
    condition = (current.get("condition") or {}).get("text") or "Unknown"
    precip_mm = as_number(current.get("precip_mm"))
    lowered = condition.lower()

    return WeatherSnapshot(
        condition=condition,
        humidity=as_number(current.get("humidity")),
        is_raining=(precip_mm or 0.0) > RAIN_THRESHOLD_MM,
        is_snowing=any(word in lowered for word in _SNOW_WORDS),
        is_hailing=any(word in lowered for word in _HAIL_WORDS),
        temperature_c=as_number(current.get("temp_c")),
        precipitation_mm=precip_mm,
        wind_kph=as_number(current.get("wind_kph")),
        location_name=location.get("name") or "Current Location",
    )


def fetch_current_weather(
    api_key: str,
    endpoint: str,
    latitude: float,
    longitude: float,
    timeout: float = 15.0,
) -> WeatherSnapshot:
    """
    Fetches the current weather for a coordinate.

    Raises:
        ValueError: If no API key is configured.
        requests.RequestException: On transport or HTTP errors.
    """
    if not api_key:
        raise ValueError("WEATHER_API_KEY is not configured")

    url = f"{endpoint.rstrip('/')}/current.json"
    response = requests.get(
        url,
        params={"key": api_key, "q": f"{latitude},{longitude}"},
        headers={"User-Agent": "FeederAlerts/1.0"},
        timeout=timeout,
    )
    response.raise_for_status()
    return parse_current_weather(response.json())


def refresh_weather(
    on_snapshot: Callable[[WeatherSnapshot], object] | None = None,
) -> WeatherSnapshot | None:
    """Fetches weather using the configured location, updates the cache and calls on_snapshot."""
    global _latest_snapshot
    cfg = get_config()
    location = cfg.get("LOCATION_DATA", {})

    # LOCATION_DATA is a dict with 'latitude' / 'longitude'
    if isinstance(location, dict):
        lat = location.get("latitude", 37.7749)
        lon = location.get("longitude", -122.4194)
    else:
        lat, lon = 37.7749, -122.4194

    try:
        snapshot = fetch_current_weather(
            cfg.get("WEATHER_API_KEY", ""),
            cfg.get("WEATHER_ENDPOINT", "https://api.weatherapi.com/v1"),
            lat,
            lon,
            timeout=cfg.get("HTTP_TIMEOUT", 15.0),
        )
    except Exception as e:
        logger.error(f"Failed to fetch weather: {e}")
        return None

    with _cache_lock:
        _latest_snapshot = snapshot
    logger.info(
        "Weather updated: %s, humidity %s%%, %.1f°C",
        snapshot.condition,
        snapshot.humidity,
        snapshot.temperature_c or 0,
    )

    if on_snapshot is not None:
        try:
            on_snapshot(snapshot)
        except Exception as e:
            logger.error(f"Weather snapshot handler failed: {e}", exc_info=True)
    return snapshot


def start_weather_loop(
    interval=1800,
    on_snapshot: Callable[[WeatherSnapshot], object] | None = None,
):
    """Starts the background thread to fetch weather every `interval` seconds (default 30min)."""

    def loop():
        logger.info("Weather service started (interval=%ds).", interval)
        # Initial fetch
        refresh_weather(on_snapshot)
        while True:
            time.sleep(interval)
            refresh_weather(on_snapshot)

    t = threading.Thread(target=loop, daemon=True, name="WeatherWorker")
    t.start()
    return t
