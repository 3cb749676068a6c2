"""
Telemetry Sources - Firebase REST and Simulation.

FirebaseTelemetrySource reads the feeder's latest sensor object from a
Firebase Realtime Database over its REST interface. SimulatedTelemetrySource
drains the hopper a few percent per reading for local runs without a
feeder.
"""

import random

import requests

from feeder.interfaces.telemetry import TelemetryReading, TelemetrySourceInterface
from logging_config import get_logger

logger = get_logger(__name__)


class FirebaseTelemetrySource(TelemetrySourceInterface):
    """
    Fetches telemetry via GET {database_url}/{path}.json.

    Raises requests exceptions on transport or HTTP errors and ValueError
    when the body is not a JSON object.
    """

    def __init__(
        self,
        database_url: str,
        path: str = "feeder/telemetry",
        auth_token: str | None = None,
        timeout: float = 15.0,
    ):
        if not database_url:
            raise ValueError("database_url is required")
        self.url = f"{database_url.rstrip('/')}/{path.strip('/')}.json"
        self.auth_token = auth_token or None
        self.timeout = timeout

    def fetch_reading(self) -> TelemetryReading:
        params = {"auth": self.auth_token} if self.auth_token else None
        response = requests.get(self.url, params=params, timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        if not isinstance(payload, dict):
            raise ValueError(
                f"Telemetry payload is not an object: {type(payload).__name__}"
            )
        return TelemetryReading.from_payload(payload)


class SimulatedTelemetrySource(TelemetrySourceInterface):
    """Simulates a feeder whose food level drops 2-5 points per reading."""

    def __init__(self, start_percent: float = 80.0, seed: int | None = None):
        self._food_percent = start_percent
        self._random = random.Random(seed)

    def fetch_reading(self) -> TelemetryReading:
        self._food_percent = max(
            0.0, self._food_percent - self._random.uniform(2.0, 5.0)
        )
        return TelemetryReading(
            food_percent=round(self._food_percent, 1),
            clogged=False,
            cleaning_due=False,
            heavy_use_score=round(self._random.uniform(10.0, 70.0), 1),
        )


def create_telemetry_source(config: dict) -> TelemetrySourceInterface:
    """Returns the Firebase source when a database URL is configured, else the simulator."""
    database_url = config.get("FIREBASE_DATABASE_URL", "")
    if not database_url:
        logger.warning("FIREBASE_DATABASE_URL not set, using simulated telemetry.")
        return SimulatedTelemetrySource()

    return FirebaseTelemetrySource(
        database_url,
        path=config.get("TELEMETRY_PATH", "feeder/telemetry"),
        auth_token=config.get("FIREBASE_AUTH_TOKEN") or None,
        timeout=config.get("HTTP_TIMEOUT", 15.0),
    )
