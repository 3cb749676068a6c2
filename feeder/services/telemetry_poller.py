"""
Telemetry Poller - Periodic Feeder Polling.

Fetches the latest telemetry reading on a fixed interval and hands it to
the AlertService. One daemon thread runs each tick to completion, so
ticks never overlap. A failed fetch is logged and the tick is skipped;
the next tick is the only retry.
"""

import threading

from core.alerts_core import AlertService
from feeder.interfaces.notification import AlertEvent
from feeder.interfaces.telemetry import TelemetrySourceInterface
from logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_POLL_INTERVAL = 60.0


class TelemetryPoller:
    """
    Polls a telemetry source and feeds readings into the alert rules.

    An immediate poll runs on start() in addition to the periodic ticks.
    """

    def __init__(
        self,
        alert_service: AlertService,
        source: TelemetrySourceInterface | None = None,
        interval_seconds: float = DEFAULT_POLL_INTERVAL,
    ):
        self.alert_service = alert_service
        self.source = source
        self.interval_seconds = interval_seconds

        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(
        self,
        interval_seconds: float | None = None,
        source: TelemetrySourceInterface | None = None,
    ) -> None:
        """Start polling `source` every `interval_seconds` on a background thread."""
        if self.is_running:
            logger.warning("TelemetryPoller already running")
            return

        if interval_seconds is not None:
            self.interval_seconds = interval_seconds
        if source is not None:
            self.source = source
        if self.source is None:
            raise ValueError("A telemetry source is required to start polling")
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._poll_loop, name="TelemetryPoller", daemon=True
        )
        self._thread.start()

    def stop(self) -> None:
        """Stop polling. Safe to call more than once."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=5.0)
            self._thread = None
            logger.info("TelemetryPoller stopped")

    def poll_once(self) -> list[AlertEvent]:
        """
        Runs one fetch -> evaluate -> append cycle.

        Returns:
            The alerts emitted for this reading; [] if the fetch failed.
        """
        try:
            reading = self.source.fetch_reading()
        except Exception as e:
            logger.warning(f"Telemetry fetch failed, skipping this cycle: {e}")
            return []

        logger.debug(f"Telemetry reading: {reading.to_dict()}")
        return self.alert_service.handle_reading(reading)

    def _tick(self) -> None:
        try:
            self.poll_once()
        except Exception as e:
            logger.error(f"Telemetry tick failed: {e}", exc_info=True)

    def _poll_loop(self) -> None:
        logger.info(f"TelemetryPoller started (interval={self.interval_seconds}s)")
        self._tick()
        while not self._stop_event.wait(self.interval_seconds):
            self._tick()
