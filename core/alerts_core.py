"""
Alerts Core - Maintenance Alert Coordination.

Owns the rule state, runs the maintenance rules against each telemetry
reading or weather snapshot with the current preference snapshot, then
appends the resulting alerts to the event log and forwards them to the
dispatcher.
"""

import logging
import threading
from datetime import datetime

from core.event_log_core import EventLog
from core.maintenance_core import (
    RuleState,
    evaluate_cleaning,
    evaluate_telemetry,
    evaluate_weather,
)
from feeder.interfaces.notification import AlertDispatchInterface, AlertEvent
from feeder.interfaces.preferences import Preferences, PreferenceStoreInterface
from feeder.interfaces.telemetry import TelemetryReading
from feeder.interfaces.weather import WeatherSnapshot

logger = logging.getLogger(__name__)


class AlertService:
    """
    Runs the maintenance rules and publishes their alerts.

    Evaluations are serialised with a lock so the telemetry and weather
    workers never interleave rule state updates.
    """

    def __init__(
        self,
        preference_store: PreferenceStoreInterface,
        event_log: EventLog | None = None,
        dispatcher: AlertDispatchInterface | None = None,
    ):
        self.preference_store = preference_store
        self.event_log = event_log or EventLog()
        self.dispatcher = dispatcher

        self._state = RuleState()
        self._lock = threading.Lock()
        self.latest_reading: TelemetryReading | None = None
        self.latest_weather: WeatherSnapshot | None = None

    @property
    def state(self) -> RuleState:
        return self._state

    @property
    def preferences(self) -> Preferences:
        return self.preference_store.preferences

    def handle_reading(
        self, reading: TelemetryReading, now: datetime | None = None
    ) -> list[AlertEvent]:
        """Evaluates a telemetry reading and publishes any alerts."""
        with self._lock:
            self.latest_reading = reading
            events, self._state = evaluate_telemetry(
                reading, self.preferences, self._state, now
            )
        self._publish(events)
        return events

    def handle_weather(
        self, snapshot: WeatherSnapshot, now: datetime | None = None
    ) -> list[AlertEvent]:
        """Evaluates a weather snapshot and publishes any alert."""
        with self._lock:
            self.latest_weather = snapshot
            events, self._state = evaluate_weather(
                snapshot, self.preferences, self._state, now
            )
        self._publish(events)
        return events

    def check_cleaning(self, now: datetime | None = None) -> list[AlertEvent]:
        """Runs the cleaning reminder on demand and publishes the result."""
        events = evaluate_cleaning(self.preferences, now)
        self._publish(events)
        return events

    def _publish(self, events: list[AlertEvent]) -> None:
        for event in events:
            self.event_log.append(event)
            logger.info(f"Alert [{event.category.value}]: {event.message}")

            if self.dispatcher is None or not self.dispatcher.is_enabled:
                continue
            try:
                self.dispatcher.dispatch(event)
            except Exception as e:
                logger.error(f"Alert dispatch failed for {event.id}: {e}")
