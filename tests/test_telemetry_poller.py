"""
Tests for TelemetryPoller lifecycle and error handling.
"""

import threading
import time

import pytest

from core.alerts_core import AlertService
from core.preferences_core import PreferenceStore
from feeder.interfaces.preferences import Preferences
from feeder.interfaces.telemetry import TelemetryReading, TelemetrySourceInterface
from feeder.services.telemetry_poller import TelemetryPoller

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _ScriptedSource(TelemetrySourceInterface):
    """Returns queued food levels; an Exception instance in the script is raised."""

    def __init__(self, script):
        self._script = list(script)
        self.calls = 0
        self.fetched = threading.Event()

    def fetch_reading(self) -> TelemetryReading:
        self.calls += 1
        self.fetched.set()
        item = self._script.pop(0) if self._script else 50.0
        if isinstance(item, Exception):
            raise item
        return TelemetryReading(
            food_percent=item, clogged=False, cleaning_due=False, heavy_use_score=None
        )


def _service() -> AlertService:
    prefs = Preferences(
        cleaning_reminder_enabled=False,
        heavy_use_enabled=False,
        low_food_threshold_percent=20,
    )
    return AlertService(PreferenceStore(prefs))


# ---------------------------------------------------------------------------
# poll_once
# ---------------------------------------------------------------------------


class TestPollOnce:
    def test_reading_flows_into_event_log(self):
        service = _service()
        poller = TelemetryPoller(service, _ScriptedSource([15.0]))

        events = poller.poll_once()

        assert len(events) == 1
        assert service.event_log.events() == events

    def test_fetch_failure_is_swallowed(self):
        service = _service()
        source = _ScriptedSource([ConnectionError("offline"), 15.0])
        poller = TelemetryPoller(service, source)

        assert poller.poll_once() == []
        assert service.latest_reading is None

        # Next tick recovers normally.
        assert len(poller.poll_once()) == 1

    def test_failure_does_not_reset_low_food_edge(self):
        service = _service()
        source = _ScriptedSource([15.0, ValueError("bad body"), 12.0])
        poller = TelemetryPoller(service, source)

        results = [poller.poll_once() for _ in range(3)]

        assert [len(r) for r in results] == [1, 0, 0]


# ---------------------------------------------------------------------------
# start / stop
# ---------------------------------------------------------------------------


class TestLifecycle:
    def test_start_polls_immediately(self):
        source = _ScriptedSource([15.0])
        poller = TelemetryPoller(_service())

        poller.start(interval_seconds=60, source=source)
        try:
            assert source.fetched.wait(timeout=2.0)
            assert poller.is_running
        finally:
            poller.stop()

        assert not poller.is_running
        assert source.calls == 1

    def test_periodic_ticks(self):
        source = _ScriptedSource([])
        poller = TelemetryPoller(_service(), source, interval_seconds=0.05)

        poller.start()
        time.sleep(0.4)
        poller.stop()

        assert source.calls >= 3

    def test_stop_halts_polling(self):
        source = _ScriptedSource([])
        poller = TelemetryPoller(_service(), source, interval_seconds=0.05)

        poller.start()
        time.sleep(0.2)
        poller.stop()
        calls_after_stop = source.calls
        time.sleep(0.2)

        assert source.calls == calls_after_stop

    def test_stop_is_idempotent(self):
        poller = TelemetryPoller(_service(), _ScriptedSource([]))
        poller.stop()
        poller.stop()
        assert not poller.is_running

    def test_second_start_is_ignored(self):
        source = _ScriptedSource([])
        poller = TelemetryPoller(_service(), source, interval_seconds=60)

        poller.start()
        try:
            assert source.fetched.wait(timeout=2.0)
            first_thread = poller._thread
            poller.start()
            assert poller._thread is first_thread
        finally:
            poller.stop()

    def test_start_requires_source(self):
        with pytest.raises(ValueError):
            TelemetryPoller(_service()).start()

    def test_start_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            TelemetryPoller(_service(), _ScriptedSource([])).start(interval_seconds=0)
