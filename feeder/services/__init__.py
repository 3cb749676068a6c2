"""
Feeder Monitoring Services.

This package contains concrete implementations of the feeder interfaces.
Each service encapsulates a specific responsibility and can be tested independently.

ARCHITECTURE:
- Services implement interfaces from feeder/interfaces/
- Services may use utils/ for low-level operations
- core.alerts_core.AlertService evaluates what these services fetch
"""

from feeder.services.notification_service import TelegramAlertDispatcher
from feeder.services.telemetry_poller import TelemetryPoller
from feeder.services.telemetry_source import (
    FirebaseTelemetrySource,
    SimulatedTelemetrySource,
    create_telemetry_source,
)

__all__ = [
    "FirebaseTelemetrySource",
    "SimulatedTelemetrySource",
    "TelegramAlertDispatcher",
    "TelemetryPoller",
    "create_telemetry_source",
]
