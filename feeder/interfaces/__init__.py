"""
Feeder Monitoring Interfaces.

This package defines the data classes and abstract interfaces shared by
the telemetry, weather, alert and preference components. These enable:
- Clear service boundaries
- Dependency injection
- Independent testing of each component

ARCHITECTURE:
- core/ evaluates and coordinates using these types
- Concrete implementations live in feeder/services/ and core/
"""

from feeder.interfaces.notification import (
    AlertCategory,
    AlertDispatchInterface,
    AlertEvent,
)
from feeder.interfaces.preferences import (
    Preferences,
    PreferenceStoreInterface,
    UsageSensitivity,
    WeatherSensitivity,
)
from feeder.interfaces.telemetry import TelemetryReading, TelemetrySourceInterface
from feeder.interfaces.weather import WeatherSnapshot

__all__ = [
    # Interfaces
    "AlertDispatchInterface",
    "PreferenceStoreInterface",
    "TelemetrySourceInterface",
    # Data Classes
    "AlertCategory",
    "AlertEvent",
    "Preferences",
    "TelemetryReading",
    "UsageSensitivity",
    "WeatherSensitivity",
    "WeatherSnapshot",
]
