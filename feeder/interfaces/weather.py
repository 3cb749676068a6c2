"""
Weather Interface - Current Conditions at the Feeder.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from feeder.interfaces.telemetry import as_number


@dataclass(frozen=True)
class WeatherSnapshot:
    """
    Current weather conditions consumed by the cleaning rules.

    Attributes:
        condition: Human-readable condition text (e.g., "Light rain").
        humidity: Relative humidity 0-100, None when unknown.
        is_raining / is_snowing / is_hailing: Precipitation flags.
    """

    condition: str
    humidity: float | None
    is_raining: bool = False
    is_snowing: bool = False
    is_hailing: bool = False
    temperature_c: float | None = None
    precipitation_mm: float | None = None
    wind_kph: float | None = None
    location_name: str = "Current Location"
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_map(cls, data: dict[str, Any]) -> "WeatherSnapshot":
        """Builds a snapshot from a loosely typed mapping."""
        condition = data.get("condition")
        return cls(
            condition=condition if isinstance(condition, str) else "Unknown",
            humidity=as_number(data.get("humidity")),
            is_raining=data.get("isRaining") is True,
            is_snowing=data.get("isSnowing") is True,
            is_hailing=data.get("isHailing") is True,
            temperature_c=as_number(data.get("temperatureC")),
            precipitation_mm=as_number(data.get("precipitationMm")),
            wind_kph=as_number(data.get("windKph")),
            location_name=data.get("locationName") or "Snapshot",
        )

    @property
    def has_precipitation(self) -> bool:
        return self.is_raining or self.is_snowing or self.is_hailing

    def to_dict(self) -> dict[str, Any]:
        return {
            "condition": self.condition,
            "humidity": self.humidity,
            "is_raining": self.is_raining,
            "is_snowing": self.is_snowing,
            "is_hailing": self.is_hailing,
            "temperature_c": self.temperature_c,
            "precipitation_mm": self.precipitation_mm,
            "wind_kph": self.wind_kph,
            "location_name": self.location_name,
            "updated_at": self.updated_at.isoformat(),
        }
