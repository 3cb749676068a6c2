"""
Preferences Interface - User Alert Settings.

Defines the preference value read by the maintenance rules and the
contract for the store that owns it.
"""

import dataclasses
import math
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from logging_config import get_logger

logger = get_logger(__name__)


class WeatherSensitivity(str, Enum):
    NORMAL = "normal"
    HIGH = "high"


class UsageSensitivity(str, Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"


@dataclass(frozen=True)
class Preferences:
    """
    User-editable thresholds and toggles for the maintenance rules.

    Changing a preference produces a new value (see dataclasses.replace);
    the rules always see a consistent snapshot.
    """

    low_food_enabled: bool = True
    clogged_enabled: bool = True
    cleaning_reminder_enabled: bool = True
    cleaning_interval_days: int = 7
    weather_based_cleaning_enabled: bool = True
    weather_sensitivity: WeatherSensitivity = WeatherSensitivity.NORMAL
    humidity_threshold: float = 78.0
    heavy_use_enabled: bool = True
    heavy_use_sensitivity: UsageSensitivity = UsageSensitivity.NORMAL
    low_food_threshold_percent: float = 20.0
    progress_notifications_enabled: bool = True
    heavy_use_cooldown_hours: float = 12.0
    weather_cooldown_hours: float = 12.0
    last_cleaned: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        """Plain-data form for YAML and JSON (enums by value, ISO timestamps)."""
        data = dataclasses.asdict(self)
        data["weather_sensitivity"] = self.weather_sensitivity.value
        data["heavy_use_sensitivity"] = self.heavy_use_sensitivity.value
        data["last_cleaned"] = (
            self.last_cleaned.isoformat() if self.last_cleaned else None
        )
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Preferences":
        """
        Builds preferences from stored data.

        Unknown keys are ignored; any value that cannot be interpreted
        falls back to its default.
        """
        if not isinstance(data, dict):
            return cls()

        values: dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if f.name not in data:
                continue
            try:
                values[f.name] = coerce_preference(f.name, data[f.name])
            except (TypeError, ValueError) as e:
                logger.warning(f"Ignoring stored preference {f.name!r}: {e}")
        return cls(**values)


_BOOL_FIELDS = {
    "low_food_enabled",
    "clogged_enabled",
    "cleaning_reminder_enabled",
    "weather_based_cleaning_enabled",
    "heavy_use_enabled",
    "progress_notifications_enabled",
}

# Cooldowns are capped at one year.
MAX_COOLDOWN_HOURS = 24.0 * 365

# field -> (minimum, maximum)
_NUMBER_RANGES = {
    "humidity_threshold": (0.0, 100.0),
    "low_food_threshold_percent": (0.0, 100.0),
    "heavy_use_cooldown_hours": (0.0, MAX_COOLDOWN_HOURS),
    "weather_cooldown_hours": (0.0, MAX_COOLDOWN_HOURS),
}


def coerce_preference(name: str, value: Any) -> Any:
    """
    Converts a raw value for the named preference into its typed form.

    Raises:
        ValueError / TypeError: If the value is not acceptable.
    """
    if name in _BOOL_FIELDS:
        if not isinstance(value, bool):
            raise TypeError("must be a boolean")
        return value

    if name == "cleaning_interval_days":
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError("must be an integer")
        if value < 1:
            raise ValueError("must be at least 1")
        return value

    if name in _NUMBER_RANGES:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError("must be a number")
        try:
            finite = math.isfinite(value)
        except OverflowError:
            finite = False
        if not finite:
            raise ValueError("must be a finite number")
        low, high = _NUMBER_RANGES[name]
        if low is not None and value < low:
            raise ValueError(f"must be >= {low:g}")
        if high is not None and value > high:
            raise ValueError(f"must be <= {high:g}")
        return float(value)

    if name == "weather_sensitivity":
        return WeatherSensitivity(value)

    if name == "heavy_use_sensitivity":
        return UsageSensitivity(value)

    if name == "last_cleaned":
        if value is None:
            return None
        if isinstance(value, datetime):
            parsed = value
        elif isinstance(value, str):
            parsed = datetime.fromisoformat(value)
        else:
            raise TypeError("must be an ISO-8601 timestamp or null")
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=UTC)
        return parsed

    raise ValueError(f"unknown preference {name!r}")


class PreferenceStoreInterface(ABC):
    """
    Interface for the store that owns the user's preferences.

    The rules only ever read a snapshot; all writes go through update().
    """

    @property
    @abstractmethod
    def preferences(self) -> Preferences:
        """
        Returns the current preference snapshot.
        """
        pass

    @abstractmethod
    def update(self, next_preferences: Preferences) -> None:
        """
        Replaces the whole preference set and persists it.

        Args:
            next_preferences: The new preference value.
        """
        pass

    @abstractmethod
    def update_with(
        self, change: Callable[[Preferences], Preferences]
    ) -> Preferences:
        """
        Atomically derives the next preference set from the current one.

        Args:
            change: Called with the current value, returns the replacement.

        Returns:
            The stored replacement.
        """
        pass
