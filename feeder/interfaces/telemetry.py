"""
Telemetry Interface - Feeder Sensor State.

Defines the telemetry reading produced by the feeder and the contract
for sources that can fetch it.
"""

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


def as_number(value: Any) -> float | None:
    """Returns value as a finite float, or None for anything else."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def as_flag(value: Any) -> bool | None:
    """Returns value if it is a bool, otherwise None."""
    return value if isinstance(value, bool) else None


@dataclass(frozen=True)
class TelemetryReading:
    """
    A single snapshot of feeder sensor state.

    Attributes:
        food_percent: Hopper fill level, 0-100. None when not reported.
        clogged: Clog sensor flag. None when not reported.
        cleaning_due: Device-side cleaning flag. None when not reported.
        heavy_use_score: Activity score, 0-100. None when not reported.
        observed_at: When the reading was taken (UTC).
    """

    food_percent: float | None
    clogged: bool | None
    cleaning_due: bool | None
    heavy_use_score: float | None
    observed_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def from_payload(
        cls, payload: dict[str, Any], observed_at: datetime | None = None
    ) -> "TelemetryReading":
        """
        Builds a reading from the feeder's JSON object.

        Missing or wrongly typed fields become None so the rules can skip
        that category for this reading.
        """
        return cls(
            food_percent=as_number(payload.get("food_level_percent")),
            clogged=as_flag(payload.get("clogged")),
            cleaning_due=as_flag(payload.get("cleaning_due")),
            heavy_use_score=as_number(payload.get("heavy_use_score")),
            observed_at=observed_at or datetime.now(UTC),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "food_level_percent": self.food_percent,
            "clogged": self.clogged,
            "cleaning_due": self.cleaning_due,
            "heavy_use_score": self.heavy_use_score,
            "observed_at": self.observed_at.isoformat(),
        }


class TelemetrySourceInterface(ABC):
    """
    Interface for feeder telemetry sources.

    Implementations may raise on any fetch failure; the poller treats
    a failed fetch as "no update this cycle".
    """

    @abstractmethod
    def fetch_reading(self) -> TelemetryReading:
        """
        Fetches the latest telemetry reading.

        Returns:
            TelemetryReading: The most recent sensor state.
        """
        pass
