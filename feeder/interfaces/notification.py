"""
Notification Interface - Maintenance Alerts.

Defines the alert event emitted by the maintenance rules and the
contract for forwarding alerts to a notification channel.
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class AlertCategory(str, Enum):
    LOW_FOOD = "lowFood"
    CLOGGED = "clogged"
    CLEANING_DUE = "cleaningDue"
    WEATHER_BASED = "weatherBased"
    HEAVY_USE = "heavyUse"

    @property
    def title(self) -> str:
        return _TITLES[self]


_TITLES = {
    AlertCategory.LOW_FOOD: "Low food",
    AlertCategory.CLOGGED: "Clogged feeder",
    AlertCategory.CLEANING_DUE: "Cleaning due",
    AlertCategory.WEATHER_BASED: "Weather cleaning",
    AlertCategory.HEAVY_USE: "Heavy use",
}


@dataclass(frozen=True)
class AlertEvent:
    """
    A user-facing maintenance alert.

    Attributes:
        id: Random UUID string.
        category: Which rule produced the alert.
        message: Text shown to the user.
        timestamp: When the rule fired (UTC).
        metadata: Extra string values describing the trigger.
    """

    id: str
    category: AlertCategory
    message: str
    timestamp: datetime
    metadata: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        category: AlertCategory,
        message: str,
        timestamp: datetime | None = None,
        metadata: dict[str, str] | None = None,
    ) -> "AlertEvent":
        """Factory method assigning a fresh id and defaulting the timestamp to now."""
        return cls(
            id=str(uuid.uuid4()),
            category=category,
            message=message,
            timestamp=timestamp or datetime.now(UTC),
            metadata=dict(metadata or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "category": self.category.value,
            "title": self.category.title,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "metadata": dict(self.metadata),
        }


class AlertDispatchInterface(ABC):
    """
    Interface for alert delivery.

    Implementations should handle:
    - Formatting an alert for the channel
    - Reporting failure instead of raising
    """

    @abstractmethod
    def dispatch(self, event: AlertEvent) -> bool:
        """
        Delivers a single alert.

        Args:
            event: The alert to deliver.

        Returns:
            True if the alert was delivered.
        """
        pass

    @property
    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Checks if the channel is configured and enabled.

        Returns:
            True if alerts should be delivered.
        """
        pass
