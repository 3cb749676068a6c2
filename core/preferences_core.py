"""
Preferences Core - Preference Store and Validation.

Holds the current notification preferences, replaces them as a whole on
update and persists every change. Also validates partial updates coming
from the web layer.
"""

import dataclasses
import logging
import threading
from collections.abc import Callable
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from feeder.interfaces.preferences import (
    Preferences,
    PreferenceStoreInterface,
    coerce_preference,
)
from utils.settings import load_preferences_yaml, save_preferences_yaml

logger = logging.getLogger(__name__)

PREFERENCE_KEYS = tuple(f.name for f in dataclasses.fields(Preferences))


class PreferenceStore(PreferenceStoreInterface):
    """
    In-memory preference store.

    Subclasses override _persist() to write the value somewhere durable.
    """

    def __init__(self, initial: Preferences | None = None):
        self._preferences = initial or Preferences()
        self._lock = threading.Lock()

    @property
    def preferences(self) -> Preferences:
        with self._lock:
            return self._preferences

    def update(self, next_preferences: Preferences) -> None:
        self.update_with(lambda _current: next_preferences)

    def update_with(
        self, change: Callable[[Preferences], Preferences]
    ) -> Preferences:
        # Held across persist so file writes land in update order.
        with self._lock:
            updated = change(self._preferences)
            self._preferences = updated
            self._persist(updated)
        return updated

    def mark_cleaned(self, now: datetime | None = None) -> Preferences:
        """Records a cleaning at `now` and returns the updated preferences."""
        cleaned_at = now or datetime.now(UTC)
        return self.update_with(
            lambda current: dataclasses.replace(current, last_cleaned=cleaned_at)
        )

    def _persist(self, preferences: Preferences) -> None:
        pass


class YamlPreferenceStore(PreferenceStore):
    """
    Preference store backed by a YAML file.

    Loads once at construction (missing or unreadable file -> defaults)
    and writes the full set on every update. Write failures are logged;
    the in-memory value is kept.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        super().__init__(self._load())

    def _load(self) -> Preferences:
        try:
            data = load_preferences_yaml(self.path)
        except OSError as e:
            logger.error(f"Failed to read preferences from {self.path}: {e}")
            return Preferences()
        if data:
            logger.info(f"Loaded notification preferences from {self.path}")
        return Preferences.from_dict(data)

    def _persist(self, preferences: Preferences) -> None:
        try:
            save_preferences_yaml(preferences.to_dict(), self.path)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to save preferences to {self.path}: {e}")


def validate_preference_updates(
    payload: dict[str, Any],
) -> tuple[dict[str, Any], list[str]]:
    """
    Validates a partial preference update.

    Args:
        payload: Mapping of preference name to raw value.

    Returns:
        Tuple of (typed valid values, list of error messages)
    """
    if not isinstance(payload, dict):
        return {}, ["Invalid payload format"]

    valid: dict[str, Any] = {}
    errors: list[str] = []
    for key, value in payload.items():
        if key not in PREFERENCE_KEYS:
            errors.append(f"Unknown preference: {key}")
            continue
        try:
            valid[key] = coerce_preference(key, value)
        except (TypeError, ValueError) as e:
            errors.append(f"{key}: {e}")
    return valid, errors


def apply_preference_updates(
    prefs: Preferences, valid: dict[str, Any]
) -> Preferences:
    """Returns a new Preferences value with the validated updates applied."""
    return dataclasses.replace(prefs, **valid)


def update_preferences(
    store: PreferenceStoreInterface, payload: dict[str, Any]
) -> tuple[bool, list[str]]:
    """
    Validates and applies a partial update to the store.

    Returns:
        Tuple of (success, list of error messages)
    """
    valid, errors = validate_preference_updates(payload)
    if errors:
        return False, errors

    store.update_with(lambda current: apply_preference_updates(current, valid))
    return True, []
