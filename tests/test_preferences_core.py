"""
Tests for preference storage and validation.
"""

import dataclasses
import math
import threading
from datetime import UTC, datetime
from unittest.mock import patch

import pytest
import yaml

from core.preferences_core import (
    PreferenceStore,
    YamlPreferenceStore,
    update_preferences,
    validate_preference_updates,
)
from feeder.interfaces.preferences import (
    MAX_COOLDOWN_HOURS,
    Preferences,
    UsageSensitivity,
    WeatherSensitivity,
)


class TestPreferencesValue:
    """Serialisation of the Preferences value."""

    def test_defaults(self):
        prefs = Preferences()
        assert prefs.low_food_threshold_percent == 20.0
        assert prefs.cleaning_interval_days == 7
        assert prefs.humidity_threshold == 78.0
        assert prefs.heavy_use_cooldown_hours == 12.0
        assert prefs.weather_cooldown_hours == 12.0
        assert prefs.heavy_use_sensitivity is UsageSensitivity.NORMAL
        assert prefs.weather_sensitivity is WeatherSensitivity.NORMAL
        assert prefs.last_cleaned is None

    def test_to_dict_uses_plain_values(self):
        cleaned = datetime(2026, 4, 1, 8, 30, tzinfo=UTC)
        data = Preferences(last_cleaned=cleaned).to_dict()

        assert data["heavy_use_sensitivity"] == "normal"
        assert data["last_cleaned"] == "2026-04-01T08:30:00+00:00"

    def test_from_dict_round_trips(self):
        prefs = Preferences(
            low_food_enabled=False,
            heavy_use_sensitivity=UsageSensitivity.HIGH,
            last_cleaned=datetime(2026, 4, 1, tzinfo=UTC),
        )

        assert Preferences.from_dict(prefs.to_dict()) == prefs

    def test_from_dict_falls_back_per_field(self):
        """Invalid stored values revert to defaults; unknown keys are ignored."""
        prefs = Preferences.from_dict(
            {
                "low_food_threshold_percent": "lots",
                "heavy_use_sensitivity": "extreme",
                "cleaning_interval_days": 3,
                "legacy_key": True,
            }
        )

        assert prefs.low_food_threshold_percent == 20.0
        assert prefs.heavy_use_sensitivity is UsageSensitivity.NORMAL
        assert prefs.cleaning_interval_days == 3

    def test_from_dict_non_mapping_gives_defaults(self):
        assert Preferences.from_dict(None) == Preferences()
        assert Preferences.from_dict(["x"]) == Preferences()


class TestValidation:
    """Partial updates from the API."""

    def test_valid_update(self):
        valid, errors = validate_preference_updates(
            {
                "low_food_threshold_percent": 15,
                "heavy_use_sensitivity": "low",
                "last_cleaned": "2026-04-01T08:00:00Z",
            }
        )

        assert errors == []
        assert valid["low_food_threshold_percent"] == 15.0
        assert valid["heavy_use_sensitivity"] is UsageSensitivity.LOW
        assert valid["last_cleaned"] == datetime(2026, 4, 1, 8, tzinfo=UTC)

    def test_collects_every_error(self):
        _, errors = validate_preference_updates(
            {
                "low_food_enabled": "yes",
                "humidity_threshold": 140,
                "cleaning_interval_days": 0,
                "unknown": 1,
            }
        )

        assert len(errors) == 4
        assert "Unknown preference: unknown" in errors

    def test_booleans_are_not_numbers(self):
        _, errors = validate_preference_updates({"weather_cooldown_hours": True})
        assert errors

    @pytest.mark.parametrize(
        "value", [1e11, 10**400, math.nan, math.inf, -math.inf, MAX_COOLDOWN_HOURS + 1]
    )
    def test_rejects_unusable_cooldowns(self, value):
        valid, errors = validate_preference_updates({"heavy_use_cooldown_hours": value})

        assert valid == {}
        assert len(errors) == 1
        assert errors[0].startswith("heavy_use_cooldown_hours:")

    def test_accepts_longest_cooldown(self):
        valid, errors = validate_preference_updates(
            {"weather_cooldown_hours": MAX_COOLDOWN_HOURS}
        )

        assert errors == []
        assert valid["weather_cooldown_hours"] == MAX_COOLDOWN_HOURS

    @pytest.mark.parametrize(
        "key", ["humidity_threshold", "low_food_threshold_percent", "weather_cooldown_hours"]
    )
    def test_rejects_nan_everywhere(self, key):
        _, errors = validate_preference_updates({key: math.nan})
        assert errors == [f"{key}: must be a finite number"]

    def test_oversized_cooldown_leaves_store_untouched(self):
        store = PreferenceStore()
        before = store.preferences

        success, errors = update_preferences(store, {"heavy_use_cooldown_hours": 1e11})

        assert success is False
        assert errors
        assert store.preferences is before

    def test_rejects_non_dict(self):
        valid, errors = validate_preference_updates(["not", "a", "dict"])
        assert valid == {}
        assert errors == ["Invalid payload format"]


class TestPreferenceStore:
    """In-memory and YAML-backed stores."""

    def test_update_replaces_whole_value(self):
        store = PreferenceStore()
        replacement = Preferences(clogged_enabled=False)

        store.update(replacement)

        assert store.preferences is replacement

    def test_mark_cleaned(self):
        store = PreferenceStore()
        now = datetime(2026, 5, 1, tzinfo=UTC)

        updated = store.mark_cleaned(now)

        assert updated.last_cleaned == now
        assert store.preferences.last_cleaned == now

    def test_concurrent_changes_are_not_lost(self):
        store = PreferenceStore(Preferences(cleaning_interval_days=1))

        def bump():
            for _ in range(50):
                store.update_with(
                    lambda current: dataclasses.replace(
                        current,
                        cleaning_interval_days=current.cleaning_interval_days + 1,
                    )
                )

        threads = [threading.Thread(target=bump) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert store.preferences.cleaning_interval_days == 1 + 8 * 50

    def test_partial_updates_from_two_threads_both_stick(self):
        store = PreferenceStore()
        barrier = threading.Barrier(2)
        results = []

        def post(payload):
            barrier.wait()
            results.append(update_preferences(store, payload))

        threads = [
            threading.Thread(target=post, args=({"humidity_threshold": 90},)),
            threading.Thread(target=post, args=({"low_food_threshold_percent": 35},)),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results == [(True, []), (True, [])]
        assert store.preferences.humidity_threshold == 90.0
        assert store.preferences.low_food_threshold_percent == 35.0

    def test_update_preferences_leaves_store_untouched_on_error(self):
        store = PreferenceStore()
        before = store.preferences

        success, errors = update_preferences(
            store, {"low_food_threshold_percent": 10, "clogged_enabled": "no"}
        )

        assert success is False
        assert errors
        assert store.preferences is before

    def test_yaml_store_missing_file_gives_defaults(self, tmp_path):
        store = YamlPreferenceStore(tmp_path / "prefs.yaml")
        assert store.preferences == Preferences()

    def test_yaml_store_persists_every_update(self, tmp_path):
        path = tmp_path / "nested" / "prefs.yaml"
        store = YamlPreferenceStore(path)

        success, _ = update_preferences(
            store, {"humidity_threshold": 85, "heavy_use_sensitivity": "high"}
        )

        assert success is True
        stored = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert stored["humidity_threshold"] == 85.0
        assert stored["heavy_use_sensitivity"] == "high"

        reloaded = YamlPreferenceStore(path)
        assert reloaded.preferences == store.preferences

    def test_yaml_store_ignores_corrupt_file(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_text("{: not yaml", encoding="utf-8")

        store = YamlPreferenceStore(path)

        assert store.preferences == Preferences()

    def test_yaml_store_keeps_value_when_save_fails(self, tmp_path):
        store = YamlPreferenceStore(tmp_path / "prefs.yaml")
        replacement = Preferences(low_food_enabled=False)

        with patch(
            "core.preferences_core.save_preferences_yaml",
            side_effect=OSError("disk full"),
        ):
            store.update(replacement)

        assert store.preferences is replacement

    def test_yaml_store_ignores_non_finite_values(self, tmp_path):
        path = tmp_path / "prefs.yaml"
        path.write_text(
            "humidity_threshold: .nan\nweather_cooldown_hours: .inf\n", encoding="utf-8"
        )

        store = YamlPreferenceStore(path)

        assert store.preferences.humidity_threshold == 78.0
        assert store.preferences.weather_cooldown_hours == 12.0
