"""
Maintenance Core - Feeder Alert Rules.

Pure functions that turn a telemetry reading or a weather snapshot,
the user's preferences and the previous rule state into alert events
and the next rule state.

Per-category behaviour:
- low food:     edge-triggered, re-armed once food rises above the threshold
- clogged:      level-triggered, fires on every reading while clogged
- cleaning due: fires whenever the cleaning interval has elapsed
- heavy use:    cooldown-gated (heavy_use_cooldown_hours)
- weather:      cooldown-gated (weather_cooldown_hours), one alert per call

Nothing here performs I/O or raises; a value that cannot be evaluated
skips its category for the current cycle.
"""

import dataclasses
import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta

from feeder.interfaces.notification import AlertCategory, AlertEvent
from feeder.interfaces.preferences import Preferences, UsageSensitivity
from feeder.interfaces.telemetry import TelemetryReading, as_number
from feeder.interfaces.weather import WeatherSnapshot

logger = logging.getLogger(__name__)

HEAVY_USE_THRESHOLDS = {
    UsageSensitivity.LOW: 80.0,
    UsageSensitivity.NORMAL: 65.0,
    UsageSensitivity.HIGH: 50.0,
}


@dataclass(frozen=True)
class RuleState:
    """
    Tracking carried between evaluations.

    Attributes:
        low_food_active: True while a low-food alert has fired and the
            level has not yet risen back above the threshold.
        last_heavy_use_fired: When the last heavy-use alert fired.
        last_weather_fired: When the last weather alert fired.
    """

    low_food_active: bool = False
    last_heavy_use_fired: datetime | None = None
    last_weather_fired: datetime | None = None


def heavy_use_threshold(sensitivity: UsageSensitivity) -> float:
    """Returns the heavy-use score that triggers an alert for a sensitivity."""
    return HEAVY_USE_THRESHOLDS.get(
        sensitivity, HEAVY_USE_THRESHOLDS[UsageSensitivity.NORMAL]
    )


def cooldown_elapsed(last_fired: datetime | None, hours: float, now: datetime) -> bool:
    """True if nothing fired yet or at least `hours` have passed since last_fired."""
    if last_fired is None:
        return True
    try:
        return now - last_fired >= timedelta(hours=hours)
    except (OverflowError, ValueError):
        # Unrepresentable windows never elapse.
        return False


def days_since_cleaning(prefs: Preferences, now: datetime) -> int:
    """
    Whole days since the feeder was last cleaned.

    Never-cleaned feeders count as one day past the interval so the
    reminder fires immediately.
    """
    last = prefs.last_cleaned
    if last is None:
        return prefs.cleaning_interval_days + 1
    # Naive timestamps are treated as UTC.
    if last.tzinfo is None:
        last = last.replace(tzinfo=UTC)
    if now.tzinfo is None:
        now = now.replace(tzinfo=UTC)
    return (now - last).days


def evaluate_cleaning(prefs: Preferences, now: datetime | None = None) -> list[AlertEvent]:
    """
    Evaluates the cleaning reminder on its own.

    Returns:
        A single cleaning-due event when the interval has elapsed, else [].
    """
    now = now or datetime.now(UTC)
    if not prefs.cleaning_reminder_enabled:
        return []

    days = days_since_cleaning(prefs, now)
    if days < prefs.cleaning_interval_days:
        return []

    return [
        AlertEvent.create(
            AlertCategory.CLEANING_DUE,
            f"Cleaning due. It's been {days} day(s) since last cleaning.",
            timestamp=now,
            metadata={
                "days_since": str(days),
                "interval_days": str(prefs.cleaning_interval_days),
            },
        )
    ]


def _evaluate_low_food(
    reading: TelemetryReading, prefs: Preferences, state: RuleState, now: datetime
) -> tuple[list[AlertEvent], RuleState]:
    food = as_number(reading.food_percent)
    if food is None:
        return [], state

    if prefs.low_food_enabled and food <= prefs.low_food_threshold_percent:
        if state.low_food_active:
            return [], state
        event = AlertEvent.create(
            AlertCategory.LOW_FOOD,
            f"Food level at {int(food)}%. Time to refill.",
            timestamp=now,
            metadata={
                "food_percent": f"{food:g}",
                "threshold_percent": f"{prefs.low_food_threshold_percent:g}",
            },
        )
        return [event], dataclasses.replace(state, low_food_active=True)

    return [], dataclasses.replace(state, low_food_active=False)


def _evaluate_clogged(
    reading: TelemetryReading, prefs: Preferences, now: datetime
) -> list[AlertEvent]:
    # Fires on every reading while the clog persists.
    if not prefs.clogged_enabled or reading.clogged is not True:
        return []
    return [
        AlertEvent.create(
            AlertCategory.CLOGGED,
            "Possible feeder clog detected. Inspect the chute.",
            timestamp=now,
        )
    ]


def _evaluate_heavy_use(
    reading: TelemetryReading, prefs: Preferences, state: RuleState, now: datetime
) -> tuple[list[AlertEvent], RuleState]:
    score = as_number(reading.heavy_use_score)
    if not prefs.heavy_use_enabled or score is None:
        return [], state

    threshold = heavy_use_threshold(prefs.heavy_use_sensitivity)
    if score < threshold:
        return [], state
    if not cooldown_elapsed(
        state.last_heavy_use_fired, prefs.heavy_use_cooldown_hours, now
    ):
        return [], state

    event = AlertEvent.create(
        AlertCategory.HEAVY_USE,
        f"Heavy feeder use detected (score {int(score)}). Check food and perches.",
        timestamp=now,
        metadata={
            "score": f"{score:g}",
            "threshold": f"{threshold:g}",
            "sensitivity": prefs.heavy_use_sensitivity.value,
        },
    )
    return [event], dataclasses.replace(state, last_heavy_use_fired=now)


def evaluate_telemetry(
    reading: TelemetryReading,
    prefs: Preferences,
    state: RuleState,
    now: datetime | None = None,
) -> tuple[list[AlertEvent], RuleState]:
    """
    Evaluates all telemetry-driven rules for one reading.

    Args:
        reading: The latest telemetry reading.
        prefs: Preference snapshot for this cycle.
        state: Rule state returned by the previous evaluation.
        now: Evaluation time, defaults to the current UTC time.

    Returns:
        Tuple of (events in rule order, new rule state).
    """
    now = now or datetime.now(UTC)
    events: list[AlertEvent] = []

    low_food_events, state = _evaluate_low_food(reading, prefs, state, now)
    events.extend(low_food_events)
    events.extend(_evaluate_clogged(reading, prefs, now))
    events.extend(evaluate_cleaning(prefs, now))
    heavy_use_events, state = _evaluate_heavy_use(reading, prefs, state, now)
    events.extend(heavy_use_events)

    if events:
        logger.debug(
            "Telemetry produced %d alert(s): %s",
            len(events),
            ", ".join(e.category.value for e in events),
        )
    return events, state


def evaluate_weather(
    snapshot: WeatherSnapshot,
    prefs: Preferences,
    state: RuleState,
    now: datetime | None = None,
) -> tuple[list[AlertEvent], RuleState]:
    """
    Evaluates the weather-based cleaning rule for one snapshot.

    Precipitation takes priority over humidity; at most one event is
    emitted per call and both share the weather cooldown.

    Returns:
        Tuple of (zero or one event, new rule state).
    """
    now = now or datetime.now(UTC)
    if not prefs.weather_based_cleaning_enabled:
        return [], state

    if snapshot.has_precipitation:
        message = (
            f"Weather event detected ({snapshot.condition}). "
            "Consider cleaning the feeder."
        )
        metadata = {"reason": "precipitation", "condition": snapshot.condition}
    else:
        humidity = as_number(snapshot.humidity)
        if humidity is None or humidity < prefs.humidity_threshold:
            return [], state
        message = f"Humidity is {int(humidity)}%. Cleaning recommended."
        metadata = {
            "reason": "humidity",
            "humidity": f"{humidity:g}",
            "threshold": f"{prefs.humidity_threshold:g}",
        }

    if not cooldown_elapsed(state.last_weather_fired, prefs.weather_cooldown_hours, now):
        return [], state

    event = AlertEvent.create(
        AlertCategory.WEATHER_BASED, message, timestamp=now, metadata=metadata
    )
    return [event], dataclasses.replace(state, last_weather_fired=now)
