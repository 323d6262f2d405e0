"""Time-left formatting for the watch face.

Turns an estimator's learned rate and baseline into the short text the face
shows: days and hours while there is plenty of time left, minutes in the last
hour, or a placeholder when the estimate cannot be trusted.
"""

import logging

from watch_endurance.constants import (
    HOURS_PER_DAY,
    MINUTES_PER_HOUR,
    NO_BASELINE_GLYPH,
    NO_RATE_GLYPH,
    OVERDUE_TEXT,
    SECONDS_PER_HOUR,
    SHORT_DISPLAY_THRESHOLD,
    THROTTLE_INTERVAL_SECONDS,
    ZERO_TEXT,
)
from watch_endurance.models.battery import (
    BatteryReading,
    DisplayKind,
    DisplaySlot,
    DisplayText,
    EstimatorState,
    GlobalState,
    Mode,
)

logger = logging.getLogger(__name__)


class PredictionFormatter:
    """Formats the remaining time to a mode's target level.

    Recomputation is throttled once only hours are on display: while more than
    an hour (plus one throttle interval) is left, the text cannot change faster
    than the interval, so intermediate calls return the previous value. Any
    change of mode, baseline or rate forces a fresh computation.

    Attributes:
        throttle_interval_seconds: Minimum seconds between recomputations in hour mode
    """

    def __init__(self, throttle_interval_seconds: int = THROTTLE_INTERVAL_SECONDS) -> None:
        """Initialize the formatter.

        Args:
            throttle_interval_seconds: Minimum seconds between recomputations while
                the remaining time is shown in hours
        """
        self.throttle_interval_seconds = throttle_interval_seconds
        self._update_interval = 0
        self._last_format_time: int | None = None
        self._last_inputs: tuple[Mode, int, int, float] | None = None
        self._last_text: DisplayText | None = None

    def render(self, state: EstimatorState, mode: Mode, current_time: int) -> DisplayText:
        """Format the active estimator, reusing the last text when throttled.

        Args:
            state: Estimator state of the active mode
            mode: Active mode, selecting the target level
            current_time: Current time in seconds

        Returns:
            Text for the face
        """
        inputs = (mode, state.baseline_time, state.baseline_percent, state.hours_per_percent)
        if (
            self._last_text is not None
            and self._last_format_time is not None
            and inputs == self._last_inputs
            and current_time - self._last_format_time < self._update_interval
        ):
            return self._last_text

        remaining = remaining_hours(state, current_time, mode.target_percent)
        text = self._text_for(state, remaining, mode.target_percent)

        hour_resolution_limit = 1 + self.throttle_interval_seconds / SECONDS_PER_HOUR
        if remaining is not None and remaining > hour_resolution_limit:
            self._update_interval = self.throttle_interval_seconds
        else:
            self._update_interval = 0

        self._last_format_time = current_time
        self._last_inputs = inputs
        self._last_text = text
        return text

    def format(self, state: EstimatorState, current_time: int, target_percent: int) -> DisplayText:
        """Format the time left until the target level is reached.

        Args:
            state: Estimator state to predict from
            current_time: Current time in seconds
            target_percent: Level the prediction counts down to

        Returns:
            A numeric ``D+HH`` or ``0:MM`` text, the zero text, or a placeholder
        """
        remaining = remaining_hours(state, current_time, target_percent)
        return self._text_for(state, remaining, target_percent)

    @staticmethod
    def _text_for(
        state: EstimatorState, remaining: float | None, target_percent: int
    ) -> DisplayText:
        if remaining is None:
            no_time = NO_BASELINE_GLYPH if not state.has_baseline else " "
            no_rate = NO_RATE_GLYPH if not state.has_rate else " "
            kind = DisplayKind.NO_BASELINE if not state.has_baseline else DisplayKind.NO_RATE
            return DisplayText(kind, f" {no_time}{no_rate} ")

        if target_percent == state.baseline_percent:
            return DisplayText(DisplayKind.ZERO, ZERO_TEXT)

        if remaining < 0:
            return DisplayText(DisplayKind.OVERDUE, OVERDUE_TEXT)

        if remaining < 1:
            minutes = int(remaining * MINUTES_PER_HOUR + 0.5)
            return DisplayText(DisplayKind.MINUTES, f"0:{minutes:02d}")

        days = int(remaining / HOURS_PER_DAY)
        hours = int(remaining - days * HOURS_PER_DAY + 0.5)
        if hours >= HOURS_PER_DAY:
            hours -= HOURS_PER_DAY
            days += 1
        return DisplayText(DisplayKind.DAYS_HOURS, f"{days:d}+{hours:02d}")


def remaining_hours(state: EstimatorState, current_time: int, target_percent: int) -> float | None:
    """Hours left until the target level, counted from the baseline.

    Args:
        state: Estimator state to predict from
        current_time: Current time in seconds
        target_percent: Level the prediction counts down to

    Returns:
        Remaining hours, negative once the prediction is exceeded, or None
        without a baseline and rate
    """
    if not state.has_baseline or not state.has_rate:
        return None
    difference_percent = abs(target_percent - state.baseline_percent)
    elapsed_hours = (current_time - state.baseline_time) / SECONDS_PER_HOUR
    return difference_percent * state.hours_per_percent - elapsed_hours


def select_display_slot(
    reading: BatteryReading, short_display_threshold: int = SHORT_DISPLAY_THRESHOLD
) -> DisplaySlot:
    """Pick the face slot that shows the prediction for a reading.

    Args:
        reading: Current battery reading
        short_display_threshold: Percent below which the short slot is used

    Returns:
        CHARGE while charging, SHORT when low, LONG otherwise
    """
    if reading.is_charging:
        return DisplaySlot.CHARGE
    if reading.percent < short_display_threshold:
        return DisplaySlot.SHORT
    return DisplaySlot.LONG


def format_rates(state: GlobalState) -> str:
    """Summarize both learned speeds as percent per hour, e.g. ``+25.00-0.50``."""

    def percent_per_hour(estimator: EstimatorState) -> str:
        speed = 1.0 / estimator.hours_per_percent if estimator.has_rate else 0.0
        whole = int(speed)
        return f"{whole}.{int((speed - whole) * 100):02d}"

    return f"+{percent_per_hour(state.charge)}-{percent_per_hour(state.discharge)}"
