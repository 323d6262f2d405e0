"""Tests for time-left formatting."""

from unittest.mock import patch

import pytest

from watch_endurance.models.battery import (
    BatteryReading,
    DisplayKind,
    DisplaySlot,
    GlobalState,
    Mode,
)
from watch_endurance.predictor.prediction_formatter import (
    PredictionFormatter,
    format_rates,
    remaining_hours,
    select_display_slot,
)

T0 = 1_700_000_000
HOUR = 3600


@pytest.fixture()
def formatter() -> PredictionFormatter:
    """Create a formatter with the default throttle interval."""
    return PredictionFormatter()


class TestFormat:
    """Tests for PredictionFormatter.format."""

    def test_no_baseline_and_no_rate(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test the placeholder flags both missing pieces."""
        text = formatter.format(state.discharge, T0, 0)
        assert text.kind is DisplayKind.NO_BASELINE
        assert text.text == " ?! "

    def test_no_baseline_with_rate(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test the placeholder when only the baseline is missing."""
        state.discharge.hours_per_percent = 1.0
        text = formatter.format(state.discharge, T0, 0)
        assert text.kind is DisplayKind.NO_BASELINE
        assert text.text == " ?  "

    def test_no_rate(self, formatter: PredictionFormatter, state: GlobalState) -> None:
        """Test the placeholder when only the rate is missing."""
        state.discharge.set_baseline(T0, 60)
        text = formatter.format(state.discharge, T0, 0)
        assert text.kind is DisplayKind.NO_RATE
        assert text.text == "  ! "

    def test_placeholders_are_distinct(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test no-baseline and no-rate never render the same."""
        state.discharge.hours_per_percent = 1.0
        no_baseline = formatter.format(state.discharge, T0, 0)
        state.discharge.hours_per_percent = 0
        state.discharge.set_baseline(T0, 60)
        no_rate = formatter.format(state.discharge, T0, 0)
        assert no_baseline != no_rate
        assert no_baseline.text != no_rate.text

    def test_zero_left(self, formatter: PredictionFormatter, state: GlobalState) -> None:
        """Test a baseline at the target level renders the zero value."""
        state.charge.set_baseline(T0, 100)
        state.charge.hours_per_percent = 0.02
        text = formatter.format(state.charge, T0 + HOUR, 100)
        assert text.kind is DisplayKind.ZERO
        assert text.text == " 00 "

    def test_days_and_hours(self, formatter: PredictionFormatter, state: GlobalState) -> None:
        """Test one hour after the baseline, 60 * 0.5 - 1 = 29 hours are left."""
        state.discharge.set_baseline(T0, 60)
        state.discharge.hours_per_percent = 0.5
        text = formatter.format(state.discharge, T0 + HOUR, 0)
        assert text.kind is DisplayKind.DAYS_HOURS
        assert text.text == "1+05"

    def test_exactly_one_hour_uses_days_hours(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test exactly one hour left is still shown in hours."""
        state.discharge.set_baseline(T0, 60)
        state.discharge.hours_per_percent = 0.5
        assert remaining_hours(state.discharge, T0 + 29 * HOUR, 0) == 1.0
        text = formatter.format(state.discharge, T0 + 29 * HOUR, 0)
        assert text.kind is DisplayKind.DAYS_HOURS
        assert text.text == "0+01"

    def test_just_under_one_hour_uses_minutes(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test just under one hour left switches to minutes."""
        state.discharge.set_baseline(T0, 60)
        state.discharge.hours_per_percent = 0.5
        text = formatter.format(state.discharge, T0 + 29 * HOUR + 36, 0)
        assert text.kind is DisplayKind.MINUTES
        assert text.text == "0:59"

    def test_charging_minutes(self, formatter: PredictionFormatter, state: GlobalState) -> None:
        """Test charging counts up to 100%."""
        state.charge.set_baseline(T0, 90)
        state.charge.hours_per_percent = 0.02
        text = formatter.format(state.charge, T0, 100)
        assert text.kind is DisplayKind.MINUTES
        assert text.text == "0:12"

    def test_hours_round_up_into_next_day(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test 47.6 hours rounds to 2 days and 0 hours."""
        state.discharge.set_baseline(T0, 48)
        state.discharge.hours_per_percent = 1.0
        text = formatter.format(state.discharge, T0 + 1440, 0)
        assert text.text == "2+00"

    def test_overdue(self, formatter: PredictionFormatter, state: GlobalState) -> None:
        """Test a prediction that has been exceeded renders the overdue placeholder."""
        state.discharge.set_baseline(T0, 60)
        state.discharge.hours_per_percent = 0.5
        text = formatter.format(state.discharge, T0 + 31 * HOUR, 0)
        assert text.kind is DisplayKind.OVERDUE
        assert text.text == " ?? "

    def test_fresh_value_per_call(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test each call returns its own value."""
        state.discharge.set_baseline(T0, 60)
        state.discharge.hours_per_percent = 0.5
        first = formatter.format(state.discharge, T0, 0)
        second = formatter.format(state.discharge, T0 + 29 * HOUR, 0)
        assert first.text == "1+06"
        assert second.text == "0+01"


class TestRender:
    """Tests for the throttled PredictionFormatter.render."""

    def test_hour_resolution_is_throttled(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test recomputation is skipped within the interval while hours are shown."""
        state.discharge.set_baseline(T0, 80)
        state.discharge.hours_per_percent = 1.0

        first = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 60)
        cached = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 600)
        refreshed = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 60 + 1200)

        assert first.text == "3+08"
        assert cached is first
        assert refreshed is not first

    def test_changed_inputs_force_recompute(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test a new baseline is shown immediately despite the throttle."""
        state.discharge.set_baseline(T0, 80)
        state.discharge.hours_per_percent = 1.0
        first = formatter.render(state.discharge, Mode.DISCHARGING, T0)

        state.discharge.set_baseline(T0 + 700, 79)
        second = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 700)

        assert first.text == "3+08"
        assert second.text == "3+07"

    def test_mode_change_forces_recompute(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test switching the active mode bypasses the throttle."""
        state.discharge.set_baseline(T0, 80)
        state.discharge.hours_per_percent = 1.0
        formatter.render(state.discharge, Mode.DISCHARGING, T0)

        text = formatter.render(state.charge, Mode.CHARGING, T0 + 60)

        assert text.kind is DisplayKind.NO_BASELINE

    def test_minute_resolution_is_not_throttled(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test every call recomputes in the last hour."""
        state.discharge.set_baseline(T0, 1)
        state.discharge.hours_per_percent = 0.5

        first = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 60)
        second = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 120)

        assert first.text == "0:29"
        assert second.text == "0:28"

    def test_remaining_time_computed_once_per_render(
        self, formatter: PredictionFormatter, state: GlobalState
    ) -> None:
        """Test the text and the throttle interval share one remaining-time value."""
        state.discharge.set_baseline(T0, 80)
        state.discharge.hours_per_percent = 1.0

        with patch(
            "watch_endurance.predictor.prediction_formatter.remaining_hours",
            wraps=remaining_hours,
        ) as mock_remaining:
            text = formatter.render(state.discharge, Mode.DISCHARGING, T0 + 60)

        mock_remaining.assert_called_once_with(state.discharge, T0 + 60, 0)
        assert text.text == "3+08"

    def test_zero_interval_never_caches(self, state: GlobalState) -> None:
        """Test a zero throttle interval recomputes every call."""
        formatter = PredictionFormatter(throttle_interval_seconds=0)
        state.discharge.set_baseline(T0, 80)
        state.discharge.hours_per_percent = 1.0

        first = formatter.render(state.discharge, Mode.DISCHARGING, T0)
        second = formatter.render(state.discharge, Mode.DISCHARGING, T0)

        assert first == second
        assert first is not second


class TestDisplayHelpers:
    """Tests for display slot routing and the rate summary."""

    @pytest.mark.parametrize(
        ("percent", "is_charging", "slot"),
        [
            (30, True, DisplaySlot.CHARGE),
            (100, True, DisplaySlot.CHARGE),
            (49, False, DisplaySlot.SHORT),
            (50, False, DisplaySlot.LONG),
            (90, False, DisplaySlot.LONG),
        ],
    )
    def test_select_display_slot(self, percent: int, is_charging: bool, slot: DisplaySlot) -> None:
        """Test the prediction is routed to the right slot."""
        reading = BatteryReading(percent=percent, is_charging=is_charging, timestamp=T0)
        assert select_display_slot(reading) is slot

    def test_select_display_slot_custom_threshold(self) -> None:
        """Test the short slot threshold is configurable."""
        reading = BatteryReading(percent=25, is_charging=False, timestamp=T0)
        assert select_display_slot(reading, short_display_threshold=20) is DisplaySlot.LONG

    def test_format_rates(self, state: GlobalState) -> None:
        """Test learned speeds are shown as percent per hour."""
        state.charge.hours_per_percent = 0.03125
        state.discharge.hours_per_percent = 2.0
        assert format_rates(state) == "+32.00-0.50"

    def test_format_rates_unset(self, state: GlobalState) -> None:
        """Test unset rates show as zero speed."""
        assert format_rates(state) == "+0.00-0.00"

    def test_remaining_hours_unset(self, state: GlobalState) -> None:
        """Test no estimate is available without a baseline and rate."""
        assert remaining_hours(state.discharge, T0, 0) is None
