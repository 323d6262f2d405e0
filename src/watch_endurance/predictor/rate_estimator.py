"""Online hours-per-percent estimation with outlier rejection.

Each mode keeps a smoothed estimate of how many hours it takes to move the charge
level by one percentage point. Samples that point the wrong way, or whose rate
falls outside the mode's plausibility window, never reach the estimate.
"""

import logging

from watch_endurance.constants import SECONDS_PER_HOUR, SMOOTHING_WEIGHT
from watch_endurance.models.battery import EstimatorState, Mode

logger = logging.getLogger(__name__)


class RateEstimator:
    """Updates an estimator state from successive battery readings.

    Attributes:
        smoothing_weight: Weight of a new rate sample in the moving average
    """

    def __init__(self, smoothing_weight: float = SMOOTHING_WEIGHT) -> None:
        """Initialize the rate estimator.

        Args:
            smoothing_weight: Weight of a new rate sample, in (0, 1]
        """
        self.smoothing_weight = smoothing_weight

    def update(
        self, state: EstimatorState, mode: Mode, current_percent: int, current_time: int
    ) -> bool:
        """Learn from a reading and move the baseline to it.

        Readings at the baseline's percent carry no time signal and are ignored.
        Any percent change becomes the new baseline, even when its rate sample is
        rejected, so consecutive noisy readings do not compound.

        Args:
            state: Estimator state of the active mode, mutated in place
            mode: Mode the estimator belongs to
            current_percent: Current charge percentage
            current_time: Current time in seconds

        Returns:
            True if the learned rate changed
        """
        percent_delta = current_percent - state.baseline_percent
        if percent_delta == 0:
            return False

        # Same instant as the baseline; keep the reference as is.
        if state.has_baseline and current_time == state.baseline_time:
            return False

        changed = False
        if self._direction_matches(mode, percent_delta):
            if state.has_baseline:
                changed = self._learn(state, mode, percent_delta, current_time)
        else:
            logger.debug(
                "Ignoring reading against the battery direction",
                extra={"mode": mode.value, "percent_delta": percent_delta},
            )

        state.set_baseline(current_time, current_percent)
        return changed

    def _learn(
        self, state: EstimatorState, mode: Mode, percent_delta: int, current_time: int
    ) -> bool:
        """Fold one rate sample into the estimate if it is plausible."""
        hours_delta = (current_time - state.baseline_time) / SECONDS_PER_HOUR
        step_hours_per_percent = hours_delta / abs(percent_delta)

        # Samples taken astride a mode switch, or spurious 0% readings, land here.
        if not state.rate_in_bounds(step_hours_per_percent):
            logger.debug(
                "Discarding implausible rate sample",
                extra={"mode": mode.value, "hours_per_percent": step_hours_per_percent},
            )
            return False

        if state.rate_in_bounds(state.hours_per_percent):
            state.hours_per_percent = (
                (1 - self.smoothing_weight) * state.hours_per_percent
                + self.smoothing_weight * step_hours_per_percent
            )
        else:
            state.hours_per_percent = step_hours_per_percent

        logger.debug(
            "Updated rate estimate",
            extra={
                "mode": mode.value,
                "sample": step_hours_per_percent,
                "hours_per_percent": state.hours_per_percent,
            },
        )
        return True

    @staticmethod
    def _direction_matches(mode: Mode, percent_delta: int) -> bool:
        """Whether a percent change agrees with the mode's direction."""
        match mode:
            case Mode.CHARGING:
                return percent_delta > 0
            case _:
                return percent_delta < 0
