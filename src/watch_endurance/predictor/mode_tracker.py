"""Charge/discharge transition tracking.

Decides, on every battery reading, which estimator is active and whether the
estimators' baselines survive a change of mode.
"""

import logging

from watch_endurance.constants import PERCENT_MAX
from watch_endurance.models.battery import BatteryReading, GlobalState, Mode

logger = logging.getLogger(__name__)


class ModeTracker:
    """Detects mode transitions and keeps estimator baselines honest across them.

    The battery percentage at the instant of a transition is not reliably known,
    so a transition normally drops both baselines and the next percent change
    starts a fresh one. The exception is unplugging a full battery: the level is
    known to be exactly 100%, so both estimators are seeded from there.
    """

    def on_reading(self, state: GlobalState, reading: BatteryReading) -> Mode:
        """Track the mode of a reading.

        Args:
            state: Predictor state, mutated on a transition
            reading: Incoming battery reading

        Returns:
            The mode whose estimator is active for this reading
        """
        if reading.is_charging != state.was_charging:
            if state.was_charging and state.last_percent == PERCENT_MAX:
                state.charge.set_baseline(reading.timestamp, PERCENT_MAX)
                state.discharge.set_baseline(reading.timestamp, PERCENT_MAX)
                logger.debug(
                    "Unplugged at full charge, seeding baselines",
                    extra={"timestamp": reading.timestamp},
                )
            else:
                state.charge.reset_baseline()
                state.discharge.reset_baseline()
                logger.debug(
                    "Mode changed, baselines reset",
                    extra={"is_charging": reading.is_charging, "percent": reading.percent},
                )
            state.was_charging = reading.is_charging

        state.last_percent = reading.percent
        return reading.mode
