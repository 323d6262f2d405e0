"""Battery models for the endurance predictor.

Defines the transient battery reading, the persistent per-mode estimator state,
the device-wide predictor state and the display value handed to the face.
"""

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from watch_endurance.constants import PERCENT_MAX, PERCENT_MIN, UNSET
from watch_endurance.models.config import PredictorConfig


class Mode(str, Enum):
    """Which way the battery is going."""

    CHARGING = "charging"
    DISCHARGING = "discharging"

    @classmethod
    def from_charging(cls, is_charging: bool) -> "Mode":
        """Select the mode for a charging flag.

        Args:
            is_charging: Whether the battery is charging

        Returns:
            Mode enum value
        """
        return cls.CHARGING if is_charging else cls.DISCHARGING

    @property
    def target_percent(self) -> int:
        """Level the prediction for this mode counts down to."""
        return PERCENT_MAX if self is Mode.CHARGING else PERCENT_MIN


class BatteryReading(BaseModel):
    """A single battery sample delivered by the host."""

    percent: int
    is_charging: bool
    timestamp: int  # Seconds

    @field_validator("percent")
    @classmethod
    def clamp_percent(cls, v: int) -> int:
        """Clamp the charge percentage into 0..100.

        Args:
            v: Reported charge percentage.

        Returns:
            The percentage limited to the valid range.
        """
        return max(PERCENT_MIN, min(PERCENT_MAX, v))

    @property
    def mode(self) -> Mode:
        """Mode this reading belongs to."""
        return Mode.from_charging(self.is_charging)


class EstimatorState(BaseModel):
    """Learned rate and baseline of one mode's estimator.

    A value of 0 in ``hours_per_percent`` or ``baseline_time`` means unset.
    ``baseline_percent`` only carries meaning while a baseline time is set.
    """

    minimal_hours_per_percent: float
    maximal_hours_per_percent: float
    hours_per_percent: float = Field(default=UNSET, ge=0)
    baseline_time: int = Field(default=UNSET, ge=0)
    baseline_percent: int = Field(default=PERCENT_MIN, ge=PERCENT_MIN, le=PERCENT_MAX)

    @property
    def has_baseline(self) -> bool:
        """Whether a reference measurement is held."""
        return self.baseline_time != UNSET

    @property
    def has_rate(self) -> bool:
        """Whether a rate has been learned."""
        return self.hours_per_percent != UNSET

    def rate_in_bounds(self, hours_per_percent: float) -> bool:
        """Check a rate lies strictly inside the plausibility window.

        Args:
            hours_per_percent: Candidate rate

        Returns:
            True if the rate is plausible for this mode
        """
        return self.minimal_hours_per_percent < hours_per_percent < self.maximal_hours_per_percent

    def set_baseline(self, baseline_time: int, baseline_percent: int) -> None:
        """Make a measurement the new reference point."""
        self.baseline_time = baseline_time
        self.baseline_percent = baseline_percent

    def reset_baseline(self) -> None:
        """Forget the reference point; the next percent change starts a new one."""
        self.baseline_time = UNSET


class GlobalState(BaseModel):
    """Predictor state for the whole device, one estimator per mode.

    ``last_percent`` is the level of the most recent reading. It is not
    persisted; after a restart it is seeded from the level known at start.
    """

    was_charging: bool = False
    charge: EstimatorState
    discharge: EstimatorState
    last_percent: int | None = Field(default=None, ge=PERCENT_MIN, le=PERCENT_MAX)

    @classmethod
    def initial(cls, config: PredictorConfig, was_charging: bool = False) -> "GlobalState":
        """Create a state with nothing learned and the configured bounds.

        Args:
            config: Predictor configuration holding the plausibility bounds
            was_charging: Mode to assume for the previous sample

        Returns:
            A fresh GlobalState
        """
        return cls(
            was_charging=was_charging,
            charge=EstimatorState(
                minimal_hours_per_percent=config.charge_min_hours_per_percent,
                maximal_hours_per_percent=config.charge_max_hours_per_percent,
            ),
            discharge=EstimatorState(
                minimal_hours_per_percent=config.discharge_min_hours_per_percent,
                maximal_hours_per_percent=config.discharge_max_hours_per_percent,
            ),
        )

    def estimator(self, mode: Mode) -> EstimatorState:
        """Select the estimator for a mode."""
        return self.charge if mode is Mode.CHARGING else self.discharge


class DisplayKind(str, Enum):
    """Distinguishable states of the rendered prediction."""

    DAYS_HOURS = "days_hours"
    MINUTES = "minutes"
    ZERO = "zero"
    NO_BASELINE = "no_baseline"
    NO_RATE = "no_rate"
    OVERDUE = "overdue"

    @property
    def is_numeric(self) -> bool:
        """Whether the text carries an actual time estimate."""
        return self in (DisplayKind.DAYS_HOURS, DisplayKind.MINUTES, DisplayKind.ZERO)


class DisplaySlot(str, Enum):
    """Text slot on the face that shows the prediction."""

    LONG = "long"  # Discharging with plenty left
    SHORT = "short"  # Discharging below the short display threshold
    CHARGE = "charge"  # Charging


@dataclass(frozen=True)
class DisplayText:
    """Prediction text for the face, a fresh value per format call."""

    kind: DisplayKind
    text: str

    def __str__(self) -> str:
        return self.text
