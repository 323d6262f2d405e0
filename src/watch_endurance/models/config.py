"""Configuration models for the watch face endurance predictor.

Defines Pydantic models for application configuration including predictor tuning,
state persistence and logging.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from watch_endurance.constants import (
    CHARGE_MAX_HOURS_PER_PERCENT,
    CHARGE_MIN_HOURS_PER_PERCENT,
    DISCHARGE_MAX_HOURS_PER_PERCENT,
    DISCHARGE_MIN_HOURS_PER_PERCENT,
    FRESHNESS_WINDOW_SECONDS,
    PERCENT_MAX,
    SHORT_DISPLAY_THRESHOLD,
    SMOOTHING_WEIGHT,
    THROTTLE_INTERVAL_SECONDS,
)


def _normalize_path(path: str | Path) -> Path:
    """Convert a string path to a Path object.

    Internal utility function to avoid circular imports with path_resolver.

    Args:
        path: String or Path object

    Returns:
        A Path object.
    """
    return Path(path) if isinstance(path, str) else path


class PredictorConfig(BaseModel):
    """Rate estimator and formatter tuning.

    The defaults are the empirically chosen values the watch face shipped with.
    """

    charge_min_hours_per_percent: float = CHARGE_MIN_HOURS_PER_PERCENT
    charge_max_hours_per_percent: float = CHARGE_MAX_HOURS_PER_PERCENT
    discharge_min_hours_per_percent: float = DISCHARGE_MIN_HOURS_PER_PERCENT
    discharge_max_hours_per_percent: float = DISCHARGE_MAX_HOURS_PER_PERCENT
    smoothing_weight: float = SMOOTHING_WEIGHT  # Weight of the newest rate sample
    freshness_window_seconds: int = FRESHNESS_WINDOW_SECONDS
    throttle_interval_seconds: int = THROTTLE_INTERVAL_SECONDS
    short_display_threshold: int = SHORT_DISPLAY_THRESHOLD

    @field_validator(
        "charge_min_hours_per_percent",
        "charge_max_hours_per_percent",
        "discharge_min_hours_per_percent",
        "discharge_max_hours_per_percent",
    )
    @classmethod
    def validate_bound(cls, v: float) -> float:
        """Validate a plausibility bound is not negative.

        Args:
            v: The bound in hours per percent.

        Returns:
            The validated bound.

        Raises:
            ValueError: If the bound is negative.
        """
        if v < 0:
            raise ValueError("Hours per percent bounds cannot be negative")
        return v

    @field_validator("smoothing_weight")
    @classmethod
    def validate_smoothing_weight(cls, v: float) -> float:
        """Validate the smoothing weight lies in (0, 1].

        Args:
            v: The weight of the newest sample.

        Returns:
            The validated weight.

        Raises:
            ValueError: If the weight is outside (0, 1].
        """
        if not 0 < v <= 1:
            raise ValueError("Smoothing weight must be greater than 0 and at most 1")
        return v

    @field_validator("freshness_window_seconds", "throttle_interval_seconds")
    @classmethod
    def validate_window(cls, v: int) -> int:
        """Validate a time window is not negative.

        Args:
            v: The window in seconds.

        Returns:
            The validated window.

        Raises:
            ValueError: If the window is negative.
        """
        if v < 0:
            raise ValueError("Time windows cannot be negative")
        return v

    @field_validator("short_display_threshold")
    @classmethod
    def validate_short_display_threshold(cls, v: int) -> int:
        """Validate the short display threshold is a percentage.

        Args:
            v: The threshold percentage.

        Returns:
            The validated threshold.

        Raises:
            ValueError: If the threshold is outside 0..100.
        """
        if v < 0 or v > PERCENT_MAX:
            raise ValueError("Short display threshold must be between 0 and 100")
        return v

    @model_validator(mode="after")
    def validate_bound_order(self) -> "PredictorConfig":
        """Validate each mode's minimum is below its maximum.

        Returns:
            The validated configuration.

        Raises:
            ValueError: If a minimum is not strictly below its maximum.
        """
        if self.charge_min_hours_per_percent >= self.charge_max_hours_per_percent:
            raise ValueError("Charge minimum hours per percent must be below the maximum")
        if self.discharge_min_hours_per_percent >= self.discharge_max_hours_per_percent:
            raise ValueError("Discharge minimum hours per percent must be below the maximum")
        return self


class PersistenceConfig(BaseModel):
    """Predictor state persistence configuration."""

    state_file: str = ""  # Empty string means use the default from path_resolver


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None
    format: str = "json"
    max_size_mb: int = 5
    backup_count: int = 3


class AppConfig(BaseModel):
    """Main application configuration."""

    predictor: PredictorConfig = Field(default_factory=PredictorConfig)
    persistence: PersistenceConfig = Field(default_factory=PersistenceConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    debug: bool = False

    @classmethod
    def from_yaml(cls, config_path: str | Path) -> "AppConfig":
        """Load configuration from YAML file.

        An empty file yields the default configuration.

        Args:
            config_path: Path to the YAML configuration file. Can be a string path
                or a Path object.

        Returns:
            An initialized AppConfig object with values from the YAML file.

        Raises:
            FileNotFoundError: If the specified config file doesn't exist.
            yaml.YAMLError: If the YAML file has invalid syntax.
            ValidationError: If the configuration values don't match the expected schema.
        """
        import yaml

        # Use direct import to avoid circular imports
        from watch_endurance.utils.file_utils import read_text

        path = _normalize_path(config_path)

        yaml_content = read_text(path)
        config_data = yaml.safe_load(yaml_content) or {}

        return cls.model_validate(config_data)
