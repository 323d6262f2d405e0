"""Application-wide constants for the watch face endurance predictor.

This module centralizes the tunable values used by the predictor so they can be
referenced as configuration defaults and in tests. Constants are organized into
logical categories for easier reference.

Constants are grouped into the following categories:
- Path Constants: Directory and file names for configuration and state
- Predictor Constants: Plausibility bounds, smoothing and freshness values
- Display Constants: Placeholder glyphs and display routing thresholds
- Time Constants: Unit conversions and throttling intervals
- Logging Constants: File rotation sizes
"""

# Path constants
APP_DIR_NAME = "watch-endurance"  # Directory name for config and state
DEFAULT_CONFIG_FILENAME = "config.yaml"  # Config file searched for in standard locations
DEFAULT_STATE_FILENAME = "predictor_state.json"  # Persisted predictor state

# Predictor constants
# Charge predictor: between instant and 5 hours to charge fully.
CHARGE_MIN_HOURS_PER_PERCENT = 0.0
CHARGE_MAX_HOURS_PER_PERCENT = 0.05
# Discharge predictor: between one day and about two weeks to run down.
DISCHARGE_MIN_HOURS_PER_PERCENT = 0.25
DISCHARGE_MAX_HOURS_PER_PERCENT = 4.0
SMOOTHING_WEIGHT = 0.1  # Weight of a new rate sample in the moving average
FRESHNESS_WINDOW_SECONDS = 3600  # Baselines older than this at load time are dropped
UNSET = 0  # Sentinel for unset rates and baseline times
PERCENT_MIN = 0
PERCENT_MAX = 100
INT64_MAX = 2**63 - 1  # Largest persisted baseline time

# Display constants
NO_BASELINE_GLYPH = "?"
NO_RATE_GLYPH = "!"
ZERO_TEXT = " 00 "
OVERDUE_TEXT = " ?? "
SHORT_DISPLAY_THRESHOLD = 50  # Below this percent the discharge text uses the short slot

# Time constants
MINUTES_PER_HOUR = 60
SECONDS_PER_HOUR = 3600
HOURS_PER_DAY = 24
THROTTLE_INTERVAL_SECONDS = 1200  # Only hours are shown above one hour left

# Logging constants
BYTES_PER_MEGABYTE = 1024 * 1024
