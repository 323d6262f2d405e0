"""Durable storage of the predictor state.

The predictor state is kept in a flat key-value store so it survives restarts of
the watch face. The store itself is an external substrate; this module defines
its contract, two implementations (a JSON document on disk and an in-memory dict)
and the explicit schema mapping state fields to keys.
"""

import json
import logging
from pathlib import Path
from typing import Annotated, Any, Protocol

from pydantic import Field, StrictBool, StrictFloat, StrictInt, TypeAdapter, ValidationError

from watch_endurance.constants import INT64_MAX, PERCENT_MAX, PERCENT_MIN, UNSET
from watch_endurance.exceptions import StateLoadError, StateStoreError, chain_exception
from watch_endurance.models.battery import EstimatorState, GlobalState, Mode
from watch_endurance.models.config import PredictorConfig
from watch_endurance.utils import file_utils

logger = logging.getLogger(__name__)

# Explicit schema: state field -> store key
GLOBAL_KEYS: dict[str, str] = {
    "was_charging": "was_charging",
}
ESTIMATOR_KEYS: dict[Mode, dict[str, str]] = {
    Mode.CHARGING: {
        "hours_per_percent": "charge.hours_per_percent",
        "baseline_time": "charge.baseline_time",
        "baseline_percent": "charge.baseline_percent",
    },
    Mode.DISCHARGING: {
        "hours_per_percent": "discharge.hours_per_percent",
        "baseline_time": "discharge.baseline_time",
        "baseline_percent": "discharge.baseline_percent",
    },
}

_FIELD_ADAPTERS: dict[str, TypeAdapter[Any]] = {
    "was_charging": TypeAdapter(StrictBool),
    "hours_per_percent": TypeAdapter(Annotated[StrictFloat, Field(ge=0, allow_inf_nan=False)]),
    "baseline_time": TypeAdapter(Annotated[StrictInt, Field(ge=0, le=INT64_MAX)]),
    "baseline_percent": TypeAdapter(
        Annotated[StrictInt, Field(ge=PERCENT_MIN, le=PERCENT_MAX)]
    ),
}


def all_keys() -> list[str]:
    """Every key the predictor state occupies in the store."""
    keys = list(GLOBAL_KEYS.values())
    for fields in ESTIMATOR_KEYS.values():
        keys.extend(fields.values())
    return keys


class KeyValueStore(Protocol):
    """Read/write contract of the durability substrate."""

    def get(self, key: str) -> Any | None:
        """Return the stored value, or None when the key is absent."""
        ...

    def set(self, key: str, value: Any) -> None:
        """Stage a value for the key."""
        ...

    def flush(self) -> None:
        """Make staged values durable."""
        ...


class MemoryStore:
    """Key-value store held in a dict.

    Attributes:
        values: Stored values by key
        flush_count: Number of flushes performed
    """

    def __init__(self, values: dict[str, Any] | None = None) -> None:
        """Initialize the store.

        Args:
            values: Optional initial contents
        """
        self.values: dict[str, Any] = dict(values or {})
        self.flush_count = 0

    def get(self, key: str) -> Any | None:
        return self.values.get(key)

    def set(self, key: str, value: Any) -> None:
        self.values[key] = value

    def flush(self) -> None:
        self.flush_count += 1


class JsonFileStore:
    """Key-value store backed by a single JSON object on disk.

    The document is read lazily on first access and replaced atomically on flush.

    Attributes:
        path: Location of the JSON document
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document
        """
        self.path = path
        self._values: dict[str, Any] | None = None

    def _document(self) -> dict[str, Any]:
        if self._values is None:
            self._values = self._read()
        return self._values

    def _read(self) -> dict[str, Any]:
        """Read the document, treating a missing file as empty.

        Raises:
            StateLoadError: If the file cannot be read or is not a JSON object
        """
        if not file_utils.file_exists(self.path):
            return {}
        try:
            data = file_utils.read_json(self.path)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise chain_exception(
                StateLoadError(
                    "Failed to read predictor state", {"path": str(self.path), "error": str(e)}
                ),
                e,
            ) from e
        if not isinstance(data, dict):
            raise StateLoadError(
                "Predictor state is not a JSON object",
                {"path": str(self.path), "type": type(data).__name__},
            )
        return data

    def get(self, key: str) -> Any | None:
        return self._document().get(key)

    def set(self, key: str, value: Any) -> None:
        try:
            document = self._document()
        except StateLoadError:
            # An unreadable document is replaced wholesale on the next flush.
            document = self._values = {}
        document[key] = value

    def flush(self) -> None:
        """Write the document.

        Raises:
            StateStoreError: If the document cannot be written
        """
        try:
            file_utils.write_json(self.path, self._document())
        except (OSError, TypeError, StateLoadError) as e:
            raise chain_exception(
                StateStoreError(
                    "Failed to write predictor state", {"path": str(self.path), "error": str(e)}
                ),
                e,
            ) from e


def _read_field(values: dict[str, Any], key: str, field: str) -> Any | None:
    """Validate a persisted value, falling back to None when missing or corrupt."""
    raw = values.get(key)
    if raw is None:
        return None
    try:
        return _FIELD_ADAPTERS[field].validate_python(raw)
    except ValidationError:
        logger.warning("Ignoring corrupt persisted value", extra={"key": key, "value": repr(raw)})
        return None


def _load_estimator(
    estimator: EstimatorState,
    values: dict[str, Any],
    keys: dict[str, str],
    now: int,
    freshness_window_seconds: int,
) -> None:
    rate = _read_field(values, keys["hours_per_percent"], "hours_per_percent")
    if rate is not None:
        if rate == UNSET or estimator.rate_in_bounds(rate):
            estimator.hours_per_percent = float(rate)
        else:
            logger.warning(
                "Dropping persisted rate outside plausibility bounds",
                extra={"key": keys["hours_per_percent"], "value": rate},
            )

    baseline_time = _read_field(values, keys["baseline_time"], "baseline_time")
    if not baseline_time:
        return
    if baseline_time > now:
        logger.warning(
            "Dropping baseline from the future",
            extra={"key": keys["baseline_time"], "ahead_seconds": baseline_time - now},
        )
        return
    if now - baseline_time > freshness_window_seconds:
        logger.info(
            "Dropping stale baseline",
            extra={"key": keys["baseline_time"], "age_seconds": now - baseline_time},
        )
        return

    baseline_percent = _read_field(values, keys["baseline_percent"], "baseline_percent")
    if baseline_percent is None:
        logger.warning(
            "Baseline time without a baseline percent, dropping baseline",
            extra={"key": keys["baseline_percent"]},
        )
        return
    estimator.set_baseline(baseline_time, baseline_percent)


def load_state(
    store: KeyValueStore,
    config: PredictorConfig,
    now: int,
    current_percent: int | None = None,
    current_charging: bool | None = None,
) -> GlobalState:
    """Decode the predictor state from a store.

    Every missing or corrupt key falls back to the unset value of that field
    alone. Baselines older than the freshness window, or later than ``now``,
    are dropped so a long power-off or a clock reset cannot produce a wild
    prediction right after restart.

    Args:
        store: Key-value store to read
        config: Predictor configuration with bounds and freshness window
        now: Current time in seconds
        current_percent: Current charge level, seeds estimators without a baseline
        current_charging: Current charging flag, used when none was persisted

    Returns:
        The decoded GlobalState
    """
    try:
        values = {key: store.get(key) for key in all_keys()}
    except StateLoadError as e:
        logger.warning("Predictor state unreadable, starting fresh", extra={"error": str(e)})
        values = {}

    state = GlobalState.initial(config)
    state.last_percent = current_percent

    was_charging = _read_field(values, GLOBAL_KEYS["was_charging"], "was_charging")
    if was_charging is None:
        was_charging = bool(current_charging)
    state.was_charging = was_charging

    for mode, keys in ESTIMATOR_KEYS.items():
        estimator = state.estimator(mode)
        _load_estimator(estimator, values, keys, now, config.freshness_window_seconds)
        if not estimator.has_baseline and current_percent is not None:
            estimator.baseline_percent = current_percent

    logger.debug("Loaded predictor state", extra={"state": state.model_dump(mode="json")})
    return state


def store_state(store: KeyValueStore, state: GlobalState) -> None:
    """Encode the predictor state into a store and flush it.

    Args:
        store: Key-value store to write
        state: Predictor state to persist

    Raises:
        StateStoreError: If the store cannot make the values durable
    """
    store.set(GLOBAL_KEYS["was_charging"], state.was_charging)
    for mode, keys in ESTIMATOR_KEYS.items():
        estimator = state.estimator(mode)
        store.set(keys["hours_per_percent"], float(estimator.hours_per_percent))
        store.set(keys["baseline_time"], int(estimator.baseline_time))
        store.set(keys["baseline_percent"], int(estimator.baseline_percent))
    store.flush()
    logger.debug("Stored predictor state")
