"""Battery endurance engine driven by the watch face.

Owns the predictor state for the lifetime of the process: loads it once at
start, funnels every battery reading through mode tracking, rate estimation and
formatting, and flushes it once at shutdown.
"""

import logging
import time
from types import TracebackType

from watch_endurance.models.battery import BatteryReading, DisplayText, GlobalState
from watch_endurance.models.config import PredictorConfig
from watch_endurance.predictor.mode_tracker import ModeTracker
from watch_endurance.predictor.prediction_formatter import PredictionFormatter, format_rates
from watch_endurance.predictor.rate_estimator import RateEstimator
from watch_endurance.utils.persistence import KeyValueStore, load_state, store_state

logger = logging.getLogger(__name__)


class EnduranceEngine:
    """Predicts time left on the battery from periodic readings.

    The host serializes calls (timer ticks and charging-state notifications),
    so the engine runs each reading to completion without locking. It tolerates
    being called more often than the battery level changes.

    Attributes:
        config: Predictor configuration
        store: Durable key-value store for the state
        mode_tracker: Transition tracker
        rate_estimator: Shared estimator logic for both modes
        formatter: Throttled time-left formatter
    """

    def __init__(self, config: PredictorConfig, store: KeyValueStore) -> None:
        """Initialize the engine.

        Args:
            config: Predictor configuration
            store: Durable key-value store for the state
        """
        self.config = config
        self.store = store
        self.mode_tracker = ModeTracker()
        self.rate_estimator = RateEstimator(config.smoothing_weight)
        self.formatter = PredictionFormatter(config.throttle_interval_seconds)
        self._state: GlobalState | None = None
        self._stopped = False

    @property
    def state(self) -> GlobalState:
        """The predictor state, loading defaults if start() was never called."""
        if self._state is None:
            return self.start()
        return self._state

    def start(
        self,
        now: int | None = None,
        current_percent: int | None = None,
        current_charging: bool | None = None,
    ) -> GlobalState:
        """Load the persisted state.

        Args:
            now: Current time in seconds, defaults to the wall clock
            current_percent: Current charge level, seeds estimators without a baseline
            current_charging: Current charging flag, used when none was persisted

        Returns:
            The loaded state
        """
        if now is None:
            now = int(time.time())
        self._state = load_state(
            self.store, self.config, now, current_percent, current_charging
        )
        self._stopped = False
        logger.info("Endurance engine started", extra={"rates": format_rates(self._state)})
        return self._state

    def on_reading(self, percent: int, is_charging: bool, timestamp: int) -> DisplayText:
        """Process one battery reading.

        Args:
            percent: Charge percentage, clamped into 0..100
            is_charging: Whether the battery is charging
            timestamp: Reading time in seconds

        Returns:
            The time-left text for the face
        """
        reading = BatteryReading(percent=percent, is_charging=is_charging, timestamp=timestamp)
        state = self.state

        mode = self.mode_tracker.on_reading(state, reading)
        estimator = state.estimator(mode)
        if self.rate_estimator.update(estimator, mode, reading.percent, reading.timestamp):
            logger.debug("Learned rates changed", extra={"rates": format_rates(state)})

        return self.formatter.render(estimator, mode, reading.timestamp)

    def shutdown(self) -> None:
        """Flush the state to the store, once.

        Raises:
            StateStoreError: If the store cannot make the state durable
        """
        if self._stopped or self._state is None:
            return
        self._stopped = True
        store_state(self.store, self._state)
        logger.info("Endurance engine stopped", extra={"rates": format_rates(self._state)})

    def __enter__(self) -> "EnduranceEngine":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.shutdown()
