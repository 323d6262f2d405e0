"""Common fixtures for testing the endurance predictor."""

import logging
from collections.abc import Iterator
from unittest.mock import MagicMock

import pytest

from watch_endurance.models.battery import GlobalState
from watch_endurance.models.config import PredictorConfig
from watch_endurance.utils.persistence import MemoryStore


@pytest.fixture()
def predictor_config() -> PredictorConfig:
    """Predictor configuration with the shipped defaults."""
    return PredictorConfig()


@pytest.fixture()
def wide_predictor_config() -> PredictorConfig:
    """Predictor configuration accepting discharge rates up to 8 hours per percent."""
    return PredictorConfig(discharge_max_hours_per_percent=8.0)


@pytest.fixture()
def state(predictor_config: PredictorConfig) -> GlobalState:
    """Predictor state with nothing learned yet."""
    return GlobalState.initial(predictor_config)


@pytest.fixture()
def memory_store() -> MemoryStore:
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture(autouse=True)
def reset_app_logger() -> Iterator[None]:
    """Detach handlers the CLI attached to the application logger."""
    yield
    app_logger = logging.getLogger("watch_endurance")
    app_logger.handlers = []
    app_logger.setLevel(logging.NOTSET)


@pytest.fixture()
def mock_logger() -> MagicMock:
    """Create a properly mocked logger that prevents output."""
    logger = MagicMock()
    logger.debug = MagicMock()
    logger.info = MagicMock()
    logger.warning = MagicMock()
    logger.error = MagicMock()
    logger.name = "test_logger"
    return logger
