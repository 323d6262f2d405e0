"""Command line entry point replaying battery readings through the predictor.

Plays the part of the watch face: feeds each ``timestamp,percent,charging`` row
to the endurance engine, prints the text the face would show and persists the
learned state at the end, so the state carries over to the next run.
"""

import argparse
import csv
import logging
import sys
from collections.abc import Iterable, Iterator
from typing import TextIO

import yaml
from pydantic import ValidationError

from watch_endurance.exceptions import (
    ConfigurationError,
    InvalidConfigError,
    StateStoreError,
    chain_exception,
)
from watch_endurance.models.battery import BatteryReading
from watch_endurance.models.config import AppConfig
from watch_endurance.predictor.engine import EnduranceEngine
from watch_endurance.predictor.prediction_formatter import select_display_slot
from watch_endurance.utils.early_error_handler import (
    handle_keyboard_interrupt,
    handle_predictor_error,
    handle_startup_error,
)
from watch_endurance.utils.logging import setup_logging
from watch_endurance.utils.path_utils import path_resolver, validate_config_path
from watch_endurance.utils.persistence import JsonFileStore

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "y", "charging"}
_FALSE_VALUES = {"0", "false", "no", "n", "discharging"}


def _parse_charging(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    raise ValueError(f"Invalid charging flag: {value!r}")


def read_readings(rows: Iterable[str]) -> Iterator[BatteryReading]:
    """Parse battery readings from CSV lines.

    Blank lines, ``#`` comments and a ``timestamp,...`` header are skipped.
    Malformed rows are logged and skipped.

    Args:
        rows: Lines of ``timestamp,percent,charging``

    Yields:
        Parsed battery readings in input order
    """
    for line_number, row in enumerate(csv.reader(rows), start=1):
        if not row or not row[0].strip() or row[0].lstrip().startswith("#"):
            continue
        if row[0].strip().lower() == "timestamp":
            continue
        try:
            timestamp, percent, charging = (field.strip() for field in row)
            yield BatteryReading(
                timestamp=int(timestamp),
                percent=int(percent),
                is_charging=_parse_charging(charging),
            )
        except (ValueError, ValidationError) as e:
            logger.warning(
                "Skipping malformed reading", extra={"line": line_number, "error": str(e)}
            )


def load_config(config_path: str | None) -> AppConfig:
    """Load the configuration, falling back to defaults when no file is found.

    Args:
        config_path: Explicit config file, or None to search standard locations

    Returns:
        The application configuration

    Raises:
        ConfigFileNotFoundError: If an explicit config file does not exist
        InvalidConfigError: If the config file cannot be read, parsed or validated
    """
    resolved_path = validate_config_path(config_path)
    if resolved_path is None:
        return AppConfig()
    try:
        return AppConfig.from_yaml(resolved_path)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        raise chain_exception(
            InvalidConfigError(
                "Invalid configuration", {"path": str(resolved_path), "error": str(e)}
            ),
            e,
        ) from e


def replay(
    engine: EnduranceEngine,
    readings: Iterable[BatteryReading],
    out: TextIO,
    short_display_threshold: int,
) -> int:
    """Feed readings to a started engine and print one line per reading.

    Args:
        engine: Started endurance engine
        readings: Battery readings in time order
        out: Stream receiving ``timestamp<TAB>slot<TAB>kind<TAB>text`` lines
        short_display_threshold: Percent below which the short slot is used

    Returns:
        Number of readings processed
    """
    count = 0
    for reading in readings:
        text = engine.on_reading(reading.percent, reading.is_charging, reading.timestamp)
        slot = select_display_slot(reading, short_display_threshold)
        out.write(f"{reading.timestamp}\t{slot.value}\t{text.kind.value}\t{text.text}\n")
        count += 1
    return count


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the replay CLI.

    Args:
        argv: Command line arguments, defaults to sys.argv

    Returns:
        Process exit code
    """
    parser = argparse.ArgumentParser(description="Replay battery readings through the predictor")
    parser.add_argument(
        "readings",
        nargs="?",
        default=None,
        help="CSV file of timestamp,percent,charging rows (default: stdin)",
    )
    parser.add_argument("--config", type=str, default=None, help="Path to configuration file")
    parser.add_argument(
        "--state-file", type=str, default=None, help="Path to the persisted predictor state"
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        handle_predictor_error("CONFIG_ERROR", e)
        return 1

    if args.debug or config.debug:
        config.logging.level = "DEBUG"
    app_logger = setup_logging(config.logging, "watch_endurance")

    state_path = path_resolver.get_state_path(args.state_file or config.persistence.state_file)
    engine = EnduranceEngine(config.predictor, JsonFileStore(state_path))

    try:
        if args.readings:
            with open(args.readings, encoding="utf-8") as f:
                readings = list(read_readings(f))
        else:
            readings = list(read_readings(sys.stdin))
    except OSError as e:
        handle_startup_error("INPUT_ERROR", f"Cannot read readings: {e}", {"path": args.readings})
        return 1

    if readings:
        first = readings[0]
        engine.start(first.timestamp, first.percent, first.is_charging)
    else:
        engine.start()

    try:
        with engine:
            count = replay(engine, readings, sys.stdout, config.predictor.short_display_threshold)
    except KeyboardInterrupt:
        handle_keyboard_interrupt()
        return 130
    except StateStoreError as e:
        app_logger.error(f"Could not persist predictor state: {e}")
        return 1

    app_logger.info(f"Replayed {count} readings", extra={"state_file": str(state_path)})
    return 0


if __name__ == "__main__":
    sys.exit(main())
