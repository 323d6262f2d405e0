"""Logging configuration module for the endurance predictor.

Predictor modules log through the standard library (``logging.getLogger``) and
pass their context in ``extra``; this module renders those records through
structlog as JSON lines or human-readable console output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any

import structlog
from structlog.stdlib import ProcessorFormatter

from watch_endurance.constants import BYTES_PER_MEGABYTE
from watch_endurance.models.config import LoggingConfig
from watch_endurance.utils.early_error_handler import handle_startup_error
from watch_endurance.utils.path_utils import path_resolver


def _select_renderer(config: LoggingConfig) -> Any:
    if config.format.lower() == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def _configure_structlog(renderer: Any) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def _build_formatter(renderer: Any) -> ProcessorFormatter:
    """Formatter for stdlib records, lifting ``extra`` fields into the event."""
    return ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=[
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.ExtraAdder(),
            structlog.processors.TimeStamper(fmt="iso"),
        ],
    )


def _open_log_file(config: LoggingConfig) -> RotatingFileHandler:
    """Create the rotating file handler, creating the log directory first.

    Raises:
        OSError: If the directory or file cannot be created
    """
    from watch_endurance.utils import file_utils

    log_path = path_resolver.normalize_path(config.file or "")
    file_utils.ensure_dir_exists(log_path.parent)
    return RotatingFileHandler(
        log_path,
        maxBytes=config.max_size_mb * BYTES_PER_MEGABYTE,
        backupCount=config.backup_count,
    )


def setup_logging(config: LoggingConfig, name: str) -> logging.Logger:
    """Set up logging with the specified configuration.

    Handlers are attached to the ``name`` logger, so module loggers below it
    (``watch_endurance.predictor...``) share the same output. A configured log
    file replaces console output; stdout is left to the CLI's predictions, so
    console logs go to stderr.

    Args:
        config: Logging configuration.
        name: Logger name.

    Returns:
        Configured logger instance.
    """
    logger = logging.getLogger(name)
    logger.handlers = []

    level = getattr(logging, config.level.upper(), logging.INFO)
    logger.setLevel(level)

    renderer = _select_renderer(config)
    _configure_structlog(renderer)
    formatter = _build_formatter(renderer)

    handler: logging.Handler
    file_error: str | None = None
    if config.file:
        try:
            handler = _open_log_file(config)
        except Exception as e:
            file_error = f"Failed to set up file logging: {e}"
            handle_startup_error("LOGGING_FILE_ERROR", file_error, {"log_file": config.file})
            handler = logging.StreamHandler(sys.stderr)
    else:
        handler = logging.StreamHandler(sys.stderr)

    handler.setFormatter(formatter)
    handler.setLevel(level)
    logger.addHandler(handler)

    if file_error is not None:
        logger.error(file_error)

    return logger
