"""Custom exception hierarchy for the watch face endurance predictor.

The predictor core never raises for routine inputs: implausible rate samples and
corrupt persisted keys are expected and handled in place. These exceptions cover
the outer surfaces, configuration loading and the persistence substrate.

Exception Hierarchy:
    WatchEnduranceError (Base)
    ├── ConfigurationError
    │   ├── InvalidConfigError
    │   └── ConfigFileNotFoundError
    └── PersistenceError
        ├── StateLoadError
        └── StateStoreError
"""

from typing import Any


# Base Exception
class WatchEnduranceError(Exception):
    """Base exception for all endurance predictor errors.

    Attributes:
        message: Human-readable error description
        details: Optional dictionary containing additional error context
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """Initialize the exception with message and optional details.

        Args:
            message: Human-readable error description
            details: Optional dictionary containing additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the exception."""
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


# Configuration Exceptions
class ConfigurationError(WatchEnduranceError):
    """Base exception for configuration-related errors."""
    pass


class InvalidConfigError(ConfigurationError):
    """Raised when configuration contains invalid values.

    Example:
        raise InvalidConfigError(
            "Invalid predictor configuration",
            {"path": "config.yaml", "error": "smoothing_weight must be in (0, 1]"}
        )
    """
    pass


class ConfigFileNotFoundError(ConfigurationError):
    """Raised when configuration file cannot be found.

    Example:
        raise ConfigFileNotFoundError(
            "Configuration file not found",
            {"path": "/etc/watch-endurance/config.yaml"}
        )
    """
    pass


# Persistence Exceptions
class PersistenceError(WatchEnduranceError):
    """Base exception for key-value store errors."""
    pass


class StateLoadError(PersistenceError):
    """Raised when the persisted state document cannot be read.

    Example:
        raise StateLoadError(
            "Failed to read predictor state",
            {"path": "/tmp/predictor_state.json", "error": "Permission denied"}
        )
    """
    pass


class StateStoreError(PersistenceError):
    """Raised when the predictor state cannot be written.

    Example:
        raise StateStoreError(
            "Failed to write predictor state",
            {"path": "/tmp/predictor_state.json", "error": "No space left on device"}
        )
    """
    pass


# Utility function for exception chaining
def chain_exception(new_exception: WatchEnduranceError, cause: Exception) -> WatchEnduranceError:
    """Chain a new exception with its underlying cause.

    Args:
        new_exception: The new domain-specific exception to raise
        cause: The underlying exception that caused this error

    Returns:
        The new exception with cause properly chained

    Example:
        try:
            data = file_utils.read_json(path)
        except OSError as e:
            raise chain_exception(
                StateLoadError("Failed to read predictor state", {"path": str(path)}),
                e
            ) from e
    """
    new_exception.__cause__ = cause
    return new_exception
