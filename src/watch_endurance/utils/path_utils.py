"""Path utility module for the watch face endurance predictor.

Provides centralized path resolution so the CLI, configuration loading and state
persistence agree on where configuration and predictor state live.
"""

import os
from pathlib import Path

from watch_endurance.constants import (
    APP_DIR_NAME,
    DEFAULT_CONFIG_FILENAME,
    DEFAULT_STATE_FILENAME,
)
from watch_endurance.exceptions import ConfigFileNotFoundError


class PathResolver:
    """Centralized utility for path resolution and management.

    Attributes:
        project_root: The project root directory
        system_config_dir: System-wide configuration directory
        user_config_dir: User-specific configuration directory
        data_dir: User-specific directory holding persisted predictor state
    """

    def __init__(self) -> None:
        """Initialize the path resolver.

        Sets up base directories using project structure detection and the
        XDG base directory variables when present.
        """
        self.project_root = self._find_project_root()

        self.system_config_dir = Path(f"/etc/{APP_DIR_NAME}")

        config_home = os.environ.get("XDG_CONFIG_HOME")
        config_base = Path(config_home) if config_home else Path.home() / ".config"
        self.user_config_dir = config_base / APP_DIR_NAME

        data_home = os.environ.get("XDG_DATA_HOME")
        data_base = Path(data_home) if data_home else Path.home() / ".local" / "share"
        self.data_dir = data_base / APP_DIR_NAME

    def _find_project_root(self) -> Path:
        """Find the project root directory.

        Climbs up from this module to the parent of the src directory.

        Returns:
            The project root directory path.
        """
        current_dir = Path(__file__).parent

        while current_dir.name != "src" and current_dir.parent != current_dir:
            current_dir = current_dir.parent

        if current_dir.name == "src":
            return current_dir.parent

        # Fallback to the directory containing this module
        return Path(__file__).parent.parent.parent.parent

    def config_candidates(self, config_filename: str = DEFAULT_CONFIG_FILENAME) -> list[Path]:
        """List configuration file locations in priority order.

        Args:
            config_filename: Name of the configuration file

        Returns:
            Candidate paths: working directory, user config, system config, project root
        """
        return [
            Path.cwd() / config_filename,
            self.user_config_dir / config_filename,
            self.system_config_dir / config_filename,
            self.project_root / config_filename,
        ]

    def get_config_path(self, config_filename: str = DEFAULT_CONFIG_FILENAME) -> Path | None:
        """Get the path to the first existing configuration file.

        Args:
            config_filename: Name of the configuration file

        Returns:
            Path to the configuration file, or None when no candidate exists.
        """
        for path in self.config_candidates(config_filename):
            if path.exists():
                return path
        return None

    def get_state_path(self, state_file: str | Path | None = None) -> Path:
        """Get the path of the persisted predictor state.

        Args:
            state_file: Explicit state file; empty or None selects the default

        Returns:
            Path to the state file.
        """
        if state_file:
            return self.normalize_path(state_file)
        return self.data_dir / DEFAULT_STATE_FILENAME

    def normalize_path(self, path: str | Path) -> Path:
        """Convert a string path to a Path object.

        Args:
            path: String or Path object

        Returns:
            A Path object.
        """
        return Path(path) if isinstance(path, str) else path

    def ensure_dir_exists(self, path: str | Path) -> Path:
        """Ensure a directory exists, creating it if necessary.

        Args:
            path: Directory path

        Returns:
            Path to the directory.
        """
        dir_path = self.normalize_path(path)
        dir_path.mkdir(exist_ok=True, parents=True)
        return dir_path


# Create a global instance for easy import
path_resolver = PathResolver()


def validate_config_path(config_path: str | Path | None = None) -> Path | None:
    """Validate and resolve the configuration file path.

    An explicitly given path must exist. Without one, standard locations are
    searched and None is returned when nothing is found, meaning defaults apply.

    Args:
        config_path: Optional path to configuration file

    Returns:
        Resolved Path to the configuration file, or None

    Raises:
        ConfigFileNotFoundError: If an explicitly given config file does not exist
    """
    if config_path is None:
        return path_resolver.get_config_path()

    resolved_path = path_resolver.normalize_path(config_path)
    if not resolved_path.exists():
        error_details = {
            "path": str(resolved_path),
            "cwd": str(Path.cwd()),
        }
        raise ConfigFileNotFoundError(
            f"Configuration file not found: {resolved_path}", error_details
        )

    return resolved_path
