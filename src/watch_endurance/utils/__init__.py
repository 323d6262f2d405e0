"""Module initialization."""

from watch_endurance.utils.path_utils import path_resolver, validate_config_path
from watch_endurance.utils.persistence import (
    JsonFileStore,
    KeyValueStore,
    MemoryStore,
    load_state,
    store_state,
)

__all__ = [
    # Path utilities
    "path_resolver",
    "validate_config_path",
    # Persistence
    "KeyValueStore",
    "JsonFileStore",
    "MemoryStore",
    "load_state",
    "store_state",
]
