"""Configuration persistence."""

from spinwheel.storage.json_store import (
    ConfigStore,
    JsonConfigStore,
    MemoryConfigStore,
    Preferences,
    DEFAULT_TITLE,
    default_config,
)

__all__ = [
    "ConfigStore",
    "JsonConfigStore",
    "MemoryConfigStore",
    "Preferences",
    "DEFAULT_TITLE",
    "default_config",
]
