"""GitTreeFS Infrastructure Layer.

This layer provides services used by the remote and filesystem layers:
- ConfigManager: Layered YAML configuration
- CacheManager: Append-only path cache with per-key load de-duplication
- Logger: Structured logging system
"""

from .cache_manager import CacheManager, CacheStats, PathCache
from .config_manager import CONFIG_SCHEMA, ConfigError
from .config_manager import ConfigManager as Config
from .config_manager import ConfigSource
from .logger import Logger, LogLevel, get_logger, set_global_logger

__all__ = [
    # Logger exports
    "Logger",
    "LogLevel",
    "get_logger",
    "set_global_logger",
    # CacheManager exports
    "CacheStats",
    "PathCache",
    "CacheManager",
    # ConfigManager exports
    "CONFIG_SCHEMA",
    "ConfigSource",
    "ConfigError",
    "Config",
]
