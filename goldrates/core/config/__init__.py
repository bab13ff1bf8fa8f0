"""Configuration package."""

from goldrates.core.config.settings import (
    ConfigManager,
    FetchConfig,
    GoldRatesConfig,
    LoggingConfig,
    StorageConfig,
    get_default_config,
    load_config_from_env,
)

__all__ = [
    "ConfigManager",
    "FetchConfig",
    "GoldRatesConfig",
    "LoggingConfig",
    "StorageConfig",
    "get_default_config",
    "load_config_from_env",
]
