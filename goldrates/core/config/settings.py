"""Configuration management for goldrates runs."""

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from goldrates.core.exceptions.base import ConfigError


@dataclass
class FetchConfig:
    """Page fetch timing."""

    ready_timeout: float = 15.0
    settle_delay: float = 3.0
    hard_timeout: float = 60.0
    headless: bool = True

    def __post_init__(self) -> None:
        if self.ready_timeout <= 0:
            raise ValueError("ready_timeout must be positive")
        if self.hard_timeout <= 0:
            raise ValueError("hard_timeout must be positive")
        if self.settle_delay < 0:
            raise ValueError("settle_delay must be non-negative")


@dataclass
class StorageConfig:
    """Rate store location."""

    database: str = "data/goldrates.duckdb"


@dataclass
class LoggingConfig:
    """Log sinks; ``{date}`` in a path expands to the day the line was written."""

    level: str = "INFO"
    file: str | None = None
    error_file: str | None = None


@dataclass
class GoldRatesConfig:
    """goldrates main configuration."""

    fetch: FetchConfig = field(default_factory=FetchConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    vendors_file: str | None = None
    default_vendor: str = "tttbullion"

    @classmethod
    def from_dict(cls, config_dict: dict[str, Any]) -> "GoldRatesConfig":
        """Build a configuration from a nested dictionary."""
        try:
            fetch_config = FetchConfig(**config_dict.get("fetch", {}))
            storage_config = StorageConfig(**config_dict.get("storage", {}))
            logging_config = LoggingConfig(**config_dict.get("logging", {}))
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc

        vendors = config_dict.get("vendors", {})
        return cls(
            fetch=fetch_config,
            storage=storage_config,
            logging=logging_config,
            vendors_file=vendors.get("file"),
            default_vendor=vendors.get("default", "tttbullion"),
        )

    def to_dict(self) -> dict[str, Any]:
        vendors: dict[str, Any] = {"default": self.default_vendor}
        if self.vendors_file is not None:
            vendors["file"] = self.vendors_file
        return {
            "fetch": asdict(self.fetch),
            "storage": asdict(self.storage),
            "logging": asdict(self.logging),
            "vendors": vendors,
        }


def _deep_update(target: dict[str, Any], updates: dict[str, Any]) -> dict[str, Any]:
    for key, value in updates.items():
        if isinstance(value, dict):
            target[key] = _deep_update(dict(target.get(key, {})), value)
        else:
            target[key] = value
    return target


class ConfigManager:
    """Loads configuration from a TOML file with environment overrides applied on top."""

    def __init__(self, config_path: Path | None = None, use_env: bool = True):
        """
        Args:
            config_path: TOML file to read; defaults to ``./goldrates.toml``.
            use_env: Apply ``GOLDRATES_*`` environment overrides.
        """
        self.config_path = config_path or Path("goldrates.toml")
        self.use_env = use_env
        self.config = self._load_config()

    def _load_config(self) -> GoldRatesConfig:
        config_dict: dict[str, Any] = {}
        if self.config_path.exists():
            try:
                with open(self.config_path, "rb") as f:
                    config_dict = tomllib.load(f)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise ConfigError(
                    f"Failed to load config from {self.config_path}: {exc}",
                    path=str(self.config_path),
                ) from exc
        if self.use_env:
            config_dict = _deep_update(config_dict, load_config_from_env())
        return GoldRatesConfig.from_dict(config_dict)

    def get_config(self) -> GoldRatesConfig:
        return self.config

    def update_config(self, **updates: Any) -> None:
        """Apply nested overrides, e.g. ``update_config(fetch={"headless": False})``."""
        config_dict = _deep_update(self.config.to_dict(), updates)
        self.config = GoldRatesConfig.from_dict(config_dict)


def get_default_config() -> GoldRatesConfig:
    return GoldRatesConfig()


def _env_bool(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


def load_config_from_env() -> dict[str, Any]:
    """Read ``GOLDRATES_*`` environment variables into a nested config dict."""
    config: dict[str, Any] = {}

    fetch_config: dict[str, Any] = {}
    for key in ("ready_timeout", "settle_delay", "hard_timeout"):
        value = os.getenv(f"GOLDRATES_FETCH_{key.upper()}")
        if value is not None:
            try:
                fetch_config[key] = float(value)
            except ValueError as exc:
                raise ConfigError(f"GOLDRATES_FETCH_{key.upper()} must be a number") from exc
    headless = os.getenv("GOLDRATES_FETCH_HEADLESS")
    if headless is not None:
        fetch_config["headless"] = _env_bool(headless)
    if fetch_config:
        config["fetch"] = fetch_config

    database = os.getenv("GOLDRATES_DATABASE")
    if database is not None:
        config["storage"] = {"database": database}

    logging_config: dict[str, Any] = {}
    level = os.getenv("GOLDRATES_LOG_LEVEL")
    if level is not None:
        logging_config["level"] = level
    log_file = os.getenv("GOLDRATES_LOG_FILE")
    if log_file is not None:
        logging_config["file"] = log_file or None
    if logging_config:
        config["logging"] = logging_config

    vendors_config: dict[str, Any] = {}
    vendors_file = os.getenv("GOLDRATES_VENDORS_FILE")
    if vendors_file is not None:
        vendors_config["file"] = vendors_file
    default_vendor = os.getenv("GOLDRATES_DEFAULT_VENDOR")
    if default_vendor is not None:
        vendors_config["default"] = default_vendor
    if vendors_config:
        config["vendors"] = vendors_config

    return config
