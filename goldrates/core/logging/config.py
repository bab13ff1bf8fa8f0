"""Logging configuration primitives for structured logging."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from goldrates.core.config.settings import LoggingConfig


class LogConfig(BaseModel):
    """Sinks and level for the goldrates logger.

    ``file_path`` and ``error_file_path`` may contain ``{date}``, expanded to
    ``YYYYMMDD`` per record so each day gets its own file. The error file only
    receives ERROR and above.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console: bool = True
    stream: Any = None
    file_path: str | None = None
    error_file_path: str | None = None
    extra: dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: LoggingConfig, level: str | None = None) -> LogConfig:
        """Build from the ``[logging]`` section, optionally overriding the level."""

        return cls(
            level=(level or settings.level).upper(),
            file_path=settings.file,
            error_file_path=settings.error_file,
        )


__all__ = ["LogConfig"]
