"""JSON-lines logging on top of loguru, scoped per extraction run."""

from __future__ import annotations

import json
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import datetime
from typing import IO, Any, Iterator
from uuid import uuid4

from loguru import logger
from loguru._logger import Logger as _LoguruLogger  # type: ignore[attr-defined]

from goldrates.core.logging.config import LogConfig

# Extra keys promoted to top-level fields of every payload.
PROMOTED_FIELDS = ("vendor", "category", "error_code")


@dataclass(frozen=True)
class _RunScope:
    trace_id: str
    fields: dict[str, Any] = field(default_factory=dict)


_SCOPE: ContextVar[_RunScope | None] = ContextVar("goldrates_log_scope", default=None)


def _active_scope() -> _RunScope:
    scope = _SCOPE.get()
    if scope is None:
        scope = _RunScope(trace_id=uuid4().hex)
        _SCOPE.set(scope)
    return scope


def _patch_record(record: dict[str, Any]) -> None:
    """Fill in trace id and scoped fields; values bound on the record win."""

    extra = record["extra"]
    scope = _active_scope()
    extra.setdefault("trace_id", scope.trace_id)
    for key, value in scope.fields.items():
        if extra.get(key) is None:
            extra[key] = value
    for key in PROMOTED_FIELDS:
        extra.setdefault(key, None)


def _to_json(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    return str(value)


def build_payload(record: dict[str, Any]) -> dict[str, Any]:
    """Flatten a loguru record into the JSON document written by every sink."""

    extra = record["extra"]
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "message": record["message"],
        "trace_id": extra.get("trace_id"),
    }
    for key in PROMOTED_FIELDS:
        payload[key] = extra.get(key)
    context = {k: v for k, v in extra.items() if k != "trace_id" and k not in PROMOTED_FIELDS}
    if context:
        payload["context"] = context
    if record["exception"] is not None:
        payload["exception"] = str(record["exception"])
    return payload


class _JsonLineSink:
    """Writes one JSON document per record to a stream or a dated file.

    With neither a stream nor a path, ``sys.stderr`` is resolved for every
    record so a replaced stderr (CLI capture) keeps receiving output.
    """

    def __init__(self, stream: IO[str] | None = None, path_template: str | None = None) -> None:
        self._stream = stream
        self._path_template = path_template

    def resolve_path(self, when: datetime) -> str | None:
        if self._path_template is None:
            return None
        return self._path_template.replace("{date}", when.strftime("%Y%m%d"))

    def __call__(self, message: Any) -> None:
        record = message.record
        line = json.dumps(build_payload(record), default=_to_json) + "\n"
        path = self.resolve_path(record["time"])
        if path is None:
            stream = self._stream or sys.stderr
            stream.write(line)
            stream.flush()
            return
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(path, "a", encoding="utf-8") as file:
            file.write(line)


def _install(config: LogConfig) -> None:
    handlers: list[dict[str, Any]] = []
    if config.console:
        handlers.append({"sink": _JsonLineSink(stream=config.stream), "level": config.level})
    if config.file_path:
        handlers.append({"sink": _JsonLineSink(path_template=config.file_path), "level": config.level})
    if config.error_file_path:
        handlers.append({"sink": _JsonLineSink(path_template=config.error_file_path), "level": "ERROR"})
    logger.configure(handlers=handlers, patcher=_patch_record, extra=dict(config.extra))


def configure_logging(level: str = "INFO", **kwargs: Any) -> None:
    """Install the JSON sinks; keyword arguments are :class:`LogConfig` fields."""

    _install(LogConfig(level=level, **kwargs))


class StructuredLogger:
    """Holds the active :class:`LogConfig` and re-installs sinks when it changes."""

    def __init__(self, config: LogConfig | None = None) -> None:
        self.config = config or LogConfig()
        self.logger: _LoguruLogger = logger
        _install(self.config)

    def configure(self, **kwargs: Any) -> None:
        self.config = self.config.model_copy(update=kwargs)
        _install(self.config)

    @contextmanager
    def context(self, *, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
        with log_context(trace_id=trace_id, **fields) as active:
            yield active


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Scope a fresh trace id and extra fields to every record logged inside.

    Fields nest: an inner scope sees the outer scope's fields unless it
    overrides them.
    """

    outer = _SCOPE.get()
    inherited = outer.fields if outer is not None else {}
    scope = _RunScope(trace_id=trace_id or uuid4().hex, fields={**inherited, **fields})
    token = _SCOPE.set(scope)
    try:
        yield scope.trace_id
    finally:
        _SCOPE.reset(token)


def current_trace_id() -> str:
    return _active_scope().trace_id


configure_logging()


__all__ = [
    "PROMOTED_FIELDS",
    "StructuredLogger",
    "build_payload",
    "configure_logging",
    "current_trace_id",
    "log_context",
    "logger",
]
