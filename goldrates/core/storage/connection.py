"""DuckDB connection handling for the rate store."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import duckdb
from duckdb import DuckDBPyConnection

from goldrates.core.exceptions.base import StoreError, StoreErrorKind


@dataclass(frozen=True)
class DuckDBConnectionConfig:
    """Settings applied to every connection opened for the rate store."""

    database: str | Path = ":memory:"
    read_only: bool = False
    pragmas: Mapping[str, object] = field(default_factory=lambda: {"threads": 1})

    @property
    def is_memory(self) -> bool:
        return str(self.database) == ":memory:"


def open_connection(config: DuckDBConnectionConfig) -> DuckDBPyConnection:
    """Open a configured connection, creating the database directory on demand."""

    if not config.is_memory:
        Path(config.database).expanduser().parent.mkdir(parents=True, exist_ok=True)
    try:
        conn = duckdb.connect(database=str(config.database), read_only=config.read_only)
        for setting, value in config.pragmas.items():
            conn.execute(f"SET {setting}=?", [value])
    except duckdb.Error as exc:
        raise StoreError(
            f"Unable to open rate database {config.database}: {exc}",
            StoreErrorKind.CONNECTION_FAILED,
            details={"database": str(config.database)},
        ) from exc
    return conn


@contextmanager
def connection(config: DuckDBConnectionConfig) -> Iterator[DuckDBPyConnection]:
    """Context manager yielding a connection that is closed on exit."""

    conn = open_connection(config)
    try:
        yield conn
    finally:
        conn.close()


__all__ = ["DuckDBConnectionConfig", "connection", "open_connection"]
