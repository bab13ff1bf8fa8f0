"""Rate snapshot storage."""

from goldrates.core.storage.connection import DuckDBConnectionConfig, connection, open_connection
from goldrates.core.storage.rate_store import DuckDBRateStore, RateStore
from goldrates.core.storage.schema import VENDOR_RATES_TABLE, ColumnDef, TableSchema

__all__ = [
    "ColumnDef",
    "DuckDBConnectionConfig",
    "DuckDBRateStore",
    "RateStore",
    "TableSchema",
    "VENDOR_RATES_TABLE",
    "connection",
    "open_connection",
]
