"""Replace-on-write persistence for vendor rate snapshots."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from decimal import Decimal
from typing import Protocol, runtime_checkable

import duckdb
from duckdb import DuckDBPyConnection

from goldrates.core.exceptions.base import StoreError, StoreErrorKind
from goldrates.core.logging import logger
from goldrates.core.models.rates import RateRecord
from goldrates.core.storage.connection import DuckDBConnectionConfig, open_connection
from goldrates.core.storage.schema import VENDOR_RATES_TABLE


@runtime_checkable
class RateStore(Protocol):
    """Persistence collaborator used by the extraction pipeline."""

    def replace(self, vendor_id: str, category: str, records: Sequence[RateRecord]) -> None:
        """Delete every stored row for ``(vendor_id, category)`` and insert ``records``.

        Must be all-or-nothing; raises :class:`StoreError` on failure.
        """


class DuckDBRateStore:
    """:class:`RateStore` backed by a single DuckDB ``vendor_rates`` table."""

    def __init__(self, config: DuckDBConnectionConfig | None = None) -> None:
        self.config = config or DuckDBConnectionConfig()
        self._conn: DuckDBPyConnection | None = None

    def __enter__(self) -> DuckDBRateStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def connection(self) -> DuckDBPyConnection:
        if self._conn is None:
            conn = open_connection(self.config)
            if not self.config.read_only:
                try:
                    VENDOR_RATES_TABLE.ensure(conn)
                except duckdb.Error as exc:
                    conn.close()
                    raise StoreError(
                        f"Cannot prepare {VENDOR_RATES_TABLE.name} in {self.config.database}: {exc}",
                        StoreErrorKind.CONNECTION_FAILED,
                    ) from exc
            self._conn = conn
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def replace(self, vendor_id: str, category: str, records: Sequence[RateRecord]) -> None:
        for record in records:
            if record.vendor_id != vendor_id or record.category != category:
                raise StoreError(
                    f"Record {record.detail_name!r} belongs to {record.vendor_id}/{record.category}",
                    StoreErrorKind.CONSTRAINT_VIOLATION,
                    vendor_id=vendor_id,
                    category=category,
                )

        updated_at = datetime.now()
        rows = [
            (
                vendor_id,
                category,
                position,
                record.detail_name,
                str(record.we_buy),
                None if record.we_sell is None else str(record.we_sell),
                record.purity,
                updated_at,
            )
            for position, record in enumerate(records)
        ]

        conn = self.connection
        try:
            conn.execute("BEGIN TRANSACTION")
            conn.execute(
                f"DELETE FROM {VENDOR_RATES_TABLE.name} WHERE vendor_id = ? AND category = ?",
                [vendor_id, category],
            )
            if rows:
                conn.executemany(VENDOR_RATES_TABLE.insert_sql(), rows)
            conn.execute("COMMIT")
        except duckdb.ConstraintException as exc:
            self._rollback(conn)
            raise StoreError(
                f"Constraint violated while replacing {vendor_id}/{category}: {exc}",
                StoreErrorKind.CONSTRAINT_VIOLATION,
                vendor_id=vendor_id,
                category=category,
            ) from exc
        except duckdb.Error as exc:
            self._rollback(conn)
            raise StoreError(
                f"Database error while replacing {vendor_id}/{category}: {exc}",
                StoreErrorKind.CONNECTION_FAILED,
                vendor_id=vendor_id,
                category=category,
            ) from exc

        logger.bind(vendor=vendor_id, category=category).info("Stored {} rates", len(rows))

    def snapshot(self, vendor_id: str, category: str | None = None) -> list[RateRecord]:
        """Return the stored rows for a vendor in page order."""

        query = (
            f"SELECT vendor_id, category, detail_name, we_buy, we_sell, purity "
            f"FROM {VENDOR_RATES_TABLE.name} WHERE vendor_id = ?"
        )
        params: list[object] = [vendor_id]
        if category is not None:
            query += " AND category = ?"
            params.append(category)
        query += " ORDER BY category, position"

        result = self._query(query, params, vendor_id).fetchall()
        return [
            RateRecord(
                vendor_id=row[0],
                category=row[1],
                detail_name=row[2],
                we_buy=Decimal(row[3]),
                we_sell=None if row[4] is None else Decimal(row[4]),
                purity=row[5],
            )
            for row in result
        ]

    def last_updated(self, vendor_id: str) -> datetime | None:
        row = self._query(
            f"SELECT max(last_updated) FROM {VENDOR_RATES_TABLE.name} WHERE vendor_id = ?",
            [vendor_id],
            vendor_id,
        ).fetchone()
        return row[0] if row else None

    def _query(self, sql: str, params: list[object], vendor_id: str) -> DuckDBPyConnection:
        conn = self.connection
        try:
            return conn.execute(sql, params)
        except duckdb.Error as exc:
            raise StoreError(
                f"Database error while reading {vendor_id}: {exc}",
                StoreErrorKind.CONNECTION_FAILED,
                vendor_id=vendor_id,
            ) from exc

    def _rollback(self, conn: DuckDBPyConnection) -> None:
        try:
            conn.execute("ROLLBACK")
        except duckdb.Error as exc:
            logger.error("Rollback failed: {}", exc)


__all__ = ["RateStore", "DuckDBRateStore"]
