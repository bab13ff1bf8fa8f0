"""DuckDB schema for stored rate snapshots."""

from __future__ import annotations

from collections.abc import Sequence  # noqa: TC003
from dataclasses import dataclass

from duckdb import DuckDBPyConnection


@dataclass(frozen=True)
class ColumnDef:
    """Represents a DuckDB table column definition."""

    name: str
    data_type: str
    constraints: Sequence[str] = ()

    def render(self) -> str:
        parts = [self.name, self.data_type, *self.constraints]
        return " ".join(parts)


@dataclass(frozen=True)
class TableSchema:
    """Utility wrapper describing a DuckDB table schema."""

    name: str
    columns: Sequence[ColumnDef]
    primary_key: Sequence[str] = ()

    @property
    def column_names(self) -> tuple[str, ...]:
        return tuple(column.name for column in self.columns)

    def create_ddl(self) -> str:
        column_defs: list[str] = [column.render() for column in self.columns]
        if self.primary_key:
            column_defs.append(f"PRIMARY KEY ({', '.join(self.primary_key)})")
        columns_sql = ",\n                ".join(column_defs)
        return f"""
            CREATE TABLE IF NOT EXISTS {self.name} (
                {columns_sql}
            )
            """.strip()

    def insert_sql(self) -> str:
        names = self.column_names
        placeholders = ", ".join("?" for _ in names)
        return f"INSERT INTO {self.name} ({', '.join(names)}) VALUES ({placeholders})"

    def ensure(self, conn: DuckDBPyConnection) -> None:
        """Create the table on the provided connection if it does not exist."""

        conn.execute(self.create_ddl())


# One row per extracted quote; ``position`` keeps page order within a category.
# Rates are stored as decimal text so the scale written on the page survives.
VENDOR_RATES_TABLE = TableSchema(
    name="vendor_rates",
    columns=(
        ColumnDef("vendor_id", "VARCHAR", ("NOT NULL",)),
        ColumnDef("category", "VARCHAR", ("NOT NULL",)),
        ColumnDef("position", "INTEGER", ("NOT NULL",)),
        ColumnDef("detail_name", "VARCHAR", ("NOT NULL",)),
        ColumnDef("we_buy", "VARCHAR", ("NOT NULL", "CHECK (CAST(we_buy AS DOUBLE) >= 0)")),
        ColumnDef("we_sell", "VARCHAR", ("CHECK (we_sell IS NULL OR CAST(we_sell AS DOUBLE) >= 0)",)),
        ColumnDef("purity", "VARCHAR"),
        ColumnDef("last_updated", "TIMESTAMP", ("NOT NULL",)),
    ),
    primary_key=("vendor_id", "category", "position"),
)


__all__ = ["ColumnDef", "TableSchema", "VENDOR_RATES_TABLE"]
