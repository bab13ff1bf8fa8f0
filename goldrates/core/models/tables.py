"""Immutable table snapshots captured from a rendered page."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

RawRow = tuple[str, ...]


@dataclass(frozen=True)
class RawTable:
    """Ordered rows of cell text for a single ``<table>`` element."""

    rows: tuple[RawRow, ...]
    caption: str | None = None

    @classmethod
    def from_rows(cls, rows: Iterable[Sequence[str]], caption: str | None = None) -> RawTable:
        """Build a table from any nested sequence of cell strings."""

        return cls(rows=tuple(tuple(str(cell) for cell in row) for row in rows), caption=caption)

    @property
    def text(self) -> str:
        """Concatenated visible text, one line per row, caption first."""

        lines = [" ".join(row) for row in self.rows]
        if self.caption:
            lines.insert(0, self.caption)
        return "\n".join(lines)

    def __len__(self) -> int:
        return len(self.rows)


__all__ = ["RawRow", "RawTable"]
