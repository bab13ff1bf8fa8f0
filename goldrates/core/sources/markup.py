"""HTML table capture shared by every page source."""

from __future__ import annotations

import asyncio
from pathlib import Path

from bs4 import BeautifulSoup, Tag

from goldrates.core.exceptions.base import FetchError, FetchErrorKind
from goldrates.core.logging import logger
from goldrates.core.models.tables import RawTable


def _cell_text(cell: Tag) -> str:
    return " ".join(cell.get_text(" ", strip=True).split())


def _own_rows(table: Tag) -> list[Tag]:
    # Rows of nested tables belong to those tables.
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def parse_tables(html: str) -> list[RawTable]:
    """Return every ``<table>`` in ``html`` as a :class:`RawTable`, in document order."""

    soup = BeautifulSoup(html, "html.parser")
    tables: list[RawTable] = []
    for element in soup.find_all("table"):
        rows = []
        for row in _own_rows(element):
            cells = row.find_all(["th", "td"], recursive=False)
            rows.append([_cell_text(cell) for cell in cells])
        caption_tag = element.find("caption", recursive=False)
        caption = _cell_text(caption_tag) if caption_tag is not None else None
        tables.append(RawTable.from_rows(rows, caption=caption or None))
    logger.debug("Captured {} tables from {} characters of markup", len(tables), len(html))
    return tables


class FilePageSource:
    """Reads a saved HTML snapshot from disk instead of the network.

    ``url`` is ignored unless no ``path`` was configured, in which case it is
    treated as a local file path (``file://`` prefixes are accepted).
    """

    def __init__(self, path: str | Path | None = None, encoding: str = "utf-8") -> None:
        self.path = Path(path) if path is not None else None
        self.encoding = encoding

    def _resolve(self, url: str) -> Path:
        if self.path is not None:
            return self.path
        return Path(url.removeprefix("file://"))

    async def fetch(self, url: str, ready_timeout: float) -> list[RawTable]:
        path = self._resolve(url)
        try:
            html = await asyncio.wait_for(
                asyncio.to_thread(path.read_text, encoding=self.encoding),
                timeout=ready_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise FetchError(
                f"Timed out reading {path}", FetchErrorKind.TIMEOUT, url=str(path)
            ) from exc
        except OSError as exc:
            raise FetchError(
                f"Unable to read {path}: {exc}", FetchErrorKind.NAVIGATION_FAILED, url=str(path)
            ) from exc
        return parse_tables(html)


__all__ = ["FilePageSource", "parse_tables"]
