"""Page source protocol used by the extraction pipeline."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from goldrates.core.models.tables import RawTable


@runtime_checkable
class PageSource(Protocol):
    """Renders a vendor page and returns every table in document order."""

    async def fetch(self, url: str, ready_timeout: float) -> list[RawTable]:
        """Fetch ``url`` and capture its tables.

        Raises:
            FetchError: when the page cannot be rendered within ``ready_timeout``
                seconds or navigation fails.
        """
        ...


__all__ = ["PageSource"]
