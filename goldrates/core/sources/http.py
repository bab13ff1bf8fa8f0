"""Plain HTTP page source for vendor pages rendered server-side."""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx

from goldrates.core.exceptions.base import FetchError, FetchErrorKind
from goldrates.core.logging import logger
from goldrates.core.models.tables import RawTable
from goldrates.core.sources.markup import parse_tables


@dataclass
class HttpSourceConfig:
    """Configuration for HTTP client behavior."""

    user_agent: str = "goldrates/0.1.0"
    max_redirects: int = 5
    verify_ssl: bool = True
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.max_redirects < 0:
            raise ValueError("max_redirects must be non-negative")


class HttpPageSource:
    """Fetches a page with httpx and parses its tables without running scripts."""

    def __init__(
        self,
        config: HttpSourceConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or HttpSourceConfig()
        self._transport = transport

    def _client(self, ready_timeout: float) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(ready_timeout),
            follow_redirects=True,
            max_redirects=self.config.max_redirects,
            verify=self.config.verify_ssl,
            headers={"User-Agent": self.config.user_agent, **self.config.headers},
            transport=self._transport,
        )

    async def fetch(self, url: str, ready_timeout: float) -> list[RawTable]:
        async with self._client(ready_timeout) as client:
            try:
                response = await client.get(url)
                response.raise_for_status()
            except httpx.TimeoutException as exc:
                raise FetchError(
                    f"Timed out after {ready_timeout}s loading {url}",
                    FetchErrorKind.TIMEOUT,
                    url=url,
                ) from exc
            except httpx.HTTPStatusError as exc:
                raise FetchError(
                    f"HTTP {exc.response.status_code} loading {url}",
                    FetchErrorKind.NAVIGATION_FAILED,
                    url=url,
                    details={"status_code": exc.response.status_code},
                ) from exc
            except httpx.HTTPError as exc:
                raise FetchError(
                    f"Navigation to {url} failed: {exc}",
                    FetchErrorKind.NAVIGATION_FAILED,
                    url=url,
                ) from exc

        logger.debug("Fetched {} ({} bytes)", url, len(response.content))
        return parse_tables(response.text)


__all__ = ["HttpPageSource", "HttpSourceConfig"]
