"""Headless browser page source for script-rendered vendor pages."""

from __future__ import annotations

import asyncio

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from goldrates.core.exceptions.base import FetchError, FetchErrorKind
from goldrates.core.logging import logger
from goldrates.core.models.tables import RawTable
from goldrates.core.sources.markup import parse_tables


class BrowserPageSource:
    """Loads a page in headless Chromium and captures the rendered tables.

    The page is considered ready once the ``load`` event fired and the network
    went idle; ``settle_delay`` then gives late AJAX updates time to land in
    the DOM before the markup is read.
    """

    def __init__(self, headless: bool = True, settle_delay: float = 3.0) -> None:
        self.headless = headless
        self.settle_delay = settle_delay

    async def fetch(self, url: str, ready_timeout: float) -> list[RawTable]:
        timeout_ms = ready_timeout * 1000
        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=self.headless)
                try:
                    page = await browser.new_page()
                    await page.goto(url, wait_until="load", timeout=timeout_ms)
                    await page.wait_for_load_state("networkidle", timeout=timeout_ms)
                    if self.settle_delay > 0:
                        await asyncio.sleep(self.settle_delay)
                    html = await page.content()
                finally:
                    await browser.close()
        except PlaywrightTimeoutError as exc:
            raise FetchError(
                f"Page {url} not ready within {ready_timeout}s",
                FetchErrorKind.TIMEOUT,
                url=url,
            ) from exc
        except PlaywrightError as exc:
            raise FetchError(
                f"Navigation to {url} failed: {exc.message}",
                FetchErrorKind.NAVIGATION_FAILED,
                url=url,
            ) from exc

        logger.debug("Rendered {} ({} characters)", url, len(html))
        return parse_tables(html)


__all__ = ["BrowserPageSource"]
