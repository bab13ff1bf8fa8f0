"""Run orchestration across vendors."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Iterable, Mapping

from goldrates.core.logging import logger
from goldrates.core.models.rates import ExtractionOutcome
from goldrates.core.models.vendors import VendorProfile
from goldrates.core.pipeline import ExtractionPipeline
from goldrates.core.sources.base import PageSource
from goldrates.core.storage.rate_store import RateStore
from goldrates.core.vendors.loader import get_profile

PageSourceFactory = Callable[[VendorProfile], PageSource]


class RunCoordinator:
    """Schedules pipeline runs, at most one in flight per vendor.

    Runs for different vendors proceed concurrently; a second request for a
    vendor that is already running waits for the first to finish.
    """

    def __init__(
        self,
        profiles: Mapping[str, VendorProfile],
        page_source_factory: PageSourceFactory,
        rate_store: RateStore,
        pipeline: ExtractionPipeline | None = None,
    ) -> None:
        self.profiles = dict(profiles)
        self.page_source_factory = page_source_factory
        self.rate_store = rate_store
        self.pipeline = pipeline or ExtractionPipeline()
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock_for(self, vendor_id: str) -> asyncio.Lock:
        lock = self._locks.get(vendor_id)
        if lock is None:
            lock = self._locks[vendor_id] = asyncio.Lock()
        return lock

    def is_running(self, vendor_id: str) -> bool:
        lock = self._locks.get(vendor_id)
        return lock is not None and lock.locked()

    async def run(self, vendor_id: str) -> ExtractionOutcome:
        profile = get_profile(self.profiles, vendor_id)
        lock = self._lock_for(vendor_id)
        if lock.locked():
            logger.bind(vendor=vendor_id).info("Run already in progress; waiting")
        async with lock:
            return await self.pipeline.run(profile, self.page_source_factory(profile), self.rate_store)

    async def run_many(self, vendor_ids: Iterable[str]) -> list[ExtractionOutcome]:
        """Run each vendor concurrently; outcomes follow the input order."""

        ids = list(vendor_ids)
        for vendor_id in ids:
            get_profile(self.profiles, vendor_id)
        return list(await asyncio.gather(*(self.run(vendor_id) for vendor_id in ids)))


__all__ = ["PageSourceFactory", "RunCoordinator"]
