"""Fetch, classify, extract and store one vendor's rate snapshot."""

from __future__ import annotations

import asyncio
from time import perf_counter

from goldrates.core.exceptions.base import FetchError, FetchErrorKind, StoreError
from goldrates.core.exceptions.codes import ErrorCode
from goldrates.core.extraction.classifier import TableClassifier
from goldrates.core.extraction.labels import LabelNormalizer
from goldrates.core.extraction.rows import RowExtractor
from goldrates.core.logging import log_context, logger
from goldrates.core.models.rates import ExtractionBatch, ExtractionOutcome, RateRecord
from goldrates.core.models.tables import RawTable
from goldrates.core.models.vendors import HeaderSkipStrategy, VendorProfile
from goldrates.core.sources.base import PageSource
from goldrates.core.storage.rate_store import RateStore

NO_DATA_REASON = "no data extracted"


class ExtractionPipeline:
    """Runs one extraction for one vendor.

    The run is strictly sequential. The page fetch is the only suspension
    point and is bounded twice: by ``ready_timeout`` inside the page source
    and by ``hard_timeout`` around the whole fetch. Nothing is retried here;
    scheduling and retries belong to the caller.
    """

    def __init__(
        self,
        classifier: TableClassifier | None = None,
        extractor: RowExtractor | None = None,
        *,
        ready_timeout: float = 15.0,
        hard_timeout: float = 60.0,
    ) -> None:
        self.classifier = classifier or TableClassifier()
        self.extractor = extractor or RowExtractor(LabelNormalizer())
        self.ready_timeout = ready_timeout
        self.hard_timeout = hard_timeout

    async def run(
        self,
        profile: VendorProfile,
        page_source: PageSource,
        rate_store: RateStore,
    ) -> ExtractionOutcome:
        with log_context(vendor=profile.vendor_id):
            start = perf_counter()
            outcome = await self._run(profile, page_source, rate_store)
            duration_ms = (perf_counter() - start) * 1000
            if outcome.success:
                logger.info(
                    "Run succeeded: {} records in {} ({:.0f} ms)",
                    outcome.record_count,
                    ", ".join(outcome.categories_written),
                    duration_ms,
                )
            else:
                logger.bind(error_code=outcome.error_code).error("Run failed: {}", outcome.reason)
            return outcome

    async def _run(
        self,
        profile: VendorProfile,
        page_source: PageSource,
        rate_store: RateStore,
    ) -> ExtractionOutcome:
        try:
            tables = await self.fetch(profile, page_source)
        except FetchError as exc:
            return self._failure(profile, exc.message, exc.error_code)

        batch = self.extract(tables, profile)
        if batch.is_empty:
            return self._failure(profile, NO_DATA_REASON, ErrorCode.EMPTY_BATCH.value, batch=batch)

        written: list[str] = []
        for category, records in batch.by_category().items():
            try:
                rate_store.replace(profile.vendor_id, category, records)
            except StoreError as exc:
                return self._failure(
                    profile,
                    exc.message,
                    exc.error_code,
                    batch=batch,
                    categories_written=tuple(written),
                )
            written.append(category)

        stale = tuple(signature.tag for signature in profile.categories if signature.tag not in written)
        if stale:
            logger.warning("Kept stored rows for {}: no records extracted this run", ", ".join(stale))
        return ExtractionOutcome(
            success=True,
            record_count=len(batch),
            vendor_id=profile.vendor_id,
            batch=batch,
            categories_written=tuple(written),
            stale_categories=stale,
        )

    async def fetch(self, profile: VendorProfile, page_source: PageSource) -> list[RawTable]:
        """Fetch the vendor page, converting the hard timeout into :class:`FetchError`."""

        logger.info("Fetching {}", profile.url or "<no url>")
        try:
            tables = await asyncio.wait_for(
                page_source.fetch(profile.url, self.ready_timeout),
                timeout=self.hard_timeout,
            )
        except asyncio.TimeoutError as exc:
            raise FetchError(
                f"Fetch exceeded hard timeout of {self.hard_timeout}s",
                FetchErrorKind.TIMEOUT,
                url=profile.url or None,
            ) from exc
        logger.info("Found {} tables on the page", len(tables))
        return tables

    def extract(self, tables: list[RawTable], profile: VendorProfile) -> ExtractionBatch:
        """Classify ``tables`` and extract every category into a single batch.

        Performs no I/O; offline parsing calls it directly.
        """

        matches = self.classifier.match(tables, profile)
        records: list[RateRecord] = []
        for signature in profile.categories:
            match = matches.get(signature.tag)
            if match is None:
                continue
            header_skip = None
            # Row 0 is only known to be a header on the first table of the page.
            if match.index > 0 and profile.header_skip_for(signature.tag) is HeaderSkipStrategy.BY_POSITION:
                header_skip = HeaderSkipStrategy.BY_CONTENT_FILTER
            records.extend(self.extractor.extract(match.table, signature.tag, profile, header_skip))
        return ExtractionBatch(vendor_id=profile.vendor_id, records=tuple(records))

    @staticmethod
    def _failure(
        profile: VendorProfile,
        reason: str,
        error_code: str,
        *,
        batch: ExtractionBatch | None = None,
        categories_written: tuple[str, ...] = (),
    ) -> ExtractionOutcome:
        return ExtractionOutcome(
            success=False,
            record_count=len(batch) if batch is not None else 0,
            reason=reason,
            vendor_id=profile.vendor_id,
            batch=batch,
            categories_written=categories_written,
            error_code=error_code,
        )


__all__ = ["ExtractionPipeline", "NO_DATA_REASON"]
