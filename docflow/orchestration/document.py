"""Document orchestration.

Pages are rendered with bounded parallelism, resequenced to page index,
then processed one at a time in page order. Per-page results are folded
into the DocumentResult after the loop, so no counter is shared between
threads.
"""

from __future__ import annotations

import dataclasses
import logging
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import Future, ThreadPoolExecutor

from docflow.constants import DEFAULT_MAX_CONCURRENT_PAGES
from docflow.exceptions import InvalidConfigError, PageProcessingError
from docflow.misc import elapsed_ms, tz_now
from docflow.types import (
    DocumentResult,
    NullProgressObserver,
    OutputSerializer,
    PageImage,
    PageResult,
    PageSource,
    ProgressObserver,
    StageTimingInfo,
    merge_stage_timings,
)

from .page import PageOrchestrator

logger = logging.getLogger(__name__)

STAGE_RENDER = "render"
STAGE_PROCESSING = "processing"
STAGE_OUTPUT = "output"


def _render(source: PageSource, page_index: int) -> tuple[PageImage, float]:
    start_time = time.perf_counter()
    page = source.render_page(page_index)
    return page, elapsed_ms(start_time)


class DocumentOrchestrator:
    """Runs a PageOrchestrator over every page of a document.

    Attributes:
        page_orchestrator: Per-page processor
        max_pages: Stop submitting pages after this many (None = all)
        max_concurrent_pages: Page renders allowed in flight at once
        serializers: Output serializers run once the document is assembled
        observer: Progress observer (no-op by default)
    """

    def __init__(
        self,
        page_orchestrator: PageOrchestrator,
        *,
        max_pages: int | None = None,
        max_concurrent_pages: int = DEFAULT_MAX_CONCURRENT_PAGES,
        serializers: Sequence[OutputSerializer] = (),
        observer: ProgressObserver | None = None,
    ):
        if max_concurrent_pages < 1:
            raise InvalidConfigError(f"max_concurrent_pages must be >= 1, got {max_concurrent_pages}")
        self.page_orchestrator = page_orchestrator
        self.max_pages = max_pages or None
        self.max_concurrent_pages = max_concurrent_pages
        self.serializers = list(serializers)
        self.observer: ProgressObserver = observer if observer is not None else NullProgressObserver()

    def _page_limit(self, total: int) -> int:
        return min(total, self.max_pages) if self.max_pages else total

    def process(self, source: PageSource) -> DocumentResult:
        """Render and process every page of a source.

        Returns:
            DocumentResult; empty (status "empty") when the source has no pages
        """
        start_time = time.perf_counter()
        total_pages = source.page_count()
        if total_pages <= 0:
            logger.warning("Page source yielded no pages, returning empty result")
            return self._empty_result(start_time)

        limit = self._page_limit(total_pages)
        if limit < total_pages:
            logger.info("Processing first %d of %d pages (max_pages cutoff)", limit, total_pages)

        pages: list[PageResult] = []
        render_timings: list[StageTimingInfo] = []

        executor = ThreadPoolExecutor(max_workers=self.max_concurrent_pages, thread_name_prefix="docflow-render")
        try:
            in_flight: dict[int, Future[tuple[PageImage, float]]] = {}
            next_to_submit = 0
            for page_index in range(limit):
                # Keep at most max_concurrent_pages renders in flight
                while next_to_submit < limit and len(in_flight) < self.max_concurrent_pages:
                    in_flight[next_to_submit] = executor.submit(_render, source, next_to_submit)
                    next_to_submit += 1

                future = in_flight.pop(page_index)
                try:
                    page, render_ms = future.result()
                except PageProcessingError as e:
                    logger.warning("Page %d could not be rendered: %s", page_index, e)
                    pages.append(PageResult.failed(page_index, str(e)))
                    self.observer.on_progress(STAGE_PROCESSING, page_index + 1, limit)
                    continue

                if page.page_index != page_index:
                    logger.warning(
                        "Page source returned index %d for page %d, using %d",
                        page.page_index,
                        page_index,
                        page_index,
                    )
                    page = dataclasses.replace(page, page_index=page_index)

                render_timings.append(StageTimingInfo(STAGE_RENDER, render_ms, 1))
                self.observer.on_progress(STAGE_RENDER, page_index + 1, limit)

                pages.append(self.page_orchestrator.process_page(page))
                self.observer.on_progress(STAGE_PROCESSING, page_index + 1, limit)
        finally:
            executor.shutdown(wait=True, cancel_futures=True)

        return self._finish(pages, render_timings, total_pages, limit < total_pages, start_time)

    def process_pages(self, pages: Iterable[PageImage]) -> DocumentResult:
        """Process already rendered pages, which may arrive in any order.

        Pages are resequenced by page_index before processing.
        """
        start_time = time.perf_counter()
        ordered = sorted(pages, key=lambda page: page.page_index)
        if not ordered:
            logger.warning("No pages given, returning empty result")
            return self._empty_result(start_time)

        limit = self._page_limit(len(ordered))
        results: list[PageResult] = []
        for position, page in enumerate(ordered[:limit], start=1):
            results.append(self.page_orchestrator.process_page(page))
            self.observer.on_progress(STAGE_PROCESSING, position, limit)

        return self._finish(results, [], len(ordered), limit < len(ordered), start_time)

    def _empty_result(self, start_time: float) -> DocumentResult:
        result = DocumentResult.empty()
        result.total_time_ms = elapsed_ms(start_time)
        result.processed_at = tz_now()
        return result

    def _finish(
        self,
        pages: list[PageResult],
        render_timings: list[StageTimingInfo],
        total_pages: int,
        stopped: bool,
        start_time: float,
    ) -> DocumentResult:
        """Fold page results into the document and run the serializers."""
        timings = list(render_timings)
        for page in pages:
            timings.extend(page.stage_timings)

        document = DocumentResult(
            pages=pages,
            total_pages=total_pages,
            processed_pages=sum(1 for page in pages if not page.is_failed),
            skipped_elements=sum(page.skipped_count for page in pages),
            processing_stopped=stopped,
            stage_timings=list(merge_stage_timings(timings).values()),
            total_time_ms=elapsed_ms(start_time),
        )

        output_start = time.perf_counter()
        for position, serializer in enumerate(self.serializers, start=1):
            document.outputs[serializer.name] = serializer.serialize(document)
            self.observer.on_progress(STAGE_OUTPUT, position, len(self.serializers))
        if self.serializers:
            timings.append(StageTimingInfo(STAGE_OUTPUT, elapsed_ms(output_start), len(self.serializers)))

        document.stage_timings = list(merge_stage_timings(timings).values())
        document.total_time_ms = elapsed_ms(start_time)
        document.processed_at = tz_now()

        logger.info(
            "Document processing complete: %d/%d pages, %d skipped elements, %.1fms",
            document.processed_pages,
            document.total_pages,
            document.skipped_elements,
            document.total_time_ms,
        )
        return document
