"""Per-page orchestration.

A page moves through ``PageState.ORDER``:
DETECTING -> ROUTING -> RECOGNIZING -> ORDERING -> ASSEMBLED.
Transitions are unconditional; there are no retries at this layer.
"""

from __future__ import annotations

import logging
import time

from docflow.config import PipelineConfig
from docflow.exceptions import InvalidConfigError
from docflow.layout.ordering import XYCutSorter
from docflow.misc import elapsed_ms
from docflow.routing import CapabilityFilter, RoutedBoxes
from docflow.stages import (
    DetectionStage,
    FigureExtractionStage,
    OrderingStage,
    RoutingStage,
    TableRecognitionStage,
    TextRecognitionStage,
    UnsupportedElementStage,
)
from docflow.types import (
    ContentElement,
    ImageExtractor,
    LayoutDetector,
    LayoutResult,
    PageImage,
    PageResult,
    PageState,
    StageTimingInfo,
    TableRecognizer,
    TextRecognizer,
)

logger = logging.getLogger(__name__)


class PageOrchestrator:
    """Runs the per-page stage sequence and assembles one PageResult.

    Holds no per-page state, so one instance may process different pages
    from several threads as long as the injected collaborators allow it.

    Example:
        >>> orchestrator = PageOrchestrator(detector, text_recognizer=ocr, config=config)
        >>> result = orchestrator.process_page(page)
        >>> [element.reading_order for element in result.elements]
        [0, 1, 2, 3]
    """

    def __init__(
        self,
        detector: LayoutDetector,
        *,
        text_recognizer: TextRecognizer | None = None,
        table_recognizer: TableRecognizer | None = None,
        image_extractor: ImageExtractor | None = None,
        config: PipelineConfig | None = None,
    ):
        self.config = config if config is not None else PipelineConfig()
        self.capability_filter = CapabilityFilter.from_config(
            self.config,
            has_text_recognizer=text_recognizer is not None,
            has_table_recognizer=table_recognizer is not None,
            has_image_extractor=image_extractor is not None,
        )

        self.detection_stage = DetectionStage(detector)
        self.routing_stage = RoutingStage(self.capability_filter)
        self.text_stage = TextRecognitionStage(text_recognizer) if text_recognizer is not None else None
        self.table_stage = (
            TableRecognitionStage(table_recognizer, self.capability_filter) if table_recognizer is not None else None
        )
        self.figure_stage = FigureExtractionStage(image_extractor) if image_extractor is not None else None
        self.unsupported_stage = UnsupportedElementStage(self.capability_filter)

        sorter = XYCutSorter(self.config.reading_order_config()) if self.config.enable_reading_order else None
        self.ordering_stage = OrderingStage(sorter)

    def process_page(self, page: PageImage) -> PageResult:
        """Process one page raster into an ordered PageResult.

        Raises:
            InvalidConfigError: If the page raster has no positive width or height
            StageError: If a collaborator fails with anything but RecognitionError
        """
        if page.image is None or page.image.ndim < 2 or page.width <= 0 or page.height <= 0:
            raise InvalidConfigError(f"Page {page.page_index} has no positive dimensions")

        start_time = time.perf_counter()
        timings: list[StageTimingInfo] = []

        # Detecting
        state = PageState.DETECTING
        layout = LayoutResult()
        if self.config.enable_layout:
            detected = self.detection_stage.process_with_result(page)
            layout = detected.data
            timings.append(detected.timing())

        if layout.is_empty:
            logger.debug("Page %d: no layout boxes, assembled empty", page.page_index)
            return self._assemble(page, layout, [], timings, start_time)

        # Routing
        state = self._advance(page, state)
        routed_result = self.routing_stage.process_with_result(layout)
        routed = routed_result.data
        timings.append(routed_result.timing())

        # Recognizing
        state = self._advance(page, state)
        elements = self._recognize(page, routed, timings)

        # Ordering
        state = self._advance(page, state)
        ordered = self.ordering_stage.process_with_result(
            elements, page_width=page.width, page_height=page.height
        )
        timings.append(ordered.timing())

        self._advance(page, state)
        return self._assemble(page, layout, ordered.data, timings, start_time)

    def _recognize(self, page: PageImage, routed: RoutedBoxes, timings: list[StageTimingInfo]) -> list[ContentElement]:
        """Run every non-empty bucket through its stage, collecting all elements."""
        elements: list[ContentElement] = []
        for stage, boxes in (
            (self.text_stage, routed.text),
            (self.table_stage, routed.table),
            (self.figure_stage, routed.figure),
            (self.unsupported_stage, routed.unsupported),
        ):
            if not boxes:
                continue
            # Buckets are only filled when their collaborator exists
            assert stage is not None
            result = stage.process_with_result(boxes, page=page, page_index=page.page_index)
            elements.extend(result.data)
            timings.append(result.timing())
        return elements

    @staticmethod
    def _advance(page: PageImage, state: str) -> str:
        next_state = PageState.ORDER[PageState.ORDER.index(state) + 1]
        logger.debug("Page %d: %s -> %s", page.page_index, state, next_state)
        return next_state

    @staticmethod
    def _assemble(
        page: PageImage,
        layout: LayoutResult,
        elements: list[ContentElement],
        timings: list[StageTimingInfo],
        start_time: float,
    ) -> PageResult:
        result = PageResult(
            page_index=page.page_index,
            width=page.width,
            height=page.height,
            elements=elements,
            layout=layout,
            stage_timings=timings,
            total_time_ms=elapsed_ms(start_time),
            state=PageState.ASSEMBLED,
        )
        logger.info(
            "Page %d assembled: %d elements (%d skipped) in %.1fms",
            page.page_index,
            len(result.elements),
            result.skipped_count,
            result.total_time_ms,
        )
        return result
