"""Detection Stage: Layout region detection."""

from __future__ import annotations

import logging
from typing import Any

from docflow.exceptions import DetectionError
from docflow.types import LayoutDetector, LayoutResult, PageImage

from .base import BaseStage

logger = logging.getLogger(__name__)


class DetectionStage(BaseStage[PageImage, LayoutResult]):
    """Detects labeled regions on a page with the injected LayoutDetector.

    The detector's own reported timing is kept on the LayoutResult.
    """

    name = "layout"

    def __init__(self, detector: LayoutDetector):
        self.detector = detector

    def _process_impl(self, input_data: PageImage, **context: Any) -> LayoutResult:
        result = self.detector.detect(input_data)
        if not isinstance(result, LayoutResult):
            raise DetectionError(
                f"Detector returned {type(result).__name__} for page {input_data.page_index}, expected LayoutResult"
            )

        logger.debug("Page %d: detected %d layout boxes", input_data.page_index, len(result.boxes))
        return result
