"""Recognition Stages: Per-bucket content production.

One stage per routing bucket:
- TextRecognitionStage: text-like regions -> TextRecognizer
- TableRecognitionStage: tables -> wired/wireless estimate, then TableRecognizer
- FigureExtractionStage: figures -> ImageExtractor
- UnsupportedElementStage: placeholders for regions nothing can handle

Each routed box yields exactly one ContentElement, except figures whose
region has zero area inside the page, which are dropped. A RecognitionError
from a collaborator becomes a skipped element with a diagnostic payload;
any other exception propagates.
"""

from __future__ import annotations

import logging
from typing import Any

from docflow.exceptions import RecognitionError
from docflow.routing import CapabilityFilter, Placeholder
from docflow.types import (
    ContentElement,
    ContentType,
    ImageExtractor,
    LayoutBox,
    PageImage,
    TableRecognizer,
    TableType,
    TextRecognizer,
    content_type_for,
)

from .base import BaseStage

logger = logging.getLogger(__name__)


def _require_page(stage: str, context: dict[str, Any]) -> PageImage:
    page = context.get("page")
    if page is None:
        raise ValueError(f"{stage} requires 'page' in context")
    return page


class TextRecognitionStage(BaseStage[list[LayoutBox], list[ContentElement]]):
    """Reads text-like regions with the injected TextRecognizer."""

    name = "ocr"

    def __init__(self, recognizer: TextRecognizer):
        self.recognizer = recognizer

    def _process_impl(self, input_data: list[LayoutBox], **context: Any) -> list[ContentElement]:
        page = _require_page(self.name, context)
        elements: list[ContentElement] = []

        for box in input_data:
            element_type = content_type_for(box.category)
            try:
                text, confidence = self.recognizer.recognize(page, box)
            except RecognitionError as e:
                logger.warning("Page %d: text recognition failed for box %d: %s", page.page_index, box.index, e)
                elements.append(
                    ContentElement(
                        type=element_type,
                        box=box,
                        page_index=page.page_index,
                        text=Placeholder.text_failed(e),
                        skipped=True,
                    )
                )
                continue

            elements.append(
                ContentElement(
                    type=element_type,
                    box=box,
                    page_index=page.page_index,
                    text=text,
                    confidence=confidence,
                )
            )

        return elements


class TableRecognitionStage(BaseStage[list[LayoutBox], list[ContentElement]]):
    """Recognizes table structure, short-circuiting tables the filter rejects.

    The estimate always runs before the recognizer. Tables whose estimated
    type is not enabled (wireless by default) become skipped placeholders
    without reaching the recognizer.
    """

    name = "table"

    def __init__(self, recognizer: TableRecognizer, capability_filter: CapabilityFilter):
        self.recognizer = recognizer
        self.capability_filter = capability_filter

    def _process_impl(self, input_data: list[LayoutBox], **context: Any) -> list[ContentElement]:
        page = _require_page(self.name, context)
        elements: list[ContentElement] = []

        for box in input_data:
            crop = box.bbox.crop(page.image)
            table_type = self.recognizer.estimate_type(crop)

            if not self.capability_filter.supports_table_type(table_type):
                logger.warning(
                    "Page %d: skipping %s table at (%d, %d)",
                    page.page_index,
                    table_type,
                    box.bbox.x0,
                    box.bbox.y0,
                )
                html = Placeholder.WIRELESS_TABLE if table_type == TableType.WIRELESS else Placeholder.TABLE_DISABLED
                elements.append(
                    ContentElement(type=ContentType.TABLE, box=box, page_index=page.page_index, html=html, skipped=True)
                )
                continue

            try:
                html, supported = self.recognizer.recognize(page, box)
            except RecognitionError as e:
                logger.warning("Page %d: table recognition failed for box %d: %s", page.page_index, box.index, e)
                elements.append(
                    ContentElement(
                        type=ContentType.TABLE,
                        box=box,
                        page_index=page.page_index,
                        html=Placeholder.table_failed(e),
                        skipped=True,
                    )
                )
                continue

            elements.append(
                ContentElement(
                    type=ContentType.TABLE,
                    box=box,
                    page_index=page.page_index,
                    html=html,
                    confidence=box.confidence,
                    skipped=not supported,
                )
            )

        return elements


class FigureExtractionStage(BaseStage[list[LayoutBox], list[ContentElement]]):
    """Stores figure regions and references them from image elements."""

    name = "figure"

    def __init__(self, extractor: ImageExtractor):
        self.extractor = extractor

    def _process_impl(self, input_data: list[LayoutBox], **context: Any) -> list[ContentElement]:
        page = _require_page(self.name, context)
        elements: list[ContentElement] = []

        for box in input_data:
            if box.bbox.clip(page.width, page.height).area == 0:
                logger.debug("Page %d: dropping figure %d with empty crop", page.page_index, box.index)
                continue

            element_type = content_type_for(box.category)
            try:
                image_path = self.extractor.extract(page, box)
            except RecognitionError as e:
                logger.warning("Page %d: figure extraction failed for box %d: %s", page.page_index, box.index, e)
                elements.append(
                    ContentElement(
                        type=element_type,
                        box=box,
                        page_index=page.page_index,
                        text=Placeholder.figure_failed(e),
                        skipped=True,
                    )
                )
                continue

            elements.append(
                ContentElement(
                    type=element_type,
                    box=box,
                    page_index=page.page_index,
                    image_path=image_path,
                    confidence=box.confidence,
                )
            )

        return elements


class UnsupportedElementStage(BaseStage[list[LayoutBox], list[ContentElement]]):
    """Emits a skipped placeholder element for every unsupported region."""

    name = "unsupported"

    def __init__(self, capability_filter: CapabilityFilter):
        self.capability_filter = capability_filter

    def _process_impl(self, input_data: list[LayoutBox], **context: Any) -> list[ContentElement]:
        page_index = context.get("page_index", 0)
        elements: list[ContentElement] = []

        for box in input_data:
            element_type = content_type_for(box.category)
            placeholder = self.capability_filter.placeholder_for(box.category)
            logger.debug(
                "Skipping unsupported element: %s at (%d, %d)",
                box.category,
                box.bbox.x0,
                box.bbox.y0,
            )
            if element_type == ContentType.TABLE:
                element = ContentElement(
                    type=element_type, box=box, page_index=page_index, html=placeholder, skipped=True
                )
            else:
                element = ContentElement(
                    type=element_type, box=box, page_index=page_index, text=placeholder, skipped=True
                )
            elements.append(element)

        return elements
