"""ContentElement - the canonical per-element output unit.

This module provides:
- ContentType: Output element type constants
- content_type_for: Category -> ContentType mapping
- ContentElement: One recognized or placeholder element of a page
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from .bbox import BBox
from .layout import LayoutBox, LayoutCategory


class ContentType:
    """Output element types."""

    TEXT = "text"
    TITLE = "title"
    IMAGE = "image"
    TABLE = "table"
    EQUATION = "equation"
    CODE = "code"
    LIST = "list"
    HEADER = "header"
    FOOTER = "footer"
    REFERENCE = "reference"
    UNKNOWN = "unknown"


_CATEGORY_CONTENT_TYPES: dict[str, str] = {
    LayoutCategory.TEXT: ContentType.TEXT,
    LayoutCategory.TITLE: ContentType.TITLE,
    LayoutCategory.FIGURE: ContentType.IMAGE,
    LayoutCategory.STAMP: ContentType.IMAGE,
    LayoutCategory.FIGURE_CAPTION: ContentType.TEXT,
    LayoutCategory.TABLE: ContentType.TABLE,
    LayoutCategory.TABLE_CAPTION: ContentType.TEXT,
    LayoutCategory.TABLE_FOOTNOTE: ContentType.TEXT,
    LayoutCategory.HEADER: ContentType.HEADER,
    LayoutCategory.FOOTER: ContentType.FOOTER,
    LayoutCategory.REFERENCE: ContentType.REFERENCE,
    LayoutCategory.EQUATION: ContentType.EQUATION,
    LayoutCategory.INTERLINE_EQUATION: ContentType.EQUATION,
    LayoutCategory.CODE: ContentType.CODE,
    LayoutCategory.TOC: ContentType.TEXT,
    LayoutCategory.ABSTRACT: ContentType.TEXT,
    LayoutCategory.CONTENT: ContentType.TEXT,
    LayoutCategory.LIST: ContentType.LIST,
    LayoutCategory.INDEX: ContentType.TEXT,
}


def content_type_for(category: str) -> str:
    """Return the ContentType an element of this category is emitted as."""
    return _CATEGORY_CONTENT_TYPES.get(category, ContentType.UNKNOWN)


@dataclass(frozen=True)
class ContentElement:
    """One element of a page's output.

    Exactly one of ``text``, ``image_path`` or ``html`` carries the payload,
    depending on ``type``. ``skipped`` marks elements for which no collaborator
    produced real content and ``text``/``html`` holds a placeholder instead.

    ``reading_order`` is None until the page is ordered, then stamped once
    through ``with_reading_order``; instances are never mutated.
    """

    type: str
    box: LayoutBox
    page_index: int
    text: str = ""
    image_path: str = ""
    html: str = ""
    confidence: float = 0.0
    reading_order: int | None = None
    skipped: bool = False

    @property
    def bbox(self) -> BBox:
        return self.box.bbox

    @property
    def category(self) -> str:
        return self.box.category

    @property
    def payload(self) -> str:
        """The element's content, whichever field carries it."""
        if self.type == ContentType.TABLE:
            return self.html
        if self.type == ContentType.IMAGE:
            return self.image_path
        return self.text

    def with_reading_order(self, order: int) -> ContentElement:
        """Return a copy stamped with its reading order.

        Raises:
            ValueError: If the element was already ordered
        """
        if self.reading_order is not None:
            raise ValueError(
                f"Element {self.box.index} on page {self.page_index} already has reading order {self.reading_order}"
            )
        return dataclasses.replace(self, reading_order=order)

    def normalized_bbox(self, page_width: int, page_height: int) -> list[int]:
        return self.bbox.normalized(page_width, page_height)

    def to_dict(self, page_width: int | None = None, page_height: int | None = None) -> dict[str, Any]:
        """Convert to JSON-serializable dict.

        When page dimensions are given the bbox is normalized to 0-1000,
        otherwise it is reported in page pixels.
        """
        result: dict[str, Any] = {}
        if self.reading_order is not None:
            result["reading_order"] = self.reading_order
        result["type"] = self.type
        result["category"] = self.category
        result["page_idx"] = self.page_index

        if page_width and page_height:
            result["bbox"] = self.normalized_bbox(page_width, page_height)
        else:
            result["bbox"] = self.bbox.to_list()

        if self.text:
            result["text"] = self.text
        if self.image_path:
            result["img_path"] = self.image_path
        if self.html:
            result["html"] = self.html
        if self.confidence:
            result["confidence"] = self.confidence
        if self.skipped:
            result["skipped"] = True
        return result
