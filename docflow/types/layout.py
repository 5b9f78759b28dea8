"""Layout detection types.

This module provides:
- LayoutCategory: Standardized layout category constants
- LayoutCategoryMapper: Maps detector class ids and labels to categories
- LayoutBox: One detected region (immutable)
- LayoutResult: All regions a detector returned for a page, with its timing
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .bbox import BBox


class LayoutCategory:
    """Standardized layout categories (PP-DocLayout label set).

    Detectors should map their own labels to these values through
    LayoutCategoryMapper before boxes enter the pipeline. Anything that
    cannot be mapped becomes UNKNOWN.
    """

    TEXT = "text"
    TITLE = "title"
    FIGURE = "figure"
    FIGURE_CAPTION = "figure_caption"
    TABLE = "table"
    TABLE_CAPTION = "table_caption"
    TABLE_FOOTNOTE = "table_footnote"
    HEADER = "header"
    FOOTER = "footer"
    REFERENCE = "reference"
    EQUATION = "equation"
    INTERLINE_EQUATION = "interline_equation"
    STAMP = "stamp"
    CODE = "code"
    TOC = "toc"
    ABSTRACT = "abstract"
    CONTENT = "content"
    LIST = "list"
    INDEX = "index"
    SEPARATOR = "separator"
    UNKNOWN = "unknown"


class LayoutCategoryMapper:
    """Maps detector-specific class ids and labels to LayoutCategory values."""

    CLASS_ID_MAP: dict[int, str] = {
        0: LayoutCategory.TEXT,
        1: LayoutCategory.TITLE,
        2: LayoutCategory.FIGURE,
        3: LayoutCategory.FIGURE_CAPTION,
        4: LayoutCategory.TABLE,
        5: LayoutCategory.TABLE_CAPTION,
        6: LayoutCategory.TABLE_FOOTNOTE,
        7: LayoutCategory.HEADER,
        8: LayoutCategory.FOOTER,
        9: LayoutCategory.REFERENCE,
        10: LayoutCategory.EQUATION,
        11: LayoutCategory.INTERLINE_EQUATION,
        12: LayoutCategory.STAMP,
        13: LayoutCategory.CODE,
        14: LayoutCategory.TOC,
        15: LayoutCategory.ABSTRACT,
        16: LayoutCategory.CONTENT,
        17: LayoutCategory.LIST,
        18: LayoutCategory.INDEX,
        19: LayoutCategory.SEPARATOR,
    }

    LABEL_ALIASES: dict[str, str] = {
        "plain text": LayoutCategory.TEXT,
        "paragraph": LayoutCategory.TEXT,
        "doc_title": LayoutCategory.TITLE,
        "paragraph_title": LayoutCategory.TITLE,
        "image": LayoutCategory.FIGURE,
        "chart": LayoutCategory.FIGURE,
        "image_caption": LayoutCategory.FIGURE_CAPTION,
        "chart_title": LayoutCategory.FIGURE_CAPTION,
        "table_title": LayoutCategory.TABLE_CAPTION,
        "formula": LayoutCategory.EQUATION,
        "isolate_formula": LayoutCategory.INTERLINE_EQUATION,
        "seal": LayoutCategory.STAMP,
        "contents": LayoutCategory.TOC,
        "reference_content": LayoutCategory.REFERENCE,
        "ref_text": LayoutCategory.REFERENCE,
        "list_item": LayoutCategory.LIST,
        "algorithm": LayoutCategory.CODE,
    }

    _KNOWN: frozenset[str] = frozenset(CLASS_ID_MAP.values())

    @classmethod
    def from_class_id(cls, class_id: int) -> str:
        """Map a detector class id, defaulting to UNKNOWN."""
        return cls.CLASS_ID_MAP.get(class_id, LayoutCategory.UNKNOWN)

    @classmethod
    def from_label(cls, label: str) -> str:
        """Map a detector label (case-insensitive), defaulting to UNKNOWN.

        Example:
            >>> LayoutCategoryMapper.from_label("Doc_Title")
            'title'
            >>> LayoutCategoryMapper.from_label("watermark")
            'unknown'
        """
        key = label.strip().lower()
        if key in cls._KNOWN:
            return key
        return cls.LABEL_ALIASES.get(key, LayoutCategory.UNKNOWN)

    @classmethod
    def map(cls, value: int | str) -> str:
        """Map either a class id or a label."""
        if isinstance(value, bool):
            return LayoutCategory.UNKNOWN
        if isinstance(value, int):
            return cls.from_class_id(value)
        return cls.from_label(str(value))


@dataclass(frozen=True)
class LayoutBox:
    """One detected document element.

    Attributes:
        bbox: Region in page pixels (x1 >= x0, y1 >= y0; zero area allowed)
        category: LayoutCategory value
        confidence: Detection confidence in [0, 1]
        index: Detection order within the page
    """

    bbox: BBox
    category: str
    confidence: float = 1.0
    index: int = 0

    def __post_init__(self) -> None:
        if self.bbox.x1 < self.bbox.x0 or self.bbox.y1 < self.bbox.y0:
            raise ValueError(f"Inverted bbox for box {self.index}: {self.bbox}")
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence out of range for box {self.index}: {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "category": self.category,
            "bbox": self.bbox.to_list(),
            "confidence": self.confidence,
        }


@dataclass
class LayoutResult:
    """Detector output for one page.

    Attributes:
        boxes: Detected boxes in detection order
        inference_time_ms: Time the detector reported for this call
    """

    boxes: list[LayoutBox] = field(default_factory=list)
    inference_time_ms: float = 0.0

    def __len__(self) -> int:
        return len(self.boxes)

    @property
    def is_empty(self) -> bool:
        return not self.boxes

    def to_dict(self) -> dict[str, Any]:
        return {
            "boxes": [box.to_dict() for box in self.boxes],
            "inference_time_ms": self.inference_time_ms,
        }


class TableType:
    """Table ruling estimate used to route table boxes."""

    WIRED = "wired"
    WIRELESS = "wireless"
    UNKNOWN = "unknown"
