"""Category routing and capability filtering.

Every detected box lands in exactly one bucket:
- text: read by the TextRecognizer
- table: handled by the TableRecognizer after a wired/wireless estimate
- figure: stored by the ImageExtractor
- unsupported: emitted as a skipped placeholder element

``bucket_for_category`` is the fixed category -> bucket mapping.
``CapabilityFilter`` then decides, from the active stage switches and the
collaborators actually available, whether the owning stage can produce
content; boxes it rejects are moved to the unsupported bucket.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .types import LayoutBox, LayoutCategory, TableType

if TYPE_CHECKING:
    from .config import PipelineConfig

logger = logging.getLogger(__name__)


class Bucket:
    """Routing buckets."""

    TEXT = "text"
    TABLE = "table"
    FIGURE = "figure"
    UNSUPPORTED = "unsupported"


_CATEGORY_BUCKETS: dict[str, str] = {
    LayoutCategory.TEXT: Bucket.TEXT,
    LayoutCategory.TITLE: Bucket.TEXT,
    LayoutCategory.FIGURE_CAPTION: Bucket.TEXT,
    LayoutCategory.TABLE_CAPTION: Bucket.TEXT,
    LayoutCategory.TABLE_FOOTNOTE: Bucket.TEXT,
    LayoutCategory.HEADER: Bucket.TEXT,
    LayoutCategory.FOOTER: Bucket.TEXT,
    LayoutCategory.REFERENCE: Bucket.TEXT,
    LayoutCategory.CODE: Bucket.TEXT,
    LayoutCategory.TOC: Bucket.TEXT,
    LayoutCategory.ABSTRACT: Bucket.TEXT,
    LayoutCategory.CONTENT: Bucket.TEXT,
    LayoutCategory.LIST: Bucket.TEXT,
    LayoutCategory.INDEX: Bucket.TEXT,
    LayoutCategory.TABLE: Bucket.TABLE,
    LayoutCategory.FIGURE: Bucket.FIGURE,
    LayoutCategory.STAMP: Bucket.FIGURE,
    LayoutCategory.EQUATION: Bucket.UNSUPPORTED,
    LayoutCategory.INTERLINE_EQUATION: Bucket.UNSUPPORTED,
    LayoutCategory.SEPARATOR: Bucket.UNSUPPORTED,
    LayoutCategory.UNKNOWN: Bucket.UNSUPPORTED,
}

ALWAYS_UNSUPPORTED: frozenset[str] = frozenset(
    {LayoutCategory.EQUATION, LayoutCategory.INTERLINE_EQUATION}
)
"""Categories no stage configuration can handle."""


def bucket_for_category(category: str) -> str:
    """Return the bucket owning a category; unmapped categories are unsupported."""
    return _CATEGORY_BUCKETS.get(category, Bucket.UNSUPPORTED)


class Placeholder:
    """Payloads for elements no collaborator produced content for."""

    FORMULA = "[Formula: formula recognition is not supported]"
    TEXT_DISABLED = "[Text: OCR stage disabled]"
    TABLE_DISABLED = "<!-- Table: table recognition disabled -->"
    WIRELESS_TABLE = "<!-- Wireless table: wireless table recognition disabled -->"
    FIGURE_DISABLED = "[Figure: image extraction disabled]"

    @staticmethod
    def unsupported(category: str) -> str:
        return f"[Unsupported element type: {category}]"

    @staticmethod
    def text_failed(error: Exception) -> str:
        return f"[Text recognition failed: {error}]"

    @staticmethod
    def table_failed(error: Exception) -> str:
        return f"<!-- Table recognition failed: {error} -->"

    @staticmethod
    def figure_failed(error: Exception) -> str:
        return f"[Figure extraction failed: {error}]"


@dataclass(frozen=True)
class CapabilityFilter:
    """Decides whether a category can be turned into real content.

    Attributes:
        enable_ocr: Text recognition stage switch
        enable_wired_table: Ruled-table recognition switch
        enable_wireless_table: Unruled-table recognition switch
        enable_image_extraction: Figure extraction switch
        has_text_recognizer: A TextRecognizer was injected
        has_table_recognizer: A TableRecognizer was injected
        has_image_extractor: An ImageExtractor was injected
    """

    enable_ocr: bool = True
    enable_wired_table: bool = True
    enable_wireless_table: bool = False
    enable_image_extraction: bool = True
    has_text_recognizer: bool = True
    has_table_recognizer: bool = True
    has_image_extractor: bool = True

    @classmethod
    def from_config(
        cls,
        config: PipelineConfig,
        *,
        has_text_recognizer: bool,
        has_table_recognizer: bool,
        has_image_extractor: bool,
    ) -> CapabilityFilter:
        return cls(
            enable_ocr=config.enable_ocr,
            enable_wired_table=config.enable_wired_table,
            enable_wireless_table=config.enable_wireless_table,
            enable_image_extraction=config.enable_image_extraction,
            has_text_recognizer=has_text_recognizer,
            has_table_recognizer=has_table_recognizer,
            has_image_extractor=has_image_extractor,
        )

    @property
    def table_enabled(self) -> bool:
        return self.has_table_recognizer and (self.enable_wired_table or self.enable_wireless_table)

    def is_supported(self, category: str) -> bool:
        """Whether the stage owning ``category`` can produce content for it."""
        if category in ALWAYS_UNSUPPORTED:
            return False
        bucket = bucket_for_category(category)
        if bucket == Bucket.TEXT:
            return self.enable_ocr and self.has_text_recognizer
        if bucket == Bucket.TABLE:
            return self.table_enabled
        if bucket == Bucket.FIGURE:
            return self.enable_image_extraction and self.has_image_extractor
        return False

    def supports_table_type(self, table_type: str) -> bool:
        """Whether a table with this estimated ruling should reach the recognizer.

        An UNKNOWN estimate is passed through; the recognizer reports support itself.
        """
        if not self.table_enabled:
            return False
        if table_type == TableType.WIRED:
            return self.enable_wired_table
        if table_type == TableType.WIRELESS:
            return self.enable_wireless_table
        return True

    def placeholder_for(self, category: str) -> str:
        """Explanatory payload for a box routed to the unsupported bucket."""
        if category in ALWAYS_UNSUPPORTED:
            return Placeholder.FORMULA
        bucket = bucket_for_category(category)
        if bucket == Bucket.TEXT:
            return Placeholder.TEXT_DISABLED
        if bucket == Bucket.TABLE:
            return Placeholder.TABLE_DISABLED
        if bucket == Bucket.FIGURE:
            return Placeholder.FIGURE_DISABLED
        return Placeholder.unsupported(category)


@dataclass
class RoutedBoxes:
    """Disjoint bucket assignment of one page's boxes, each in detection order."""

    text: list[LayoutBox] = field(default_factory=list)
    table: list[LayoutBox] = field(default_factory=list)
    figure: list[LayoutBox] = field(default_factory=list)
    unsupported: list[LayoutBox] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.text) + len(self.table) + len(self.figure) + len(self.unsupported)

    def counts(self) -> dict[str, int]:
        return {
            Bucket.TEXT: len(self.text),
            Bucket.TABLE: len(self.table),
            Bucket.FIGURE: len(self.figure),
            Bucket.UNSUPPORTED: len(self.unsupported),
        }


def route_boxes(boxes: Iterable[LayoutBox], capability_filter: CapabilityFilter) -> RoutedBoxes:
    """Partition boxes into buckets, querying the filter once per box."""
    routed = RoutedBoxes()
    for box in boxes:
        if not capability_filter.is_supported(box.category):
            routed.unsupported.append(box)
            continue

        bucket = bucket_for_category(box.category)
        if bucket == Bucket.TEXT:
            routed.text.append(box)
        elif bucket == Bucket.TABLE:
            routed.table.append(box)
        else:
            routed.figure.append(box)

    logger.debug("Routed %d boxes: %s", len(routed), routed.counts())
    return routed
