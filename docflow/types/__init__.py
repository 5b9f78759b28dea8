"""Types for docflow.

This module provides the data model shared by the orchestration core
and its collaborators:
- BBox: Integer pixel bounding box
- LayoutBox / LayoutResult: Detector output
- ContentElement: Per-element output unit
- PageImage / PageResult: Page input raster and per-page result
- DocumentResult: Whole-document result with aggregates
- Protocol interfaces for the injected collaborators
"""

from .bbox import BBox
from .document import DocumentResult, DocumentStatus
from .element import ContentElement, ContentType, content_type_for
from .interfaces import (
    ImageExtractor,
    LayoutDetector,
    LoggingProgressObserver,
    NullProgressObserver,
    OutputSerializer,
    PageSource,
    ProgressObserver,
    TableRecognizer,
    TextRecognizer,
)
from .layout import LayoutBox, LayoutCategory, LayoutCategoryMapper, LayoutResult, TableType
from .page import PageImage, PageResult, PageState, PageStatus
from .result import StageTimingInfo, merge_stage_timings

__all__ = [
    "BBox",
    "ContentElement",
    "ContentType",
    "DocumentResult",
    "DocumentStatus",
    "ImageExtractor",
    "LayoutBox",
    "LayoutCategory",
    "LayoutCategoryMapper",
    "LayoutDetector",
    "LayoutResult",
    "LoggingProgressObserver",
    "NullProgressObserver",
    "OutputSerializer",
    "PageImage",
    "PageResult",
    "PageSource",
    "PageState",
    "PageStatus",
    "ProgressObserver",
    "StageTimingInfo",
    "TableRecognizer",
    "TableType",
    "TextRecognizer",
    "content_type_for",
    "merge_stage_timings",
]
