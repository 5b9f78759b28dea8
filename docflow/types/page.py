"""Page types - input raster and per-page processing result."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .element import ContentElement
from .layout import LayoutResult
from .result import StageTimingInfo

if TYPE_CHECKING:
    import numpy as np


class PageState:
    """Per-page processing states, in transition order."""

    DETECTING = "detecting"
    ROUTING = "routing"
    RECOGNIZING = "recognizing"
    ORDERING = "ordering"
    ASSEMBLED = "assembled"

    ORDER: tuple[str, ...] = (DETECTING, ROUTING, RECOGNIZING, ORDERING, ASSEMBLED)


class PageStatus:
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PageImage:
    """A rendered page raster.

    Attributes:
        image: Page raster as numpy array (H, W, C) or (H, W)
        page_index: 0-based index of the page in its document
        source_path: Where the raster came from, if anywhere
        dpi: Render resolution, if known
    """

    image: np.ndarray
    page_index: int
    source_path: str | None = None
    dpi: int | None = None

    @property
    def width(self) -> int:
        return int(self.image.shape[1])

    @property
    def height(self) -> int:
        return int(self.image.shape[0])


@dataclass
class PageResult:
    """Processing result for a single page.

    Attributes:
        page_index: 0-based page index
        width: Page raster width in pixels
        height: Page raster height in pixels
        elements: Elements in reading order (dense reading_order from 0)
        layout: Detector output the elements were built from
        stage_timings: Per-stage timing for this page
        total_time_ms: Wall time spent on this page
        state: Last PageState the page reached
        status: PageStatus value
        error: Failure message when status is FAILED
    """

    page_index: int
    width: int = 0
    height: int = 0
    elements: list[ContentElement] = field(default_factory=list)
    layout: LayoutResult = field(default_factory=LayoutResult)
    stage_timings: list[StageTimingInfo] = field(default_factory=list)
    total_time_ms: float = 0.0
    state: str = PageState.ASSEMBLED
    status: str = PageStatus.COMPLETED
    error: str | None = None

    @classmethod
    def failed(cls, page_index: int, error: str) -> PageResult:
        """Result for a page that could not be produced or processed."""
        return cls(page_index=page_index, state=PageState.DETECTING, status=PageStatus.FAILED, error=error)

    @property
    def skipped_count(self) -> int:
        return sum(1 for element in self.elements if element.skipped)

    @property
    def is_failed(self) -> bool:
        return self.status == PageStatus.FAILED

    def to_dict(self, normalize_bbox: bool = True) -> dict[str, Any]:
        """Convert to JSON-serializable dict.

        Args:
            normalize_bbox: Report element bboxes on the 0-1000 scale
        """
        width = self.width if normalize_bbox else None
        height = self.height if normalize_bbox else None
        result: dict[str, Any] = {
            "page_idx": self.page_index,
            "width": self.width,
            "height": self.height,
            "status": self.status,
            "elements": [element.to_dict(width, height) for element in self.elements],
            "stage_timings": {t.stage_name: t.processing_time_ms for t in self.stage_timings},
            "total_time_ms": self.total_time_ms,
        }
        if self.error is not None:
            result["error"] = self.error
        return result
