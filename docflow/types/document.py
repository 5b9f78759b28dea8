"""DocumentResult - aggregate result of processing a whole document."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from .element import ContentElement
from .page import PageResult
from .result import StageTimingInfo


class DocumentStatus:
    COMPLETED = "completed"
    PARTIAL = "partial"
    EMPTY = "empty"


@dataclass
class DocumentResult:
    """Ordered page results plus document-level aggregates.

    Attributes:
        pages: Page results in page-index order
        total_pages: Pages the source reported
        processed_pages: Pages that were assembled successfully
        skipped_elements: Elements flagged skipped across all pages
        stage_timings: Aggregated timing per stage name
        total_time_ms: Wall time for the whole document
        processing_stopped: True if a max-pages cutoff left pages unprocessed
        processed_at: Completion timestamp
        outputs: Serializer name -> rendered representation

    Example:
        >>> result = pipeline.process_document(source)
        >>> result.status
        'completed'
        >>> result.get_stage_timings()
        {'render': 120.0, 'layout': 15.2, 'routing': 0.1, ...}
    """

    pages: list[PageResult] = field(default_factory=list)
    total_pages: int = 0
    processed_pages: int = 0
    skipped_elements: int = 0
    stage_timings: list[StageTimingInfo] = field(default_factory=list)
    total_time_ms: float = 0.0
    processing_stopped: bool = False
    processed_at: datetime | None = None
    outputs: dict[str, str] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> DocumentResult:
        return cls()

    @property
    def is_empty(self) -> bool:
        return self.processed_pages == 0

    @property
    def failed_pages(self) -> list[int]:
        return [page.page_index for page in self.pages if page.is_failed]

    @property
    def status(self) -> str:
        if self.is_empty:
            return DocumentStatus.EMPTY
        if self.failed_pages:
            return DocumentStatus.PARTIAL
        return DocumentStatus.COMPLETED

    def iter_elements(self) -> list[ContentElement]:
        """All elements of the document, page by page in reading order."""
        return [element for page in self.pages for element in page.elements]

    def get_stage_timings(self) -> dict[str, float]:
        return {timing.stage_name: timing.processing_time_ms for timing in self.stage_timings}

    def to_dict(self, normalize_bbox: bool = True) -> dict[str, Any]:
        result: dict[str, Any] = {
            "status": self.status,
            "total_pages": self.total_pages,
            "processed_pages": self.processed_pages,
            "skipped_elements": self.skipped_elements,
            "processing_stopped": self.processing_stopped,
            "total_time_ms": self.total_time_ms,
            "stage_timings": self.get_stage_timings(),
            "pages": [page.to_dict(normalize_bbox) for page in self.pages],
        }
        if self.failed_pages:
            result["failed_pages"] = self.failed_pages
        if self.processed_at is not None:
            result["processed_at"] = self.processed_at.isoformat()
        return result
