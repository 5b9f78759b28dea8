"""Collaborator interface definitions for docflow.

The orchestration core only talks to detectors, recognizers, extractors,
serializers and page sources through these Protocols. Concrete
implementations are injected at construction:
- PageSource: Produces page rasters for a document
- LayoutDetector: Detects labeled regions on a page
- TextRecognizer: Reads text inside one region
- TableRecognizer: Recovers table structure inside one region
- ImageExtractor: Stores a figure region and returns a reference to it
- OutputSerializer: Renders a finished DocumentResult
- ProgressObserver: Receives per-page progress notifications
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    import numpy as np

    from .document import DocumentResult
    from .layout import LayoutBox, LayoutResult
    from .page import PageImage

logger = logging.getLogger(__name__)


@runtime_checkable
class PageSource(Protocol):
    """Page raster provider for one document.

    ``render_page`` may be called from several threads at once and for
    indices in any order. A page that cannot be produced raises
    PageProcessingError; the rest of the document is still processed.
    """

    def page_count(self) -> int:
        """Number of pages in the document (0 for an empty document)."""
        ...

    def render_page(self, page_index: int) -> PageImage:
        """Render one page.

        Raises:
            PageProcessingError: If this page cannot be produced
        """
        ...


@runtime_checkable
class LayoutDetector(Protocol):
    """Layout detection interface.

    Example:
        >>> result = detector.detect(page)
        >>> result.boxes[0].category
        'title'
        >>> result.inference_time_ms
        14.2
    """

    def detect(self, page: PageImage) -> LayoutResult:
        """Detect regions on a page; may return zero boxes."""
        ...


@runtime_checkable
class TextRecognizer(Protocol):
    """Text recognition for one region.

    Raises RecognitionError when the region cannot be read.
    """

    def recognize(self, page: PageImage, box: LayoutBox) -> tuple[str, float]:
        """Return (text, confidence) for the region."""
        ...


@runtime_checkable
class TableRecognizer(Protocol):
    """Table structure recognition.

    ``estimate_type`` is a cheap classifier on the cropped region used only
    for routing; ``recognize`` is the expensive structure recovery.
    """

    def estimate_type(self, crop: np.ndarray) -> str:
        """Return a TableType value for the cropped table region."""
        ...

    def recognize(self, page: PageImage, box: LayoutBox) -> tuple[str, bool]:
        """Return (markup, supported) for the region.

        Raises:
            RecognitionError: If the region cannot be recognized
        """
        ...


@runtime_checkable
class ImageExtractor(Protocol):
    """Stores a figure region and returns a reference (path or URI) to it."""

    def extract(self, page: PageImage, box: LayoutBox) -> str:
        """Save the region and return its reference.

        Raises:
            RecognitionError: If the region cannot be stored
        """
        ...


@runtime_checkable
class OutputSerializer(Protocol):
    """Export representation of a finished document.

    Attributes:
        name: Serializer identifier (e.g., "json", "markdown")
        suffix: File suffix used when the CLI writes the output
    """

    name: str
    suffix: str

    def serialize(self, document: DocumentResult) -> str:
        """Render the document."""
        ...


@runtime_checkable
class ProgressObserver(Protocol):
    """Receives progress notifications from the document orchestrator."""

    def on_progress(self, stage: str, current: int, total: int) -> None:
        """Called with a stage name and a 1-based position out of total."""
        ...


class NullProgressObserver:
    """Default observer that ignores every notification."""

    def on_progress(self, stage: str, current: int, total: int) -> None:
        return None


class LoggingProgressObserver:
    """Observer that reports progress through the logger."""

    def __init__(self, level: int = logging.INFO):
        self.level = level

    def on_progress(self, stage: str, current: int, total: int) -> None:
        logger.log(self.level, "[%s] %d/%d", stage, current, total)
