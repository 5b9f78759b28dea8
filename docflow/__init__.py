"""docflow: reading-order inference and stage orchestration for document layouts."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from .config import PipelineConfig
from .factory import ComponentFactory
from .io.output import save_outputs
from .orchestration import DocumentOrchestrator, PageOrchestrator
from .types import (
    DocumentResult,
    ImageExtractor,
    LayoutDetector,
    OutputSerializer,
    PageImage,
    PageResult,
    PageSource,
    ProgressObserver,
    TableRecognizer,
    TextRecognizer,
)

if TYPE_CHECKING:
    import numpy as np

logger = logging.getLogger(__name__)

__all__ = ["Pipeline", "PipelineConfig"]


class Pipeline:
    """Document pipeline: detection, routing, recognition, ordering and output.

    Collaborators are injected; only the detector is required. Stages whose
    collaborator is missing or disabled in the config emit placeholder
    elements instead of content.

    Example:
        >>> config = PipelineConfig(max_pages=10)
        >>> pipeline = Pipeline(detector, text_recognizer=ocr, table_recognizer=tables, config=config)
        >>> document = pipeline.process_document(source)
        >>> document.processed_pages
        10
        >>> print(document.outputs["markdown"])
    """

    def __init__(
        self,
        detector: LayoutDetector,
        *,
        text_recognizer: TextRecognizer | None = None,
        table_recognizer: TableRecognizer | None = None,
        image_extractor: ImageExtractor | None = None,
        serializers: Sequence[OutputSerializer] | None = None,
        observer: ProgressObserver | None = None,
        config: PipelineConfig | None = None,
    ):
        self.config = config if config is not None else PipelineConfig()
        self.config.validate()
        self.factory = ComponentFactory(self.config)

        self.serializers = list(serializers) if serializers is not None else self.factory.create_serializers()
        self.page_orchestrator = PageOrchestrator(
            detector,
            text_recognizer=text_recognizer,
            table_recognizer=table_recognizer,
            image_extractor=image_extractor,
            config=self.config,
        )
        self.document_orchestrator = DocumentOrchestrator(
            self.page_orchestrator,
            max_pages=self.config.max_pages,
            max_concurrent_pages=self.config.max_concurrent_pages,
            serializers=self.serializers,
            observer=observer,
        )

        logger.info(
            "Pipeline initialized: ocr=%s, table=%s, figures=%s, serializers=%s",
            text_recognizer is not None,
            table_recognizer is not None,
            image_extractor is not None,
            [serializer.name for serializer in self.serializers],
        )

    @classmethod
    def from_sidecars(
        cls, input_dir: Path, config: PipelineConfig | None = None, observer: ProgressObserver | None = None
    ) -> tuple[Pipeline, PageSource]:
        """Pipeline replaying ``<stem>.layout.json`` sidecars next to the page images.

        Returns:
            (pipeline, page source for ``input_dir``)
        """
        config = config if config is not None else PipelineConfig()
        factory = ComponentFactory(config)
        components = factory.create_replay_components(Path(input_dir))
        pipeline = cls(
            components.detector,
            text_recognizer=components.text_recognizer,
            table_recognizer=components.table_recognizer,
            image_extractor=factory.create_image_extractor(),
            observer=observer,
            config=config,
        )
        return pipeline, components.source

    def process_document(self, source: PageSource) -> DocumentResult:
        """Process every page of a source (up to ``max_pages``)."""
        return self.document_orchestrator.process(source)

    def process_pages(self, pages: Iterable[PageImage]) -> DocumentResult:
        """Process pre-rendered pages given in any order."""
        return self.document_orchestrator.process_pages(pages)

    def process_image(self, image: np.ndarray, page_index: int = 0) -> PageResult:
        """Process a single page raster."""
        return self.page_orchestrator.process_page(PageImage(image=image, page_index=page_index))

    def save(self, document: DocumentResult, stem: str, output_dir: Path | None = None) -> dict[str, Path]:
        """Write every configured output of a processed document."""
        return save_outputs(document, self.serializers, output_dir or self.config.output_dir, stem)
