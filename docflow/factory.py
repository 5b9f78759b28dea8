"""Component factory module.

This module provides:
- ComponentFactory: Builds serializers, the figure extractor and the
  replay collaborators from a validated PipelineConfig
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from .io.input import (
    ImageDirectoryPageSource,
    SidecarLayoutDetector,
    SidecarLayoutStore,
    SidecarTableRecognizer,
    SidecarTextRecognizer,
)
from .io.output import FileImageExtractor, JsonContentListSerializer, MarkdownSerializer

if TYPE_CHECKING:
    from .config import PipelineConfig
    from .types import OutputSerializer

logger = logging.getLogger(__name__)


@dataclass
class ReplayComponents:
    """Collaborators replaying sidecar files of one input directory."""

    source: ImageDirectoryPageSource
    detector: SidecarLayoutDetector
    text_recognizer: SidecarTextRecognizer | None
    table_recognizer: SidecarTableRecognizer | None


class ComponentFactory:
    """Unified factory for pipeline components.

    Example:
        >>> config = PipelineConfig(output_formats=["json"])
        >>> config.validate()
        >>> factory = ComponentFactory(config)
        >>> [s.name for s in factory.create_serializers()]
        ['json']
    """

    def __init__(self, config: PipelineConfig):
        self.config = config

    def create_serializers(self) -> list[OutputSerializer]:
        """Serializers for the configured output formats, in configured order."""
        serializers: list[OutputSerializer] = []
        for fmt in self.config.output_formats:
            if fmt == "json":
                serializers.append(JsonContentListSerializer(normalize_bbox=self.config.normalize_bbox))
            elif fmt == "markdown":
                serializers.append(MarkdownSerializer())
        return serializers

    def create_image_extractor(self, output_dir: Path | None = None) -> FileImageExtractor | None:
        """Figure extractor writing under the output directory, or None when disabled."""
        if not self.config.enable_image_extraction:
            return None
        return FileImageExtractor(output_dir or self.config.output_dir)

    def create_replay_components(self, input_dir: Path) -> ReplayComponents:
        """Page source and sidecar-backed collaborators for an image directory.

        Recognizers for disabled stages are not created.
        """
        store = SidecarLayoutStore(input_dir)
        table_enabled = self.config.enable_wired_table or self.config.enable_wireless_table
        components = ReplayComponents(
            source=ImageDirectoryPageSource(input_dir, dpi=self.config.dpi),
            detector=SidecarLayoutDetector(store),
            text_recognizer=SidecarTextRecognizer(store) if self.config.enable_ocr else None,
            table_recognizer=(
                SidecarTableRecognizer(store, self.config.table_line_ratio) if table_enabled else None
            ),
        )
        logger.info(
            "Replay components created for %s: ocr=%s, table=%s",
            input_dir,
            components.text_recognizer is not None,
            components.table_recognizer is not None,
        )
        return components
