"""JSON content-list serialization."""

from __future__ import annotations

import json
import logging
from typing import Any

from docflow.types import DocumentResult

logger = logging.getLogger(__name__)


class JsonContentListSerializer:
    """Serializes a document as a flat JSON content list.

    One entry per element, page by page in reading order. Bboxes are on the
    0-1000 scale relative to their page unless ``normalize_bbox`` is False.

    Example:
        >>> serializer = JsonContentListSerializer()
        >>> print(serializer.serialize(document))
        [
          {
            "reading_order": 0,
            "type": "title",
            "category": "title",
            "page_idx": 0,
            "bbox": [100, 40, 900, 80],
            "text": "Annual Report"
          },
          ...
    """

    name = "json"
    suffix = ".json"

    def __init__(self, normalize_bbox: bool = True, indent: int = 2):
        self.normalize_bbox = normalize_bbox
        self.indent = indent

    def content_list(self, document: DocumentResult) -> list[dict[str, Any]]:
        items: list[dict[str, Any]] = []
        for page in document.pages:
            width = page.width if self.normalize_bbox else None
            height = page.height if self.normalize_bbox else None
            items.extend(element.to_dict(width, height) for element in page.elements)
        return items

    def serialize(self, document: DocumentResult) -> str:
        items = self.content_list(document)
        logger.debug("Serialized %d elements to JSON content list", len(items))
        return json.dumps(items, indent=self.indent, ensure_ascii=False)


class JsonDocumentSerializer:
    """Serializes the whole DocumentResult, including per-page timings and stats."""

    name = "document"
    suffix = ".result.json"

    def __init__(self, normalize_bbox: bool = True, indent: int = 2):
        self.normalize_bbox = normalize_bbox
        self.indent = indent

    def serialize(self, document: DocumentResult) -> str:
        return json.dumps(document.to_dict(self.normalize_bbox), indent=self.indent, ensure_ascii=False)
