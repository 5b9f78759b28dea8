"""Replay collaborators reading precomputed layout sidecars.

A page image ``page_001.png`` may be accompanied by ``page_001.layout.json``
written by an external detector/recognizer run::

    {
      "inference_time_ms": 14.2,
      "boxes": [
        {"bbox": [x0, y0, x1, y1], "category": "title", "confidence": 0.97,
         "text": "Annual Report"},
        {"bbox": [...], "category": 4, "confidence": 0.91,
         "html": "<table>...</table>", "supported": true}
      ]
    }

``category`` is a label or a PP-DocLayout class id. The detector, text
recognizer and table recognizer below replay that file so the pipeline can
run without any model.
"""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any

import numpy as np

from docflow.constants import DEFAULT_TABLE_LINE_RATIO
from docflow.exceptions import FileFormatError, RecognitionError
from docflow.table import estimate_table_type
from docflow.types import BBox, LayoutBox, LayoutCategoryMapper, LayoutResult, PageImage

logger = logging.getLogger(__name__)

SIDECAR_SUFFIX = ".layout.json"


def parse_layout_boxes(entries: list[dict[str, Any]], source: str = "<sidecar>") -> list[LayoutBox]:
    """Build LayoutBoxes from sidecar entries, indexed in file order.

    Raises:
        FileFormatError: If an entry has no usable bbox or an invalid confidence
    """
    boxes: list[LayoutBox] = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or "bbox" not in entry:
            raise FileFormatError(f"{source}: box {index} has no bbox")
        try:
            bbox = BBox.from_list(entry["bbox"], coord_format=entry.get("bbox_format", "xyxy"))
            box = LayoutBox(
                bbox=bbox,
                category=LayoutCategoryMapper.map(entry.get("category", "unknown")),
                confidence=float(entry.get("confidence", 1.0)),
                index=index,
            )
        except (TypeError, ValueError) as e:
            raise FileFormatError(f"{source}: invalid box {index}: {e}") from e
        boxes.append(box)
    return boxes


class SidecarLayoutStore:
    """Loads and caches ``<stem>.layout.json`` files from a directory."""

    def __init__(self, directory: Path | str):
        self.directory = Path(directory)
        self._cache: dict[str, dict[str, Any]] = {}
        self._lock = threading.Lock()

    @staticmethod
    def stem_for(page: PageImage) -> str:
        if page.source_path:
            return Path(page.source_path).stem
        return f"page{page.page_index}"

    def path_for(self, page: PageImage) -> Path:
        return self.directory / f"{self.stem_for(page)}{SIDECAR_SUFFIX}"

    def load(self, page: PageImage) -> dict[str, Any]:
        """Sidecar content for a page; empty when the page has no sidecar.

        Raises:
            FileFormatError: If the sidecar is not a valid JSON object
        """
        path = self.path_for(page)
        key = str(path)
        with self._lock:
            if key in self._cache:
                return self._cache[key]

        if not path.exists():
            logger.warning("No layout sidecar for page %d: %s", page.page_index, path)
            data: dict[str, Any] = {}
        else:
            try:
                with open(path, encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                raise FileFormatError(f"Failed to read layout sidecar {path}: {e}") from e
            if not isinstance(data, dict):
                raise FileFormatError(f"Layout sidecar {path} must contain a JSON object")

        with self._lock:
            self._cache[key] = data
        return data

    def entry(self, page: PageImage, box: LayoutBox) -> dict[str, Any]:
        entries = self.load(page).get("boxes", [])
        if 0 <= box.index < len(entries) and isinstance(entries[box.index], dict):
            return entries[box.index]
        return {}


class SidecarLayoutDetector:
    """LayoutDetector replaying the boxes of a page's sidecar."""

    def __init__(self, store: SidecarLayoutStore):
        self.store = store

    def detect(self, page: PageImage) -> LayoutResult:
        data = self.store.load(page)
        boxes = parse_layout_boxes(data.get("boxes", []), source=str(self.store.path_for(page)))
        return LayoutResult(boxes=boxes, inference_time_ms=float(data.get("inference_time_ms", 0.0)))


class SidecarTextRecognizer:
    """TextRecognizer returning the text recorded for each box."""

    def __init__(self, store: SidecarLayoutStore):
        self.store = store

    def recognize(self, page: PageImage, box: LayoutBox) -> tuple[str, float]:
        entry = self.store.entry(page, box)
        text = entry.get("text")
        if text is None:
            raise RecognitionError(f"No text recorded for box {box.index} on page {page.page_index}")
        return str(text), float(entry.get("text_confidence", box.confidence))


class SidecarTableRecognizer:
    """TableRecognizer returning recorded table markup.

    The wired/wireless estimate is computed on the crop with the OpenCV
    line-density heuristic.
    """

    def __init__(self, store: SidecarLayoutStore, line_ratio_threshold: float = DEFAULT_TABLE_LINE_RATIO):
        self.store = store
        self.line_ratio_threshold = line_ratio_threshold

    def estimate_type(self, crop: np.ndarray) -> str:
        return estimate_table_type(crop, self.line_ratio_threshold)

    def recognize(self, page: PageImage, box: LayoutBox) -> tuple[str, bool]:
        entry = self.store.entry(page, box)
        html = entry.get("html")
        if html is None:
            raise RecognitionError(f"No table markup recorded for box {box.index} on page {page.page_index}")
        return str(html), bool(entry.get("supported", True))
