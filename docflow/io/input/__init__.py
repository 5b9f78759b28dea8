"""Page sources and replay collaborators."""

from .image import ImageDirectoryPageSource, InMemoryPageSource, load_image
from .sidecar import (
    SidecarLayoutDetector,
    SidecarLayoutStore,
    SidecarTableRecognizer,
    SidecarTextRecognizer,
    parse_layout_boxes,
)

__all__ = [
    "ImageDirectoryPageSource",
    "InMemoryPageSource",
    "SidecarLayoutDetector",
    "SidecarLayoutStore",
    "SidecarTableRecognizer",
    "SidecarTextRecognizer",
    "load_image",
    "parse_layout_boxes",
]
