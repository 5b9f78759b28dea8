"""Output serializers, figure extraction and file saving."""

from .image_extractor import FileImageExtractor
from .json import JsonContentListSerializer, JsonDocumentSerializer
from .markdown import MarkdownSerializer, element_to_markdown
from .saver import save_outputs

__all__ = [
    "FileImageExtractor",
    "JsonContentListSerializer",
    "JsonDocumentSerializer",
    "MarkdownSerializer",
    "element_to_markdown",
    "save_outputs",
]
