"""Page sources backed by image files."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

import cv2
import numpy as np

from docflow.exceptions import FileLoadError, PageProcessingError
from docflow.types import PageImage

logger = logging.getLogger(__name__)

IMAGE_SUFFIXES: tuple[str, ...] = (".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp")


def load_image(image_path: Path) -> np.ndarray:
    """Load an image file as an RGB numpy array.

    Raises:
        FileLoadError: If the image cannot be loaded
    """
    image_bgr = cv2.imread(str(image_path), cv2.IMREAD_COLOR)
    if image_bgr is None:
        raise FileLoadError(f"Could not load image: {image_path}")

    logger.debug("Loaded image: %s, shape: %s", image_path, image_bgr.shape)
    return cv2.cvtColor(image_bgr, cv2.COLOR_BGR2RGB)


class ImageDirectoryPageSource:
    """PageSource over the image files of a directory, one page per file.

    Files are ordered by name. ``render_page`` is safe to call from several
    threads.

    Example:
        >>> source = ImageDirectoryPageSource(Path("scans/report"))
        >>> source.page_count()
        12
        >>> source.render_page(0).source_path
        'scans/report/page_001.png'
    """

    def __init__(self, directory: Path | str, suffixes: Sequence[str] = IMAGE_SUFFIXES, dpi: int | None = None):
        self.directory = Path(directory)
        if not self.directory.is_dir():
            raise FileLoadError(f"Input directory not found: {self.directory}")
        self.dpi = dpi
        self.paths = sorted(
            path for path in self.directory.iterdir() if path.is_file() and path.suffix.lower() in suffixes
        )
        logger.info("Found %d page images in %s", len(self.paths), self.directory)

    def page_count(self) -> int:
        return len(self.paths)

    def render_page(self, page_index: int) -> PageImage:
        if not 0 <= page_index < len(self.paths):
            raise PageProcessingError(f"Page index {page_index} out of range", page_index=page_index)

        path = self.paths[page_index]
        try:
            image = load_image(path)
        except FileLoadError as e:
            raise PageProcessingError(str(e), page_index=page_index) from e

        return PageImage(image=image, page_index=page_index, source_path=str(path), dpi=self.dpi)


class InMemoryPageSource:
    """PageSource over a list of already loaded rasters."""

    def __init__(self, images: Sequence[np.ndarray], dpi: int | None = None):
        self.images = list(images)
        self.dpi = dpi

    def page_count(self) -> int:
        return len(self.images)

    def render_page(self, page_index: int) -> PageImage:
        if not 0 <= page_index < len(self.images):
            raise PageProcessingError(f"Page index {page_index} out of range", page_index=page_index)
        return PageImage(image=self.images[page_index], page_index=page_index, dpi=self.dpi)
