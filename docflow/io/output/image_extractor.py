"""Figure extraction to image files.

Figure regions are cropped from the page raster and saved as PNG under
``<output_dir>/images``. Elements reference them by relative path.
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from docflow.exceptions import RecognitionError
from docflow.types import LayoutBox, PageImage

logger = logging.getLogger(__name__)

IMAGES_DIRNAME = "images"


class FileImageExtractor:
    """ImageExtractor that writes PNG crops to disk.

    Attributes:
        output_dir: Base output directory; files go to ``output_dir/images``

    Example:
        >>> extractor = FileImageExtractor(Path("output/report"))
        >>> extractor.extract(page, box)
        'images/page0_fig3.png'
    """

    def __init__(self, output_dir: Path | str):
        self.output_dir = Path(output_dir)

    @staticmethod
    def filename_for(page_index: int, box: LayoutBox) -> str:
        return f"page{page_index}_fig{box.index}.png"

    def extract(self, page: PageImage, box: LayoutBox) -> str:
        """Crop the box from the page and save it.

        Returns:
            Path of the saved image relative to ``output_dir``

        Raises:
            RecognitionError: If the crop is empty or cannot be written
        """
        cropped = box.bbox.crop(page.image)
        if cropped.size == 0:
            raise RecognitionError(f"Figure {box.index} on page {page.page_index} has an empty crop")

        filename = self.filename_for(page.page_index, box)
        images_dir = self.output_dir / IMAGES_DIRNAME
        output_path = images_dir / filename
        try:
            images_dir.mkdir(parents=True, exist_ok=True)
            Image.fromarray(cropped).save(output_path)
        except (OSError, ValueError, TypeError) as e:
            raise RecognitionError(f"Failed to save figure {box.index} on page {page.page_index}: {e}") from e

        logger.debug("Saved figure to %s", output_path)
        return f"{IMAGES_DIRNAME}/{filename}"
