"""Tests for FileImageExtractor."""

from __future__ import annotations

import numpy as np
import pytest
from PIL import Image

from docflow.exceptions import RecognitionError
from docflow.io.output import FileImageExtractor
from docflow.types import PageImage


class TestFileImageExtractor:
    """Tests for FileImageExtractor."""

    def test_extract_saves_png(self, output_dir, make_box):
        """Test that the crop is written and referenced relatively."""
        image = np.zeros((100, 200, 3), dtype=np.uint8)
        image[10:30, 20:60] = (0, 255, 0)
        page = PageImage(image=image, page_index=2)
        box = make_box("figure", 20, 10, 60, 30, index=5)

        reference = FileImageExtractor(output_dir).extract(page, box)

        assert reference == "images/page2_fig5.png"
        with Image.open(output_dir / reference) as saved:
            assert saved.size == (40, 20)
            assert saved.getpixel((0, 0)) == (0, 255, 0)

    def test_empty_crop(self, output_dir, make_box, small_page):
        """Test that a box outside the page cannot be extracted."""
        with pytest.raises(RecognitionError, match="empty crop"):
            FileImageExtractor(output_dir).extract(small_page, make_box("figure", 500, 500, 600, 600))

    def test_unwritable_directory(self, tmp_path, make_box, small_page):
        """Test that write failures surface as RecognitionError."""
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")

        with pytest.raises(RecognitionError, match="Failed to save"):
            FileImageExtractor(blocker).extract(small_page, make_box("figure", 0, 0, 10, 10))
