"""Pytest configuration and shared fixtures for docflow tests.

This module provides:
- Common fixtures for all tests (blank page rasters, sample layouts)
- Mock fixtures for collaborators (mock_detector, mock_text_recognizer, etc.)
- Test configuration and path setup
"""

from __future__ import annotations

import sys
from pathlib import Path
from unittest.mock import Mock

import numpy as np
import pytest

# Ensure project root is importable when running tests via python -m pytest
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from docflow.types import BBox, LayoutBox, LayoutResult, PageImage, TableType  # noqa: E402


# ==================== Sample Data Fixtures ====================


@pytest.fixture
def blank_page() -> PageImage:
    """Create a blank white 1000x1000 RGB page.

    Returns:
        PageImage at index 0
    """
    return PageImage(image=np.full((1000, 1000, 3), 255, dtype=np.uint8), page_index=0)


@pytest.fixture
def make_box():
    """Factory for LayoutBoxes from xyxy coordinates."""

    def _make(category: str, x0: int, y0: int, x1: int, y1: int, index: int = 0, confidence: float = 0.9):
        return LayoutBox(bbox=BBox(x0, y0, x1, y1), category=category, confidence=confidence, index=index)

    return _make


@pytest.fixture
def report_layout(make_box) -> LayoutResult:
    """Title, two body paragraphs close together, and a table further down.

    Boxes are listed out of reading order on purpose.

    Returns:
        LayoutResult for a 1000x1000 page
    """
    return LayoutResult(
        boxes=[
            make_box("table", 100, 600, 900, 900, index=0),
            make_box("text", 100, 250, 900, 400, index=1),
            make_box("title", 100, 50, 900, 100, index=2),
            make_box("text", 100, 150, 900, 230, index=3),
        ],
        inference_time_ms=12.5,
    )


# ==================== Mock Component Fixtures ====================


@pytest.fixture
def mock_detector(report_layout: LayoutResult) -> Mock:
    """Create a mock detector returning the report layout.

    Returns:
        Mock object with detect method
    """
    detector = Mock()
    detector.detect.return_value = report_layout
    return detector


@pytest.fixture
def mock_text_recognizer() -> Mock:
    """Create a mock text recognizer echoing the box category.

    Returns:
        Mock object with recognize method
    """
    recognizer = Mock()
    recognizer.recognize.side_effect = lambda page, box: (f"{box.category} {box.index}", 0.95)
    return recognizer


@pytest.fixture
def mock_table_recognizer() -> Mock:
    """Create a mock table recognizer that estimates every table as wired.

    Returns:
        Mock object with estimate_type and recognize methods
    """
    recognizer = Mock()
    recognizer.estimate_type.return_value = TableType.WIRED
    recognizer.recognize.return_value = ("<table><tr><td>1</td></tr></table>", True)
    return recognizer


@pytest.fixture
def mock_image_extractor() -> Mock:
    """Create a mock image extractor.

    Returns:
        Mock object with extract method
    """
    extractor = Mock()
    extractor.extract.side_effect = lambda page, box: f"images/page{page.page_index}_fig{box.index}.png"
    return extractor


# ==================== Directory Fixtures ====================


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Create an output directory for testing.

    Returns:
        Path to output directory
    """
    output = tmp_path / "output"
    output.mkdir()
    return output


# ==================== Helper Functions ====================


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (fixtures on disk, no models)")
    config.addinivalue_line("markers", "e2e: End-to-end tests (CLI entry point)")
    config.addinivalue_line("markers", "slow: Slow tests (skip with -m 'not slow')")
