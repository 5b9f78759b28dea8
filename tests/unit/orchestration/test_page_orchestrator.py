"""Tests for PageOrchestrator."""

from __future__ import annotations

from unittest.mock import Mock

import numpy as np
import pytest

from docflow.config import PipelineConfig
from docflow.exceptions import InvalidConfigError, RecognitionError
from docflow.orchestration import PageOrchestrator
from docflow.routing import Placeholder
from docflow.stages import StageError
from docflow.types import LayoutResult, PageImage, PageState, TableType


@pytest.fixture
def orchestrator(mock_detector, mock_text_recognizer, mock_table_recognizer, mock_image_extractor):
    """Orchestrator with every collaborator and default config."""
    return PageOrchestrator(
        mock_detector,
        text_recognizer=mock_text_recognizer,
        table_recognizer=mock_table_recognizer,
        image_extractor=mock_image_extractor,
    )


class TestPageOrchestratorScenario:
    """Title, two body paragraphs and a table on one page."""

    def test_reading_order(self, orchestrator, blank_page):
        """Test that the title comes first, then the paragraphs, then the table."""
        result = orchestrator.process_page(blank_page)

        categories = [element.category for element in result.elements]
        assert categories == ["title", "text", "text", "table"]
        assert [element.reading_order for element in result.elements] == [0, 1, 2, 3]
        # The upper paragraph was detected as box 3
        assert [element.box.index for element in result.elements] == [2, 3, 1, 0]

    def test_wireless_table_is_skipped(self, orchestrator, blank_page, mock_table_recognizer):
        """Test that the estimate runs first and wireless tables skip the recognizer."""
        mock_table_recognizer.estimate_type.return_value = TableType.WIRELESS

        result = orchestrator.process_page(blank_page)

        mock_table_recognizer.estimate_type.assert_called_once()
        mock_table_recognizer.recognize.assert_not_called()
        table = result.elements[3]
        assert table.skipped
        assert table.html == Placeholder.WIRELESS_TABLE
        assert result.skipped_count == 1

    def test_result_fields(self, orchestrator, blank_page, report_layout):
        """Test page dimensions, layout and timings."""
        result = orchestrator.process_page(blank_page)

        assert (result.width, result.height) == (1000, 1000)
        assert result.layout is report_layout
        assert result.state == PageState.ASSEMBLED
        assert [timing.stage_name for timing in result.stage_timings] == [
            "layout",
            "routing",
            "ocr",
            "table",
            "reading_order",
        ]
        assert result.total_time_ms >= 0


class TestPageOrchestratorRouting:
    """Tests for stage switches and missing collaborators."""

    def test_no_collaborators_yields_placeholders(self, mock_detector, blank_page):
        """Test that every box still yields one skipped element."""
        result = PageOrchestrator(mock_detector).process_page(blank_page)

        assert len(result.elements) == 4
        assert all(element.skipped for element in result.elements)
        assert result.elements[0].text == Placeholder.TEXT_DISABLED
        assert result.elements[3].html == Placeholder.TABLE_DISABLED
        assert [timing.stage_name for timing in result.stage_timings][-2:] == ["unsupported", "reading_order"]

    def test_ocr_disabled(self, mock_detector, mock_text_recognizer, blank_page):
        """Test that a disabled OCR stage never calls the recognizer."""
        config = PipelineConfig(enable_ocr=False)

        result = PageOrchestrator(mock_detector, text_recognizer=mock_text_recognizer, config=config).process_page(
            blank_page
        )

        mock_text_recognizer.recognize.assert_not_called()
        assert result.skipped_count == 4

    def test_reading_order_disabled(self, mock_detector, mock_text_recognizer, blank_page):
        """Test that elements keep detection order when ordering is off."""
        config = PipelineConfig(enable_reading_order=False)
        page_orchestrator = PageOrchestrator(mock_detector, text_recognizer=mock_text_recognizer, config=config)

        result = page_orchestrator.process_page(blank_page)

        assert [element.box.index for element in result.elements] == [0, 1, 2, 3]

    def test_layout_disabled(self, mock_detector, blank_page):
        """Test that no detection means an empty page."""
        result = PageOrchestrator(mock_detector, config=PipelineConfig(enable_layout=False)).process_page(blank_page)

        mock_detector.detect.assert_not_called()
        assert result.elements == []
        assert result.state == PageState.ASSEMBLED

    def test_empty_layout(self, blank_page):
        """Test a page with no detected boxes."""
        detector = Mock()
        detector.detect.return_value = LayoutResult()

        result = PageOrchestrator(detector).process_page(blank_page)

        assert result.elements == []
        assert [timing.stage_name for timing in result.stage_timings] == ["layout"]


class TestPageOrchestratorErrors:
    """Tests for error handling."""

    def test_recognizer_failure_does_not_abort_page(self, mock_detector, blank_page):
        """Test that one failing box becomes skipped and the rest is kept."""
        recognizer = Mock()
        recognizer.recognize.side_effect = [("Title", 0.9), RecognitionError("smudge"), ("Para", 0.9)]

        result = PageOrchestrator(mock_detector, text_recognizer=recognizer).process_page(blank_page)

        assert len(result.elements) == 4
        assert sum(1 for element in result.elements if element.skipped) == 2  # failed text + table placeholder

    def test_detector_failure_propagates(self, blank_page):
        """Test that detector errors are not masked."""
        detector = Mock()
        detector.detect.side_effect = RuntimeError("CUDA out of memory")

        with pytest.raises(StageError, match="layout"):
            PageOrchestrator(detector).process_page(blank_page)

    def test_invalid_page_dimensions(self, mock_detector):
        """Test that an empty raster is rejected before detection."""
        page = PageImage(image=np.zeros((0, 100, 3), dtype=np.uint8), page_index=0)

        with pytest.raises(InvalidConfigError):
            PageOrchestrator(mock_detector).process_page(page)

        mock_detector.detect.assert_not_called()
