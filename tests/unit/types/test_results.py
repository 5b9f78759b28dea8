"""Tests for PageResult, DocumentResult and stage timing aggregation."""

from __future__ import annotations

import pytest

from docflow.types import (
    ContentElement,
    DocumentResult,
    DocumentStatus,
    PageResult,
    PageState,
    PageStatus,
    StageTimingInfo,
    merge_stage_timings,
)


@pytest.fixture
def completed_page(make_box) -> PageResult:
    box = make_box("text", 0, 0, 500, 100)
    return PageResult(
        page_index=0,
        width=1000,
        height=1000,
        elements=[
            ContentElement(type="text", box=box, page_index=0, text="a").with_reading_order(0),
            ContentElement(type="text", box=box, page_index=0, text="[x]", skipped=True).with_reading_order(1),
        ],
        stage_timings=[StageTimingInfo("ocr", 2.0, 2)],
    )


class TestMergeStageTimings:
    """Tests for merge_stage_timings."""

    def test_sums_by_name(self):
        """Test that timings of one stage are summed."""
        merged = merge_stage_timings(
            [StageTimingInfo("layout", 1.0, 1), StageTimingInfo("ocr", 2.0, 3), StageTimingInfo("layout", 4.0, 1)]
        )

        assert list(merged) == ["layout", "ocr"]
        assert merged["layout"].processing_time_ms == 5.0
        assert merged["layout"].items_processed == 2

    def test_inputs_not_mutated(self):
        """Test that merging copies the first entry."""
        first = StageTimingInfo("layout", 1.0, 1)

        merge_stage_timings([first, StageTimingInfo("layout", 1.0, 1)])

        assert first.processing_time_ms == 1.0

    def test_seconds(self):
        """Test the seconds property."""
        assert StageTimingInfo("x", 1500.0).processing_time_sec == 1.5


class TestPageResult:
    """Tests for PageResult."""

    def test_skipped_count(self, completed_page):
        """Test counting skipped elements."""
        assert completed_page.skipped_count == 1
        assert not completed_page.is_failed
        assert completed_page.state == PageState.ASSEMBLED

    def test_failed(self):
        """Test the failed constructor."""
        page = PageResult.failed(4, "unreadable")

        assert page.is_failed
        assert page.status == PageStatus.FAILED
        assert page.to_dict()["error"] == "unreadable"

    def test_to_dict_normalizes(self, completed_page):
        """Test that element bboxes are normalized by default."""
        data = completed_page.to_dict()

        assert data["elements"][0]["bbox"] == [0, 0, 500, 100]
        assert data["stage_timings"] == {"ocr": 2.0}


class TestDocumentResult:
    """Tests for DocumentResult."""

    def test_empty(self):
        """Test the empty document."""
        document = DocumentResult.empty()

        assert document.is_empty
        assert document.status == DocumentStatus.EMPTY
        assert document.iter_elements() == []

    def test_partial(self, completed_page):
        """Test a document with a failed page."""
        document = DocumentResult(
            pages=[completed_page, PageResult.failed(1, "boom")], total_pages=2, processed_pages=1
        )

        assert document.status == DocumentStatus.PARTIAL
        assert document.failed_pages == [1]
        assert document.to_dict()["failed_pages"] == [1]

    def test_completed(self, completed_page):
        """Test a fully processed document."""
        document = DocumentResult(
            pages=[completed_page],
            total_pages=1,
            processed_pages=1,
            stage_timings=[StageTimingInfo("ocr", 2.0, 2)],
        )

        assert document.status == DocumentStatus.COMPLETED
        assert len(document.iter_elements()) == 2
        assert document.get_stage_timings() == {"ocr": 2.0}
