"""Tests for output serializers and saving."""

from __future__ import annotations

import json
from unittest.mock import Mock

import pytest

from docflow.exceptions import FileSaveError
from docflow.io.output import (
    JsonContentListSerializer,
    JsonDocumentSerializer,
    MarkdownSerializer,
    element_to_markdown,
    save_outputs,
)
from docflow.routing import Placeholder
from docflow.types import ContentElement, DocumentResult, PageResult


@pytest.fixture
def document(make_box) -> DocumentResult:
    """Two-page document with text, a table, a figure and a skipped formula."""
    first = PageResult(
        page_index=0,
        width=1000,
        height=2000,
        elements=[
            ContentElement(type="title", box=make_box("title", 100, 100, 900, 200), page_index=0, text="Report"),
            ContentElement(
                type="table", box=make_box("table", 100, 400, 900, 800, index=1), page_index=0, html="<table/>"
            ),
            ContentElement(
                type="image",
                box=make_box("figure", 100, 900, 500, 1200, index=2),
                page_index=0,
                image_path="images/page0_fig2.png",
            ),
        ],
    )
    second = PageResult(
        page_index=1,
        width=1000,
        height=1000,
        elements=[
            ContentElement(
                type="equation",
                box=make_box("equation", 0, 0, 100, 100),
                page_index=1,
                text=Placeholder.FORMULA,
                skipped=True,
            ),
            ContentElement(
                type="header", box=make_box("header", 0, 0, 100, 10, index=1), page_index=1, text="Running head"
            ),
        ],
    )
    for page in (first, second):
        page.elements = [element.with_reading_order(i) for i, element in enumerate(page.elements)]
    return DocumentResult(pages=[first, second], total_pages=2, processed_pages=2, skipped_elements=1)


class TestJsonContentListSerializer:
    """Tests for JsonContentListSerializer."""

    def test_content_list(self, document):
        """Test one entry per element with normalized bboxes."""
        items = json.loads(JsonContentListSerializer().serialize(document))

        assert len(items) == 5
        assert items[0] == {
            "reading_order": 0,
            "type": "title",
            "category": "title",
            "page_idx": 0,
            "bbox": [100, 50, 900, 100],
            "text": "Report",
        }
        assert items[2]["img_path"] == "images/page0_fig2.png"
        assert items[3]["skipped"] is True
        assert items[3]["page_idx"] == 1

    def test_pixel_bboxes(self, document):
        """Test disabling normalization."""
        items = JsonContentListSerializer(normalize_bbox=False).content_list(document)

        assert items[0]["bbox"] == [100, 100, 900, 200]

    def test_document_serializer(self, document):
        """Test the full document dump."""
        data = json.loads(JsonDocumentSerializer().serialize(document))

        assert data["status"] == "completed"
        assert len(data["pages"]) == 2


class TestMarkdownSerializer:
    """Tests for MarkdownSerializer."""

    def test_serialize(self, document):
        """Test page rendering and separators."""
        markdown = MarkdownSerializer().serialize(document)

        assert markdown == (
            "# Report\n\n<table/>\n\n![](images/page0_fig2.png)"
            "\n\n---\n\n"
            f"{Placeholder.FORMULA}\n"
        )

    def test_empty_document(self):
        """Test that an empty document renders to an empty string."""
        assert MarkdownSerializer().serialize(DocumentResult()) == ""

    @pytest.mark.parametrize(
        ("element_type", "category", "text", "expected"),
        [
            ("list", "list", "item", "- item"),
            ("list", "list", "- item", "- item"),
            ("code", "code", "x = 1", "```\nx = 1\n```"),
            ("equation", "equation", "E=mc^2", "$$E=mc^2$$"),
            ("text", "figure_caption", "Figure 1", "*Figure 1*"),
            ("footer", "footer", "Page 3", ""),
            ("text", "text", "   ", ""),
        ],
    )
    def test_element_to_markdown(self, make_box, element_type, category, text, expected):
        """Test per-type rendering."""
        element = ContentElement(type=element_type, box=make_box(category, 0, 0, 10, 10), page_index=0, text=text)

        assert element_to_markdown(element) == expected


class TestSaveOutputs:
    """Tests for save_outputs."""

    def test_writes_files(self, document, tmp_path):
        """Test one file per serializer, reusing stored outputs."""
        document.outputs["markdown"] = "cached"
        serializers = [JsonContentListSerializer(), MarkdownSerializer()]

        written = save_outputs(document, serializers, tmp_path / "out", "report")

        assert written["json"].name == "report.json"
        assert written["markdown"].read_text(encoding="utf-8") == "cached"
        assert len(json.loads(written["json"].read_text(encoding="utf-8"))) == 5

    def test_write_failure(self, document, tmp_path):
        """Test that an unwritable target raises FileSaveError."""
        blocker = tmp_path / "file"
        blocker.write_text("x", encoding="utf-8")
        serializer = Mock()
        serializer.name = "fake"
        serializer.suffix = ".txt"
        serializer.serialize.return_value = "data"

        with pytest.raises(FileSaveError):
            save_outputs(document, [serializer], blocker / "nested", "report")
