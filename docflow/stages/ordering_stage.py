"""Ordering Stage: Reading order of a page's elements."""

from __future__ import annotations

from typing import Any

from docflow.layout.ordering import XYCutSorter
from docflow.types import ContentElement

from .base import BaseStage


class OrderingStage(BaseStage[list[ContentElement], list[ContentElement]]):
    """Orders every element of a page and stamps a dense reading_order from 0.

    With no sorter (reading order disabled) elements are stamped in
    detection order instead.
    """

    name = "reading_order"

    def __init__(self, sorter: XYCutSorter | None):
        self.sorter = sorter

    def _process_impl(self, input_data: list[ContentElement], **context: Any) -> list[ContentElement]:
        if self.sorter is None:
            ordered = sorted(input_data, key=lambda element: element.box.index)
            return [element.with_reading_order(rank) for rank, element in enumerate(ordered)]

        width = context.get("page_width")
        height = context.get("page_height")
        if width is None or height is None:
            raise ValueError("OrderingStage requires 'page_width' and 'page_height' in context")

        return self.sorter.sort_elements(input_data, width, height)
