"""Routing Stage: Bucket assignment of detected regions."""

from __future__ import annotations

from typing import Any

from docflow.routing import CapabilityFilter, RoutedBoxes, route_boxes
from docflow.types import LayoutResult

from .base import BaseStage


class RoutingStage(BaseStage[LayoutResult, RoutedBoxes]):
    """Partitions a page's boxes into text/table/figure/unsupported buckets."""

    name = "routing"

    def __init__(self, capability_filter: CapabilityFilter):
        self.capability_filter = capability_filter

    def _process_impl(self, input_data: LayoutResult, **context: Any) -> RoutedBoxes:
        return route_boxes(input_data.boxes, self.capability_filter)
