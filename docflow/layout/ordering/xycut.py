"""XY-Cut reading order.

XY-Cut Algorithm:
- Recursive projection-based partitioning of the page into blocks
- Horizontal text: cut columns on the X axis first, then rows on the Y axis
- Vertical text: cut on the Y axis first, then the X axis
- Irreducible blocks are sorted with a row (or column) tolerance band,
  columns right-to-left in vertical mode
- Pure geometry, numpy only, deterministic
"""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from ...constants import (
    DEFAULT_MIN_GAP_RATIO,
    DEFAULT_MIN_VALUE_RATIO,
    DEFAULT_ROW_TOLERANCE,
    HORIZONTAL_ASPECT_RATIO,
    HORIZONTAL_MAJORITY,
)
from ...exceptions import InvalidConfigError
from .projection import AXIS_X, AXIS_Y, projection_by_bboxes
from .segmentation import split_projection_profile

if TYPE_CHECKING:
    from ...types import BBox, ContentElement

logger = logging.getLogger(__name__)


class TextDirection:
    """Reading direction of a page."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    AUTO = "auto"

    ALL: tuple[str, ...] = (HORIZONTAL, VERTICAL, AUTO)


@dataclass(frozen=True)
class XYCutConfig:
    """Reading order parameters.

    Attributes:
        direction: TextDirection value; AUTO resolves from box aspect ratios
        min_gap_ratio: Whitespace run, as a fraction of the page dimension, that cuts
        min_value_ratio: Occupancy threshold, floored to an integer box count
        row_tolerance: Fraction of the smaller box height (width in vertical mode)
            under which two centers are treated as the same row (column)
    """

    direction: str = TextDirection.AUTO
    min_gap_ratio: float = DEFAULT_MIN_GAP_RATIO
    min_value_ratio: float = DEFAULT_MIN_VALUE_RATIO
    row_tolerance: float = DEFAULT_ROW_TOLERANCE

    def __post_init__(self) -> None:
        if self.direction not in TextDirection.ALL:
            raise InvalidConfigError(
                f"Unknown reading direction: {self.direction!r}. Use one of {', '.join(TextDirection.ALL)}."
            )
        for name in ("min_gap_ratio", "min_value_ratio", "row_tolerance"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigError(f"{name} must be a finite non-negative number, got {value}")

    def min_gap(self, dimension: int) -> int:
        """Gap threshold in pixels for a page dimension, never below 1."""
        return max(1, int(dimension * self.min_gap_ratio))

    @property
    def min_value(self) -> int:
        return int(self.min_value_ratio)


def detect_text_direction(bboxes: Sequence[BBox]) -> str:
    """Classify text direction from box aspect ratios.

    Only boxes with positive width and height are counted. A box is
    horizontal-leaning when ``width >= height * 1.5``; the page is horizontal
    when at least half the counted boxes are. Empty input, or input with no
    measurable boxes, is horizontal.
    """
    measurable = [bbox for bbox in bboxes if bbox.width > 0 and bbox.height > 0]
    if not measurable:
        return TextDirection.HORIZONTAL

    horizontal = sum(1 for bbox in measurable if bbox.width >= bbox.height * HORIZONTAL_ASPECT_RATIO)
    if horizontal / len(measurable) >= HORIZONTAL_MAJORITY:
        return TextDirection.HORIZONTAL
    return TextDirection.VERTICAL


def _partition(indices: list[int], centers: np.ndarray, segments: list[tuple[int, int]]) -> list[list[int]]:
    """Group indices by the segment their center falls into.

    A center outside every segment (degenerate or clamped boxes) joins the
    nearest segment, the earlier one on a tie. Groups come back in segment
    order; empty groups are dropped.
    """
    groups: list[list[int]] = [[] for _ in segments]
    for idx in indices:
        center = centers[idx]
        best = 0
        best_distance = math.inf
        for pos, (start, end) in enumerate(segments):
            if start <= center < end:
                best = pos
                break
            distance = start - center if center < start else center - end
            if distance < best_distance:
                best = pos
                best_distance = distance
        groups[best].append(idx)

    return [group for group in groups if group]


class _XYCutRun:
    """State for one ordering call: box arrays, thresholds and direction."""

    def __init__(self, boxes: np.ndarray, page_width: int, page_height: int, config: XYCutConfig, direction: str):
        self.boxes = boxes
        self.page_width = page_width
        self.page_height = page_height
        self.config = config
        self.vertical = direction == TextDirection.VERTICAL
        self.centers_x = (boxes[:, 0] + boxes[:, 2]) / 2
        self.centers_y = (boxes[:, 1] + boxes[:, 3]) / 2
        self.widths = boxes[:, 2] - boxes[:, 0]
        self.heights = boxes[:, 3] - boxes[:, 1]
        self.min_value = config.min_value
        self.axis_order = (AXIS_Y, AXIS_X) if self.vertical else (AXIS_X, AXIS_Y)

    def split(self, indices: list[int]) -> list[list[int]] | None:
        """Try both axes in direction order; return groups from the first that cuts."""
        for axis in self.axis_order:
            length = self.page_width if axis == AXIS_X else self.page_height
            projection = projection_by_bboxes(self.boxes[indices], axis, length)
            segments = split_projection_profile(projection, self.min_value, self.config.min_gap(length))
            if len(segments) <= 1:
                continue

            centers = self.centers_x if axis == AXIS_X else self.centers_y
            groups = _partition(indices, centers, segments)
            # Every group must shrink or the recursion would not terminate
            if len(groups) > 1:
                return groups
        return None

    def compare(self, a: int, b: int) -> int:
        """Tie-tolerant base-case comparator."""
        if self.vertical:
            primary_a, primary_b = self.centers_x[a], self.centers_x[b]
            band = min(self.widths[a], self.widths[b]) * self.config.row_tolerance
            if abs(primary_a - primary_b) < band:
                return _sign(self.centers_y[a] - self.centers_y[b])
            return _sign(primary_b - primary_a)

        primary_a, primary_b = self.centers_y[a], self.centers_y[b]
        band = min(self.heights[a], self.heights[b]) * self.config.row_tolerance
        if abs(primary_a - primary_b) < band:
            return _sign(self.centers_x[a] - self.centers_x[b])
        return _sign(primary_a - primary_b)

    def run(self) -> list[int]:
        result: list[int] = []
        # Explicit stack, groups pushed in reverse so pops follow segment order
        stack: list[list[int]] = [list(range(len(self.boxes)))]
        while stack:
            indices = stack.pop()
            if len(indices) <= 1:
                result.extend(indices)
                continue

            groups = self.split(indices)
            if groups is None:
                result.extend(sorted(indices, key=functools.cmp_to_key(self.compare)))
                continue

            stack.extend(reversed(groups))
        return result


def _sign(value: float) -> int:
    return int(value > 0) - int(value < 0)


def xycut_sort(
    bboxes: Sequence[BBox], page_width: int, page_height: int, config: XYCutConfig | None = None
) -> list[int]:
    """Compute the reading order of boxes on a page.

    Args:
        bboxes: Boxes in page pixels
        page_width: Page width in pixels (> 0)
        page_height: Page height in pixels (> 0)
        config: Ordering parameters (defaults: auto direction, 5% gap)

    Returns:
        Permutation of ``range(len(bboxes))`` in reading order

    Raises:
        InvalidConfigError: If a page dimension is not positive

    Example:
        >>> xycut_sort([BBox(0, 500, 100, 520), BBox(0, 0, 100, 20)], 1000, 1000)
        [1, 0]
    """
    if page_width <= 0 or page_height <= 0:
        raise InvalidConfigError(f"Page dimensions must be positive, got {page_width}x{page_height}")

    config = config or XYCutConfig()
    if not bboxes:
        return []

    direction = config.direction
    if direction == TextDirection.AUTO:
        direction = detect_text_direction(bboxes)

    boxes = np.array([[b.x0, b.y0, b.x1, b.y1] for b in bboxes], dtype=float)
    order = _XYCutRun(boxes, page_width, page_height, config, direction).run()

    logger.debug(
        "XY-Cut ordered %d boxes on %dx%d page (direction=%s)",
        len(order),
        page_width,
        page_height,
        direction,
    )
    return order


class XYCutSorter:
    """Reading order engine bound to one XYCutConfig.

    Example:
        >>> sorter = XYCutSorter(XYCutConfig(direction="horizontal"))
        >>> sorter.order(bboxes, page_width=1000, page_height=1400)
        [0, 2, 1]
    """

    name = "xycut"

    def __init__(self, config: XYCutConfig | None = None):
        self.config = config or XYCutConfig()

    def order(self, bboxes: Sequence[BBox], page_width: int, page_height: int) -> list[int]:
        return xycut_sort(bboxes, page_width, page_height, self.config)

    def sort_elements(
        self, elements: Sequence[ContentElement], page_width: int, page_height: int
    ) -> list[ContentElement]:
        """Return elements in reading order, each stamped with a dense reading_order from 0."""
        permutation = self.order([element.bbox for element in elements], page_width, page_height)
        return [elements[idx].with_reading_order(rank) for rank, idx in enumerate(permutation)]
