"""Coverage histograms of boxes along one page axis."""

from __future__ import annotations

import numpy as np

AXIS_X = 0
AXIS_Y = 1


def projection_by_bboxes(boxes: np.ndarray, axis: int, length: int) -> np.ndarray:
    """Get projection histogram along specified axis.

    Bin ``i`` counts how many boxes cover pixel ``i`` on the axis. Box edges
    are truncated to int and clamped to ``[0, length)``. Boxes with no
    positive extent on the axis, and zero-area boxes, contribute nothing.

    Args:
        boxes: Array of bboxes (N, 4) in [x0, y0, x1, y1] format
        axis: 0 for X-axis (horizontal), 1 for Y-axis (vertical)
        length: Projection length (page width or height in pixels)

    Returns:
        1D integer histogram of size ``length``

    Example:
        >>> projection_by_bboxes(np.array([[2, 0, 5, 1], [4, 0, 6, 1]]), axis=0, length=8)
        array([0, 0, 1, 1, 2, 1, 0, 0])
    """
    if axis not in (AXIS_X, AXIS_Y):
        raise ValueError(f"axis must be 0 (X) or 1 (Y), got {axis}")

    result = np.zeros(max(0, length), dtype=int)
    if len(boxes) == 0 or length <= 0:
        return result

    for x0, y0, x1, y1 in np.asarray(boxes, dtype=float):
        if x1 <= x0 or y1 <= y0:
            continue
        start, end = (x0, x1) if axis == AXIS_X else (y0, y1)
        start_idx = max(0, int(start))
        end_idx = min(length, int(end))
        if end_idx > start_idx:
            result[start_idx:end_idx] += 1

    return result
