"""Gap-bounded segmentation of projection histograms."""

from __future__ import annotations

from collections.abc import Sequence


def split_projection_profile(values: Sequence[int], min_value: int, min_gap: int) -> list[tuple[int, int]]:
    """Split projection profile into occupied segments.

    Bins with a value strictly greater than ``min_value`` are occupied. A run
    of ``min_gap`` unoccupied bins closes the current segment; shorter runs
    stay inside it. A segment still open at the end is closed at
    ``len(values)``.

    Args:
        values: 1D projection histogram
        min_value: Occupancy threshold
        min_gap: Minimum unoccupied run that separates two segments (>= 1)

    Returns:
        Half-open ``(start, end)`` segments in ascending order

    Example:
        >>> split_projection_profile([0, 0, 3, 3, 3, 0, 0, 0, 4, 4, 0, 0], 0, 2)
        [(2, 5), (8, 10)]
    """
    min_gap = max(1, min_gap)
    segments: list[tuple[int, int]] = []
    in_segment = False
    start = 0
    gap = 0

    for i, value in enumerate(values):
        if value > min_value:
            if not in_segment:
                start = i
                in_segment = True
            gap = 0
        elif in_segment:
            gap += 1
            if gap >= min_gap:
                segments.append((start, i - gap + 1))
                in_segment = False
                gap = 0

    if in_segment:
        segments.append((start, len(values)))

    return segments
