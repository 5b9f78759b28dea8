"""Wired vs. wireless table estimate.

A light line-density heuristic standing in for a table classification
model: edges are opened with long horizontal and vertical kernels and the
surviving line pixels are compared against the crop area.
"""

from __future__ import annotations

import logging

import cv2
import numpy as np

from ..constants import (
    CANNY_HIGH_THRESHOLD,
    CANNY_LOW_THRESHOLD,
    DEFAULT_TABLE_LINE_RATIO,
    TABLE_LINE_KERNEL_DIVISOR,
)
from ..types import TableType

logger = logging.getLogger(__name__)

GRAY_NDIM = 2
RGBA_CHANNELS = 4


def _to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == GRAY_NDIM:
        return image
    if image.shape[2] == RGBA_CHANNELS:
        return cv2.cvtColor(image, cv2.COLOR_RGBA2GRAY)
    return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)


def table_line_ratio(crop: np.ndarray) -> float:
    """Fraction of crop pixels lying on long horizontal or vertical lines."""
    gray = _to_gray(np.ascontiguousarray(crop, dtype=np.uint8))
    rows, cols = gray.shape[:2]
    edges = cv2.Canny(gray, CANNY_LOW_THRESHOLD, CANNY_HIGH_THRESHOLD)

    horizontal_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (max(1, cols // TABLE_LINE_KERNEL_DIVISOR), 1))
    vertical_kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (1, max(1, rows // TABLE_LINE_KERNEL_DIVISOR)))
    horizontal = cv2.morphologyEx(edges, cv2.MORPH_OPEN, horizontal_kernel)
    vertical = cv2.morphologyEx(edges, cv2.MORPH_OPEN, vertical_kernel)

    line_pixels = cv2.countNonZero(horizontal) + cv2.countNonZero(vertical)
    return line_pixels / float(rows * cols)


def estimate_table_type(crop: np.ndarray, line_ratio_threshold: float = DEFAULT_TABLE_LINE_RATIO) -> str:
    """Estimate whether a table crop has ruling lines.

    Args:
        crop: Table region (H, W, C) in RGB, or (H, W) grayscale
        line_ratio_threshold: Line pixel fraction above which the table is wired

    Returns:
        TableType.WIRED, TableType.WIRELESS, or TableType.UNKNOWN for an empty crop
    """
    if crop is None or crop.size == 0 or crop.shape[0] == 0 or crop.shape[1] == 0:
        return TableType.UNKNOWN

    ratio = table_line_ratio(crop)
    table_type = TableType.WIRED if ratio > line_ratio_threshold else TableType.WIRELESS
    logger.debug("Table line ratio %.4f -> %s", ratio, table_type)
    return table_type
