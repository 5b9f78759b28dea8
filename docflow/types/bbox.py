"""BBox class for bounding box operations.

Internal format: (x0, y0, x1, y1) - xyxy corners in page pixels
JSON output: [x0, y0, x1, y1], optionally normalized to a 0-1000 scale
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ..constants import NORMALIZED_BBOX_SCALE

if TYPE_CHECKING:
    import numpy as np


@dataclass(frozen=True)
class BBox:
    """Pixel-based bounding box with integer coordinates.

    Internal format: (x0, y0, x1, y1) - Top-left and bottom-right corners (xyxy)
    Origin: Top-left corner of the page raster (0, 0)

    Degenerate (zero-width or zero-height) boxes are allowed. They take part in
    routing and ordering but contribute nothing to projections.
    """

    x0: int
    y0: int
    x1: int
    y1: int

    @classmethod
    def from_xyxy(cls, x0: float, y0: float, x1: float, y1: float) -> BBox:
        """Create from (x0, y0, x1, y1) corners, rounding to int.

        Example:
            >>> bbox = BBox.from_xyxy(100.5, 50.2, 300.8, 200.1)
            >>> bbox.x0, bbox.y0, bbox.x1, bbox.y1
            (100, 50, 301, 200)
        """
        return cls(x0=round(x0), y0=round(y0), x1=round(x1), y1=round(y1))

    @classmethod
    def from_xywh(cls, x: float, y: float, w: float, h: float) -> BBox:
        """Create from (x, y, width, height), rounding to int."""
        return cls(x0=round(x), y0=round(y), x1=round(x + w), y1=round(y + h))

    @classmethod
    def from_list(cls, coords: Sequence[float], coord_format: str = "xyxy") -> BBox:
        """Create from a coordinate list.

        Args:
            coords: Coordinate list (at least 4 elements)
            coord_format: "xyxy" or "xywh"

        Raises:
            ValueError: If coord_format is unknown or fewer than 4 values are given
        """
        if len(coords) < 4:
            raise ValueError(f"Expected 4 bbox coordinates, got {len(coords)}")
        if coord_format == "xyxy":
            return cls.from_xyxy(*coords[:4])
        if coord_format == "xywh":
            return cls.from_xywh(*coords[:4])
        raise ValueError(f"Unknown bbox coord_format: {coord_format}. Use 'xyxy' or 'xywh'.")

    def to_xyxy(self) -> tuple[int, int, int, int]:
        return (self.x0, self.y0, self.x1, self.y1)

    def to_list(self) -> list[int]:
        return [self.x0, self.y0, self.x1, self.y1]

    def normalized(self, page_width: int, page_height: int) -> list[int]:
        """Scale to the 0-1000 coordinate space relative to the page, truncating.

        Example:
            >>> BBox(100, 50, 300, 200).normalized(1000, 500)
            [100, 100, 300, 400]
        """
        if page_width <= 0 or page_height <= 0:
            return self.to_list()
        return [
            int(self.x0 * NORMALIZED_BBOX_SCALE / page_width),
            int(self.y0 * NORMALIZED_BBOX_SCALE / page_height),
            int(self.x1 * NORMALIZED_BBOX_SCALE / page_width),
            int(self.y1 * NORMALIZED_BBOX_SCALE / page_height),
        ]

    # ==================== Properties ====================

    @property
    def center(self) -> tuple[float, float]:
        """Get center point (cx, cy).

        Example:
            >>> BBox(100, 50, 300, 200).center
            (200.0, 125.0)
        """
        return ((self.x0 + self.x1) / 2, (self.y0 + self.y1) / 2)

    @property
    def width(self) -> int:
        return self.x1 - self.x0

    @property
    def height(self) -> int:
        return self.y1 - self.y0

    @property
    def area(self) -> int:
        return max(0, self.width) * max(0, self.height)

    @property
    def is_degenerate(self) -> bool:
        """True when the box has no positive area."""
        return self.width <= 0 or self.height <= 0

    # ==================== Geometric Operations ====================

    def clip(self, max_width: int, max_height: int) -> BBox:
        """Clip bbox to image boundaries.

        A box lying fully outside the image collapses to a zero-area box on the
        nearest edge instead of becoming inverted.

        Example:
            >>> BBox(100, 50, 1000, 900).clip(800, 600)
            BBox(x0=100, y0=50, x1=800, y1=600)
        """
        x0 = min(max(0, self.x0), max_width)
        y0 = min(max(0, self.y0), max_height)
        x1 = max(x0, min(max_width, self.x1))
        y1 = max(y0, min(max_height, self.y1))
        return BBox(x0=x0, y0=y0, x1=x1, y1=y1)

    def crop(self, image: np.ndarray) -> np.ndarray:
        """Crop this bbox area from an image (H, W, C) or (H, W).

        The result may be empty when the box does not overlap the image.
        """
        clipped = self.clip(image.shape[1], image.shape[0])
        return image[clipped.y0 : clipped.y1, clipped.x0 : clipped.x1]
