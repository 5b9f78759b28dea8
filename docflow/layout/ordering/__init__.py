"""Reading order analysis.

- projection.py: Box coverage histograms
- segmentation.py: Gap-bounded segments of a histogram
- xycut.py: Recursive XY-Cut ordering and text direction detection
"""

from .projection import projection_by_bboxes
from .segmentation import split_projection_profile
from .xycut import TextDirection, XYCutConfig, XYCutSorter, detect_text_direction, xycut_sort

__all__ = [
    "TextDirection",
    "XYCutConfig",
    "XYCutSorter",
    "detect_text_direction",
    "projection_by_bboxes",
    "split_projection_profile",
    "xycut_sort",
]
