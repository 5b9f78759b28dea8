"""Shared constants for docflow."""

# =============================================================================
# Reading Order
# =============================================================================
DEFAULT_MIN_GAP_RATIO = 0.05
"""Minimum whitespace run, as a fraction of the page dimension, that cuts a block."""

DEFAULT_MIN_VALUE_RATIO = 0.0
"""Occupancy threshold; histogram bins strictly above it count as occupied."""

DEFAULT_ROW_TOLERANCE = 0.5
"""Fraction of the smaller box height (or width) under which two centers share a row."""

HORIZONTAL_ASPECT_RATIO = 1.5
"""A box with width >= height * this value is horizontal-leaning."""

HORIZONTAL_MAJORITY = 0.5
"""Fraction of horizontal-leaning boxes needed to resolve auto direction to horizontal."""

# =============================================================================
# Table Type Estimation
# =============================================================================
DEFAULT_TABLE_LINE_RATIO = 0.01
"""Fraction of line pixels above which a table crop is considered wired."""

CANNY_LOW_THRESHOLD = 50
CANNY_HIGH_THRESHOLD = 150

TABLE_LINE_KERNEL_DIVISOR = 4
"""Morphology kernel length as a fraction (1/n) of the crop width or height."""

# =============================================================================
# Output
# =============================================================================
NORMALIZED_BBOX_SCALE = 1000
"""Coordinate scale for normalized bboxes in the JSON content list."""

DEFAULT_OUTPUT_FORMATS = ("json", "markdown")

# =============================================================================
# Runtime
# =============================================================================
DEFAULT_MAX_CONCURRENT_PAGES = 4
"""Upper bound on page renders in flight at once."""

DEFAULT_DPI = 200
