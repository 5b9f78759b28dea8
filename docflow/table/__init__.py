"""Table helpers: wired/wireless estimate."""

from .estimate import estimate_table_type, table_line_ratio

__all__ = ["estimate_table_type", "table_line_ratio"]
