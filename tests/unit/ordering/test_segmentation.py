"""Tests for gap-bounded projection segmentation."""

from __future__ import annotations

from docflow.layout.ordering.segmentation import split_projection_profile


class TestSplitProjectionProfile:
    """Tests for split_projection_profile."""

    def test_two_segments(self):
        """Test the canonical two-segment histogram."""
        values = [0, 0, 3, 3, 3, 0, 0, 0, 4, 4, 0, 0]

        assert split_projection_profile(values, 0, 2) == [(2, 5), (8, 10)]

    def test_short_gap_stays_inside_segment(self):
        """Test that gaps shorter than min_gap do not cut."""
        values = [1, 1, 0, 1, 1, 0, 0, 0]

        assert split_projection_profile(values, 0, 2) == [(0, 5)]

    def test_open_segment_closed_at_end(self):
        """Test that a segment still open at the end closes at len(values)."""
        assert split_projection_profile([0, 2, 2], 0, 2) == [(1, 3)]

    def test_min_value_is_strict(self):
        """Test that only values above min_value are occupied."""
        values = [1, 1, 2, 2, 1, 1, 1]

        assert split_projection_profile(values, 1, 2) == [(2, 4)]

    def test_all_empty(self):
        """Test a histogram with no occupied bins."""
        assert split_projection_profile([0, 0, 0], 0, 1) == []

    def test_zero_min_gap_behaves_as_one(self):
        """Test that min_gap is guarded to at least 1."""
        values = [1, 0, 1]

        assert split_projection_profile(values, 0, 0) == split_projection_profile(values, 0, 1)
        assert split_projection_profile(values, 0, 0) == [(0, 1), (2, 3)]
