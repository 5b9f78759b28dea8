"""Stage timing types."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass
class StageTimingInfo:
    """Timing information for a pipeline stage.

    Attributes:
        stage_name: Name of the stage
        processing_time_ms: Processing time in milliseconds
        items_processed: Number of items processed (e.g., boxes, pages)
    """

    stage_name: str
    processing_time_ms: float
    items_processed: int = 0

    @property
    def processing_time_sec(self) -> float:
        """Get processing time in seconds."""
        return self.processing_time_ms / 1000.0


def merge_stage_timings(timings: Iterable[StageTimingInfo]) -> dict[str, StageTimingInfo]:
    """Fold timings into one entry per stage name, summing time and item counts.

    Stage order follows first appearance.
    """
    merged: dict[str, StageTimingInfo] = {}
    for timing in timings:
        current = merged.get(timing.stage_name)
        if current is None:
            merged[timing.stage_name] = StageTimingInfo(
                stage_name=timing.stage_name,
                processing_time_ms=timing.processing_time_ms,
                items_processed=timing.items_processed,
            )
        else:
            current.processing_time_ms += timing.processing_time_ms
            current.items_processed += timing.items_processed
    return merged
