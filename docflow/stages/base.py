"""Base stage class for pipeline stages.

This module defines the abstract base class for all page stages,
providing a consistent interface, timing and error context.
"""

from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from docflow.misc import elapsed_ms
from docflow.types import StageTimingInfo

logger = logging.getLogger(__name__)

__all__ = ["BaseStage", "StageResult", "StageError"]

# Type variables for generic stage input/output
InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class StageError(Exception):
    """Exception raised when stage processing fails.

    The original exception is available as ``cause`` and as ``__cause__``.
    """

    def __init__(self, stage_name: str, message: str, cause: Exception | None = None):
        self.stage_name = stage_name
        self.cause = cause
        super().__init__(f"[{stage_name}] {message}")


@dataclass
class StageResult(Generic[OutputT]):
    """Result from a pipeline stage.

    Attributes:
        data: The output data from the stage
        stage_name: Name of the stage that produced this result
        processing_time_ms: Time taken to process in milliseconds
        items_processed: Number of input items the stage handled
        metadata: Additional metadata from processing
    """

    data: OutputT
    stage_name: str
    processing_time_ms: float = 0.0
    items_processed: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def timing(self) -> StageTimingInfo:
        return StageTimingInfo(
            stage_name=self.stage_name,
            processing_time_ms=self.processing_time_ms,
            items_processed=self.items_processed,
        )


class BaseStage(ABC, Generic[InputT, OutputT]):
    """Abstract base class for all page stages.

    All stage implementations inherit from this class and implement
    ``_process_impl``. This base class provides:

    - Consistent interface (process, process_with_result)
    - Timing and logging
    - Error handling with stage context

    Attributes:
        name: Stage name for logging, timing and identification

    Example:
        >>> class MyStage(BaseStage[list[LayoutBox], list[ContentElement]]):
        ...     name = "my-stage"
        ...
        ...     def _process_impl(self, input_data, **context):
        ...         return result
    """

    name: str = "base-stage"

    @abstractmethod
    def _process_impl(self, input_data: InputT, **context: Any) -> OutputT:
        """Internal processing implementation.

        Args:
            input_data: Input from previous stage
            **context: Additional context (page, page_index, ...)

        Returns:
            Processed output for next stage
        """

    @staticmethod
    def _count(input_data: Any) -> int:
        try:
            return len(input_data)
        except TypeError:
            return 1

    def process(self, input_data: InputT, **context: Any) -> OutputT:
        """Process input and produce output.

        Raises:
            StageError: If processing fails
        """
        return self.process_with_result(input_data, **context).data

    def process_with_result(self, input_data: InputT, **context: Any) -> StageResult[OutputT]:
        """Process and return result with timing.

        Raises:
            StageError: If processing fails, chaining the original exception
        """
        start_time = time.perf_counter()

        try:
            result = self._process_impl(input_data, **context)
        except StageError:
            raise
        except Exception as e:
            logger.error("%s failed after %.2fms: %s", self.name, elapsed_ms(start_time), e)
            raise StageError(self.name, str(e), cause=e) from e

        processing_time_ms = elapsed_ms(start_time)
        logger.debug("%s completed in %.2fms", self.name, processing_time_ms)

        return StageResult(
            data=result,
            stage_name=self.name,
            processing_time_ms=processing_time_ms,
            items_processed=self._count(input_data),
        )

    def __repr__(self) -> str:
        """String representation."""
        return f"{self.__class__.__name__}(name={self.name!r})"
