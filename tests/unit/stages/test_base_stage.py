"""Tests for BaseStage and related classes.

Tests cover:
- BaseStage abstract class behavior
- StageResult dataclass and its timing record
- StageError exception
- Timing and error handling
"""

from __future__ import annotations

import time
from typing import Any

import pytest

from docflow.stages.base import BaseStage, StageError, StageResult


# Test implementations
class UpperStage(BaseStage[list[str], list[str]]):
    """A concrete stage for testing."""

    name = "upper"

    def _process_impl(self, input_data: list[str], **context: Any) -> list[str]:
        """Uppercase every item, with an optional prefix from context."""
        prefix = context.get("prefix", "")
        return [f"{prefix}{item.upper()}" for item in input_data]


class FailingStage(BaseStage[str, str]):
    """A stage that always fails."""

    name = "failing-stage"

    def _process_impl(self, input_data: str, **context: Any) -> str:
        """Raise an error."""
        raise ValueError(f"Processing failed for: {input_data}")


class ReraisingStage(BaseStage[str, str]):
    """A stage raising a StageError of its own."""

    name = "outer"

    def _process_impl(self, input_data: str, **context: Any) -> str:
        raise StageError("inner", "already wrapped")


class SlowStage(BaseStage[str, str]):
    """A stage that takes time."""

    name = "slow-stage"

    def __init__(self, delay: float = 0.05):
        self.delay = delay

    def _process_impl(self, input_data: str, **context: Any) -> str:
        """Process with delay."""
        time.sleep(self.delay)
        return input_data


class TestStageError:
    """Tests for StageError exception."""

    def test_stage_error_creation(self):
        """Test creating a StageError."""
        error = StageError("layout", "Detector crashed")

        assert error.stage_name == "layout"
        assert error.cause is None
        assert str(error) == "[layout] Detector crashed"

    def test_stage_error_with_cause(self):
        """Test creating a StageError with a cause."""
        original_error = ValueError("Invalid input")
        error = StageError("ocr", "Failed to read text", cause=original_error)

        assert error.cause is original_error


class TestStageResult:
    """Tests for StageResult dataclass."""

    def test_stage_result_timing(self):
        """Test converting a StageResult into a timing record."""
        result = StageResult(data=[1, 2], stage_name="routing", processing_time_ms=1.5, items_processed=2)

        timing = result.timing()

        assert timing.stage_name == "routing"
        assert timing.processing_time_ms == 1.5
        assert timing.items_processed == 2
        assert result.metadata == {}


class TestBaseStageAbstract:
    """Tests for BaseStage abstract behavior."""

    def test_cannot_instantiate_base_stage(self):
        """Test that BaseStage cannot be instantiated directly."""
        with pytest.raises(TypeError, match="abstract"):
            BaseStage()  # type: ignore[abstract]

    def test_repr(self):
        """Test the string representation."""
        assert repr(UpperStage()) == "UpperStage(name='upper')"


class TestBaseStageProcess:
    """Tests for process and process_with_result."""

    def test_process_with_context(self):
        """Test processing with context."""
        assert UpperStage().process(["a", "b"], prefix="> ") == ["> A", "> B"]

    def test_process_with_result_counts_items(self):
        """Test that items_processed is the input length."""
        result = UpperStage().process_with_result(["a", "b", "c"])

        assert result.data == ["A", "B", "C"]
        assert result.stage_name == "upper"
        assert result.items_processed == 3

    def test_items_processed_for_unsized_input(self):
        """Test that a single unsized input counts as one item."""
        result = SlowStage(delay=0).process_with_result(object())  # type: ignore[arg-type]

        assert result.items_processed == 1

    def test_timing_is_measured(self):
        """Test that processing time is measured."""
        result = SlowStage(delay=0.05).process_with_result("page")

        assert result.processing_time_ms >= 50

    def test_errors_are_wrapped(self):
        """Test that errors are wrapped in StageError with the cause chained."""
        with pytest.raises(StageError) as exc_info:
            FailingStage().process("page-7")

        assert exc_info.value.stage_name == "failing-stage"
        assert "Processing failed for: page-7" in str(exc_info.value)
        assert isinstance(exc_info.value.cause, ValueError)
        assert exc_info.value.__cause__ is exc_info.value.cause

    def test_stage_errors_pass_through(self):
        """Test that a StageError is not wrapped twice."""
        with pytest.raises(StageError) as exc_info:
            ReraisingStage().process("x")

        assert exc_info.value.stage_name == "inner"
