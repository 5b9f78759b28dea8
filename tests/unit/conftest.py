"""Pytest fixtures specific to unit tests.

Unit tests should be fast and isolated. These fixtures
ensure tests don't require model output or files on disk.
"""

from __future__ import annotations

from unittest.mock import Mock

import numpy as np
import pytest

from docflow.config import PipelineConfig
from docflow.routing import CapabilityFilter
from docflow.types import PageImage


@pytest.fixture
def small_page() -> PageImage:
    """Create a small 100x200 page (H x W) for fast tests.

    Returns:
        PageImage at index 3
    """
    return PageImage(image=np.full((100, 200, 3), 255, dtype=np.uint8), page_index=3)


@pytest.fixture
def default_filter() -> CapabilityFilter:
    """Capability filter with default switches and every collaborator present."""
    return CapabilityFilter()


@pytest.fixture
def quiet_config() -> PipelineConfig:
    """Validated default PipelineConfig.

    Returns:
        PipelineConfig instance
    """
    config = PipelineConfig()
    config.validate()
    return config


@pytest.fixture
def mock_observer() -> Mock:
    """Create a mock progress observer.

    Returns:
        Mock object with on_progress method
    """
    return Mock()
