"""Page stages.

Each stage performs one step of the per-page sequence and reports its
own timing.

Stage inheritance:
    BaseStage -> DetectionStage, RoutingStage, TextRecognitionStage,
                 TableRecognitionStage, FigureExtractionStage,
                 UnsupportedElementStage, OrderingStage

Usage:
    >>> from docflow.stages import DetectionStage
    >>> stage = DetectionStage(detector)
    >>> layout = stage.process(page)
"""

from __future__ import annotations

from docflow.stages.base import BaseStage, StageError, StageResult
from docflow.stages.detection_stage import DetectionStage
from docflow.stages.ordering_stage import OrderingStage
from docflow.stages.recognition_stage import (
    FigureExtractionStage,
    TableRecognitionStage,
    TextRecognitionStage,
    UnsupportedElementStage,
)
from docflow.stages.routing_stage import RoutingStage

__all__ = [
    # Base classes
    "BaseStage",
    "StageError",
    "StageResult",
    # Stages
    "DetectionStage",
    "RoutingStage",
    "TextRecognitionStage",
    "TableRecognitionStage",
    "FigureExtractionStage",
    "UnsupportedElementStage",
    "OrderingStage",
]
