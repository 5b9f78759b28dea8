"""Page and document orchestration."""

from .document import DocumentOrchestrator
from .page import PageOrchestrator

__all__ = ["DocumentOrchestrator", "PageOrchestrator"]
