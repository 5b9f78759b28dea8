"""Custom exception classes for docflow.

This module defines the exception hierarchy used across the orchestration
core, the replay collaborators and the CLI.

Exception Hierarchy:
    PipelineError (base)
    ├── ConfigurationError
    │   ├── InvalidConfigError
    │   └── MissingConfigError
    ├── ProcessingError
    │   ├── PageProcessingError
    │   ├── DetectionError
    │   └── RecognitionError
    └── FileError
        ├── FileLoadError
        ├── FileSaveError
        └── FileFormatError

Usage:
    try:
        text, confidence = recognizer.recognize(page, box)
    except RecognitionError as e:
        # Per-element failure, the page keeps going
        logger.warning("Recognition failed: %s", e)
"""

from __future__ import annotations


class PipelineError(Exception):
    """Base exception for all docflow errors.

    Catching this class catches every error raised deliberately by docflow.
    """


# ============================================================================
# Configuration Errors
# ============================================================================


class ConfigurationError(PipelineError):
    """Base exception for configuration-related errors."""


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values or call arguments are invalid.

    Examples:
        - Negative gap or occupancy ratio
        - Non-positive page width or height
        - Unknown reading direction or output format
    """


class MissingConfigError(ConfigurationError):
    """Raised when required configuration is missing.

    Examples:
        - Input directory not given
        - Config file path does not exist
    """


# ============================================================================
# Processing Errors
# ============================================================================


class ProcessingError(PipelineError):
    """Base exception for document processing errors."""


class PageProcessingError(ProcessingError):
    """Raised by a page source when one page cannot be produced.

    The document orchestrator records the page as failed and continues.
    """

    def __init__(self, message: str, page_index: int | None = None):
        self.page_index = page_index
        super().__init__(message)


class DetectionError(ProcessingError):
    """Raised when layout detection fails for a page."""


class RecognitionError(ProcessingError):
    """Raised by a recognizer collaborator when one element cannot be recognized.

    The page orchestrator converts this into a skipped element carrying a
    diagnostic placeholder instead of aborting the page.
    """


# ============================================================================
# File Errors
# ============================================================================


class FileError(PipelineError):
    """Base exception for file operation errors."""


class FileLoadError(FileError):
    """Raised when loading a file fails.

    Examples:
        - File not found
        - Unreadable image
    """


class FileSaveError(FileError):
    """Raised when saving an output file fails."""


class FileFormatError(FileError):
    """Raised when a file is present but malformed.

    Examples:
        - Layout sidecar that is not valid JSON
        - Box entry without a bbox
    """
