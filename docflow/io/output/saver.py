"""Writing serialized outputs to disk."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from docflow.exceptions import FileSaveError
from docflow.types import DocumentResult, OutputSerializer

logger = logging.getLogger(__name__)


def save_outputs(
    document: DocumentResult,
    serializers: Sequence[OutputSerializer],
    output_dir: Path,
    stem: str,
) -> dict[str, Path]:
    """Write every serializer's rendering of a document.

    Uses the text already stored in ``document.outputs`` when present.

    Returns:
        Serializer name -> written file path

    Raises:
        FileSaveError: If a file cannot be written
    """
    written: dict[str, Path] = {}
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise FileSaveError(f"Cannot create output directory {output_dir}: {e}") from e

    for serializer in serializers:
        text = document.outputs.get(serializer.name)
        if text is None:
            text = serializer.serialize(document)
        output_path = output_dir / f"{stem}{serializer.suffix}"
        try:
            output_path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise FileSaveError(f"Failed to write {output_path}: {e}") from e
        logger.info("Saved %s output: %s", serializer.name, output_path)
        written[serializer.name] = output_path

    return written
