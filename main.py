#!/usr/bin/env python3
"""
Main entry point for docflow
Replays detector sidecars over a directory of page images and writes the
ordered document as a JSON content list and Markdown
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
import textwrap
from pathlib import Path
from typing import TYPE_CHECKING

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Pipeline imports are function-level to keep --help fast
if TYPE_CHECKING:
    from docflow.config import PipelineConfig

CONFIG_ENV_VAR = "DOCFLOW_CONFIG"


def setup_logging(level: str = "INFO") -> None:
    """Setup logging configuration with timestamped log files."""
    from docflow.misc import tz_now  # noqa: PLC0415 - lazy import for startup performance

    logs_dir = Path(".logs")
    logs_dir.mkdir(exist_ok=True)

    timestamp = tz_now().strftime("%Y-%m-%d_%H-%M-%S")
    log_filename = logs_dir / f"{timestamp}_docflow.log"

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout), logging.FileHandler(log_filename, encoding="utf-8")],
    )


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = _build_argument_parser()
    args = parser.parse_args(argv)

    setup_logging("DEBUG" if args.verbose else args.log_level)
    logger = logging.getLogger(__name__)

    return _execute_command(args, parser, logger)


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="docflow - Reading order and stage orchestration over detected document layouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent(
            """
            Input layout:
              A directory of page images (page_001.png, page_002.png, ...), each with an
              optional <stem>.layout.json sidecar holding the detected boxes.

            Examples:
              python main.py --input scans/report
              python main.py --input scans/report --output out/ --max-pages 5
              python main.py --input scans/report --no-table --json-only
              python main.py --input scans/tategaki --direction vertical
              python main.py --input scans/report --config settings/docflow.yaml
            """
        ),
    )

    parser.add_argument("--input", "-i", type=str, help="Directory of page images with layout sidecars")
    parser.add_argument("--output", "-o", type=str, default=None, help="Output directory (default: ./output)")
    parser.add_argument(
        "--config",
        type=str,
        default=os.environ.get(CONFIG_ENV_VAR),
        help=f"YAML configuration file (default: ${CONFIG_ENV_VAR} if set)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Shortcut for --log-level DEBUG")

    runtime_group = parser.add_argument_group("Runtime")
    runtime_group.add_argument("--max-pages", type=int, default=None, help="Process at most this many pages")
    runtime_group.add_argument(
        "--max-concurrent-pages", type=int, default=None, help="Page loads in flight at once (default: 4)"
    )
    runtime_group.add_argument("--dpi", type=int, default=None, help="Resolution the page images were rendered at")

    stage_group = parser.add_argument_group("Stages")
    stage_group.add_argument("--no-ocr", action="store_true", help="Disable text recognition (placeholders only)")
    stage_group.add_argument("--no-table", action="store_true", help="Disable table recognition")
    stage_group.add_argument("--no-images", action="store_true", help="Disable figure extraction")
    stage_group.add_argument(
        "--no-reading-order", action="store_true", help="Keep detection order instead of XY-Cut"
    )

    ordering_group = parser.add_argument_group("Reading Order")
    ordering_group.add_argument(
        "--direction",
        type=str,
        default=None,
        choices=["auto", "horizontal", "vertical"],
        help="Text direction (default: auto, from box aspect ratios)",
    )
    ordering_group.add_argument(
        "--min-gap-ratio", type=float, default=None, help="Whitespace gap that cuts, as a page fraction (default: 0.05)"
    )

    output_group = parser.add_argument_group("Output")
    output_group.add_argument("--json-only", action="store_true", help="Write only the JSON content list")

    return parser


def _execute_command(args: argparse.Namespace, parser: argparse.ArgumentParser, logger: logging.Logger) -> int:
    if not args.input:
        parser.error("the following arguments are required: --input/-i")
        return 1  # pragma: no cover - parser.error raises SystemExit

    from docflow.config import PipelineConfig  # noqa: PLC0415
    from docflow.exceptions import PipelineError  # noqa: PLC0415
    from docflow.stages import StageError  # noqa: PLC0415

    try:
        config = PipelineConfig.from_cli(args)
        config.validate()
        return _run_pipeline(config, args, logger)
    except (PipelineError, StageError) as e:
        logger.error("Processing failed: %s", e)
        return 1


def _run_pipeline(config: PipelineConfig, args: argparse.Namespace, logger: logging.Logger) -> int:
    from docflow import Pipeline  # noqa: PLC0415
    from docflow.types import LoggingProgressObserver  # noqa: PLC0415

    input_path = Path(args.input)
    if not input_path.is_dir():
        logger.error("Input directory does not exist: %s", input_path)
        return 1

    logger.info("Starting docflow")
    logger.info("Input: %s", input_path)
    logger.info("Output: %s", config.output_dir)

    pipeline, source = Pipeline.from_sidecars(input_path, config=config, observer=LoggingProgressObserver())
    document = pipeline.process_document(source)

    if document.is_empty:
        logger.warning("No pages were processed (status: %s)", document.status)
        return 1

    written = pipeline.save(document, stem=input_path.name)
    for name, path in written.items():
        logger.info("Wrote %s: %s", name, path)

    if document.failed_pages:
        logger.warning("Pages that failed: %s", document.failed_pages)
    logger.info(
        "docflow completed: %d/%d pages, %d skipped elements, %.1fms",
        document.processed_pages,
        document.total_pages,
        document.skipped_elements,
        document.total_time_ms,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
