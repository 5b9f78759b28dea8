"""Pipeline configuration module.

This module provides:
- PipelineConfig: Dataclass for all pipeline configuration options
- YAML loading (flat keys or ``stages``/``reading_order``/``runtime``/``output`` sections)
- CLI mapping via from_cli()
- Validation of thresholds, limits and output formats
"""

from __future__ import annotations

import argparse
import logging
import math
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .constants import (
    DEFAULT_DPI,
    DEFAULT_MAX_CONCURRENT_PAGES,
    DEFAULT_MIN_GAP_RATIO,
    DEFAULT_MIN_VALUE_RATIO,
    DEFAULT_OUTPUT_FORMATS,
    DEFAULT_ROW_TOLERANCE,
    DEFAULT_TABLE_LINE_RATIO,
)
from .exceptions import InvalidConfigError
from .layout.ordering import TextDirection, XYCutConfig

logger = logging.getLogger(__name__)

SUPPORTED_OUTPUT_FORMATS: tuple[str, ...] = ("json", "markdown")

YAML_SECTIONS: tuple[str, ...] = ("stages", "reading_order", "runtime", "output")


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load YAML configuration file with error handling.

    Args:
        config_path: Path to YAML config file

    Returns:
        Configuration dict, or empty dict if file not found or invalid
    """
    try:
        if config_path.exists():
            with open(config_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                logger.warning("Config file %s does not contain a mapping, ignoring it", config_path)
                return {}
            return data
        logger.debug("Config file not found: %s", config_path)
        return {}
    except yaml.YAMLError as e:
        logger.warning("Failed to parse config file %s: %s", config_path, e)
        return {}
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Failed to read config file %s: %s", config_path, e)
        return {}


def _flatten_sections(yaml_config: dict[str, Any]) -> dict[str, Any]:
    """Merge known sections into one flat mapping; top-level keys win."""
    flat: dict[str, Any] = {}
    for section in YAML_SECTIONS:
        values = yaml_config.get(section)
        if isinstance(values, dict):
            flat.update(values)
    flat.update({k: v for k, v in yaml_config.items() if k not in YAML_SECTIONS})
    return flat


@dataclass
class PipelineConfig:
    """Pipeline configuration with validation.

    Configuration Sources (in order of precedence):
    1. Constructor arguments (highest priority)
    2. CLI arguments via from_cli()
    3. YAML configuration files via from_yaml()
    4. Default values (lowest priority)

    Example:
        >>> config = PipelineConfig(enable_ocr=False, max_pages=3)
        >>> config.validate()

        >>> config = PipelineConfig.from_yaml(Path("settings/docflow.yaml"), max_pages=1)
    """

    # ==================== Stage Switches ====================
    enable_layout: bool = True
    enable_ocr: bool = True
    enable_wired_table: bool = True
    enable_wireless_table: bool = False
    enable_formula: bool = False  # Formulas are always emitted as placeholders
    enable_image_extraction: bool = True
    enable_reading_order: bool = True

    # ==================== Reading Order ====================
    reading_direction: str = TextDirection.AUTO
    min_gap_ratio: float = DEFAULT_MIN_GAP_RATIO
    min_value_ratio: float = DEFAULT_MIN_VALUE_RATIO
    row_tolerance: float = DEFAULT_ROW_TOLERANCE

    # ==================== Table Estimate ====================
    table_line_ratio: float = DEFAULT_TABLE_LINE_RATIO

    # ==================== Runtime ====================
    max_pages: int | None = None  # None or 0 = all pages
    max_concurrent_pages: int = DEFAULT_MAX_CONCURRENT_PAGES
    dpi: int = DEFAULT_DPI

    # ==================== Output ====================
    output_dir: Path = field(default_factory=lambda: Path("output"))
    output_formats: list[str] = field(default_factory=lambda: list(DEFAULT_OUTPUT_FORMATS))
    normalize_bbox: bool = True

    def __post_init__(self) -> None:
        """Convert path strings to Path objects and normalize list fields."""
        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)
        if isinstance(self.output_formats, str):
            self.output_formats = [self.output_formats]
        else:
            self.output_formats = list(self.output_formats)
        if self.max_pages == 0:
            self.max_pages = None

    @classmethod
    def from_yaml(cls, config_path: Path, **overrides: Any) -> PipelineConfig:
        """Load configuration from YAML file.

        Unknown keys are logged and ignored. Unreadable or malformed files
        yield the defaults.

        Args:
            config_path: Path to YAML configuration file
            **overrides: Values to override from file

        Returns:
            PipelineConfig instance
        """
        yaml_config = _flatten_sections(_load_yaml_config(Path(config_path)))

        field_names = set(cls.__dataclass_fields__)
        kwargs: dict[str, Any] = {}
        for key, value in yaml_config.items():
            if key in field_names:
                kwargs[key] = value
            else:
                logger.warning("Ignoring unknown config key '%s' in %s", key, config_path)

        kwargs.update(overrides)
        return cls(**kwargs)

    @staticmethod
    def _get_arg(args: argparse.Namespace, name: str, default: Any = None) -> Any:
        return getattr(args, name, default)

    @classmethod
    def _extract_cli_kwargs(cls, args: argparse.Namespace) -> dict[str, Any]:
        """Extract configuration kwargs from CLI arguments.

        Only arguments that were actually given (not None) are returned, so
        they can be layered over YAML values.
        """
        # Format: (cli_name, config_name, transform_func)
        mappings: list[tuple[str, str, Any]] = [
            ("output", "output_dir", Path),
            ("max_pages", "max_pages", None),
            ("max_concurrent_pages", "max_concurrent_pages", None),
            ("dpi", "dpi", None),
            ("direction", "reading_direction", None),
            ("min_gap_ratio", "min_gap_ratio", None),
            ("formats", "output_formats", None),
        ]

        kwargs: dict[str, Any] = {}
        for cli_name, config_name, transform in mappings:
            value = cls._get_arg(args, cli_name)
            if value is not None:
                kwargs[config_name] = transform(value) if transform else value

        # Boolean switches only ever turn stages off
        if cls._get_arg(args, "no_ocr"):
            kwargs["enable_ocr"] = False
        if cls._get_arg(args, "no_table"):
            kwargs["enable_wired_table"] = False
            kwargs["enable_wireless_table"] = False
        if cls._get_arg(args, "no_images"):
            kwargs["enable_image_extraction"] = False
        if cls._get_arg(args, "no_reading_order"):
            kwargs["enable_reading_order"] = False
        if cls._get_arg(args, "json_only"):
            kwargs["output_formats"] = ["json"]

        return kwargs

    @classmethod
    def from_cli(cls, args: argparse.Namespace) -> PipelineConfig:
        """Create configuration from CLI arguments.

        When ``args.config`` names a YAML file, it is loaded first and the
        CLI values override it.
        """
        kwargs = cls._extract_cli_kwargs(args)
        config_path = cls._get_arg(args, "config")
        if config_path:
            return cls.from_yaml(Path(config_path), **kwargs)
        return cls(**kwargs)

    def validate(self) -> None:
        """Validate configuration values.

        Raises:
            InvalidConfigError: If any value is out of range
        """
        for name in ("min_gap_ratio", "min_value_ratio", "table_line_ratio"):
            value = getattr(self, name)
            if not isinstance(value, int | float) or not math.isfinite(value) or value < 0:
                raise InvalidConfigError(f"{name} must be a finite non-negative number, got {value!r}")

        if not math.isfinite(self.row_tolerance) or self.row_tolerance <= 0:
            raise InvalidConfigError(f"row_tolerance must be positive, got {self.row_tolerance!r}")

        if self.reading_direction not in TextDirection.ALL:
            raise InvalidConfigError(
                f"Unknown reading_direction '{self.reading_direction}'. "
                f"Use one of: {', '.join(TextDirection.ALL)}"
            )

        if self.max_pages is not None and self.max_pages < 0:
            raise InvalidConfigError(f"max_pages must be >= 0, got {self.max_pages}")
        if self.max_concurrent_pages < 1:
            raise InvalidConfigError(f"max_concurrent_pages must be >= 1, got {self.max_concurrent_pages}")
        if self.dpi < 1:
            raise InvalidConfigError(f"dpi must be >= 1, got {self.dpi}")

        unknown = [fmt for fmt in self.output_formats if fmt not in SUPPORTED_OUTPUT_FORMATS]
        if unknown:
            raise InvalidConfigError(
                f"Unknown output format(s): {', '.join(unknown)}. "
                f"Supported: {', '.join(SUPPORTED_OUTPUT_FORMATS)}"
            )

        if self.enable_formula:
            logger.warning("enable_formula has no effect: formula regions are always emitted as placeholders")

        logger.info(
            "Configuration validated: ocr=%s, wired_table=%s, wireless_table=%s, images=%s, "
            "reading_order=%s (direction=%s), max_pages=%s, max_concurrent_pages=%d",
            self.enable_ocr,
            self.enable_wired_table,
            self.enable_wireless_table,
            self.enable_image_extraction,
            self.enable_reading_order,
            self.reading_direction,
            self.max_pages or "all",
            self.max_concurrent_pages,
        )

    def reading_order_config(self) -> XYCutConfig:
        """Build the reading order parameters."""
        return XYCutConfig(
            direction=self.reading_direction,
            min_gap_ratio=self.min_gap_ratio,
            min_value_ratio=self.min_value_ratio,
            row_tolerance=self.row_tolerance,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to a JSON/YAML-serializable dict."""
        data = asdict(self)
        data["output_dir"] = str(self.output_dir)
        return data
