"""Tests for PipelineConfig class.

Tests cover:
- Basic creation and defaults
- Configuration validation
- from_yaml and from_cli methods
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pytest

from docflow.config import PipelineConfig
from docflow.exceptions import InvalidConfigError
from docflow.layout.ordering import TextDirection


def _cli_args(**overrides) -> argparse.Namespace:
    values = {
        "config": None,
        "output": None,
        "max_pages": None,
        "max_concurrent_pages": None,
        "dpi": None,
        "direction": None,
        "min_gap_ratio": None,
        "no_ocr": False,
        "no_table": False,
        "no_images": False,
        "no_reading_order": False,
        "json_only": False,
    }
    values.update(overrides)
    return argparse.Namespace(**values)


class TestPipelineConfigCreation:
    """Tests for PipelineConfig creation and defaults."""

    def test_default_values(self):
        """Test default configuration values."""
        config = PipelineConfig()

        assert config.enable_ocr is True
        assert config.enable_wired_table is True
        assert config.enable_wireless_table is False
        assert config.reading_direction == TextDirection.AUTO
        assert config.min_gap_ratio == 0.05
        assert config.max_pages is None
        assert config.max_concurrent_pages == 4
        assert config.output_formats == ["json", "markdown"]
        assert config.output_dir == Path("output")

    def test_coercion(self):
        """Test path, format list and max_pages normalization."""
        config = PipelineConfig(output_dir="out/run", output_formats="json", max_pages=0)

        assert config.output_dir == Path("out/run")
        assert config.output_formats == ["json"]
        assert config.max_pages is None

    def test_reading_order_config(self):
        """Test building XYCutConfig from the config."""
        config = PipelineConfig(reading_direction="vertical", min_gap_ratio=0.1, row_tolerance=0.25)

        xycut = config.reading_order_config()

        assert xycut.direction == TextDirection.VERTICAL
        assert xycut.min_gap_ratio == 0.1
        assert xycut.row_tolerance == 0.25

    def test_to_dict(self):
        """Test serialization."""
        data = PipelineConfig(output_dir=Path("out")).to_dict()

        assert data["output_dir"] == "out"
        assert data["enable_layout"] is True


class TestPipelineConfigValidation:
    """Tests for PipelineConfig validation."""

    def test_validate_success(self):
        """Test successful validation."""
        PipelineConfig().validate()

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_gap_ratio": -0.01},
            {"min_value_ratio": float("nan")},
            {"table_line_ratio": -1.0},
            {"row_tolerance": 0.0},
            {"reading_direction": "sideways"},
            {"max_pages": -2},
            {"max_concurrent_pages": 0},
            {"dpi": 0},
            {"output_formats": ["json", "pdf"]},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Test that out-of-range values are rejected."""
        with pytest.raises(InvalidConfigError):
            PipelineConfig(**kwargs).validate()

    def test_formula_switch_warns(self, caplog):
        """Test that enable_formula is accepted but has no effect."""
        with caplog.at_level("WARNING"):
            PipelineConfig(enable_formula=True).validate()

        assert "enable_formula has no effect" in caplog.text


class TestPipelineConfigFromYaml:
    """Tests for PipelineConfig.from_yaml."""

    def test_sections(self, tmp_path):
        """Test loading sectioned YAML."""
        config_file = tmp_path / "docflow.yaml"
        config_file.write_text(
            "stages:\n"
            "  enable_ocr: false\n"
            "reading_order:\n"
            "  reading_direction: horizontal\n"
            "  min_gap_ratio: 0.02\n"
            "runtime:\n"
            "  max_pages: 3\n"
            "output:\n"
            "  output_formats: [json]\n",
            encoding="utf-8",
        )

        config = PipelineConfig.from_yaml(config_file)

        assert config.enable_ocr is False
        assert config.reading_direction == "horizontal"
        assert config.min_gap_ratio == 0.02
        assert config.max_pages == 3
        assert config.output_formats == ["json"]

    def test_overrides_win(self, tmp_path):
        """Test that overrides beat file values."""
        config_file = tmp_path / "docflow.yaml"
        config_file.write_text("max_pages: 3\n", encoding="utf-8")

        config = PipelineConfig.from_yaml(config_file, max_pages=7)

        assert config.max_pages == 7

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        """Test that unknown keys are logged and skipped."""
        config_file = tmp_path / "docflow.yaml"
        config_file.write_text("detector: yolo\ndpi: 150\n", encoding="utf-8")

        with caplog.at_level("WARNING"):
            config = PipelineConfig.from_yaml(config_file)

        assert config.dpi == 150
        assert "detector" in caplog.text

    def test_missing_or_malformed_file(self, tmp_path):
        """Test that unreadable files yield defaults."""
        broken = tmp_path / "broken.yaml"
        broken.write_text("stages: [unclosed\n", encoding="utf-8")

        assert PipelineConfig.from_yaml(tmp_path / "absent.yaml") == PipelineConfig()
        assert PipelineConfig.from_yaml(broken) == PipelineConfig()


class TestPipelineConfigFromCli:
    """Tests for PipelineConfig.from_cli."""

    def test_defaults(self):
        """Test that absent CLI options keep defaults."""
        assert PipelineConfig.from_cli(_cli_args()) == PipelineConfig()

    def test_values_and_flags(self):
        """Test CLI options and switches."""
        args = _cli_args(
            output="out",
            max_pages=2,
            direction="vertical",
            no_ocr=True,
            no_table=True,
            no_images=True,
            no_reading_order=True,
            json_only=True,
        )

        config = PipelineConfig.from_cli(args)

        assert config.output_dir == Path("out")
        assert config.max_pages == 2
        assert config.reading_direction == "vertical"
        assert config.enable_ocr is False
        assert config.enable_wired_table is False
        assert config.enable_wireless_table is False
        assert config.enable_image_extraction is False
        assert config.enable_reading_order is False
        assert config.output_formats == ["json"]

    def test_cli_over_yaml(self, tmp_path):
        """Test that CLI values override the YAML file."""
        config_file = tmp_path / "docflow.yaml"
        config_file.write_text("max_pages: 3\ndpi: 300\n", encoding="utf-8")

        config = PipelineConfig.from_cli(_cli_args(config=str(config_file), max_pages=1))

        assert config.max_pages == 1
        assert config.dpi == 300
