"""
Configuration loading and validation for coverage exports.

Supports YAML-based export settings.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

# File names read by downstream CI tooling; not configurable.
BY_EXAMPLE_FILE = "byExample.json"
BY_LANGUAGE_FILE = "byLanguage.json"
SUMMARY_FILE = "summary.json"
SHORT_SUMMARY_FILE = "shortSummary.txt"


class ExportConfig(BaseModel):
    """Settings for writing coverage reports."""

    output_dir: str = Field(
        default="./coverage-reports",
        description="Directory that receives the report files",
    )
    indent: str = Field(default="\t", description="Indentation used for JSON reports")
    dir_mode: int = Field(default=0o700, ge=0, le=0o777)
    file_mode: int = Field(default=0o600, ge=0, le=0o777)
    top_errors: int | None = Field(
        default=None,
        ge=1,
        description="Maximum number of error reasons per statistic (all when unset)",
    )


class ExportConfigLoader:
    """Load and validate export configurations from YAML files."""

    @classmethod
    def from_yaml(cls, path: str | Path) -> ExportConfig:
        """
        Load configuration from a YAML file.

        Args:
            path: Path to YAML configuration file

        Returns:
            ExportConfig loaded from file

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the document is not a mapping
        """
        path = Path(path)
        if not path.exists():
            msg = f"Configuration file not found: {path}"
            raise FileNotFoundError(msg)

        with path.open() as f:
            data = yaml.safe_load(f)

        return cls._parse_config(data or {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ExportConfig:
        """Create configuration from a dictionary."""
        return cls._parse_config(data)

    @classmethod
    def _parse_config(cls, data: dict[str, Any]) -> ExportConfig:
        """Parse configuration dictionary into ExportConfig."""
        if not isinstance(data, dict):
            msg = f"Export configuration must be a mapping, got {type(data).__name__}"
            raise ValueError(msg)
        defaults = ExportConfig()
        return ExportConfig(
            output_dir=str(data.get("output_dir", defaults.output_dir)),
            indent=cls._parse_indent(data.get("indent", defaults.indent)),
            dir_mode=cls._parse_mode(data.get("dir_mode", defaults.dir_mode)),
            file_mode=cls._parse_mode(data.get("file_mode", defaults.file_mode)),
            top_errors=data.get("top_errors"),
        )

    @staticmethod
    def _parse_indent(value: Any) -> str:
        # An integer means that many spaces
        if isinstance(value, int):
            return " " * value
        return str(value)

    @staticmethod
    def _parse_mode(value: Any) -> int:
        # Modes are usually written as octal strings ("0700")
        if isinstance(value, str):
            return int(value, 8)
        return int(value)

    @classmethod
    def generate_sample_config(cls) -> str:
        """
        Generate a sample YAML configuration file.

        Returns:
            YAML string for sample configuration
        """
        sample = {
            "output_dir": "./coverage-reports",
            "indent": "\t",
            "dir_mode": "0700",
            "file_mode": "0600",
            "top_errors": 10,
        }
        return yaml.dump(sample, default_flow_style=False, sort_keys=False)
