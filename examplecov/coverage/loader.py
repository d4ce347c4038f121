"""
Loading coverage records from disk.

Records may be stored as JSON or YAML, using either the PascalCase wire
names or the snake_case field names.
"""

import json
from pathlib import Path
from typing import Any

import yaml

from examplecov.coverage.models import CoverageRecord

JSON_SUFFIXES = {".json"}
YAML_SUFFIXES = {".yaml", ".yml"}


def load_record(path: str | Path) -> CoverageRecord:
    """
    Load a coverage record from a JSON or YAML file.

    Args:
        path: Path to the record file

    Returns:
        Validated CoverageRecord

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the suffix is not supported or the content is invalid
    """
    path = Path(path)
    if not path.exists():
        msg = f"Coverage record not found: {path}"
        raise FileNotFoundError(msg)

    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")

    if suffix in JSON_SUFFIXES:
        data = json.loads(text)
    elif suffix in YAML_SUFFIXES:
        data = yaml.safe_load(text)
    else:
        supported = ", ".join(sorted(JSON_SUFFIXES | YAML_SUFFIXES))
        msg = f"Unsupported record format: {path.suffix or '<none>'}. Supported: {supported}"
        raise ValueError(msg)

    return record_from_dict(data)


def record_from_dict(data: dict[str, Any]) -> CoverageRecord:
    """Validate a plain mapping into a CoverageRecord."""
    if not isinstance(data, dict):
        msg = f"Coverage record must be a mapping, got {type(data).__name__}"
        raise ValueError(msg)
    return CoverageRecord.model_validate(data)
