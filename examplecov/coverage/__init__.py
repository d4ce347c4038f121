"""
Example Conversion Coverage.

Records how examples were converted into target languages.
"""

from examplecov.coverage.loader import load_record, record_from_dict
from examplecov.coverage.models import (
    ConversionResult,
    ConversionSeverity,
    CoverageRecord,
    Example,
)
from examplecov.coverage.tracker import CoverageTracker

__all__ = [
    "ConversionResult",
    "ConversionSeverity",
    "CoverageRecord",
    "CoverageTracker",
    "Example",
    "load_record",
    "record_from_dict",
]
