"""
Coverage Reporting.

Aggregate coverage records and write them as JSON and text reports.
"""

from examplecov.reporting.errors import (
    DirectoryCreationError,
    ExportError,
    SerializationError,
    WriteError,
)
from examplecov.reporting.exporter import CoverageExporter
from examplecov.reporting.statistics import (
    ErrorMessage,
    ExampleReport,
    LanguageStatistic,
    NumPct,
    ProviderStatistic,
    build_example_reports,
    build_language_statistics,
    build_provider_statistic,
    percentage,
    render_short_summary,
    sort_errors,
)

__all__ = [
    "CoverageExporter",
    "DirectoryCreationError",
    "ErrorMessage",
    "ExampleReport",
    "ExportError",
    "LanguageStatistic",
    "NumPct",
    "ProviderStatistic",
    "SerializationError",
    "WriteError",
    "build_example_reports",
    "build_language_statistics",
    "build_provider_statistic",
    "percentage",
    "render_short_summary",
    "sort_errors",
]
