"""
CoverageTracker - Collects conversion results while examples are converted.

The conversion engine registers every example it encounters and records
the outcome of each target language conversion. Once the run is over the
tracker produces an immutable CoverageRecord for the exporters.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from examplecov.coverage.models import (
    ConversionResult,
    ConversionSeverity,
    CoverageRecord,
    Example,
)

if TYPE_CHECKING:
    from examplecov.config import ExportConfig

logger = structlog.get_logger()


@dataclass
class _TrackedExample:
    """Mutable per-example state kept while conversions are running."""

    name: str
    original_source: str = ""
    conversions: dict[str, ConversionResult] = field(default_factory=dict)

    def to_example(self) -> Example:
        return Example(
            name=self.name,
            original_source=self.original_source,
            conversion_attempts=list(self.conversions.values()),
        )


class CoverageTracker:
    """
    Track example conversion coverage for a single provider.

    Examples are keyed by name; each example keeps at most one result per
    target language, the latest one recorded.
    """

    def __init__(self, provider_name: str, provider_version: str = ""):
        """
        Initialize coverage tracker.

        Args:
            provider_name: Name of the provider whose examples are converted
            provider_version: Version of the provider
        """
        self.provider_name = provider_name
        self.provider_version = provider_version
        self._examples: dict[str, _TrackedExample] = {}

    @property
    def example_count(self) -> int:
        """Number of examples registered so far."""
        return len(self._examples)

    def found_example(self, name: str, original_source: str = "") -> None:
        """Register an example, replacing the source of a known one."""
        tracked = self._examples.get(name)
        if tracked is None:
            self._examples[name] = _TrackedExample(name=name, original_source=original_source)
        else:
            tracked.original_source = original_source

    def record_conversion(
        self,
        example_name: str,
        target_language: str,
        severity: ConversionSeverity | int | str = ConversionSeverity.SUCCESS,
        error_detail: str = "",
        multiple_translations: bool = False,
    ) -> ConversionResult:
        """
        Record the outcome of converting an example into a language.

        Args:
            example_name: Name of a previously registered example
            target_language: Language the example was converted into
            severity: Outcome of the conversion
            error_detail: Failure reason, ignored for successes
            multiple_translations: Whether several valid translations exist

        Returns:
            The stored ConversionResult

        Raises:
            KeyError: If the example was never registered
        """
        if example_name not in self._examples:
            msg = f"Unknown example: {example_name}"
            raise KeyError(msg)

        result = ConversionResult(
            target_language=target_language,
            severity=severity,
            error_detail=error_detail,
            multiple_translations=multiple_translations,
        )
        self._examples[example_name].conversions[target_language] = result
        return result

    def build_record(self) -> CoverageRecord:
        """Snapshot the tracked state into a CoverageRecord."""
        return CoverageRecord(
            provider_name=self.provider_name,
            provider_version=self.provider_version,
            examples=[tracked.to_example() for tracked in self._examples.values()],
        )

    def export(
        self,
        output_directory: str | Path,
        config: "ExportConfig | None" = None,
    ) -> None:
        """
        Export the tracked coverage into the output directory.

        Args:
            output_directory: Directory that receives the report files
            config: Export settings (defaults when None)
        """
        from examplecov.reporting.exporter import CoverageExporter

        logger.info(
            "exporting coverage",
            provider=self.provider_name,
            examples=self.example_count,
        )
        CoverageExporter(self.build_record(), config).export(output_directory)

    def reset(self) -> None:
        """Forget every registered example."""
        self._examples.clear()
