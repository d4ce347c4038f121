"""
CoverageExporter - Writes a coverage record into its report files.

Four reports are written, in order:
- byExample.json: newline-delimited JSON, one object per example
- byLanguage.json: statistics keyed by target language
- summary.json: provider-wide statistic, uploaded by CI for long-term analysis
- shortSummary.txt: plain text digest shown in CI logs

The first failing report aborts the export; files already written are
left in place.
"""

import json
import os
from pathlib import Path
from typing import Any

import structlog

from examplecov.config import (
    BY_EXAMPLE_FILE,
    BY_LANGUAGE_FILE,
    SHORT_SUMMARY_FILE,
    SUMMARY_FILE,
    ExportConfig,
)
from examplecov.coverage.models import CoverageRecord
from examplecov.reporting.errors import DirectoryCreationError, SerializationError, WriteError
from examplecov.reporting.statistics import (
    build_example_reports,
    build_language_statistics,
    build_provider_statistic,
    render_short_summary,
)

logger = structlog.get_logger()


class CoverageExporter:
    """
    Export a coverage record into JSON and text reports.

    The record is only read; every report is computed from scratch on
    each call, so repeated exports produce identical files.
    """

    def __init__(self, record: CoverageRecord, config: ExportConfig | None = None):
        """
        Initialize exporter.

        Args:
            record: Coverage record to export
            config: Export settings (defaults when None)
        """
        self.record = record
        self.config = config or ExportConfig()

    def export(self, output_directory: str | Path | None = None) -> list[Path]:
        """
        Write all four reports.

        Args:
            output_directory: Target directory (config.output_dir when None)

        Returns:
            Paths of the written files, in write order

        Raises:
            ExportError: On the first report that cannot be written
        """
        directory = Path(output_directory or self.config.output_dir)
        return [
            self.export_by_example(directory),
            self.export_by_language(directory),
            self.export_overall(directory),
            self.export_human_readable(directory),
        ]

    def export_by_example(
        self,
        output_directory: str | Path,
        file_name: str = BY_EXAMPLE_FILE,
    ) -> Path:
        """Write one single-line JSON object per example, each followed by a newline."""
        target = self._prepare_target(output_directory, file_name)
        chunks = [
            self._to_json(report.to_dict(), target, indent=None) + "\n"
            for report in build_example_reports(self.record)
        ]
        return self._write(target, "".join(chunks))

    def export_by_language(
        self,
        output_directory: str | Path,
        file_name: str = BY_LANGUAGE_FILE,
    ) -> Path:
        """Write per-language statistics as one JSON object keyed by language."""
        target = self._prepare_target(output_directory, file_name)
        statistics = build_language_statistics(self.record, self.config.top_errors)
        data = {language: stat.to_dict() for language, stat in statistics.items()}
        return self._write(target, self._to_json(data, target, self.config.indent))

    def export_overall(
        self,
        output_directory: str | Path,
        file_name: str = SUMMARY_FILE,
    ) -> Path:
        """Write the provider-wide statistic."""
        target = self._prepare_target(output_directory, file_name)
        statistic = build_provider_statistic(self.record, self.config.top_errors)
        content = self._to_json(statistic.to_dict(), target, self.config.indent)
        return self._write(target, content)

    def export_human_readable(
        self,
        output_directory: str | Path,
        file_name: str = SHORT_SUMMARY_FILE,
    ) -> Path:
        """Write the plain text success digest."""
        target = self._prepare_target(output_directory, file_name)
        return self._write(target, render_short_summary(self.record))

    # =========================================================================
    # Helpers
    # =========================================================================

    def _prepare_target(self, output_directory: str | Path, file_name: str) -> Path:
        directory = Path(output_directory)
        try:
            directory.mkdir(mode=self.config.dir_mode, parents=True, exist_ok=True)
        except OSError as e:
            logger.error("output directory unavailable", path=str(directory), error=str(e))
            raise DirectoryCreationError(directory, str(e)) from e
        return directory / file_name

    def _to_json(self, data: Any, target: Path, indent: str | None) -> str:
        try:
            return json.dumps(data, indent=indent, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("report serialization failed", path=str(target), error=str(e))
            raise SerializationError(target, str(e)) from e

    def _encode(self, content: str, target: Path) -> bytes:
        # Lone surrogates survive json.dumps with ensure_ascii=False
        try:
            return content.encode("utf-8")
        except UnicodeEncodeError as e:
            logger.error("report encoding failed", path=str(target), error=str(e))
            raise SerializationError(target, str(e)) from e

    def _write(self, target: Path, content: str) -> Path:
        # Encode before opening so an unencodable report never truncates the old file
        data = self._encode(content, target)
        try:
            fd = os.open(target, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.config.file_mode)
            with os.fdopen(fd, "wb") as f:
                f.write(data)
        except OSError as e:
            logger.error("report write failed", path=str(target), error=str(e))
            raise WriteError(target, str(e)) from e

        logger.info("report written", path=str(target), size=len(data))
        return target
