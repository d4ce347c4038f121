"""
Tests for the coverage exporter.
"""

import json
import os
import stat

import pytest

from examplecov.config import ExportConfig
from examplecov.coverage import ConversionResult, CoverageRecord, Example
from examplecov.reporting import (
    CoverageExporter,
    DirectoryCreationError,
    ExampleReport,
    ExportError,
    SerializationError,
    WriteError,
)

REPORT_FILES = ["byExample.json", "byLanguage.json", "summary.json", "shortSummary.txt"]


@pytest.fixture
def record() -> CoverageRecord:
    """Two examples, one of them partially failing."""
    return CoverageRecord(
        provider_name="aws",
        provider_version="6.0.0",
        examples=[
            Example(
                name="ex2",
                original_source="second source",
                conversion_attempts=[
                    ConversionResult(target_language="python"),
                    ConversionResult(target_language="go", multiple_translations=True),
                ],
            ),
            Example(
                name="ex1",
                original_source="first source",
                conversion_attempts=[
                    ConversionResult(target_language="python"),
                    ConversionResult(
                        target_language="go",
                        severity="failure",
                        error_detail="parse error",
                    ),
                ],
            ),
        ],
    )


class TestCoverageExporter:
    """Test writing all reports."""

    def test_writes_all_reports(self, tmp_path, record) -> None:
        """Every report file is written in order."""
        output = tmp_path / "nested" / "reports"

        written = CoverageExporter(record).export(output)

        assert [p.name for p in written] == REPORT_FILES
        for name in REPORT_FILES:
            assert (output / name).is_file()

    def test_by_example_is_newline_delimited(self, tmp_path, record) -> None:
        """One JSON object per line, ordered by example name."""
        CoverageExporter(record).export(tmp_path)

        content = (tmp_path / "byExample.json").read_text()
        assert content.endswith("\n")
        lines = content.splitlines()
        assert len(lines) == 2

        first, second = (json.loads(line) for line in lines)
        assert first["ExampleName"] == "ex1"
        assert first["IsDuplicated"] is False
        assert first["OriginalSource"] == "first source"
        assert first["FailedLanguages"] == [
            {
                "TargetLanguage": "go",
                "FailureSeverity": 2,
                "FailureInfo": "parse error",
                "MultipleTranslations": False,
            }
        ]
        assert second["ExampleName"] == "ex2"
        assert second["IsDuplicated"] is True
        assert "OriginalSource" not in second
        assert "FailedLanguages" not in second

    def test_by_language(self, tmp_path, record) -> None:
        """Language statistics are keyed by language and tab indented."""
        CoverageExporter(record).export(tmp_path)

        content = (tmp_path / "byLanguage.json").read_text()
        assert content.startswith('{\n\t"go": {')
        data = json.loads(content)
        assert list(data) == ["go", "python"]
        assert data["python"]["Total"] == 2
        assert data["python"]["Successes"] == {"Number": 2, "Pct": 100.0}
        assert data["go"]["Failures"] == {"Number": 1, "Pct": 50.0}
        assert data["go"]["FrequentErrors"] == [{"Reason": "parse error", "Count": 1}]

    def test_summary(self, tmp_path, record) -> None:
        """Provider summary aggregates every conversion."""
        CoverageExporter(record).export(tmp_path)

        data = json.loads((tmp_path / "summary.json").read_text())
        assert data["Name"] == "aws"
        assert data["Version"] == "6.0.0"
        assert data["Examples"] == 2
        assert data["TotalConversions"] == 4
        assert data["Successes"] == {"Number": 3, "Pct": 75.0}
        assert data["ConversionErrors"] == [{"Reason": "parse error", "Count": 1}]

    def test_short_summary(self, tmp_path, record) -> None:
        """Plain text digest is written as rendered."""
        CoverageExporter(record).export(tmp_path)

        assert (tmp_path / "shortSummary.txt").read_text() == (
            "Provider:     aws\n"
            "Success rate: 75.00% (3/4)\n"
            "\n"
            "Converted 50.00% of go examples (1/2)\n"
            "Converted 100.00% of python examples (2/2)\n"
        )

    def test_empty_record(self, tmp_path) -> None:
        """An empty record still produces valid reports."""
        CoverageExporter(CoverageRecord(provider_name="empty")).export(tmp_path)

        assert (tmp_path / "byExample.json").read_text() == ""
        assert json.loads((tmp_path / "byLanguage.json").read_text()) == {}
        summary = json.loads((tmp_path / "summary.json").read_text())
        assert summary["TotalConversions"] == 0
        assert summary["Successes"]["Pct"] == 0.0
        assert summary["Fatals"]["Pct"] == 0.0
        assert "Success rate: 0.00% (0/0)" in (tmp_path / "shortSummary.txt").read_text()

    def test_idempotent(self, tmp_path, record) -> None:
        """Exporting twice produces byte-identical files."""
        exporter = CoverageExporter(record)
        exporter.export(tmp_path)
        first = {name: (tmp_path / name).read_bytes() for name in REPORT_FILES}

        exporter.export(tmp_path)
        second = {name: (tmp_path / name).read_bytes() for name in REPORT_FILES}

        assert first == second

    def test_overwrites_existing_files(self, tmp_path, record) -> None:
        """Existing report files are replaced, not appended to."""
        (tmp_path / "summary.json").write_text("stale content that is rather long " * 10)

        CoverageExporter(record).export(tmp_path)

        assert json.loads((tmp_path / "summary.json").read_text())["Name"] == "aws"

    def test_record_not_mutated(self, tmp_path, record) -> None:
        """The exported record is left untouched."""
        before = record.model_dump()
        CoverageExporter(record).export(tmp_path)
        assert record.model_dump() == before

    def test_non_ascii_kept(self, tmp_path) -> None:
        """Unicode error text is written as-is."""
        record = CoverageRecord(
            provider_name="aws",
            examples=[
                Example(
                    name="ex",
                    conversion_attempts=[
                        ConversionResult(
                            target_language="go",
                            severity="warning",
                            error_detail="unexpected “token”",
                        )
                    ],
                )
            ],
        )
        CoverageExporter(record).export(tmp_path)
        assert "unexpected “token”" in (tmp_path / "summary.json").read_text(encoding="utf-8")

    def test_config_indent_and_top_errors(self, tmp_path) -> None:
        """Indentation and error caps come from the config."""
        record = CoverageRecord(
            provider_name="aws",
            examples=[
                Example(
                    name=f"ex{i}",
                    conversion_attempts=[
                        ConversionResult(
                            target_language="go",
                            severity="fatal",
                            error_detail=f"error {i}",
                        )
                    ],
                )
                for i in range(5)
            ],
        )
        config = ExportConfig(indent="  ", top_errors=2)

        CoverageExporter(record, config).export(tmp_path)

        content = (tmp_path / "summary.json").read_text()
        assert content.startswith('{\n  "Name": "aws"')
        assert len(json.loads(content)["ConversionErrors"]) == 2

    def test_default_output_dir_from_config(self, tmp_path, record) -> None:
        """Without an explicit directory the configured one is used."""
        config = ExportConfig(output_dir=str(tmp_path / "configured"))

        CoverageExporter(record, config).export()

        assert (tmp_path / "configured" / "summary.json").is_file()

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions")
    def test_owner_only_permissions(self, tmp_path, record) -> None:
        """Reports are readable and writable by the owner only."""
        output = tmp_path / "reports"
        CoverageExporter(record).export(output)

        assert stat.S_IMODE(output.stat().st_mode) & 0o077 == 0
        for name in REPORT_FILES:
            assert stat.S_IMODE((output / name).stat().st_mode) == 0o600


class TestExportErrors:
    """Test export failure handling."""

    def test_directory_creation_failure(self, tmp_path, record) -> None:
        """A file in place of the output directory is reported."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        with pytest.raises(DirectoryCreationError) as exc_info:
            CoverageExporter(record).export(blocker / "reports")

        assert exc_info.value.path == blocker / "reports"
        assert isinstance(exc_info.value.__cause__, OSError)

    def test_write_failure_stops_export(self, tmp_path, record) -> None:
        """The first failing report aborts the remaining ones."""
        (tmp_path / "byLanguage.json").mkdir()

        with pytest.raises(WriteError) as exc_info:
            CoverageExporter(record).export(tmp_path)

        assert exc_info.value.path == tmp_path / "byLanguage.json"
        # Earlier output stays, later reports are never written
        assert (tmp_path / "byExample.json").is_file()
        assert not (tmp_path / "summary.json").exists()
        assert not (tmp_path / "shortSummary.txt").exists()

    def test_serialization_failure(self, tmp_path, record, monkeypatch) -> None:
        """Unserializable report content is surfaced as SerializationError."""
        monkeypatch.setattr(ExampleReport, "to_dict", lambda self: {"bad": object()})

        with pytest.raises(SerializationError) as exc_info:
            CoverageExporter(record).export(tmp_path)

        assert exc_info.value.path == tmp_path / "byExample.json"
        assert not (tmp_path / "byExample.json").exists()

    def test_unencodable_text(self, tmp_path) -> None:
        """Text that cannot be encoded as UTF-8 is a SerializationError."""
        record = CoverageRecord(
            provider_name="aws",
            examples=[
                Example(
                    name="ex1",
                    conversion_attempts=[
                        ConversionResult(
                            target_language="go",
                            severity="failure",
                            error_detail="bad \ud800",
                        )
                    ],
                )
            ],
        )
        (tmp_path / "byExample.json").write_text("previous\n")

        with pytest.raises(SerializationError) as exc_info:
            CoverageExporter(record).export(tmp_path)

        assert exc_info.value.path == tmp_path / "byExample.json"
        assert isinstance(exc_info.value.__cause__, UnicodeEncodeError)
        # The previous report is not truncated
        assert (tmp_path / "byExample.json").read_text() == "previous\n"
        assert not (tmp_path / "summary.json").exists()

    def test_errors_share_base(self) -> None:
        """All export errors derive from ExportError."""
        for error_type in (DirectoryCreationError, SerializationError, WriteError):
            error = error_type("/tmp/out", "boom")
            assert isinstance(error, ExportError)
            assert "boom" in str(error)
