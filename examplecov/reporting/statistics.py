"""
Coverage statistics - Aggregated views over a coverage record.

Builds the four views written by the exporter:
- Per-example: one flattened record per example
- Per-language: counts, percentages and frequent errors per target language
- Provider-wide: the same statistic collapsed across all languages
- Short summary: success rates only, as plain text
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Any

from examplecov.coverage.models import ConversionResult, ConversionSeverity, CoverageRecord


def percentage(count: int, total: int) -> float:
    """Share of count in total (0.0 to 100.0), 0.0 when total is zero."""
    if total == 0:
        return 0.0
    return count / total * 100.0


@dataclass
class NumPct:
    """A count together with its share of the total."""

    number: int = 0
    pct: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {"Number": self.number, "Pct": self.pct}


@dataclass
class ErrorMessage:
    """A distinct failure reason and how often it occurred."""

    reason: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"Reason": self.reason, "Count": self.count}


def sort_errors(histogram: Counter[str], limit: int | None = None) -> list[ErrorMessage]:
    """
    Flatten an error histogram into a list of error messages.

    Ordered by count, most frequent first; equal counts are ordered by
    reason in reverse lexicographic order.

    Args:
        histogram: Mapping from failure reason to occurrences
        limit: Keep only the first `limit` entries when given

    Returns:
        Sorted list of ErrorMessage
    """
    ordered = sorted(histogram.items(), key=lambda item: (item[1], item[0]), reverse=True)
    if limit is not None:
        ordered = ordered[:limit]
    return [ErrorMessage(reason=reason, count=count) for reason, count in ordered]


@dataclass
class ConversionTally:
    """Running counters for a set of conversion attempts."""

    total: int = 0
    successes: int = 0
    warnings: int = 0
    failures: int = 0
    fatals: int = 0
    error_histogram: Counter[str] = field(default_factory=Counter)

    def add(self, result: ConversionResult) -> None:
        """Count one conversion attempt."""
        self.total += 1
        match result.severity:
            case ConversionSeverity.SUCCESS:
                self.successes += 1
                return
            case ConversionSeverity.WARNING:
                self.warnings += 1
            case ConversionSeverity.FAILURE:
                self.failures += 1
            case ConversionSeverity.FATAL:
                self.fatals += 1
        self.error_histogram[result.error_detail] += 1

    def num_pct(self, count: int) -> NumPct:
        return NumPct(number=count, pct=percentage(count, self.total))


# =============================================================================
# Per-example view
# =============================================================================


@dataclass
class ExampleReport:
    """Flattened view of a single example."""

    provider_name: str
    provider_version: str
    example_name: str
    is_duplicated: bool = False
    original_source: str = ""
    failed_languages: list[ConversionResult] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, leaving out failure detail when there is none."""
        result: dict[str, Any] = {
            "ProviderName": self.provider_name,
            "ProviderVersion": self.provider_version,
            "ExampleName": self.example_name,
        }
        if self.original_source:
            result["OriginalSource"] = self.original_source
        result["IsDuplicated"] = self.is_duplicated
        if self.failed_languages:
            result["FailedLanguages"] = [attempt.to_dict() for attempt in self.failed_languages]
        return result


def build_example_reports(record: CoverageRecord) -> list[ExampleReport]:
    """Flatten every example of the record, ordered by example name."""
    reports = []
    for example in record.sorted_examples():
        report = ExampleReport(
            provider_name=record.provider_name,
            provider_version=record.provider_version,
            example_name=example.name,
            is_duplicated=example.is_duplicated,
        )
        if example.has_failures:
            report.original_source = example.original_source
            report.failed_languages = example.failed_attempts
        reports.append(report)
    return reports


# =============================================================================
# Per-language view
# =============================================================================


@dataclass
class LanguageStatistic:
    """Conversion statistics for one target language."""

    total: int = 0
    successes: NumPct = field(default_factory=NumPct)
    warnings: NumPct = field(default_factory=NumPct)
    failures: NumPct = field(default_factory=NumPct)
    fatals: NumPct = field(default_factory=NumPct)
    frequent_errors: list[ErrorMessage] = field(default_factory=list)

    @classmethod
    def from_tally(cls, tally: ConversionTally, top_errors: int | None = None) -> "LanguageStatistic":
        return cls(
            total=tally.total,
            successes=tally.num_pct(tally.successes),
            warnings=tally.num_pct(tally.warnings),
            failures=tally.num_pct(tally.failures),
            fatals=tally.num_pct(tally.fatals),
            frequent_errors=sort_errors(tally.error_histogram, top_errors),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "Total": self.total,
            "Successes": self.successes.to_dict(),
            "Warnings": self.warnings.to_dict(),
            "Failures": self.failures.to_dict(),
            "Fatals": self.fatals.to_dict(),
            "FrequentErrors": [error.to_dict() for error in self.frequent_errors],
        }


def build_language_statistics(
    record: CoverageRecord,
    top_errors: int | None = None,
) -> dict[str, LanguageStatistic]:
    """
    Aggregate conversion attempts per target language.

    Args:
        record: Coverage record to aggregate
        top_errors: Optional cap on the number of frequent errors per language

    Returns:
        Mapping from language name to its statistic, ordered by language name
    """
    tallies: dict[str, ConversionTally] = {}
    for result in record.iter_conversions():
        tallies.setdefault(result.target_language, ConversionTally()).add(result)

    return {
        language: LanguageStatistic.from_tally(tallies[language], top_errors)
        for language in sorted(tallies)
    }


# =============================================================================
# Provider-wide view
# =============================================================================


@dataclass
class ProviderStatistic:
    """Conversion statistics for the provider as a whole."""

    name: str
    version: str
    examples: int = 0
    total_conversions: int = 0
    successes: NumPct = field(default_factory=NumPct)
    warnings: NumPct = field(default_factory=NumPct)
    failures: NumPct = field(default_factory=NumPct)
    fatals: NumPct = field(default_factory=NumPct)
    conversion_errors: list[ErrorMessage] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "Version": self.version,
            "Examples": self.examples,
            "TotalConversions": self.total_conversions,
            "Successes": self.successes.to_dict(),
            "Warnings": self.warnings.to_dict(),
            "Failures": self.failures.to_dict(),
            "Fatals": self.fatals.to_dict(),
            "ConversionErrors": [error.to_dict() for error in self.conversion_errors],
        }


def build_provider_statistic(
    record: CoverageRecord,
    top_errors: int | None = None,
) -> ProviderStatistic:
    """Aggregate every conversion attempt of the record into one statistic."""
    tally = ConversionTally()
    for result in record.iter_conversions():
        tally.add(result)

    return ProviderStatistic(
        name=record.provider_name,
        version=record.provider_version,
        examples=len(record.examples),
        total_conversions=tally.total,
        successes=tally.num_pct(tally.successes),
        warnings=tally.num_pct(tally.warnings),
        failures=tally.num_pct(tally.failures),
        fatals=tally.num_pct(tally.fatals),
        conversion_errors=sort_errors(tally.error_histogram, top_errors),
    )


# =============================================================================
# Short summary
# =============================================================================


def render_short_summary(record: CoverageRecord) -> str:
    """
    Render the plain text success digest.

    Provider name and overall success rate, a blank line, then one line per
    target language in alphabetical order.
    """
    overall = [0, 0]
    by_language: dict[str, list[int]] = {}
    for result in record.iter_conversions():
        language = by_language.setdefault(result.target_language, [0, 0])
        overall[1] += 1
        language[1] += 1
        if result.succeeded:
            overall[0] += 1
            language[0] += 1

    successes, total = overall
    lines = [
        f"Provider:     {record.provider_name}",
        f"Success rate: {percentage(successes, total):.2f}% ({successes}/{total})",
        "",
    ]
    for name in sorted(by_language):
        successes, total = by_language[name]
        lines.append(
            f"Converted {percentage(successes, total):.2f}% of {name} examples "
            f"({successes}/{total})"
        )
    return "\n".join(lines) + "\n"
