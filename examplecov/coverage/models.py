"""
Pydantic models for example conversion coverage.

Defines the coverage record handed over by the conversion engine: the
provider being measured, its examples and every conversion attempt made
for them.
"""

from collections import Counter
from collections.abc import Iterator
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ConversionSeverity(IntEnum):
    """
    Outcome of a single conversion attempt.

    Ordered from best to worst. The integer values are what gets written
    to the JSON reports.
    """

    SUCCESS = 0
    WARNING = 1
    FAILURE = 2
    FATAL = 3

    @classmethod
    def parse(cls, value: Any) -> "ConversionSeverity":
        """
        Coerce a severity given by name or number.

        Args:
            value: An existing severity, its integer value (as int,
                integral float or digit string), or its case-insensitive
                name ("warning", "Fatal", ...)

        Returns:
            Matching severity

        Raises:
            ValueError: If the value names no severity
        """
        if isinstance(value, cls):
            return value
        # bool is an int subclass
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        if isinstance(value, float) and value.is_integer():
            return cls(int(value))
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            try:
                return cls[text.upper()]
            except KeyError:
                pass
        msg = f"Unknown conversion severity: {value!r}"
        raise ValueError(msg)


class ConversionResult(BaseModel):
    """Result of converting one example into one target language."""

    target_language: str = Field(..., alias="TargetLanguage")
    severity: ConversionSeverity = Field(
        default=ConversionSeverity.SUCCESS,
        alias="FailureSeverity",
    )
    error_detail: str = Field(
        default="",
        alias="FailureInfo",
        description="Reason for the failure, ignored for successful conversions",
    )
    multiple_translations: bool = Field(
        default=False,
        alias="MultipleTranslations",
        description="More than one distinct valid translation was produced",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("severity", mode="before")
    @classmethod
    def _coerce_severity(cls, value: Any) -> ConversionSeverity:
        return ConversionSeverity.parse(value)

    @property
    def succeeded(self) -> bool:
        """Whether the conversion completed without any issue."""
        return self.severity == ConversionSeverity.SUCCESS

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire representation used in the reports."""
        return self.model_dump(mode="json", by_alias=True)


class Example(BaseModel):
    """A code example and the conversions attempted for it."""

    name: str = Field(..., alias="Name")
    original_source: str = Field(default="", alias="OriginalSource")
    conversion_attempts: list[ConversionResult] = Field(
        default_factory=list,
        alias="ConversionAttempts",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def is_duplicated(self) -> bool:
        """Whether any conversion produced more than one translation."""
        return any(attempt.multiple_translations for attempt in self.conversion_attempts)

    @property
    def failed_attempts(self) -> list[ConversionResult]:
        """Conversion attempts that did not succeed, in recorded order."""
        return [attempt for attempt in self.conversion_attempts if not attempt.succeeded]

    @property
    def has_failures(self) -> bool:
        """Whether at least one conversion did not succeed."""
        return any(not attempt.succeeded for attempt in self.conversion_attempts)


class CoverageRecord(BaseModel):
    """
    Everything collected about one provider's example conversions.

    Built upstream by the conversion engine and treated as read-only by
    the exporters.
    """

    provider_name: str = Field(..., alias="ProviderName")
    provider_version: str = Field(default="", alias="ProviderVersion")
    examples: list[Example] = Field(default_factory=list, alias="Examples")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @model_validator(mode="after")
    def _unique_example_names(self) -> "CoverageRecord":
        # Examples are keyed by name
        names = Counter(example.name for example in self.examples)
        duplicates = sorted(name for name, count in names.items() if count > 1)
        if duplicates:
            msg = f"Duplicate example names: {', '.join(duplicates)}"
            raise ValueError(msg)
        return self

    def sorted_examples(self) -> list[Example]:
        """Examples ordered by name, for reproducible output."""
        return sorted(self.examples, key=lambda example: example.name)

    def iter_conversions(self) -> Iterator[ConversionResult]:
        """Yield every conversion attempt of every example, examples sorted by name."""
        for example in self.sorted_examples():
            yield from example.conversion_attempts
