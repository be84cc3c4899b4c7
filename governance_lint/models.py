"""
Result types shared by validators, the linter and the reporter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any


class RecordKind(Enum):
    """Kinds of governance records."""

    ROAD = "road"
    ADR = "adr"
    CHANGE = "change"
    NFR = "nfr"
    CAPABILITY = "capability"
    PERSONA = "persona"
    USER_STORY = "user_story"
    FEATURE = "feature"


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"
    PASSED = "passed"


@dataclass
class ValidationResult:
    """Errors and warnings produced by validating one record."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors

    def error(self, message: str) -> None:
        self.errors.append(message)

    def warn(self, message: str) -> None:
        self.warnings.append(message)

    def extend(self, other: ValidationResult) -> ValidationResult:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        return self

    def __add__(self, other: ValidationResult) -> ValidationResult:
        return ValidationResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )

    def promote_warnings(self) -> ValidationResult:
        """Return a copy with every warning turned into an error (strict mode)."""
        return ValidationResult(errors=self.errors + self.warnings, warnings=[])


@dataclass
class Finding:
    """One reported line: an error, a warning, or a passed record."""

    file: Path | None
    record_id: str | None
    kind: RecordKind
    message: str
    severity: Severity

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": str(self.file) if self.file else None,
            "id": self.record_id,
            "kind": self.kind.value,
            "message": self.message,
            "severity": self.severity.value,
        }


@dataclass
class LintResults:
    """
    Aggregate of one or more validation passes.

    Passes return their own LintResults; callers merge them instead of
    sharing a mutable accumulator.
    """

    errors: list[Finding] = field(default_factory=list)
    warnings: list[Finding] = field(default_factory=list)
    passed: list[Finding] = field(default_factory=list)
    total: int = 0

    def add_record(
        self,
        file: Path | None,
        record_id: str | None,
        kind: RecordKind,
        result: ValidationResult,
        passed_message: str = "All validations passed",
    ) -> None:
        """Record the outcome of validating one record."""
        self.total += 1
        for message in result.errors:
            self.errors.append(Finding(file, record_id, kind, message, Severity.ERROR))
        for message in result.warnings:
            self.warnings.append(Finding(file, record_id, kind, message, Severity.WARNING))
        if not result.errors:
            self.passed.append(Finding(file, record_id, kind, passed_message, Severity.PASSED))

    def add_error(
        self, file: Path | None, record_id: str | None, kind: RecordKind, message: str
    ) -> None:
        self.errors.append(Finding(file, record_id, kind, message, Severity.ERROR))

    def add_warning(
        self, file: Path | None, record_id: str | None, kind: RecordKind, message: str
    ) -> None:
        self.warnings.append(Finding(file, record_id, kind, message, Severity.WARNING))

    def merge(self, other: LintResults) -> LintResults:
        self.errors.extend(other.errors)
        self.warnings.extend(other.warnings)
        self.passed.extend(other.passed)
        self.total += other.total
        return self

    @property
    def exit_code(self) -> int:
        """0 when no errors were found (warnings never fail a run)."""
        return 1 if self.errors else 0

    def summary(self) -> dict[str, int]:
        return {
            "total": self.total,
            "errors": len(self.errors),
            "warnings": len(self.warnings),
            "passed": len(self.passed),
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary(),
            "errors": [f.to_dict() for f in self.errors],
            "warnings": [f.to_dict() for f in self.warnings],
            "passed": [f.to_dict() for f in self.passed],
        }
