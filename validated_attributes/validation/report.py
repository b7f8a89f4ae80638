"""ValidationReport aggregation.

This module defines the ValidationReport class that aggregates multiple
ValidationResults, one per validated record or per validated frame column.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from validated_attributes.validation.result import ValidationResult


@dataclass
class ValidationReport:
    """Aggregated report of validation results.

    Attributes:
        results: Individual ValidationResults
        timestamp: When validation was performed
        total: Total number of results
        passed: Number of results without errors
        failed: Number of results with errors
        error_count: Total number of error messages across all results

    Example:
        >>> report = create_report([ValidationResult(is_valid=True, name="row 0")])
        >>> report.summary()
        'Validation Summary: 1/1 passed, 0 failed, 0 errors'
    """

    results: list[ValidationResult]
    timestamp: datetime
    total: int
    passed: int
    failed: int
    error_count: int

    def is_valid(self) -> bool:
        """Check if all validations passed (no errors)."""
        return self.failed == 0

    def summary(self) -> str:
        return (
            f"Validation Summary: {self.passed}/{self.total} passed, "
            f"{self.failed} failed, {self.error_count} errors"
        )

    def to_json(self) -> dict[str, Any]:
        """Export report as JSON for programmatic access.

        Returns:
            Dictionary representation suitable for JSON serialization
        """
        return {
            "timestamp": self.timestamp.isoformat(),
            "summary": {
                "total": self.total,
                "passed": self.passed,
                "failed": self.failed,
                "error_count": self.error_count,
                "is_valid": self.is_valid(),
            },
            "results": [
                {
                    "name": r.name,
                    "is_valid": r.is_valid,
                    "errors": r.errors,
                    "field_errors": r.field_errors,
                    "metadata": r.metadata,
                }
                for r in self.results
            ],
        }

    def format(self, failures_only: bool = False) -> str:
        """Format report as human-readable text.

        Args:
            failures_only: Only list results that have errors

        Returns:
            Formatted string with summary and results
        """
        lines = []

        lines.append(f"Validation Report ({self.timestamp.strftime('%Y-%m-%d %H:%M:%S')})")
        lines.append("=" * 60)
        lines.append(self.summary())
        lines.append("")

        results = [r for r in self.results if r.has_errors()] if failures_only else self.results
        for result in results:
            lines.append(result.format())
            lines.append("")

        return "\n".join(lines)

    @staticmethod
    def from_json(data: dict[str, Any]) -> "ValidationReport":
        """Reconstruct ValidationReport from JSON data produced by to_json()."""
        summary = data["summary"]
        results = [
            ValidationResult(
                name=r["name"],
                is_valid=r["is_valid"],
                errors=r["errors"],
                field_errors=r.get("field_errors", {}),
                metadata=r.get("metadata", {}),
            )
            for r in data["results"]
        ]

        return ValidationReport(
            results=results,
            timestamp=datetime.fromisoformat(data["timestamp"]),
            total=summary["total"],
            passed=summary["passed"],
            failed=summary["failed"],
            error_count=summary["error_count"],
        )


def create_report(results: list[ValidationResult]) -> ValidationReport:
    """Create ValidationReport from a list of ValidationResults.

    Calculates summary statistics and stamps the report with the current UTC time.

    Example:
        >>> report = create_report([
        ...     ValidationResult(is_valid=True, name="row 0"),
        ...     ValidationResult(is_valid=False, errors=["is too long"], name="row 1"),
        ... ])
        >>> report.passed, report.failed
        (1, 1)
    """
    return ValidationReport(
        results=results,
        timestamp=datetime.now(timezone.utc),
        total=len(results),
        passed=sum(1 for r in results if r.is_valid),
        failed=sum(1 for r in results if not r.is_valid),
        error_count=sum(len(r.errors) for r in results),
    )
