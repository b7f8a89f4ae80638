"""ValidationResult data structure.

This module defines the ValidationResult class that represents the outcome of
running compiled field rules against one record (or one column of a frame).
It provides methods for checking validation status, formatting results, and
combining multiple results.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class ValidationResult:
    """Result of running field rules.

    The is_valid field indicates overall success (True if no errors). Errors
    are rendered failure messages; ``field_errors`` keeps the same messages
    grouped by field so callers can display them next to the input.

    Attributes:
        is_valid: True if validation passed (no errors). False if any errors occurred.
        errors: Rendered error messages, in the order rules ran.
        field_errors: Mapping of field name to its error messages.
        name: Name of what was validated (record type or column). Used for
              identifying the source of errors in reports.
        metadata: Additional context about the validation (row indices,
                 skipped conditional rules, rule counts).

    Example:
        >>> result = ValidationResult(
        ...     is_valid=False,
        ...     errors=["should look like an email address for email"],
        ...     field_errors={"email": ["should look like an email address for email"]},
        ...     name="Customer",
        ... )
        >>> result.has_errors()
        True
        >>> print(result.format())
        [Customer] Validation failed
        Errors:
          - should look like an email address for email
    """

    is_valid: bool
    errors: list[str] = field(default_factory=list)
    field_errors: dict[str, list[str]] = field(default_factory=dict)
    name: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)

    def has_errors(self) -> bool:
        """Check if validation failed with errors.

        Returns:
            True if there are any error messages, False otherwise.
        """
        return len(self.errors) > 0

    def errors_for(self, field_name: str) -> list[str]:
        return list(self.field_errors.get(field_name, []))

    def format(self) -> str:
        """Format result as human-readable string.

        Produces a formatted string showing the name, validation status and
        all errors. The format is designed for console output and log files.

        Returns:
            Formatted string with name, status and errors.
        """
        lines = []

        status = "passed" if self.is_valid else "failed"
        lines.append(f"[{self.name}] Validation {status}")

        if self.has_errors():
            lines.append("Errors:")
            for error in self.errors:
                lines.append(f"  - {error}")

        return "\n".join(lines)

    @staticmethod
    def combine(results: list["ValidationResult"]) -> "ValidationResult":
        """Combine multiple results into an aggregated result.

        The combined result:
        - is_valid is False if any individual result has errors
        - errors list contains all errors from all results
        - field_errors merges every result's field errors
        - name is "combined"
        - metadata contains the count of combined results

        Args:
            results: List of ValidationResults to combine

        Returns:
            Aggregated ValidationResult containing all errors

        Example:
            >>> first = ValidationResult(is_valid=False, errors=["is too long"], field_errors={"name": ["is too long"]})
            >>> second = ValidationResult(is_valid=True)
            >>> combined = ValidationResult.combine([first, second])
            >>> combined.is_valid
            False
            >>> combined.name
            'combined'
        """
        all_errors: list[str] = []
        all_field_errors: dict[str, list[str]] = {}

        for result in results:
            all_errors.extend(result.errors)
            for field_name, messages in result.field_errors.items():
                all_field_errors.setdefault(field_name, []).extend(messages)

        return ValidationResult(
            is_valid=len(all_errors) == 0,
            errors=all_errors,
            field_errors=all_field_errors,
            name="combined",
            metadata={"combined_count": len(results)},
        )
