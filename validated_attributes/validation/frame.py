"""Tabular batch validation.

This module applies attribute declarations to every row of a Polars
DataFrame. Each declared field becomes one column check and produces one
ValidationResult, so a report shows at a glance which columns hold bad data.
"""

import logging
from collections.abc import Mapping
from typing import Any

import polars as pl

from validated_attributes.attach import compile_declarations
from validated_attributes.core.rules import FieldRuleSpec
from validated_attributes.validation.checks import run_field_rule
from validated_attributes.validation.errors import Errors
from validated_attributes.validation.report import ValidationReport, create_report
from validated_attributes.validation.result import ValidationResult

logger = logging.getLogger(__name__)


def _duplicated_values(series: pl.Series) -> set[Any]:
    """Return the non-null values that occur more than once in a column."""
    mask = series.is_duplicated() & series.is_not_null()
    return set(series.filter(mask).to_list())


class FrameValidator:
    """Validates DataFrame columns against attribute declarations.

    Declarations are compiled once, in the constructor. Rows are passed to
    the rule checks as mappings, so conditional rules (``has_if``) look at
    the presence of the other column in the same row. Uniqueness rules are
    checked within the frame: a value fails when it appears in more than one
    row, and nulls never count as duplicates.

    Attributes:
        specs: Compiled rules, one per declared field
        name: Name of the record type, used in log messages

    Example:
        >>> df = pl.DataFrame({"email": ["a@example.com", "nope"], "zip": ["12345", "12345"]})
        >>> validator = FrameValidator({"email": {"format": "email"}, "zip": {"format": "zipcode"}})
        >>> report = validator.validate(df)
        >>> report.summary()
        'Validation Summary: 1/2 passed, 1 failed, 1 errors'
        >>> report.results[0].errors
        ['row 1: should look like an email address for email']
    """

    def __init__(self, declarations: Mapping[str, Mapping[str, Any]], name: str = "frame"):
        self.specs: tuple[FieldRuleSpec, ...] = compile_declarations(declarations, record_type_name=name)
        self.name = name

    def validate(self, df: pl.DataFrame) -> ValidationReport:
        """Check every row of every declared column.

        Args:
            df: DataFrame to validate (must not be mutated)

        Returns:
            ValidationReport with one result per declared field. Result metadata
            lists the failing row indices and the rows skipped by conditions.
        """
        rows = df.to_dicts()
        results = [self._validate_column(spec, df, rows) for spec in self.specs]
        report = create_report(results)
        logger.info("%s: %s (%d rows)", self.name, report.summary(), df.height)
        return report

    def _validate_column(
        self, spec: FieldRuleSpec, df: pl.DataFrame, rows: list[dict[str, Any]]
    ) -> ValidationResult:
        field = spec.field_name
        if field not in df.columns:
            message = f"Cannot validate {field}: column not found in DataFrame"
            return ValidationResult(
                is_valid=False,
                errors=[message],
                field_errors={field: [message]},
                name=field,
                metadata={"kind": spec.kind.value, "missing_column": True},
            )

        uniqueness_checker = None
        if spec.uniqueness_required:
            duplicated = _duplicated_values(df.get_column(field))

            def uniqueness_checker(record: Any, field_name: str, value: Any) -> bool:
                return value is None or value not in duplicated

        errors: list[str] = []
        failed_rows: list[int] = []
        skipped_rows: list[int] = []
        for index, row in enumerate(rows):
            row_errors = Errors()
            enforced = run_field_rule(
                spec, row.get(field), row_errors, record=row, uniqueness_checker=uniqueness_checker
            )
            if not enforced:
                skipped_rows.append(index)
                continue
            messages = row_errors[field]
            if messages:
                failed_rows.append(index)
                errors.extend(f"row {index}: {message}" for message in messages)

        return ValidationResult(
            is_valid=not errors,
            errors=errors,
            field_errors={field: list(errors)} if errors else {},
            name=field,
            metadata={
                "kind": spec.kind.value,
                "failed_rows": failed_rows,
                "skipped_rows": skipped_rows,
                "row_count": df.height,
            },
        )
