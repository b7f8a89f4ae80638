"""Record validation pipeline.

This module defines the RecordValidator class that runs a record type's
compiled rules against record instances. Every rule of every field runs on
each pass; one field's failure never suppresses another field's checks.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from validated_attributes.core.protocols import ErrorSink, UniquenessChecker
from validated_attributes.core.rules import FieldRuleSpec
from validated_attributes.validation.checks import read_value, run_field_rule
from validated_attributes.validation.errors import Errors
from validated_attributes.validation.report import ValidationReport, create_report
from validated_attributes.validation.result import ValidationResult

logger = logging.getLogger(__name__)


class RecordValidator:
    """Runs compiled field rules against records.

    Records may be attribute holders (objects) or mappings. The validator
    holds no per-record state, so one instance can validate independent
    records concurrently.

    Attributes:
        specs: Compiled rules, run in declaration order
        uniqueness_checker: Checker for rules that require uniqueness
        name: Name used for results (usually the record type name)

    Example:
        >>> from validated_attributes.core.compiler import compile_rule
        >>> validator = RecordValidator([compile_rule("zipcode", "zip", {})], name="Address")
        >>> result = validator.validate({"zip": "1234"})
        >>> result.field_errors
        {'zip': ['must contain 5 or 9 numbers for zip']}
    """

    def __init__(
        self,
        specs: Sequence[FieldRuleSpec],
        uniqueness_checker: UniquenessChecker | None = None,
        name: str = "",
    ):
        self.specs = tuple(specs)
        self.uniqueness_checker = uniqueness_checker
        self.name = name

    def validate(self, record: Any, errors: ErrorSink | None = None) -> ValidationResult:
        """Run every rule against one record.

        Args:
            record: Object or mapping holding the field values
            errors: Optional external sink that also receives every failure

        Returns:
            ValidationResult with failures grouped by field. Metadata lists the
            fields whose rules were skipped by a condition or allow_nil.
        """
        collected = Errors()
        skipped: list[str] = []

        for spec in self.specs:
            enforced = run_field_rule(
                spec,
                read_value(record, spec.field_name),
                collected,
                record=record,
                uniqueness_checker=self.uniqueness_checker,
            )
            if not enforced:
                skipped.append(spec.field_name)

        field_errors = collected.to_dict()
        if errors is not None:
            for field, messages in field_errors.items():
                for message in messages:
                    errors.add(field, message)

        if field_errors:
            logger.debug("%s failed validation on fields: %s", self.name or "record", ", ".join(field_errors))

        return ValidationResult(
            is_valid=not field_errors,
            errors=[message for messages in field_errors.values() for message in messages],
            field_errors=field_errors,
            name=self.name,
            metadata={"rule_count": len(self.specs), "skipped_fields": skipped},
        )


def validate_records(
    specs: Sequence[FieldRuleSpec],
    records: Iterable[Any],
    uniqueness_checker: UniquenessChecker | None = None,
    name: str = "record",
) -> ValidationReport:
    """Validate many records and aggregate the results.

    Each result is named ``"<name>[<index>]"``.

    Example:
        >>> from validated_attributes.core.compiler import compile_rule
        >>> specs = [compile_rule("age", "age", {})]
        >>> report = validate_records(specs, [{"age": 30}, {"age": 200}])
        >>> report.summary()
        'Validation Summary: 1/2 passed, 1 failed, 1 errors'
    """
    validator = RecordValidator(specs, uniqueness_checker=uniqueness_checker, name=name)
    results: list[ValidationResult] = []
    for index, record in enumerate(records):
        result = validator.validate(record)
        result.name = f"{name}[{index}]"
        results.append(result)
    return create_report(results)
