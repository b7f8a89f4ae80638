"""Tests for ValidationResult and ValidationReport."""

import json

from hypothesis import given
from hypothesis import strategies as st

from validated_attributes.validation.report import ValidationReport, create_report
from validated_attributes.validation.result import ValidationResult

messages = st.lists(st.text(min_size=1, max_size=20), max_size=5)


def result_from(errors: list[str], name: str = "Customer") -> ValidationResult:
    return ValidationResult(
        is_valid=not errors,
        errors=errors,
        field_errors={"field": list(errors)} if errors else {},
        name=name,
    )


class TestValidationResult:
    def test_format_passed(self):
        assert ValidationResult(is_valid=True, name="Customer").format() == "[Customer] Validation passed"

    def test_format_failed(self):
        result = result_from(["is too long (maximum is 63 characters)"])
        assert result.format() == (
            "[Customer] Validation failed\nErrors:\n  - is too long (maximum is 63 characters)"
        )

    def test_errors_for(self):
        result = result_from(["bad"])
        assert result.errors_for("field") == ["bad"]
        assert result.errors_for("other") == []

    def test_combine_merges_field_errors(self):
        first = ValidationResult(is_valid=False, errors=["a"], field_errors={"zip": ["a"]})
        second = ValidationResult(is_valid=False, errors=["b"], field_errors={"zip": ["b"]})

        combined = ValidationResult.combine([first, second])

        assert combined.field_errors == {"zip": ["a", "b"]}
        assert combined.metadata["combined_count"] == 2

    @given(st.lists(messages, max_size=6))
    def test_combine_keeps_every_error(self, groups):
        combined = ValidationResult.combine([result_from(group) for group in groups])

        assert combined.errors == [message for group in groups for message in group]
        assert combined.is_valid == (not combined.errors)


class TestValidationReport:
    def test_counts(self):
        report = create_report([result_from([]), result_from(["a", "b"]), result_from(["c"])])

        assert (report.total, report.passed, report.failed, report.error_count) == (3, 1, 2, 3)
        assert not report.is_valid()
        assert report.summary() == "Validation Summary: 1/3 passed, 2 failed, 3 errors"

    def test_empty_report_is_valid(self):
        assert create_report([]).is_valid()

    def test_format_failures_only(self):
        report = create_report([result_from([], name="zip"), result_from(["bad"], name="email")])

        text = report.format(failures_only=True)

        assert "[email] Validation failed" in text
        assert "[zip]" not in text

    def test_json_round_trip(self):
        report = create_report([result_from(["bad"], name="email")])

        restored = ValidationReport.from_json(json.loads(json.dumps(report.to_json())))

        assert restored.summary() == report.summary()
        assert restored.timestamp == report.timestamp
        assert restored.results[0].field_errors == {"field": ["bad"]}
