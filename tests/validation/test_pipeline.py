"""Tests for RecordValidator and validate_records."""

from validated_attributes.attach import compile_declarations
from validated_attributes.validation.errors import Errors
from validated_attributes.validation.pipeline import RecordValidator, validate_records


class Customer:
    def __init__(self, **attributes):
        self.__dict__.update(attributes)


class TestRecordValidator:
    def test_every_field_is_checked(self, declarations):
        validator = RecordValidator(compile_declarations(declarations), name="Customer")

        result = validator.validate({"email": "nope", "zip": "1", "age": 200, "balance": "1.5"})

        assert not result.is_valid
        assert list(result.field_errors) == ["email", "zip", "age"]
        assert result.name == "Customer"
        assert result.metadata["rule_count"] == 4

    def test_object_records(self, declarations):
        validator = RecordValidator(compile_declarations(declarations))

        result = validator.validate(Customer(email="jane@example.com", zip="12345", age=30))

        assert result.is_valid
        assert result.metadata["skipped_fields"] == ["balance"]

    def test_external_sink_receives_failures(self, declarations):
        sink = Errors()
        validator = RecordValidator(compile_declarations(declarations))

        validator.validate({"zip": "1"}, errors=sink)

        assert sink["zip"] == ["must contain 5 or 9 numbers for zip"]

    def test_validator_holds_no_record_state(self, declarations):
        validator = RecordValidator(compile_declarations(declarations))

        assert not validator.validate({"zip": "1"}).is_valid
        assert validator.validate({"zip": "12345"}).is_valid


class TestValidateRecords:
    def test_report_names_each_record(self, declarations):
        report = validate_records(
            compile_declarations(declarations),
            [{"zip": "12345"}, {"zip": "1"}],
            name="Customer",
        )

        assert [result.name for result in report.results] == ["Customer[0]", "Customer[1]"]
        assert report.summary() == "Validation Summary: 1/2 passed, 1 failed, 1 errors"
