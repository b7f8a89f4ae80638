"""Tests for DataFrame validation."""

import polars as pl
import pytest
from hypothesis import given
from hypothesis import strategies as st

from validated_attributes.core.exceptions import UnknownRuleKind
from validated_attributes.validation.frame import FrameValidator


class TestFrameValidator:
    def test_one_result_per_declared_field(self, customer_frame, customer_declarations):
        report = FrameValidator(customer_declarations, name="Customer").validate(customer_frame)

        assert [result.name for result in report.results] == ["email", "zip", "login", "age"]

    def test_row_indices_in_messages(self, customer_frame, customer_declarations):
        report = FrameValidator(customer_declarations).validate(customer_frame)
        email, zip_code, _, age = report.results

        assert email.errors == ["row 1: should look like an email address for email"]
        assert email.metadata["failed_rows"] == [1]
        assert zip_code.errors == ["row 2: must contain 5 or 9 numbers for zip"]
        assert age.errors == ["row 2: must contain only 3 numbers and less than 110"]

    def test_conditional_rules_skip_missing_values(self, customer_frame, customer_declarations):
        report = FrameValidator(customer_declarations).validate(customer_frame)
        email, _, login, age = report.results

        assert email.metadata["skipped_rows"] == [2]
        assert login.metadata["skipped_rows"] == [3]
        assert age.metadata["skipped_rows"] == [1]

    def test_uniqueness_within_frame(self, customer_frame, customer_declarations):
        report = FrameValidator(customer_declarations).validate(customer_frame)
        login = report.results[2]

        assert login.errors == ["row 0: has already been taken", "row 2: has already been taken"]

    def test_nulls_are_never_duplicates(self):
        df = pl.DataFrame({"login": [None, None, "janedoe"]}, schema={"login": pl.Utf8})
        validator = FrameValidator({"login": {"format": "username", "has_if": False, "allow_nil": True}})

        assert validator.validate(df).is_valid()

    def test_missing_column(self, customer_frame):
        report = FrameValidator({"phone": {"format": "phone_number"}}).validate(customer_frame)
        result = report.results[0]

        assert not result.is_valid
        assert result.metadata["missing_column"]
        assert "column not found" in result.errors[0]

    def test_summary(self, customer_frame, customer_declarations):
        report = FrameValidator(customer_declarations).validate(customer_frame)
        assert report.summary() == "Validation Summary: 0/4 passed, 4 failed, 5 errors"

    def test_frame_is_not_mutated(self, customer_frame, customer_declarations):
        before = customer_frame.clone()
        FrameValidator(customer_declarations).validate(customer_frame)
        assert customer_frame.equals(before)

    def test_declarations_compile_up_front(self):
        with pytest.raises(UnknownRuleKind):
            FrameValidator({"phone": {"format": "telephone"}})

    @given(st.lists(st.integers(min_value=10_000, max_value=99_999).map(str), min_size=1, max_size=20))
    def test_valid_zipcodes_pass(self, zips):
        df = pl.DataFrame({"zip": zips})
        assert FrameValidator({"zip": {"format": "zipcode"}}).validate(df).is_valid()
