"""Tests for the rule compiler."""

import dataclasses

import pytest
from hypothesis import given
from hypothesis import strategies as st

from validated_attributes.core.catalog import lookup
from validated_attributes.core.compiler import compile_rule
from validated_attributes.core.exceptions import MalformedOptions, RuleConstructionError, UnknownRuleKind
from validated_attributes.core.rules import LengthBounds, NumericRange, RuleKind


class TestPrecision:
    def test_precision_length_rewrites_fraction_digits(self):
        spec = compile_rule("dollar", "price", {"precision_length": 4})

        assert spec.pattern.search("12.3456")
        assert not spec.pattern.search("12.34567")
        assert spec.length_bounds is None

    def test_precision_keeps_the_sign_rule(self):
        signed = compile_rule("dollar", "price", {"precision_length": 3})
        unsigned = compile_rule("positive_dollar", "price", {"precision_length": 3})

        assert signed.pattern.search("-1.123")
        assert not unsigned.pattern.search("-1.123")

    @given(st.integers(min_value=0, max_value=12))
    def test_precision_bound_is_exact(self, digits):
        spec = compile_rule("percent", "rate", {"precision_length": digits})

        assert spec.pattern.search("1." + "5" * digits) or digits == 0
        assert not spec.pattern.search("1." + "5" * (digits + 1))

    def test_precision_does_not_touch_the_catalog(self):
        before = lookup("dollar").pattern
        compile_rule("dollar", "price", {"precision_length": 6})
        assert lookup("dollar").pattern is before

    def test_precision_on_non_decimal_kind_is_rejected(self):
        with pytest.raises(MalformedOptions) as exc_info:
            compile_rule("email", "email", {"precision_length": 2})

        assert exc_info.value.context["option"] == "precision_length"

    @pytest.mark.parametrize("value", [-1, "2", True, 1.5])
    def test_precision_value_must_be_non_negative_int(self, value):
        with pytest.raises(MalformedOptions):
            compile_rule("dollar", "price", {"precision_length": value})


class TestLengthOptions:
    def test_maximum_length_is_a_length_bound(self):
        spec = compile_rule("email", "contact_email", {"maximum_length": 10})

        assert spec.length_bounds == LengthBounds(maximum=10)
        assert spec.pattern is lookup("email").pattern

    def test_caller_bounds_replace_template_bounds(self):
        spec = compile_rule("username", "login", {"minimum_length": 2})
        assert spec.length_bounds == LengthBounds(minimum=2)

    @pytest.mark.parametrize(
        ("options", "expected"),
        [
            ({"exact_length": 4}, LengthBounds(exact=4)),
            ({"is_length": 4}, LengthBounds(exact=4)),
            ({"within_length": (2, 8)}, LengthBounds(minimum=2, maximum=8)),
            ({"within_length": range(2, 9)}, LengthBounds(minimum=2, maximum=8)),
            ({"length": 6}, LengthBounds(exact=6)),
            ({"length": {"minimum": 1, "maximum": 3}}, LengthBounds(minimum=1, maximum=3)),
            ({"length": {"within": [3, 5]}}, LengthBounds(minimum=3, maximum=5)),
        ],
    )
    def test_length_forms(self, options, expected):
        assert compile_rule("name", "title", options).length_bounds == expected

    def test_precision_and_length_together(self):
        spec = compile_rule("dollar", "price", {"precision_length": 1, "maximum_length": 8})

        assert spec.length_bounds == LengthBounds(maximum=8)
        assert not spec.pattern.search("1.12")

    @pytest.mark.parametrize(
        "options",
        [
            {"maximum_length": -1},
            {"maximum_length": "ten"},
            {"minimum_length": 5, "maximum_length": 2},
            {"exact_length": 3, "maximum_length": 5},
            {"within_length": 5},
            {"within_length": range(5, 5)},
            {"length": "short"},
            {"length": {"longest": 3}},
            {"biggest_length": 3},
        ],
    )
    def test_malformed_length_options(self, options):
        with pytest.raises(MalformedOptions):
            compile_rule("name", "title", options)


class TestConditionalActivation:
    def test_conditional_kind_gets_field_predicate(self):
        assert compile_rule("email", "contact_email", {}).condition == "contact_email?"

    def test_unconditional_kind_has_no_predicate(self):
        assert compile_rule("rails_name", "handle", {}).condition is None

    def test_has_if_forces_activation(self):
        assert compile_rule("rails_name", "handle", {"has_if": True}).condition == "handle?"
        assert compile_rule("email", "email", {"has_if": False}).condition is None

    def test_has_if_must_be_boolean(self):
        with pytest.raises(MalformedOptions):
            compile_rule("email", "email", {"has_if": "yes"})

    def test_if_override_replaces_predicate(self):
        assert compile_rule("email", "email", {"if": "subscribed?"}).condition == "subscribed?"


class TestOverrides:
    def test_messages_name_the_field(self):
        spec = compile_rule("email", "contact_email", {})
        assert spec.pattern_message == "should look like an email address for contact_email"

    def test_message_override(self):
        assert compile_rule("zipcode", "zip", {"message": "bad zip"}).pattern_message == "bad zip"

    def test_flag_overrides(self):
        spec = compile_rule("dollar", "price", {"allow_nil": False, "required": True, "uniqueness": True})

        assert not spec.allow_nil
        assert spec.presence
        assert spec.uniqueness_required

    def test_uniqueness_can_be_switched_off(self):
        assert not compile_rule("username", "login", {"uniqueness": False}).uniqueness_required

    def test_numericality_mapping_merges_into_template_range(self):
        spec = compile_rule("age", "age", {"numericality": {"less_than_or_equal_to": 65}})

        assert spec.numeric_range.less_than_or_equal_to == 65
        assert spec.numeric_range.greater_than_or_equal_to == 0
        assert lookup("age").numeric_range.less_than_or_equal_to == 110

    def test_numericality_true_on_pattern_kind(self):
        spec = compile_rule("zipcode", "zip", {"numericality": True})
        assert spec.numeric_range == NumericRange()

    def test_format_override(self):
        spec = compile_rule("rails_name", "code", {"format": r"\A[A-Z]{3}\Z"})

        assert spec.pattern.search("ABC")
        assert spec.pattern_message == "should only include underscores and letters for code"

    @pytest.mark.parametrize(
        "options",
        [
            {"allow_nil": "yes"},
            {"if": ""},
            {"numericality": {"smaller_than": 3}},
            {"numericality": {"less_than": "3"}},
            {"numericality": 3},
            {"format": "("},
            {"colour": "red"},
            {1: True},
        ],
    )
    def test_bad_overrides_are_rejected(self, options):
        with pytest.raises(MalformedOptions):
            compile_rule("age", "age", options)

    def test_stripping_every_constraint_is_rejected(self):
        with pytest.raises(RuleConstructionError):
            compile_rule("age", "age", {"numericality": False})


class TestCompileInputs:
    @pytest.mark.parametrize("options", [None, ["maximum_length", 3], "maximum_length=3"])
    def test_options_must_be_a_mapping(self, options):
        with pytest.raises(MalformedOptions):
            compile_rule("email", "email", options)

    def test_options_are_checked_before_the_kind(self):
        with pytest.raises(MalformedOptions):
            compile_rule("bogus", "email", None)

    def test_unknown_kind(self):
        with pytest.raises(UnknownRuleKind):
            compile_rule("bogus", "email", {})

    def test_empty_field_name(self):
        with pytest.raises(MalformedOptions):
            compile_rule("email", "", {})

    def test_caller_options_are_not_mutated(self):
        options = {"precision_length": 3, "has_if": False}
        compile_rule("dollar", "price", options)
        assert options == {"precision_length": 3, "has_if": False}

    def test_compiled_spec_is_frozen(self):
        spec = compile_rule("email", "email", {})
        with pytest.raises(dataclasses.FrozenInstanceError):
            spec.field_name = "other"

    def test_kind_member_accepted(self):
        assert compile_rule(RuleKind.ZIPCODE, "zip", {}).kind is RuleKind.ZIPCODE
