"""Tests for the rule catalog."""

import dataclasses

import pytest
from hypothesis import given

from tests.conftest import rule_kinds
from validated_attributes.core.catalog import CATALOG, EMAIL_PATTERN, MAX_DOLLAR, kinds, lookup, resolve_kind
from validated_attributes.core.exceptions import RuleConstructionError, UnknownRuleKind
from validated_attributes.core.rules import LengthBounds, RuleKind, RuleTemplate


class TestCatalogContents:
    def test_every_kind_has_a_template(self):
        assert set(CATALOG) == set(RuleKind)
        assert len(kinds()) == 22

    @given(rule_kinds)
    def test_every_template_has_a_constraint(self, kind):
        template = lookup(kind)
        assert template.kind is kind
        assert template.has_constraints()

    def test_lookup_accepts_string_values(self):
        assert lookup("zipcode") is CATALOG[RuleKind.ZIPCODE]

    def test_catalog_is_read_only(self):
        with pytest.raises(TypeError):
            CATALOG[RuleKind.EMAIL] = CATALOG[RuleKind.ZIPCODE]

    def test_templates_are_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            lookup("email").length_bounds = LengthBounds(maximum=5)

    def test_table_values(self):
        assert lookup("name").length_bounds == LengthBounds(maximum=63)
        assert lookup("username").length_bounds == LengthBounds(minimum=5, maximum=127)
        assert lookup("username").uniqueness_required
        assert lookup("url").length_bounds == LengthBounds(maximum=255)
        assert lookup("social_security_number").length_bounds == LengthBounds(exact=9)
        assert lookup("dollar").numeric_range.greater_than == -MAX_DOLLAR
        assert lookup("positive_percent").numeric_range.less_than_or_equal_to == 100
        assert lookup("dollar").allow_nil
        assert not lookup("rails_name").conditional_activation
        assert lookup("safe_text").safe_text


class TestUnknownKinds:
    def test_lookup_bogus_raises(self):
        with pytest.raises(UnknownRuleKind) as exc_info:
            lookup("bogus")

        assert exc_info.value.context["kind"] == "bogus"
        assert "email" in exc_info.value.message

    def test_resolve_kind_passes_members_through(self):
        assert resolve_kind(RuleKind.AGE) is RuleKind.AGE


class TestTemplateConstruction:
    def test_template_without_constraints_is_rejected(self):
        with pytest.raises(RuleConstructionError):
            RuleTemplate(kind=RuleKind.NUMBER)

    def test_decimal_template_derives_its_pattern(self):
        template = lookup("dollar")
        assert template.pattern.pattern == template.decimal.source()


class TestPatterns:
    @pytest.mark.parametrize(
        "value",
        ["jane@example.com", "first.last+tag@sub.example.org", "O'Brien@example.co.uk"],
    )
    def test_email_accepts(self, value):
        assert EMAIL_PATTERN.search(value)

    @pytest.mark.parametrize(
        "value",
        ["not-an-email", ".jane@example.com", "jane.@example.com", "jane@example", "jane@@example.com"],
    )
    def test_email_rejects(self, value):
        assert not EMAIL_PATTERN.search(value)

    @pytest.mark.parametrize(
        ("kind", "value", "matches"),
        [
            ("zipcode", "12345", True),
            ("zipcode", "123456789", True),
            ("zipcode", "1234", False),
            ("zipcode", "12345-6789", False),
            ("middle_initial", "Q", True),
            ("middle_initial", "", True),
            ("middle_initial", "QR", False),
            ("phone_extension", "123x45", True),
            ("phone_extension", "x12", False),
            ("rails_name", "first_name", True),
            ("rails_name", "first-name", False),
            ("username", "jane.doe@work", True),
            ("username", "-jane", False),
            ("domain", "example.com", True),
            ("domain", "localhost", False),
            ("url", "https://example.com/path?q=1#top", True),
            ("url", "example.com", False),
            ("url", "a:", False),
            ("url", "https://", False),
            ("url", "mailto:jane@example.com", True),
            ("positive_dollar", "-1.00", False),
            ("dollar", "-1.00", True),
            ("dollar", "1.234", False),
            ("percent", "-99.1234", True),
            ("positive_comparative_percent", "12.5", True),
        ],
    )
    def test_kind_patterns(self, kind, value, matches):
        assert bool(lookup(kind).pattern.search(value)) is matches
