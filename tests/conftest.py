"""Shared test fixtures and Hypothesis strategies for validated_attributes tests."""

import pytest
from hypothesis import settings
from hypothesis import strategies as st

from validated_attributes.core.rules import RuleKind
from validated_attributes.record import ValidatedRecord

settings.register_profile("validated_attributes", max_examples=100, deadline=None)
settings.load_profile("validated_attributes")

# Control characters that are not \n, \r or \t
unsafe_control_characters = st.sampled_from(
    [chr(code) for code in (*range(0x00, 0x20), *range(0x7F, 0xA0)) if chr(code) not in "\n\r\t"]
)

# Printable text, plus the whitespace the safe-text predicate tolerates
safe_text = st.text(
    alphabet=st.characters(
        whitelist_categories=("Lu", "Ll", "Nd", "Zs", "Po"),
        whitelist_characters="\n\r\t",
    ),
    max_size=60,
)

rule_kinds = st.sampled_from(list(RuleKind))


@pytest.fixture
def make_record_type():
    """Create a fresh ValidatedRecord subclass so tests never share registrations."""

    def factory(name: str = "Customer", **class_attributes) -> type[ValidatedRecord]:
        return type(name, (ValidatedRecord,), dict(class_attributes))

    return factory


@pytest.fixture
def declarations() -> dict:
    """A representative declaration map for a customer record."""
    return {
        "email": {"format": "email"},
        "zip": {"format": "zipcode"},
        "age": {"format": "age"},
        "balance": {"format": "dollar", "precision_length": 4},
    }
