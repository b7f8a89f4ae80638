"""Declarative attribute validation.

Record types opt in by declaring, per field, a rule kind from the catalog
(email, zipcode, dollar, age, ...) plus optional per-field options:

    >>> from validated_attributes import ValidatedRecord
    >>> class Customer(ValidatedRecord):
    ...     pass
    >>> specs = Customer.has_validated_attributes({"email": {"format": "email"}})
    >>> Customer(email="jane@example.com").is_valid()
    True
"""

from validated_attributes.attach import attach, compile_declarations, has_validated_attributes
from validated_attributes.core.catalog import CATALOG, kinds, lookup
from validated_attributes.core.compiler import compile_rule
from validated_attributes.core.exceptions import (
    InvalidDeclaration,
    MalformedOptions,
    RuleConfigurationError,
    RuleConstructionError,
    UnknownRuleKind,
    ValidatedAttributesError,
)
from validated_attributes.core.rules import FieldRuleSpec, RuleKind, RuleTemplate
from validated_attributes.core.safe_text import is_safe_text
from validated_attributes.record import ValidatedRecord

__all__ = [
    "has_validated_attributes",
    "attach",
    "compile_declarations",
    "compile_rule",
    "CATALOG",
    "lookup",
    "kinds",
    "is_safe_text",
    "RuleKind",
    "RuleTemplate",
    "FieldRuleSpec",
    "ValidatedRecord",
    "ValidatedAttributesError",
    "RuleConfigurationError",
    "UnknownRuleKind",
    "MalformedOptions",
    "RuleConstructionError",
    "InvalidDeclaration",
]
