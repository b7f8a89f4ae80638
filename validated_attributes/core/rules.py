"""Rule data structures.

This module defines the immutable building blocks shared by the catalog, the
compiler and the validation pipeline:

- RuleKind: The closed set of attribute kinds a record type may declare
- LengthBounds: Exact/minimum/maximum character-length constraint
- NumericRange: Numericality constraint with optional override message
- DecimalFormat: Structured description of a decimal regular expression
- FieldMessage: Message generator rendering "<text> for <field>"
- RuleTemplate: Field-agnostic catalog entry for one RuleKind
- FieldRuleSpec: Compiled, field-specific rule handed to the validation pipeline

Every structure is a frozen dataclass. Compilation produces new instances with
``dataclasses.replace`` and never mutates a catalog entry.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any

from validated_attributes.core.exceptions import RuleConstructionError

Number = int | float | Decimal


class RuleKind(Enum):
    """Named attribute kinds available in the rule catalog."""

    NAME = "name"
    SAFE_TEXT = "safe_text"
    USERNAME = "username"
    RAILS_NAME = "rails_name"
    EMAIL = "email"
    PHONE_NUMBER = "phone_number"
    PHONE_EXTENSION = "phone_extension"
    DOMAIN = "domain"
    ZIPCODE = "zipcode"
    MIDDLE_INITIAL = "middle_initial"
    DOLLAR = "dollar"
    POSITIVE_DOLLAR = "positive_dollar"
    PERCENT = "percent"
    POSITIVE_PERCENT = "positive_percent"
    COMPARATIVE_PERCENT = "comparative_percent"
    POSITIVE_COMPARATIVE_PERCENT = "positive_comparative_percent"
    URL = "url"
    SOCIAL_SECURITY_NUMBER = "social_security_number"
    TAXID = "taxid"
    AGE = "age"
    NUMBER = "number"
    DESCRIPTION = "description"


@dataclass(frozen=True)
class LengthBounds:
    """Character-length constraint.

    A "within [lo, hi]" constraint is stored as ``minimum=lo, maximum=hi``.
    ``exact`` cannot be combined with ``minimum`` or ``maximum``.

    Attributes:
        exact: Required length, or None
        minimum: Minimum length, or None
        maximum: Maximum length, or None

    Example:
        >>> LengthBounds.within(5, 127)
        LengthBounds(exact=None, minimum=5, maximum=127)
    """

    exact: int | None = None
    minimum: int | None = None
    maximum: int | None = None

    def __post_init__(self) -> None:
        for name in ("exact", "minimum", "maximum"):
            bound = getattr(self, name)
            if bound is None:
                continue
            if isinstance(bound, bool) or not isinstance(bound, int) or bound < 0:
                raise ValueError(f"length bound '{name}' must be a non-negative integer, got: {bound!r}")
        if self.exact is not None and (self.minimum is not None or self.maximum is not None):
            raise ValueError("exact length cannot be combined with minimum or maximum")
        if self.minimum is not None and self.maximum is not None and self.minimum > self.maximum:
            raise ValueError(f"minimum length {self.minimum} is greater than maximum {self.maximum}")
        if self.is_empty():
            raise ValueError("length bounds must set at least one of exact, minimum, maximum")

    @classmethod
    def within(cls, low: int, high: int) -> "LengthBounds":
        return cls(minimum=low, maximum=high)

    def is_empty(self) -> bool:
        return self.exact is None and self.minimum is None and self.maximum is None

    def to_dict(self) -> dict[str, int]:
        return {k: v for k, v in (("is", self.exact), ("minimum", self.minimum), ("maximum", self.maximum)) if v is not None}


@dataclass(frozen=True)
class NumericRange:
    """Numericality constraint.

    A range with no bounds still requires the value to parse as a number.
    When ``message`` is set it replaces every numericality failure message.

    Attributes:
        greater_than: Exclusive lower bound
        greater_than_or_equal_to: Inclusive lower bound
        less_than: Exclusive upper bound
        less_than_or_equal_to: Inclusive upper bound
        only_integer: Reject values with a fractional part
        message: Override message for any numericality failure
    """

    greater_than: Number | None = None
    greater_than_or_equal_to: Number | None = None
    less_than: Number | None = None
    less_than_or_equal_to: Number | None = None
    only_integer: bool = False
    message: str | None = None

    def bounds(self) -> list[tuple[str, Number]]:
        """Return the configured (operator, bound) pairs in evaluation order."""
        pairs = [
            ("greater_than", self.greater_than),
            ("greater_than_or_equal_to", self.greater_than_or_equal_to),
            ("less_than", self.less_than),
            ("less_than_or_equal_to", self.less_than_or_equal_to),
        ]
        return [(name, bound) for name, bound in pairs if bound is not None]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = dict(self.bounds())
        if self.only_integer:
            data["only_integer"] = True
        if self.message is not None:
            data["message"] = self.message
        return data


@dataclass(frozen=True)
class DecimalFormat:
    """Decimal number pattern: optional sign, integer digits, fractional digits.

    A signed format with 12 integer and 2 fractional digits accepts "-1234.56"
    and rejects "1.234".
    """

    signed: bool
    integer_digits: int
    fraction_digits: int

    def source(self) -> str:
        sign = "-?" if self.signed else ""
        return rf"\A{sign}[0-9]{{0,{self.integer_digits}}}(\.[0-9]{{0,{self.fraction_digits}}})?\Z"

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.source())


@dataclass(frozen=True)
class FieldMessage:
    """Message generator evaluated once the field name is known.

    The catalog is field-agnostic, so templates keep the bare text and the
    compiler renders it for each field.

    Example:
        >>> FieldMessage("should look like an email address")("contact_email")
        'should look like an email address for contact_email'
    """

    text: str

    def __call__(self, field_name: str) -> str:
        return f"{self.text} for {field_name}"


@dataclass(frozen=True)
class RuleTemplate:
    """Catalog entry describing the checks behind one RuleKind.

    When ``decimal`` is set the pattern is derived from it, so that the
    compiler can rewrite the fractional-digit segment structurally.

    Raises:
        RuleConstructionError: If no constraint is set (pattern, length,
            numericality, uniqueness or the safe-text predicate)
    """

    kind: RuleKind
    pattern: re.Pattern[str] | None = None
    decimal: DecimalFormat | None = None
    pattern_message: FieldMessage | None = None
    length_bounds: LengthBounds | None = None
    numeric_range: NumericRange | None = None
    uniqueness_required: bool = False
    safe_text: bool = False
    conditional_activation: bool = False
    allow_nil: bool = False

    def __post_init__(self) -> None:
        if self.decimal is not None and self.pattern is None:
            object.__setattr__(self, "pattern", self.decimal.compile())
        if not self.has_constraints():
            raise RuleConstructionError(
                f"Rule template '{self.kind.value}' defines no constraint",
                kind=self.kind.value,
            )

    def has_constraints(self) -> bool:
        return (
            self.pattern is not None
            or self.length_bounds is not None
            or self.numeric_range is not None
            or self.uniqueness_required
            or self.safe_text
        )


@dataclass(frozen=True)
class FieldRuleSpec:
    """Compiled rule for one field of one record type.

    Created fresh for every declared field and immutable afterwards. The
    validation pipeline owns it once registered.

    Attributes:
        field_name: Attribute the rule applies to
        kind: Catalog kind the rule was compiled from
        pattern: Regular expression the string form of the value must match
        pattern_message: Rendered message for a pattern failure
        length_bounds: Character-length constraint
        numeric_range: Numericality constraint
        uniqueness_required: Value must be unique across persisted records
        safe_text: Value must not contain non-printing control characters
        condition: Predicate name that must be true for the rule to run
        unless: Predicate name that must be false for the rule to run
        allow_nil: Skip every check when the value is None
        allow_blank: Skip every check when the value is None or blank
        presence: Value must not be blank
    """

    field_name: str
    kind: RuleKind
    pattern: re.Pattern[str] | None = None
    pattern_message: str | None = None
    length_bounds: LengthBounds | None = None
    numeric_range: NumericRange | None = None
    uniqueness_required: bool = False
    safe_text: bool = False
    condition: str | None = None
    unless: str | None = None
    allow_nil: bool = False
    allow_blank: bool = False
    presence: bool = False

    def has_constraints(self) -> bool:
        return (
            self.pattern is not None
            or self.length_bounds is not None
            or self.numeric_range is not None
            or self.uniqueness_required
            or self.safe_text
            or self.presence
        )

    def to_dict(self) -> dict[str, Any]:
        """Describe the rule as plain data (for reports and the CLI)."""
        data: dict[str, Any] = {"field": self.field_name, "kind": self.kind.value}
        if self.pattern is not None:
            data["pattern"] = self.pattern.pattern
            data["message"] = self.pattern_message
        if self.length_bounds is not None:
            data["length"] = self.length_bounds.to_dict()
        if self.numeric_range is not None:
            data["numericality"] = self.numeric_range.to_dict()
        for flag in ("uniqueness_required", "safe_text", "allow_nil", "allow_blank", "presence"):
            if getattr(self, flag):
                data[flag] = True
        if self.condition is not None:
            data["if"] = self.condition
        if self.unless is not None:
            data["unless"] = self.unless
        return data
