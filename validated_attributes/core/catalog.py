"""Rule catalog.

The catalog maps every RuleKind to its RuleTemplate. It is built once, when
this module is imported, from the literal table below and exposed read-only.
Import happens before any record type is declared, so lookups never need a
lock.

Message text is stored as a FieldMessage generator. The compiler renders it for
the field being declared, which lets a single template serve many differently
named fields.
"""

import re
from collections.abc import Mapping
from types import MappingProxyType

from validated_attributes.core.exceptions import UnknownRuleKind
from validated_attributes.core.rules import (
    DecimalFormat,
    FieldMessage,
    LengthBounds,
    NumericRange,
    RuleKind,
    RuleTemplate,
)

# http://haacked.com/archive/2007/08/21/i-knew-how-to-validate-an-email-address-until-i.aspx/
EMAIL_PATTERN = re.compile(
    r"""\A(?!\.)("([^"\r\\]|\\["\r\\])*"|([-a-z0-9!#$%&'’*+/=?^_`{|}~]|(?<!\.)\.)*)(?<!\.)@"""
    r"""[a-z0-9][\w.-]*[a-z0-9]*\.[a-z][a-z.]*[a-z]\Z""",
    re.IGNORECASE | re.ASCII,
)

# Absolute URI: scheme, then an authority or a non-empty path, query and fragment.
URL_PATTERN = re.compile(
    r"\A[a-z][a-z0-9+.\-]*:(//([^\s/?#@]*@)?[^\s/?#]+(/[^\s?#]*)?|(?!//)[^\s?#]+)(\?[^\s#]*)?(#\S*)?\Z",
    re.IGNORECASE,
)

MAX_DOLLAR = 1_000_000_000_000

_TEMPLATES: tuple[RuleTemplate, ...] = (
    RuleTemplate(
        kind=RuleKind.NAME,
        safe_text=True,
        length_bounds=LengthBounds(maximum=63),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.SAFE_TEXT,
        safe_text=True,
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.USERNAME,
        pattern=re.compile(r"\A\w[\w.\-_@]+\Z", re.ASCII),
        pattern_message=FieldMessage("use only letters, numbers, and .-_@ please"),
        length_bounds=LengthBounds.within(5, 127),
        uniqueness_required=True,
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.RAILS_NAME,
        pattern=re.compile(r"\A[a-zA-Z_]*?\Z"),
        pattern_message=FieldMessage("should only include underscores and letters"),
    ),
    RuleTemplate(
        kind=RuleKind.EMAIL,
        pattern=EMAIL_PATTERN,
        pattern_message=FieldMessage("should look like an email address"),
        length_bounds=LengthBounds(maximum=63),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.PHONE_NUMBER,
        numeric_range=NumericRange(
            greater_than_or_equal_to=1_000_000_000,
            less_than=10_000_000_000,
            message="accepts only 10 numbers and (),.- characters and must not be all 0s",
        ),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.PHONE_EXTENSION,
        pattern=re.compile(r"\A\d+([\dxX]*\d)?\Z", re.ASCII),
        pattern_message=FieldMessage('accepts only numbers (0-9) and "x"'),
        length_bounds=LengthBounds(maximum=7),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.DOMAIN,
        # unanchored: any domain-looking substring is accepted
        pattern=re.compile(r"[a-z0-9-]+\.[a-z0-9\-/.]+"),
        pattern_message=FieldMessage("should look like a domain name"),
        length_bounds=LengthBounds(maximum=63),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.ZIPCODE,
        pattern=re.compile(r"\A\d{5}(\d{4})?\Z", re.ASCII),
        pattern_message=FieldMessage("must contain 5 or 9 numbers"),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.MIDDLE_INITIAL,
        pattern=re.compile(r"\A[a-zA-Z]{0,1}\Z"),
        pattern_message=FieldMessage("accepts only one letter"),
    ),
    RuleTemplate(
        kind=RuleKind.DOLLAR,
        decimal=DecimalFormat(signed=True, integer_digits=12, fraction_digits=2),
        pattern_message=FieldMessage("accepts only numeric characters, period, and negative sign"),
        numeric_range=NumericRange(greater_than=-MAX_DOLLAR, less_than=MAX_DOLLAR),
        allow_nil=True,
    ),
    RuleTemplate(
        kind=RuleKind.POSITIVE_DOLLAR,
        decimal=DecimalFormat(signed=False, integer_digits=12, fraction_digits=2),
        pattern_message=FieldMessage("accepts only numeric characters, period"),
        numeric_range=NumericRange(greater_than_or_equal_to=0, less_than=MAX_DOLLAR),
        allow_nil=True,
    ),
    RuleTemplate(
        kind=RuleKind.PERCENT,
        decimal=DecimalFormat(signed=True, integer_digits=4, fraction_digits=4),
        pattern_message=FieldMessage(
            "accepts only numeric characters, period, negative sign, "
            "and must be equal/less/greater than +/- 100"
        ),
        numeric_range=NumericRange(greater_than_or_equal_to=-100, less_than_or_equal_to=100),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.POSITIVE_PERCENT,
        decimal=DecimalFormat(signed=False, integer_digits=4, fraction_digits=4),
        pattern_message=FieldMessage("accepts only numeric characters, period, and must be equal/less than 100"),
        numeric_range=NumericRange(greater_than_or_equal_to=0, less_than_or_equal_to=100),
        allow_nil=True,
    ),
    RuleTemplate(
        kind=RuleKind.COMPARATIVE_PERCENT,
        decimal=DecimalFormat(signed=True, integer_digits=4, fraction_digits=4),
        pattern_message=FieldMessage("accepts only numeric characters, period and a negative sign"),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.POSITIVE_COMPARATIVE_PERCENT,
        decimal=DecimalFormat(signed=False, integer_digits=4, fraction_digits=4),
        pattern_message=FieldMessage("accepts only numeric characters and a period"),
        allow_nil=True,
    ),
    RuleTemplate(
        kind=RuleKind.URL,
        pattern=URL_PATTERN,
        pattern_message=FieldMessage("web address isnt valid"),
        length_bounds=LengthBounds(maximum=255),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.SOCIAL_SECURITY_NUMBER,
        length_bounds=LengthBounds(exact=9),
        numeric_range=NumericRange(
            greater_than_or_equal_to=0,
            less_than=1_000_000_000,
            message="must be in the format 111-11-1111",
        ),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.TAXID,
        length_bounds=LengthBounds(exact=9),
        numeric_range=NumericRange(
            greater_than_or_equal_to=9_999_999,
            less_than=1_000_000_000,
            message="must be in the format 11-1111111",
        ),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.AGE,
        numeric_range=NumericRange(
            greater_than_or_equal_to=0,
            less_than_or_equal_to=110,
            message="must contain only 3 numbers and less than 110",
        ),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.NUMBER,
        numeric_range=NumericRange(message="accepts only numbers (0-9)"),
        conditional_activation=True,
    ),
    RuleTemplate(
        kind=RuleKind.DESCRIPTION,
        safe_text=True,
        length_bounds=LengthBounds(maximum=255),
        conditional_activation=True,
    ),
)

CATALOG: Mapping[RuleKind, RuleTemplate] = MappingProxyType({t.kind: t for t in _TEMPLATES})


def resolve_kind(kind: RuleKind | str) -> RuleKind:
    """Convert a kind name into a RuleKind.

    Raises:
        UnknownRuleKind: If the name is not part of the catalog
    """
    if isinstance(kind, RuleKind):
        return kind
    try:
        return RuleKind(kind)
    except ValueError as e:
        available = ", ".join(k.value for k in CATALOG)
        raise UnknownRuleKind(
            f"Unknown rule kind: {kind!r}. Available kinds: {available}",
            kind=str(kind),
        ) from e


def lookup(kind: RuleKind | str) -> RuleTemplate:
    """Return the template registered for a rule kind.

    Args:
        kind: RuleKind member or its string value (e.g. "email")

    Returns:
        The immutable RuleTemplate for the kind

    Raises:
        UnknownRuleKind: If the kind is not in the catalog

    Example:
        >>> lookup("zipcode").kind
        <RuleKind.ZIPCODE: 'zipcode'>
        >>> lookup("age").numeric_range.less_than_or_equal_to
        110
    """
    return CATALOG[resolve_kind(kind)]


def kinds() -> tuple[RuleKind, ...]:
    """List every catalog kind in table order."""
    return tuple(CATALOG)
