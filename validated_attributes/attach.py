"""Attachment entry point.

Record types opt in explicitly by calling ``has_validated_attributes`` with a
mapping of field name to declaration. Each declaration names the rule kind
under ``format`` and may carry per-field options:

    has_validated_attributes(Customer, {
        "email": {"format": "email"},
        "nickname": {"format": "username", "maximum_length": 32},
        "balance": {"format": "dollar", "precision_length": 4},
    })

Every field is compiled before anything is registered, so a bad declaration
leaves the record type untouched.
"""

import logging
from collections.abc import Mapping
from typing import Any

from validated_attributes.core.compiler import compile_rule
from validated_attributes.core.exceptions import InvalidDeclaration, RuleConfigurationError
from validated_attributes.core.protocols import RecordType
from validated_attributes.core.rules import FieldRuleSpec

logger = logging.getLogger(__name__)

FORMAT_KEY = "format"

USAGE = (
    "Declare the fields to validate, e.g. has_validated_attributes(Record, "
    "{'field_one': {'format': 'phone_number'}, 'field_two': {'format': 'zipcode', 'presence': True}})"
)


def _record_type_name(record_type: Any) -> str:
    return getattr(record_type, "__name__", type(record_type).__name__)


def compile_declarations(
    declarations: Mapping[str, Mapping[str, Any]],
    record_type_name: str | None = None,
) -> tuple[FieldRuleSpec, ...]:
    """Compile a declaration map without registering it anywhere.

    Args:
        declarations: Mapping of field name to ``{"format": kind, **options}``
        record_type_name: Name used in error context

    Returns:
        Compiled specs in declaration order

    Raises:
        InvalidDeclaration: If the map is empty, not a mapping, or a field
            declaration is not a mapping with a ``format`` key
        UnknownRuleKind: If a declaration names an unknown kind
        MalformedOptions: If a declaration carries unsupported options
    """
    if not isinstance(declarations, Mapping) or not declarations:
        raise InvalidDeclaration(
            f"Must define the fields you want to be validated. {USAGE}",
            record_type=record_type_name,
            reason="Declarations empty or not a mapping",
        )

    specs: list[FieldRuleSpec] = []
    for field, declaration in declarations.items():
        if not isinstance(field, str) or not field:
            raise InvalidDeclaration(
                f"Declared field names must be non-empty strings, got: {field!r}",
                record_type=record_type_name,
                reason="Invalid field name",
            )
        if not isinstance(declaration, Mapping) or FORMAT_KEY not in declaration:
            raise InvalidDeclaration(
                f"Declaration for field {field!r} must be a mapping with a '{FORMAT_KEY}' key. {USAGE}",
                record_type=record_type_name,
                field=field,
                reason=f"Missing '{FORMAT_KEY}'",
            )

        options = {key: value for key, value in declaration.items() if key != FORMAT_KEY}
        try:
            specs.append(compile_rule(declaration[FORMAT_KEY], field, options))
        except RuleConfigurationError as e:
            if record_type_name is not None:
                e.context.setdefault("record_type", record_type_name)
            e.context.setdefault("field", field)
            raise

    return tuple(specs)


def has_validated_attributes(
    record_type: RecordType,
    declarations: Mapping[str, Mapping[str, Any]],
) -> tuple[FieldRuleSpec, ...]:
    """Compile declarations and register them against a record type.

    Args:
        record_type: Anything implementing RecordType (a ``register_field_rule``
            callable); usually a ValidatedRecord subclass
        declarations: Mapping of field name to ``{"format": kind, **options}``

    Returns:
        The compiled specs, in the order they were registered

    Raises:
        InvalidDeclaration: If the declarations are unusable or the record
            type cannot accept rules
        UnknownRuleKind: If a declaration names an unknown kind
        MalformedOptions: If a declaration carries unsupported options

    Example:
        >>> from validated_attributes.record import ValidatedRecord
        >>> class Customer(ValidatedRecord):
        ...     pass
        >>> specs = has_validated_attributes(Customer, {"email": {"format": "email"}})
        >>> Customer(email="not-an-email").is_valid()
        False
    """
    name = _record_type_name(record_type)
    if not isinstance(record_type, RecordType):
        raise InvalidDeclaration(
            f"{name} cannot register field rules: it has no 'register_field_rule'",
            record_type=name,
            reason="Record type does not implement RecordType",
        )

    specs = compile_declarations(declarations, record_type_name=name)
    for spec in specs:
        record_type.register_field_rule(spec)

    logger.debug("Attached %d rules to %s: %s", len(specs), name, ", ".join(s.field_name for s in specs))
    return specs


attach = has_validated_attributes
