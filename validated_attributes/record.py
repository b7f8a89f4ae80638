"""Reference record base class.

ValidatedRecord is a minimal record abstraction implementing the collaborator
protocols: it accepts compiled rules, answers conditional predicates, delegates
uniqueness to a configurable checker and collects errors per instance.

Example:
    >>> class Customer(ValidatedRecord):
    ...     pass
    >>> Customer.has_validated_attributes({
    ...     "email": {"format": "email"},
    ...     "zip": {"format": "zipcode"},
    ... })  # doctest: +ELLIPSIS
    (...)
    >>> customer = Customer(email="jane@example.com", zip="123")
    >>> customer.is_valid()
    False
    >>> customer.errors["zip"]
    ['must contain 5 or 9 numbers for zip']
"""

from collections.abc import Mapping
from typing import Any, ClassVar

from validated_attributes.attach import has_validated_attributes
from validated_attributes.core.exceptions import InvalidDeclaration
from validated_attributes.core.protocols import UniquenessChecker
from validated_attributes.core.rules import FieldRuleSpec
from validated_attributes.validation.checks import is_present
from validated_attributes.validation.errors import Errors
from validated_attributes.validation.pipeline import RecordValidator
from validated_attributes.validation.result import ValidationResult


class ValidatedRecord:
    """Base class for records validated by compiled field rules.

    Rules are stored per class as an immutable tuple. Registering on a
    subclass rebinds the subclass's own tuple, so record types never share
    registrations; a subclass starts from a copy of its parent's rules.

    Conditional rules named ``"<field>?"`` call a ``<field>_predicate()``
    method when the class defines one, and otherwise check that the field
    is present.
    """

    uniqueness_checker: ClassVar[UniquenessChecker | None] = None
    _field_rules: ClassVar[tuple[FieldRuleSpec, ...]] = ()

    def __init__(self, **attributes: Any) -> None:
        for name, value in attributes.items():
            setattr(self, name, value)
        self._errors = Errors()

    def __getattr__(self, name: str) -> Any:
        # declared but unset fields read as None
        if any(spec.field_name == name for spec in type(self)._field_rules):
            return None
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @classmethod
    def register_field_rule(cls, spec: FieldRuleSpec) -> None:
        if cls is ValidatedRecord:
            raise InvalidDeclaration(
                "Rules must be registered on a ValidatedRecord subclass",
                record_type=cls.__name__,
                field=spec.field_name,
                reason="Base class cannot hold rules",
            )
        cls._field_rules = (*cls._field_rules, spec)

    @classmethod
    def field_rules(cls) -> tuple[FieldRuleSpec, ...]:
        return cls._field_rules

    @classmethod
    def has_validated_attributes(
        cls, declarations: Mapping[str, Mapping[str, Any]]
    ) -> tuple[FieldRuleSpec, ...]:
        """Declare validated attributes for this record type."""
        return has_validated_attributes(cls, declarations)

    def evaluate_predicate(self, name: str) -> bool:
        field = name[:-1] if name.endswith("?") else name
        hook = getattr(type(self), f"{field}_predicate", None)
        if callable(hook):
            return bool(hook(self))
        if name.endswith("?"):
            return is_present(getattr(self, field, None))
        attribute = getattr(self, name, None)
        return bool(attribute() if callable(attribute) else attribute)

    def validate(self) -> ValidationResult:
        """Run every registered rule and refresh ``errors``."""
        self._errors = Errors()
        validator = RecordValidator(
            type(self).field_rules(),
            uniqueness_checker=type(self).uniqueness_checker,
            name=type(self).__name__,
        )
        return validator.validate(self, errors=self._errors)

    def is_valid(self) -> bool:
        return self.validate().is_valid

    @property
    def errors(self) -> Errors:
        return self._errors
