"""Protocol definitions for the validation-pipeline collaborators.

The rule catalog and compiler only produce FieldRuleSpecs. Running them is the
job of the record abstraction the specs are attached to. These protocols
describe what that abstraction must provide:

Protocols:
    - RecordType: Accepts compiled rules at declaration time
    - ErrorSink: Collects field-scoped failure messages at validation time
    - PredicateRecord: Answers named boolean predicates for conditional rules
    - UniquenessChecker: Looks a value up across persisted records

The package ships reference implementations (ValidatedRecord, Errors) but any
object satisfying these protocols can be used instead.
"""

from typing import Any, Protocol, runtime_checkable

from validated_attributes.core.rules import FieldRuleSpec


@runtime_checkable
class RecordType(Protocol):
    """Record type that accepts compiled field rules.

    Example:
        >>> class Customer:
        ...     rules: list = []
        ...
        ...     @classmethod
        ...     def register_field_rule(cls, spec: FieldRuleSpec) -> None:
        ...         cls.rules.append(spec)
    """

    def register_field_rule(self, spec: FieldRuleSpec) -> None:
        """Register a check that runs on every validation pass of ``spec.field_name``."""
        ...


class ErrorSink(Protocol):
    """Destination for validation failures."""

    def add(self, field: str, message: str) -> None:
        ...


@runtime_checkable
class PredicateRecord(Protocol):
    """Record that evaluates named predicates such as ``"email?"``."""

    def evaluate_predicate(self, name: str) -> bool:
        ...


class UniquenessChecker(Protocol):
    """Callable deciding whether a value is unique for a field.

    Implementations query the backing store and must ignore the record itself
    when it is already persisted.
    """

    def __call__(self, record: Any, field: str, value: Any) -> bool:
        ...
