"""Execution of compiled field rules.

This module evaluates one FieldRuleSpec against one value and reports every
failure to an error sink. Checks never raise for bad data; a failing value is
reported and the remaining checks still run. Checks run in this order:

1. ``if`` / ``unless`` predicates (the rule is skipped when they say so)
2. ``allow_nil`` / ``allow_blank`` short-circuits
3. presence
4. format (pattern search on the value's string form)
5. length
6. numericality
7. safe text
8. uniqueness

The default messages follow the conventional wording of record-validation
frameworks ("is too long (maximum is 63 characters)", "is not a number", ...).
"""

import math
from collections.abc import Mapping, Sized
from decimal import Decimal, InvalidOperation
from typing import Any

from validated_attributes.core.protocols import ErrorSink, PredicateRecord, UniquenessChecker
from validated_attributes.core.rules import FieldRuleSpec, LengthBounds, NumericRange
from validated_attributes.core.safe_text import NO_CONTROL_CHARS_MESSAGE, contains_unsafe_characters
from validated_attributes.validation.exceptions import ValidatorExecutionError

BLANK_MESSAGE = "can't be blank"
TAKEN_MESSAGE = "has already been taken"
NOT_A_NUMBER_MESSAGE = "is not a number"
NOT_AN_INTEGER_MESSAGE = "must be an integer"

NUMERIC_MESSAGES = {
    "greater_than": "must be greater than {count}",
    "greater_than_or_equal_to": "must be greater than or equal to {count}",
    "less_than": "must be less than {count}",
    "less_than_or_equal_to": "must be less than or equal to {count}",
}

_COMPARISONS = {
    "greater_than": lambda number, bound: number > bound,
    "greater_than_or_equal_to": lambda number, bound: number >= bound,
    "less_than": lambda number, bound: number < bound,
    "less_than_or_equal_to": lambda number, bound: number <= bound,
}


def read_value(record: Any, field: str) -> Any:
    """Read a field from a mapping (frame rows, plain dicts) or an attribute holder."""
    if isinstance(record, Mapping):
        return record.get(field)
    return getattr(record, field, None)


def is_blank(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, Sized):
        return len(value) == 0
    return False


def is_present(value: Any) -> bool:
    """Attribute query semantics: blank values and numeric zero are not present."""
    if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
        return value != 0
    return not is_blank(value)


def evaluate_predicate(record: Any, name: str) -> bool:
    """Evaluate a named predicate such as ``"email?"`` against a record.

    Records implementing PredicateRecord decide for themselves. Otherwise a
    ``"<field>?"`` name checks the presence of that field, and any other name
    is read from the record and called when it is callable.
    """
    if isinstance(record, PredicateRecord):
        return bool(record.evaluate_predicate(name))
    if name.endswith("?"):
        return is_present(read_value(record, name[:-1]))
    predicate = read_value(record, name)
    return bool(predicate() if callable(predicate) else predicate)


def parse_number(value: Any) -> Decimal | None:
    """Parse a value as a finite Decimal, returning None when it is not a number."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        return Decimal(str(value)) if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
        return number if number.is_finite() else None
    return None


def _as_text(value: Any) -> str:
    return "" if value is None else str(value)


def check_length(bounds: LengthBounds, value: Any) -> list[str]:
    """Return length failure messages for a value.

    None passes a maximum-only constraint and fails minimum and exact ones.
    """
    length = len(value) if isinstance(value, (str, list, tuple)) else len(_as_text(value))
    messages = []
    if bounds.exact is not None and (value is None or length != bounds.exact):
        messages.append(f"is the wrong length (should be {bounds.exact} characters)")
    if bounds.minimum is not None and (value is None or length < bounds.minimum):
        messages.append(f"is too short (minimum is {bounds.minimum} characters)")
    if bounds.maximum is not None and length > bounds.maximum:
        messages.append(f"is too long (maximum is {bounds.maximum} characters)")
    return messages


def check_numericality(numeric_range: NumericRange, value: Any) -> list[str]:
    """Return numericality failure messages for a value.

    When the range carries an override message it replaces every failure
    message, and at most one message is returned.
    """
    number = parse_number(value)
    if number is None:
        messages = [NOT_A_NUMBER_MESSAGE]
    elif numeric_range.only_integer and number != number.to_integral_value():
        messages = [NOT_AN_INTEGER_MESSAGE]
    else:
        messages = [
            NUMERIC_MESSAGES[name].format(count=bound)
            for name, bound in numeric_range.bounds()
            if not _COMPARISONS[name](number, Decimal(str(bound)))
        ]

    if messages and numeric_range.message is not None:
        return [numeric_range.message]
    return messages


def run_field_rule(
    spec: FieldRuleSpec,
    value: Any,
    errors: ErrorSink,
    record: Any = None,
    uniqueness_checker: UniquenessChecker | None = None,
) -> bool:
    """Run every check of a compiled rule against a value.

    Args:
        spec: Compiled rule
        value: Current value of ``spec.field_name``
        errors: Sink receiving ``(field, message)`` for every failure
        record: Record the value belongs to; consulted for conditional
            predicates and passed to the uniqueness checker
        uniqueness_checker: Required when ``spec.uniqueness_required`` is set

    Returns:
        True if the rule was enforced, False if a condition or an
        allow_nil/allow_blank option skipped it

    Raises:
        ValidatorExecutionError: If the rule requires uniqueness and no
            checker is available

    Example:
        >>> from validated_attributes.core.compiler import compile_rule
        >>> from validated_attributes.validation.errors import Errors
        >>> errors = Errors()
        >>> spec = compile_rule("age", "age", {})
        >>> run_field_rule(spec, 111, errors, record={"age": 111})
        True
        >>> errors["age"]
        ['must contain only 3 numbers and less than 110']
    """
    field = spec.field_name

    if spec.condition is not None and not evaluate_predicate(record, spec.condition):
        return False
    if spec.unless is not None and evaluate_predicate(record, spec.unless):
        return False
    if value is None and spec.allow_nil:
        return False
    if spec.allow_blank and is_blank(value):
        return False

    if spec.presence and is_blank(value):
        errors.add(field, BLANK_MESSAGE)

    if spec.pattern is not None and not spec.pattern.search(_as_text(value)):
        errors.add(field, spec.pattern_message or f"is invalid for {field}")

    if spec.length_bounds is not None:
        for message in check_length(spec.length_bounds, value):
            errors.add(field, message)

    if spec.numeric_range is not None:
        for message in check_numericality(spec.numeric_range, value):
            errors.add(field, message)

    if spec.safe_text and contains_unsafe_characters(value):
        errors.add(field, f"{NO_CONTROL_CHARS_MESSAGE} for {field}")

    if spec.uniqueness_required:
        if uniqueness_checker is None:
            raise ValidatorExecutionError(
                f"Field {field!r} requires uniqueness but no uniqueness checker is configured",
                field=field,
                kind=spec.kind.value,
                reason="uniqueness_checker is None",
            )
        if not uniqueness_checker(record, field, value):
            errors.add(field, TAKEN_MESSAGE)

    return True
