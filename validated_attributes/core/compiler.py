"""Rule compiler.

This module turns a catalog template plus caller-supplied per-field options
into a FieldRuleSpec. Compilation runs in a fixed order, because later steps
consult state produced by earlier ones:

1. Look up the template for the kind (UnknownRuleKind if absent)
2. Conditional activation: ``"<field>?"`` when the template asks for it,
   or when the caller passes ``has_if``
3. Length-family options (any key containing "length"):
   - ``precision_length`` rewrites the fractional-digit segment of the
     template's decimal pattern instead of constraining length
   - every other key becomes a length bound (``maximum_length`` -> maximum),
     and caller bounds replace the template's bounds
4. Remaining options are raw overrides where the caller wins
5. A fresh, frozen FieldRuleSpec is returned

The catalog template is never mutated; every step copies and overrides.

Example:
    >>> spec = compile_rule("dollar", "price", {"precision_length": 4})
    >>> bool(spec.pattern.search("12.3456"))
    True
    >>> bool(spec.pattern.search("12.34567"))
    False
"""

import logging
import re
from collections.abc import Mapping
from dataclasses import fields, replace
from decimal import Decimal
from typing import Any

from validated_attributes.core.catalog import lookup
from validated_attributes.core.exceptions import MalformedOptions, RuleConstructionError
from validated_attributes.core.rules import (
    FieldRuleSpec,
    LengthBounds,
    NumericRange,
    RuleKind,
    RuleTemplate,
)

logger = logging.getLogger(__name__)

PRECISION_OPTION = "precision_length"
CONDITIONAL_OPTION = "has_if"

# "<sub_key>_length" options and the LengthBounds field they set
LENGTH_OPTIONS: dict[str, str] = {
    "minimum_length": "minimum",
    "maximum_length": "maximum",
    "exact_length": "exact",
    "is_length": "exact",
    "within_length": "within",
}

# keys accepted inside a ``length`` mapping
LENGTH_MAPPING_KEYS: dict[str, str] = {
    "minimum": "minimum",
    "maximum": "maximum",
    "exact": "exact",
    "is": "exact",
    "within": "within",
}

OVERRIDE_OPTIONS = (
    "allow_nil",
    "allow_blank",
    "presence",
    "required",
    "uniqueness",
    "if",
    "unless",
    "message",
    "numericality",
    "format",
)

_NUMERIC_RANGE_FIELDS = frozenset(f.name for f in fields(NumericRange))


def compile_rule(
    kind: RuleKind | str,
    field_name: str,
    options: Mapping[str, Any],
) -> FieldRuleSpec:
    """Compile a catalog template into a rule for one field.

    Args:
        kind: Catalog kind (RuleKind or its string value)
        field_name: Attribute the rule is compiled for; used in messages and
            in the conditional predicate name
        options: Per-field options. Length-family keys, ``has_if`` and the raw
            overrides listed in OVERRIDE_OPTIONS are supported.

    Returns:
        A new FieldRuleSpec

    Raises:
        MalformedOptions: If options is not a mapping (checked before anything
            else) or holds an unsupported key or value
        UnknownRuleKind: If kind is not in the catalog
        RuleConstructionError: If the overrides strip every constraint

    Example:
        >>> spec = compile_rule("email", "contact_email", {"maximum_length": 10})
        >>> spec.length_bounds
        LengthBounds(exact=None, minimum=None, maximum=10)
        >>> spec.condition
        'contact_email?'
    """
    if options is None or not isinstance(options, Mapping):
        raise MalformedOptions(
            f"Options for field {field_name!r} must be a mapping, got: {type(options).__name__}",
            kind=str(getattr(kind, "value", kind)),
            field=field_name if isinstance(field_name, str) else None,
            reason="Options missing or not a mapping",
        )
    if not isinstance(field_name, str) or not field_name:
        raise MalformedOptions(
            f"Field name must be a non-empty string, got: {field_name!r}",
            kind=str(getattr(kind, "value", kind)),
            reason="Invalid field name",
        )

    template = lookup(kind)
    remaining = dict(options)
    for key in remaining:
        if not isinstance(key, str):
            raise MalformedOptions(
                f"Option keys must be strings, got: {key!r}",
                kind=template.kind.value,
                field=field_name,
                option=repr(key),
                reason="Invalid option key",
            )

    condition = _conditional_activation(template, field_name, remaining)
    pattern, length_bounds = _apply_length_options(template, field_name, remaining)

    spec = FieldRuleSpec(
        field_name=field_name,
        kind=template.kind,
        pattern=pattern,
        pattern_message=template.pattern_message(field_name) if template.pattern_message else None,
        length_bounds=length_bounds,
        numeric_range=template.numeric_range,
        uniqueness_required=template.uniqueness_required,
        safe_text=template.safe_text,
        condition=condition,
        allow_nil=template.allow_nil,
    )
    spec = _apply_overrides(spec, remaining)

    if not spec.has_constraints():
        raise RuleConstructionError(
            f"Options for field {field_name!r} leave the {template.kind.value!r} rule without any constraint",
            kind=template.kind.value,
            field=field_name,
        )

    logger.debug("Compiled %s rule for field %s: %s", template.kind.value, field_name, spec.to_dict())
    return spec


def _conditional_activation(template: RuleTemplate, field_name: str, remaining: dict[str, Any]) -> str | None:
    conditional = template.conditional_activation
    if CONDITIONAL_OPTION in remaining:
        flag = remaining.pop(CONDITIONAL_OPTION)
        if not isinstance(flag, bool):
            raise MalformedOptions(
                f"'{CONDITIONAL_OPTION}' must be a boolean, got: {flag!r}",
                kind=template.kind.value,
                field=field_name,
                option=CONDITIONAL_OPTION,
                value=flag,
                reason="Invalid option type",
            )
        conditional = flag
    return f"{field_name}?" if conditional else None


def _apply_length_options(
    template: RuleTemplate,
    field_name: str,
    remaining: dict[str, Any],
) -> tuple[re.Pattern[str] | None, LengthBounds | None]:
    """Consume every length-family key and return the resulting pattern and bounds."""
    pattern = template.pattern
    length_keys = [key for key in remaining if "length" in key]
    if not length_keys:
        return pattern, template.length_bounds

    caller_bounds: dict[str, int] = {}
    for key in length_keys:
        value = remaining.pop(key)
        if key == PRECISION_OPTION:
            pattern = _rewrite_precision(template, field_name, value)
        elif key == "length":
            caller_bounds.update(_length_mapping(template, field_name, value))
        elif key in LENGTH_OPTIONS:
            caller_bounds.update(_expand_bound(template, field_name, key, LENGTH_OPTIONS[key], value))
        else:
            available = ", ".join(["length", PRECISION_OPTION, *LENGTH_OPTIONS])
            raise MalformedOptions(
                f"Unknown length option {key!r}. Available: {available}",
                kind=template.kind.value,
                field=field_name,
                option=key,
                value=value,
                reason="Unsupported length option",
            )

    if not caller_bounds:
        return pattern, template.length_bounds

    try:
        return pattern, LengthBounds(**caller_bounds)
    except ValueError as e:
        raise MalformedOptions(
            f"Invalid length options for field {field_name!r}: {e}",
            kind=template.kind.value,
            field=field_name,
            value=caller_bounds,
            reason=str(e),
        ) from e


def _rewrite_precision(template: RuleTemplate, field_name: str, value: Any) -> re.Pattern[str]:
    if template.decimal is None:
        raise MalformedOptions(
            f"'{PRECISION_OPTION}' only applies to decimal kinds, not {template.kind.value!r}",
            kind=template.kind.value,
            field=field_name,
            option=PRECISION_OPTION,
            value=value,
            reason="Kind has no decimal pattern",
        )
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedOptions(
            f"'{PRECISION_OPTION}' must be a non-negative integer, got: {value!r}",
            kind=template.kind.value,
            field=field_name,
            option=PRECISION_OPTION,
            value=value,
            reason="Invalid option value",
        )
    return replace(template.decimal, fraction_digits=value).compile()


def _length_mapping(template: RuleTemplate, field_name: str, value: Any) -> dict[str, int]:
    # a bare integer means an exact length
    if isinstance(value, int) and not isinstance(value, bool):
        return {"exact": value}
    if not isinstance(value, Mapping):
        raise MalformedOptions(
            f"'length' must be an integer or a mapping, got: {type(value).__name__}",
            kind=template.kind.value,
            field=field_name,
            option="length",
            value=value,
            reason="Invalid option type",
        )

    bounds: dict[str, int] = {}
    for sub_key, bound in value.items():
        if sub_key not in LENGTH_MAPPING_KEYS:
            raise MalformedOptions(
                f"Unknown key {sub_key!r} in 'length'. Available: {', '.join(LENGTH_MAPPING_KEYS)}",
                kind=template.kind.value,
                field=field_name,
                option="length",
                value=dict(value),
                reason="Unsupported length bound",
            )
        bounds.update(_expand_bound(template, field_name, "length", LENGTH_MAPPING_KEYS[sub_key], bound))
    return bounds


def _expand_bound(
    template: RuleTemplate,
    field_name: str,
    option: str,
    sub_key: str,
    value: Any,
) -> dict[str, int]:
    if sub_key != "within":
        return {sub_key: value}

    if isinstance(value, range):
        if value.step != 1 or len(value) == 0:
            raise MalformedOptions(
                f"'{option}' range must be non-empty with step 1, got: {value!r}",
                kind=template.kind.value,
                field=field_name,
                option=option,
                value=value,
                reason="Invalid range",
            )
        return {"minimum": value.start, "maximum": value.stop - 1}
    if isinstance(value, (list, tuple)) and len(value) == 2:
        low, high = value
        return {"minimum": low, "maximum": high}
    raise MalformedOptions(
        f"'{option}' must be a (minimum, maximum) pair or a range, got: {value!r}",
        kind=template.kind.value,
        field=field_name,
        option=option,
        value=value,
        reason="Invalid option value",
    )


def _invalid_override(spec: FieldRuleSpec, key: str, value: Any, expected: str) -> MalformedOptions:
    return MalformedOptions(
        f"Option {key!r} for field {spec.field_name!r} must be {expected}, got: {value!r}",
        kind=spec.kind.value,
        field=spec.field_name,
        option=key,
        value=value,
        reason="Invalid option value",
    )


def _apply_overrides(spec: FieldRuleSpec, remaining: dict[str, Any]) -> FieldRuleSpec:
    """Merge raw caller overrides into the compiled spec (caller wins)."""
    changes: dict[str, Any] = {}

    for key, value in remaining.items():
        if key in ("allow_nil", "allow_blank", "presence", "required", "uniqueness"):
            if not isinstance(value, bool):
                raise _invalid_override(spec, key, value, "a boolean")
            target = {"required": "presence", "uniqueness": "uniqueness_required"}.get(key, key)
            changes[target] = value
        elif key in ("if", "unless", "message"):
            if not isinstance(value, str) or not value:
                raise _invalid_override(spec, key, value, "a non-empty string")
            target = {"if": "condition", "message": "pattern_message"}.get(key, key)
            changes[target] = value
        elif key == "numericality":
            changes["numeric_range"] = _numericality_override(spec, value)
        elif key == "format":
            if not isinstance(value, str):
                raise _invalid_override(spec, key, value, "a regular expression string")
            try:
                changes["pattern"] = re.compile(value)
            except re.error as e:
                raise _invalid_override(spec, key, value, f"a valid regular expression ({e})") from e
            if spec.pattern_message is None and "message" not in remaining:
                changes["pattern_message"] = f"is invalid for {spec.field_name}"
        else:
            available = ", ".join((CONDITIONAL_OPTION, "length", PRECISION_OPTION, *LENGTH_OPTIONS, *OVERRIDE_OPTIONS))
            raise MalformedOptions(
                f"Unknown option {key!r} for field {spec.field_name!r}. Available: {available}",
                kind=spec.kind.value,
                field=spec.field_name,
                option=key,
                value=value,
                reason="Unsupported option",
            )

    return replace(spec, **changes) if changes else spec


def _numericality_override(spec: FieldRuleSpec, value: Any) -> NumericRange | None:
    if value is True:
        return spec.numeric_range or NumericRange()
    if value is False:
        return None
    if not isinstance(value, Mapping):
        raise _invalid_override(spec, "numericality", value, "a boolean or a mapping")

    for sub_key, sub_value in value.items():
        if sub_key not in _NUMERIC_RANGE_FIELDS:
            raise _invalid_override(
                spec, "numericality", dict(value), f"a mapping with keys from {sorted(_NUMERIC_RANGE_FIELDS)}"
            )
        if sub_key == "only_integer":
            valid = isinstance(sub_value, bool)
        elif sub_key == "message":
            valid = sub_value is None or isinstance(sub_value, str)
        else:
            valid = sub_value is None or (
                isinstance(sub_value, (int, float, Decimal)) and not isinstance(sub_value, bool)
            )
        if not valid:
            expected = {"only_integer": "a boolean", "message": "a string"}.get(sub_key, "a number")
            raise _invalid_override(spec, f"numericality.{sub_key}", sub_value, expected)
    return replace(spec.numeric_range or NumericRange(), **value)
