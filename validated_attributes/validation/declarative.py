"""Declarative attribute declarations.

This module loads attribute declarations for one or more record types from
Python dictionaries, YAML files or JSON files, checks their structure, and
compiles them into FieldRuleSpecs.

Example configuration:
    {
        "record_types": {
            "Customer": {
                "email": {"format": "email"},
                "balance": {"format": "dollar", "precision_length": 4},
                "nickname": {"format": "username", "maximum_length": 32}
            }
        }
    }

The same structure in YAML:

    record_types:
      Customer:
        email: {format: email}
        balance: {format: dollar, precision_length: 4}
"""

import json
import logging
from pathlib import Path
from typing import Any

from validated_attributes.attach import FORMAT_KEY, compile_declarations
from validated_attributes.core.catalog import kinds
from validated_attributes.core.compiler import CONDITIONAL_OPTION, LENGTH_OPTIONS, OVERRIDE_OPTIONS, PRECISION_OPTION
from validated_attributes.core.exceptions import InvalidDeclaration, RuleConfigurationError
from validated_attributes.core.rules import FieldRuleSpec
from validated_attributes.validation.exceptions import DeclarationSchemaError

logger = logging.getLogger(__name__)

RECORD_TYPES_KEY = "record_types"


def load_declarations(source: dict[str, Any] | str | Path) -> dict[str, Any]:
    """Load declarations from a dict, or from a YAML or JSON file.

    The structure is checked before being returned. Files ending in
    ``.json`` are parsed as JSON, everything else as YAML.

    Args:
        source: Either a dict containing the declarations, or a string/Path
                pointing to a YAML or JSON file

    Returns:
        Dictionary containing the checked declarations

    Raises:
        DeclarationSchemaError: If the declarations are structurally invalid
        FileNotFoundError: If the file path doesn't exist
        ImportError: If PyYAML is not installed when loading from YAML

    Example:
        >>> config = load_declarations({"record_types": {"Customer": {"email": {"format": "email"}}}})
        >>> list(config["record_types"])
        ['Customer']
    """
    if isinstance(source, dict):
        _validate_declaration_schema(source)
        return source

    path = Path(source) if isinstance(source, str) else source
    if not path.exists():
        msg = f"Declaration file not found: {path}"
        raise FileNotFoundError(msg)

    content = path.read_text()
    if path.suffix == ".json":
        try:
            config = json.loads(content)
        except json.JSONDecodeError as e:
            raise DeclarationSchemaError(f"Invalid JSON in {path}: {e}", reason="Invalid JSON") from e
    else:
        try:
            import yaml
        except ImportError as e:
            msg = (
                "PyYAML is required to load declarations from YAML files. "
                "Install it with: pip install pyyaml"
            )
            raise ImportError(msg) from e
        try:
            config = yaml.safe_load(content)
        except yaml.YAMLError as e:
            raise DeclarationSchemaError(f"Invalid YAML in {path}: {e}", reason="Invalid YAML") from e

    if not isinstance(config, dict):
        msg = f"Declaration file must contain a dictionary, got: {type(config).__name__}"
        raise DeclarationSchemaError(msg, reason="Invalid file structure")

    _validate_declaration_schema(config)
    logger.info("Loaded declarations for %d record types from %s", len(config[RECORD_TYPES_KEY]), path)
    return config


def parse_declarations(config: dict[str, Any]) -> dict[str, tuple[FieldRuleSpec, ...]]:
    """Compile every record type's declarations.

    Args:
        config: Declarations as returned by load_declarations

    Returns:
        Mapping of record type name to its compiled specs

    Raises:
        DeclarationSchemaError: If the structure is invalid or a declaration
            fails to compile (the original error is chained)

    Example:
        >>> specs = parse_declarations({"record_types": {"Customer": {"age": {"format": "age"}}}})
        >>> specs["Customer"][0].field_name
        'age'
    """
    _validate_declaration_schema(config)

    compiled: dict[str, tuple[FieldRuleSpec, ...]] = {}
    for record_type, declarations in config[RECORD_TYPES_KEY].items():
        try:
            compiled[record_type] = compile_declarations(declarations, record_type_name=record_type)
        except (RuleConfigurationError, InvalidDeclaration) as e:
            msg = f"Invalid declaration for record type {record_type!r}: {e.message}"
            raise DeclarationSchemaError(
                msg,
                record_type=record_type,
                field=e.context.get("field"),
                reason=type(e).__name__,
            ) from e
    return compiled


def _validate_declaration_schema(config: dict[str, Any]) -> None:
    """Validate the declaration structure.

    - Must have a "record_types" key with a non-empty dict value
    - Each record type maps non-empty string field names to declaration dicts
    - Each declaration has a string "format" key

    Raises:
        DeclarationSchemaError: If the structure is invalid
    """
    if not isinstance(config, dict):
        msg = f"Declarations must be a dictionary, got: {type(config).__name__}"
        raise DeclarationSchemaError(msg, reason="Invalid declarations type")

    if RECORD_TYPES_KEY not in config:
        msg = f"Declarations must contain '{RECORD_TYPES_KEY}' key"
        raise DeclarationSchemaError(msg, reason="Required key missing")

    record_types = config[RECORD_TYPES_KEY]
    if not isinstance(record_types, dict) or not record_types:
        msg = f"'{RECORD_TYPES_KEY}' must be a non-empty dictionary, got: {record_types!r}"
        raise DeclarationSchemaError(msg, value=record_types, reason="Invalid field type")

    for record_type, fields in record_types.items():
        if not isinstance(fields, dict) or not fields:
            msg = f"Record type {record_type!r} must map field names to declarations"
            raise DeclarationSchemaError(msg, record_type=str(record_type), reason="Invalid record type section")

        for field, declaration in fields.items():
            if not isinstance(field, str) or not field:
                msg = f"Field names of {record_type!r} must be non-empty strings, got: {field!r}"
                raise DeclarationSchemaError(
                    msg, record_type=str(record_type), value=field, reason="Invalid field name"
                )
            if not isinstance(declaration, dict):
                msg = f"Field {field!r} of {record_type!r} must be a dictionary, got: {type(declaration).__name__}"
                raise DeclarationSchemaError(
                    msg, record_type=str(record_type), field=str(field), reason="Invalid declaration type"
                )
            if FORMAT_KEY not in declaration:
                msg = f"Field {field!r} of {record_type!r} must declare a '{FORMAT_KEY}'"
                raise DeclarationSchemaError(
                    msg, record_type=str(record_type), field=str(field), reason="Required key missing"
                )
            if not isinstance(declaration[FORMAT_KEY], str):
                msg = f"'{FORMAT_KEY}' of field {field!r} must be a string"
                raise DeclarationSchemaError(
                    msg,
                    record_type=str(record_type),
                    field=str(field),
                    value=declaration[FORMAT_KEY],
                    reason="Invalid field type",
                )


def get_declaration_schema() -> dict[str, Any]:
    """Export the declaration schema for documentation.

    Returns:
        Dictionary describing the expected structure, with the catalog kinds
        as the ``format`` enum and the supported per-field options
    """
    return {
        "type": "object",
        "required": [RECORD_TYPES_KEY],
        "properties": {
            RECORD_TYPES_KEY: {
                "type": "object",
                "description": "Record type name mapped to its field declarations",
                "additionalProperties": {
                    "type": "object",
                    "description": "Field name mapped to its declaration",
                    "additionalProperties": {
                        "type": "object",
                        "required": [FORMAT_KEY],
                        "properties": {
                            FORMAT_KEY: {
                                "type": "string",
                                "description": "Rule kind",
                                "enum": [kind.value for kind in kinds()],
                            },
                        },
                        "options": [CONDITIONAL_OPTION, "length", PRECISION_OPTION, *LENGTH_OPTIONS, *OVERRIDE_OPTIONS],
                    },
                },
            },
        },
    }
