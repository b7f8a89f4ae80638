"""CLI command implementations.

This module implements the CLI commands:
- list_kinds: List the rule kinds of the catalog
- show_rule: Show the rule compiled for a kind and options
- check: Check one value against a rule
- check_config: Validate a declaration file
- validate_file: Validate a data file against declarations

Each command is implemented as a function that returns an exit code,
enabling both direct invocation and subprocess-based testing.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Annotated, Any

import polars as pl
import yaml
from cyclopts import Parameter

from validated_attributes.cli.exit_codes import ExitCode
from validated_attributes.cli.output import handle_error
from validated_attributes.core.catalog import kinds, lookup
from validated_attributes.core.compiler import compile_rule
from validated_attributes.core.exceptions import InvalidDeclaration, RuleConfigurationError
from validated_attributes.core.rules import RuleTemplate
from validated_attributes.validation.declarative import RECORD_TYPES_KEY, load_declarations, parse_declarations
from validated_attributes.validation.exceptions import DeclarationSchemaError, ValidatorExecutionError
from validated_attributes.validation.frame import FrameValidator
from validated_attributes.validation.pipeline import RecordValidator

logger = logging.getLogger(__name__)

LOG_LEVELS = ("debug", "info", "warning", "error")


def configure_logging(log_level: str) -> None:
    """Configure root logging for a CLI run.

    Raises:
        ValueError: If the level is not one of LOG_LEVELS
    """
    if log_level.lower() not in LOG_LEVELS:
        msg = f"Invalid log level '{log_level}'. Choose one of: {', '.join(LOG_LEVELS)}"
        raise ValueError(msg)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def parse_options(items: list[str] | None) -> dict[str, Any]:
    """Parse ``key=value`` option strings.

    Values are read as YAML scalars or flow collections, so ``4`` becomes an
    int, ``true`` a bool and ``[2, 5]`` a list.

    Raises:
        ValueError: If an item has no ``=`` or an empty key

    Example:
        >>> parse_options(["precision_length=4", "allow_nil=true"])
        {'precision_length': 4, 'allow_nil': True}
    """
    options: dict[str, Any] = {}
    for item in items or []:
        key, sep, raw = item.partition("=")
        if not sep or not key.strip():
            msg = f"Options must look like key=value, got: '{item}'"
            raise ValueError(msg)
        try:
            options[key.strip()] = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            msg = f"Cannot parse value of option '{key.strip()}': {raw}"
            raise ValueError(msg) from e
    return options


def describe_template(template: RuleTemplate) -> str:
    """One-line summary of the constraints behind a catalog kind."""
    parts = []
    if template.pattern is not None:
        parts.append("format")
    if template.length_bounds is not None:
        bounds = ", ".join(f"{key}={value}" for key, value in template.length_bounds.to_dict().items())
        parts.append(f"length({bounds})")
    if template.numeric_range is not None:
        bounds = ", ".join(f"{name}={bound}" for name, bound in template.numeric_range.bounds())
        parts.append(f"numericality({bounds})" if bounds else "numericality")
    if template.uniqueness_required:
        parts.append("unique")
    if template.safe_text:
        parts.append("safe text")
    if template.conditional_activation:
        parts.append("only when present")
    if template.allow_nil:
        parts.append("allows nil")
    return ", ".join(parts)


def list_kinds() -> int:
    """List the rule kinds of the catalog with their constraints.

    Returns:
        Exit code (always 0 for success)
    """
    print("Available rule kinds:")
    for kind in kinds():
        print(f"  {kind.value:32} {describe_template(lookup(kind))}")
    return ExitCode.SUCCESS


def show_rule(
    kind: Annotated[str, Parameter(help="Rule kind (see list-kinds)")],
    field: Annotated[str, Parameter(help="Field name the rule is compiled for")] = "value",
    option: Annotated[list[str] | None, Parameter(help="Rule option as key=value (repeatable)")] = None,
) -> int:
    """Show the rule compiled for a kind and per-field options.

    Returns:
        Exit code (0 for success, 6 for unknown kinds or bad options)

    Example:
        >>> from validated_attributes.cli.commands import show_rule
        >>> exit_code = show_rule("dollar", field="balance", option=["precision_length=4"])
    """
    try:
        spec = compile_rule(kind, field, parse_options(option))
    except (RuleConfigurationError, ValueError) as e:
        handle_error(e)
        return ExitCode.CONFIG_ERROR

    print(json.dumps(spec.to_dict(), indent=2, default=str))
    return ExitCode.SUCCESS


def check(
    kind: Annotated[str, Parameter(help="Rule kind (see list-kinds)")],
    value: Annotated[str, Parameter(help="Value to check")],
    field: Annotated[str, Parameter(help="Field name used in messages")] = "value",
    option: Annotated[list[str] | None, Parameter(help="Rule option as key=value (repeatable)")] = None,
) -> int:
    """Check one value against a rule.

    Returns:
        Exit code (0 if the value passes, 2 if it fails, 6 for rule errors)

    Example:
        >>> from validated_attributes.cli.commands import check
        >>> exit_code = check("zipcode", "12345")
    """
    try:
        spec = compile_rule(kind, field, parse_options(option))
        result = RecordValidator([spec], name=field).validate({field: value})
    except (RuleConfigurationError, ValidatorExecutionError, ValueError) as e:
        handle_error(e)
        return ExitCode.CONFIG_ERROR

    if result.is_valid:
        skipped = field in result.metadata.get("skipped_fields", [])
        note = " (rule skipped)" if skipped else ""
        print(f"✓ '{value}' is a valid {spec.kind.value}{note}")
        return ExitCode.SUCCESS

    print(f"✗ '{value}' is not a valid {spec.kind.value}:", file=sys.stderr)
    for message in result.errors:
        print(f"  - {message}", file=sys.stderr)
    return ExitCode.VALIDATION_ERROR


def check_config(
    config_path: Annotated[Path, Parameter(help="Declaration file path (YAML or JSON)")],
) -> int:
    """Validate a declaration file.

    Loads the file, checks its structure and compiles every declaration.

    Returns:
        Exit code (0 for valid declarations, 6 for invalid ones)

    Example:
        >>> from pathlib import Path
        >>> from validated_attributes.cli.commands import check_config
        >>> exit_code = check_config(config_path=Path("declarations.yaml"))
    """
    try:
        compiled = parse_declarations(load_declarations(config_path))
    except (DeclarationSchemaError, FileNotFoundError) as e:
        print("✗ Declaration validation failed:", file=sys.stderr)
        handle_error(e)
        return ExitCode.CONFIG_ERROR
    except Exception as e:
        handle_error(e, verbose=False)
        return ExitCode.UNEXPECTED_ERROR

    print("✓ Declarations are valid")
    for record_type, specs in compiled.items():
        fields = ", ".join(f"{spec.field_name} ({spec.kind.value})" for spec in specs)
        print(f"  {record_type}: {fields}")
    return ExitCode.SUCCESS


def read_frame(path: Path) -> pl.DataFrame:
    """Read a data file into a DataFrame based on its extension.

    CSV columns are read as strings so that values such as zip codes keep
    their leading zeros.

    Raises:
        ValueError: If the extension is not recognized
    """
    suffix = path.suffix.lower()
    if suffix == ".csv":
        return pl.read_csv(path, infer_schema_length=0)
    if suffix == ".json":
        return pl.read_json(path)
    if suffix in (".parquet", ".pq"):
        return pl.read_parquet(path)
    msg = f"Cannot read data file with extension '{suffix}'. Use .csv, .json or .parquet."
    raise ValueError(msg)


def validate_file(
    data_path: Annotated[Path, Parameter(help="Data file path (CSV, JSON or Parquet)")],
    config: Annotated[Path, Parameter(help="Declaration file path (YAML or JSON)")],
    record: Annotated[str | None, Parameter(help="Record type to validate against")] = None,
    json_output: Annotated[bool, Parameter(name="--json", help="Print the report as JSON")] = False,
    failures_only: Annotated[bool, Parameter(help="Only show failing columns")] = False,
    verbose: Annotated[bool, Parameter(help="Show detailed error information")] = False,
    log_level: Annotated[str, Parameter(help="Log level (debug, info, warning, error)")] = "warning",
) -> int:
    """Validate every row of a data file against a record type's declarations.

    Returns:
        Exit code (0 if every row passes, 2 on failures, 6 for declaration
        errors, 1 for unexpected errors)

    Example:
        >>> from pathlib import Path
        >>> from validated_attributes.cli.commands import validate_file
        >>> exit_code = validate_file(Path("customers.csv"), config=Path("declarations.yaml"))
    """
    try:
        configure_logging(log_level)
        declarations = load_declarations(config)[RECORD_TYPES_KEY]

        if record is None:
            if len(declarations) != 1:
                print(
                    f"Error: {config} declares several record types; choose one with --record "
                    f"({', '.join(declarations)})",
                    file=sys.stderr,
                )
                return ExitCode.CONFIG_ERROR
            record = next(iter(declarations))
        elif record not in declarations:
            print(f"Error: Record type '{record}' is not declared in {config}", file=sys.stderr)
            return ExitCode.CONFIG_ERROR

        validator = FrameValidator(declarations[record], name=record)
    except (DeclarationSchemaError, RuleConfigurationError, InvalidDeclaration, FileNotFoundError, ValueError) as e:
        handle_error(e, verbose=verbose)
        return ExitCode.CONFIG_ERROR

    try:
        if not data_path.exists():
            print(f"Error: Data file not found: {data_path}", file=sys.stderr)
            return ExitCode.UNEXPECTED_ERROR
        report = validator.validate(read_frame(data_path))
    except Exception as e:
        handle_error(e, verbose=verbose)
        return ExitCode.UNEXPECTED_ERROR

    if json_output:
        print(json.dumps(report.to_json(), indent=2, default=str))
    else:
        print(report.format(failures_only=failures_only))

    return ExitCode.SUCCESS if report.is_valid() else ExitCode.VALIDATION_ERROR
