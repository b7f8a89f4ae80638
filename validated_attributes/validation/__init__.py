"""Rule execution and reporting for validated attributes.

This package runs compiled field rules against records and DataFrames,
collects failures per field, and aggregates them into reports. Declarations
can also be loaded from YAML or JSON files.
"""

# Rule execution
from validated_attributes.validation.checks import evaluate_predicate, run_field_rule

# Declarative configuration
from validated_attributes.validation.declarative import (
    get_declaration_schema,
    load_declarations,
    parse_declarations,
)

# Error collection
from validated_attributes.validation.errors import Errors

# Exceptions
from validated_attributes.validation.exceptions import (
    DeclarationSchemaError,
    ValidatorError,
    ValidatorExecutionError,
)

# DataFrame validation
from validated_attributes.validation.frame import FrameValidator

# Record validation
from validated_attributes.validation.pipeline import RecordValidator, validate_records

# Reporting
from validated_attributes.validation.report import ValidationReport, create_report
from validated_attributes.validation.result import ValidationResult

__all__ = [
    # Rule execution
    "run_field_rule",
    "evaluate_predicate",
    "Errors",
    # Record and DataFrame validation
    "RecordValidator",
    "validate_records",
    "FrameValidator",
    # Reporting
    "ValidationResult",
    "ValidationReport",
    "create_report",
    # Declarative configuration
    "load_declarations",
    "parse_declarations",
    "get_declaration_schema",
    # Exceptions
    "ValidatorError",
    "ValidatorExecutionError",
    "DeclarationSchemaError",
]
