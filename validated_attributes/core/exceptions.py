"""Custom exception classes for validated_attributes error handling.

This module defines the configuration-time exception hierarchy:
- UnknownRuleKind: A declaration names a kind outside the fixed catalog
- MalformedOptions: Per-field options are missing, not a mapping, or unsupported
- InvalidDeclaration: The declaration map handed to the attachment entry point is unusable
- RuleConstructionError: A rule template or compiled rule has no constraint at all

Configuration-time errors indicate a programming error in a record type
definition and are always raised. Bad data is never raised; it is reported to
an error sink by the validation pipeline.

All exceptions inherit from ValidatedAttributesError for consistent error handling.
"""

from typing import Any


class ValidatedAttributesError(Exception):
    """Base exception for all validated_attributes errors.

    Provides a common base class for all custom exceptions in the package,
    enabling catch-all error handling when needed.
    """

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        """Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error description
            context: Optional dictionary of contextual information (field names,
                    rule kinds, option keys, etc.)
        """
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        if not self.context:
            return self.message

        context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"{self.message} [{context_str}]"


class RuleConfigurationError(ValidatedAttributesError):
    """Base class for errors raised while building or compiling rules.

    Context typically includes:
        - kind: Rule kind being compiled
        - field: Field the rule is being compiled for
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        field: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize rule configuration error.

        Args:
            message: Human-readable error description
            kind: Rule kind being compiled
            field: Field the rule is being compiled for
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if kind is not None:
            context["kind"] = kind
        if field is not None:
            context["field"] = field
        context.update(extra_context)

        super().__init__(message, context)


class UnknownRuleKind(RuleConfigurationError):
    """Exception raised when a rule kind is not in the catalog.

    Example:
        >>> raise UnknownRuleKind(
        ...     "Unknown rule kind: 'telephone'",
        ...     kind="telephone",
        ...     available="age, dollar, ..."
        ... )
    """


class MalformedOptions(RuleConfigurationError):
    """Exception raised when per-field options cannot be merged into a template.

    Raised when the options are absent or not a mapping, when an option key is
    not supported, or when an option value has the wrong shape (for example a
    negative ``maximum_length`` or ``precision_length`` on a kind without a
    decimal pattern).

    Context typically includes:
        - option: The offending option key
        - value: The offending value
        - reason: Why the option was rejected
    """

    def __init__(
        self,
        message: str,
        kind: str | None = None,
        field: str | None = None,
        option: str | None = None,
        value: Any = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize malformed options error.

        Args:
            message: Human-readable error description
            kind: Rule kind being compiled
            field: Field the rule is being compiled for
            option: Option key that was rejected
            value: Value that was rejected
            reason: Why the option was rejected
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if option is not None:
            context["option"] = option
        if value is not None:
            context["value"] = value
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, kind=kind, field=field, **context)


class RuleConstructionError(RuleConfigurationError):
    """Exception raised when a rule would carry no constraint at all."""


class InvalidDeclaration(ValidatedAttributesError):
    """Exception raised when a declaration map cannot be attached to a record type.

    Context typically includes:
        - record_type: Name of the record type being declared
        - field: Field whose declaration is invalid
        - reason: Why the declaration was rejected
    """

    def __init__(
        self,
        message: str,
        record_type: str | None = None,
        field: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize invalid declaration error.

        Args:
            message: Human-readable error description
            record_type: Name of the record type being declared
            field: Field whose declaration is invalid
            reason: Why the declaration was rejected
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if record_type is not None:
            context["record_type"] = record_type
        if field is not None:
            context["field"] = field
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)
