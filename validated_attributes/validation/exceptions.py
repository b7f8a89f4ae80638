"""Validation-specific exceptions.

This module defines the exceptions raised while running compiled rules or
loading declarations from configuration files. Data that fails a rule is
never raised; it is reported to an error sink. These exceptions signal
programming or configuration errors.

All exceptions extend from ValidatedAttributesError for consistent error handling.
"""

from typing import Any

from validated_attributes.core.exceptions import ValidatedAttributesError


class ValidatorError(ValidatedAttributesError):
    """Base exception for errors raised while executing rules.

    Context typically includes:
        - field: Field whose rule was being executed
        - kind: Rule kind of that rule
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        kind: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize validator error with rule details.

        Args:
            message: Human-readable error description
            field: Field whose rule was being executed
            kind: Rule kind of that rule
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if field is not None:
            context["field"] = field
        if kind is not None:
            context["kind"] = kind
        context.update(extra_context)

        super().__init__(message, context)


class ValidatorExecutionError(ValidatorError):
    """Exception raised when a rule cannot be executed at all.

    This is distinct from a validation failure (which is reported to the
    error sink). It is raised, for example, when a uniqueness rule runs
    without a uniqueness checker being configured.

    Example:
        >>> raise ValidatorExecutionError(
        ...     "No uniqueness checker configured for 'username'",
        ...     field="username",
        ...     kind="username",
        ...     reason="uniqueness_checker is None"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        kind: str | None = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        context: dict[str, Any] = {}
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, field=field, kind=kind, **context)


class DeclarationSchemaError(ValidatedAttributesError):
    """Exception raised when a declaration file or mapping is structurally invalid.

    Context typically includes:
        - record_type: Record type section containing the problem
        - field: Declared field that is invalid
        - value: Invalid value provided
        - reason: Why the declaration is invalid

    Example:
        >>> raise DeclarationSchemaError(
        ...     "Field 'email' of 'Customer' must declare a 'format'",
        ...     record_type="Customer",
        ...     field="email",
        ...     reason="Required key missing"
        ... )
    """

    def __init__(
        self,
        message: str,
        record_type: str | None = None,
        field: str | None = None,
        value: Any = None,
        reason: str | None = None,
        **extra_context: Any,
    ) -> None:
        """Initialize declaration schema error.

        Args:
            message: Human-readable error description
            record_type: Record type section containing the problem
            field: Declared field that is invalid
            value: Invalid value provided
            reason: Why the declaration is invalid
            **extra_context: Additional context information
        """
        context: dict[str, Any] = {}
        if record_type is not None:
            context["record_type"] = record_type
        if field is not None:
            context["field"] = field
        if value is not None:
            context["value"] = value
        if reason is not None:
            context["reason"] = reason
        context.update(extra_context)

        super().__init__(message, context)
