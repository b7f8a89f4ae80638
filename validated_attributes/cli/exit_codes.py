"""Exit code constants for CLI commands.

Exit codes:
    0: SUCCESS - Operation completed successfully
    1: UNEXPECTED_ERROR - Unexpected/unhandled exception
    2: VALIDATION_ERROR - A value, record or file failed its rules
    6: CONFIG_ERROR - Declaration file, rule kind or option error
"""


class ExitCode:
    """Standard exit codes for CLI commands.

    Example:
        >>> from validated_attributes.cli.exit_codes import ExitCode
        >>> ExitCode.VALIDATION_ERROR
        2
    """

    SUCCESS = 0
    """Operation completed successfully."""

    UNEXPECTED_ERROR = 1
    """Unexpected or unhandled exception occurred."""

    VALIDATION_ERROR = 2
    """Validated data broke at least one rule."""

    CONFIG_ERROR = 6
    """Declaration, rule kind or option error."""
