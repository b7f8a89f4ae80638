"""Output formatting for CLI operations."""

import sys
import traceback


def handle_error(error: Exception, verbose: bool = False) -> None:
    """Format and display error message with context.

    Displays error messages to stderr with the context fields carried by
    ValidatedAttributesError exceptions. When verbose mode is enabled, also
    displays the full stack trace.

    Args:
        error: Exception to display
        verbose: Whether to show stack trace (default False)
    """
    message = getattr(error, "message", None) or str(error)
    print(f"Error: {message}", file=sys.stderr)

    if hasattr(error, "context") and error.context:
        print("Context:", file=sys.stderr)
        for key, value in error.context.items():
            print(f"  {key}: {value}", file=sys.stderr)

    if verbose:
        print("\nStack trace:", file=sys.stderr)
        traceback.print_exc(file=sys.stderr)
