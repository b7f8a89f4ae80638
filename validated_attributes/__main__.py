"""CLI entry point for validated_attributes.

Enables invocation via `python -m validated_attributes`.
"""

import sys

from validated_attributes.cli.app import app

if __name__ == "__main__":
    exit_code = app()
    sys.exit(exit_code if exit_code is not None else 0)
