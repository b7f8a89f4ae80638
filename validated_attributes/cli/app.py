"""Cyclopts application and command routing for the validated-attributes CLI.

The CLI provides the following commands:
- list-kinds: List the rule kinds of the catalog
- show-rule: Show the rule compiled for a kind and options
- check: Check one value against a rule
- check-config: Validate a declaration file
- validate-file: Validate a CSV, JSON or Parquet file against declarations
"""

from cyclopts import App

from validated_attributes.cli import commands

app = App(
    name="validated-attributes",
    help="Declarative attribute validation rules",
    version="0.1.0",
)

app.command(commands.list_kinds, name="list-kinds")
app.command(commands.show_rule, name="show-rule")
app.command(commands.check)
app.command(commands.check_config, name="check-config")
app.command(commands.validate_file, name="validate-file")
