"""CLI package - Typer-based command-line interface.

Usage:
    form-builder --help
    form-builder schema check my_form.json
"""

from form_builder.cli._app import app

# Register command modules (side-effect imports)
import form_builder.cli.cmd_serve  # noqa: F401
import form_builder.cli.cmd_schema  # noqa: F401
import form_builder.cli.cmd_submissions  # noqa: F401

__all__ = ["app"]
