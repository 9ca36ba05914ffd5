"""Root Typer application for the form-builder command."""

from typing import Optional

import typer

from form_builder import __version__

app = typer.Typer(
    name="form-builder",
    no_args_is_help=True,
    rich_markup_mode="rich",
    pretty_exceptions_enable=False,
    epilog="Schema files are JSON objects with a [bold]title[/bold] and a [bold]fields[/bold] array.",
)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(f"form-builder {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug-level logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Warnings and errors only"),
    json_output: bool = typer.Option(False, "--json", help="Print results as JSON on stdout"),
    version: Optional[bool] = typer.Option(
        None, "--version", callback=_show_version, is_eager=True, help="Show the version and exit"
    ),
):
    """Check and publish form schemas, serve the form API and inspect submissions."""
    if verbose and quiet:
        raise typer.BadParameter("--verbose and --quiet cannot be combined")
    ctx.ensure_object(dict)
    ctx.obj.update(verbose=verbose, quiet=quiet, json=json_output)
