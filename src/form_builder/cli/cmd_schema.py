"""Schema commands - check a schema file locally and publish it."""

import asyncio
import json
from pathlib import Path
from typing import Dict, Optional

import typer

from form_builder.cli._app import app
from form_builder.cli._common import ensure_initialized, setup_logging
from form_builder.cli._console import (
    console,
    output_result,
    output_table,
    print_err,
    print_field_errors,
    print_ok,
    print_warn,
)
from form_builder.errors import FormValidationError, SchemaLoadError, SchemaPublishError
from form_builder.gateways.http import HttpSchemaGateway
from form_builder.gateways.local import LocalSchemaGateway
from form_builder.runtime.schema_loader import load_schema
from form_builder.storage import FileSchemaStore
from form_builder.validation import ValidationRuleset, compile_ruleset

schema_app = typer.Typer(
    no_args_is_help=True,
    help="Check and publish form schemas.",
)
app.add_typer(schema_app, name="schema")


@schema_app.command("check", help="Parse a schema file and show the compiled rules.")
def schema_check(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Schema JSON file"),
    data: Optional[Path] = typer.Option(None, "--data", help="JSON object of field values to validate against the schema"),
):
    """Validate a schema file without publishing it, optionally dry-running a submission."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        schema = load_schema(file)
    except SchemaLoadError as e:
        print_err(e.message)
        raise SystemExit(1)

    ruleset = compile_ruleset(schema.fields)
    rows = [
        {
            "name": field.name,
            "type": field.type,
            "required": field.required,
            "checks": ", ".join(check.code for check in ruleset.rules[field.name].checks) or "-",
        }
        for field in schema.fields
    ]
    value_errors = _dry_run(ruleset, data) if data is not None else {}

    if ctx.obj["json"]:
        output_result(
            {
                "title": schema.title,
                "fields": rows,
                "skipped_checks": dict(ruleset.skipped_checks),
                "value_errors": value_errors,
            },
            ctx=ctx,
        )
        if value_errors:
            raise SystemExit(1)
        return

    output_table(rows, ctx=ctx, title=schema.title, columns=["name", "type", "required", "checks"])
    for name, reason in ruleset.skipped_checks.items():
        print_warn(f"Custom validation for '{name}' skipped: {reason}")
    print_ok(f"Schema '{schema.title}' is valid ({len(schema.fields)} fields)")

    if data is None:
        return
    if value_errors:
        print_field_errors(value_errors)
        raise SystemExit(1)
    print_ok(f"Values pass all {len(schema.fields)} field rules")


def _dry_run(ruleset: ValidationRuleset, data: Path) -> Dict[str, str]:
    """Validate a JSON object of field values; returns field -> message."""
    try:
        values = json.loads(data.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print_err(f"Cannot read values from {data}: {e}")
        raise SystemExit(1)
    if not isinstance(values, dict):
        print_err("Values file must contain a JSON object")
        raise SystemExit(1)

    try:
        asyncio.run(ruleset.validate_all(values)).raise_if_invalid()
    except FormValidationError as e:
        return e.errors
    return {}


@schema_app.command("publish", help="Publish a schema file and make it the active form.")
def schema_publish(
    ctx: typer.Context,
    file: Path = typer.Argument(..., help="Schema JSON file"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Backend API root (default: FORM_BUILDER_API_URL)"),
    local: bool = typer.Option(False, "--local", help="Write to the local data dir instead of calling the API"),
):
    """Publish through the HTTP API, or straight into the file store with --local."""
    settings = ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    try:
        content = file.read_bytes()
    except OSError as e:
        print_err(f"Cannot read {file}: {e}")
        raise SystemExit(1)

    async def _publish():
        if local:
            gateway = LocalSchemaGateway(FileSchemaStore(settings.data_dir), settings.max_upload_bytes)
            return await gateway.publish_schema_file(content, "application/json", file.name)
        async with HttpSchemaGateway(api_url or settings.api_url, timeout=settings.request_timeout) as gateway:
            return await gateway.publish_schema_file(content, "application/json", file.name)

    try:
        published = asyncio.run(_publish())
    except SchemaPublishError as e:
        print_err(f"Publish failed: {e.message}")
        raise SystemExit(1)

    if ctx.obj["json"]:
        output_result({"id": published.id, "title": published.title}, ctx=ctx)
        return
    print_ok(f"Published schema {published.id} '{published.title}' (now active)")
    if local:
        console.print(f"  Store: {settings.data_dir}")
