"""Submissions commands - list and show stored submissions."""

import asyncio
from typing import Optional

import typer

from form_builder.cli._app import app
from form_builder.cli._common import ensure_initialized, setup_logging
from form_builder.cli._console import output_submission, output_table, print_err
from form_builder.errors import SubmissionError
from form_builder.gateways.http import HttpSubmissionGateway
from form_builder.gateways.local import LocalSubmissionGateway
from form_builder.storage import FileSubmissionStore

submissions_app = typer.Typer(
    no_args_is_help=True,
    help="Inspect form submissions.",
)
app.add_typer(submissions_app, name="submissions")


def _gateway(api_url: Optional[str], local: bool):
    settings = ensure_initialized()
    if local:
        return LocalSubmissionGateway(FileSubmissionStore(settings.data_dir))
    return HttpSubmissionGateway(api_url or settings.api_url, timeout=settings.request_timeout)


@submissions_app.command("list", help="List submissions, newest first.")
def submissions_list(
    ctx: typer.Context,
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Backend API root"),
    local: bool = typer.Option(False, "--local", help="Read the local data dir instead of calling the API"),
):
    """List submissions as a table (or JSON with --json)."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    gateway = _gateway(api_url, local)

    async def _list():
        try:
            return await gateway.list_submissions()
        finally:
            if not local:
                await gateway.aclose()

    try:
        submissions = asyncio.run(_list())
    except SubmissionError as e:
        print_err(f"Could not list submissions: {e.message}")
        raise SystemExit(1)

    rows = [
        {
            "id": s.id,
            "formTitle": s.form_title,
            "created_at": s.created_at.isoformat(),
            "fields": len(s.data),
        }
        for s in submissions
    ]
    output_table(rows, ctx=ctx, title="Submissions")


@submissions_app.command("show", help="Show one submission.")
def submissions_show(
    ctx: typer.Context,
    submission_id: int = typer.Argument(..., help="Submission id"),
    api_url: Optional[str] = typer.Option(None, "--api-url", help="Backend API root"),
    local: bool = typer.Option(False, "--local", help="Read the local data dir instead of calling the API"),
):
    """Print a submission's data."""
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])
    gateway = _gateway(api_url, local)

    async def _get():
        try:
            return await gateway.get_submission(submission_id)
        finally:
            if not local:
                await gateway.aclose()

    try:
        submission = asyncio.run(_get())
    except SubmissionError as e:
        print_err(e.message)
        raise SystemExit(1)

    output_submission(submission.to_wire(), ctx=ctx)
