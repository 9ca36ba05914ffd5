"""Serve command - run the form API with uvicorn."""

import logging
import os
from pathlib import Path
from typing import Optional

import typer

from form_builder.cli._app import app
from form_builder.cli._common import ensure_initialized, setup_logging
from form_builder.cli._console import console

logger = logging.getLogger(__name__)


@app.command("serve", help="Run the form API (schemas, submissions, uploads).")
def serve_cmd(
    ctx: typer.Context,
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Bind port"),
    data_dir: Optional[Path] = typer.Option(None, "--data-dir", help="Store directory (overrides FORM_BUILDER_DATA_DIR)"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on code changes"),
):
    """Start uvicorn on form_builder.api.main:app."""
    if data_dir is not None:
        # read by the app's settings in this process and reloader children
        os.environ["FORM_BUILDER_DATA_DIR"] = str(data_dir)
    settings = ensure_initialized()
    setup_logging(verbose=ctx.obj["verbose"], quiet=ctx.obj["quiet"])

    import uvicorn

    console.print(f"Serving form API on http://{host}:{port}/api (data: {data_dir or settings.data_dir})")
    uvicorn.run(
        "form_builder.api.main:app",
        host=host,
        port=port,
        reload=reload,
        log_level="debug" if ctx.obj["verbose"] else "info",
    )
