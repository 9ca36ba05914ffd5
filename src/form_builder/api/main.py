"""
FastAPI backend for the form builder.

Provides endpoints for:
- Publishing, listing and activating form schemas
- Uploading a schema as a JSON file
- Creating and reading submissions

File-based storage (no database).

Data structure:
  {data_dir}/
    schemas/registry.json
    submissions/submissions.json
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from form_builder.api import dependencies
from form_builder.api.routers import schemas, submissions, system, upload
from form_builder.config import FormBuilderSettings

logger = logging.getLogger(__name__)


def create_app(settings: Optional[FormBuilderSettings] = None) -> FastAPI:
    """Build the API app.

    Args:
        settings: Explicit settings; defaults to the environment (.env aware).
    """
    if settings is not None:
        dependencies.configure(settings)
    settings = dependencies.get_settings()

    app = FastAPI(
        title="Form Builder API",
        description="Schema-driven form definitions and submissions",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(system.router)
    app.include_router(schemas.router)
    app.include_router(submissions.router)
    app.include_router(upload.router)

    logger.info(f"Form builder API using data dir {settings.data_dir}")
    return app


app = create_app()
