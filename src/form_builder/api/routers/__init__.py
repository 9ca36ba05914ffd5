"""API routers, one per resource."""

from form_builder.api.routers import schemas, submissions, system, upload

__all__ = ["schemas", "submissions", "system", "upload"]
