"""Schemas router - publish, activate and read form schemas."""

from typing import Any

from fastapi import APIRouter, Body

from form_builder.api.dependencies import get_schema_service

router = APIRouter(tags=["schemas"])


@router.get("/api/schemas/active")
def get_active_schema():
    """Return the active form schema (404 if none is active)."""
    return get_schema_service().get_active().to_wire()


@router.get("/api/schemas")
def list_schemas():
    """All schemas, newest first."""
    return [schema.to_wire() for schema in get_schema_service().list_schemas()]


@router.post("/api/schemas", status_code=201)
def create_schema(payload: Any = Body(...)):
    """
    Publish a schema and make it the only active one.

    Body: ``{"title": str, "fields": [...]}``. Returns the stored schema.
    """
    return get_schema_service().publish_payload(payload).to_wire()


@router.put("/api/schemas/{schema_id}/activate")
def activate_schema(schema_id: int):
    """Make an existing schema the active one."""
    return get_schema_service().activate(schema_id).to_wire()
