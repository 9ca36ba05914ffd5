"""Schema service: publish, activate and read form schemas."""

import logging
from typing import Any, List

from fastapi import HTTPException

from form_builder.errors import SchemaPublishError
from form_builder.schemas.form_schema import FormSchema, StoredSchema, parse_form_schema
from form_builder.storage.protocol import SchemaStore

logger = logging.getLogger(__name__)


class SchemaService:
    """Service for form schema endpoints."""

    def __init__(self, store: SchemaStore):
        self.store = store

    def get_active(self) -> StoredSchema:
        try:
            schema = self.store.get_active()
        except (OSError, ValueError) as e:
            logger.error(f"Error fetching active schema: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error fetching active schema")
        if schema is None:
            raise HTTPException(status_code=404, detail="No active form schema found")
        return schema

    def list_schemas(self) -> List[StoredSchema]:
        try:
            return self.store.list_schemas()
        except (OSError, ValueError) as e:
            logger.error(f"Error fetching schemas: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error fetching schemas")

    def publish_payload(self, payload: Any) -> StoredSchema:
        """Validate a decoded JSON body and publish it as the active schema."""
        try:
            schema = parse_form_schema(payload)
        except SchemaPublishError as e:
            raise HTTPException(status_code=400, detail=e.message)
        return self.publish(schema)

    def publish(self, schema: FormSchema) -> StoredSchema:
        try:
            return self.store.create(schema, activate=True)
        except OSError as e:
            logger.error(f"Error creating schema: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error creating schema")

    def activate(self, schema_id: int) -> StoredSchema:
        try:
            schema = self.store.activate(schema_id)
        except OSError as e:
            logger.error(f"Error activating schema {schema_id}: {e}", exc_info=True)
            raise HTTPException(status_code=500, detail="Error activating schema")
        if schema is None:
            raise HTTPException(status_code=404, detail=f"Schema not found: {schema_id}")
        return schema
