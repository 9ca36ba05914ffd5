"""Upload service for schema files."""

import logging
from typing import Optional

from fastapi import HTTPException, UploadFile

from form_builder.config import DEFAULT_MAX_UPLOAD_BYTES
from form_builder.errors import SchemaPublishError
from form_builder.schemas.form_schema import StoredSchema, parse_form_schema_json
from form_builder.schemas.upload import check_upload_metadata
from form_builder.api.services.schemas import SchemaService

logger = logging.getLogger(__name__)


class UploadService:
    """Validates uploaded schema files and publishes them."""

    def __init__(self, schema_service: SchemaService, max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES):
        """
        Args:
            schema_service: Service used to store and activate the schema.
            max_upload_bytes: Size limit for the uploaded file.
        """
        self.schema_service = schema_service
        self.max_upload_bytes = max_upload_bytes

    async def publish_schema_file(self, file: Optional[UploadFile]) -> StoredSchema:
        """
        Validate an uploaded schema file and make it the active schema.

        Raises HTTPException(400) if no file was sent, the content type is not
        JSON, the file is empty or too large, or the schema is invalid.
        """
        if file is None:
            raise HTTPException(status_code=400, detail="No file uploaded")

        # one byte past the limit is enough to reject
        content = await file.read(self.max_upload_bytes + 1)
        size = max(file.size or 0, len(content))
        try:
            check_upload_metadata(file.content_type, size, self.max_upload_bytes)
            schema = parse_form_schema_json(content)
        except SchemaPublishError as e:
            logger.info(f"Rejected schema upload '{file.filename}': {e.message}")
            raise HTTPException(status_code=400, detail=e.message)

        return self.schema_service.publish(schema)
